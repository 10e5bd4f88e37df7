"""Built-in rule predicates and their static lookup table.

Each predicate has the rule signature ``(fields, key, options, fail)``
and calls ``fail()`` without a message; the evaluating condition fills in
the ``<prefix>.<rule-name>`` default.

Options follow the expression quirk from
:mod:`fieldcheck.domain.expressions`: option[0] is the raw remainder,
option[1:] the split values. ``regex`` reads option[0]; comparison
rules read from option[1].
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timedelta
from typing import Any

from fieldcheck.rules.base import FailCallback, RuleCallable

ALPHA_PATTERN = re.compile(r"[a-zA-Z]+")
ALPHANUM_PATTERN = re.compile(r"[a-zA-Z0-9]+")
NUM_PATTERN = re.compile(r"[0-9]+")
SLUG_PATTERN = re.compile(r"[a-z_-]+")
EMAIL_PATTERN = re.compile(
    r"[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*"
)
NUMERIC_STRING_PATTERN = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*")
DELIMITED_PATTERN = re.compile(r"^([/#~!@%|+])(.*)\1([a-zA-Z]*)$", re.DOTALL)

REGEX_FLAGS: dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "u": re.UNICODE,
}

DATE_KEYWORDS: dict[str, int] = {
    "yesterday": -1,
    "today": 0,
    "tomorrow": 1,
}


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------


def is_numeric(value: Any) -> bool:
    """Numbers (not bools) and decimal/exponent numeric strings."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and NUMERIC_STRING_PATTERN.fullmatch(value) is not None


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple, dict))


def to_number(value: Any) -> int | float | None:
    """Numbers as they are; numeric strings as int when possible, else float.

    Ints are never forced through float, so huge values neither overflow
    nor lose precision.
    """
    if not is_numeric(value):
        return None
    if not isinstance(value, str):
        return value
    try:
        return int(value)
    except ValueError:
        return float(value)


def measure(value: Any) -> int | float | None:
    """Numeric value, string length, or element count; None for other types."""
    if is_numeric(value):
        return to_number(value)
    if isinstance(value, str) or is_array(value):
        return len(value)
    return None


def loose_equals(left: Any, right: Any) -> bool:
    """Coercive equality: numeric strings match numbers, None matches empties."""
    if left is None or right is None:
        return not left and not right
    if is_numeric(left) and is_numeric(right):
        return to_number(left) == to_number(right)
    return bool(left == right)


def parse_time(value: Any) -> datetime | None:
    """Parse an ISO-8601 date/datetime or a relative keyword."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip().lower()
    now = datetime.now()
    if text == "now":
        return now
    if text in DATE_KEYWORDS:
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return midnight + timedelta(days=DATE_KEYWORDS[text])
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None


def compile_pattern(pattern: str) -> re.Pattern[str] | None:
    """Compile a bare or ``/delimited/flags`` pattern; None if invalid."""
    flags = 0
    body = pattern
    match = DELIMITED_PATTERN.match(pattern)
    if match is not None and all(f in REGEX_FLAGS for f in match.group(3)):
        body = match.group(2)
        for letter in match.group(3):
            flags |= REGEX_FLAGS[letter]
    try:
        return re.compile(body, flags)
    except re.error:
        return None


def _as_text(value: Any) -> str | None:
    if isinstance(value, bool) or not value:
        return None
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


def _option(options: Sequence[str], index: int) -> str | None:
    return options[index] if len(options) > index else None


def _threshold(options: Sequence[str], index: int) -> int | float | None:
    raw = _option(options, index)
    if raw is None:
        return 0
    return to_number(raw)


def _pattern_rule(pattern: re.Pattern[str]) -> RuleCallable:
    def rule(
        fields: Mapping[str, Any], key: str, options: Sequence[str], fail: FailCallback
    ) -> None:
        text = _as_text(fields.get(key))
        if text is None or pattern.fullmatch(text) is None:
            fail()

    return rule


def _size_rule(compare: Callable[[int | float, int | float], bool]) -> RuleCallable:
    def rule(
        fields: Mapping[str, Any], key: str, options: Sequence[str], fail: FailCallback
    ) -> None:
        size = measure(fields.get(key))
        limit = _threshold(options, 1)
        if size is None or limit is None or not compare(size, limit):
            fail()

    return rule


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def validate_required(
    fields: Mapping[str, Any], key: str, options: Sequence[str], fail: FailCallback
) -> None:
    value = fields.get(key)
    if not value or value == "0":
        fail()


validate_alpha = _pattern_rule(ALPHA_PATTERN)
validate_alphanum = _pattern_rule(ALPHANUM_PATTERN)
validate_num = _pattern_rule(NUM_PATTERN)
validate_slug = _pattern_rule(SLUG_PATTERN)
validate_email = _pattern_rule(EMAIL_PATTERN)


def validate_regex(
    fields: Mapping[str, Any], key: str, options: Sequence[str], fail: FailCallback
) -> None:
    text = _as_text(fields.get(key))
    raw = _option(options, 0)
    pattern = compile_pattern(raw) if raw else None
    if text is None or pattern is None or pattern.search(text) is None:
        fail()


def validate_same(
    fields: Mapping[str, Any], key: str, options: Sequence[str], fail: FailCallback
) -> None:
    other = _option(options, 1)
    if not loose_equals(fields.get(key), fields.get(other) if other else None):
        fail()


def validate_different(
    fields: Mapping[str, Any], key: str, options: Sequence[str], fail: FailCallback
) -> None:
    other = _option(options, 1)
    if loose_equals(fields.get(key), fields.get(other) if other else None):
        fail()


def _compare_times(
    fields: Mapping[str, Any], key: str, options: Sequence[str]
) -> float | None:
    """Seconds from the limit to the field's time (field defaults to now)."""
    value = fields.get(key)
    time = parse_time(value) if value else datetime.now()
    raw_limit = _option(options, 1)
    limit = parse_time(raw_limit) if raw_limit else None
    if time is None or limit is None:
        return None
    return time.timestamp() - limit.timestamp()


def validate_after(
    fields: Mapping[str, Any], key: str, options: Sequence[str], fail: FailCallback
) -> None:
    delta = _compare_times(fields, key, options)
    if delta is None or delta <= 0:
        fail()


def validate_before(
    fields: Mapping[str, Any], key: str, options: Sequence[str], fail: FailCallback
) -> None:
    delta = _compare_times(fields, key, options)
    if delta is None or delta >= 0:
        fail()


def validate_between(
    fields: Mapping[str, Any], key: str, options: Sequence[str], fail: FailCallback
) -> None:
    size = measure(fields.get(key))
    low = _threshold(options, 1)
    high = _threshold(options, 2)
    if size is None or low is None or high is None or not low <= size <= high:
        fail()


validate_min = _size_rule(lambda size, limit: size >= limit)
validate_max = _size_rule(lambda size, limit: size <= limit)
validate_size = _size_rule(lambda size, limit: size == limit)


def validate_array(
    fields: Mapping[str, Any], key: str, options: Sequence[str], fail: FailCallback
) -> None:
    if not is_array(fields.get(key)):
        fail()


def validate_numeric(
    fields: Mapping[str, Any], key: str, options: Sequence[str], fail: FailCallback
) -> None:
    if not is_numeric(fields.get(key)):
        fail()


def validate_string(
    fields: Mapping[str, Any], key: str, options: Sequence[str], fail: FailCallback
) -> None:
    if not isinstance(fields.get(key), str):
        fail()


# ---------------------------------------------------------------------------
# Lookup table
# ---------------------------------------------------------------------------

BUILTIN_RULES: dict[str, RuleCallable] = {
    "required": validate_required,
    "alpha": validate_alpha,
    "alphanum": validate_alphanum,
    "num": validate_num,
    "slug": validate_slug,
    "regex": validate_regex,
    "email": validate_email,
    "same": validate_same,
    "different": validate_different,
    "after": validate_after,
    "before": validate_before,
    "between": validate_between,
    "min": validate_min,
    "max": validate_max,
    "size": validate_size,
    "array": validate_array,
    "numeric": validate_numeric,
    "string": validate_string,
}


def normalize_rule_name(name: str) -> str:
    """Fold case and separators so ``alpha_num`` and ``aLPhAnum`` match ``alphanum``.

    Examples:
        >>> normalize_rule_name("Alpha-Num")
        'alphanum'
    """
    return re.sub(r"[\s_-]+", "", name).lower()


def find_builtin(name: str) -> tuple[str, RuleCallable] | None:
    """Return ``(canonical_name, predicate)`` for a built-in rule, or None."""
    canonical = normalize_rule_name(name)
    rule = BUILTIN_RULES.get(canonical)
    if rule is None:
        return None
    return canonical, rule
