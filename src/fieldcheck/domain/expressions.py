"""Rule expression grammar: ``name`` or ``name:opt1,opt2,...``.

Options quirk (kept on purpose, built-ins depend on it): when a colon is
present, option[0] holds the raw unsplit remainder and option[1:] hold the
individually split values.

Examples:
    >>> parse_rule("max:255").options
    ('255', '255')
    >>> parse_rule("between:5, 10").options
    ('5, 10', '5', '10')
    >>> parse_rule("required").options
    ()
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fieldcheck.domain.types import RuleKind
from fieldcheck.errors import InvalidExpression, InvalidRuleType

EXPRESSION_PATTERN = re.compile(r"^([^:]+):?(.*)$", re.DOTALL)
OPTION_SEPARATOR = re.compile(r",\s*")


@dataclass(frozen=True)
class RuleDescriptor:
    """Parsed representation of a single rule token.

    Attributes:
        kind: Which resolution path applies.
        target: Rule name for ``NAMED``, the class for ``CUSTOM_CLASS``,
            the function for ``INLINE_CALLBACK``.
        options: Ordered option strings (empty unless a named expression
            contained a colon).
        raw_expression: The original string token, or ``""`` for handles.
        message: Override message used when this rule fails.
    """

    kind: RuleKind
    target: Any
    options: tuple[str, ...] = ()
    raw_expression: str = ""
    message: str | None = None

    @property
    def name(self) -> str:
        """Display name: the rule identifier or the handle's qualified name."""
        if self.kind is RuleKind.NAMED:
            return str(self.target)
        return getattr(self.target, "__qualname__", type(self.target).__name__)


def parse_expression(expression: str, *, message: str | None = None) -> RuleDescriptor:
    """Parse a ``name[:options]`` string into a NAMED descriptor."""
    match = EXPRESSION_PATTERN.match(expression)
    if match is None or not match.group(1).strip():
        raise InvalidExpression(
            "Invalid rule expression specified",
            detail={"expression": expression},
        )
    name = match.group(1).strip()
    remainder = match.group(2)
    options: tuple[str, ...] = ()
    trimmed = remainder.strip()
    if trimmed:
        options = (remainder, *OPTION_SEPARATOR.split(trimmed))
    return RuleDescriptor(
        kind=RuleKind.NAMED,
        target=name,
        options=options,
        raw_expression=expression,
        message=message,
    )


def parse_rule(token: str | Callable[..., Any], *, message: str | None = None) -> RuleDescriptor:
    """Parse one rule token (string, rule class, or callback) into a descriptor."""
    if isinstance(token, str):
        return parse_expression(token, message=message)
    if isinstance(token, type):
        return RuleDescriptor(kind=RuleKind.CUSTOM_CLASS, target=token, message=message)
    if callable(token):
        return RuleDescriptor(kind=RuleKind.INLINE_CALLBACK, target=token, message=message)
    raise InvalidRuleType(
        "Invalid rule type specified",
        detail={"type": type(token).__name__},
    )


def parse_rules(tokens: Any, *, message: str | None = None) -> list[RuleDescriptor]:
    """Parse a token or a (possibly nested) list/tuple of tokens, preserving order."""
    if isinstance(tokens, (list, tuple)):
        descriptors: list[RuleDescriptor] = []
        for token in tokens:
            descriptors.extend(parse_rules(token, message=message))
        return descriptors
    return [parse_rule(tokens, message=message)]
