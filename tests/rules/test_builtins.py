"""Tests for the built-in rule predicates."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any

import pytest

from fieldcheck.domain.expressions import parse_expression
from fieldcheck.rules.base import FailureCapture
from fieldcheck.rules.builtins import (
    BUILTIN_RULES,
    compile_pattern,
    find_builtin,
    is_numeric,
    loose_equals,
    measure,
    normalize_rule_name,
    parse_time,
)


def passes(expression: str, fields: Mapping[str, Any], key: str = "test") -> bool:
    """Evaluate one built-in expression against *fields* directly."""
    descriptor = parse_expression(expression)
    found = find_builtin(descriptor.name)
    assert found is not None
    _, rule = found
    capture = FailureCapture()
    rule(fields, key, descriptor.options, capture)
    return not capture.failed


class TestLookup:
    def test_all_builtins_present(self) -> None:
        assert set(BUILTIN_RULES) == {
            "required",
            "alpha",
            "alphanum",
            "num",
            "slug",
            "regex",
            "email",
            "same",
            "different",
            "after",
            "before",
            "between",
            "min",
            "max",
            "size",
            "array",
            "numeric",
            "string",
        }

    def test_case_and_separator_insensitive(self) -> None:
        assert normalize_rule_name("aLPhAnum") == "alphanum"
        assert normalize_rule_name("alpha_num") == "alphanum"
        assert normalize_rule_name("Alpha-Num") == "alphanum"

    def test_find_returns_canonical_name(self) -> None:
        found = find_builtin("ALPHA")
        assert found is not None
        assert found[0] == "alpha"

    def test_unknown_name(self) -> None:
        assert find_builtin("crispy") is None


class TestRequired:
    @pytest.mark.parametrize("value", ["foo", 1, ["x"], True, "00", " 0"])
    def test_present(self, value: Any) -> None:
        assert passes("required", {"test": value})

    @pytest.mark.parametrize("value", [None, "", "0", 0, 0.0, False, [], {}])
    def test_empty(self, value: Any) -> None:
        assert not passes("required", {"test": value})

    def test_absent(self) -> None:
        assert not passes("required", {})


class TestPatternRules:
    @pytest.mark.parametrize("value", ["test", "Test", "TEST"])
    def test_alpha_valid(self, value: str) -> None:
        assert passes("alpha", {"test": value})

    @pytest.mark.parametrize("value", ["test123", "", None, "two words"])
    def test_alpha_invalid(self, value: Any) -> None:
        assert not passes("alpha", {"test": value})

    def test_alphanum(self) -> None:
        assert passes("alphanum", {"test": "test123"})
        assert not passes("alphanum", {"test": "test123!"})

    def test_num(self) -> None:
        assert passes("num", {"test": "123"})
        assert passes("num", {"test": 123})
        assert not passes("num", {"test": "test"})
        assert not passes("num", {"test": "-1"})

    def test_slug(self) -> None:
        assert passes("slug", {"test": "valid-slug"})
        assert passes("slug", {"test": "valid_slug"})
        assert not passes("slug", {"test": "non valid slug"})
        assert not passes("slug", {"test": "Upper-Case"})

    def test_non_scalar_value_fails(self) -> None:
        assert not passes("alpha", {"test": ["abc"]})

    @pytest.mark.parametrize("value", ["test@example.com", "another.test@example.com"])
    def test_email_valid(self, value: str) -> None:
        assert passes("email", {"test": value})

    @pytest.mark.parametrize("value", ["not an email", "missing@", "@example.com", ""])
    def test_email_invalid(self, value: str) -> None:
        assert not passes("email", {"test": value})


class TestRegex:
    def test_delimited_pattern_with_flags(self) -> None:
        rule = "regex:/[a-z0-9]{32}/i"
        assert passes(rule, {"test": "0bc4a2771a9bd8d23053cbe022f21ea2"})
        assert passes(rule, {"test": "0BC4A2771A9BD8D23053CBE022F21EA2"})
        assert not passes(rule, {"test": "non matching"})

    def test_bare_pattern(self) -> None:
        assert passes(r"regex:^\d{3}-\d{4}$", {"test": "555-1234"})
        assert not passes(r"regex:^\d{3}-\d{4}$", {"test": "5551234"})

    def test_pattern_with_commas_uses_raw_remainder(self) -> None:
        assert passes("regex:^a{1,3}$", {"test": "aa"})
        assert not passes("regex:^a{1,3}$", {"test": "aaaa"})

    def test_missing_pattern(self) -> None:
        assert not passes("regex", {"test": "anything"})

    def test_invalid_pattern(self) -> None:
        assert not passes("regex:(unclosed", {"test": "unclosed"})

    def test_compile_pattern_flags(self) -> None:
        pattern = compile_pattern("#^abc$#im")
        assert pattern is not None
        assert pattern.search("x\nABC")


class TestSameDifferent:
    def test_same(self) -> None:
        assert passes("same:other", {"test": "FooBarBaz!", "other": "FooBarBaz!"})
        assert not passes("same:other", {"test": "FooBarBaz!", "other": "fOObARbAZ!"})

    def test_different(self) -> None:
        assert passes("different:other", {"test": "FooBarBaz!", "other": "fOObARbAZ!"})
        assert not passes("different:other", {"test": "FooBarBaz!", "other": "FooBarBaz!"})

    def test_loose_equality(self) -> None:
        assert passes("same:other", {"test": "1", "other": 1})
        assert passes("same:other", {"test": "1.0", "other": 1})
        assert passes("same:other", {"test": None, "other": ""})
        assert passes("same:other", {})

    def test_loose_equals_helper(self) -> None:
        assert loose_equals(None, 0)
        assert not loose_equals(None, "0")
        assert not loose_equals("abc", "ABC")

    def test_huge_ints_compare_exactly(self) -> None:
        assert passes("same:other", {"test": 10**400, "other": 10**400})
        assert not passes("different:other", {"test": 10**400, "other": 10**400})
        assert passes("different:other", {"test": 2**53, "other": 2**53 + 1})
        assert not passes("same:other", {"test": 2**53, "other": 2**53 + 1})

    def test_numeric_string_matches_huge_int(self) -> None:
        assert passes("same:other", {"test": str(2**64), "other": 2**64})
        assert passes("same:other", {"test": "2.5", "other": 2.5})


class TestDates:
    def test_after(self) -> None:
        assert passes("after:1986-03-26", {"test": "1987-01-01"})
        assert passes("after:1986-03-26", {"test": "1991-01-01"})
        assert not passes("after:1986-03-26", {"test": "1912-04-14"})

    def test_before(self) -> None:
        assert passes("before:1986-03-26", {"test": "1985-07-19"})
        assert passes("before:1986-03-26", {"test": "1912-04-14"})
        assert not passes("before:1986-03-26", {"test": "1991-01-01"})

    def test_equal_time_is_neither(self) -> None:
        assert not passes("after:2000-01-01", {"test": "2000-01-01"})
        assert not passes("before:2000-01-01", {"test": "2000-01-01"})

    def test_absent_value_defaults_to_now(self) -> None:
        assert passes("after:2000-01-01", {})
        assert passes("before:tomorrow", {})
        assert not passes("after:tomorrow", {})

    def test_unparseable_fails(self) -> None:
        assert not passes("after:2000-01-01", {"test": "not a date"})
        assert not passes("after:someday", {"test": "2020-01-01"})

    def test_missing_limit_fails(self) -> None:
        assert not passes("after", {"test": "2020-01-01"})

    def test_parse_time_keywords(self) -> None:
        today = parse_time("today")
        assert today is not None
        assert parse_time("tomorrow") == today + timedelta(days=1)
        assert parse_time("yesterday") == today - timedelta(days=1)
        assert isinstance(parse_time("now"), datetime)
        assert parse_time(42) is None


class TestSizeRules:
    @pytest.mark.parametrize("value", [6, "Contosso", [1, 2, 3, 4, 5, 6]])
    def test_between_accepts(self, value: Any) -> None:
        assert passes("between:5,10", {"test": value})

    @pytest.mark.parametrize(
        "value",
        [12, "Lorem ipsum dolor sit amet", [1, 2, 3], object(), None],
    )
    def test_between_rejects(self, value: Any) -> None:
        assert not passes("between:5,10", {"test": value})

    def test_min(self) -> None:
        assert passes("min:3", {"test": 6})
        assert passes("min:3", {"test": "Contosso"})
        assert passes("min:3", {"test": [1, 2, 3]})
        assert not passes("min:3", {"test": 2})
        assert not passes("min:3", {"test": "No"})
        assert not passes("min:3", {"test": [1, 2]})
        assert not passes("min:3", {"test": object()})

    def test_max(self) -> None:
        assert passes("max:5", {"test": 3})
        assert passes("max:5", {"test": "Yes"})
        assert passes("max:5", {"test": [1, 2, 3, 4]})
        assert not passes("max:5", {"test": 6})
        assert not passes("max:5", {"test": "Lorem ipsum"})
        assert not passes("max:5", {"test": [1, 2, 3, 4, 5, 6]})
        assert not passes("max:5", {"test": object()})

    def test_size(self) -> None:
        assert passes("size:3", {"test": 3})
        assert passes("size:3", {"test": "Yes"})
        assert passes("size:3", {"test": [1, 2, 3]})
        assert not passes("size:3", {"test": 6})
        assert not passes("size:3", {"test": "Lorem ipsum"})
        assert not passes("size:3", {"test": object()})

    def test_numeric_string_compares_as_number(self) -> None:
        assert not passes("max:5", {"test": "12345"})
        assert passes("max:5", {"test": "4"})

    def test_dict_counts_entries(self) -> None:
        assert passes("size:2", {"test": {"a": 1, "b": 2}})

    def test_non_numeric_threshold_fails(self) -> None:
        assert not passes("min:abc", {"test": 5})

    def test_measure(self) -> None:
        assert measure(7) == 7
        assert measure("abc") == 3
        assert measure((1, 2)) == 2
        assert measure(None) is None

    def test_measure_keeps_ints_exact(self) -> None:
        assert measure(10**400) == 10**400
        assert measure("12345678901234567891") == 12345678901234567891
        assert measure("6.5") == 6.5

    def test_huge_ints_do_not_overflow(self) -> None:
        assert not passes("between:5,10", {"test": 10**400})
        assert passes("min:3", {"test": 10**400})
        assert not passes("max:5", {"test": 10**400})
        assert not passes("size:3", {"test": 10**400})

    def test_huge_numeric_string_threshold(self) -> None:
        assert passes("max:100000000000000000001", {"test": 100000000000000000000})
        assert not passes("max:100000000000000000000", {"test": 100000000000000000001})


class TestTypePredicates:
    def test_array(self) -> None:
        assert passes("array", {"test": [1, 2, 3, 4, 5, 6]})
        assert passes("array", {"test": {"a": 1}})
        assert not passes("array", {"test": "1, 2, 3, 4, 5, 6"})

    @pytest.mark.parametrize("value", ["6", 6, "6.0", "-6", "-6.0", 6.5, "1e3", " 6"])
    def test_numeric_valid(self, value: Any) -> None:
        assert passes("numeric", {"test": value})
        assert is_numeric(value)

    @pytest.mark.parametrize("value", ["v6.0", "", None, True, "nan", [6]])
    def test_numeric_invalid(self, value: Any) -> None:
        assert not passes("numeric", {"test": value})

    def test_string(self) -> None:
        assert passes("string", {"test": "Lorem ipsum"})
        assert passes("string", {"test": ""})
        assert not passes("string", {"test": ["Lorem ipsum"]})
        assert not passes("string", {})


class TestFailureCapture:
    def test_default_is_pass(self) -> None:
        capture = FailureCapture()
        assert capture.failed is False
        assert capture.message is None

    def test_records_message(self) -> None:
        capture = FailureCapture()
        capture("first")
        capture()
        assert capture.failed is True
        assert capture.message == "first"

    def test_last_message_wins(self) -> None:
        capture = FailureCapture()
        capture("first")
        capture("second")
        assert capture.message == "second"
