"""Shared pytest fixtures and sample rules for fieldcheck tests."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import urlparse

import pytest

from fieldcheck.rules.base import FailCallback, Rule
from fieldcheck.validation import Validation


def looks_like_url(value: Any) -> bool:
    if not isinstance(value, str) or not value:
        return False
    parsed = urlparse(value)
    return bool(parsed.scheme and parsed.netloc)


class UrlRule(Rule):
    """Sample custom rule: the field must be an absolute URL."""

    def __call__(
        self,
        fields: Mapping[str, Any],
        key: str,
        options: Sequence[str],
        fail: FailCallback,
    ) -> None:
        if not looks_like_url(fields.get(key, "")):
            fail("Invalid Website specified")


class SilentRule(Rule):
    """Sample custom rule that fails without a message."""

    def __call__(
        self,
        fields: Mapping[str, Any],
        key: str,
        options: Sequence[str],
        fail: FailCallback,
    ) -> None:
        fail()


class NotARule:
    """Callable class that does not subclass Rule."""

    def __call__(self, *args: Any) -> None:
        return None


def website_callback(
    fields: Mapping[str, Any], key: str, options: Sequence[str], fail: FailCallback
) -> None:
    if not looks_like_url(fields.get(key, "")):
        fail("Invalid Website specified")


@pytest.fixture
def validation() -> Validation:
    """A fresh Validation with default settings."""
    return Validation()


@pytest.fixture
def signup_validation() -> Validation:
    """Validation for a typical signup form."""
    v = Validation()
    v.condition("name", "required")
    v.condition("email", ["required", "email"])
    v.condition("password", ["required", "min:8"])
    v.condition("password_confirm", ["required", "same:password"])
    return v
