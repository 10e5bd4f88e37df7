"""Rule kind classification."""

from __future__ import annotations

from enum import StrEnum


class RuleKind(StrEnum):
    """How a rule descriptor's target is resolved to a callable."""

    NAMED = "named"
    CUSTOM_CLASS = "custom_class"
    INLINE_CALLBACK = "inline_callback"
