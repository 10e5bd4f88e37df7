"""Rule capability interface and per-rule outcome.

Every rule, built-in or custom, is a callable over
``(fields, key, options, fail)``. A rule signals invalidity by calling
``fail(message)``; returning without calling it means the rule passed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

FailCallback = Callable[..., None]
RuleCallable = Callable[[Mapping[str, Any], str, Sequence[str], FailCallback], None]


class Rule(ABC):
    """Abstract base class for custom rule implementations.

    Subclasses must be constructible without arguments; the engine
    instantiates them at check time.
    """

    @abstractmethod
    def __call__(
        self,
        fields: Mapping[str, Any],
        key: str,
        options: Sequence[str],
        fail: FailCallback,
    ) -> None:
        """Inspect ``fields[key]`` and call ``fail(message)`` when invalid."""
        ...


@dataclass(frozen=True)
class Outcome:
    """Result of evaluating one rule against one field."""

    rule: str
    passed: bool
    message: str | None = None


class FailureCapture:
    """The ``fail`` callback handed to a rule; the last non-empty message wins."""

    def __init__(self) -> None:
        self.failed = False
        self.message: str | None = None

    def __call__(self, message: str | None = None) -> None:
        self.failed = True
        if message:
            self.message = message
