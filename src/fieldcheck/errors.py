"""Exception taxonomy for fieldcheck.

Configuration errors (bad rule tokens, bad handlers, unresolvable rule
names) are programming errors and propagate immediately. They are never
collected into an error bag.

``ValidationFailed`` is the one expected failure: it carries the error
bag so callers can render field-level feedback.
"""

from __future__ import annotations

from typing import Any


class FieldcheckError(Exception):
    """Base error carrying a machine-readable ``code`` and ``detail``."""

    code = "FIELDCHECK_ERROR"

    def __init__(self, message: str, *, detail: dict[str, Any] | None = None) -> None:
        self.message = message
        self.detail = detail or {}
        super().__init__(message)


class InvalidExpression(FieldcheckError, ValueError):
    """A rule string does not match ``name[:options]``."""

    code = "INVALID_EXPRESSION"


class InvalidRuleType(FieldcheckError, ValueError):
    """A rule token is not a string, a callable, or a sequence of those."""

    code = "INVALID_RULE_TYPE"


class InvalidHandlerType(FieldcheckError, ValueError):
    """A custom rule handler is neither a callable nor a resolvable type."""

    code = "INVALID_HANDLER_TYPE"


class MustImplementRuleInterface(FieldcheckError, RuntimeError):
    """A resolved rule class does not subclass :class:`fieldcheck.rules.base.Rule`."""

    code = "MUST_IMPLEMENT_RULE_INTERFACE"


class UnknownRule(FieldcheckError, RuntimeError):
    """No resolution strategy matched a named rule."""

    code = "UNKNOWN_RULE"


class ValidationFailed(FieldcheckError):
    """Raised by :meth:`Validation.validate` when any field fails.

    Attributes:
        errors: Mapping of field key to its ordered failure messages.
    """

    code = "VALIDATION_FAILED"

    def __init__(
        self,
        errors: dict[str, list[str]],
        message: str = "Validation not passed",
    ) -> None:
        super().__init__(message, detail={"fields": sorted(errors)})
        self.errors = errors

    def get_errors(self) -> dict[str, list[str]]:
        return self.errors
