"""fieldcheck — declarative validation of key/value input.

Attach rule chains to fields, register custom rules, then validate a
mapping::

    from fieldcheck import Validation, ValidationFailed

    validation = Validation().condition("email", ["required", "email"])
    try:
        validation.validate({"email": "a@b.com"})
    except ValidationFailed as exc:
        render(exc.errors)
"""

from fieldcheck.condition import Condition
from fieldcheck.config.logging import configure_logging
from fieldcheck.config.settings import ValidationSettings
from fieldcheck.domain.expressions import RuleDescriptor, parse_rule
from fieldcheck.domain.types import RuleKind
from fieldcheck.errors import (
    FieldcheckError,
    InvalidExpression,
    InvalidHandlerType,
    InvalidRuleType,
    MustImplementRuleInterface,
    UnknownRule,
    ValidationFailed,
)
from fieldcheck.result import ValidationResult
from fieldcheck.rules.base import FailCallback, Outcome, Rule
from fieldcheck.validation import Validation

__all__ = [
    "Condition",
    "FailCallback",
    "FieldcheckError",
    "InvalidExpression",
    "InvalidHandlerType",
    "InvalidRuleType",
    "MustImplementRuleInterface",
    "Outcome",
    "Rule",
    "RuleDescriptor",
    "RuleKind",
    "UnknownRule",
    "Validation",
    "ValidationFailed",
    "ValidationResult",
    "ValidationSettings",
    "configure_logging",
    "parse_rule",
]
