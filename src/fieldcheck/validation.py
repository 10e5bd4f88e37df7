"""Validation — per-field conditions, custom rules, and the validation run.

A Validation is configured once (conditions and custom rules), then run
against any number of input mappings. The error bag is local to each run,
so a configured instance can be shared between threads as long as it is
no longer being configured. Each run also refreshes every Condition's
stored errors (``Condition.get_errors``); under concurrent runs those
snapshots reflect whichever run finished last.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fieldcheck.condition import Condition
from fieldcheck.config.settings import ValidationSettings
from fieldcheck.domain.expressions import parse_rules
from fieldcheck.errors import InvalidRuleType, ValidationFailed
from fieldcheck.result import ValidationResult
from fieldcheck.rules.registry import RuleHandler, RuleRegistry

logger = logging.getLogger(__name__)


class Validation:
    """Declarative validation of a key/value mapping.

    Example::

        validation = Validation()
        validation.condition("email", ["required", "email"])
        validation.condition("password_confirm", ["required", "same:password"])
        validation.validate(request_data)  # raises ValidationFailed

    Without explicit *settings*, defaults come from
    :class:`ValidationSettings`, which reads ``FIELDCHECK_BAIL`` and
    ``FIELDCHECK_MESSAGE_PREFIX`` from the environment. Pass
    ``ValidationSettings(bail=False, message_prefix="validation")`` to pin
    the documented defaults regardless of the environment.
    """

    def __init__(self, settings: ValidationSettings | None = None) -> None:
        self._settings = settings or ValidationSettings()
        self._registry = RuleRegistry()
        self._conditions: dict[str, Condition] = {}

    @property
    def settings(self) -> ValidationSettings:
        return self._settings

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def condition(self, field: str, rules: Any, *, message: str | None = None) -> Validation:
        """Attach rules to *field*, creating its Condition on first use.

        *rules* is a rule expression, a rule class, a callback, or a
        list/tuple of those. *message* overrides the failure message of
        every rule added by this call.
        """
        if not isinstance(rules, (str, list, tuple)) and not callable(rules):
            raise InvalidRuleType(
                "Invalid rule type specified",
                detail={"field": field, "type": type(rules).__name__},
            )
        descriptors = parse_rules(rules, message=message)
        condition = self._conditions.get(field)
        if condition is None:
            condition = Condition(
                registry=self._registry,
                message_prefix=self._settings.message_prefix,
            )
            self._conditions[field] = condition
        condition.extend(descriptors)
        logger.debug("Attached rules to field: %s", field)
        return self

    def rule(self, name: str, handler: Any) -> Validation:
        """Register a custom rule usable by name in any condition."""
        self._registry.register(name, handler)
        return self

    def get_conditions(self) -> dict[str, Condition]:
        return dict(self._conditions)

    def get_rules(self) -> dict[str, RuleHandler]:
        return self._registry.all()

    def has_rule(self, name: str) -> bool:
        return self._registry.has(name)

    def get_rule(self, name: str) -> RuleHandler:
        """Return the handler registered as *name*.

        Raises:
            UnknownRule: Nothing is registered under *name*.
        """
        return self._registry.get(name)

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    def run(self, fields: Mapping[str, Any], bail: bool | None = None) -> ValidationResult:
        """Check every field in insertion order without raising on failure.

        With *bail*, each field stops at its first failing rule and the run
        stops at the first failing field. ``None`` uses the settings default.
        """
        if bail is None:
            bail = self._settings.bail
        errors: dict[str, list[str]] = {}
        checked: list[str] = []
        stopped = False
        for key, condition in self._conditions.items():
            if stopped:
                condition.record(key, [])
                continue
            checked.append(key)
            outcomes = condition.evaluate(fields, key, bail)
            if condition.record(key, outcomes):
                continue
            errors[key] = [o.message for o in outcomes if not o.passed and o.message]
            stopped = bail
        ok = not errors
        logger.debug(
            "Validation run finished: ok=%s checked=%d failed=%d",
            ok,
            len(checked),
            len(errors),
        )
        return ValidationResult(ok=ok, errors=errors, checked=checked)

    def validate(self, fields: Mapping[str, Any], bail: bool | None = None) -> bool:
        """Check every field; return True or raise with the error bag.

        Raises:
            ValidationFailed: At least one field failed. ``exc.errors``
                holds the field to messages mapping.
        """
        result = self.run(fields, bail)
        if not result.ok:
            raise ValidationFailed(dict(result.errors))
        return True
