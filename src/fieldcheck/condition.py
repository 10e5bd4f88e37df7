"""Condition — the ordered rule chain attached to one field.

Resolution order for a named rule:
  1. Dotted class path (``package.module.ClassName``) — instantiated,
     must subclass :class:`~fieldcheck.rules.base.Rule`.
  2. Built-in rule (case- and separator-insensitive).
  3. The owning Validation's registry.
  4. :class:`~fieldcheck.errors.UnknownRule`.

Class and callback descriptors skip the lookup and are used directly.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fieldcheck.domain.expressions import RuleDescriptor, parse_rules
from fieldcheck.domain.types import RuleKind
from fieldcheck.errors import UnknownRule
from fieldcheck.rules.base import FailureCapture, Outcome, RuleCallable
from fieldcheck.rules.builtins import find_builtin
from fieldcheck.rules.registry import RuleRegistry, import_type, instantiate_rule

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_PREFIX = "validation"


class Condition:
    """Ordered rules for one field plus the errors from the latest check."""

    def __init__(
        self,
        *,
        registry: RuleRegistry | None = None,
        message_prefix: str = DEFAULT_MESSAGE_PREFIX,
    ) -> None:
        self._registry = registry if registry is not None else RuleRegistry()
        self._message_prefix = message_prefix
        self._rules: list[RuleDescriptor] = []
        self._errors: dict[str, list[str]] = {}

    @property
    def rules(self) -> list[RuleDescriptor]:
        return list(self._rules)

    def get_errors(self) -> dict[str, list[str]]:
        """Errors recorded by the most recent :meth:`check` or validation run."""
        return {key: list(messages) for key, messages in self._errors.items()}

    def rule(self, rule: Any, *, message: str | None = None) -> Condition:
        """Append one rule token, or each token of a list/tuple, in order.

        Raises:
            InvalidRuleType: A token is not a string, class, or callable.
            InvalidExpression: A string token is not ``name[:options]``.
        """
        return self.extend(parse_rules(rule, message=message))

    def extend(self, descriptors: list[RuleDescriptor]) -> Condition:
        """Append already-parsed rule descriptors, in order."""
        self._rules.extend(descriptors)
        return self

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _resolve(self, descriptor: RuleDescriptor) -> tuple[str, RuleCallable]:
        """Return ``(message_name, callable)`` for a descriptor."""
        if descriptor.kind is RuleKind.INLINE_CALLBACK:
            return descriptor.name, descriptor.target
        if descriptor.kind is RuleKind.CUSTOM_CLASS:
            return descriptor.name, instantiate_rule(descriptor.target, name=descriptor.name)

        name = descriptor.name
        rule_type = import_type(name) if "." in name else None
        if rule_type is not None:
            return name, instantiate_rule(rule_type, name=name)

        builtin = find_builtin(name)
        if builtin is not None:
            return builtin

        if self._registry.has(name):
            return name, self._registry.resolve(name)

        raise UnknownRule("Unknown rule type", detail={"rule": name})

    def _default_message(self, descriptor: RuleDescriptor, name: str) -> str:
        if descriptor.kind is RuleKind.NAMED:
            return f"{self._message_prefix}.{name}"
        return f"Failed validation for {name} rule"

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(
        self,
        fields: Mapping[str, Any],
        key: str,
        bail: bool = False,
    ) -> list[Outcome]:
        """Run the rules in order without touching instance state.

        Stops after the first failure when *bail* is set. Configuration
        errors (unknown rules, bad rule classes) propagate.
        """
        outcomes: list[Outcome] = []
        for descriptor in self._rules:
            name, rule = self._resolve(descriptor)
            capture = FailureCapture()
            rule(fields, key, descriptor.options, capture)
            if not capture.failed:
                outcomes.append(Outcome(rule=name, passed=True))
                continue
            message = (
                descriptor.message
                or capture.message
                or self._default_message(descriptor, name)
            )
            outcomes.append(Outcome(rule=name, passed=False, message=message))
            logger.debug("Rule failed: field=%s rule=%s", key, name)
            if bail:
                break
        return outcomes

    def check(self, fields: Mapping[str, Any], key: str, bail: bool = False) -> bool:
        """Evaluate the rules for *key* and record its failure messages.

        The error list is replaced on every call, so repeated checks with
        the same input give the same result.
        """
        return self.record(key, self.evaluate(fields, key, bail))

    def record(self, key: str, outcomes: list[Outcome]) -> bool:
        """Replace the stored errors with the failures in *outcomes*.

        Returns whether every outcome passed.
        """
        messages = [o.message for o in outcomes if not o.passed and o.message]
        self._errors = {key: messages} if messages else {}
        return all(o.passed for o in outcomes)
