"""Per-Validation table of custom rule names to handlers.

A handler is either an inline callback (used as the rule directly) or a
type handle: a :class:`~fieldcheck.rules.base.Rule` subclass, or a dotted
``package.module.ClassName`` path imported at registration time.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from typing import Any

from fieldcheck.errors import InvalidHandlerType, MustImplementRuleInterface, UnknownRule
from fieldcheck.rules.base import Rule, RuleCallable

logger = logging.getLogger(__name__)

RuleHandler = type[Rule] | Callable[..., Any]


def import_type(path: str) -> type | None:
    """Import ``package.module.Name`` and return it if it is a class."""
    module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        return None
    try:
        module = importlib.import_module(module_name)
    except (ImportError, ValueError):
        return None
    found = getattr(module, attr, None)
    return found if isinstance(found, type) else None


def instantiate_rule(rule_type: type, *, name: str) -> Rule:
    """Construct a rule class, requiring the :class:`Rule` capability."""
    if not issubclass(rule_type, Rule):
        raise MustImplementRuleInterface(
            "Must implement the Rule interface",
            detail={"rule": name, "type": rule_type.__qualname__},
        )
    return rule_type()


class RuleRegistry:
    """Custom rules registered by the host application before validation."""

    def __init__(self) -> None:
        self._handlers: dict[str, RuleHandler] = {}

    def register(self, name: str, handler: Any) -> None:
        """Register *handler* under *name*, replacing any previous entry."""
        if isinstance(handler, str):
            resolved = import_type(handler)
            if resolved is None:
                raise InvalidHandlerType(
                    "Invalid handler type specified",
                    detail={"rule": name, "handler": handler},
                )
            handler = resolved
        elif not callable(handler):
            raise InvalidHandlerType(
                "Invalid handler type specified",
                detail={"rule": name, "type": type(handler).__name__},
            )
        self._handlers[name] = handler
        logger.debug("Registered rule: %s", name)

    def has(self, name: str) -> bool:
        return name in self._handlers

    def get(self, name: str) -> RuleHandler:
        try:
            return self._handlers[name]
        except KeyError:
            raise UnknownRule("Unknown rule type", detail={"rule": name}) from None

    def all(self) -> dict[str, RuleHandler]:
        return dict(self._handlers)

    def resolve(self, name: str) -> RuleCallable:
        """Turn the handler for *name* into a rule callable."""
        handler = self.get(name)
        if isinstance(handler, type):
            return instantiate_rule(handler, name=name)
        return handler
