"""Validation rule registry.

Maps rule ids to Rule implementations. Built-ins are registered on
construction; callers may add, replace or remove rules at runtime.
"""

from __future__ import annotations

import logging

from swatchkit.core.validation.models import RuleInfo
from swatchkit.core.validation.rules import BUILTIN_RULES, Rule

logger = logging.getLogger(__name__)


class RuleRegistry:
    """Registry for validation Rule instances.

    Example:
        >>> registry = RuleRegistry()
        >>> registry.register(MyBrandRule())
        >>> registry.get("wcag_compliance").name
        'WCAG Compliance'
    """

    def __init__(self, include_builtins: bool = True) -> None:
        self._rules: dict[str, Rule] = {}
        if include_builtins:
            for rule_cls in BUILTIN_RULES:
                self.register(rule_cls())

    def register(self, rule: Rule) -> None:
        """Register a rule, replacing any rule with the same id.

        Args:
            rule: Object satisfying the Rule protocol.

        Raises:
            TypeError: If rule does not satisfy the protocol.
        """
        if not isinstance(rule, Rule) or not callable(getattr(rule, "validate", None)):
            raise TypeError(
                f"Rule must define rule_id, name, description and validate(); "
                f"got {type(rule).__name__}"
            )
        if not isinstance(rule.rule_id, str) or not rule.rule_id:
            raise TypeError("Rule rule_id must be a non-empty string")

        rule_id = rule.rule_id
        if rule_id in self._rules:
            logger.warning(
                "Overwriting rule '%s' (old=%s, new=%s)",
                rule_id,
                type(self._rules[rule_id]).__name__,
                type(rule).__name__,
            )
        self._rules[rule_id] = rule
        logger.debug("Registered rule '%s' (%s)", rule_id, type(rule).__name__)

    def unregister(self, rule_id: str) -> bool:
        """Remove a rule. Returns False if it was not registered."""
        removed = self._rules.pop(rule_id, None) is not None
        if removed:
            logger.debug("Removed rule '%s'", rule_id)
        return removed

    def get(self, rule_id: str) -> Rule | None:
        return self._rules.get(rule_id)

    def describe(self) -> list[RuleInfo]:
        """Info for every registered rule in registration order."""
        return [
            RuleInfo(rule_id=rule_id, name=rule.name, description=rule.description)
            for rule_id, rule in self._rules.items()
        ]

    @property
    def registered_ids(self) -> list[str]:
        """List all registered rule ids."""
        return sorted(self._rules.keys())

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __len__(self) -> int:
        return len(self._rules)


__all__ = [
    "RuleRegistry",
]
