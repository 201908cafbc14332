"""Validation engine.

Runs an ordered rule set against a swatch and folds the per-rule results into
a single ValidationReport. Data problems never escape as exceptions: unknown
rule ids become warnings and a rule that raises becomes a failed outcome.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from swatchkit.core.errors import RuleError
from swatchkit.core.validation.models import (
    RuleInfo,
    RuleOutcome,
    RuleResult,
    Swatch,
    SwatchCandidate,
    ValidationOptions,
    ValidationReport,
)
from swatchkit.core.validation.registry import RuleRegistry
from swatchkit.core.validation.rules import Rule, WcagComplianceRule

logger = logging.getLogger(__name__)

SwatchInput = Swatch | Sequence[Any]


class ValidationEngine:
    """Evaluate swatches against registered rules.

    Args:
        registry: Rule registry. A registry with the built-in rules is created
            when omitted.

    Example:
        >>> engine = ValidationEngine()
        >>> report = engine.validate_swatch(["#000000", "#FFFFFF"])
        >>> report.valid, report.overall_rating
        (True, 21.0)
    """

    def __init__(self, registry: RuleRegistry | None = None) -> None:
        self._registry = registry or RuleRegistry()

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    def validate_swatch(
        self,
        colors: SwatchInput,
        options: ValidationOptions | None = None,
        **overrides: Any,
    ) -> ValidationReport:
        """Validate one swatch.

        Args:
            colors: Raw color strings, Colors, or a Swatch.
            options: Validation options (defaults when omitted).
            **overrides: Field overrides applied on top of options.

        Returns:
            ValidationReport. ``valid`` is the AND of every rule that ran.
        """
        opts = options or ValidationOptions()
        if overrides:
            opts = ValidationOptions.model_validate({**opts.model_dump(), **overrides})

        candidate = SwatchCandidate.from_input(colors)
        outcomes: list[RuleOutcome] = []
        errors: list[str] = []
        warnings: list[str] = []

        for rule_id in opts.rules:
            rule = self._registry.get(rule_id)
            if rule is None:
                warnings.append(f"Unknown validation rule: {rule_id}")
                continue

            outcome = self._run_rule(rule, candidate, opts)
            outcomes.append(outcome)
            errors.extend(outcome.errors)
            warnings.extend(outcome.warnings)

        valid = all(o.valid for o in outcomes)
        return ValidationReport(
            valid=valid,
            results=outcomes,
            errors=errors,
            warnings=warnings,
            overall_rating=self._overall_rating(valid, outcomes),
            colors=candidate.labels,
        )

    def validate_many(
        self,
        swatches: Iterable[SwatchInput],
        options: ValidationOptions | None = None,
    ) -> list[ValidationReport]:
        """Validate several swatches; one bad swatch never aborts the batch."""
        return [self.validate_swatch(s, options) for s in swatches]

    def register_rule(self, rule: Rule) -> None:
        """Register a custom rule.

        Raises:
            TypeError: If rule does not satisfy the Rule protocol.
        """
        self._registry.register(rule)

    def remove_rule(self, rule_id: str) -> bool:
        """Remove a rule. Returns False if it was not registered."""
        return self._registry.unregister(rule_id)

    def available_rules(self) -> list[RuleInfo]:
        return self._registry.describe()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _run_rule(rule: Rule, candidate: SwatchCandidate, options: ValidationOptions) -> RuleOutcome:
        try:
            result = RuleResult.model_validate(rule.validate(candidate, options))
        except Exception as exc:
            error = RuleError(rule.rule_id, exc)
            logger.warning("%s", error)
            return RuleOutcome(
                rule_id=rule.rule_id,
                name=rule.name,
                valid=False,
                errors=[str(error)],
                details={"exception": type(exc).__name__},
            )
        return RuleOutcome(
            rule_id=rule.rule_id,
            name=rule.name,
            valid=result.valid,
            errors=result.errors,
            warnings=result.warnings,
            details=result.details,
        )

    @staticmethod
    def _overall_rating(valid: bool, outcomes: list[RuleOutcome]) -> float | None:
        wcag = next((o for o in outcomes if o.rule_id == WcagComplianceRule.rule_id), None)
        if wcag is None:
            return None
        if not valid:
            return 0.0
        return wcag.details.get("lowest_contrast")


__all__ = [
    "SwatchInput",
    "ValidationEngine",
]
