"""Validation engine: pluggable rules evaluated against swatches."""

from swatchkit.core.validation.engine import SwatchInput, ValidationEngine
from swatchkit.core.validation.models import (
    DEFAULT_RULES,
    MAX_SWATCH_COLORS,
    MIN_SWATCH_COLORS,
    RuleInfo,
    RuleOutcome,
    RuleResult,
    Swatch,
    SwatchCandidate,
    ValidationOptions,
    ValidationReport,
)
from swatchkit.core.validation.registry import RuleRegistry
from swatchkit.core.validation.rules import (
    ColorCountRule,
    ColorFormatRule,
    MinContrastRule,
    NoDuplicatesRule,
    Rule,
    WcagComplianceRule,
)

__all__ = [
    "DEFAULT_RULES",
    "MAX_SWATCH_COLORS",
    "MIN_SWATCH_COLORS",
    "ColorCountRule",
    "ColorFormatRule",
    "MinContrastRule",
    "NoDuplicatesRule",
    "Rule",
    "RuleInfo",
    "RuleOutcome",
    "RuleRegistry",
    "RuleResult",
    "Swatch",
    "SwatchCandidate",
    "SwatchInput",
    "ValidationEngine",
    "ValidationOptions",
    "ValidationReport",
    "WcagComplianceRule",
]
