"""Rule protocol and the built-in validation rules.

Each rule is a small stateless object with a stable ``rule_id``. Rules never
raise for bad data; unparseable entries and failed contrast checks are
reported as errors in the RuleResult.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from swatchkit.core.color.contrast import check_compliance, contrast_ratio
from swatchkit.core.validation.models import (
    RuleResult,
    SwatchCandidate,
    ValidationOptions,
)


@runtime_checkable
class Rule(Protocol):
    """Protocol for validation rules.

    Custom rules registered at runtime only need these three attributes and
    a ``validate`` method; subclassing is not required.
    """

    @property
    def rule_id(self) -> str:
        """Stable identifier used in ``ValidationOptions.rules``."""
        ...

    @property
    def name(self) -> str:
        """Human-readable rule name."""
        ...

    @property
    def description(self) -> str:
        """One-line description shown by ``available_rules``."""
        ...

    def validate(self, candidate: SwatchCandidate, options: ValidationOptions) -> RuleResult:
        """Evaluate the rule.

        Args:
            candidate: Parsed swatch input.
            options: Options for the current run.

        Returns:
            RuleResult describing the outcome.
        """
        ...


def _adjacent_indices(count: int) -> list[tuple[int, int]]:
    return [(i, (i + 1) % count) for i in range(count)]


class WcagComplianceRule:
    """Every cyclic-adjacent pair meets the WCAG ratio for the level/text size."""

    rule_id = "wcag_compliance"
    name = "WCAG Compliance"
    description = "Ensures all adjacent color pairs meet WCAG standards"

    def validate(self, candidate: SwatchCandidate, options: ValidationOptions) -> RuleResult:
        if len(candidate) < 2:
            return RuleResult(
                valid=False,
                errors=["Swatch must have at least 2 colors"],
                details={"adjacent_pairs": [], "lowest_contrast": None},
            )

        errors: list[str] = []
        pairs: list[dict] = []
        lowest: float | None = None

        for i, j in _adjacent_indices(len(candidate)):
            first, second = candidate.parsed[i], candidate.parsed[j]
            if first is None or second is None:
                errors.append(
                    f"Failed to calculate contrast for {candidate.label(i)} and "
                    f"{candidate.label(j)}: unparseable color"
                )
                continue

            result = check_compliance(first, second, options.wcag_level, options.text_size)
            pairs.append(
                {
                    "pair": [i, j],
                    "colors": [result.color1, result.color2],
                    "contrast_ratio": result.ratio,
                    "required_ratio": result.required_ratio,
                    "compliant": result.compliant,
                }
            )
            if not result.compliant:
                errors.append(
                    f"Adjacent colors {result.color1} and {result.color2} do not meet "
                    f"{options.wcag_level.value} standards "
                    f"({result.ratio}:1 < {result.required_ratio}:1)"
                )
            if lowest is None or result.ratio < lowest:
                lowest = result.ratio

        return RuleResult(
            valid=not errors,
            errors=errors,
            details={
                "adjacent_pairs": pairs,
                "overall_compliant": not errors,
                "lowest_contrast": lowest,
            },
        )


class NoDuplicatesRule:
    """No two entries canonicalize to the same color."""

    rule_id = "no_duplicates"
    name = "No Duplicate Colors"
    description = "Ensures no color appears more than once in the swatch"

    def validate(self, candidate: SwatchCandidate, options: ValidationOptions) -> RuleResult:
        positions: dict[str, list[int]] = {}
        for index in range(len(candidate)):
            positions.setdefault(candidate.label(index), []).append(index)

        duplicates = [
            {"color": color, "indices": indices}
            for color, indices in positions.items()
            if len(indices) > 1
        ]
        errors = [
            f"Color {d['color']} appears at positions: {', '.join(map(str, d['indices']))}"
            for d in duplicates
        ]
        return RuleResult(
            valid=not duplicates,
            errors=errors,
            details={"unique_colors": len(positions), "duplicates": duplicates},
        )


class ColorCountRule:
    """Number of entries within ``[min_colors, max_colors]``."""

    rule_id = "color_count"
    name = "Color Count"
    description = "Validates the number of colors in the swatch"

    def validate(self, candidate: SwatchCandidate, options: ValidationOptions) -> RuleResult:
        count = len(candidate)
        errors: list[str] = []
        if count < options.min_colors:
            errors.append(
                f"Swatch has {count} colors, minimum required is {options.min_colors}"
            )
        if count > options.max_colors:
            errors.append(f"Swatch has {count} colors, maximum allowed is {options.max_colors}")
        return RuleResult(
            valid=not errors,
            errors=errors,
            details={
                "actual_count": count,
                "min_required": options.min_colors,
                "max_allowed": options.max_colors,
            },
        )


class ColorFormatRule:
    """Every entry parses as a hex or named color."""

    rule_id = "color_format"
    name = "Color Format"
    description = "Validates that all colors are valid hex values or color names"

    def validate(self, candidate: SwatchCandidate, options: ValidationOptions) -> RuleResult:
        valid_colors: list[dict] = []
        invalid_colors: list[dict] = []
        errors: list[str] = []
        for index, (raw, parsed) in enumerate(zip(candidate.raw, candidate.parsed, strict=True)):
            if parsed is None:
                invalid_colors.append({"index": index, "color": str(raw)})
                errors.append(f"Invalid color at position {index}: {raw}")
            else:
                valid_colors.append({"index": index, "original": str(raw), "hex": parsed.hex})
        return RuleResult(
            valid=not invalid_colors,
            errors=errors,
            details={"valid_colors": valid_colors, "invalid_colors": invalid_colors},
        )


class MinContrastRule:
    """Every adjacent pair meets an explicit contrast floor.

    Passes with a warning when no floor is configured.
    """

    rule_id = "min_contrast"
    name = "Minimum Contrast"
    description = "Ensures minimum contrast ratio between adjacent colors"

    def validate(self, candidate: SwatchCandidate, options: ValidationOptions) -> RuleResult:
        floor = options.min_contrast
        if floor is None:
            return RuleResult(
                warnings=["No minimum contrast specified"],
                details={"required_contrast": None},
            )

        errors: list[str] = []
        failing: list[dict] = []
        lowest: float | None = None
        count = len(candidate)
        pairs = _adjacent_indices(count) if count >= 2 else []

        for i, j in pairs:
            first, second = candidate.parsed[i], candidate.parsed[j]
            if first is None or second is None:
                errors.append(
                    f"Failed to calculate contrast for {candidate.label(i)} and "
                    f"{candidate.label(j)}: unparseable color"
                )
                continue
            ratio = contrast_ratio(first, second)
            if lowest is None or ratio < lowest:
                lowest = ratio
            if ratio < floor:
                failing.append({"pair": [i, j], "colors": [first.hex, second.hex], "ratio": ratio})
                errors.append(
                    f"Contrast between {first.hex} and {second.hex} is {ratio}:1, "
                    f"below required {floor}:1"
                )

        return RuleResult(
            valid=not errors,
            errors=errors,
            details={
                "required_contrast": floor,
                "actual_lowest_contrast": lowest,
                "failing_pairs": failing,
            },
        )


BUILTIN_RULES: tuple[type, ...] = (
    WcagComplianceRule,
    NoDuplicatesRule,
    MinContrastRule,
    ColorCountRule,
    ColorFormatRule,
)


__all__ = [
    "BUILTIN_RULES",
    "ColorCountRule",
    "ColorFormatRule",
    "MinContrastRule",
    "NoDuplicatesRule",
    "Rule",
    "WcagComplianceRule",
]
