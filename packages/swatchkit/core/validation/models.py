"""Validation models: swatches, rule results, options and reports."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from swatchkit.core.color.models import Color, PairContrast, TextSize, WcagLevel
from swatchkit.core.color.parser import ColorLike, try_parse_color

MIN_SWATCH_COLORS = 2
MAX_SWATCH_COLORS = 7

DEFAULT_RULES: tuple[str, ...] = (
    "wcag_compliance",
    "no_duplicates",
    "color_count",
    "color_format",
)


class Swatch(BaseModel):
    """An ordered, cyclic sequence of distinct colors.

    Element ``i`` is adjacent to element ``(i + 1) % n``. Built by the search
    engine or ``build_swatch``; immutable once validated.

    Attributes:
        id: Stable identifier derived from the ordered hex values.
        colors: 2-7 unique canonical colors.
        wcag_level: Level the swatch was checked against.
        text_size: Text size the swatch was checked against.
        adjacent_contrasts: One entry per cyclic-adjacent pair.
        overall_rating: Lowest adjacent contrast ratio.
        compliant: True if every adjacent pair meets the threshold.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    colors: tuple[Color, ...] = Field(min_length=MIN_SWATCH_COLORS, max_length=MAX_SWATCH_COLORS)
    wcag_level: WcagLevel = WcagLevel.AA
    text_size: TextSize = TextSize.NORMAL
    adjacent_contrasts: tuple[PairContrast, ...] = ()
    overall_rating: float = Field(ge=1.0)
    compliant: bool

    @property
    def hex_values(self) -> list[str]:
        return [c.hex for c in self.colors]

    @property
    def size(self) -> int:
        return len(self.colors)

    def includes(self, color: ColorLike) -> bool:
        """True if the swatch contains the color (by canonical value)."""
        parsed = try_parse_color(color)
        return parsed is not None and parsed in self.colors


class RuleResult(BaseModel):
    """Outcome of a single rule."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    details: dict[str, Any] = Field(default_factory=dict)


class RuleOutcome(RuleResult):
    """A RuleResult tagged with the rule that produced it."""

    rule_id: str
    name: str


class RuleInfo(BaseModel):
    """Public description of a registered rule."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    rule_id: str
    name: str
    description: str = ""


class ValidationOptions(BaseModel):
    """Options for a validation run.

    Attributes:
        wcag_level: WCAG level for the compliance rule.
        text_size: Text size for the compliance rule.
        min_contrast: Explicit floor for the ``min_contrast`` rule.
        min_colors: Lower bound for ``color_count``.
        max_colors: Upper bound for ``color_count`` (hard ceiling 7).
        rules: Rule ids to run, in order.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    wcag_level: WcagLevel = WcagLevel.AA
    text_size: TextSize = TextSize.NORMAL
    min_contrast: float | None = Field(default=None, ge=1.0, le=21.0)
    min_colors: int = Field(default=MIN_SWATCH_COLORS, ge=1, le=MAX_SWATCH_COLORS)
    max_colors: int = Field(default=5, ge=1, le=MAX_SWATCH_COLORS)
    rules: tuple[str, ...] = DEFAULT_RULES

    @model_validator(mode="after")
    def _check_bounds(self) -> ValidationOptions:
        if self.min_colors > self.max_colors:
            raise ValueError(
                f"min_colors ({self.min_colors}) cannot exceed max_colors ({self.max_colors})"
            )
        return self


class ValidationReport(BaseModel):
    """Aggregate result of running a rule set against one swatch.

    Attributes:
        valid: AND of every rule that ran.
        results: Per-rule outcomes in execution order.
        errors: Concatenated rule errors.
        warnings: Concatenated rule warnings plus unknown-rule warnings.
        overall_rating: Lowest adjacent contrast when valid, 0.0 when invalid,
            None when ``wcag_compliance`` did not run.
        timestamp: UTC time of the run.
        colors: The raw input entries as text.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    valid: bool
    results: list[RuleOutcome] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    overall_rating: float | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    colors: list[str] = Field(default_factory=list)

    def result_for(self, rule_id: str) -> RuleOutcome | None:
        """The outcome of a rule, if it ran."""
        return next((r for r in self.results if r.rule_id == rule_id), None)


@dataclass(frozen=True)
class SwatchCandidate:
    """Raw validation input with each entry parsed once.

    ``parsed[i]`` is None when ``raw[i]`` could not be parsed.
    """

    raw: tuple[Any, ...]
    parsed: tuple[Color | None, ...] = field(default=())

    @classmethod
    def from_input(cls, colors: Swatch | Iterable[Any]) -> SwatchCandidate:
        entries = tuple(colors.colors) if isinstance(colors, Swatch) else tuple(colors)
        return cls(raw=entries, parsed=tuple(try_parse_color(c) for c in entries))

    def __len__(self) -> int:
        return len(self.raw)

    def label(self, index: int) -> str:
        """Printable form of an entry: canonical hex when parseable."""
        parsed = self.parsed[index]
        return parsed.hex if parsed is not None else str(self.raw[index])

    @property
    def labels(self) -> list[str]:
        return [self.label(i) for i in range(len(self.raw))]


__all__ = [
    "DEFAULT_RULES",
    "MAX_SWATCH_COLORS",
    "MIN_SWATCH_COLORS",
    "RuleInfo",
    "RuleOutcome",
    "RuleResult",
    "Swatch",
    "SwatchCandidate",
    "ValidationOptions",
    "ValidationReport",
]
