"""Color and contrast value models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class WcagLevel(str, Enum):
    """WCAG conformance level."""

    AA = "AA"
    AAA = "AAA"


class TextSize(str, Enum):
    """Text size class used to pick the contrast threshold."""

    NORMAL = "normal"
    LARGE = "large"


class ComplianceLevel(str, Enum):
    """Highest WCAG level a color pair achieves."""

    AAA = "AAA"
    AAA_LARGE = "AAA-Large"
    AA = "AA"
    AA_LARGE = "AA-Large"
    NONE = "None"


class Color(BaseModel):
    """An immutable canonical RGB color.

    Attributes:
        red: Red channel (0-255).
        green: Green channel (0-255).
        blue: Blue channel (0-255).
        original: The text the color was parsed from.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    red: int = Field(ge=0, le=255)
    green: int = Field(ge=0, le=255)
    blue: int = Field(ge=0, le=255)
    original: str = ""

    @property
    def hex(self) -> str:
        """Canonical upper-case ``#RRGGBB`` form."""
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}"

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Color):
            return self.rgb == other.rgb
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.rgb)

    def __str__(self) -> str:
        return self.hex


class ContrastResult(BaseModel):
    """Contrast between two colors checked against one WCAG threshold."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ratio: float = Field(ge=1.0, description="Contrast ratio rounded to 2 decimals")
    required_ratio: float = Field(description="Threshold for the level/text size")
    compliant: bool
    level: WcagLevel = WcagLevel.AA
    text_size: TextSize = TextSize.NORMAL
    color1: str = Field(description="Canonical hex of the first color")
    color2: str = Field(description="Canonical hex of the second color")


class PairContrast(BaseModel):
    """A ContrastResult positioned inside a swatch.

    Attributes:
        pair: Indices ``(i, j)`` of the two colors in the swatch.
        result: Contrast check for the pair.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    pair: tuple[int, int]
    result: ContrastResult

    @property
    def ratio(self) -> float:
        return self.result.ratio

    @property
    def compliant(self) -> bool:
        return self.result.compliant


class LevelCompliance(BaseModel):
    """Normal/large text compliance for one WCAG level."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    normal: bool
    large: bool


class ContrastReport(BaseModel):
    """Compliance of a color pair at every WCAG level."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ratio: float
    color1: str
    color2: str
    compliance: dict[WcagLevel, LevelCompliance]
    highest_level: ComplianceLevel


class ContrastSummary(BaseModel):
    """Aggregate over a set of pair contrasts."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    pairs: list[PairContrast] = Field(default_factory=list)
    all_compliant: bool = True
    lowest_ratio: float | None = None
    average_ratio: float | None = None
