"""WCAG relative luminance and contrast ratio.

Luminance follows the WCAG 2.x definition (sRGB channels linearized with the
0.03928 knee, weighted 0.2126/0.7152/0.0722). Contrast ratios are rounded to
two decimals before any threshold comparison, so 4.499 reports as 4.5 and
passes AA.
"""

from __future__ import annotations

from collections.abc import Sequence
from itertools import combinations

from swatchkit.core.color.models import (
    Color,
    ComplianceLevel,
    ContrastReport,
    ContrastResult,
    ContrastSummary,
    LevelCompliance,
    PairContrast,
    TextSize,
    WcagLevel,
)
from swatchkit.core.color.parser import ColorLike, parse_color

WCAG_THRESHOLDS: dict[WcagLevel, dict[TextSize, float]] = {
    WcagLevel.AA: {TextSize.NORMAL: 4.5, TextSize.LARGE: 3.0},
    WcagLevel.AAA: {TextSize.NORMAL: 7.0, TextSize.LARGE: 4.5},
}

_LUMINANCE_WEIGHTS = (0.2126, 0.7152, 0.0722)


def _linearize(channel: int) -> float:
    c = channel / 255
    if c <= 0.03928:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(color: ColorLike) -> float:
    """Relative luminance in [0, 1]."""
    parsed = parse_color(color)
    r, g, b = (_linearize(ch) for ch in parsed.rgb)
    wr, wg, wb = _LUMINANCE_WEIGHTS
    return wr * r + wg * g + wb * b


def contrast_ratio(color1: ColorLike, color2: ColorLike) -> float:
    """WCAG contrast ratio between two colors, rounded to 2 decimals.

    Symmetric, and 1.0 for identical colors. Range [1.0, 21.0].

    Example:
        >>> contrast_ratio("#FFFFFF", "#000000")
        21.0
    """
    l1 = relative_luminance(color1)
    l2 = relative_luminance(color2)
    lighter, darker = max(l1, l2), min(l1, l2)
    return round((lighter + 0.05) / (darker + 0.05), 2)


def required_ratio(
    level: WcagLevel | str = WcagLevel.AA,
    text_size: TextSize | str = TextSize.NORMAL,
) -> float:
    """Minimum ratio for a WCAG level and text size."""
    return WCAG_THRESHOLDS[WcagLevel(level)][TextSize(text_size)]


def check_compliance(
    color1: ColorLike,
    color2: ColorLike,
    level: WcagLevel | str = WcagLevel.AA,
    text_size: TextSize | str = TextSize.NORMAL,
) -> ContrastResult:
    """Check a color pair against a WCAG threshold.

    Raises:
        FormatError: If either color cannot be parsed.
    """
    c1 = parse_color(color1)
    c2 = parse_color(color2)
    wcag_level = WcagLevel(level)
    size = TextSize(text_size)
    ratio = contrast_ratio(c1, c2)
    needed = required_ratio(wcag_level, size)
    return ContrastResult(
        ratio=ratio,
        required_ratio=needed,
        compliant=ratio >= needed,
        level=wcag_level,
        text_size=size,
        color1=c1.hex,
        color2=c2.hex,
    )


def highest_level(compliance: dict[WcagLevel, LevelCompliance]) -> ComplianceLevel:
    """Highest level achieved, checking the strictest first."""
    if compliance[WcagLevel.AAA].normal:
        return ComplianceLevel.AAA
    if compliance[WcagLevel.AAA].large:
        return ComplianceLevel.AAA_LARGE
    if compliance[WcagLevel.AA].normal:
        return ComplianceLevel.AA
    if compliance[WcagLevel.AA].large:
        return ComplianceLevel.AA_LARGE
    return ComplianceLevel.NONE


def compliance_report(color1: ColorLike, color2: ColorLike) -> ContrastReport:
    """Compliance of a pair at every level and text size."""
    c1 = parse_color(color1)
    c2 = parse_color(color2)
    ratio = contrast_ratio(c1, c2)
    compliance = {
        level: LevelCompliance(
            normal=ratio >= sizes[TextSize.NORMAL],
            large=ratio >= sizes[TextSize.LARGE],
        )
        for level, sizes in WCAG_THRESHOLDS.items()
    }
    return ContrastReport(
        ratio=ratio,
        color1=c1.hex,
        color2=c2.hex,
        compliance=compliance,
        highest_level=highest_level(compliance),
    )


def _summarize(pairs: list[PairContrast]) -> ContrastSummary:
    if not pairs:
        return ContrastSummary()
    ratios = [p.ratio for p in pairs]
    return ContrastSummary(
        pairs=pairs,
        all_compliant=all(p.compliant for p in pairs),
        lowest_ratio=min(ratios),
        average_ratio=round(sum(ratios) / len(ratios), 2),
    )


def adjacent_contrasts(
    colors: Sequence[ColorLike],
    level: WcagLevel | str = WcagLevel.AA,
    text_size: TextSize | str = TextSize.NORMAL,
) -> ContrastSummary:
    """Contrast of each cyclic-adjacent pair (i, i+1 mod n).

    A single color yields no pairs. Two colors yield the pair in both
    directions, matching the wheel layout where each color touches the other
    on both sides.
    """
    parsed: list[Color] = [parse_color(c) for c in colors]
    n = len(parsed)
    if n < 2:
        return ContrastSummary()
    pairs = [
        PairContrast(
            pair=(i, (i + 1) % n),
            result=check_compliance(parsed[i], parsed[(i + 1) % n], level, text_size),
        )
        for i in range(n)
    ]
    return _summarize(pairs)


def pairwise_contrasts(
    colors: Sequence[ColorLike],
    level: WcagLevel | str = WcagLevel.AA,
    text_size: TextSize | str = TextSize.NORMAL,
) -> ContrastSummary:
    """Contrast of every unordered pair of colors."""
    parsed = [parse_color(c) for c in colors]
    pairs = [
        PairContrast(pair=(i, j), result=check_compliance(parsed[i], parsed[j], level, text_size))
        for i, j in combinations(range(len(parsed)), 2)
    ]
    return _summarize(pairs)


__all__ = [
    "WCAG_THRESHOLDS",
    "adjacent_contrasts",
    "check_compliance",
    "compliance_report",
    "contrast_ratio",
    "highest_level",
    "pairwise_contrasts",
    "relative_luminance",
    "required_ratio",
]
