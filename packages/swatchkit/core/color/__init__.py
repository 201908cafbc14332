"""Color model: parsing, luminance and WCAG contrast.

Pure and stateless. Everything else in SwatchKit builds on these functions.
"""

from swatchkit.core.color.contrast import (
    WCAG_THRESHOLDS,
    adjacent_contrasts,
    check_compliance,
    compliance_report,
    contrast_ratio,
    pairwise_contrasts,
    relative_luminance,
    required_ratio,
)
from swatchkit.core.color.models import (
    Color,
    ComplianceLevel,
    ContrastReport,
    ContrastResult,
    ContrastSummary,
    PairContrast,
    TextSize,
    WcagLevel,
)
from swatchkit.core.color.names import named_colors, palette_hex_values
from swatchkit.core.color.parser import (
    ColorLike,
    canonical_hex,
    hex_to_rgb,
    is_valid_hex,
    normalize_hex,
    parse_color,
    rgb_to_hex,
    try_parse_color,
)

__all__ = [
    # Models
    "Color",
    "ColorLike",
    "ComplianceLevel",
    "ContrastReport",
    "ContrastResult",
    "ContrastSummary",
    "PairContrast",
    "TextSize",
    "WcagLevel",
    # Parsing
    "canonical_hex",
    "hex_to_rgb",
    "is_valid_hex",
    "named_colors",
    "normalize_hex",
    "palette_hex_values",
    "parse_color",
    "rgb_to_hex",
    "try_parse_color",
    # Contrast
    "WCAG_THRESHOLDS",
    "adjacent_contrasts",
    "check_compliance",
    "compliance_report",
    "contrast_ratio",
    "pairwise_contrasts",
    "relative_luminance",
    "required_ratio",
]
