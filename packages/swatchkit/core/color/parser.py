"""Color parsing and hex/RGB conversion.

Accepts ``#RGB``, ``#RRGGBB`` (leading ``#`` optional, any case) and the
HTML/CSS color names. Parsing is total over that grammar and deterministic:
the same input always yields the same canonical Color.
"""

from __future__ import annotations

import re

from swatchkit.core.color.models import Color
from swatchkit.core.color.names import lookup_name
from swatchkit.core.errors import FormatError

HEX_PATTERN = re.compile(r"^#?(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")

ColorLike = Color | str


def is_valid_hex(value: str) -> bool:
    """Return True if value is a 3- or 6-digit hex color."""
    return bool(HEX_PATTERN.match(value.strip()))


def normalize_hex(value: str) -> str:
    """Normalize a hex color to upper-case ``#RRGGBB``.

    Raises:
        FormatError: If value is not a 3/6-digit hex color.

    Example:
        >>> normalize_hex("fa0")
        '#FFAA00'
    """
    text = value.strip()
    if not HEX_PATTERN.match(text):
        raise FormatError(value, f"Invalid hex color: {value!r}")
    digits = text.lstrip("#").upper()
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return f"#{digits}"


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    """Convert a hex color to an ``(r, g, b)`` tuple."""
    digits = normalize_hex(value)[1:]
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def rgb_to_hex(red: float, green: float, blue: float) -> str:
    """Convert channel values to ``#RRGGBB``, rounding and clamping to 0-255."""

    def _channel(component: float) -> int:
        return int(round(max(0.0, min(255.0, float(component)))))

    return f"#{_channel(red):02X}{_channel(green):02X}{_channel(blue):02X}"


def parse_color(value: ColorLike) -> Color:
    """Parse hex or named color input into a canonical Color.

    Colors pass through unchanged.

    Raises:
        FormatError: If input is neither a valid hex nor a known name.
    """
    if isinstance(value, Color):
        return value
    if not isinstance(value, str):
        raise FormatError(value, f"Color input must be a string, got {type(value).__name__}")

    if is_valid_hex(value):
        hex_value = normalize_hex(value)
    else:
        hex_value = lookup_name(value)
        if hex_value is None:
            raise FormatError(value)

    red, green, blue = hex_to_rgb(hex_value)
    return Color(red=red, green=green, blue=blue, original=value)


def try_parse_color(value: ColorLike) -> Color | None:
    """Parse a color, returning None instead of raising on bad input."""
    try:
        return parse_color(value)
    except FormatError:
        return None


def canonical_hex(value: ColorLike) -> str:
    """Canonical hex for any parseable color input."""
    return parse_color(value).hex


__all__ = [
    "ColorLike",
    "HEX_PATTERN",
    "canonical_hex",
    "hex_to_rgb",
    "is_valid_hex",
    "normalize_hex",
    "parse_color",
    "rgb_to_hex",
    "try_parse_color",
]
