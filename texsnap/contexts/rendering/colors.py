"""
Color resolution for render requests.

Parses user-supplied color strings into the forms each tool needs:
    - xcolor HTML model ("1A2B3C") for the LaTeX document
    - CSS hex ("#1A2B3C") for SVG post-processing and custom templates
    - dvipng -bg argument ("rgb 0.102 0.1686 0.2353")

Invalid input never raises. Callers substitute their own fallback
(black for text, no background for the page).
"""

import re
from dataclasses import dataclass
from typing import Any, Optional

HEX_COLOR_PATTERN = re.compile(r"^[0-9a-fA-F]{6}$")
TRANSPARENT = "transparent"
DVIPNG_TRANSPARENT = "Transparent"


@dataclass(frozen=True)
class ResolvedColor:
    """
    A validated 24-bit color.

    Attributes:
        hex: Uppercase hex digits without "#" (e.g., "00FF00")
        red: Red channel (0-255)
        green: Green channel (0-255)
        blue: Blue channel (0-255)
    """

    hex: str
    red: int
    green: int
    blue: int

    @property
    def css(self) -> str:
        return f"#{self.hex}"


BLACK = ResolvedColor(hex="000000", red=0, green=0, blue=0)


def parse_color(value: Any) -> Optional[ResolvedColor]:
    """
    Parse a 6-digit hex color, with or without a leading "#".

    Args:
        value: Color string (e.g., "#ff8800", "FF8800")

    Returns:
        ResolvedColor, or None if the value is not exactly six hex digits

    Examples:
        >>> parse_color("#ff8800").css
        '#FF8800'
        >>> parse_color("#abc") is None
        True
    """
    if not isinstance(value, str):
        return None

    digits = value.strip()
    if digits.startswith("#"):
        digits = digits[1:]

    if not HEX_COLOR_PATTERN.match(digits):
        return None

    digits = digits.upper()
    return ResolvedColor(
        hex=digits,
        red=int(digits[0:2], 16),
        green=int(digits[2:4], 16),
        blue=int(digits[4:6], 16),
    )


def is_transparent(value: Any) -> bool:
    """Check for the "transparent" sentinel (case-insensitive, surrounding whitespace ignored)."""
    return isinstance(value, str) and value.strip().lower() == TRANSPARENT


def resolve_text_color(value: Any) -> ResolvedColor:
    """Parse a text color, falling back to black."""
    return parse_color(value) or BLACK


def resolve_background(value: Any) -> Optional[ResolvedColor]:
    """Parse a background color; None means no background (transparent or unparsable)."""
    if is_transparent(value):
        return None
    return parse_color(value)


def _unit_channel(channel: int) -> str:
    # 0.50196 -> "0.502", 1.0 -> "1", 0.0 -> "0"
    return f"{channel / 255:.4f}".rstrip("0").rstrip(".")


def to_dvipng_color(color: Optional[ResolvedColor]) -> str:
    """
    Format a color for dvipng's -bg option.

    Args:
        color: Background color, or None for a transparent background

    Returns:
        "rgb r g b" with channels in [0, 1], or "Transparent"

    Examples:
        >>> to_dvipng_color(parse_color("#FF0033"))
        'rgb 1 0 0.2'
        >>> to_dvipng_color(None)
        'Transparent'
    """
    if color is None:
        return DVIPNG_TRANSPARENT
    channels = " ".join(_unit_channel(c) for c in (color.red, color.green, color.blue))
    return f"rgb {channels}"
