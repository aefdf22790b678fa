"""
Placeholder substitution for document templates.

Templates mark substitution points with tokens like {{LATEX}} or {{ COLOR }}.
Only tokens whose name has a value are replaced; every other token stays in
the output exactly as written, so a template can carry tokens it never fills.

Recognized names:
    LATEX            Source snippet, verbatim
    COLOR            Text color without "#" (xcolor HTML model)
    COLOR_HEX        Text color with "#" (CSS)
    BG_COLOR         Background without "#", "" when transparent
    BG_COLOR_HEX     Background with "#", "" when transparent
    BG_COLOR_DVIPNG  Background as a dvipng color ("rgb r g b" or "Transparent")
    BG_FILL          \\pagecolor command for the background, "" when transparent
"""

import re
from typing import Dict, Mapping, Optional

from texsnap.contexts.rendering.colors import ResolvedColor, to_dvipng_color

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")

PLACEHOLDER_KEYS = [
    "LATEX",
    "COLOR",
    "COLOR_HEX",
    "BG_COLOR",
    "BG_COLOR_HEX",
    "BG_COLOR_DVIPNG",
    "BG_FILL",
]


def substitute_placeholders(template: str, values: Mapping[str, Optional[str]]) -> str:
    """
    Replace {{ NAME }} tokens with values.

    Args:
        template: Template text
        values: Mapping of token name to replacement; None values are skipped

    Returns:
        Template with known tokens replaced and unknown tokens left literal

    Examples:
        >>> substitute_placeholders("{{A}}-{{B}}", {"A": "x"})
        'x-{{B}}'
    """

    def replace(match: re.Match) -> str:
        value = values.get(match.group(1))
        return match.group(0) if value is None else value

    return PLACEHOLDER_PATTERN.sub(replace, template)


def build_substitutions(
    source: str, text_color: ResolvedColor, background: Optional[ResolvedColor]
) -> Dict[str, str]:
    """
    Build the value map for every recognized placeholder.

    Args:
        source: LaTeX snippet
        text_color: Resolved text color
        background: Resolved background, or None for transparent

    Returns:
        Dict keyed by PLACEHOLDER_KEYS
    """
    return {
        "LATEX": source,
        "COLOR": text_color.hex,
        "COLOR_HEX": text_color.css,
        "BG_COLOR": background.hex if background else "",
        "BG_COLOR_HEX": background.css if background else "",
        "BG_COLOR_DVIPNG": to_dvipng_color(background),
        "BG_FILL": f"\\pagecolor[HTML]{{{background.hex}}}" if background else "",
    }
