"""Touch-ups applied to produced images before they are returned."""

import re
from pathlib import Path
from typing import Optional

from texsnap.contexts.rendering.colors import ResolvedColor
from texsnap.contexts.rendering.request import CompiledArtifact, OutputKind

SVG_OPEN_TAG = re.compile(r"<svg\b[^>]*>")


def inject_svg_background(svg_text: str, css_color: str) -> str:
    """
    Insert a full-canvas filled rectangle right after the root <svg> tag.

    dvisvgm has no background option, so the background is drawn as the first
    child of the root element. Only the first <svg ...> tag is touched.

    Args:
        svg_text: SVG document
        css_color: Fill color (e.g., "#00FF00")

    Returns:
        SVG document with the rectangle, or unchanged text if there is no <svg> tag
    """
    rect = f'<rect width="100%" height="100%" fill="{css_color}"/>'
    return SVG_OPEN_TAG.sub(lambda match: match.group(0) + rect, svg_text, count=1)


def finalize_artifact(
    output_path: Path, output_kind: OutputKind, background: Optional[ResolvedColor]
) -> CompiledArtifact:
    """
    Read a produced image and apply output-specific touch-ups.

    PNG output already has its background from dvipng and is returned as-is.

    Raises:
        OSError: If the output file cannot be read
    """
    if output_kind is OutputKind.VECTOR and background is not None:
        svg_text = output_path.read_text(encoding="utf-8")
        data = inject_svg_background(svg_text, background.css).encode("utf-8")
    else:
        data = output_path.read_bytes()

    return CompiledArtifact(data=data, mime_type=output_kind.mime_type)
