"""Render request and compiled artifact data structures."""

import base64
from dataclasses import dataclass
from enum import Enum
from typing import Optional

DEFAULT_TEXT_COLOR = "#000000"
DEFAULT_BACKGROUND = "transparent"
DEFAULT_RESOLUTION = 300


class OutputKind(str, Enum):
    RASTER = "raster"
    VECTOR = "vector"

    @property
    def mime_type(self) -> str:
        return "image/png" if self is OutputKind.RASTER else "image/svg+xml"


class RenderMode(str, Enum):
    """
    How the source is turned into a document.

    FULL: source is a complete LaTeX document, used verbatim
    TIKZ: source is a TikZ drawing, wrapped in the drawing template
    MATH: source is math markup, wrapped in inline-math delimiters
    """

    FULL = "full"
    TIKZ = "tikz"
    MATH = "math"

    @classmethod
    def from_flags(cls, full: bool = False, tikz: bool = False) -> "RenderMode":
        """Map the two mode flags to one mode; full wins when both are set."""
        if full:
            return cls.FULL
        if tikz:
            return cls.TIKZ
        return cls.MATH


@dataclass
class CompileRequest:
    """
    A single render request.

    Attributes:
        source: LaTeX snippet (or full document in FULL mode)
        output_kind: Requested output (TIKZ mode always produces VECTOR)
        text_color: Hex color for text; unparsable values fall back to black
        background_color: Hex color or "transparent"; unparsable means no background
        resolution: DPI for raster output
        mode: Document assembly mode
        custom_template: Template with {{ PLACEHOLDER }} tokens; ignored in FULL mode
    """

    source: str
    output_kind: OutputKind = OutputKind.RASTER
    text_color: str = DEFAULT_TEXT_COLOR
    background_color: str = DEFAULT_BACKGROUND
    resolution: int = DEFAULT_RESOLUTION
    mode: RenderMode = RenderMode.MATH
    custom_template: Optional[str] = None

    @property
    def effective_output_kind(self) -> OutputKind:
        if self.mode is RenderMode.TIKZ:
            return OutputKind.VECTOR
        return self.output_kind


@dataclass
class CompiledArtifact:
    """Bytes of a rendered image and their MIME type."""

    data: bytes
    mime_type: str

    def to_data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"
