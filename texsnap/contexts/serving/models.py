from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from texsnap.contexts.rendering.request import (
    DEFAULT_BACKGROUND,
    DEFAULT_TEXT_COLOR,
    CompileRequest,
    OutputKind,
    RenderMode,
)

# Accepted spellings of the output format
FORMAT_ALIASES = {
    "png": OutputKind.RASTER,
    "raster": OutputKind.RASTER,
    "svg": OutputKind.VECTOR,
    "vector": OutputKind.VECTOR,
}
TRUE_VALUES = {"1", "true", "yes", "on"}


# -----------------------------------------
# Requests
# -----------------------------------------
class CompilePayload(BaseModel):
    """
    Body of POST /api/compile.

    Only `latex` is required. Malformed optional fields fall back to their
    defaults instead of rejecting the request.
    """

    latex: str
    format: str = "png"
    color: str = DEFAULT_TEXT_COLOR
    bgColor: str = DEFAULT_BACKGROUND
    dpi: Optional[int] = None
    isFullMode: bool = False
    isTikzMode: bool = False
    customTemplate: Optional[str] = None
    templateId: Optional[str] = None

    @field_validator("format", mode="before")
    @classmethod
    def _default_format(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip().lower() in FORMAT_ALIASES:
            return value.strip().lower()
        return "png"

    @field_validator("color", mode="before")
    @classmethod
    def _default_color(cls, value: Any) -> str:
        return value if isinstance(value, str) else DEFAULT_TEXT_COLOR

    @field_validator("bgColor", mode="before")
    @classmethod
    def _default_background(cls, value: Any) -> str:
        return value if isinstance(value, str) else DEFAULT_BACKGROUND

    @field_validator("dpi", mode="before")
    @classmethod
    def _positive_dpi(cls, value: Any) -> Optional[int]:
        if isinstance(value, bool):
            return None
        try:
            dpi = int(value)
        except (TypeError, ValueError):
            return None
        return dpi if dpi > 0 else None

    @field_validator("isFullMode", "isTikzMode", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in TRUE_VALUES

    @field_validator("customTemplate", "templateId", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) and value.strip() else None

    def to_request(self, default_resolution: int, custom_template: Optional[str] = None) -> CompileRequest:
        """
        Build the pipeline request.

        Args:
            default_resolution: DPI used when the payload has none
            custom_template: Template text overriding `customTemplate`
                             (e.g., sourced from the template store)
        """
        return CompileRequest(
            source=self.latex,
            output_kind=FORMAT_ALIASES[self.format],
            text_color=self.color,
            background_color=self.bgColor,
            resolution=self.dpi or default_resolution,
            mode=RenderMode.from_flags(full=self.isFullMode, tikz=self.isTikzMode),
            custom_template=custom_template or self.customTemplate,
        )


class TemplatePayload(BaseModel):
    """Body of POST /api/templates."""

    name: str
    latex: str


# -----------------------------------------
# Responses
# -----------------------------------------
class CompileResponse(BaseModel):
    success: bool
    image: Optional[str] = None
    error: Optional[str] = None


class TemplateOut(BaseModel):
    id: str
    name: str
    latex: str


class TemplateListResponse(BaseModel):
    success: bool = True
    templates: List[TemplateOut] = Field(default_factory=list)
