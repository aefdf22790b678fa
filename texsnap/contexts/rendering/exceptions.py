"""Exceptions raised by the rendering context."""

from typing import Optional

TYPESET_STAGE = "typeset"
CONVERT_STAGE = "convert"
IO_STAGE = "io"


class RenderError(Exception):
    """
    Base exception for a failed render request.

    The diagnostic is the single message surfaced to the caller.

    Attributes:
        diagnostic: Error text returned to the caller
        stage: Pipeline stage that failed ("typeset", "convert", "io")
        workspace_id: Id of the request workspace, if one was allocated
    """

    stage = "render"

    def __init__(self, diagnostic: str, workspace_id: Optional[str] = None):
        self.diagnostic = diagnostic
        self.workspace_id = workspace_id
        super().__init__(diagnostic)


class TypesetError(RenderError):
    """latex exited non-zero. Diagnostic comes from the "!" lines of its log."""

    stage = TYPESET_STAGE


class ConversionError(RenderError):
    """dvipng or dvisvgm exited non-zero. Diagnostic is the captured stderr."""

    stage = CONVERT_STAGE


class RenderIOError(RenderError):
    """The source could not be written or the produced artifact could not be read."""

    stage = IO_STAGE
