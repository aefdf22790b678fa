"""
LaTeX Snippet Compilation Module

Compiles a render request into an image in two stages:

    1. latex     <id>.tex -> <id>.dvi
    2. dvipng    <id>.dvi -> <id>.png   (raster)
       dvisvgm   <id>.dvi -> <id>.svg   (vector)

Success of each stage is defined only by the exit status of its command.
A failed stage ends the request; nothing is retried and no timeout is applied.
"""

import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from texsnap.config import RenderSettings
from texsnap.contexts.rendering.colors import ResolvedColor, resolve_background, to_dvipng_color
from texsnap.contexts.rendering.exceptions import (
    ConversionError,
    RenderError,
    RenderIOError,
    TypesetError,
)
from texsnap.contexts.rendering.logger import (
    _log_debug,
    log_compile_result,
    log_compile_start,
    log_stage_failure,
)
from texsnap.contexts.rendering.postprocess import finalize_artifact
from texsnap.contexts.rendering.request import CompiledArtifact, CompileRequest, OutputKind
from texsnap.contexts.rendering.workspace import Workspace, WorkspaceManager
from texsnap.contexts.templating.document import render_document
from texsnap.contexts.templating.registry import BuiltinTemplateRegistry

TYPESET_FALLBACK_MESSAGE = "Compilation failed"
CONVERT_FALLBACK_MESSAGE = "Conversion failed"
COMMAND_NOT_FOUND = 127


@dataclass
class ProcessResult:
    """
    Outcome of one external command.

    Attributes:
        returncode: Exit status
        stdout: Captured standard output
        stderr: Captured standard error
        command: Command that was run
    """

    returncode: int
    stdout: str = ""
    stderr: str = ""
    command: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.returncode == 0


CommandRunner = Callable[[List[str], Path], ProcessResult]


def run_command(command: List[str], cwd: Path) -> ProcessResult:
    """
    Run a command to completion and capture its output.

    Blocks the calling thread until the process exits. A missing executable is
    reported like a shell would (exit status 127) rather than raised.

    Args:
        command: Executable and arguments
        cwd: Working directory

    Returns:
        ProcessResult
    """
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",  # Replace invalid UTF-8 bytes instead of crashing
        )
    except FileNotFoundError:
        return ProcessResult(
            returncode=COMMAND_NOT_FOUND,
            stderr=f"{command[0]}: command not found",
            command=command,
        )

    return ProcessResult(
        returncode=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr,
        command=command,
    )


def extract_log_errors(log_content: str) -> List[str]:
    """
    Collect LaTeX error lines from a log.

    TeX marks errors with a leading "!" (e.g., "! Undefined control sequence.").

    Args:
        log_content: Content of the .log file

    Returns:
        Error lines in log order
    """
    return [line for line in log_content.splitlines() if line.startswith("!")]


def _typeset_diagnostic(workspace: Workspace, result: ProcessResult) -> str:
    errors = []
    if workspace.log_path.exists():
        # latex writes log files in latin-1 (font metadata contains non-UTF-8)
        errors = extract_log_errors(workspace.log_path.read_text(encoding="latin-1"))

    if errors:
        return "\n".join(errors)
    return result.stderr.strip() or TYPESET_FALLBACK_MESSAGE


def typeset(
    workspace: Workspace, settings: RenderSettings, runner: CommandRunner = run_command
) -> Path:
    """
    Stage 1: compile <id>.tex to <id>.dvi.

    Returns:
        Path to the DVI file

    Raises:
        TypesetError: If latex exits non-zero
    """
    command = [
        settings.latex_command,
        "-interaction=nonstopmode",
        f"-output-directory={workspace.scratch_dir}",
        str(workspace.tex_path),
    ]
    result = runner(command, workspace.scratch_dir)

    if not result.success:
        log_stage_failure(workspace.id, "typeset", result)
        raise TypesetError(_typeset_diagnostic(workspace, result), workspace_id=workspace.id)

    return workspace.dvi_path


def _check_conversion(workspace: Workspace, result: ProcessResult) -> None:
    if not result.success:
        log_stage_failure(workspace.id, "convert", result)
        raise ConversionError(
            result.stderr.strip() or CONVERT_FALLBACK_MESSAGE, workspace_id=workspace.id
        )


def rasterize(
    workspace: Workspace,
    resolution: int,
    background: Optional[ResolvedColor],
    settings: RenderSettings,
    runner: CommandRunner = run_command,
) -> Path:
    """
    Stage 2 (raster): convert <id>.dvi to a tightly cropped <id>.png.

    The background is drawn by dvipng (-bg), so no post-processing is needed.

    Raises:
        ConversionError: If dvipng exits non-zero
    """
    command = [
        settings.dvipng_command,
        "-T",
        "tight",
        "-D",
        str(resolution),
        "-bg",
        to_dvipng_color(background),
        "-o",
        str(workspace.png_path),
        str(workspace.dvi_path),
    ]
    _check_conversion(workspace, runner(command, workspace.scratch_dir))
    return workspace.png_path


def vectorize(
    workspace: Workspace, settings: RenderSettings, runner: CommandRunner = run_command
) -> Path:
    """
    Stage 2 (vector): convert <id>.dvi to <id>.svg.

    Glyphs are converted to paths (--no-fonts) so the SVG has no font
    dependencies. dvisvgm ignores the background; see postprocess.

    Raises:
        ConversionError: If dvisvgm exits non-zero
    """
    command = [
        settings.dvisvgm_command,
        "--no-fonts",
        "-o",
        str(workspace.svg_path),
        str(workspace.dvi_path),
    ]
    _check_conversion(workspace, runner(command, workspace.scratch_dir))
    return workspace.svg_path


def compile_snippet(
    request: CompileRequest,
    manager: WorkspaceManager,
    settings: RenderSettings = None,
    runner: CommandRunner = run_command,
    registry: BuiltinTemplateRegistry = None,
) -> CompiledArtifact:
    """
    Render a request into an image.

    Allocates a workspace, writes the assembled document, runs both stages,
    post-processes the output, and releases the workspace whatever the outcome.

    Args:
        request: Render request
        manager: Workspace manager bound to the prepared scratch directory
        settings: Tool commands (defaults to RenderSettings())
        runner: Command runner (replaceable for tests)
        registry: Built-in template registry (defaults to one built from settings)

    Returns:
        CompiledArtifact with the image bytes and MIME type

    Raises:
        TypesetError: latex failed
        ConversionError: dvipng or dvisvgm failed
        RenderIOError: Source could not be written or output could not be read
    """
    settings = settings or RenderSettings()
    registry = registry or BuiltinTemplateRegistry(settings)
    output_kind = request.effective_output_kind
    background = resolve_background(request.background_color)
    start_time = time.time()

    with manager.workspace() as workspace:
        log_compile_start(workspace.id, request.mode.value, output_kind.value)
        try:
            document = render_document(request, registry)
            workspace.tex_path.write_text(document, encoding="utf-8")

            typeset(workspace, settings, runner)
            _log_debug(f"{workspace.id}: typeset succeeded")

            if output_kind is OutputKind.VECTOR:
                output_path = vectorize(workspace, settings, runner)
            else:
                output_path = rasterize(workspace, request.resolution, background, settings, runner)

            artifact = finalize_artifact(output_path, output_kind, background)
        except RenderError as e:
            log_compile_result(workspace.id, error=e, elapsed_time=time.time() - start_time)
            raise
        except OSError as e:
            error = RenderIOError(str(e), workspace_id=workspace.id)
            log_compile_result(workspace.id, error=error, elapsed_time=time.time() - start_time)
            raise error from e

        log_compile_result(workspace.id, elapsed_time=time.time() - start_time)
        return artifact
