"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[render]"


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_compile_start(workspace_id: str, mode: str, output_kind: str) -> None:
    """Log start of a render request."""
    _log_info(f"Rendering {workspace_id}: mode={mode}, output={output_kind}")


def log_stage_failure(workspace_id: str, stage: str, result) -> None:
    """
    Log a failed external command with its full output.

    Args:
        workspace_id: Request workspace id
        stage: "typeset" or "convert"
        result: ProcessResult of the failed command
    """
    _log_error(f"{workspace_id}: {stage} failed (exit {result.returncode})")
    _log_debug(f"  Command: {' '.join(result.command)}")

    # Raw output keeps multi-line compiler output readable in the log file
    if result.stdout:
        logger.opt(raw=True).debug(
            f"\n{'=' * 80}\n{stage.upper()} STDOUT:\n{'=' * 80}\n{result.stdout}\n"
        )
    if result.stderr:
        logger.opt(raw=True).debug(
            f"\n{'=' * 80}\n{stage.upper()} STDERR:\n{'=' * 80}\n{result.stderr}\n"
        )


def log_compile_result(workspace_id: str, error=None, elapsed_time: float = 0.0) -> None:
    """
    Log the outcome of a render request.

    Args:
        workspace_id: Request workspace id
        error: RenderError if the request failed, None on success
        elapsed_time: Wall time of the request in seconds
    """
    if error is None:
        _log_success(f"{workspace_id}: rendered ({elapsed_time:.2f}s)")
    else:
        _log_error(f"{workspace_id}: {error.stage} error ({elapsed_time:.2f}s)")
        for line in error.diagnostic.splitlines()[:5]:
            _log_error(f"  {line}")
