"""
Serving context logger.

Provides logging interface for serving context with automatic [serve] prefix.
"""

from pathlib import Path

from loguru import logger

from texsnap.config import RenderSettings
from texsnap.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[serve]"


def setup_serving_logger(log_dir: Path, settings: RenderSettings, console_level: str = "INFO") -> Path:
    """
    Setup logger for the server process.

    Args:
        log_dir: Directory for this server session
        settings: Active settings, recorded in the provenance header
        console_level: Minimum level echoed to stdout

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="serve",
        log_dir=log_dir,
        extra_provenance={
            "LaTeX compiler": settings.latex_command,
            "Rasterizer": settings.dvipng_command,
            "Vector converter": settings.dvisvgm_command,
            "Scratch directory": settings.scratch_path,
        },
        console_level=console_level,
    )


def _log_info(message: str) -> None:
    """Log info message with [serve] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [serve] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")
