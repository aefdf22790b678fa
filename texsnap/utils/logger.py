"""
Shared loguru setup for texsnap processes.

Each process (the HTTP server, the render CLI) calls setup_logger once to get
a session log file plus console output, headed by a provenance block.
Prefixed wrappers for each context live in contexts/{context}/logger.py.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[dict] = None,
    level_colors: Optional[dict] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Replace loguru's handlers with a session log file and a console sink.

    The file sink records DEBUG and up and is enqueued, since compile requests
    log from the server's worker threads. The console sink starts at
    console_level.

    Args:
        context_name: Names the log file, e.g. "serve" -> serve.log
        log_dir: Session directory, created if missing
        extra_provenance: Extra header lines such as the toolchain commands
        level_colors: Console colors merged over LEVEL_COLORS
        console_level: Minimum level echoed to stdout

    Returns:
        Path to log file
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()

    for level_name, color in {**LEVEL_COLORS, **(level_colors or {})}.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG", enqueue=True)
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=console_level.upper(), colorize=True)

    log_provenance(extra_provenance)

    return log_file


def log_provenance(extra_context: Optional[dict] = None) -> None:
    """Log how this process was started, followed by extra_context lines."""
    logger.info("=" * 80)
    logger.info(f"Script: {sys.argv[0]}")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python: {sys.version.split()[0]}")

    for key, value in (extra_context or {}).items():
        logger.info(f"{key}: {value}")

    logger.info("=" * 80)
