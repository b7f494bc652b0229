"""
Shared loguru setup for the context loggers.

Each context wraps `setup_logger` in contexts/{context}/logger.py and logs through
its own prefixed helpers; library code never adds sinks itself.
"""

import sys
from pathlib import Path

from loguru import logger

from pdfcore import __version__


def setup_logger(context_name: str, log_dir: Path, extra_provenance: dict = None) -> Path:
    """
    Route loguru output for one CLI session.

    Replaces any existing sinks with a DEBUG file sink at
    `<log_dir>/<context_name>.log` and an INFO console sink, then writes a
    provenance header.

    Args:
        context_name: Context identifier ("template", "package" or "render")
        log_dir: Directory for this session, created if missing
        extra_provenance: Additional key-value pairs for the header

    Returns:
        Path to log file
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    logger.add(
        log_file, format="{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}", level="DEBUG"
    )
    logger.add(
        sys.stdout,
        format="{time:HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>",
        level="INFO",
        colorize=True,
    )

    _log_provenance(context_name, extra_provenance)
    return log_file


def _log_provenance(context_name: str, extra: dict = None) -> None:
    logger.info("=" * 80)
    logger.info(f"pdfcore {__version__} [{context_name}]")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    for key, value in (extra or {}).items():
        logger.info(f"{key}: {value}")
    logger.info("=" * 80)
