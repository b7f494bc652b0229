"""
Packaging context logger.

Provides logging interface for packaging context with automatic [package] prefix.
All packaging modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from pdfcore.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[package]"


def setup_packaging_logger(log_dir: Path, archive: Path = None) -> Path:
    """
    Setup logger for packaging context.

    Args:
        log_dir: Directory for this packaging session
        archive: Archive being read or written, recorded in the provenance header

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="package",
        log_dir=log_dir,
        extra_provenance={"Archive": str(archive) if archive else None},
    )


# Wrapper functions with automatic [package] prefix


def _log_info(message: str) -> None:
    """Log info message with [package] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [package] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [package] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [package] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [package] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level packaging-specific logging helpers


def log_package_written(name: str, size: int, num_assets: int) -> None:
    """Log a successfully packed archive."""
    _log_success(f"Packed {name}: {size} bytes, {num_assets} asset(s)")


def log_package_read(name: str, num_nodes: int, num_assets: int) -> None:
    """Log a successfully unpacked archive."""
    _log_success(f"Unpacked {name}: {num_nodes} nodes, {num_assets} asset(s)")
