"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from pdfcore.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path) -> Path:
    """
    Setup logger for rendering context.

    Configures loguru with provenance tracking and the configured engine.

    Args:
        log_dir: Directory for this rendering session

    Returns:
        Path to log file

    Example:
        from pdfcore.contexts.rendering.logger import setup_rendering_logger

        log_file = setup_rendering_logger(log_dir)
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={"Engine": os.getenv("PDFCORE_ENGINE")},
    )


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


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_render_start(template_name: str, num_assets: int, engine_name: str) -> None:
    """Log start of a render with context."""
    _log_info(f"Rendering {template_name} with {engine_name}")
    _log_debug(f"  Assets: {num_assets}")


def log_render_result(template_name: str, result, elapsed_time: float) -> None:
    """
    Log render result.

    Args:
        template_name: Template identifier
        result: RenderResult from render_package()
        elapsed_time: Time taken to render
    """
    if result.success:
        _log_success(f"{template_name}: rendered {len(result.pdf_bytes)} bytes ({elapsed_time:.2f}s)")
        if result.output_path:
            _log_debug(f"  PDF: {result.output_path}")
    else:
        _log_error(f"{template_name}: render failed ({elapsed_time:.2f}s)")
        for i, err in enumerate(result.errors[:5], 1):
            _log_error(f"  Error {i}: {err}")
