"""
Templating context logger.

Provides logging interface for templating context with automatic [template] prefix.
All templating modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from pdfcore.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[template]"


def setup_templating_logger(log_dir: Path, phase: str = "template") -> Path:
    """
    Setup logger for templating context.

    Args:
        log_dir: Directory for this templating session
        phase: Phase name for provenance ("import", "export" or "roundtrip")

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="template",
        log_dir=log_dir,
        extra_provenance={"Phase": phase},
    )


# Wrapper functions with automatic [template] prefix


def _log_info(message: str) -> None:
    """Log info message with [template] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [template] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [template] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [template] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [template] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level templating-specific logging helpers


def log_conversion_start(source_name: str, phase_name: str) -> None:
    """Log start of an import or export."""
    _log_info(f"Starting to {phase_name} {source_name}")


def log_conversion_result(
    source_name: str,
    node_count: int,
    unresolved_assets: int,
    elapsed_time: float,
    phase_name: str,
) -> None:
    """
    Log the outcome of an import or export.

    Args:
        source_name: Template or markup identifier
        node_count: Number of template nodes converted
        unresolved_assets: Images rendered as placeholders
        elapsed_time: Time taken
        phase_name: "import" or "export"
    """
    _log_success(f"{source_name}: {phase_name} converted {node_count} nodes ({elapsed_time:.2f}s)")
    if unresolved_assets:
        _log_warning(f"  {unresolved_assets} image(s) left as placeholders")


def log_roundtrip_result(source_name: str, result) -> None:
    """
    Log roundtrip validation result.

    Args:
        source_name: Template identifier
        result: RoundtripResult from validate_roundtrip()
    """
    if result.success:
        _log_success(f"{source_name}: roundtrip validation passed ({result.node_count} nodes)")
    else:
        _log_error(f"{source_name}: roundtrip validation failed ({len(result.diffs)} diffs)")
        for diff in result.diffs[:10]:
            _log_error(f"  {diff}")
        if len(result.diffs) > 10:
            _log_error(f"  ... and {len(result.diffs) - 10} more diffs")
