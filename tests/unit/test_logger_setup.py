"""Unit tests for the shared loguru setup."""

import pytest
from loguru import logger

from pdfcore import __version__
from pdfcore.contexts.packaging.logger import _log_warning
from pdfcore.utils.logger import setup_logger


@pytest.fixture(autouse=True)
def drop_sinks():
    yield
    logger.remove()


@pytest.mark.unit
def test_setup_logger_writes_provenance_and_debug(tmp_path):
    log_file = setup_logger("package", tmp_path / "logs", {"Archive": "invoice.pdfCoret"})
    logger.debug("file-only detail")
    logger.remove()

    text = log_file.read_text(encoding="utf-8")
    assert log_file == tmp_path / "logs" / "package.log"
    assert f"pdfcore {__version__} [package]" in text
    assert "Archive: invoice.pdfCoret" in text
    assert "file-only detail" in text


@pytest.mark.unit
def test_context_wrappers_add_prefix(tmp_path, capsys):
    setup_logger("package", tmp_path)
    _log_warning("Skipping unsafe archive member")

    assert "[package] Skipping unsafe archive member" in capsys.readouterr().out
