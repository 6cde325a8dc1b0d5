"""Tests for loguru setup and console helpers."""

import sys

import pytest
from loguru import logger
from rich.console import Console

from lofi_radio.core.config import LoggingConfig
from lofi_radio.core.console import print_table, set_console
from lofi_radio.core.output import setup_from_config, setup_loguru


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_setup_loguru_writes_to_file(tmp_path, restore_logger):
    log_file = tmp_path / "logs" / "lofi.log"

    assert setup_loguru(log_file, level="DEBUG") == log_file
    logger.debug("hello from the test")
    logger.remove()

    content = log_file.read_text(encoding="utf-8")
    assert "Loguru initialized" in content
    assert "hello from the test" in content


def test_setup_from_config_respects_level(tmp_path, restore_logger):
    log_file = tmp_path / "lofi.log"
    setup_from_config(LoggingConfig(level="WARNING", log_file=str(log_file)))

    logger.info("quiet")
    logger.warning("loud")
    logger.remove()

    content = log_file.read_text(encoding="utf-8")
    assert "quiet" not in content
    assert "loud" in content


def test_print_table_numbers_rows():
    console = Console(record=True, width=80)
    set_console(console)
    try:
        print_table("Tracks", ["Title"], [("Alpha",), ("Beta",)])
    finally:
        set_console(None)

    text = console.export_text()
    assert "Tracks" in text
    assert "1" in text and "Alpha" in text
    assert "2" in text and "Beta" in text
