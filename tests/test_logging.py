"""Tests for logging setup."""

import json
import logging
from pathlib import Path

import pytest

from sp3orbit.utils.logging import LOG_FILE_NAME, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    logging.basicConfig(handlers=[logging.NullHandler()], force=True)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_json_records_in_log_file(self, tmp_path: Path):
        setup_logging(log_dir=tmp_path, log_to_file=True, log_to_console=False, json_format=True)

        get_logger("sp3orbit.test").info("Read SP3 file", path="a.sp3")

        record = json.loads((tmp_path / LOG_FILE_NAME).read_text().splitlines()[-1])
        assert record["event"] == "Read SP3 file"
        assert record["path"] == "a.sp3"
        assert record["level"] == "info"

    def test_level_filters_records(self, tmp_path: Path):
        setup_logging(level="WARNING", log_dir=tmp_path, log_to_file=True, log_to_console=False)

        logger = get_logger("sp3orbit.test")
        logger.info("Hidden")
        logger.warning("Shown")

        text = (tmp_path / LOG_FILE_NAME).read_text()
        assert "Shown" in text
        assert "Hidden" not in text

    def test_file_needs_directory(self, tmp_path: Path):
        setup_logging(log_dir=None, log_to_file=True, log_to_console=False)
        assert not (tmp_path / LOG_FILE_NAME).exists()
