"""Tests for logger configuration."""

import pytest
from loguru import logger

from shootsync.core.logger import setup_logger, split_tag


class TestSplitTag:
    """Test extraction of the leading [TAG] of a log message."""

    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            ("[RECONCILE] Starting reconciliation", ("RECONCILE", "Starting reconciliation")),
            ("[PAGE_LENGTH] 3 scene(s) updated", ("PAGE_LENGTH", "3 scene(s) updated")),
            ("Database schema ensured", ("-", "Database schema ensured")),
            ("[not a tag] text", ("-", "[not a tag] text")),
        ],
    )
    def test_split(self, message, expected):
        assert split_tag(message) == expected


class TestSetupLogger:
    """Test sinks configured by setup_logger."""

    @pytest.fixture(autouse=True)
    def restore_logger(self):
        yield
        setup_logger(level="WARNING", log_file=None)

    def test_file_sink_has_tag_column(self, tmp_path):
        log_file = tmp_path / "logs" / "shootsync.log"
        setup_logger(level="INFO", log_file=str(log_file))

        logger.info("[RECONCILE] Completed reconciliation for project_id=p1")
        logger.debug("[SCHEDULE] filtered out at INFO")

        lines = log_file.read_text(encoding="utf-8").splitlines()
        line = next(entry for entry in lines if "Completed reconciliation" in entry)
        assert "| RECONCILE   |" in line
        assert "[RECONCILE]" not in line
        assert not any("filtered out" in entry for entry in lines)
