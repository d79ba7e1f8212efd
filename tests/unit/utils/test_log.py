"""
Unit tests for the loguru sink configuration.
"""
import sys

import pytest
from loguru import logger

from actorfsm.model import Settings
from actorfsm.utils import setup_logger


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


class TestSetupLogger:
    """Test setup_logger()."""

    def test_stderr_only(self) -> None:
        """Test only the stderr sink without a log file."""
        sink_ids = setup_logger(Settings(log_level="DEBUG", log_file=None))

        assert len(sink_ids) == 1

    def test_file_sink_respects_level(self, tmp_path) -> None:
        """Test the file sink filters by level."""
        log_file = tmp_path / "logs" / "fsm.log"
        sink_ids = setup_logger(Settings(log_level="WARNING", log_file=str(log_file)))

        logger.info("quiet message")
        logger.warning("loud message")
        logger.complete()

        assert len(sink_ids) == 2
        content = log_file.read_text(encoding="utf-8")
        assert "loud message" in content
        assert "quiet message" not in content
