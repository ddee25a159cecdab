"""Tests for logging setup."""

import logging
from pathlib import Path

from varometer.logging_config import (
    PROGRESS_LOGGER_NAME,
    get_log_file_path,
    get_progress_logger,
    setup_logging,
)


class TestSetupLogging:
    def test_console_only_by_default(self) -> None:
        assert setup_logging() is None
        assert get_log_file_path() is None

    def test_file_handler_with_log_dir(self, tmp_path: Path) -> None:
        log_file = setup_logging(log_dir=str(tmp_path), job_name="job")

        assert log_file is not None
        assert Path(log_file).parent == tmp_path / "logs"
        assert Path(log_file).name.startswith("job_")

        logging.getLogger("varometer.test").debug("written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "written to file" in Path(log_file).read_text()

    def test_idempotent(self, tmp_path: Path) -> None:
        first = setup_logging(log_dir=str(tmp_path))

        assert setup_logging(log_dir=str(tmp_path / "other")) == first


class TestProgressLogger:
    def test_does_not_propagate(self) -> None:
        logger = get_progress_logger()

        assert logger.name == PROGRESS_LOGGER_NAME
        assert logger.level == logging.INFO
        assert logger.propagate is False
        assert get_progress_logger().handlers == logger.handlers
        assert len(logger.handlers) == 1
