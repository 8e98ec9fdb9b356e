"""
Tests for logging setup — stderr only, optional rotating file
"""

import logging
from logging.handlers import RotatingFileHandler

from shnote.log_utils import LOGGER_NAME, reset_logging, setup_logging


class TestSetupLogging:

    def test_default_level_warning(self):
        logger = setup_logging()
        assert logger.level == logging.WARNING
        assert not logger.propagate

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("SHNOTE_LOG", "debug")
        assert setup_logging().level == logging.DEBUG

    def test_idempotent(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger(LOGGER_NAME).handlers) == 1

    def test_file_handler(self, tmp_path):
        path = tmp_path / "logs" / "shnote.log"
        logger = setup_logging("info", path)
        assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
        logging.getLogger(LOGGER_NAME + ".test").info("hello")
        reset_logging()
        assert "hello" in path.read_text()

    def test_unwritable_file_falls_back_to_stderr(self, tmp_path, monkeypatch):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        monkeypatch.setenv("SHNOTE_LOG_FILE", str(blocker / "shnote.log"))
        logger = setup_logging()
        assert len(logger.handlers) == 1
        assert not any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
