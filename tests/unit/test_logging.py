"""
Tests for logging utilities.
"""

import json
import logging
from logging.handlers import RotatingFileHandler

import pytest

from quotation_core.logging import JsonFormatter, configure_logging_from_env, setup_logging, timed_operation


@pytest.fixture
def restore_logging():
    """Remove the handlers setup_logging installs and restore levels."""
    root = logging.getLogger()
    package = logging.getLogger("quotation_core")
    root_level, package_level = root.level, package.level
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, RotatingFileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(root_level)
    package.setLevel(package_level)


class TestSetupLogging:
    """Test logging setup."""

    def test_file_handler(self, temp_dir, restore_logging):
        """Test logs are written to the configured file."""
        log_file = temp_dir / "logs" / "engine.log"
        logger = setup_logging(level="DEBUG", log_file=log_file)
        logger.info("hello from tests")

        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "hello from tests" in log_file.read_text(encoding="utf-8")

    def test_from_env(self, monkeypatch, restore_logging):
        """Test the level comes from QUOTATION_CORE_LOG_LEVEL."""
        monkeypatch.setenv("QUOTATION_CORE_LOG_LEVEL", "warning")
        logger = configure_logging_from_env()
        assert logger.level == logging.WARNING


class TestJsonFormatter:
    """Test structured log output."""

    def test_format_with_extra(self):
        """Test extra fields appear in the JSON document."""
        record = logging.LogRecord("quotation_core", logging.INFO, __file__, 10, "selected %s", ("modern",), None)
        record.template_type = "modern"

        entry = json.loads(JsonFormatter().format(record))
        assert entry["message"] == "selected modern"
        assert entry["level"] == "INFO"
        assert entry["template_type"] == "modern"


class TestTimedOperation:
    """Test the timing decorator."""

    def test_sync(self, caplog):
        """Test sync callables are timed."""
        @timed_operation("tests.sync")
        def work(x):
            return x * 2

        with caplog.at_level(logging.INFO, logger="quotation_core.performance"):
            assert work(4) == 8
        assert "Operation 'tests.sync' completed" in caplog.text

    @pytest.mark.asyncio
    async def test_async_failure(self, caplog):
        """Test async failures are logged and re-raised."""
        @timed_operation("tests.async")
        async def fail():
            raise ValueError("nope")

        with caplog.at_level(logging.INFO, logger="quotation_core.performance"):
            with pytest.raises(ValueError):
                await fail()

        records = [r for r in caplog.records if r.name == "quotation_core.performance"]
        assert records[-1].levelno == logging.ERROR
        assert records[-1].error_type == "ValueError"
