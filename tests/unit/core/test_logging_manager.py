"""
test_logging_manager.py
-----------------------
Unit tests for dreamdiary.core.logging_manager.

Covers DiaryLogger file output, NullLogger, safe_logger and handle_cli_error.
"""
import pytest
from unittest.mock import MagicMock

import click

from dreamdiary.core.exceptions import StorageError
from dreamdiary.core.logging_manager import (
    DiaryLogger,
    NullLogger,
    handle_cli_error,
    safe_logger,
)


@pytest.fixture
def diary_logger(tmp_dir):
    logger = DiaryLogger(tmp_dir / "logs", component_name="test_component")
    yield logger
    logger.close()


class TestDiaryLogger:
    """Test DiaryLogger file output."""

    def test_creates_log_directory(self, diary_logger, tmp_dir):
        """Test that the log directory is created on init."""
        assert (tmp_dir / "logs").is_dir()

    def test_log_operation_writes_component_log(self, diary_logger, tmp_dir):
        """Test operations land in <component>.log as JSON details."""
        diary_logger.log_operation("add_entry", {"id": "abc"})

        content = (tmp_dir / "logs" / "test_component.log").read_text()
        assert "OPERATION - add_entry" in content
        assert '"id": "abc"' in content

    def test_log_error_writes_errors_log(self, diary_logger, tmp_dir):
        """Test errors and their context land in errors.log."""
        diary_logger.log_error(StorageError("disk full"), {"collection": "dreams"})

        content = (tmp_dir / "logs" / "errors.log").read_text()
        assert "StorageError: disk full" in content
        assert "collection=dreams" in content

    def test_log_debug_without_details(self, diary_logger, tmp_dir):
        """Test debug messages without details."""
        diary_logger.log_debug("State loaded")

        content = (tmp_dir / "logs" / "test_component.log").read_text()
        assert "DEBUG - State loaded" in content

    def test_log_cli_error_returns_clean_message(self, diary_logger):
        """Test CLI error formatting without traceback."""
        message = diary_logger.log_cli_error(StorageError("disk full"))
        assert message == "❌ StorageError: disk full"

    def test_log_cli_error_with_traceback(self, diary_logger):
        """Test CLI error formatting with traceback appended."""
        message = diary_logger.log_cli_error(StorageError("disk full"), show_traceback=True)
        assert message.startswith("❌ StorageError: disk full\n\n")


class TestNullLogger:
    """Test NullLogger no-op behavior."""

    def test_null_logger_methods_do_nothing(self):
        """Test that all NullLogger methods can be called without error."""
        logger = NullLogger()

        logger.log_operation("test", {"key": "value"})
        logger.log_error(Exception("test"), {"context": "test"})
        logger.log_debug("debug message")
        logger.log_info("info message", {"key": "value"})
        logger.log_warning("warning message")

    def test_null_logger_cli_error_returns_message(self):
        """Test that the NullLogger still formats CLI errors."""
        result = NullLogger().log_cli_error(ValueError("bad value"))
        assert result == "❌ ValueError: bad value"


class TestSafeLogger:
    """Test safe_logger helper function."""

    def test_returns_logger_when_provided(self):
        """Test that safe_logger returns the provided logger."""
        mock_logger = MagicMock(spec=DiaryLogger)
        assert safe_logger(mock_logger) is mock_logger

    def test_returns_null_logger_when_none(self):
        """Test that safe_logger returns a NullLogger when None."""
        assert isinstance(safe_logger(None), NullLogger)

    def test_null_logger_is_singleton(self):
        """Test that safe_logger returns the same NullLogger instance."""
        assert safe_logger(None) is safe_logger(None)


class TestHandleCliError:
    """Test handle_cli_error."""

    def test_logs_echoes_and_exits(self, capsys):
        """Test error is logged with context, printed and exits with code."""
        mock_logger = MagicMock(spec=DiaryLogger)
        mock_logger.log_cli_error.return_value = "❌ StorageError: boom"
        ctx = click.Context(click.Command("test"), obj={"logger": mock_logger})

        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(
                ctx, StorageError("boom"), "delete", {"entry_id": "x"}, exit_code=3
            )

        assert exc_info.value.code == 3
        error, context = mock_logger.log_cli_error.call_args[0][:2]
        assert str(error) == "boom"
        assert context == {"operation": "delete", "entry_id": "x"}
        assert "boom" in capsys.readouterr().err

    def test_works_without_logger(self, capsys):
        """Test handle_cli_error falls back to the NullLogger."""
        ctx = click.Context(click.Command("test"), obj={})

        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(ctx, ValueError("oops"), "list")

        assert exc_info.value.code == 1
        assert "❌ ValueError: oops" in capsys.readouterr().err
