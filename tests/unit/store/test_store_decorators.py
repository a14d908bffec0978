"""
test_store_decorators.py
------------------------
Unit tests for dreamdiary.store.decorators.
"""
import pytest
from unittest.mock import MagicMock

from dreamdiary.core.exceptions import StorageError
from dreamdiary.core.logging_manager import DiaryLogger
from dreamdiary.store.decorators import handle_storage_errors, log_store_operation


class TestLogStoreOperation:
    """Test log_store_operation decorator."""

    def test_successful_operation_logging(self):
        """Test logging on a successful operation."""
        mock_logger = MagicMock(spec=DiaryLogger)

        class Store:
            def __init__(self):
                self.logger = mock_logger

            @log_store_operation("test_operation")
            def run(self, value):
                return value * 2

        assert Store().run(5) == 10

        mock_logger.log_debug.assert_called_once()
        assert "Starting test_operation" in mock_logger.log_debug.call_args[0][0]
        mock_logger.log_operation.assert_called_once()
        operation, details = mock_logger.log_operation.call_args[0]
        assert operation == "test_operation_completed"
        assert details["success"] is True
        assert "duration_seconds" in details

    def test_failed_operation_logging(self):
        """Test errors are logged and re-raised."""
        mock_logger = MagicMock(spec=DiaryLogger)

        class Store:
            def __init__(self):
                self.logger = mock_logger

            @log_store_operation("failing")
            def run(self):
                raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            Store().run()

        mock_logger.log_error.assert_called_once()
        assert mock_logger.log_error.call_args[0][1]["operation"] == "failing"
        mock_logger.log_operation.assert_not_called()

    def test_without_logger(self):
        """Test the decorator works when logger is None."""

        class Store:
            logger = None

            @log_store_operation("quiet")
            def run(self):
                return "ok"

        assert Store().run() == "ok"

    def test_preserves_metadata(self):
        """Test functools.wraps keeps the name and docstring."""

        class Store:
            @log_store_operation("documented")
            def run(self):
                """Docstring."""

        assert Store.run.__name__ == "run"
        assert Store.run.__doc__ == "Docstring."


class TestHandleStorageErrors:
    """Test handle_storage_errors decorator."""

    def test_os_error_converted(self):
        """Test OSError becomes StorageError with the cause kept."""

        @handle_storage_errors
        def write():
            raise OSError("disk full")

        with pytest.raises(StorageError, match="disk full") as exc_info:
            write()
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_type_error_converted(self):
        """Test serialization errors become StorageError."""

        @handle_storage_errors
        def write():
            raise TypeError("not serializable")

        with pytest.raises(StorageError, match="could not be serialized"):
            write()

    def test_storage_error_passes_through(self):
        """Test StorageError is not wrapped twice."""
        original = StorageError("already wrapped")

        @handle_storage_errors
        def write():
            raise original

        with pytest.raises(StorageError) as exc_info:
            write()
        assert exc_info.value is original

    def test_return_value(self):
        """Test successful calls return normally."""

        @handle_storage_errors
        def write():
            return 42

        assert write() == 42
