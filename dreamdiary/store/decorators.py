#!/usr/bin/env python3
"""
decorators.py
--------------------
Shared decorators for store and storage operations.
"""
from functools import wraps
from typing import Callable
from datetime import datetime

from dreamdiary.core.exceptions import StorageError


def log_store_operation(operation_name: str):
    """
    Decorator to log store operations with timing and context.

    The decorated method's instance must expose a ``logger`` attribute
    (a DiaryLogger or None).

    Args:
        operation_name: Name of the operation being logged

    Returns:
        Decorator function
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(self, *args, **kwargs):
            start_time = datetime.now()
            operation_id = f"{operation_name}_{start_time.strftime('%Y%m%d_%H%M%S_%f')}"
            logger = getattr(self, "logger", None)

            if logger:
                logger.log_debug(
                    f"Starting {operation_name}",
                    {
                        "operation_id": operation_id,
                        "args_count": len(args),
                        "kwargs_keys": list(kwargs.keys()),
                    },
                )

            try:
                result = function(self, *args, **kwargs)

                if logger:
                    logger.log_operation(
                        f"{operation_name}_completed",
                        {
                            "operation_id": operation_id,
                            "duration_seconds": (datetime.now() - start_time).total_seconds(),
                            "success": True,
                        },
                    )

                return result

            except Exception as e:
                if logger:
                    logger.log_error(
                        e,
                        {
                            "operation": operation_name,
                            "operation_id": operation_id,
                            "duration_seconds": (datetime.now() - start_time).total_seconds(),
                        },
                    )
                raise

        return wrapper

    return decorator


def handle_storage_errors(function: Callable) -> Callable:
    """
    Decorator converting I/O and serialization failures into StorageError.

    Args:
        function: Function to wrap

    Returns:
        Wrapped function with error handling
    """

    @wraps(function)
    def wrapper(*args, **kwargs):
        try:
            return function(*args, **kwargs)
        except StorageError:
            raise
        except OSError as e:
            raise StorageError(f"Storage I/O failed in {function.__name__}: {e}") from e
        except (TypeError, ValueError) as e:
            raise StorageError(
                f"Data could not be serialized in {function.__name__}: {e}"
            ) from e

    return wrapper
