#!/usr/bin/env python3
"""
cli_utils.py
-------------------
Shared CLI utilities for Dream Diary commands.

Functions:
    setup_logger: Initialize DiaryLogger for CLI operations

Usage:
    from dreamdiary.core.cli_utils import setup_logger

    logger = setup_logger(log_dir, "cli")
"""
from pathlib import Path

from dreamdiary.core.logging_manager import DiaryLogger


def setup_logger(log_dir: Path, component_name: str) -> DiaryLogger:
    """
    Setup logging for CLI operations.

    Creates the operations log directory if it doesn't exist and initializes
    a DiaryLogger instance for the specified component.

    Args:
        log_dir: Base log directory (typically from DiaryConfig.log_dir)
        component_name: Component identifier for logging (e.g. 'cli')

    Returns:
        Configured DiaryLogger instance
    """
    operations_log_dir = Path(log_dir) / "operations"
    operations_log_dir.mkdir(parents=True, exist_ok=True)
    return DiaryLogger(operations_log_dir, component_name=component_name)
