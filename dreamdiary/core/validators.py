#!/usr/bin/env python3
"""
validators.py
--------------------
Data validation and normalization utilities.

Dates and times are handled as local calendar values and kept as strings
(`YYYY-MM-DD`, `HH:MM:SS`) so they are never shifted through UTC.
Lexicographic comparison of these strings is chronological.
"""
from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any, Optional

_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


class DataValidator:
    """Centralized validation for journal data."""

    @staticmethod
    def normalize_date(date_value: Any) -> Optional[str]:
        """
        Normalize a date input to a local `YYYY-MM-DD` string.

        Args:
            date_value: ISO date string, date or datetime

        Returns:
            Normalized date string, or None if the value is not a real date

        Examples:
            >>> DataValidator.normalize_date("2024-01-15")
            '2024-01-15'
            >>> DataValidator.normalize_date("2024-02-30") is None
            True
        """
        if isinstance(date_value, datetime):
            return date_value.date().isoformat()
        if isinstance(date_value, date):
            return date_value.isoformat()
        if not isinstance(date_value, str):
            return None

        match = _DATE_RE.match(date_value.strip())
        if not match:
            return None
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day).isoformat()
        except ValueError:
            return None

    @staticmethod
    def normalize_time(time_value: Any) -> Optional[str]:
        """
        Normalize a time input to `HH:MM:SS`.

        Accepts `H:MM`, `HH:MM` and `HH:MM:SS` strings; seconds default to 00.

        Returns:
            Normalized time string, or None if the value is not a valid time
        """
        if not isinstance(time_value, str):
            return None

        match = _TIME_RE.match(time_value.strip())
        if not match:
            return None
        hours, minutes = int(match.group(1)), int(match.group(2))
        seconds = int(match.group(3) or 0)
        if hours > 23 or minutes > 59 or seconds > 59:
            return None
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"

    @staticmethod
    def normalize_string(value: Any) -> str:
        """Return value if it is a string, else an empty string."""
        return value if isinstance(value, str) else ""


def now_iso() -> str:
    """Current UTC timestamp in ISO-8601 with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def today_string() -> str:
    """Current local date as `YYYY-MM-DD`."""
    return date.today().isoformat()


def current_time_string() -> str:
    """Current local time as `HH:MM:SS`."""
    return datetime.now().strftime("%H:%M:%S")
