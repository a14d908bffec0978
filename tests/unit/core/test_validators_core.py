"""
test_validators_core.py
-----------------------
Unit tests for dreamdiary.core.validators.
"""
import re
from datetime import date, datetime

import pytest

from dreamdiary.core.validators import (
    DataValidator,
    current_time_string,
    now_iso,
    today_string,
)


class TestNormalizeDate:
    """Test DataValidator.normalize_date."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2024-01-15", "2024-01-15"),
            (" 2024-01-15 ", "2024-01-15"),
            (date(2024, 2, 29), "2024-02-29"),
            (datetime(2024, 3, 1, 23, 59), "2024-03-01"),
        ],
    )
    def test_valid_dates(self, value, expected):
        """Test strings, dates and datetimes normalize to YYYY-MM-DD."""
        assert DataValidator.normalize_date(value) == expected

    @pytest.mark.parametrize(
        "value", ["2024-02-30", "2024-1-5", "15/01/2024", "", None, 20240115]
    )
    def test_invalid_dates(self, value):
        """Test impossible or malformed dates return None."""
        assert DataValidator.normalize_date(value) is None


class TestNormalizeTime:
    """Test DataValidator.normalize_time."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("07:30:15", "07:30:15"),
            ("07:30", "07:30:00"),
            ("7:05", "07:05:00"),
            ("23:59:59", "23:59:59"),
        ],
    )
    def test_valid_times(self, value, expected):
        """Test accepted time shapes pad to HH:MM:SS."""
        assert DataValidator.normalize_time(value) == expected

    @pytest.mark.parametrize("value", ["24:00", "12:60", "12:00:60", "noon", None, 730])
    def test_invalid_times(self, value):
        """Test out-of-range or malformed times return None."""
        assert DataValidator.normalize_time(value) is None


class TestMisc:
    """Test remaining helpers."""

    def test_normalize_string(self):
        """Test non-strings become empty strings."""
        assert DataValidator.normalize_string("x") == "x"
        assert DataValidator.normalize_string(None) == ""
        assert DataValidator.normalize_string(42) == ""

    def test_now_iso_shape(self):
        """Test UTC timestamp with milliseconds and Z suffix."""
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", now_iso())

    def test_today_and_current_time_shapes(self):
        """Test local date and time string shapes."""
        assert DataValidator.normalize_date(today_string()) == today_string()
        assert re.fullmatch(r"\d{2}:\d{2}:\d{2}", current_time_string())
