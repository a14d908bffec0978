#!/usr/bin/env python3
"""
filters.py
----------
Entry filtering and the presentation sort order.

All filters combine with AND. Each filter is optional; an unset filter
matches everything. Dates and times are compared as zero-padded strings,
which orders them chronologically without any timezone conversion.

Usage:
    from dreamdiary.store.filters import DateRange, EntryFilters, filter_entries

    filters = EntryFilters(
        tag_or_category="category:places",
        search_text="ocean",
        date_range=DateRange(start="2024-01-01"),
    )
    matches = sort_entries(filter_entries(entries, filters))
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

# --- Local imports ---
from dreamdiary.core.exceptions import ValidationError
from dreamdiary.core.validators import DataValidator
from dreamdiary.models.entry import Entry

CATEGORY_FILTER_PREFIX = "category:"
MISSING_TIME = "00:00:00"


@dataclass(frozen=True)
class DateRange:
    """Inclusive date bounds as YYYY-MM-DD; either side may be open."""

    start: Optional[str] = None
    end: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("start", "end"):
            value = getattr(self, name)
            if value in (None, ""):
                object.__setattr__(self, name, None)
                continue
            normalized = DataValidator.normalize_date(value)
            if normalized is None:
                raise ValidationError(f"Invalid {name} date: {value!r}")
            object.__setattr__(self, name, normalized)

    @property
    def is_set(self) -> bool:
        return self.start is not None or self.end is not None

    def contains(self, date_value: str) -> bool:
        if self.start is not None and date_value < self.start:
            return False
        if self.end is not None and date_value > self.end:
            return False
        return True


@dataclass(frozen=True)
class TimeRange:
    """Inclusive time-of-day bounds as HH:MM:SS; either side may be open."""

    start: Optional[str] = None
    end: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("start", "end"):
            value = getattr(self, name)
            if value in (None, ""):
                object.__setattr__(self, name, None)
                continue
            normalized = DataValidator.normalize_time(value)
            if normalized is None:
                raise ValidationError(f"Invalid {name} time: {value!r}")
            object.__setattr__(self, name, normalized)

    @property
    def is_set(self) -> bool:
        return self.start is not None or self.end is not None

    def contains(self, time_value: Optional[str]) -> bool:
        value = time_value or MISSING_TIME
        if self.start is not None and value < self.start:
            return False
        if self.end is not None and value > self.end:
            return False
        return True


@dataclass(frozen=True)
class EntryFilters:
    """
    Conjunctive entry filters.

    Attributes:
        tag_or_category: ``category:<id>`` for any tag of a category,
            otherwise an exact tag id
        search_text: Case-insensitive substring of title, description
            or any tag label
        date_range: Inclusive date bounds
        time_range: Inclusive time bounds; entries without a time count
            as midnight
    """

    tag_or_category: Optional[str] = None
    search_text: str = ""
    date_range: DateRange = field(default_factory=DateRange)
    time_range: TimeRange = field(default_factory=TimeRange)


def _matches_tag_or_category(entry: Entry, selector: str) -> bool:
    if selector.startswith(CATEGORY_FILTER_PREFIX):
        return entry.has_category(selector[len(CATEGORY_FILTER_PREFIX):])
    return entry.has_tag(selector)


def _matches_search(entry: Entry, query: str) -> bool:
    return (
        query in entry.title.lower()
        or query in entry.description.lower()
        or any(query in tag.label.lower() for tag in entry.tags)
    )


def filter_entries(entries: Iterable[Entry], filters: Optional[EntryFilters] = None) -> List[Entry]:
    """
    Apply filters to entries.

    Args:
        entries: Entries to filter; not modified
        filters: Filters to apply (default: none)

    Returns:
        New list of matching entries, in input order
    """
    filters = filters or EntryFilters()
    result = list(entries)

    if filters.tag_or_category:
        result = [e for e in result if _matches_tag_or_category(e, filters.tag_or_category)]

    query = (filters.search_text or "").lower().strip()
    if query:
        result = [e for e in result if _matches_search(e, query)]

    if filters.date_range.is_set:
        result = [e for e in result if filters.date_range.contains(e.date)]

    if filters.time_range.is_set:
        result = [e for e in result if filters.time_range.contains(e.time)]

    return result


def sort_entries(entries: Iterable[Entry]) -> List[Entry]:
    """Newest first: date descending, then time descending; stable for ties."""
    return sorted(
        entries,
        key=lambda e: (e.date, e.time or MISSING_TIME),
        reverse=True,
    )
