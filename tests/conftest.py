"""
conftest.py
-----------
Shared pytest fixtures for Dream Diary tests.

Provides fixtures for:
- Temporary directories
- Storage backends (in-memory and JSON files)
- A fresh entry store
- Sample entries with tags and citations
"""
import pytest
from pathlib import Path
from tempfile import TemporaryDirectory

from dreamdiary.models import Entry, Tag
from dreamdiary.store import EntryStore, JsonFileStorage, MemoryStorage


# ----- Path Fixtures -----

@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ----- Storage Fixtures -----

@pytest.fixture
def memory_storage():
    """Empty in-memory storage."""
    return MemoryStorage()


@pytest.fixture
def file_storage(tmp_dir):
    """JSON file storage in a temporary data directory."""
    return JsonFileStorage(tmp_dir / "data")


@pytest.fixture
def store(memory_storage):
    """Fresh store on empty in-memory storage (starter categories seeded)."""
    return EntryStore(memory_storage)


# ----- Sample Data -----

def make_entry(entry_id, date="2024-01-15", time=None, title="", tags=(), cited=(), **kwargs):
    """Build an Entry directly, bypassing the store."""
    return Entry(
        id=entry_id,
        title=title or f"Dream {entry_id}",
        description=kwargs.pop("description", ""),
        date=date,
        time=time,
        tags=list(tags),
        cited_dreams=list(cited),
        created_at="2024-01-15T08:00:00.000Z",
        updated_at="2024-01-15T08:00:00.000Z",
        **kwargs,
    )


@pytest.fixture
def entry_factory():
    """Factory building entries directly (see make_entry)."""
    return make_entry


@pytest.fixture
def ocean():
    return Tag.create("places", "Ocean")


@pytest.fixture
def fear():
    return Tag.create("emotions", "Fear")


@pytest.fixture
def flying():
    return Tag.create(None, "Flying")


@pytest.fixture
def sample_entries(ocean, fear, flying):
    """
    Four entries:
        a (2024-01-10, ocean+fear) cites b
        b (2024-01-20, ocean)
        c (2024-02-05, fear+flying) cites a
        d (2024-03-01, no tags, no citations)
    """
    return [
        make_entry("a", date="2024-01-10", time="07:30:00", title="Drowning",
                   description="Deep water everywhere", tags=[ocean, fear], cited=["b"]),
        make_entry("b", date="2024-01-20", title="Beach", tags=[ocean]),
        make_entry("c", date="2024-02-05", time="23:15:00", title="Falling",
                   tags=[fear, flying], cited=["a"]),
        make_entry("d", date="2024-03-01", title="Empty room"),
    ]


@pytest.fixture
def populated_store(memory_storage, sample_entries):
    """Store whose storage already holds the sample entries."""
    memory_storage.save("dreams", [entry.to_dict() for entry in sample_entries])
    return EntryStore(memory_storage)
