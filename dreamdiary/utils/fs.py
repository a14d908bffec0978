#!/usr/bin/env python3
"""
fs.py
-------------------
Filesystem helpers shared by storage and export.

Functions:
    write_text_atomic: Replace a file's contents without a partial-write window

Usage:
    from dreamdiary.utils.fs import write_text_atomic

    write_text_atomic(Path("dreams.json"), json.dumps(data, indent=2))
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
import tempfile
from pathlib import Path


def write_text_atomic(path: Path, text: str, encoding: str = "utf-8") -> None:
    """
    Write text to path via a temporary sibling file and os.replace.

    The parent directory is created if needed. On failure the temporary
    file is removed and the original file is left untouched.

    Raises:
        OSError: If the directory or file cannot be written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding=encoding) as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise

