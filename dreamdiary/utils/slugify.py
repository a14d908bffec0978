#!/usr/bin/env python3
"""
slugify.py
----------
Slug generation for tag and category identifiers.

Slugs are the de-duplication keys of the taxonomy: two labels that slug to
the same string inside the same category are the same tag. The rules must
therefore stay stable across versions, since ids are persisted.

Rules:
    - Lowercase and trim
    - Drop every character outside [a-z0-9], whitespace and '-'
    - Collapse whitespace runs to a single hyphen
    - Collapse repeated hyphens

Usage:
    from dreamdiary.utils.slugify import slugify, unique_slug

    slugify("Dream Types")                  # "dream-types"
    unique_slug("places", {"places"})       # "places-2"
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from typing import Collection

_INVALID_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify(text: str) -> str:
    """
    Convert text to an identifier slug.

    Args:
        text: Input text

    Returns:
        Slug (may be empty if the text has no usable characters)

    Examples:
        >>> slugify("City ")
        'city'
        >>> slugify("Dream  Types")
        'dream-types'
        >>> slugify("Fear & Anxiety")
        'fear-anxiety'
        >>> slugify("Café")
        'caf'
    """
    if not text:
        return ""

    text = text.lower().strip()
    text = _INVALID_CHARS.sub("", text)
    text = _WHITESPACE.sub("-", text)
    return _HYPHENS.sub("-", text)


def unique_slug(base: str, existing: Collection[str]) -> str:
    """
    Disambiguate a slug against existing ids with numeric suffixes.

    Args:
        base: Candidate slug
        existing: Ids already taken

    Returns:
        base if free, else the first free of base-2, base-3, ...

    Examples:
        >>> unique_slug("places", {"places", "places-2"})
        'places-3'
    """
    candidate = base
    suffix = 2
    while candidate in existing:
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate
