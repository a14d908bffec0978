"""
Utilities package for Dream Diary.

- slugify: Identifier slugs for tags and categories
- fs: Atomic file writes
"""
