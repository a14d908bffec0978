"""
Output and option helpers shared by the CLI commands.
"""
import json
from typing import Any, Iterable, List, Optional

import click

from dreamdiary.models import Entry, Tag


def parse_tag_option(value: str) -> Tag:
    """
    Parse a --tag option: ``category:Label`` or a bare ``Label``.

    A bare label goes to the uncategorized sentinel.

    Raises:
        click.BadParameter: If the label is empty
    """
    category_id: Optional[str] = None
    label = value
    if ":" in value:
        category_id, label = value.split(":", 1)
        category_id = category_id.strip() or None
    if not label.strip():
        raise click.BadParameter(f"Tag label cannot be empty: {value!r}", param_hint="--tag")
    return Tag.create(category_id, label, is_custom=True)


def parse_tag_options(values: Iterable[str]) -> List[Tag]:
    return [parse_tag_option(value) for value in values]


def format_entry_line(entry: Entry) -> str:
    """One-line summary: date, time, id, title and tag labels."""
    when = f"{entry.date} {entry.time or '--:--:--'}"
    line = f"  {when}  {entry.id}  {entry.title or '(untitled)'}"
    if entry.tags:
        line += "  [" + ", ".join(tag.label for tag in entry.tags) + "]"
    return line


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))
