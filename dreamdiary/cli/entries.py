"""
Entry Commands
--------------

Browse and edit dream entries.

Commands:
    - list: List active entries, newest first, with optional filters
    - show: Display one entry with its citations
    - add: Create an entry
    - edit: Patch an entry
    - delete: Move an entry to the trash
    - cite / uncite: Add or remove a citation between entries

Usage:
    # Entries tagged with any place, in 2024
    dreamdiary list --tag category:places --from 2024-01-01 --to 2024-12-31

    # New entry with two tags
    dreamdiary add --title "Flooded house" --tag places:House --tag emotions:Fear

    # Link two entries
    dreamdiary cite <entry-id> <cited-id>
"""
import sys

import click

from dreamdiary.core.exceptions import StorageError, ValidationError
from dreamdiary.core.logging_manager import handle_cli_error
from dreamdiary.store.filters import DateRange, EntryFilters, TimeRange, sort_entries
from . import get_store
from .formatting import echo_json, format_entry_line, parse_tag_options


@click.command("list")
@click.option("--tag", "tag_or_category", default=None, help="Tag id, or category:<id>")
@click.option("--search", default="", help="Case-insensitive text search")
@click.option("--from", "date_from", default=None, help="Start date (YYYY-MM-DD)")
@click.option("--to", "date_to", default=None, help="End date (YYYY-MM-DD)")
@click.option("--time-from", default=None, help="Earliest time of day (HH:MM[:SS])")
@click.option("--time-to", default=None, help="Latest time of day (HH:MM[:SS])")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def list_entries(ctx, tag_or_category, search, date_from, date_to, time_from, time_to, as_json):
    """List active entries, newest first."""
    try:
        filters = EntryFilters(
            tag_or_category=tag_or_category,
            search_text=search,
            date_range=DateRange(date_from, date_to),
            time_range=TimeRange(time_from, time_to),
        )
        store = get_store(ctx)
        entries = sort_entries(store.get_filtered_entries(filters))

        if as_json:
            echo_json([entry.to_dict() for entry in entries])
            return

        if not entries:
            click.echo("No entries found")
            return

        click.echo(f"\n🌙 Entries ({len(entries)})\n")
        for entry in entries:
            click.echo(format_entry_line(entry))

    except (StorageError, ValidationError) as e:
        handle_cli_error(ctx, e, "list")


@click.command()
@click.argument("entry_id")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def show(ctx, entry_id, as_json):
    """Display a single entry."""
    try:
        store = get_store(ctx)
        entry = store.get_entry(entry_id, include_trashed=True)
        if entry is None:
            click.echo(f"❌ No entry found with id {entry_id}", err=True)
            sys.exit(1)

        if as_json:
            echo_json(entry.to_dict())
            return

        click.echo(f"\n📅 {entry.date} {entry.time or ''}".rstrip())
        click.echo(f"📝 {entry.title or '(untitled)'}")
        if entry.deleted_at:
            click.echo(f"🗑️  In trash since {entry.deleted_at}")
        if entry.description:
            click.echo(f"\n{entry.description}")

        if entry.tags:
            click.echo("\n🏷️  Tags:")
            for tag in entry.tags:
                click.echo(f"  • {tag.label} ({tag.id})")

        cited = store.get_cited_entries(entry.id)
        if cited:
            click.echo("\n➡️  Cites:")
            for other in cited:
                click.echo(format_entry_line(other))

        citing = store.get_citing_entries(entry.id)
        if citing:
            click.echo("\n⬅️  Cited by:")
            for other in citing:
                click.echo(format_entry_line(other))

    except StorageError as e:
        handle_cli_error(ctx, e, "show", additional_context={"entry_id": entry_id})


def _build_patch(title, description, date, time, tags):
    patch = {}
    if title is not None:
        patch["title"] = title
    if description is not None:
        patch["description"] = description
    if date is not None:
        patch["date"] = date
    if time is not None:
        patch["time"] = time
    if tags:
        patch["tags"] = parse_tag_options(tags)
    return patch


@click.command()
@click.option("--title", default="", help="Entry title")
@click.option("--description", default="", help="Entry text")
@click.option("--date", default=None, help="Date (YYYY-MM-DD, default: today)")
@click.option("--time", default=None, help="Time (HH:MM[:SS], default: now)")
@click.option("--tag", "tags", multiple=True, help="Tag as category:Label (repeatable)")
@click.pass_context
def add(ctx, title, description, date, time, tags):
    """Create a new entry."""
    try:
        store = get_store(ctx)
        entry = store.add_entry(_build_patch(title, description, date, time, tags))
        click.echo(f"✅ Added entry {entry.id} ({entry.date})")

    except (StorageError, ValidationError) as e:
        handle_cli_error(ctx, e, "add")


@click.command()
@click.argument("entry_id")
@click.option("--title", default=None, help="New title")
@click.option("--description", default=None, help="New text")
@click.option("--date", default=None, help="New date (YYYY-MM-DD)")
@click.option("--time", default=None, help="New time (HH:MM[:SS])")
@click.option("--tag", "tags", multiple=True, help="Replace tags (repeatable)")
@click.option("--clear-tags", is_flag=True, help="Remove all tags")
@click.pass_context
def edit(ctx, entry_id, title, description, date, time, tags, clear_tags):
    """Edit an active entry."""
    try:
        patch = _build_patch(title, description, date, time, tags)
        if clear_tags:
            patch["tags"] = []
        if not patch:
            click.echo("Nothing to change")
            return

        store = get_store(ctx)
        entry = store.update_entry(entry_id, patch)
        if entry is None:
            click.echo(f"❌ No active entry with id {entry_id}", err=True)
            sys.exit(1)
        click.echo(f"✅ Updated entry {entry.id}")

    except (StorageError, ValidationError) as e:
        handle_cli_error(ctx, e, "edit", additional_context={"entry_id": entry_id})


@click.command()
@click.argument("entry_id")
@click.pass_context
def delete(ctx, entry_id):
    """Move an entry to the trash."""
    try:
        if not get_store(ctx).delete_entry(entry_id):
            click.echo(f"❌ No active entry with id {entry_id}", err=True)
            sys.exit(1)
        click.echo(f"🗑️  Moved {entry_id} to trash")

    except StorageError as e:
        handle_cli_error(ctx, e, "delete", additional_context={"entry_id": entry_id})


@click.command()
@click.argument("entry_id")
@click.argument("cited_id")
@click.pass_context
def cite(ctx, entry_id, cited_id):
    """Record that ENTRY_ID cites CITED_ID."""
    try:
        if not get_store(ctx).add_citation(entry_id, cited_id):
            click.echo(
                "❌ Citation not added (unknown entry, self-citation or duplicate)",
                err=True,
            )
            sys.exit(1)
        click.echo(f"🔗 {entry_id} now cites {cited_id}")

    except StorageError as e:
        handle_cli_error(
            ctx, e, "cite", additional_context={"entry_id": entry_id, "cited_id": cited_id}
        )


@click.command()
@click.argument("entry_id")
@click.argument("cited_id")
@click.pass_context
def uncite(ctx, entry_id, cited_id):
    """Remove a citation from ENTRY_ID to CITED_ID."""
    try:
        if not get_store(ctx).remove_citation(entry_id, cited_id):
            click.echo(f"❌ {entry_id} does not cite {cited_id}", err=True)
            sys.exit(1)
        click.echo(f"✂️  Removed citation {entry_id} -> {cited_id}")

    except StorageError as e:
        handle_cli_error(
            ctx, e, "uncite", additional_context={"entry_id": entry_id, "cited_id": cited_id}
        )
