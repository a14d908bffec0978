"""
Trash Commands
--------------

Commands:
    - trash list: Show trashed entries
    - trash restore: Move an entry back to the diary
    - trash purge: Permanently delete one trashed entry
    - trash clear: Permanently delete every trashed entry
"""
import sys

import click

from dreamdiary.core.exceptions import StorageError
from dreamdiary.core.logging_manager import handle_cli_error
from . import get_store
from .formatting import format_entry_line


@click.group()
@click.pass_context
def trash(ctx: click.Context) -> None:
    """Inspect and empty the trash."""
    pass


@trash.command("list")
@click.pass_context
def list_trash(ctx):
    """List trashed entries."""
    try:
        entries = get_store(ctx).get_trashed_entries()
        if not entries:
            click.echo("Trash is empty")
            return

        click.echo(f"\n🗑️  Trash ({len(entries)})\n")
        for entry in entries:
            click.echo(f"{format_entry_line(entry)}  (deleted {entry.deleted_at})")

    except StorageError as e:
        handle_cli_error(ctx, e, "trash_list")


@trash.command("restore")
@click.argument("entry_id")
@click.pass_context
def restore(ctx, entry_id):
    """Restore a trashed entry."""
    try:
        if not get_store(ctx).restore_entry(entry_id):
            click.echo(f"❌ No trashed entry with id {entry_id}", err=True)
            sys.exit(1)
        click.echo(f"♻️  Restored {entry_id}")

    except StorageError as e:
        handle_cli_error(ctx, e, "trash_restore", additional_context={"entry_id": entry_id})


@trash.command("purge")
@click.argument("entry_id")
@click.confirmation_option(prompt="⚠️  This permanently deletes the entry! Continue?")
@click.pass_context
def purge(ctx, entry_id):
    """Permanently delete one trashed entry."""
    try:
        if not get_store(ctx).permanently_delete_entry(entry_id):
            click.echo(f"❌ No trashed entry with id {entry_id}", err=True)
            sys.exit(1)
        click.echo(f"✅ Permanently deleted {entry_id}")

    except StorageError as e:
        handle_cli_error(ctx, e, "trash_purge", additional_context={"entry_id": entry_id})


@trash.command("clear")
@click.confirmation_option(prompt="⚠️  This permanently deletes everything in the trash! Continue?")
@click.pass_context
def clear(ctx):
    """Permanently delete every trashed entry."""
    try:
        removed = get_store(ctx).clear_trash()
        click.echo(f"✅ Removed {removed} entries from trash")

    except StorageError as e:
        handle_cli_error(ctx, e, "trash_clear")
