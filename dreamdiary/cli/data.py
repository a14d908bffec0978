"""
Data Commands
-------------

Whole-diary export, import and maintenance.

Commands:
    - export: Write all entries, trash and categories to a JSON file
    - import: Merge a JSON export into the diary (never overwrites)
    - reset-tags: Remove every tag from every entry

Import and reset-tags take a backup of the data files first.

Usage:
    dreamdiary export ~/dream-diary-export.json
    dreamdiary import ~/old-export.json
"""
import sys
from pathlib import Path

import click

from dreamdiary.core.exceptions import BackupError, StorageError
from dreamdiary.core.logging_manager import handle_cli_error
from dreamdiary.store.export_manager import ExportManager, OperationResult
from . import get_backup_manager, get_store


def _report(result: OperationResult) -> None:
    if result.success:
        click.echo(f"✅ {result.message}")
    elif result.cancelled:
        click.echo(f"⚠️  {result.message}")
    else:
        error = result.details.get("error")
        click.echo(f"❌ {result.message}" + (f": {error}" if error else ""), err=True)
        sys.exit(1)


@click.command()
@click.argument("output", type=click.Path(dir_okay=False))
@click.option("--force", is_flag=True, help="Overwrite an existing file")
@click.pass_context
def export(ctx, output, force):
    """Export the diary to a JSON file."""
    try:
        exporter = ExportManager(get_store(ctx), logger=ctx.obj.get("logger"))
    except StorageError as e:
        handle_cli_error(ctx, e, "export", additional_context={"output": output})

    _report(exporter.export_to_file(Path(output), overwrite=force))


@click.command("import")
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option("--no-backup", is_flag=True, help="Skip the pre-import backup")
@click.pass_context
def import_(ctx, source, no_backup):
    """Import a JSON export into the diary."""
    try:
        store = get_store(ctx)
    except StorageError as e:
        handle_cli_error(ctx, e, "import", additional_context={"source": source})

    exporter = ExportManager(store, logger=ctx.obj.get("logger"))
    backup_manager = None
    if not no_backup and get_backup_manager(ctx).has_data():
        backup_manager = get_backup_manager(ctx)
    result = exporter.import_from_file(Path(source), backup_manager=backup_manager)
    _report(result)
    if result.success:
        if backup_manager is not None:
            backup_manager.cleanup_old_backups()
        details = result.details
        if details.get("remapped"):
            click.echo(f"   {details['remapped']} colliding ids were given new ids")
        if details.get("skipped"):
            click.echo(f"   {details['skipped']} invalid records were skipped")
        if details.get("backup"):
            click.echo(f"   Backup: {details['backup']}")


@click.command("reset-tags")
@click.confirmation_option(prompt="⚠️  This removes every tag from every entry! Continue?")
@click.pass_context
def reset_tags(ctx):
    """Remove every tag from every entry (backup first)."""
    try:
        store = get_store(ctx)
        manager = get_backup_manager(ctx)
        if manager.has_data():
            backup_path = manager.create_backup("pre-reset")
            click.echo(f"💾 Backup created: {backup_path}")
            manager.cleanup_old_backups()

        changed = store.reset_tags()
        click.echo(f"✅ Cleared tags on {changed} entries")

    except (BackupError, StorageError) as e:
        handle_cli_error(ctx, e, "reset_tags")
