"""
Backup & Restore Commands
--------------------------

Backups of the JSON data files.

Commands:
    - backup create: Create timestamped backup
    - backup list: List all backups
    - backup restore: Restore from backup

Usage:
    # Create a manual backup
    dreamdiary backup create --suffix "before-cleanup"

    # List all backups
    dreamdiary backup list

    # Restore from a specific backup directory
    dreamdiary backup restore /path/to/backups/manual/dreamdiary_20240101_120000_000000
"""
from pathlib import Path

import click

from dreamdiary.core.exceptions import BackupError
from dreamdiary.core.logging_manager import handle_cli_error
from . import get_backup_manager


@click.group()
@click.pass_context
def backup(ctx: click.Context) -> None:
    """Create, list and restore backups."""
    pass


@backup.command("create")
@click.option("--suffix", default=None, help="Optional backup suffix")
@click.pass_context
def create(ctx, suffix):
    """Create timestamped backup."""
    try:
        click.echo("💾 Creating manual backup...")
        backup_path = get_backup_manager(ctx).create_backup("manual", suffix=suffix)
        click.echo(f"✅ Backup created: {backup_path}")

    except BackupError as e:
        handle_cli_error(ctx, e, "backup", additional_context={"suffix": suffix})


@backup.command("list")
@click.pass_context
def list_backups(ctx):
    """List all available backups."""
    backups_dict = get_backup_manager(ctx).list_backups()

    click.echo("\n📦 Available Backups")
    click.echo("=" * 70)

    total = 0
    for backup_type, backup_list in backups_dict.items():
        if backup_list:
            click.echo(f"\n{backup_type.upper()}:")
            for item in backup_list:
                click.echo(f"  • {item['name']}")
                click.echo(f"    Created: {item['created']}")
                click.echo(f"    Files: {', '.join(item['files'])}")
                click.echo(f"    Size: {item['size']:,} bytes")
                click.echo(f"    Age: {item['age_days']} days")
                total += 1

    if total == 0:
        click.echo("\n  No backups found")
    else:
        click.echo(f"\nTotal backups: {total}")


@backup.command("restore")
@click.argument("backup_path", type=click.Path(exists=True, file_okay=False))
@click.confirmation_option(
    prompt="⚠️  This will overwrite the current diary data! Continue?"
)
@click.pass_context
def restore(ctx, backup_path):
    """Restore from a backup directory."""
    try:
        click.echo(f"♻️  Restoring from: {backup_path}")
        pre_restore = get_backup_manager(ctx).restore_backup(Path(backup_path))
        click.echo(f"✅ Data restored (previous data saved to {pre_restore})")

    except BackupError as e:
        handle_cli_error(
            ctx,
            e,
            "restore",
            additional_context={"backup_path": backup_path},
        )
