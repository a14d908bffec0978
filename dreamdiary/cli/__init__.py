#!/usr/bin/env python3
"""
Dream Diary CLI
---------------

Command-line interface for browsing and maintaining a dream diary.

This module provides the main CLI group and shared context setup for all
commands.

Command Structure:
    - Entries (list, show, add, edit, delete, cite, uncite)
    - Trash (trash list/restore/purge/clear)
    - Categories (category list/add/update/delete)
    - Insights (graph, stats)
    - Data (export, import, reset-tags)
    - Backups (backup create/list/restore)

Usage:
    # Get general help
    dreamdiary --help

    # Use a different data directory
    dreamdiary --data-dir ~/Dreams list --search ocean

    # Get help for a specific command group
    dreamdiary category --help
"""
from pathlib import Path

import click

from dreamdiary.core.backup_manager import BackupManager
from dreamdiary.core.cli_utils import setup_logger
from dreamdiary.core.config import DiaryConfig, load_config
from dreamdiary.core.exceptions import ConfigError
from dreamdiary.core.logging_manager import handle_cli_error
from dreamdiary.store import EntryStore, JsonFileStorage


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding dreams.json and friends",
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Path to log directory",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML config file",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, data_dir, log_dir, config_path, verbose):
    """Dream Diary command-line interface"""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    try:
        config = load_config(
            Path(config_path) if config_path else None,
            overrides={"data_dir": data_dir, "log_dir": log_dir},
        )
    except ConfigError as e:
        handle_cli_error(ctx, e, "load_config")

    ctx.obj["config"] = config
    ctx.obj["logger"] = setup_logger(config.log_dir, "cli")


def get_config(ctx) -> DiaryConfig:
    return ctx.obj["config"]


def get_store(ctx) -> EntryStore:
    """Get or create the entry store from context."""
    if "store" not in ctx.obj:
        config = get_config(ctx)
        logger = ctx.obj.get("logger")
        ctx.obj["store"] = EntryStore(
            JsonFileStorage(config.data_dir, logger=logger), logger=logger
        )
    return ctx.obj["store"]


def get_backup_manager(ctx) -> BackupManager:
    """Get or create the backup manager from context."""
    if "backup_manager" not in ctx.obj:
        config = get_config(ctx)
        ctx.obj["backup_manager"] = BackupManager(
            data_dir=config.data_dir,
            backup_dir=config.backup_dir,
            retention_days=config.backup_retention_days,
            logger=ctx.obj.get("logger"),
        )
    return ctx.obj["backup_manager"]


# Import and register command modules
# These imports must come after CLI group definition
from .entries import list_entries, show, add, edit, delete, cite, uncite  # noqa: E402
from .trash import trash  # noqa: E402
from .categories import category  # noqa: E402
from .insights import graph, stats  # noqa: E402
from .data import export, import_, reset_tags  # noqa: E402
from .backup import backup  # noqa: E402

# Register top-level commands
cli.add_command(list_entries)
cli.add_command(show)
cli.add_command(add)
cli.add_command(edit)
cli.add_command(delete)
cli.add_command(cite)
cli.add_command(uncite)
cli.add_command(graph)
cli.add_command(stats)
cli.add_command(export)
cli.add_command(import_)
cli.add_command(reset_tags)

# Register command groups
cli.add_command(trash)
cli.add_command(category)
cli.add_command(backup)


if __name__ == "__main__":
    cli(obj={})
