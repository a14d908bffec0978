"""
Category Commands
-----------------

Commands:
    - category list: Show categories with color and usage
    - category add: Create a category
    - category update: Rename or recolor a category
    - category delete: Delete a category and remove its tags from every entry

Colors are one of the preset names or a hex value (#RGB or #RRGGBB).

Usage:
    dreamdiary category add "Recurring Symbols" --color teal
    dreamdiary category update recurring-symbols --color "#7c3aed"
"""
import sys

import click

from dreamdiary.core.exceptions import StorageError, ValidationError
from dreamdiary.core.logging_manager import handle_cli_error
from dreamdiary.models.taxonomy import color_to_json, resolve_category_color_hex
from . import get_store


@click.group()
@click.pass_context
def category(ctx: click.Context) -> None:
    """Manage tag categories."""
    pass


@category.command("list")
@click.pass_context
def list_categories(ctx):
    """List categories."""
    try:
        store = get_store(ctx)
        categories = store.get_categories()
        if not categories:
            click.echo("No categories")
            return

        usage = {}
        for entry in store.entries:
            for tag in entry.tags:
                usage[tag.category_id] = usage.get(tag.category_id, 0) + 1

        click.echo(f"\n🗂️  Categories ({len(categories)})\n")
        for cat in categories:
            color = color_to_json(cat.color)
            hex_value = resolve_category_color_hex(cat.color)
            click.echo(
                f"  {cat.id:<24} {cat.name:<24} {color:<8} {hex_value}  "
                f"{usage.get(cat.id, 0)} uses"
            )

    except StorageError as e:
        handle_cli_error(ctx, e, "category_list")


@category.command("add")
@click.argument("name")
@click.option("--color", default=None, help="Preset name or hex color")
@click.pass_context
def add_category(ctx, name, color):
    """Create a category."""
    try:
        created = get_store(ctx).add_category(name, color)
        click.echo(f"✅ Created category {created.id} ({color_to_json(created.color)})")

    except (StorageError, ValidationError) as e:
        handle_cli_error(ctx, e, "category_add", additional_context={"name": name})


@category.command("update")
@click.argument("category_id")
@click.option("--name", default=None, help="New display name")
@click.option("--color", default=None, help="New preset name or hex color")
@click.pass_context
def update_category(ctx, category_id, name, color):
    """Rename or recolor a category."""
    try:
        if name is None and color is None:
            click.echo("Nothing to change")
            return
        updated = get_store(ctx).update_category(category_id, name=name, color=color)
        if updated is None:
            click.echo(f"❌ No category with id {category_id}", err=True)
            sys.exit(1)
        click.echo(f"✅ Updated category {updated.id}: {updated.name} ({color_to_json(updated.color)})")

    except (StorageError, ValidationError) as e:
        handle_cli_error(ctx, e, "category_update", additional_context={"category_id": category_id})


@category.command("delete")
@click.argument("category_id")
@click.confirmation_option(
    prompt="⚠️  Tags of this category will be removed from every entry! Continue?"
)
@click.pass_context
def delete_category(ctx, category_id):
    """Delete a category and its tags."""
    try:
        if not get_store(ctx).delete_category(category_id):
            click.echo(f"❌ Nothing to delete for category {category_id}", err=True)
            sys.exit(1)
        click.echo(f"✅ Deleted category {category_id}")

    except StorageError as e:
        handle_cli_error(ctx, e, "category_delete", additional_context={"category_id": category_id})
