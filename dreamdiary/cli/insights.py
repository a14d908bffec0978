"""
Insight Commands
----------------

Commands:
    - graph: Citation graph of active entries
    - stats: Tag usage, relationships and category summaries

Usage:
    dreamdiary graph --no-isolated --json > graph.json
    dreamdiary stats --top 10
"""
import click

from dreamdiary.core.exceptions import StorageError, ValidationError
from dreamdiary.core.logging_manager import handle_cli_error
from dreamdiary.store.analytics import TagAnalytics
from dreamdiary.store.filters import DateRange
from dreamdiary.store.graph import GraphFilters, build_citation_graph
from . import get_config, get_store
from .formatting import echo_json


@click.command()
@click.option("--from", "date_from", default=None, help="Start date (YYYY-MM-DD)")
@click.option("--to", "date_to", default=None, help="End date (YYYY-MM-DD)")
@click.option("--tag", "tag_ids", multiple=True, help="Keep entries with any of these tag ids")
@click.option("--isolated/--no-isolated", default=True, help="Include entries without citations")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def graph(ctx, date_from, date_to, tag_ids, isolated, as_json):
    """Show the citation graph."""
    try:
        filters = GraphFilters(
            date_range=DateRange(date_from, date_to),
            selected_tag_ids=tuple(tag_ids),
            include_isolated=isolated,
        )
        data = build_citation_graph(get_store(ctx).entries, filters)

        if as_json:
            echo_json(data.to_dict())
            return

        titles = {node.id: node.title or node.id for node in data.nodes}
        click.echo(f"\n🕸️  Citation graph: {len(data.nodes)} nodes, {len(data.edges)} edges\n")
        for node in data.nodes:
            click.echo(f"  {node.date}  {titles[node.id]}  (cited {node.citation_count}x)")
        if data.edges:
            click.echo("\nEdges:")
            for edge in data.edges:
                click.echo(f"  {titles[edge.source]} -> {titles[edge.target]}")

    except (StorageError, ValidationError) as e:
        handle_cli_error(ctx, e, "graph")


@click.command()
@click.option("--top", default=20, show_default=True, help="Number of tags and relationships to show")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def stats(ctx, top, as_json):
    """Show tag analytics."""
    try:
        config = get_config(ctx)
        store = get_store(ctx)
        analytics = TagAnalytics(
            store.entries,
            store.get_categories(),
            logger=ctx.obj.get("logger"),
            top_n=config.top_tags_per_category,
            uncategorized_label=config.uncategorized_label,
        )

        if as_json:
            echo_json(analytics.to_dict())
            return

        overview = analytics.get_overview()
        click.echo("\n📊 Tag Analytics")
        click.echo("=" * 50)
        click.echo(f"Entries: {overview['total_entries']} ({overview['tagged_entries']} tagged)")
        click.echo(f"Distinct tags: {overview['total_tags']}")
        click.echo(f"Tag relationships: {overview['total_relationships']}")

        if analytics.tag_stats:
            click.echo("\n🏷️  Most used tags:")
            for tag in analytics.tag_stats[:top]:
                click.echo(
                    f"  {tag.label:<24} {tag.category_name:<20} "
                    f"{tag.count:4d} ({tag.percentage:.1f}%)"
                )

        if analytics.relationships:
            click.echo("\n🔗 Strongest relationships:")
            for rel in analytics.relationships[:top]:
                click.echo(
                    f"  {rel.source_label} + {rel.target_label}: "
                    f"{rel.strength:.2f} ({rel.count} together)"
                )

        click.echo("\n🗂️  Categories:")
        for summary in analytics.category_summaries():
            top_tags = ", ".join(t.label for t in summary.most_used_tags)
            click.echo(
                f"  {summary.category_name:<24} {summary.total_tags:3d} tags, "
                f"{summary.total_usage:4d} uses"
                + (f"  [{top_tags}]" if top_tags else "")
            )

    except StorageError as e:
        handle_cli_error(ctx, e, "stats")
