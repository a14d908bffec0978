#!/usr/bin/env python3
"""
graph.py
--------
Citation graph derivation.

Builds a node/edge view of entries and their citations. The graph is a
plain adjacency structure: cycles are legal and nothing here assumes a DAG.
Citations pointing at entries outside the filtered set (or at ids that no
longer exist) produce no edge and are dropped silently.

Filtering, in order:
    1. Date range (inclusive, either side optional)
    2. Selected tags (an entry matches if it has ANY selected tag)
    3. Isolation, computed against the set surviving steps 1-2

Usage:
    from dreamdiary.store.graph import GraphFilters, build_citation_graph

    graph = build_citation_graph(store.entries, GraphFilters(include_isolated=False))
    for edge in graph.edges:
        print(edge.source, "->", edge.target)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

# --- Local imports ---
from dreamdiary.models.entry import Entry
from dreamdiary.models.taxonomy import Tag

from .filters import DateRange

EDGE_STRENGTH = 1


@dataclass(frozen=True)
class GraphFilters:
    """
    Attributes:
        date_range: Inclusive date bounds
        selected_tag_ids: Keep entries having any of these tag ids (empty: all)
        include_isolated: Keep entries with no edge in the filtered set
    """

    date_range: DateRange = field(default_factory=DateRange)
    selected_tag_ids: Tuple[str, ...] = ()
    include_isolated: bool = True


@dataclass
class GraphNode:
    id: str
    title: str
    date: str
    tags: List[Tag]
    cited_dreams: List[str]
    citation_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "date": self.date,
            "tags": [tag.to_dict() for tag in self.tags],
            "citedDreams": list(self.cited_dreams),
            "citationCount": self.citation_count,
        }


@dataclass(frozen=True)
class GraphEdge:
    source: str
    target: str
    strength: int = EDGE_STRENGTH

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "target": self.target, "strength": self.strength}


@dataclass
class GraphData:
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }


def _citers_within(entries: List[Entry]) -> Dict[str, int]:
    """Count, for each id, how many entries in the set cite it."""
    ids = {entry.id for entry in entries}
    counts: Dict[str, int] = {entry_id: 0 for entry_id in ids}
    for entry in entries:
        for cited in entry.cited_dreams:
            if cited in ids:
                counts[cited] += 1
    return counts


def build_citation_graph(
    entries: Iterable[Entry], filters: Optional[GraphFilters] = None
) -> GraphData:
    """
    Derive the citation graph of entries.

    Args:
        entries: Entries to include; not modified
        filters: Graph filters (default: everything, isolated included)

    Returns:
        GraphData whose edges only connect surviving nodes, each with
        strength 1, and whose nodes count their surviving citers
    """
    filters = filters or GraphFilters()
    selected = list(entries)

    if filters.date_range.is_set:
        selected = [e for e in selected if filters.date_range.contains(e.date)]

    if filters.selected_tag_ids:
        wanted = set(filters.selected_tag_ids)
        selected = [e for e in selected if any(tag.id in wanted for tag in e.tags)]

    if not filters.include_isolated:
        citers = _citers_within(selected)
        ids = {e.id for e in selected}
        selected = [
            e
            for e in selected
            if citers[e.id] > 0 or any(cited in ids for cited in e.cited_dreams)
        ]

    citers = _citers_within(selected)
    ids = {e.id for e in selected}

    nodes = [
        GraphNode(
            id=e.id,
            title=e.title,
            date=e.date,
            tags=list(e.tags),
            cited_dreams=list(e.cited_dreams),
            citation_count=citers[e.id],
        )
        for e in selected
    ]
    edges = [
        GraphEdge(source=e.id, target=cited)
        for e in selected
        for cited in e.cited_dreams
        if cited in ids
    ]
    return GraphData(nodes=nodes, edges=edges)
