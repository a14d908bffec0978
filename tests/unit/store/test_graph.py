"""
test_graph.py
-------------
Unit tests for dreamdiary.store.graph.
"""
from dreamdiary.store.filters import DateRange
from dreamdiary.store.graph import GraphFilters, build_citation_graph


def node_ids(graph):
    return [n.id for n in graph.nodes]


def edge_pairs(graph):
    return [(e.source, e.target) for e in graph.edges]


class TestBuildCitationGraph:
    """Test build_citation_graph."""

    def test_all_entries(self, sample_entries):
        """Test unfiltered graph: every entry, every resolvable citation."""
        graph = build_citation_graph(sample_entries)

        assert node_ids(graph) == ["a", "b", "c", "d"]
        assert edge_pairs(graph) == [("a", "b"), ("c", "a")]
        assert all(e.strength == 1 for e in graph.edges)
        counts = {n.id: n.citation_count for n in graph.nodes}
        assert counts == {"a": 1, "b": 1, "c": 0, "d": 0}

    def test_exclude_isolated(self, sample_entries):
        """Test entries without edges are dropped."""
        graph = build_citation_graph(sample_entries, GraphFilters(include_isolated=False))
        assert node_ids(graph) == ["a", "b", "c"]

    def test_isolation_after_filtering(self, sample_entries):
        """Test isolation is judged within the filtered set."""
        filters = GraphFilters(
            date_range=DateRange(start="2024-01-15"),
            include_isolated=False,
        )

        graph = build_citation_graph(sample_entries, filters)

        # a is filtered out, so b and c lose their only edges
        assert graph.nodes == []
        assert graph.edges == []

    def test_date_filter_drops_edges(self, sample_entries):
        """Test citations to filtered-out entries produce no edge."""
        graph = build_citation_graph(
            sample_entries, GraphFilters(date_range=DateRange(end="2024-01-31"))
        )
        assert node_ids(graph) == ["a", "b"]
        assert edge_pairs(graph) == [("a", "b")]

    def test_tag_filter_any_match(self, sample_entries):
        """Test entries with any selected tag are kept."""
        graph = build_citation_graph(
            sample_entries,
            GraphFilters(selected_tag_ids=("uncategorized/flying", "places/ocean")),
        )
        assert node_ids(graph) == ["a", "b", "c"]

    def test_dangling_citation_ignored(self, entry_factory):
        """Test citations of unknown ids produce no edge."""
        graph = build_citation_graph([entry_factory("x", cited=["gone"])])
        assert graph.edges == []
        assert graph.nodes[0].cited_dreams == ["gone"]

    def test_cycles_allowed(self, entry_factory):
        """Test mutual citations produce both edges."""
        graph = build_citation_graph(
            [entry_factory("x", cited=["y"]), entry_factory("y", cited=["x"])]
        )
        assert edge_pairs(graph) == [("x", "y"), ("y", "x")]

    def test_input_not_mutated(self, sample_entries):
        """Test nodes hold copies of the entries' lists."""
        graph = build_citation_graph(sample_entries)
        graph.nodes[0].cited_dreams.append("zzz")
        assert sample_entries[0].cited_dreams == ["b"]

    def test_to_dict(self, sample_entries):
        """Test the JSON form."""
        data = build_citation_graph(sample_entries[:2]).to_dict()

        assert data["edges"] == [{"source": "a", "target": "b", "strength": 1}]
        assert data["nodes"][1]["citationCount"] == 1
        assert data["nodes"][0]["citedDreams"] == ["b"]
