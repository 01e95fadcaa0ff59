"""Tests for graph.py: normalisation of raw node/edge records and derived ports."""

from __future__ import annotations

import networkx as nx

from dataflow_layout.graph import Edge, Graph, Node, NodeType, normalize, normalize_document

# ─── Helpers ──────────────────────────────────────────────────────────────────


def make_graph(node_ids: list[str], *edges: tuple[str, str, str]) -> Graph:
    """Build a Graph from node ids and (src, tgt, label) triples; edge ids are e1, e2, ..."""
    return Graph(
        nodes=tuple(Node(id=nid, label=nid) for nid in node_ids),
        edges=tuple(Edge(id=f"e{i + 1}", source=s, target=t, label=lbl) for i, (s, t, lbl) in enumerate(edges)),
    )


# ─── normalize ────────────────────────────────────────────────────────────────


class TestNormalize:
    def test_canonical_records_pass_through(self):
        """Well-formed records keep every field."""
        g = normalize(
            [
                {"id": "a", "label": "Upload", "description": "Upload files", "type": "Feature",
                 "moduleType": "ui", "outputs": ["file"]},
                {"id": "b", "label": "Store", "description": "", "type": "Task"},
            ],
            [{"id": "e1", "source": "a", "target": "b", "label": "file"}],
        )
        assert g.nodes[0] == Node(
            id="a", label="Upload", description="Upload files", type=NodeType.Feature, module_type="ui", outputs=("file",)
        )
        assert g.nodes[1].type is NodeType.Task
        assert g.nodes[1].module_type is None
        assert g.edges == (Edge(id="e1", source="a", target="b", label="file"),)

    def test_synthetic_ids(self):
        """Missing ids become node-{n} / edge-{n}, 1-based."""
        g = normalize([{"label": "A"}, {"label": "B"}], [{"source": "node-1", "target": "node-2"}])
        assert g.node_ids() == ["node-1", "node-2"]
        assert g.edges[0].id == "edge-1"

    def test_string_nodes(self):
        """A bare string becomes a node labelled (and described) by that string."""
        g = normalize(["Login", "Dashboard"], [])
        assert g.nodes[0] == Node(id="node-1", label="Login", description="Login")
        assert g.nodes[1].id == "node-2"

    def test_alternate_field_names(self):
        """title/name/text and from/to/src/dst/name/data are accepted."""
        g = normalize(
            [{"id": "a", "title": "Alpha", "text": "first"}, {"id": "b", "name": "Beta"}],
            [{"from": "a", "to": "b", "name": "x"}, {"src": "b", "dst": "a", "data": "y"}],
        )
        assert g.nodes[0].label == "Alpha"
        assert g.nodes[0].description == "first"
        assert g.nodes[1].label == "Beta"
        assert g.nodes[1].description == "Beta", "description falls back to the label"
        assert [(e.source, e.target, e.label) for e in g.edges] == [("a", "b", "x"), ("b", "a", "y")]

    def test_label_falls_back_to_id(self):
        g = normalize([{"id": "only-id"}], [])
        assert g.nodes[0].label == "only-id"

    def test_unknown_type_becomes_idea(self):
        g = normalize([{"id": "a", "type": "Epic"}, {"id": "b"}], [])
        assert g.nodes[0].type is NodeType.Idea
        assert g.nodes[1].type is NodeType.Idea

    def test_numeric_ids_are_stringified(self):
        """Numeric ids on nodes and edge endpoints still resolve to each other."""
        g = normalize([{"id": 1}, {"id": 2}], [{"source": 1, "target": 2, "label": "n"}])
        assert g.node_ids() == ["1", "2"]
        assert len(g.edges) == 1

    def test_malformed_outputs_default_to_empty(self):
        g = normalize([{"id": "a", "outputs": "not-a-list"}, {"id": "b", "outputs": [1, "two"]}], [])
        assert g.nodes[0].outputs == ()
        assert g.nodes[1].outputs == ("1", "two")

    def test_dangling_edges_dropped(self):
        """Edges whose source or target is unknown are discarded."""
        g = normalize(
            [{"id": "a"}, {"id": "b"}],
            [
                {"id": "ok", "source": "a", "target": "b"},
                {"id": "bad-src", "source": "ghost", "target": "b"},
                {"id": "bad-tgt", "source": "a", "target": "ghost"},
                {"id": "empty", "source": "", "target": "b"},
                {"id": "missing"},
            ],
        )
        assert [e.id for e in g.edges] == ["ok"]

    def test_non_record_entries_tolerated(self):
        """Garbage entries never raise."""
        g = normalize([None, 42, {"id": "a"}], ["nonsense", None, {"source": "a", "target": "a"}])
        assert len(g.nodes) == 3
        assert g.node_ids()[2] == "a"
        assert len(g.edges) == 1

    def test_none_inputs(self):
        assert normalize(None, None) == Graph()

    def test_duplicate_node_id_first_wins(self):
        g = normalize([{"id": "a", "label": "first"}, {"id": "a", "label": "second"}], [])
        assert len(g.nodes) == 1
        assert g.nodes[0].label == "first"

    def test_duplicate_edge_ids_renamed(self):
        g = normalize(
            [{"id": "a"}, {"id": "b"}],
            [
                {"id": "e", "source": "a", "target": "b", "label": "x"},
                {"id": "e", "source": "a", "target": "b", "label": "y"},
                {"id": "e", "source": "b", "target": "a", "label": "z"},
            ],
        )
        assert [e.id for e in g.edges] == ["e", "e-2", "e-3"]

    def test_result_is_immutable(self):
        g = normalize([{"id": "a"}], [])
        assert isinstance(g.nodes, tuple)
        assert isinstance(g.edges, tuple)

    def test_non_list_arguments_count_as_empty(self):
        """Scalars, strings and mappings in place of the lists never raise."""
        assert normalize(5, None) == Graph()
        assert normalize("abc", 7) == Graph()
        g = normalize([{"id": "a"}], {"source": "a", "target": "a"})
        assert g.node_ids() == ["a"]
        assert g.edges == ()


class TestNormalizeDocument:
    def test_top_level(self):
        g = normalize_document({"nodes": [{"id": "a"}], "edges": []})
        assert g.node_ids() == ["a"]

    def test_wrapped_under_graph_or_data(self):
        doc = {"nodes": [{"id": "a"}, {"id": "b"}], "edges": [{"source": "a", "target": "b"}]}
        assert normalize_document({"graph": doc}) == normalize_document(doc)
        assert normalize_document({"data": doc}) == normalize_document(doc)

    def test_missing_lists_yield_empty_graph(self):
        assert normalize_document({"nodes": [{"id": "a"}]}) == Graph()
        assert normalize_document({"graph": "nope"}) == Graph()
        assert normalize_document([1, 2, 3]) == Graph()
        assert normalize_document(None) == Graph()


# ─── Derived Ports ────────────────────────────────────────────────────────────


class TestPorts:
    def test_inputs_deduplicated_per_target(self):
        """Two producers of 'x' into the same target give one 'x' input."""
        g = make_graph(["a", "b", "c"], ("a", "c", "x"), ("b", "c", "x"), ("b", "c", "y"))
        assert g.inputs_by_node()["c"] == ["x", "y"]
        assert g.inputs_by_node()["a"] == []

    def test_output_ports_include_undeclared_labels(self):
        """Authored outputs come first, then outgoing labels not already listed."""
        g = Graph(
            nodes=(Node(id="a", label="A", outputs=("x",)), Node(id="b", label="B")),
            edges=(Edge("e1", "a", "b", "y"), Edge("e2", "a", "b", "x"), Edge("e3", "a", "b", "y")),
        )
        assert g.output_ports_by_node()["a"] == ["x", "y"]
        assert g.output_ports_by_node()["b"] == []

    def test_non_isolated_nodes_always_have_a_port(self):
        g = make_graph(["a", "b", "lonely"], ("a", "b", "data"))
        inputs, outputs = g.inputs_by_node(), g.output_ports_by_node()
        assert outputs["a"] and inputs["b"]
        assert not inputs["lonely"] and not outputs["lonely"]


# ─── Graph Helpers ────────────────────────────────────────────────────────────


class TestGraphHelpers:
    def test_predecessors_and_successors(self):
        g = make_graph(["a", "b", "c"], ("a", "c", "x"), ("b", "c", "y"), ("a", "c", "z"))
        assert g.predecessors("c") == ["a", "b"]
        assert g.successors("a") == ["c"]

    def test_degree(self):
        """A self-loop counts once; an unknown id has degree 0."""
        g = make_graph(["a", "b"], ("a", "b", "x"), ("a", "a", "loop"))
        assert (g.degree("a"), g.degree("b")) == (2, 1)
        assert g.degree("missing") == 0

    def test_incoming_and_outgoing_keep_parallel_edges(self):
        g = make_graph(["a", "b", "c"], ("a", "c", "x"), ("b", "c", "y"), ("a", "c", "z"))
        assert sorted(g.incoming("c")) == ["a", "a", "b"]
        assert g.outgoing("a") == ["c", "c"]
        assert g.incoming("missing") == [] and g.outgoing("missing") == []

    def test_digraph_is_built_once(self):
        g = make_graph(["a", "b"], ("a", "b", "x"))
        assert g.digraph is g.digraph
        assert g.digraph is not g.to_digraph()

    def test_get_node(self):
        g = make_graph(["a"])
        assert g.get_node("a").id == "a"

    def test_without_node_drops_incident_edges(self):
        g = make_graph(["a", "b", "c"], ("a", "b", "x"), ("b", "c", "y"), ("a", "c", "z"))
        h = g.without_node("b")
        assert h.node_ids() == ["a", "c"]
        assert [e.id for e in h.edges] == ["e3"]

    def test_replace_node_keeps_position(self):
        g = make_graph(["a", "b", "c"])
        h = g.replace_node(Node(id="b", label="Renamed"))
        assert h.node_ids() == ["a", "b", "c"]
        assert h.nodes[1].label == "Renamed"
        assert g.nodes[1].label == "b", "original snapshot is untouched"

    def test_focus(self):
        """Focus keeps the node, its direct neighbours and only the edges touching it."""
        g = make_graph(["a", "b", "c", "d"], ("a", "b", "x"), ("b", "c", "y"), ("c", "d", "z"), ("a", "c", "w"))
        h = g.focus("b")
        assert h.node_ids() == ["a", "b", "c"]
        assert [e.id for e in h.edges] == ["e1", "e2"]

    def test_focus_unknown_node(self):
        assert make_graph(["a"]).focus("zzz") == Graph()

    def test_to_digraph(self):
        g = make_graph(["a", "b"], ("a", "b", "x"), ("a", "b", "y"))
        dg = g.to_digraph()
        assert isinstance(dg, nx.MultiDiGraph)
        assert list(dg.nodes) == ["a", "b"]
        assert dg.number_of_edges("a", "b") == 2
        assert dg.nodes["a"]["data"].label == "a"
        assert dg.edges["a", "b", "e2"]["data"].label == "y"
