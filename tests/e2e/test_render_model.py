"""End-to-end tests: raw documents through the full pipeline to render-model JSON."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from dataflow_layout import layout, layout_graph, render, render_json
from dataflow_layout.cli import main
from dataflow_layout.layout.crossing import count_crossings
from dataflow_layout.layout.cycles import has_cycle

FIXTURES_DIR = Path(__file__).parent / "fixtures"
FIXTURES = sorted(FIXTURES_DIR.glob("*.json"))


def load(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


TRIANGLE = {
    "nodes": [
        {"id": "A", "label": "A", "outputs": ["ab"]},
        {"id": "B", "label": "B", "outputs": ["bc"]},
        {"id": "C", "label": "C", "outputs": ["ca"]},
    ],
    "edges": [
        {"id": "e1", "source": "A", "target": "B", "label": "ab"},
        {"id": "e2", "source": "B", "target": "C", "label": "bc"},
        {"id": "e3", "source": "C", "target": "A", "label": "ca"},
    ],
}


class TestPipeline:
    def test_triangle_scenario(self):
        result = layout(TRIANGLE)
        assert [e.id for e in result.back_edges] == ["e3"]
        assert len(result.dag.edges) == 2
        assert result.order == ["A", "B", "C"]
        assert result.layers == {"A": 0, "B": 1, "C": 2}
        assert not has_cycle(result.dag)

    def test_back_edge_still_rendered(self):
        model = layout_graph(TRIANGLE)
        flags = {e["id"]: e["backEdge"] for e in model["edges"]}
        assert flags == {"e1": False, "e2": False, "e3": True}

    @pytest.mark.parametrize("path", FIXTURES, ids=[p.stem for p in FIXTURES])
    def test_layer_invariants(self, path: Path):
        result = layout(load(path))
        for e in result.dag.edges:
            assert result.layers[e.target] > result.layers[e.source]
        for layer_idx, layer in enumerate(result.ordering):
            assert all(result.layers[nid] == layer_idx for nid in layer)
            assert [result.nodes[nid].order for nid in layer] == list(range(len(layer)))

    @pytest.mark.parametrize("path", FIXTURES, ids=[p.stem for p in FIXTURES])
    def test_every_connected_node_has_a_port(self, path: Path):
        result = layout(load(path))
        touched = {e.source for e in result.graph.edges} | {e.target for e in result.graph.edges}
        for node_id, ln in result.nodes.items():
            assert ln.is_unported == (node_id not in touched)

    def test_dangling_edges_never_reach_layout(self):
        doc = {"nodes": [{"id": "a"}], "edges": [{"source": "a", "target": "missing", "label": "x"}]}
        model = layout_graph(doc)
        assert model["edges"] == []
        assert len(model["nodes"]) == 1

    def test_empty_document(self):
        assert layout_graph({"nodes": [], "edges": []}) == {"nodes": [], "edges": []}

    def test_pipeline_crossings_on_pipeline_fixture(self):
        result = layout(load(FIXTURES_DIR / "photo_pipeline.json"))
        assert count_crossings(result.ordering, result.dag.edges) == 0


class TestRenderModel:
    def test_node_fields(self):
        model = layout_graph(TRIANGLE)
        node = model["nodes"][0]
        assert node["id"] == "A"
        assert node["type"] == "Idea"
        assert node["inputs"] == ["ca"]
        assert node["outputs"] == ["ab"]
        assert {"layer", "orderInLayer", "width", "height", "x", "y", "ports"} <= node.keys()
        assert "moduleType" not in node
        assert node["ports"]["outputs"][0]["label"] == "ab"

    def test_edge_fields(self):
        edge = layout_graph(TRIANGLE)["edges"][0]
        assert (edge["source"], edge["target"], edge["label"]) == ("A", "B", "ab")
        assert len(edge["pathControlPoints"]) == 4
        assert edge["path"].startswith("M ")

    @pytest.mark.parametrize("path", FIXTURES, ids=[p.stem for p in FIXTURES])
    def test_byte_identical_across_runs(self, path: Path):
        doc = load(path)
        assert render_json(doc) == render_json(doc)
        assert render_json(doc) == render_json(json.loads(json.dumps(doc)))


class TestCli:
    def test_writes_render_model(self, tmp_path: Path):
        out = tmp_path / "render.json"
        assert main([str(FIXTURES_DIR / "photo_pipeline.json"), "-o", str(out)]) == 0
        model = json.loads(out.read_text(encoding="utf-8"))
        assert {n["id"] for n in model["nodes"]} >= {"upload", "tagging", "search"}

    def test_stdout_matches_api(self, capsys):
        path = FIXTURES_DIR / "photo_pipeline.json"
        assert main([str(path)]) == 0
        assert capsys.readouterr().out.strip() == render_json(load(path))

    def test_checklist(self, capsys):
        assert main([str(FIXTURES_DIR / "cyclic_review.json"), "--checklist", "--completed", "draft"]) == 0
        doc = json.loads(capsys.readouterr().out)
        assert doc["ordered"] is False
        assert [item["id"] for item in doc["items"]][0] == "draft"
        assert doc["items"][0]["completed"] is True

    def test_unreadable_input(self, tmp_path: Path, capsys):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        assert main([str(bad)]) == 2
        assert "error" in capsys.readouterr().err

    def test_input_not_utf8(self, tmp_path: Path, capsys):
        latin = tmp_path / "latin.json"
        latin.write_bytes(b'{"nodes": ["\xff\xfe"], "edges": []}')
        assert main([str(latin)]) == 2
        assert "error" in capsys.readouterr().err

    def test_missing_file(self, tmp_path: Path):
        assert main([str(tmp_path / "nope.json")]) == 2


class TestRenderer:
    def test_custom_renderer_receives_layout_result(self):
        """Any object with a ``render(result)`` method plugs into the API."""

        class LayerCount:
            def render(self, result) -> str:
                return f"{result.layer_count} layers"

        assert render(TRIANGLE, LayerCount()) == "3 layers"
