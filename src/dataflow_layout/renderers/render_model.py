"""Render model: the read-only document handed to drawing collaborators.

Shape::

    {"nodes": [{id, label, description, type, moduleType?, outputs, inputs,
                layer, orderInLayer, width, height, x, y,
                ports: {inputs: [{label, x, y}], outputs: [{label, x, y}]}}],
     "edges": [{id, source, target, label, backEdge,
                pathControlPoints: [[x, y], ...], path}]}

Nodes and edges follow the input graph's order. Coordinates are rounded to a
fixed precision and the JSON is emitted with sorted keys, so the same input
always serialises to the same bytes.
"""

from __future__ import annotations

import json
from typing import Any

from dataflow_layout.graph import Node
from dataflow_layout.layout.types import LayoutNode, LayoutResult, PortPosition, RoutedEdge

PRECISION = 3


def _num(value: float) -> float | int:
    rounded = round(value, PRECISION)
    return int(rounded) if rounded == int(rounded) else rounded


def _port(port: PortPosition) -> dict[str, Any]:
    return {"label": port.label, "x": _num(port.x), "y": _num(port.y)}


def _node(node: Node, inputs: list[str], ln: LayoutNode) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": node.id,
        "label": node.label,
        "description": node.description,
        "type": node.type.value,
        "outputs": list(node.outputs),
        "inputs": inputs,
        "layer": ln.layer,
        "orderInLayer": ln.order,
        "width": _num(ln.width),
        "height": _num(ln.height),
        "x": _num(ln.x),
        "y": _num(ln.y),
        "ports": {
            "inputs": [_port(p) for p in ln.inputs],
            "outputs": [_port(p) for p in ln.outputs],
        },
    }
    if node.module_type is not None:
        out["moduleType"] = node.module_type
    return out


def _edge(route: RoutedEdge) -> dict[str, Any]:
    e = route.edge
    return {
        "id": e.id,
        "source": e.source,
        "target": e.target,
        "label": e.label,
        "backEdge": route.back_edge,
        "pathControlPoints": [[_num(p.x), _num(p.y)] for p in route.control_points],
        "path": route.path,
    }


def to_render_model(result: LayoutResult) -> dict[str, Any]:
    """Build the render model dict for a layout result."""
    inputs = result.graph.inputs_by_node()
    return {
        "nodes": [
            _node(node, inputs.get(node.id, []), result.nodes[node.id])
            for node in result.graph.nodes
            if node.id in result.nodes
        ],
        "edges": [_edge(route) for route in result.edges],
    }


def dumps(model: dict[str, Any], indent: int | None = None) -> str:
    """Canonical JSON: sorted keys, fixed separators."""
    separators = (",", ": ") if indent is not None else (",", ":")
    return json.dumps(model, sort_keys=True, indent=indent, separators=separators, ensure_ascii=False)


class RenderModelRenderer:
    """Renders a ``LayoutResult`` to render-model JSON."""

    def __init__(self, indent: int | None = None) -> None:
        self.indent = indent

    def render(self, result: LayoutResult) -> str:
        return dumps(to_render_model(result), indent=self.indent)
