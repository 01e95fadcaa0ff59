"""dataflow_layout: deterministic layered layout for artifact-flow graphs."""

from dataflow_layout.api import layout, layout_graph, render, render_json
from dataflow_layout.errors import CycleError, LayoutError, MalformedReferenceError
from dataflow_layout.graph import Edge, Graph, Node, NodeType, normalize, normalize_document
from dataflow_layout.layout import ensure_acyclic, full_layout, has_cycle, topological_order
from dataflow_layout.layout.types import LayoutConfig

__all__ = [
    "CycleError",
    "Edge",
    "Graph",
    "LayoutConfig",
    "LayoutError",
    "MalformedReferenceError",
    "Node",
    "NodeType",
    "ensure_acyclic",
    "full_layout",
    "has_cycle",
    "layout",
    "layout_graph",
    "normalize",
    "normalize_document",
    "render",
    "render_json",
    "topological_order",
]
