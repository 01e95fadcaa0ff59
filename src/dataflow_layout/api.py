"""Public API: raw document in, render model out.

    from dataflow_layout import layout_graph
    model = layout_graph({"nodes": [...], "edges": [...]})
"""

from __future__ import annotations

from typing import Any

from dataflow_layout.graph import Graph, normalize_document
from dataflow_layout.layout.cycles import ensure_acyclic, has_cycle
from dataflow_layout.layout.pipeline import full_layout
from dataflow_layout.layout.sequence import topological_order
from dataflow_layout.layout.types import LayoutConfig, LayoutResult
from dataflow_layout.renderers.base import Renderer
from dataflow_layout.renderers.render_model import RenderModelRenderer, to_render_model

__all__ = [
    "ensure_acyclic",
    "has_cycle",
    "layout",
    "layout_graph",
    "render",
    "render_json",
    "topological_order",
]


def _as_graph(source: Graph | Any) -> Graph:
    return source if isinstance(source, Graph) else normalize_document(source)


def layout(source: Graph | Any, config: LayoutConfig | None = None) -> LayoutResult:
    """Normalise ``source`` if needed and run the full pipeline."""
    return full_layout(_as_graph(source), config)


def layout_graph(source: Graph | Any, config: LayoutConfig | None = None) -> dict[str, Any]:
    """Lay out a graph or raw document and return the render model dict."""
    return to_render_model(layout(source, config))


def render(source: Graph | Any, renderer: Renderer, config: LayoutConfig | None = None) -> str:
    """Lay out a graph or raw document and hand the result to ``renderer``."""
    return renderer.render(layout(source, config))


def render_json(source: Graph | Any, config: LayoutConfig | None = None, indent: int | None = None) -> str:
    """Lay out a graph or raw document and return canonical render-model JSON."""
    return render(source, RenderModelRenderer(indent=indent), config)
