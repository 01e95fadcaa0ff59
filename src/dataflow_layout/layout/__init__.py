"""Layout module: left-to-right layered layout of artifact-flow graphs."""

from dataflow_layout.layout.crossing import count_crossings, reorder_layers, seed_order
from dataflow_layout.layout.cycles import ensure_acyclic, find_back_edges, has_cycle
from dataflow_layout.layout.layers import assign_layers, group_by_layer
from dataflow_layout.layout.pipeline import full_layout
from dataflow_layout.layout.ports import node_dimensions, port_position, size_and_place_ports
from dataflow_layout.layout.routing import route_edges, sibling_slots
from dataflow_layout.layout.sequence import topological_order
from dataflow_layout.layout.types import LayoutConfig, LayoutNode, LayoutResult, Point, PortPosition, RoutedEdge

__all__ = [
    "LayoutConfig",
    "LayoutNode",
    "LayoutResult",
    "Point",
    "PortPosition",
    "RoutedEdge",
    "assign_layers",
    "count_crossings",
    "ensure_acyclic",
    "find_back_edges",
    "full_layout",
    "group_by_layer",
    "has_cycle",
    "node_dimensions",
    "port_position",
    "reorder_layers",
    "route_edges",
    "seed_order",
    "sibling_slots",
    "size_and_place_ports",
    "topological_order",
]
