"""Edge routing: one cubic curve per edge, with sibling fan-out.

Edges sharing a source port (same source node and label) form a source group;
edges sharing a target port form a target group. Both endpoints of a sibling
still attach to the same port dot, but each curve's control points are pushed
apart vertically by its centred index in the group:

    centre = index - (count - 1) / 2      # e.g. -0.5, +0.5 for a pair

The offset shrinks as the endpoints get horizontally closer so short,
nearly vertical edges do not bulge.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence

from dataflow_layout.graph import Edge
from dataflow_layout.layout.ports import port_position
from dataflow_layout.layout.types import (
    SPREAD_FULL_DX,
    LayoutConfig,
    LayoutNode,
    Point,
    PortDirection,
    RoutedEdge,
    SiblingSlot,
)


def _group_indices(
    edges: list[Edge],
    key: str,
    other_end: str,
    nodes: dict[str, LayoutNode],
) -> dict[str, tuple[int, int]]:
    """Edge id → (index, count) inside its (``key`` node, label) group.

    Siblings are ordered by the position of the node at ``other_end``:
    vertical, then horizontal, then edge id.
    """
    groups: dict[tuple[str, str], list[Edge]] = {}
    for e in edges:
        groups.setdefault((getattr(e, key), e.label), []).append(e)

    indices: dict[str, tuple[int, int]] = {}
    for group in groups.values():
        group.sort(key=lambda e: (nodes[getattr(e, other_end)].y, nodes[getattr(e, other_end)].x, e.id))
        for i, e in enumerate(group):
            indices[e.id] = (i, len(group))
    return indices


def sibling_slots(edges: Sequence[Edge], nodes: dict[str, LayoutNode]) -> dict[str, SiblingSlot]:
    """Compute each routable edge's slot in its source and target groups."""
    routable = [e for e in edges if e.source in nodes and e.target in nodes]
    by_source = _group_indices(routable, "source", "target", nodes)
    by_target = _group_indices(routable, "target", "source", nodes)
    return {
        e.id: SiblingSlot(
            source_index=by_source[e.id][0],
            source_count=by_source[e.id][1],
            target_index=by_target[e.id][0],
            target_count=by_target[e.id][1],
        )
        for e in routable
    }


def route_edges(
    edges: Sequence[Edge],
    nodes: dict[str, LayoutNode],
    config: LayoutConfig | None = None,
    back_edge_ids: Collection[str] = (),
) -> list[RoutedEdge]:
    """Route every edge whose endpoints were laid out, in input order.

    Control points sit half the horizontal separation in from each end, each
    shifted vertically by its sibling offset.
    """
    config = config or LayoutConfig()
    slots = sibling_slots(edges, nodes)

    routes: list[RoutedEdge] = []
    for e in edges:
        slot = slots.get(e.id)
        if slot is None:
            continue

        start = port_position(nodes[e.source], e.label, PortDirection.Output)
        end = port_position(nodes[e.target], e.label, PortDirection.Input)
        dx = abs(end.x - start.x)
        handle = dx * 0.5
        spread = config.sibling_spread * min(1.0, dx / SPREAD_FULL_DX)

        routes.append(
            RoutedEdge(
                edge=e,
                start=start,
                control1=Point(start.x + handle, start.y + slot.source_centre * spread),
                control2=Point(end.x - handle, end.y + slot.target_centre * spread),
                end=end,
                back_edge=e.id in back_edge_ids,
            )
        )

    return routes
