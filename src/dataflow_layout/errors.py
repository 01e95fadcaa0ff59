"""Exception types raised by the layout pipeline."""

from __future__ import annotations


class LayoutError(Exception):
    """Base class for every error raised by dataflow_layout."""


class CycleError(LayoutError):
    """Topological sequencing was requested on a graph that still has a cycle.

    ``remaining`` holds the ids that could not be sequenced (every node on or
    downstream of a cycle), in node-definition order.
    """

    def __init__(self, remaining: list[str]) -> None:
        self.remaining = remaining
        super().__init__(f"Graph has a cycle ({len(remaining)} node(s) could not be ordered)")


class MalformedReferenceError(LayoutError):
    """An edge references a node id that does not exist.

    Only raised inside normalisation, where the offending edge is dropped.
    """

    def __init__(self, edge_id: str, endpoint: str, node_id: str) -> None:
        self.edge_id = edge_id
        self.endpoint = endpoint
        self.node_id = node_id
        super().__init__(f"Edge {edge_id!r} has unknown {endpoint} {node_id!r}")
