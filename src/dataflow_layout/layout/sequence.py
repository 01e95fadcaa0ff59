"""Topological sequencing (Kahn's algorithm)."""

from __future__ import annotations

from collections import deque

from dataflow_layout.errors import CycleError
from dataflow_layout.graph import Graph


def topological_order(graph: Graph) -> list[str]:
    """Return node ids ordered so every edge points forward.

    The queue is seeded with zero in-degree nodes in node-definition order
    and drained FIFO, so the result is stable for a fixed input.

    Raises:
        CycleError: if a cycle prevents some nodes from being sequenced. A
            partial order is never returned.
    """
    in_degree: dict[str, int] = {node.id: 0 for node in graph.nodes}
    adjacency: dict[str, list[str]] = {node.id: [] for node in graph.nodes}

    for edge in graph.edges:
        if edge.source in adjacency and edge.target in in_degree:
            adjacency[edge.source].append(edge.target)
            in_degree[edge.target] += 1

    queue: deque[str] = deque(node_id for node_id, deg in in_degree.items() if deg == 0)
    result: list[str] = []

    while queue:
        node_id = queue.popleft()
        result.append(node_id)
        for succ in adjacency[node_id]:
            in_degree[succ] -= 1
            if in_degree[succ] == 0:
                queue.append(succ)

    if len(result) != len(graph.nodes):
        sequenced = set(result)
        raise CycleError([node.id for node in graph.nodes if node.id not in sequenced])

    return result
