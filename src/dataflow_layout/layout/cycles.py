"""Cycle resolution: single depth-first sweep that drops back edges.

Nodes are visited in definition order and each node's outgoing edges in edge
order. An edge that reaches a node still on the traversal stack (a self-loop
included) is a back edge. Back edges are collected during the walk and only
removed once it finishes, so the read and write phases never interleave.

The traversal uses an explicit stack over an index arena rather than Python
recursion, so deep chains cannot hit the recursion limit.

Because the visiting order is fixed, the removed set is a deterministic
function of the input order: reordering nodes or edges may remove a
different (equally valid) set.
"""

from __future__ import annotations

import logging

import networkx as nx

from dataflow_layout.graph import Edge, Graph

logger = logging.getLogger(__name__)

_UNVISITED = 0
_ACTIVE = 1
_DONE = 2


def _adjacency_arena(graph: Graph) -> list[list[tuple[int, int]]]:
    """Node index → list of (edge index, neighbour node index), in edge order."""
    index: dict[str, int] = {node.id: i for i, node in enumerate(graph.nodes)}
    arena: list[list[tuple[int, int]]] = [[] for _ in graph.nodes]
    for edge_idx, edge in enumerate(graph.edges):
        src = index.get(edge.source)
        tgt = index.get(edge.target)
        if src is None or tgt is None:
            continue
        arena[src].append((edge_idx, tgt))
    return arena


def find_back_edges(graph: Graph) -> tuple[Edge, ...]:
    """Return the back edges found by one DFS sweep, in discovery order.

    Runs in O(V + E). Removing exactly these edges leaves a DAG.
    """
    arena = _adjacency_arena(graph)
    state: list[int] = [_UNVISITED] * len(arena)
    to_remove: list[int] = []

    for root in range(len(arena)):
        if state[root] != _UNVISITED:
            continue
        state[root] = _ACTIVE
        # Each frame is (node index, position of the next outgoing edge to walk).
        stack: list[tuple[int, int]] = [(root, 0)]

        while stack:
            node, cursor = stack[-1]
            neighbours = arena[node]
            if cursor == len(neighbours):
                state[node] = _DONE
                stack.pop()
                continue

            stack[-1] = (node, cursor + 1)
            edge_idx, nxt = neighbours[cursor]
            if state[nxt] == _ACTIVE:
                to_remove.append(edge_idx)
            elif state[nxt] == _UNVISITED:
                state[nxt] = _ACTIVE
                stack.append((nxt, 0))

    back_edges = tuple(graph.edges[i] for i in to_remove)
    for edge in back_edges:
        logger.debug("Back edge %s: %s -> %s (%r)", edge.id, edge.source, edge.target, edge.label)
    return back_edges


def ensure_acyclic(graph: Graph) -> Graph:
    """Return ``graph`` without its back edges. All nodes are kept; never raises."""
    back_edges = find_back_edges(graph)
    if not back_edges:
        return graph
    logger.debug("Removed %d back edge(s) to break cycles", len(back_edges))
    return graph.without_edges(e.id for e in back_edges)


def has_cycle(graph: Graph) -> bool:
    """True if the graph contains a directed cycle (self-loops count)."""
    return not nx.is_directed_acyclic_graph(graph.digraph)
