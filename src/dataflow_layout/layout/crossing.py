"""Crossing minimisation: seeded barycenter sweeps.

Each layer starts from a domain seed order: technical facet priority first
(infrastructure before storage before backend ... before UI), then total edge
degree (more connected first), then node id. A fixed number of alternating
sweeps then re-sorts every layer by the mean position of its neighbours in
the adjacent layer:

  forward  (layer 1 .. n-1): predecessors in the previous layer
  backward (layer n-2 .. 0): successors in the next layer

A node with no neighbour in the adjacent layer gets barycenter 0 and drifts to
the front. Sorts are stable, so equal barycenters keep their previous order.
This is a heuristic: the output is deterministic, not crossing-optimal.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from dataflow_layout.graph import Edge, Graph, Node
from dataflow_layout.layout.types import LayoutConfig

logger = logging.getLogger(__name__)


def _flow(edges: Sequence[Edge]) -> Graph:
    """Edge-only graph whose digraph answers the adjacency queries below."""
    return Graph(edges=tuple(edges))


def _seed(layers_of_nodes: list[list[Node]], flow: Graph, config: LayoutConfig) -> list[list[Node]]:
    return [
        sorted(layer, key=lambda n: (config.priority_of(n.module_type), -flow.degree(n.id), n.id))
        for layer in layers_of_nodes
    ]


def seed_order(
    layers_of_nodes: list[list[Node]],
    edges: Sequence[Edge],
    config: LayoutConfig | None = None,
) -> list[list[Node]]:
    """Sort each layer by (facet priority, -degree, id)."""
    return _seed(layers_of_nodes, _flow(edges), config or LayoutConfig())


def _barycenter(neighbours: list[str], positions: dict[str, int]) -> float:
    """Mean position of ``neighbours`` that sit in the adjacent layer; 0 if none."""
    found = [positions[nb] for nb in neighbours if nb in positions]
    if not found:
        return 0.0
    return sum(found) / len(found)


def reorder_layers(
    layers_of_nodes: list[list[Node]],
    edges: Sequence[Edge],
    config: LayoutConfig | None = None,
) -> list[list[Node]]:
    """Reorder nodes within each layer to reduce edge crossings.

    The partition is never changed: each returned layer holds exactly the
    nodes of the corresponding input layer. Parallel edges weigh their
    neighbour once per edge.
    """
    config = config or LayoutConfig()
    flow = _flow(edges)
    ordering = _seed(layers_of_nodes, flow, config)

    for _sweep in range(config.sweep_count):
        for layer_idx in range(1, len(ordering)):
            prev = {n.id: i for i, n in enumerate(ordering[layer_idx - 1])}
            ordering[layer_idx].sort(key=lambda n, p=prev: _barycenter(flow.incoming(n.id), p))

        for layer_idx in range(len(ordering) - 2, -1, -1):
            nxt = {n.id: i for i, n in enumerate(ordering[layer_idx + 1])}
            ordering[layer_idx].sort(key=lambda n, p=nxt: _barycenter(flow.outgoing(n.id), p))

    if logger.isEnabledFor(logging.DEBUG):
        ids = [[n.id for n in layer] for layer in ordering]
        logger.debug("Layer ordering after %d sweep(s): %d crossing(s)", config.sweep_count, count_crossings(ids, edges))

    return ordering


def count_crossings(ordering: list[list[str]], edges: Sequence[Edge]) -> int:
    """Count edge crossings between consecutive layers (inversion count)."""
    flow = _flow(edges)
    total = 0
    for l_idx in range(len(ordering) - 1):
        tgt_pos: dict[str, int] = {nid: i for i, nid in enumerate(ordering[l_idx + 1])}
        spans = [
            (src_idx, tgt_pos[tgt])
            for src_idx, src in enumerate(ordering[l_idx])
            for tgt in flow.outgoing(src)
            if tgt in tgt_pos
        ]
        for i in range(len(spans)):
            for j in range(i + 1, len(spans)):
                si, sj = spans[i], spans[j]
                if (si[0] < sj[0] and si[1] > sj[1]) or (si[0] > sj[0] and si[1] < sj[1]):
                    total += 1
    return total
