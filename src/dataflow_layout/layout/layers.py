"""Layer assignment: longest path from any root.

Every node's layer is 1 + the maximum layer of its predecessors, or 0 when it
has none. Walking the nodes in topological order means each predecessor's
layer is already final, so one pass suffices.
"""

from __future__ import annotations

from dataflow_layout.graph import Graph, Node


def assign_layers(graph: Graph, order: list[str]) -> dict[str, int]:
    """Assign a layer to every node id in ``order``.

    ``order`` must be a topological order of ``graph`` (see
    ``topological_order``), and ``graph`` must be acyclic.
    """
    layers: dict[str, int] = {}
    for node_id in order:
        max_parent = -1
        for parent in graph.predecessors(node_id):
            parent_layer = layers.get(parent)
            if parent_layer is not None and parent_layer > max_parent:
                max_parent = parent_layer
        layers[node_id] = max_parent + 1

    return layers


def group_by_layer(graph: Graph, layers: dict[str, int]) -> list[list[Node]]:
    """Partition nodes by layer index; nodes keep definition order within a layer."""
    layer_count = (max(layers.values()) + 1) if layers else 0
    grouped: list[list[Node]] = [[] for _ in range(layer_count)]
    for node in graph.nodes:
        layer = layers.get(node.id)
        if layer is not None:
            grouped[layer].append(node)
    return grouped
