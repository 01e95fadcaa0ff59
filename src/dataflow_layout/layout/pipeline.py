"""Full layout pipeline.

Phases, each consuming the previous phase's output:
  1. Cycle resolution      (drop back edges → DAG)
  2. Topological sequence  (Kahn)
  3. Layer assignment      (longest path)
  4. Crossing minimisation (seed order + barycenter sweeps)
  5. Port layout           (sizes, positions, port coordinates)
  6. Edge routing          (cubic curves with sibling fan-out)

Phases 2–4 only see the acyclic edge set. Sizing and routing use every
normalised edge so back edges keep their ports and are still drawn.
"""

from __future__ import annotations

import logging

from dataflow_layout.graph import Graph
from dataflow_layout.layout.crossing import reorder_layers
from dataflow_layout.layout.cycles import find_back_edges
from dataflow_layout.layout.layers import assign_layers, group_by_layer
from dataflow_layout.layout.ports import size_and_place_ports
from dataflow_layout.layout.routing import route_edges
from dataflow_layout.layout.sequence import topological_order
from dataflow_layout.layout.types import LayoutConfig, LayoutResult

logger = logging.getLogger(__name__)


def full_layout(graph: Graph, config: LayoutConfig | None = None) -> LayoutResult:
    """Run the full layout pipeline on a normalised graph."""
    config = config or LayoutConfig()

    back_edges = find_back_edges(graph)
    dag = graph.without_edges(e.id for e in back_edges) if back_edges else graph

    order = topological_order(dag)
    layers = assign_layers(dag, order)
    ordered_layers = reorder_layers(group_by_layer(dag, layers), dag.edges, config)
    nodes = size_and_place_ports(graph, ordered_layers, config)
    edges = route_edges(graph.edges, nodes, config, back_edge_ids={e.id for e in back_edges})

    logger.debug(
        "Laid out %d node(s) in %d layer(s), %d edge(s) routed, %d back edge(s)",
        len(nodes),
        len(ordered_layers),
        len(edges),
        len(back_edges),
    )

    return LayoutResult(
        graph=graph,
        dag=dag,
        back_edges=back_edges,
        order=order,
        layers=layers,
        ordering=[[n.id for n in layer] for layer in ordered_layers],
        nodes=nodes,
        edges=edges,
    )
