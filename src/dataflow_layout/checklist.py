"""Dependency checklist: the non-graphical consumer of the sequencer.

The checklist lists nodes so prerequisites come first. It calls
``topological_order`` on the graph exactly as supplied (no cycle resolution),
and on ``CycleError`` falls back to definition order instead of failing.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass

from dataflow_layout.errors import CycleError
from dataflow_layout.graph import Graph, Node
from dataflow_layout.layout.sequence import topological_order

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Checklist:
    """Checklist entries; ``ordered`` is False when a cycle forced the fallback."""

    nodes: tuple[Node, ...]
    ordered: bool = True


def build_checklist(graph: Graph) -> Checklist:
    try:
        order = topological_order(graph)
    except CycleError as exc:
        logger.warning("Graph contains a cycle; checklist falls back to definition order (%s)", exc)
        return Checklist(nodes=graph.nodes, ordered=False)
    by_id = {n.id: n for n in graph.nodes}
    return Checklist(nodes=tuple(by_id[node_id] for node_id in order))


def dependencies_of(graph: Graph) -> dict[str, list[str]]:
    """Node id → distinct ids of the nodes it depends on (edge sources), in edge order."""
    return {n.id: graph.predecessors(n.id) for n in graph.nodes}


def ready_to_work(graph: Graph, completed: Collection[str]) -> set[str]:
    """Ids of nodes not yet completed whose every dependency is completed."""
    done = set(completed)
    return {
        node_id
        for node_id, deps in dependencies_of(graph).items()
        if node_id not in done and all(dep in done for dep in deps)
    }


def all_completed(graph: Graph, completed: Collection[str]) -> bool:
    done = set(completed)
    return bool(graph.nodes) and all(n.id in done for n in graph.nodes)
