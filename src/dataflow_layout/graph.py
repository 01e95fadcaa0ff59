"""Graph model: canonical, immutable node/edge snapshot.

Raw graphs arrive from uncontrolled producers (an extraction service, a
hand-edited JSON file) and are loosely typed: ids may be missing, field names
vary, and edges may point at nodes that do not exist. ``normalize`` coerces
all of that into a ``Graph`` whose invariants every later layout phase relies
on:

  - node ids are unique, edge ids are unique
  - every edge endpoint names an existing node

Ports are derived here as well: a node's input ports are the distinct labels
of its incoming edges, its output ports are its authored outputs followed by
any outgoing edge label it did not declare.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import cached_property
from typing import Any

import networkx as nx

from dataflow_layout.errors import MalformedReferenceError

logger = logging.getLogger(__name__)


# ─── Node / Edge Types ────────────────────────────────────────────────────────


class NodeType(str, Enum):
    """Business classification of a node."""

    Goal = "Goal"
    Feature = "Feature"
    Task = "Task"
    Constraint = "Constraint"
    Idea = "Idea"

    @classmethod
    def coerce(cls, value: object) -> NodeType:
        """Map a raw value onto the enum, falling back to ``Idea``."""
        if isinstance(value, NodeType):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return cls.Idea


@dataclass(frozen=True)
class Node:
    """A node as authored. Layout attributes live on ``LayoutNode``."""

    id: str
    label: str
    description: str = ""
    type: NodeType = NodeType.Idea
    module_type: str | None = None
    outputs: tuple[str, ...] = ()


@dataclass(frozen=True)
class Edge:
    """A directed edge carrying the artifact ``label`` from source to target."""

    id: str
    source: str
    target: str
    label: str = ""


@dataclass(frozen=True)
class Graph:
    """Immutable graph snapshot. Node and edge order is significant."""

    nodes: tuple[Node, ...] = field(default_factory=tuple)
    edges: tuple[Edge, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))

    # ── Lookups ──

    def node_ids(self) -> list[str]:
        return [n.id for n in self.nodes]

    def get_node(self, node_id: str) -> Node:
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise KeyError(node_id)

    @cached_property
    def digraph(self) -> nx.MultiDiGraph:
        """Shared ``to_digraph()`` view used by the adjacency queries. Treat as read-only."""
        return self.to_digraph()

    def predecessors(self, node_id: str) -> list[str]:
        """Distinct source ids of edges into ``node_id``, in edge order."""
        if node_id not in self.digraph:
            return []
        return list(self.digraph.predecessors(node_id))

    def successors(self, node_id: str) -> list[str]:
        """Distinct target ids of edges out of ``node_id``, in edge order."""
        if node_id not in self.digraph:
            return []
        return list(self.digraph.successors(node_id))

    def incoming(self, node_id: str) -> list[str]:
        """Source id of every edge into ``node_id``; parallel edges repeat."""
        if node_id not in self.digraph:
            return []
        return [u for u, _ in self.digraph.in_edges(node_id)]

    def outgoing(self, node_id: str) -> list[str]:
        """Target id of every edge out of ``node_id``; parallel edges repeat."""
        if node_id not in self.digraph:
            return []
        return [v for _, v in self.digraph.out_edges(node_id)]

    def degree(self, node_id: str) -> int:
        """Number of edges touching ``node_id`` (a self-loop counts once)."""
        if node_id not in self.digraph:
            return 0
        return self.digraph.degree(node_id) - self.digraph.number_of_edges(node_id, node_id)

    # ── Ports ──

    def inputs_by_node(self) -> dict[str, list[str]]:
        """Input port labels per node: incoming edge labels, de-duplicated per target."""
        inputs: dict[str, list[str]] = {n.id: [] for n in self.nodes}
        for e in self.edges:
            target_inputs = inputs.get(e.target)
            if target_inputs is not None and e.label not in target_inputs:
                target_inputs.append(e.label)
        return inputs

    def output_ports_by_node(self) -> dict[str, list[str]]:
        """Output port labels per node: authored outputs, then undeclared edge labels."""
        outputs: dict[str, list[str]] = {n.id: list(dict.fromkeys(n.outputs)) for n in self.nodes}
        for e in self.edges:
            source_outputs = outputs.get(e.source)
            if source_outputs is not None and e.label not in source_outputs:
                source_outputs.append(e.label)
        return outputs

    # ── Derived graphs ──

    def without_edges(self, edge_ids: Iterable[str]) -> Graph:
        drop = set(edge_ids)
        return Graph(nodes=self.nodes, edges=tuple(e for e in self.edges if e.id not in drop))

    def without_node(self, node_id: str) -> Graph:
        """Delete a node together with every edge touching it."""
        return Graph(
            nodes=tuple(n for n in self.nodes if n.id != node_id),
            edges=tuple(e for e in self.edges if node_id not in (e.source, e.target)),
        )

    def replace_node(self, node: Node) -> Graph:
        """Swap in an edited node with the same id, keeping its position."""
        return replace(self, nodes=tuple(node if n.id == node.id else n for n in self.nodes))

    def focus(self, node_id: str) -> Graph:
        """The selected node, its direct neighbours, and only the edges touching it.

        An unknown id yields an empty graph.
        """
        if node_id not in self.node_ids():
            return Graph()
        edges = tuple(e for e in self.edges if node_id in (e.source, e.target))
        visible = {node_id}
        for e in edges:
            visible.add(e.source)
            visible.add(e.target)
        return Graph(nodes=tuple(n for n in self.nodes if n.id in visible), edges=edges)

    def to_digraph(self) -> nx.MultiDiGraph:
        """Build a networkx MultiDiGraph; node and edge payloads sit under ``data``."""
        g: nx.MultiDiGraph = nx.MultiDiGraph()
        for node in self.nodes:
            g.add_node(node.id, data=node)
        for edge in self.edges:
            g.add_edge(edge.source, edge.target, key=edge.id, data=edge)
        return g


# ─── Normalisation ────────────────────────────────────────────────────────────


def _first(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first non-null value among ``keys``."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return default


def _coerce_node(raw: Any, index: int) -> Node:
    fallback_id = f"node-{index + 1}"
    if isinstance(raw, str):
        return Node(id=fallback_id, label=raw, description=raw)
    if not isinstance(raw, Mapping):
        return Node(id=fallback_id, label=fallback_id)

    node_id = str(_first(raw, "id", default=fallback_id))
    label = str(_first(raw, "label", "title", "name", default=node_id))
    description = str(_first(raw, "description", "text", default=label))
    module_type = _first(raw, "moduleType", "module_type")
    raw_outputs = raw.get("outputs")
    outputs = tuple(str(o) for o in raw_outputs) if isinstance(raw_outputs, (list, tuple)) else ()

    return Node(
        id=node_id,
        label=label,
        description=description,
        type=NodeType.coerce(raw.get("type")),
        module_type=str(module_type) if module_type not in (None, "") else None,
        outputs=outputs,
    )


def _coerce_edge(raw: Mapping[str, Any], index: int) -> Edge:
    return Edge(
        id=str(_first(raw, "id", default=f"edge-{index + 1}")),
        source=str(_first(raw, "source", "from", "src", default="")),
        target=str(_first(raw, "target", "to", "dst", default="")),
        label=str(_first(raw, "label", "name", "data", default="")),
    )


def _check_references(edge: Edge, node_ids: set[str]) -> None:
    if not edge.source or edge.source not in node_ids:
        raise MalformedReferenceError(edge.id, "source", edge.source)
    if not edge.target or edge.target not in node_ids:
        raise MalformedReferenceError(edge.id, "target", edge.target)


def _unique_id(candidate: str, taken: set[str]) -> str:
    if candidate not in taken:
        return candidate
    suffix = 2
    while f"{candidate}-{suffix}" in taken:
        suffix += 1
    return f"{candidate}-{suffix}"


def _records(raw: Any, kind: str) -> Iterable[Any]:
    """The raw list to walk; anything that is not a list of records counts as empty."""
    if raw is None:
        return ()
    if isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Iterable):
        logger.debug("Ignoring %s: expected a list, got %s", kind, type(raw).__name__)
        return ()
    return raw


def normalize(raw_nodes: Any, raw_edges: Any) -> Graph:
    """Coerce loosely typed node and edge records into a canonical ``Graph``.

    Never raises; an argument that is not a list counts as empty. Missing
    ids become ``node-{n}`` / ``edge-{n}`` (1-based position in the raw
    list). A later node repeating an earlier id is dropped; a later edge
    repeating an id is renamed with a ``-{n}`` suffix.
    Edges whose source or target does not resolve to a known node are dropped.
    """
    nodes: list[Node] = []
    node_ids: set[str] = set()
    for index, raw in enumerate(_records(raw_nodes, "nodes")):
        node = _coerce_node(raw, index)
        if node.id in node_ids:
            logger.debug("Dropping node #%d: duplicate id %r", index, node.id)
            continue
        node_ids.add(node.id)
        nodes.append(node)

    edges: list[Edge] = []
    edge_ids: set[str] = set()
    for index, raw in enumerate(_records(raw_edges, "edges")):
        if not isinstance(raw, Mapping):
            logger.debug("Dropping edge #%d: not a record (%r)", index, raw)
            continue
        edge = _coerce_edge(raw, index)
        try:
            _check_references(edge, node_ids)
        except MalformedReferenceError as exc:
            logger.debug("Dropping edge #%d: %s", index, exc)
            continue
        unique = _unique_id(edge.id, edge_ids)
        if unique != edge.id:
            logger.debug("Renaming duplicate edge id %r to %r", edge.id, unique)
            edge = replace(edge, id=unique)
        edge_ids.add(edge.id)
        edges.append(edge)

    return Graph(nodes=tuple(nodes), edges=tuple(edges))


def normalize_document(payload: Any) -> Graph:
    """Normalise a whole ``{nodes, edges}`` document.

    The lists may also be wrapped under a ``graph`` or ``data`` key. Anything
    without both lists yields an empty graph.
    """
    if not isinstance(payload, Mapping):
        return Graph()
    root = payload
    if not (isinstance(payload.get("nodes"), list) and isinstance(payload.get("edges"), list)):
        root = _first(payload, "graph", "data", default=payload)
    if not isinstance(root, Mapping):
        return Graph()
    raw_nodes, raw_edges = root.get("nodes"), root.get("edges")
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        logger.debug("Document has no node/edge lists; returning an empty graph")
        return Graph()
    return normalize(raw_nodes, raw_edges)
