"""Layout IR types and geometry constants shared by every layout phase."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from dataflow_layout.graph import Edge, Graph

# ─── Geometry Constants (pixels) ──────────────────────────────────────────────

HEADER_HEIGHT: int = 28  # title band above the port body
PORT_ROW_HEIGHT: int = 32  # one row per port
PORT_PADDING_TOP: int = 2  # gap between header and first port row
MIN_BODY_HEIGHT: int = 80
PORT_SIZE: int = 12  # diameter of a port dot; dots sit outside the body

MIN_NODE_WIDTH: int = 160
MAX_NODE_WIDTH: int = 320
LABEL_CHAR_WIDTH: int = 8
LABEL_PADDING: int = 60  # header padding + delete button
PORT_CHAR_WIDTH: int = 7
PORT_LABEL_PADDING: int = 30
MIN_CONTENT_WIDTH: int = 120

LAYER_START_X: int = 150
LAYER_GAP: int = 120  # added to the widest node to get the layer spacing
MAX_LAYER_SPACING: int = 500
NODE_GAP_Y: int = 80  # vertical gap between nodes stacked in one layer

VIEWPORT_WIDTH: int = 800
VIEWPORT_HEIGHT: int = 600

SIBLING_SPREAD: float = 8.0  # vertical separation per sibling step
SPREAD_FULL_DX: float = 120.0  # horizontal distance at which spread is unscaled

# Number of alternating barycenter sweeps. Fixed, not tuned: the resulting
# order is part of the deterministic output.
SWEEP_COUNT: int = 3

# Technical facet → seed priority, earliest first. A node without a facet is
# treated as DEFAULT_MODULE_TYPE; a facet missing from the list sorts last.
DEFAULT_MODULE_PRIORITY: tuple[str, ...] = (
    "infra",
    "storage",
    "schema",
    "backend",
    "data-pipeline",
    "ml-model",
    "integration",
    "logic",
    "ui",
)
DEFAULT_MODULE_TYPE: str = "logic"


@dataclass(frozen=True)
class LayoutConfig:
    """Tunable inputs of the layout pipeline; defaults reproduce the editor."""

    viewport_width: float = VIEWPORT_WIDTH
    viewport_height: float = VIEWPORT_HEIGHT
    sweep_count: int = SWEEP_COUNT
    sibling_spread: float = SIBLING_SPREAD
    module_priority: tuple[str, ...] = DEFAULT_MODULE_PRIORITY
    default_module_type: str = DEFAULT_MODULE_TYPE

    def priority_of(self, module_type: str | None) -> int:
        """Seed priority of a technical facet (lower sorts first)."""
        facet = module_type or self.default_module_type
        try:
            return self.module_priority.index(facet)
        except ValueError:
            return len(self.module_priority)


# ─── Positioned Nodes ─────────────────────────────────────────────────────────


class PortDirection(str, Enum):
    Input = "input"
    Output = "output"


@dataclass(frozen=True)
class Point:
    """A 2D point in pixel coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class PortPosition:
    """Centre of a named port dot."""

    label: str
    x: float
    y: float


@dataclass
class LayoutNode:
    """A positioned node. ``x``/``y`` are the centre of the node box."""

    id: str
    layer: int
    order: int
    x: float
    y: float
    width: float
    height: float
    inputs: list[PortPosition] = field(default_factory=list)
    outputs: list[PortPosition] = field(default_factory=list)

    @property
    def top(self) -> float:
        return self.y - self.height / 2

    @property
    def is_unported(self) -> bool:
        return not self.inputs and not self.outputs


# ─── Routed Edges ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SiblingSlot:
    """Position of an edge inside its source and target sibling groups."""

    source_index: int = 0
    source_count: int = 1
    target_index: int = 0
    target_count: int = 1

    @property
    def source_centre(self) -> float:
        return self.source_index - (self.source_count - 1) / 2

    @property
    def target_centre(self) -> float:
        return self.target_index - (self.target_count - 1) / 2


@dataclass(frozen=True)
class RoutedEdge:
    """A single cubic curve: start, two control points, end."""

    edge: Edge
    start: Point
    control1: Point
    control2: Point
    end: Point
    back_edge: bool = False

    @property
    def control_points(self) -> list[Point]:
        return [self.start, self.control1, self.control2, self.end]

    @property
    def path(self) -> str:
        """SVG path data for the curve."""
        s, c1, c2, e = self.start, self.control1, self.control2, self.end
        return f"M {_fmt(s.x)} {_fmt(s.y)} C {_fmt(c1.x)} {_fmt(c1.y)}, {_fmt(c2.x)} {_fmt(c2.y)}, {_fmt(e.x)} {_fmt(e.y)}"


def _fmt(value: float) -> str:
    rounded = round(value, 3)
    if rounded == int(rounded):
        return str(int(rounded))
    return repr(rounded)


# ─── Pipeline Result ──────────────────────────────────────────────────────────


@dataclass
class LayoutResult:
    """Everything the render model is built from.

    Attributes:
        graph: The normalised input graph (all edges, back edges included).
        dag: ``graph`` with back edges removed; sequencing, layering and
            crossing minimisation ran on it.
        back_edges: Edges removed by cycle resolution, in discovery order.
        order: Topological order of ``dag``.
        layers: Node id → layer index.
        ordering: One list of node ids per layer, in final in-layer order.
        nodes: Node id → positioned node.
        edges: Routed edges, in the order of ``graph.edges``.
    """

    graph: Graph
    dag: Graph
    back_edges: tuple[Edge, ...]
    order: list[str]
    layers: dict[str, int]
    ordering: list[list[str]]
    nodes: dict[str, LayoutNode]
    edges: list[RoutedEdge]

    @property
    def layer_count(self) -> int:
        return len(self.ordering)
