"""Port layout: node sizing from port content, node placement, port coordinates.

Nodes are laid out left to right, one column per layer:

  ┌──────────── header (label) ────────────┐
  ○ input 0                      output 0 ●
  ○ input 1                      output 1 ●
  └────────────────────────────────────────┘

Input dots sit just outside the left edge, output dots just outside the right
edge, one fixed-height row per port below the header.
"""

from __future__ import annotations

from collections.abc import Sequence

from dataflow_layout.graph import Graph, Node
from dataflow_layout.layout.types import (
    HEADER_HEIGHT,
    LABEL_CHAR_WIDTH,
    LABEL_PADDING,
    LAYER_GAP,
    LAYER_START_X,
    MAX_LAYER_SPACING,
    MAX_NODE_WIDTH,
    MIN_BODY_HEIGHT,
    MIN_CONTENT_WIDTH,
    MIN_NODE_WIDTH,
    NODE_GAP_Y,
    PORT_CHAR_WIDTH,
    PORT_LABEL_PADDING,
    PORT_PADDING_TOP,
    PORT_ROW_HEIGHT,
    PORT_SIZE,
    LayoutConfig,
    LayoutNode,
    Point,
    PortDirection,
    PortPosition,
)

# ─── Sizing ───────────────────────────────────────────────────────────────────


def node_width(label: str, inputs: Sequence[str], outputs: Sequence[str]) -> int:
    """Width from the header label and the longest input + output port labels."""
    label_width = len(label) * LABEL_CHAR_WIDTH + LABEL_PADDING
    max_input = max((len(i) * PORT_CHAR_WIDTH + PORT_LABEL_PADDING for i in inputs), default=0)
    max_output = max((len(o) * PORT_CHAR_WIDTH + PORT_LABEL_PADDING for o in outputs), default=0)
    content_width = max(max_input + max_output, MIN_CONTENT_WIDTH)
    return min(MAX_NODE_WIDTH, max(MIN_NODE_WIDTH, label_width, content_width))


def node_height(input_count: int, output_count: int) -> int:
    """Header plus one row per port on the busier side, with a body floor."""
    body = max(input_count, output_count) * PORT_ROW_HEIGHT
    return max(body, MIN_BODY_HEIGHT) + HEADER_HEIGHT


def node_dimensions(label: str, inputs: Sequence[str], outputs: Sequence[str]) -> tuple[int, int]:
    """Compute (width, height) for a node box."""
    return node_width(label, inputs, outputs), node_height(len(inputs), len(outputs))


# ─── Port Coordinates ─────────────────────────────────────────────────────────


def _port_column(labels: Sequence[str], x: float, top: float) -> list[PortPosition]:
    first_row = top + HEADER_HEIGHT + PORT_PADDING_TOP
    return [
        PortPosition(label=label, x=x, y=first_row + i * PORT_ROW_HEIGHT + PORT_ROW_HEIGHT / 2)
        for i, label in enumerate(labels)
    ]


def port_position(node: LayoutNode, label: str, direction: PortDirection) -> Point:
    """Centre of the named port, or the node centre if it has no such port."""
    ports = node.outputs if direction is PortDirection.Output else node.inputs
    for port in ports:
        if port.label == label:
            return Point(port.x, port.y)
    return Point(node.x, node.y)


# ─── Placement ────────────────────────────────────────────────────────────────


def layer_spacing(max_node_width: float, layer_count: int, viewport_width: float) -> float:
    """Horizontal distance between layer columns: never less than the widest node plus a gap."""
    return max(max_node_width + LAYER_GAP, min(MAX_LAYER_SPACING, viewport_width / (layer_count + 1)))


def size_and_place_ports(
    graph: Graph,
    layers: list[list[Node]],
    config: LayoutConfig | None = None,
) -> dict[str, LayoutNode]:
    """Size every node, place it, and compute the centre of each of its ports.

    ``layers`` is the final per-layer order from crossing minimisation. Each
    layer's stack of nodes is centred on the viewport's vertical midpoint.

    Returns:
        Node id → ``LayoutNode``, in layer-then-order sequence.
    """
    config = config or LayoutConfig()
    inputs = graph.inputs_by_node()
    outputs = graph.output_ports_by_node()

    dims: dict[str, tuple[int, int]] = {}
    for layer in layers:
        for node in layer:
            dims[node.id] = node_dimensions(node.label, inputs.get(node.id, []), outputs.get(node.id, []))

    max_width = max((w for w, _ in dims.values()), default=0)
    spacing = layer_spacing(max_width, len(layers), config.viewport_width)
    mid_y = config.viewport_height / 2

    placed: dict[str, LayoutNode] = {}
    for layer_idx, layer in enumerate(layers):
        stack_height = sum(dims[n.id][1] for n in layer) + max(0, len(layer) - 1) * NODE_GAP_Y
        x = LAYER_START_X + layer_idx * spacing
        y_offset = 0.0

        for order, node in enumerate(layer):
            width, height = dims[node.id]
            y = mid_y - stack_height / 2 + y_offset + height / 2
            top = y - height / 2
            placed[node.id] = LayoutNode(
                id=node.id,
                layer=layer_idx,
                order=order,
                x=x,
                y=y,
                width=width,
                height=height,
                inputs=_port_column(inputs.get(node.id, []), x - width / 2 - PORT_SIZE / 2, top),
                outputs=_port_column(outputs.get(node.id, []), x + width / 2 + PORT_SIZE / 2, top),
            )
            y_offset += height + NODE_GAP_Y

    return placed
