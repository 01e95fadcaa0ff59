"""Command-line entrypoint: ``dataflow-layout graph.json > render.json``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from dataflow_layout.checklist import build_checklist, ready_to_work
from dataflow_layout.graph import normalize_document
from dataflow_layout.layout.pipeline import full_layout
from dataflow_layout.layout.types import VIEWPORT_HEIGHT, VIEWPORT_WIDTH, LayoutConfig
from dataflow_layout.renderers.render_model import RenderModelRenderer, dumps

logger = logging.getLogger(__name__)


def _read_document(source: str) -> Any:
    text = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    return json.loads(text)


def _checklist_document(payload: Any, completed: list[str]) -> dict[str, Any]:
    graph = normalize_document(payload)
    checklist = build_checklist(graph)
    ready = ready_to_work(graph, completed)
    return {
        "ordered": checklist.ordered,
        "items": [
            {
                "id": n.id,
                "label": n.label,
                "type": n.type.value,
                "completed": n.id in completed,
                "ready": n.id in ready,
            }
            for n in checklist.nodes
        ],
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dataflow-layout",
        description="Lay out an artifact-flow graph (JSON) and print its render model.",
    )
    parser.add_argument("input", help="Path to a {nodes, edges} JSON document, or '-' for stdin")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Write output here instead of stdout")
    parser.add_argument("--width", type=float, default=VIEWPORT_WIDTH, help="Viewport width in pixels")
    parser.add_argument("--height", type=float, default=VIEWPORT_HEIGHT, help="Viewport height in pixels")
    parser.add_argument("--indent", type=int, default=None, help="Pretty-print JSON with this indent")
    parser.add_argument(
        "--checklist",
        action="store_true",
        help="Print the dependency checklist instead of the render model",
    )
    parser.add_argument(
        "--completed",
        type=str,
        default="",
        help="Comma-separated ids of completed nodes (used with --checklist)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint. Returns the process exit code."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        payload = _read_document(args.input)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        print(f"error: cannot read {args.input}: {exc}", file=sys.stderr)
        return 2

    if args.checklist:
        completed = [c.strip() for c in args.completed.split(",") if c.strip()]
        output = dumps(_checklist_document(payload, completed), indent=args.indent)
    else:
        config = LayoutConfig(viewport_width=args.width, viewport_height=args.height)
        result = full_layout(normalize_document(payload), config)
        output = RenderModelRenderer(indent=args.indent).render(result)

    if args.output is not None:
        args.output.write_text(output + "\n", encoding="utf-8")
        logger.debug("Wrote %s", args.output)
    else:
        print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
