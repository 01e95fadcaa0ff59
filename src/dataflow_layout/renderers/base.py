"""Renderer protocol: anything that turns a ``LayoutResult`` into text."""

from __future__ import annotations

from typing import Protocol

from dataflow_layout.layout.types import LayoutResult


class Renderer(Protocol):
    """Consumers of the render model implement this (JSON, SVG, a canvas bridge...)."""

    def render(self, result: LayoutResult) -> str:
        """Serialise a laid-out graph. Must not mutate ``result``."""
        ...
