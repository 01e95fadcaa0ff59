from dataflow_layout.renderers.base import Renderer
from dataflow_layout.renderers.render_model import RenderModelRenderer, dumps, to_render_model

__all__ = ["RenderModelRenderer", "Renderer", "dumps", "to_render_model"]
