"""
Rendering Context

Responsibilities:
- Defines the interface of the external layout/rendering engine
- Loads an engine implementation from a module:attribute reference
- Drives the engine for a template package (assets, layout build, page flow)

Owns: The engine boundary and render orchestration
Never: Lays out, paginates or writes PDF bytes itself
"""

from pdfcore.contexts.rendering.engine import (
    RenderEngine,
    RenderError,
    RenderResult,
    load_engine,
    render_package,
)

__all__ = ["RenderEngine", "RenderError", "RenderResult", "load_engine", "render_package"]
