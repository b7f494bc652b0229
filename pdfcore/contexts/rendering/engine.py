"""
Rendering Engine Boundary

The layout, pagination and PDF writing engine lives outside this project. This
module defines the interface it must offer, loads an implementation from a
`module:attribute` reference, and drives it for a template package.
"""

import importlib
import json
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from dotenv import load_dotenv

from pdfcore.contexts.packaging.package_codec import build_layout
from pdfcore.contexts.rendering.logger import (
    _log_debug,
    log_render_result,
    log_render_start,
)
from pdfcore.contexts.templating.exceptions import TemplateError
from pdfcore.contexts.templating.node_model import Package, PageSettings
from pdfcore.contexts.templating.registries import PageGeometry, PageSizeRegistry

load_dotenv()
PDFCORE_ENGINE = os.getenv("PDFCORE_ENGINE")


class RenderError(TemplateError):
    """
    The rendering engine could not be loaded or failed to render.

    Attributes:
        message: Error description
        engine: Engine reference involved, if any
    """

    def __init__(self, message: str, engine: Optional[str] = None):
        self.message = message
        self.engine = engine

        parts = [message]
        if engine:
            parts.append(f"(engine: {engine})")

        super().__init__(" ".join(parts))


@runtime_checkable
class RenderEngine(Protocol):
    """
    Interface of the external rendering engine.

    The converter only guarantees a valid serialized template tree and a
    consistent asset map; everything else is the engine's business.
    """

    def new_document(self) -> Any:
        """Create an empty output document."""
        ...

    def register_asset(self, document: Any, name: str, data: bytes) -> None:
        """Make an asset available to Image nodes referencing `name`."""
        ...

    def build_layout(self, template_json: str, data: Dict[str, Any]) -> Any:
        """Build a layout tree from the serialized template and render-time data."""
        ...

    def render_flow(self, document: Any, layout: Any, geometry: PageGeometry) -> None:
        """Paginate and draw the layout tree into the document."""
        ...

    def finish(self, document: Any) -> bytes:
        """Finalize the document and return the PDF bytes."""
        ...


@dataclass
class RenderResult:
    """
    Result of rendering a package.

    Attributes:
        success: Whether the engine produced a document
        pdf_bytes: Rendered PDF (empty if failed)
        output_path: Where the PDF was written, if requested
        errors: Error messages from the engine
        time_s: Render time
    """

    success: bool
    pdf_bytes: bytes = b""
    output_path: Optional[Path] = None
    errors: List[str] = field(default_factory=list)
    time_s: float = 0.0


def load_engine(reference: Optional[str] = None) -> RenderEngine:
    """
    Load a rendering engine from a `module:attribute` reference.

    Classes and factories are called without arguments; any other object is
    used as the engine directly.

    Args:
        reference: e.g. "pdfcore_native:Engine". Defaults to PDFCORE_ENGINE.

    Returns:
        Engine instance

    Raises:
        RenderError: If no reference is configured, it cannot be imported, or the
                     object lacks the RenderEngine methods
    """
    reference = reference or PDFCORE_ENGINE
    if not reference:
        raise RenderError("No rendering engine configured (set PDFCORE_ENGINE or pass --engine)")

    module_name, _, attribute = reference.partition(":")
    if not module_name or not attribute:
        raise RenderError("Engine reference must look like 'module:attribute'", reference)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise RenderError(f"Cannot import engine module: {e}", reference) from e

    target = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise RenderError(f"Engine attribute {attribute!r} not found", reference) from e

    if isinstance(target, type) or (callable(target) and not isinstance(target, RenderEngine)):
        try:
            engine = target()
        except Exception as e:
            raise RenderError(f"Engine construction failed: {e}", reference) from e
    else:
        engine = target

    if not isinstance(engine, RenderEngine):
        raise RenderError("Object does not implement the RenderEngine interface", reference)

    _log_debug(f"Loaded engine {reference}")
    return engine


def render_package(
    package: Package,
    data: Optional[Dict[str, Any]] = None,
    engine: Optional[RenderEngine] = None,
    size_registry: Optional[PageSizeRegistry] = None,
    output_path: Optional[Path] = None,
) -> RenderResult:
    """
    Render a template package to PDF through the external engine.

    Steps: create a document, register every package asset, build the layout
    from the serialized template and the data, flow it onto pages sized per the
    package settings, then finish the document.

    Args:
        package: Template package
        data: Render-time data for DynamicText bindings and queries
        engine: Engine instance (loaded from PDFCORE_ENGINE when None)
        size_registry: Page size classes (defaults to page_sizes.yaml)
        output_path: Optional file to write the PDF to

    Returns:
        RenderResult; engine failures are reported in `errors`, not raised

    Raises:
        RenderError: If no engine is given and none can be loaded
    """
    start_time = time.time()
    engine = engine or load_engine()
    size_registry = size_registry or PageSizeRegistry()
    settings = package.settings or PageSettings()

    template_name = package.manifest.name
    log_render_start(template_name, len(package.assets), type(engine).__name__)

    layout_json = json.dumps(build_layout(package.root, package.settings, package.queries))
    geometry = size_registry.get_geometry(settings)

    try:
        document = engine.new_document()
        for name, asset in package.assets.items():
            engine.register_asset(document, name, asset)
        layout = engine.build_layout(layout_json, data or {})
        engine.render_flow(document, layout, geometry)
        pdf_bytes = engine.finish(document)
    except Exception as e:
        # Any engine failure becomes a failed result
        result = RenderResult(success=False, errors=[f"{type(e).__name__}: {e}"])
    else:
        result = RenderResult(success=True, pdf_bytes=pdf_bytes)
        if output_path is not None:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(pdf_bytes)
            result.output_path = output_path

    result.time_s = time.time() - start_time
    log_render_result(template_name, result, result.time_s)
    return result
