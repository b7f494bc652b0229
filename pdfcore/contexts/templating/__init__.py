"""
Templating Context

Responsibilities:
- Defines the portable template node model (closed set of typed node variants)
- Exports editor markup to template trees, normalizing inline CSS into typed fields
- Imports template trees into editor markup through Jinja2 fragment templates
- Collects embedded image assets from the editor and resolves them on import

Owns: Template node model, markup <-> template conversion, markup fragment templates
Never: Reads or writes package archives, lays out or renders pages
"""

from pdfcore.contexts.templating.converter import (
    ImportResult,
    RoundtripResult,
    editor_to_template,
    markup_to_template,
    template_to_editor,
    template_to_markup,
    validate_roundtrip,
)
from pdfcore.contexts.templating.node_model import (
    Manifest,
    Package,
    PageSettings,
    node_from_dict,
    node_to_dict,
)

__all__ = [
    # Helpers and orchestrators for bidirectional conversion
    "template_to_markup",
    "markup_to_template",
    "editor_to_template",
    "template_to_editor",
    "validate_roundtrip",
    "ImportResult",
    "RoundtripResult",
    # Data structure classes
    "Package",
    "PageSettings",
    "Manifest",
    "node_to_dict",
    "node_from_dict",
]
