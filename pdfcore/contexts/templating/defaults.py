"""
Default values for PDFCore template nodes and page settings.

Provides shared defaults used by:
- node_model.py (constructor defaults for every numeric and color field)
- markup_parser.py (values applied when an editor attribute is unset)
- markup_generator.py (editor-only presentation that has no node field)

Every numeric field has exactly one documented default, applied both when a node
is decoded from JSON and when it is exported from editor markup.
"""

from typing import Any, Dict

from pdfcore.contexts.templating.color import hex_to_color

# Node colors
DEFAULT_TEXT_COLOR = hex_to_color("#1e293b")
DEFAULT_RECTANGLE_FILL = hex_to_color("#3b82f6")
DEFAULT_CIRCLE_FILL = hex_to_color("#10b981")
DEFAULT_LINE_COLOR = hex_to_color("#334155")

# Column / Row / Container
DEFAULT_SPACING = 0.0
DEFAULT_CONTAINER_PADDING = 0.0
DEFAULT_CONTAINER_BORDER = 0.0

# Text
DEFAULT_TEXT_SIZE = 12.0
DEFAULT_TEXT_ALIGN = "left"
DEFAULT_FONT_FAMILY = "Inter"
DEFAULT_LINE_HEIGHT = 1.2
DEFAULT_LETTER_SPACING = 0.0
DEFAULT_TEXT_PADDING = 4.0

# Shared visual fields
DEFAULT_OPACITY = 1.0
DEFAULT_ROTATION = 0.0
DEFAULT_BORDER_WIDTH = 0.0

# Image
DEFAULT_IMAGE_WIDTH = 200.0
DEFAULT_IMAGE_HEIGHT = 150.0

# Shapes
DEFAULT_RECTANGLE_WIDTH = 120.0
DEFAULT_RECTANGLE_HEIGHT = 80.0
DEFAULT_CIRCLE_SIZE = 80.0
DEFAULT_CORNER_RADIUS = 0.0
DEFAULT_LINE_WIDTH = 200.0
DEFAULT_LINE_THICKNESS = 2.0

# Page furniture
DEFAULT_PAGE_NUMBER_FORMAT = "Page {page} of {total}"
DEFAULT_PAGE_NUMBER_SIZE = 10.0
DEFAULT_PAGE_NUMBER_ALIGN = "center"
DEFAULT_DYNAMIC_TEXT_SIZE = 12.0
DEFAULT_HYPERLINK_TEXT = "Link"
DEFAULT_HYPERLINK_HREF = "#"
DEFAULT_HYPERLINK_SIZE = 12.0

# Table style block (colors stay CSS strings, passed through verbatim)
DEFAULT_TABLE_STYLE = {
    "header_bg": "#1e293b",
    "header_color": "#ffffff",
    "border_color": "#e2e8f0",
    "cell_padding": 10.0,
    "font_size": 12.0,
    "striped": True,
}
TABLE_STRIPE_COLOR = "#f8fafc"

# Page settings
DEFAULT_PAGE_SIZE = "A4"
DEFAULT_ORIENTATION = "portrait"
DEFAULT_MARGIN = 40.0

# Manifest
DEFAULT_MANIFEST_NAME = "Untitled"
DEFAULT_MANIFEST_VERSION = "1.2"
EXPORTED_MANIFEST_NAME = "Untitled Template"

# Editor-only presentation (no node field behind these)
EDITOR_BORDER_COLOR = "#d1d5db"
EDITOR_FONT_STACK = "sans-serif"
IMAGE_PLACEHOLDER_LABEL = "📷 Click upload in toolbar"


def get_default_table_style() -> Dict[str, Any]:
    """Fresh copy of the table style defaults."""
    return DEFAULT_TABLE_STYLE.copy()
