"""
Markup Pattern Constants

Centralized attribute names and structural markers used by both the markup
parser (export) and the markup generator (import).
Organized into frozen dataclasses by category for immutability and clear grouping.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MarkerAttributes:
    """
    Attributes recording semantic node information on editor elements.

    TYPE carries the node type tag; everything else is per-variant metadata that
    has no natural CSS home.
    """
    TYPE: str = "data-pdf-type"
    SIZE: str = "data-pdf-size"
    SRC: str = "data-pdf-src"
    BINDING: str = "data-binding"


@dataclass(frozen=True)
class PageAttributes:
    """Attributes on the page wrapper recording page settings."""
    SIZE: str = "data-page-size"
    ORIENTATION: str = "data-orientation"
    WIDTH: str = "data-page-width"
    HEIGHT: str = "data-page-height"
    BACKGROUND: str = "data-background"


@dataclass(frozen=True)
class TableAttributes:
    """Attributes on <table> elements recording the table style block."""
    HEADER_BG: str = "data-header-bg"
    HEADER_COLOR: str = "data-header-color"
    BORDER_COLOR: str = "data-border-color"
    CELL_PADDING: str = "data-cell-padding"
    FONT_SIZE: str = "data-font-size"
    STRIPED: str = "data-striped"


@dataclass(frozen=True)
class StructuralTypes:
    """Type tags that only exist inside the editor."""
    PAGE_ROOT: str = "PageRoot"


@dataclass(frozen=True)
class EmbeddableSources:
    """Reference prefixes the editor can display directly in an <img>."""
    PREFIXES: tuple = ("data:", "blob:", "http://", "https://")


