"""
Markup Generator

Converts a template node tree into editor markup (import direction).

Every fragment carries both the visual CSS for the editing surface and the
`data-pdf-type` marker, and writes every node field, so that the markup parser
recovers the identical node on export.
"""

from typing import Dict, List, Optional

from pdfcore.contexts.templating import defaults
from pdfcore.contexts.templating.color import color_to_css
from pdfcore.contexts.templating.exceptions import AssetError, UnsupportedTypeError
from pdfcore.contexts.templating.logger import _log_debug, _log_warning
from pdfcore.contexts.templating.markup_patterns import EmbeddableSources
from pdfcore.contexts.templating.node_model import (
    Circle,
    Column,
    Container,
    DynamicText,
    Footer,
    Header,
    Hyperlink,
    Image,
    Line,
    PageBreak,
    PageNumber,
    PageSettings,
    Rectangle,
    Row,
    Table,
    TemplateNode,
    Text,
)
from pdfcore.contexts.templating.registries import PageSizeRegistry, TemplateRegistry
from pdfcore.utils.css_tools import format_number, format_style, px


def is_embeddable(reference: Optional[str]) -> bool:
    """Whether the editor can display a reference directly in an <img>."""
    return bool(reference) and reference.startswith(EmbeddableSources.PREFIXES)


def _visual_declarations(node) -> Dict[str, Optional[str]]:
    """Opacity, rotation and border declarations shared by several variants."""
    declarations: Dict[str, Optional[str]] = {}
    if node.opacity != defaults.DEFAULT_OPACITY:
        declarations["opacity"] = format_number(node.opacity)
    if node.rotation:
        declarations["transform"] = f"rotate({format_number(node.rotation)}deg)"
    return declarations


def _border_declarations(width: float, color, prefix: str = "border") -> Dict[str, Optional[str]]:
    if not width:
        return {}
    return {
        f"{prefix}-width": px(width),
        f"{prefix}-style": "solid",
        f"{prefix}-color": color_to_css(color) if color is not None else None,
    }


class TemplateToMarkupConverter:
    """
    Converts template nodes to editor markup.

    One instance per import: unresolved image references encountered during the
    walk are collected on `unresolved_assets`.
    """

    def __init__(
        self,
        asset_urls: Dict[str, str] = None,
        template_registry: TemplateRegistry = None,
        page_size_registry: PageSizeRegistry = None,
    ):
        """
        Args:
            asset_urls: Logical asset name -> embeddable reference (data URL, blob
                        URL or http(s) URL)
            template_registry: Fragment templates (defaults to the packaged ones)
            page_size_registry: Page size classes (defaults to page_sizes.yaml)
        """
        self.asset_urls = dict(asset_urls or {})
        self.template_registry = template_registry or TemplateRegistry()
        self.page_size_registry = page_size_registry or PageSizeRegistry()
        self.unresolved_assets: List[AssetError] = []

    def _render(self, type_name: str, **context) -> str:
        template = self.template_registry.get_template(type_name)
        return template.render(**context).strip()

    def generate_page(self, root: TemplateNode, settings: PageSettings = None) -> str:
        """
        Generate the complete editor markup: the page wrapper around the tree.

        Args:
            root: Template root node
            settings: Page settings (defaults when None)

        Returns:
            Markup rooted in a PageRoot element sized and padded per settings
        """
        settings = settings or PageSettings()
        geometry = self.page_size_registry.get_geometry(settings)

        style = format_style(
            {
                "width": px(geometry.width),
                "min-height": px(geometry.height),
                "background-color": settings.background_color or "white",
                "padding-top": px(settings.margins.top),
                "padding-bottom": px(settings.margins.bottom),
                "padding-left": px(settings.margins.left),
                "padding-right": px(settings.margins.right),
                "font-family": f"'{defaults.DEFAULT_FONT_FAMILY}',{defaults.EDITOR_FONT_STACK}",
                "box-sizing": "border-box",
            }
        )
        template = self.template_registry.get_structure_template("page_root")
        return template.render(
            settings=settings, style=style, content=self.convert_node(root)
        ).strip()

    def convert_node(self, node: TemplateNode) -> str:
        """
        Convert one node (recursively) to its markup fragment.

        Raises:
            UnsupportedTypeError: If the node is not a known variant
        """
        if isinstance(node, Column):
            return self.convert_column(node)
        elif isinstance(node, Row):
            return self.convert_row(node)
        elif isinstance(node, Container):
            return self.convert_container(node)
        elif isinstance(node, Text):
            return self.convert_text(node)
        elif isinstance(node, Image):
            return self.convert_image(node)
        elif isinstance(node, Table):
            return self.convert_table(node)
        elif isinstance(node, Rectangle):
            return self.convert_rectangle(node)
        elif isinstance(node, Circle):
            return self.convert_circle(node)
        elif isinstance(node, Line):
            return self.convert_line(node)
        elif isinstance(node, (Header, Footer)):
            return self.convert_page_band(node)
        elif isinstance(node, PageNumber):
            return self.convert_page_number(node)
        elif isinstance(node, DynamicText):
            return self.convert_dynamic_text(node)
        elif isinstance(node, Hyperlink):
            return self.convert_hyperlink(node)
        elif isinstance(node, PageBreak):
            # No editor counterpart
            _log_debug("Skipping PageBreak on import")
            return ""
        else:
            raise UnsupportedTypeError(getattr(node, "TYPE", type(node).__name__), "import")

    def convert_children(self, children: List[TemplateNode]) -> str:
        """Convert a child list, degrading unsupported children to nothing."""
        parts = []
        for child in children:
            try:
                parts.append(self.convert_node(child))
            except UnsupportedTypeError as e:
                _log_warning(str(e))
        return "".join(parts)

    def convert_column(self, node: Column) -> str:
        style = format_style(
            {
                "display": "flex",
                "flex-direction": "column",
                "gap": px(node.spacing),
                "min-height": "60px",
                "padding": "12px",
                "outline": "1px dashed #6366f1",
            }
        )
        return self._render("Column", style=style, children=self.convert_children(node.children))

    def convert_row(self, node: Row) -> str:
        style = format_style(
            {
                "display": "flex",
                "flex-direction": "row",
                "flex-wrap": "wrap",
                "gap": px(node.spacing),
                "min-height": "40px",
                "padding": "12px",
                "outline": "1px dashed #0ea5e9",
            }
        )
        return self._render("Row", style=style, children=self.convert_children(node.children))

    def convert_container(self, node: Container) -> str:
        style = format_style(
            {
                "padding": px(node.padding),
                "border-width": px(node.border),
                "border-style": "solid",
                "border-color": defaults.EDITOR_BORDER_COLOR,
                "min-height": "40px",
            }
        )
        return self._render("Container", style=style, child=self.convert_children([node.child]))

    def convert_text(self, node: Text) -> str:
        declarations = {
            "font-size": px(node.size),
            "font-family": f"'{node.font_family}',{defaults.EDITOR_FONT_STACK}",
            "color": color_to_css(node.color),
            "background-color": color_to_css(node.background_color) or None,
            "max-width": px(node.width) if node.width is not None else None,
            "font-weight": "bold" if node.bold else None,
            "font-style": "italic" if node.italic else None,
            "text-align": node.align,
            "line-height": format_number(node.line_height),
            "letter-spacing": px(node.letter_spacing) if node.letter_spacing else None,
            "padding": px(node.padding),
        }
        declarations.update(_visual_declarations(node))
        declarations.update(_border_declarations(node.border_width, node.border_color))
        return self._render("Text", node=node, style=format_style(declarations))

    def convert_image(self, node: Image) -> str:
        """
        Convert an Image, embedding it when the reference resolves.

        The logical reference is always kept in data-pdf-src. Unresolved
        references render a placeholder and are recorded as AssetError.
        """
        resolved = self.asset_urls.get(node.src, node.src)
        embedded = is_embeddable(resolved)

        declarations = {"width": px(node.width), "height": px(node.height)}
        declarations.update(_visual_declarations(node))
        declarations.update(_border_declarations(node.border_width, node.border_color))

        if embedded:
            declarations["overflow"] = "hidden"
        else:
            error = AssetError(node.src)
            self.unresolved_assets.append(error)
            _log_warning(str(error))
            declarations.update(
                {
                    "background-color": "#f1f5f9",
                    "display": "flex",
                    "align-items": "center",
                    "justify-content": "center",
                    "outline": "2px dashed #cbd5e1",
                    "font-size": "11px",
                    "color": "#64748b",
                }
            )

        return self._render(
            "Image",
            node=node,
            style=format_style(declarations),
            embedded=embedded,
            resolved=resolved,
            placeholder_label=defaults.IMAGE_PLACEHOLDER_LABEL,
        )

    def convert_table(self, node: Table) -> str:
        st = node.style
        cell_base = {
            "border": f"1px solid {st.border_color}",
            "padding": px(st.cell_padding),
            "font-size": px(st.font_size),
        }

        headers = []
        for column in node.columns:
            declarations = {
                **cell_base,
                "background": st.header_bg,
                "color": st.header_color,
                "font-weight": "600",
                "text-align": "left",
                "width": px(column.width) if column.width is not None else None,
            }
            headers.append({"label": column.header, "style": format_style(declarations)})

        body = []
        for index, row in enumerate(node.rows):
            declarations = dict(cell_base)
            if st.striped and index % 2 == 1:
                declarations["background"] = defaults.TABLE_STRIPE_COLOR
            body.append({"cells": row, "style": format_style(declarations)})

        table_style = format_style(
            {
                "width": "100%",
                "border-collapse": "collapse",
                "font-size": px(st.font_size),
                "table-layout": "fixed",
            }
        )
        return self._render(
            "Table", node=node, headers=headers, body=body, table_style=table_style
        )

    def _shape_declarations(self, node, fill) -> Dict[str, Optional[str]]:
        declarations = {
            "width": px(node.width),
            "height": px(node.height),
            "background-color": color_to_css(fill),
        }
        declarations.update(_border_declarations(node.stroke_width, node.stroke_color))
        declarations.update(_visual_declarations(node))
        return declarations

    def convert_rectangle(self, node: Rectangle) -> str:
        declarations = self._shape_declarations(node, node.fill)
        if node.corner_radius:
            declarations["border-radius"] = px(node.corner_radius)
        return self._render("Rectangle", node=node, style=format_style(declarations))

    def convert_circle(self, node: Circle) -> str:
        declarations = self._shape_declarations(node, node.fill)
        declarations["border-radius"] = "50%"
        return self._render("Circle", node=node, style=format_style(declarations))

    def convert_line(self, node: Line) -> str:
        style = format_style(
            {
                "width": px(node.width),
                "border": "none",
                "border-top-width": px(node.thickness),
                "border-top-style": "solid",
                "border-top-color": color_to_css(node.color),
                "margin": "8px 0",
            }
        )
        return self._render("Line", node=node, style=style)

    def convert_page_band(self, node) -> str:
        """Header and Footer share one shape, differing in which edge is ruled."""
        edge = "border-bottom" if isinstance(node, Header) else "border-top"
        style = format_style(
            {
                "width": "100%",
                "padding": "12px",
                "outline": "none",
                edge: "2px solid #e2e8f0",
                "background": "#f8fafc",
                "min-height": "40px",
            }
        )
        return self._render(node.TYPE, style=style, children=self.convert_children(node.children))

    def convert_page_number(self, node: PageNumber) -> str:
        style = format_style(
            {"font-size": px(node.size), "color": "#6b7280", "text-align": node.align}
        )
        return self._render("PageNumber", node=node, style=style)

    def convert_dynamic_text(self, node: DynamicText) -> str:
        style = format_style(
            {
                "font-size": px(node.size),
                "color": "inherit",
                "font-family": "inherit",
                "font-style": "italic",
            }
        )
        return self._render("DynamicText", node=node, style=style)

    def convert_hyperlink(self, node: Hyperlink) -> str:
        style = format_style(
            {"color": "#2563eb", "font-size": px(node.size), "text-decoration": "underline"}
        )
        return self._render("Hyperlink", node=node, style=style)
