"""
Markup Parser

Converts editor markup into a template node tree (export direction).

Free-form presentation (inline CSS, data-* attributes) is normalized into typed
node fields, with the documented default applied for every unset field. The input
tree is only read, never mutated.
"""

from typing import List, Optional, Tuple, Union

from bs4 import BeautifulSoup, Tag

from pdfcore.contexts.templating import defaults
from pdfcore.contexts.templating.color import Color, css_to_color
from pdfcore.contexts.templating.exceptions import FormatError, UnsupportedTypeError
from pdfcore.contexts.templating.logger import _log_debug, _log_warning
from pdfcore.contexts.templating.markup_patterns import (
    MarkerAttributes,
    PageAttributes,
    StructuralTypes,
    TableAttributes,
)
from pdfcore.contexts.templating.node_model import (
    ORIENTATIONS,
    TEXT_ALIGNMENTS,
    Circle,
    Column,
    Container,
    DynamicText,
    Footer,
    Header,
    Hyperlink,
    Image,
    Line,
    Margins,
    PageNumber,
    PageSettings,
    Rectangle,
    Row,
    Table,
    TableColumn,
    TableStyle,
    TemplateNode,
    Text,
)
from pdfcore.utils.css_tools import (
    border_parts,
    parse_number,
    parse_px,
    parse_rotation,
    parse_style,
)

MarkupTree = Union[str, BeautifulSoup, Tag]

# Keywords that mean "no color of its own"
NON_COLORS = {"inherit", "transparent", "initial", "currentcolor", "none"}


def parse_markup(markup: MarkupTree) -> Union[BeautifulSoup, Tag]:
    """Parse markup text into a tree; trees are returned unchanged."""
    if isinstance(markup, (BeautifulSoup, Tag)):
        return markup
    return BeautifulSoup(markup, "html.parser")


def element_children(tag: Tag) -> List[Tag]:
    """Direct element children, ignoring text and comments."""
    return tag.find_all(True, recursive=False)


def node_type(tag: Tag) -> Optional[str]:
    return tag.get(MarkerAttributes.TYPE)


def _color(value: Optional[str], default: Optional[Color]) -> Optional[Color]:
    """Normalize a CSS color value, keeping `default` for keywords and junk."""
    if not value or value.strip().lower() in NON_COLORS:
        return default
    color = css_to_color(value)
    return default if color is None else color


def _first_font(value: Optional[str]) -> str:
    """First entry of a font-family list with quotes removed."""
    if not value:
        return defaults.DEFAULT_FONT_FAMILY
    first = value.split(",")[0].strip().strip("'\"").strip()
    return first or defaults.DEFAULT_FONT_FAMILY


def _align(value: Optional[str], default: str) -> str:
    if value and value.strip().lower() in TEXT_ALIGNMENTS:
        return value.strip().lower()
    return default


def _padding_side(style, side: str) -> float:
    """One page margin from padding-<side>, then the padding shorthand, then 40."""
    value = parse_number(style.get(f"padding-{side}"))
    if value is None:
        value = parse_number(style.get("padding"))
    return defaults.DEFAULT_MARGIN if value is None else value


class MarkupToTemplateConverter:
    """
    Converts editor markup to template nodes.

    Elements are dispatched on their data-pdf-type marker. Untyped elements are
    treated as transparent wrappers. Unknown or malformed subtrees are logged and
    degrade to nothing without aborting their siblings.
    """

    def convert_tree(self, tree: MarkupTree) -> Tuple[TemplateNode, PageSettings]:
        """
        Export a whole editor tree.

        The PageRoot wrapper is looked up among the top-level elements. When
        present its content becomes the template and its padding and data-page-*
        attributes become the page settings. Otherwise every top-level element is
        exported and default settings apply.

        Args:
            tree: Markup text, a parsed document, or a tag to treat as the wrapper

        Returns:
            (root node, page settings)
        """
        tree = parse_markup(tree)
        if isinstance(tree, BeautifulSoup) and tree.body is not None:
            tree = tree.body

        top_level = element_children(tree)
        page_root = next(
            (tag for tag in top_level if node_type(tag) == StructuralTypes.PAGE_ROOT), None
        )

        if page_root is not None:
            children = self.convert_content_children(page_root)
            settings = self.extract_page_settings(page_root)
        else:
            _log_debug("No PageRoot wrapper found, exporting top-level elements")
            children = self.convert_elements(top_level)
            settings = PageSettings()

        root = children[0] if len(children) == 1 else Column(children=children)
        return root, settings

    def extract_page_settings(self, page_root: Tag) -> PageSettings:
        """Read page settings back from the PageRoot wrapper."""
        style = parse_style(page_root.get("style"))
        margins = Margins(
            top=_padding_side(style, "top"),
            bottom=_padding_side(style, "bottom"),
            left=_padding_side(style, "left"),
            right=_padding_side(style, "right"),
        )

        orientation = page_root.get(PageAttributes.ORIENTATION) or defaults.DEFAULT_ORIENTATION
        if orientation not in ORIENTATIONS:
            _log_warning(f"Ignoring unknown orientation {orientation!r}")
            orientation = defaults.DEFAULT_ORIENTATION

        return PageSettings(
            size=page_root.get(PageAttributes.SIZE) or defaults.DEFAULT_PAGE_SIZE,
            orientation=orientation,
            width=parse_number(page_root.get(PageAttributes.WIDTH)),
            height=parse_number(page_root.get(PageAttributes.HEIGHT)),
            margins=margins,
            background_color=page_root.get(PageAttributes.BACKGROUND),
        )

    def convert_elements(self, tags: List[Tag]) -> List[TemplateNode]:
        """Convert sibling elements in document order, dropping those that yield nothing."""
        nodes = []
        for tag in tags:
            try:
                node = self.convert_element(tag)
            except (UnsupportedTypeError, FormatError) as e:
                _log_warning(f"Skipping <{tag.name}>: {e}")
                continue
            if node is not None:
                nodes.append(node)
        return nodes

    def convert_content_children(self, tag: Tag) -> List[TemplateNode]:
        """Convert the content of a typed container; untyped spans are editor chrome."""
        content = [
            child
            for child in element_children(tag)
            if not (child.name == "span" and node_type(child) is None)
        ]
        return self.convert_elements(content)

    def convert_element(self, tag: Tag) -> Optional[TemplateNode]:
        """
        Convert one element (recursively).

        Returns:
            The node, or None when the element exports to nothing

        Raises:
            UnsupportedTypeError: If the element carries an unknown type marker
        """
        pdf_type = node_type(tag)

        if pdf_type is None:
            return self.convert_untyped(tag)
        elif pdf_type == StructuralTypes.PAGE_ROOT:
            children = self.convert_content_children(tag)
            return children[0] if len(children) == 1 else Column(children=children)
        elif pdf_type == "Column":
            return self.convert_column(tag)
        elif pdf_type == "Row":
            return self.convert_row(tag)
        elif pdf_type == "Container":
            return self.convert_container(tag)
        elif pdf_type == "Text":
            return self.convert_text(tag)
        elif pdf_type == "Image":
            return self.convert_image(tag)
        elif pdf_type == "Table":
            return self.convert_table(tag)
        elif pdf_type == "Rectangle":
            return self.convert_rectangle(tag)
        elif pdf_type == "Circle":
            return self.convert_circle(tag)
        elif pdf_type == "Line":
            return self.convert_line(tag)
        elif pdf_type == "Header":
            return Header(children=self.convert_content_children(tag))
        elif pdf_type == "Footer":
            return Footer(children=self.convert_content_children(tag))
        elif pdf_type == "PageNumber":
            return self.convert_page_number(tag)
        elif pdf_type == "DynamicText":
            return self.convert_dynamic_text(tag)
        elif pdf_type == "Hyperlink":
            return self.convert_hyperlink(tag)
        elif pdf_type == "PageBreak":
            return None
        else:
            raise UnsupportedTypeError(pdf_type, context="export")

    def convert_untyped(self, tag: Tag) -> Optional[TemplateNode]:
        """Untyped wrappers collapse into their single child or group several into a Column."""
        children = element_children(tag)
        if not children:
            return None
        if len(children) == 1:
            return self.convert_element(children[0])
        return Column(children=self.convert_elements(children))

    def convert_column(self, tag: Tag) -> Column:
        style = parse_style(tag.get("style"))
        return Column(
            children=self.convert_content_children(tag),
            spacing=parse_px(style.get("gap"), defaults.DEFAULT_SPACING),
        )

    def convert_row(self, tag: Tag) -> Row:
        style = parse_style(tag.get("style"))
        return Row(
            children=self.convert_content_children(tag),
            spacing=parse_px(style.get("gap"), defaults.DEFAULT_SPACING),
        )

    def convert_container(self, tag: Tag) -> Container:
        style = parse_style(tag.get("style"))
        children = self.convert_content_children(tag)
        border, _ = border_parts(style)
        return Container(
            child=children[0] if len(children) == 1 else Column(children=children),
            padding=parse_px(style.get("padding"), defaults.DEFAULT_CONTAINER_PADDING),
            border=defaults.DEFAULT_CONTAINER_BORDER if border is None else border,
        )

    def convert_text(self, tag: Tag) -> Text:
        style = parse_style(tag.get("style"))

        size = parse_number(tag.get(MarkerAttributes.SIZE))
        if size is None:
            size = parse_px(style.get("font-size"), defaults.DEFAULT_TEXT_SIZE)

        line_height = style.get("line-height")
        if line_height == "normal":
            line_height = None

        border_width, border_color = border_parts(style)
        weight = style.get("font-weight", "").lower()

        return Text(
            content=tag.get_text(),
            size=size,
            color=_color(style.get("color"), defaults.DEFAULT_TEXT_COLOR),
            background_color=_color(style.get("background-color"), None),
            width=parse_number(style.get("max-width")),
            bold=weight in ("bold", "bolder", "700", "800", "900"),
            italic=style.get("font-style", "").lower() == "italic",
            align=_align(style.get("text-align"), defaults.DEFAULT_TEXT_ALIGN),
            font_family=_first_font(style.get("font-family")),
            line_height=parse_px(line_height, defaults.DEFAULT_LINE_HEIGHT),
            letter_spacing=parse_px(style.get("letter-spacing"), defaults.DEFAULT_LETTER_SPACING),
            opacity=parse_px(style.get("opacity"), defaults.DEFAULT_OPACITY),
            rotation=parse_rotation(style.get("transform")),
            padding=parse_px(style.get("padding"), defaults.DEFAULT_TEXT_PADDING),
            border_width=defaults.DEFAULT_BORDER_WIDTH if border_width is None else border_width,
            border_color=_color(border_color, None),
        )

    def convert_image(self, tag: Tag) -> Image:
        """
        Convert an Image element.

        The logical name in data-pdf-src wins over the realized <img src>, so an
        embedded data URL never replaces the asset name on export.
        """
        style = parse_style(tag.get("style"))
        src = tag.get(MarkerAttributes.SRC)
        if not src:
            img = tag.find("img")
            src = img.get("src", "") if img is not None else ""

        border_width, border_color = border_parts(style)
        return Image(
            src=src,
            width=parse_px(style.get("width"), defaults.DEFAULT_IMAGE_WIDTH),
            height=parse_px(style.get("height"), defaults.DEFAULT_IMAGE_HEIGHT),
            opacity=parse_px(style.get("opacity"), defaults.DEFAULT_OPACITY),
            rotation=parse_rotation(style.get("transform")),
            border_width=defaults.DEFAULT_BORDER_WIDTH if border_width is None else border_width,
            border_color=_color(border_color, None),
        )

    def convert_table(self, tag: Tag) -> Table:
        """Read realized header and body cells; the style block comes from data-* attributes."""
        columns = []
        for th in tag.select("thead th"):
            th_style = parse_style(th.get("style"))
            columns.append(
                TableColumn(header=th.get_text(), width=parse_number(th_style.get("width")))
            )

        rows = [
            [td.get_text() for td in tr.find_all("td")]
            for tr in tag.select("tbody tr")
        ]

        table_defaults = defaults.get_default_table_style()
        style = TableStyle(
            header_bg=tag.get(TableAttributes.HEADER_BG) or table_defaults["header_bg"],
            header_color=tag.get(TableAttributes.HEADER_COLOR) or table_defaults["header_color"],
            border_color=tag.get(TableAttributes.BORDER_COLOR) or table_defaults["border_color"],
            cell_padding=parse_px(
                tag.get(TableAttributes.CELL_PADDING), table_defaults["cell_padding"]
            ),
            font_size=parse_px(tag.get(TableAttributes.FONT_SIZE), table_defaults["font_size"]),
            striped=tag.get(TableAttributes.STRIPED) != "false",
        )
        return Table(columns=columns, rows=rows, style=style)

    def _fill(self, style, default: Color) -> Color:
        return _color(style.get("background-color") or style.get("background"), default)

    def convert_rectangle(self, tag: Tag) -> Rectangle:
        style = parse_style(tag.get("style"))
        stroke_width, stroke_color = border_parts(style)
        return Rectangle(
            width=parse_px(style.get("width"), defaults.DEFAULT_RECTANGLE_WIDTH),
            height=parse_px(style.get("height"), defaults.DEFAULT_RECTANGLE_HEIGHT),
            fill=self._fill(style, defaults.DEFAULT_RECTANGLE_FILL),
            stroke_width=defaults.DEFAULT_BORDER_WIDTH if stroke_width is None else stroke_width,
            stroke_color=_color(stroke_color, None),
            opacity=parse_px(style.get("opacity"), defaults.DEFAULT_OPACITY),
            rotation=parse_rotation(style.get("transform")),
            corner_radius=parse_px(style.get("border-radius"), defaults.DEFAULT_CORNER_RADIUS),
        )

    def convert_circle(self, tag: Tag) -> Circle:
        style = parse_style(tag.get("style"))
        stroke_width, stroke_color = border_parts(style)
        return Circle(
            width=parse_px(style.get("width"), defaults.DEFAULT_CIRCLE_SIZE),
            height=parse_px(style.get("height"), defaults.DEFAULT_CIRCLE_SIZE),
            fill=self._fill(style, defaults.DEFAULT_CIRCLE_FILL),
            stroke_width=defaults.DEFAULT_BORDER_WIDTH if stroke_width is None else stroke_width,
            stroke_color=_color(stroke_color, None),
            opacity=parse_px(style.get("opacity"), defaults.DEFAULT_OPACITY),
            rotation=parse_rotation(style.get("transform")),
        )

    def convert_line(self, tag: Tag) -> Line:
        style = parse_style(tag.get("style"))
        thickness, color = border_parts(style, prefix="border-top")
        if thickness is None:
            thickness = parse_px(style.get("height"), defaults.DEFAULT_LINE_THICKNESS)
        if color is None:
            color = style.get("border-color")
        return Line(
            width=parse_px(style.get("width"), defaults.DEFAULT_LINE_WIDTH),
            thickness=thickness,
            color=_color(color, defaults.DEFAULT_LINE_COLOR),
        )

    def convert_page_number(self, tag: Tag) -> PageNumber:
        style = parse_style(tag.get("style"))
        return PageNumber(
            format=tag.get_text() or defaults.DEFAULT_PAGE_NUMBER_FORMAT,
            size=parse_px(style.get("font-size"), defaults.DEFAULT_PAGE_NUMBER_SIZE),
            align=_align(style.get("text-align"), defaults.DEFAULT_PAGE_NUMBER_ALIGN),
        )

    def convert_dynamic_text(self, tag: Tag) -> DynamicText:
        style = parse_style(tag.get("style"))
        return DynamicText(
            binding=tag.get(MarkerAttributes.BINDING) or "",
            size=parse_px(style.get("font-size"), defaults.DEFAULT_DYNAMIC_TEXT_SIZE),
        )

    def convert_hyperlink(self, tag: Tag) -> Hyperlink:
        style = parse_style(tag.get("style"))
        return Hyperlink(
            text=tag.get_text() or defaults.DEFAULT_HYPERLINK_TEXT,
            href=tag.get("href") or defaults.DEFAULT_HYPERLINK_HREF,
            size=parse_px(style.get("font-size"), defaults.DEFAULT_HYPERLINK_SIZE),
        )
