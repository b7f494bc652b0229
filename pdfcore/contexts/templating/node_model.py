"""
Template Node Model

Defines the portable document tree exchanged with the rendering engine: a closed
set of node variants, page settings, manifest and the package bundle.

Each variant is a frozen dataclass whose constructor validates required fields and
applies the documented numeric defaults (see defaults.py). `node_to_dict` and
`node_from_dict` convert to and from the JSON wire format stored in layout.json.
"""

from dataclasses import MISSING, dataclass, field, fields
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Type, Union

from pdfcore.contexts.templating import defaults
from pdfcore.contexts.templating.color import Color, css_to_color
from pdfcore.contexts.templating.exceptions import FormatError, UnsupportedTypeError
from pdfcore.contexts.templating.logger import _log_warning

TEXT_ALIGNMENTS = ("left", "center", "right", "justify")
ORIENTATIONS = ("portrait", "landscape")


# Field declaration helpers. The metadata drives validation and JSON conversion:
#   kind: number | color | text | flag | node | nodes | columns | rows | table_style
#   key:  JSON key when it differs from the attribute name


def _number(default: float, key: str = None):
    return field(default=default, metadata={"kind": "number", "key": key})


def _optional_number(key: str = None):
    return field(default=None, metadata={"kind": "number", "key": key, "optional": True})


def _color(default: Color, key: str = None):
    return field(default=default, metadata={"kind": "color", "key": key})


def _optional_color(key: str = None):
    return field(default=None, metadata={"kind": "color", "key": key, "optional": True})


def _text(default: str = MISSING, key: str = None):
    return field(default=default, metadata={"kind": "text", "key": key})


def _flag(default: bool, key: str = None):
    return field(default=default, metadata={"kind": "flag", "key": key})


def _children():
    return field(default_factory=list, metadata={"kind": "nodes"})


def json_key(f) -> str:
    """JSON key for a dataclass field."""
    return f.metadata.get("key") or f.name


def json_number(value: float) -> Union[int, float]:
    """Emit integral floats as ints so layout.json reads naturally."""
    return int(value) if float(value).is_integer() else value


def _coerce_number(type_name: str, name: str, value: Any, default: Any) -> Optional[float]:
    if value is None:
        return default
    if isinstance(value, bool):
        raise FormatError(f"{type_name}.{name} must be a number, got {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            pass
    raise FormatError(f"{type_name}.{name} must be a number, got {value!r}")


def _coerce_color(type_name: str, name: str, value: Any, default: Any) -> Optional[Color]:
    if value is None:
        return default
    if isinstance(value, Color):
        return value
    if isinstance(value, dict):
        try:
            return Color.from_dict(value)
        except ValueError as e:
            raise FormatError(f"{type_name}.{name}: {e}") from e
    if isinstance(value, str):
        color = css_to_color(value)
        if color is not None:
            return color
    raise FormatError(f"{type_name}.{name} must be a color, got {value!r}")


def _coerce_text(type_name: str, name: str, value: Any, default: Any) -> str:
    if value is None:
        if default is MISSING:
            raise FormatError(f"{type_name}.{name} is required")
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise FormatError(f"{type_name}.{name} must be a string, got {value!r}")


@dataclass(frozen=True)
class TemplateNodeBase:
    """
    Common constructor-validator for every node variant.

    Subclasses declare their fields with the helpers above and may override
    `_validate` for variant-specific rules.
    """

    TYPE: ClassVar[str] = ""

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            kind = f.metadata.get("kind")
            default = None if f.metadata.get("optional") else f.default

            if kind == "number":
                value = _coerce_number(self.TYPE, f.name, value, default)
            elif kind == "color":
                value = _coerce_color(self.TYPE, f.name, value, default)
            elif kind == "text":
                value = _coerce_text(self.TYPE, f.name, value, default)
            elif kind == "flag":
                value = bool(value) if value is not None else f.default
            elif kind == "nodes":
                value = _as_list(f"{self.TYPE}.children", value)
                for child in value:
                    if not isinstance(child, TemplateNodeBase):
                        raise FormatError(f"{self.TYPE}.children must contain nodes, got {child!r}")

            object.__setattr__(self, f.name, value)

        self._validate()

    def _validate(self) -> None:
        pass


@dataclass(frozen=True)
class Column(TemplateNodeBase):
    """Vertical stack of children."""

    TYPE: ClassVar[str] = "Column"

    children: List["TemplateNode"] = _children()
    spacing: float = _number(defaults.DEFAULT_SPACING)


@dataclass(frozen=True)
class Row(TemplateNodeBase):
    """Horizontal run of children."""

    TYPE: ClassVar[str] = "Row"

    children: List["TemplateNode"] = _children()
    spacing: float = _number(defaults.DEFAULT_SPACING)


@dataclass(frozen=True)
class Container(TemplateNodeBase):
    """Box around exactly one child, with padding and border width."""

    TYPE: ClassVar[str] = "Container"

    child: Optional["TemplateNode"] = field(default=None, metadata={"kind": "node"})
    padding: float = _number(defaults.DEFAULT_CONTAINER_PADDING)
    border: float = _number(defaults.DEFAULT_CONTAINER_BORDER)

    def _validate(self) -> None:
        if self.child is None:
            object.__setattr__(self, "child", Column())
        elif not isinstance(self.child, TemplateNodeBase):
            raise FormatError(f"Container.child must be a node, got {self.child!r}")


@dataclass(frozen=True)
class Text(TemplateNodeBase):
    TYPE: ClassVar[str] = "Text"

    content: str = _text()
    size: float = _number(defaults.DEFAULT_TEXT_SIZE)
    color: Color = _color(defaults.DEFAULT_TEXT_COLOR)
    background_color: Optional[Color] = _optional_color()
    width: Optional[float] = _optional_number()
    bold: bool = _flag(False)
    italic: bool = _flag(False)
    align: str = _text(defaults.DEFAULT_TEXT_ALIGN)
    font_family: str = _text(defaults.DEFAULT_FONT_FAMILY, key="fontFamily")
    line_height: float = _number(defaults.DEFAULT_LINE_HEIGHT, key="lineHeight")
    letter_spacing: float = _number(defaults.DEFAULT_LETTER_SPACING, key="letterSpacing")
    opacity: float = _number(defaults.DEFAULT_OPACITY)
    rotation: float = _number(defaults.DEFAULT_ROTATION)
    padding: float = _number(defaults.DEFAULT_TEXT_PADDING)
    border_width: float = _number(defaults.DEFAULT_BORDER_WIDTH, key="borderWidth")
    border_color: Optional[Color] = _optional_color(key="borderColor")

    def _validate(self) -> None:
        if self.align not in TEXT_ALIGNMENTS:
            raise FormatError(f"Text.align must be one of {TEXT_ALIGNMENTS}, got {self.align!r}")


@dataclass(frozen=True)
class Image(TemplateNodeBase):
    """
    Image reference.

    `src` is either a logical asset name (a key of the package asset map) or an
    externally addressable source (URL, data URL, absolute path).
    """

    TYPE: ClassVar[str] = "Image"

    src: str = _text()
    width: float = _number(defaults.DEFAULT_IMAGE_WIDTH)
    height: float = _number(defaults.DEFAULT_IMAGE_HEIGHT)
    opacity: float = _number(defaults.DEFAULT_OPACITY)
    rotation: float = _number(defaults.DEFAULT_ROTATION)
    border_width: float = _number(defaults.DEFAULT_BORDER_WIDTH, key="borderWidth")
    border_color: Optional[Color] = _optional_color(key="borderColor")


@dataclass(frozen=True)
class TableColumn:
    header: str = ""
    width: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "header", _coerce_text("TableColumn", "header", self.header, ""))
        object.__setattr__(
            self, "width", _coerce_number("TableColumn", "width", self.width, None)
        )


@dataclass(frozen=True)
class TableStyle:
    header_bg: str = defaults.DEFAULT_TABLE_STYLE["header_bg"]
    header_color: str = defaults.DEFAULT_TABLE_STYLE["header_color"]
    border_color: str = defaults.DEFAULT_TABLE_STYLE["border_color"]
    cell_padding: float = defaults.DEFAULT_TABLE_STYLE["cell_padding"]
    font_size: float = defaults.DEFAULT_TABLE_STYLE["font_size"]
    striped: bool = defaults.DEFAULT_TABLE_STYLE["striped"]

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in ("cell_padding", "font_size"):
                value = _coerce_number("Table.style", f.name, value, f.default)
            elif f.name == "striped":
                value = f.default if value is None else bool(value)
            else:
                value = _coerce_text("Table.style", f.name, value, f.default)
            object.__setattr__(self, f.name, value)


@dataclass(frozen=True)
class Table(TemplateNodeBase):
    """Header columns, a matrix of cell strings and a style block."""

    TYPE: ClassVar[str] = "Table"

    columns: List[TableColumn] = field(default_factory=list, metadata={"kind": "columns"})
    rows: List[List[str]] = field(default_factory=list, metadata={"kind": "rows"})
    style: TableStyle = field(default_factory=TableStyle, metadata={"kind": "table_style"})

    def _validate(self) -> None:
        columns = [
            column if isinstance(column, TableColumn) else TableColumn(**_column_kwargs(column))
            for column in _as_list("Table.columns", self.columns)
        ]
        rows = [
            [_coerce_text("Table", "rows", cell, "") for cell in _as_list("Table.rows entries", row)]
            for row in _as_list("Table.rows", self.rows)
        ]
        style = self.style
        if style is None:
            style = TableStyle()
        elif isinstance(style, dict):
            style = TableStyle(**{k: v for k, v in style.items() if k in _TABLE_STYLE_KEYS})
        elif not isinstance(style, TableStyle):
            raise FormatError(f"Table.style must be an object, got {style!r}")

        object.__setattr__(self, "columns", columns)
        object.__setattr__(self, "rows", rows)
        object.__setattr__(self, "style", style)


_TABLE_STYLE_KEYS = {f.name for f in fields(TableStyle)}


def _as_list(label: str, value: Any) -> list:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise FormatError(f"{label} must be a list, got {value!r}")
    return list(value)


def _column_kwargs(column: Any) -> Dict[str, Any]:
    if isinstance(column, str):
        return {"header": column}
    if isinstance(column, dict):
        return {"header": column.get("header", ""), "width": column.get("width")}
    raise FormatError(f"Table.columns entries must be objects, got {column!r}")


@dataclass(frozen=True)
class Rectangle(TemplateNodeBase):
    TYPE: ClassVar[str] = "Rectangle"

    width: float = _number(defaults.DEFAULT_RECTANGLE_WIDTH)
    height: float = _number(defaults.DEFAULT_RECTANGLE_HEIGHT)
    fill: Color = _color(defaults.DEFAULT_RECTANGLE_FILL)
    stroke_width: float = _number(defaults.DEFAULT_BORDER_WIDTH, key="strokeWidth")
    stroke_color: Optional[Color] = _optional_color(key="strokeColor")
    opacity: float = _number(defaults.DEFAULT_OPACITY)
    rotation: float = _number(defaults.DEFAULT_ROTATION)
    corner_radius: float = _number(defaults.DEFAULT_CORNER_RADIUS, key="borderRadius")


@dataclass(frozen=True)
class Circle(TemplateNodeBase):
    TYPE: ClassVar[str] = "Circle"

    width: float = _number(defaults.DEFAULT_CIRCLE_SIZE)
    height: float = _number(defaults.DEFAULT_CIRCLE_SIZE)
    fill: Color = _color(defaults.DEFAULT_CIRCLE_FILL)
    stroke_width: float = _number(defaults.DEFAULT_BORDER_WIDTH, key="strokeWidth")
    stroke_color: Optional[Color] = _optional_color(key="strokeColor")
    opacity: float = _number(defaults.DEFAULT_OPACITY)
    rotation: float = _number(defaults.DEFAULT_ROTATION)


@dataclass(frozen=True)
class Line(TemplateNodeBase):
    TYPE: ClassVar[str] = "Line"

    width: float = _number(defaults.DEFAULT_LINE_WIDTH)
    thickness: float = _number(defaults.DEFAULT_LINE_THICKNESS)
    color: Color = _color(defaults.DEFAULT_LINE_COLOR)


@dataclass(frozen=True)
class Header(TemplateNodeBase):
    """Content repeated at the top of every page."""

    TYPE: ClassVar[str] = "Header"

    children: List["TemplateNode"] = _children()


@dataclass(frozen=True)
class Footer(TemplateNodeBase):
    """Content repeated at the bottom of every page."""

    TYPE: ClassVar[str] = "Footer"

    children: List["TemplateNode"] = _children()


@dataclass(frozen=True)
class PageNumber(TemplateNodeBase):
    """Page counter; `{page}` and `{total}` are substituted by the engine."""

    TYPE: ClassVar[str] = "PageNumber"

    format: str = _text(defaults.DEFAULT_PAGE_NUMBER_FORMAT)
    size: float = _number(defaults.DEFAULT_PAGE_NUMBER_SIZE)
    align: str = _text(defaults.DEFAULT_PAGE_NUMBER_ALIGN)


@dataclass(frozen=True)
class DynamicText(TemplateNodeBase):
    """
    Text resolved from render-time data through `binding`.

    The content is never stored; only the binding field name is.
    """

    TYPE: ClassVar[str] = "DynamicText"

    binding: str = _text()
    size: float = _number(defaults.DEFAULT_DYNAMIC_TEXT_SIZE)


@dataclass(frozen=True)
class Hyperlink(TemplateNodeBase):
    TYPE: ClassVar[str] = "Hyperlink"

    text: str = _text(defaults.DEFAULT_HYPERLINK_TEXT)
    href: str = _text(defaults.DEFAULT_HYPERLINK_HREF)
    size: float = _number(defaults.DEFAULT_HYPERLINK_SIZE)


@dataclass(frozen=True)
class PageBreak(TemplateNodeBase):
    """Marker only. Dropped whenever the editor tree is exported."""

    TYPE: ClassVar[str] = "PageBreak"


TemplateNode = Union[
    Column,
    Row,
    Container,
    Text,
    Image,
    Table,
    Rectangle,
    Circle,
    Line,
    Header,
    Footer,
    PageNumber,
    DynamicText,
    Hyperlink,
    PageBreak,
]

NODE_TYPES: Dict[str, Type[TemplateNodeBase]] = {
    cls.TYPE: cls
    for cls in (
        Column,
        Row,
        Container,
        Text,
        Image,
        Table,
        Rectangle,
        Circle,
        Line,
        Header,
        Footer,
        PageNumber,
        DynamicText,
        Hyperlink,
        PageBreak,
    )
}


# Page settings, manifest and package


@dataclass(frozen=True)
class Margins:
    top: float = defaults.DEFAULT_MARGIN
    bottom: float = defaults.DEFAULT_MARGIN
    left: float = defaults.DEFAULT_MARGIN
    right: float = defaults.DEFAULT_MARGIN

    def __post_init__(self):
        for f in fields(self):
            value = _coerce_number("margins", f.name, getattr(self, f.name), f.default)
            object.__setattr__(self, f.name, value)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: json_number(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Margins":
        data = data or {}
        if not isinstance(data, dict):
            raise FormatError(f"settings.margins must be an object, got {data!r}")
        return cls(**{f.name: data.get(f.name) for f in fields(cls)})


@dataclass(frozen=True)
class PageSettings:
    """
    Page geometry for the template.

    Attributes:
        size: Size class ("A4", "Letter", "Legal" or "Custom")
        orientation: "portrait" or "landscape"
        width: Custom page width in mm (size == "Custom")
        height: Custom page height in mm (size == "Custom")
        margins: Page margins in px
        background_color: Optional CSS page background
    """

    size: str = defaults.DEFAULT_PAGE_SIZE
    orientation: str = defaults.DEFAULT_ORIENTATION
    width: Optional[float] = None
    height: Optional[float] = None
    margins: Margins = field(default_factory=Margins)
    background_color: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(
            self, "size", _coerce_text("settings", "size", self.size, defaults.DEFAULT_PAGE_SIZE)
        )
        if self.background_color is not None and not isinstance(self.background_color, str):
            raise FormatError(
                f"settings.backgroundColor must be a string, got {self.background_color!r}"
            )
        if self.orientation not in ORIENTATIONS:
            raise FormatError(
                f"settings.orientation must be one of {ORIENTATIONS}, got {self.orientation!r}"
            )
        object.__setattr__(self, "width", _coerce_number("settings", "width", self.width, None))
        object.__setattr__(self, "height", _coerce_number("settings", "height", self.height, None))
        if isinstance(self.margins, dict):
            object.__setattr__(self, "margins", Margins.from_dict(self.margins))
        elif self.margins is None:
            object.__setattr__(self, "margins", Margins())
        elif not isinstance(self.margins, Margins):
            raise FormatError(f"settings.margins must be an object, got {self.margins!r}")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"size": self.size, "orientation": self.orientation}
        if self.width is not None:
            data["width"] = json_number(self.width)
        if self.height is not None:
            data["height"] = json_number(self.height)
        data["margins"] = self.margins.to_dict()
        if self.background_color is not None:
            data["backgroundColor"] = self.background_color
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PageSettings":
        if not isinstance(data, dict):
            raise FormatError(f"settings must be an object, got {data!r}")
        return cls(
            size=data.get("size") or defaults.DEFAULT_PAGE_SIZE,
            orientation=data.get("orientation") or defaults.DEFAULT_ORIENTATION,
            width=data.get("width"),
            height=data.get("height"),
            margins=Margins.from_dict(data.get("margins")),
            background_color=data.get("backgroundColor"),
        )


@dataclass(frozen=True)
class Manifest:
    name: str = defaults.DEFAULT_MANIFEST_NAME
    version: str = defaults.DEFAULT_MANIFEST_VERSION
    author: Optional[str] = None
    engine_version: Optional[str] = None
    created_at: Optional[str] = None
    modified_at: Optional[str] = None

    _KEYS: ClassVar[Dict[str, str]] = {
        "name": "name",
        "version": "version",
        "author": "author",
        "engine_version": "engineVersion",
        "created_at": "createdAt",
        "modified_at": "modifiedAt",
    }

    def to_dict(self) -> Dict[str, Any]:
        return {
            key: getattr(self, name)
            for name, key in self._KEYS.items()
            if getattr(self, name) is not None
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Manifest":
        data = data or {}
        if not isinstance(data, dict):
            raise FormatError(f"manifest must be an object, got {data!r}")
        values = {name: data.get(key) for name, key in cls._KEYS.items()}
        values["name"] = values["name"] or defaults.DEFAULT_MANIFEST_NAME
        values["version"] = values["version"] or defaults.DEFAULT_MANIFEST_VERSION
        return cls(**values)


@dataclass(frozen=True)
class QueryDefinition:
    """Named data query carried through the package untouched."""

    name: str
    sql: str
    params: Optional[List[str]] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "sql": self.sql}
        if self.params is not None:
            data["params"] = list(self.params)
        if self.description is not None:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QueryDefinition":
        if not isinstance(data, dict) or "name" not in data or "sql" not in data:
            raise FormatError(f"query definitions need 'name' and 'sql', got {data!r}")
        return cls(
            name=data["name"],
            sql=data["sql"],
            params=data.get("params"),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class Package:
    """
    Unit exchanged with the archive codec.

    Attributes:
        root: Template root node
        settings: Optional page settings
        manifest: Package metadata
        styles: Opaque named style map (passthrough)
        queries: Optional named query definitions (passthrough)
        assets: Logical asset name -> raw bytes
    """

    root: TemplateNode
    settings: Optional[PageSettings] = None
    manifest: Manifest = field(default_factory=Manifest)
    styles: Dict[str, Any] = field(default_factory=dict)
    queries: Optional[List[QueryDefinition]] = None
    assets: Dict[str, bytes] = field(default_factory=dict)


# JSON conversion


def node_to_dict(node: TemplateNode) -> Dict[str, Any]:
    """
    Serialize a node (recursively) to its layout.json form.

    Optional fields left unset are omitted; integral numbers are written as ints.
    """
    data: Dict[str, Any] = {"type": node.TYPE}

    for f in fields(node):
        value = getattr(node, f.name)
        kind = f.metadata.get("kind")
        key = json_key(f)

        if value is None:
            continue
        if kind == "number":
            data[key] = json_number(value)
        elif kind == "color":
            data[key] = value.to_dict()
        elif kind == "nodes":
            data[key] = [node_to_dict(child) for child in value]
        elif kind == "node":
            data[key] = node_to_dict(value)
        elif kind == "columns":
            data[key] = [_column_to_dict(column) for column in value]
        elif kind == "rows":
            data[key] = [list(row) for row in value]
        elif kind == "table_style":
            data[key] = {
                f2.name: json_number(getattr(value, f2.name))
                if f2.name in ("cell_padding", "font_size")
                else getattr(value, f2.name)
                for f2 in fields(value)
            }
        else:
            data[key] = value

    return data


def _column_to_dict(column: TableColumn) -> Dict[str, Any]:
    data: Dict[str, Any] = {"header": column.header}
    if column.width is not None:
        data["width"] = json_number(column.width)
    return data


def node_from_dict(data: Dict[str, Any]) -> TemplateNode:
    """
    Decode a layout.json node (recursively).

    Child lists are decoded leniently: an unsupported or malformed child is
    dropped with a warning and its siblings are kept.

    Raises:
        UnsupportedTypeError: If this node's type tag is not a known variant
        FormatError: If this node is malformed or misses a required field
    """
    if not isinstance(data, dict):
        raise FormatError(f"Template node must be an object, got {data!r}")

    type_name = data.get("type")
    node_cls = NODE_TYPES.get(type_name)
    if node_cls is None:
        raise UnsupportedTypeError(type_name, context="decode")

    kwargs: Dict[str, Any] = {}
    for f in fields(node_cls):
        key = json_key(f)
        kind = f.metadata.get("kind")

        if key not in data:
            if f.default is MISSING and f.default_factory is MISSING:
                raise FormatError(f"{type_name}.{key} is required")
            continue

        value = data[key]
        if kind == "nodes":
            value = decode_children(value, parent=type_name)
        elif kind == "node":
            value = node_from_dict(value) if value is not None else None
        kwargs[f.name] = value

    return node_cls(**kwargs)


def decode_children(items: Any, parent: str = "node") -> List[TemplateNode]:
    """Decode a child list, isolating failures to the offending child."""
    if items is None:
        return []
    if not isinstance(items, list):
        raise FormatError(f"{parent}.children must be a list, got {items!r}")

    children = []
    for index, item in enumerate(items):
        try:
            children.append(node_from_dict(item))
        except (UnsupportedTypeError, FormatError) as e:
            _log_warning(f"Dropping child {index} of {parent}: {e}")
    return children


# Tree helpers


def child_nodes(node: TemplateNode) -> List[TemplateNode]:
    """Direct children of a node (empty for leaves)."""
    if isinstance(node, Container):
        return [node.child]
    return list(getattr(node, "children", []))


def iter_nodes(node: TemplateNode) -> Iterator[TemplateNode]:
    """Depth-first, document-order walk over a tree."""
    yield node
    for child in child_nodes(node):
        yield from iter_nodes(child)


def count_nodes(node: TemplateNode) -> int:
    return sum(1 for _ in iter_nodes(node))
