"""Unit tests for TemplateToMarkupConverter (template -> editor markup)."""

import pytest

from pdfcore.contexts.templating import defaults
from pdfcore.contexts.templating.color import hex_to_color
from pdfcore.contexts.templating.exceptions import UnsupportedTypeError
from pdfcore.contexts.templating.markup_generator import (
    TemplateToMarkupConverter,
    is_embeddable,
)
from pdfcore.contexts.templating.node_model import (
    Circle,
    Column,
    Container,
    DynamicText,
    Hyperlink,
    Image,
    Line,
    Margins,
    PageBreak,
    PageNumber,
    PageSettings,
    Rectangle,
    Table,
    TableColumn,
    TableStyle,
    Text,
)


class Widget:
    """Stand-in for a node type the converter does not know."""

    TYPE = "Widget"


@pytest.fixture
def converter():
    return TemplateToMarkupConverter()


@pytest.mark.unit
def test_text_escapes_content_and_writes_size(converter):
    markup = converter.convert_node(Text(content="Hi & Bye", size=20))

    assert markup.startswith('<div data-pdf-type="Text"')
    assert "Hi &amp; Bye" in markup
    assert "font-size:20px;" in markup
    assert "text-align:left;" in markup
    assert "padding:4px;" in markup
    assert "font-weight" not in markup


@pytest.mark.unit
def test_text_optional_styles(converter):
    markup = converter.convert_node(
        Text(
            content="x",
            bold=True,
            italic=True,
            opacity=0.5,
            rotation=15,
            border_width=2,
            border_color=hex_to_color("#ff0000"),
            width=300,
        )
    )

    assert "font-weight:bold;" in markup
    assert "font-style:italic;" in markup
    assert "opacity:0.5;" in markup
    assert "transform:rotate(15deg);" in markup
    assert "border-width:2px;border-style:solid;border-color:rgb(255,0,0);" in markup
    assert "max-width:300px;" in markup


@pytest.mark.unit
def test_text_size_alone_does_not_imply_bold(converter):
    assert "font-weight" not in converter.convert_node(Text(content="Title", size=24))


@pytest.mark.unit
def test_column_and_row_spacing(converter):
    markup = converter.convert_node(Column(children=[Text(content="a")], spacing=8))

    assert markup.startswith('<div data-pdf-type="Column"')
    assert "flex-direction:column;" in markup
    assert "gap:8px;" in markup
    assert 'data-pdf-type="Text"' in markup
    assert "gap:0px;" in converter.convert_node(Column())


@pytest.mark.unit
def test_container_padding_and_border(converter):
    markup = converter.convert_node(Container(child=Text(content="a"), padding=12, border=2))

    assert "padding:12px;" in markup
    assert "border-width:2px;" in markup
    assert f"border-color:{defaults.EDITOR_BORDER_COLOR};" in markup


@pytest.mark.unit
def test_unresolved_image_becomes_placeholder():
    converter = TemplateToMarkupConverter()
    markup = converter.convert_node(Image(src="logo.png"))

    assert 'data-pdf-src="logo.png"' in markup
    assert defaults.IMAGE_PLACEHOLDER_LABEL in markup
    assert "<img" not in markup
    assert [error.src for error in converter.unresolved_assets] == ["logo.png"]


@pytest.mark.unit
def test_placeholder_frame_is_not_a_border():
    markup = TemplateToMarkupConverter().convert_node(Image(src="logo.png"))

    assert "outline:2px dashed" in markup
    assert "border-width" not in markup


@pytest.mark.unit
def test_image_resolved_through_asset_map():
    converter = TemplateToMarkupConverter(
        asset_urls={"logo.png": "data:image/png;base64,AAAA"}
    )
    markup = converter.convert_node(Image(src="logo.png", width=100, height=50))

    assert 'data-pdf-src="logo.png"' in markup
    assert '<img src="data:image/png;base64,AAAA"' in markup
    assert "width:100px;height:50px;" in markup
    assert converter.unresolved_assets == []


@pytest.mark.unit
def test_external_image_is_embedded_directly(converter):
    markup = converter.convert_node(Image(src="https://example.com/a.png"))

    assert '<img src="https://example.com/a.png"' in markup
    assert converter.unresolved_assets == []


@pytest.mark.unit
def test_is_embeddable():
    assert is_embeddable("data:image/png;base64,AAAA")
    assert is_embeddable("blob:https://editor/1234")
    assert is_embeddable("http://example.com/a.png")
    assert not is_embeddable("logo.png")
    assert not is_embeddable("")
    assert not is_embeddable(None)


@pytest.mark.unit
def test_table_striping_on_odd_rows(converter):
    table = Table(
        columns=[TableColumn("Item", 80), TableColumn("Qty")],
        rows=[["a", "1"], ["b", "2"], ["c", "3"]],
    )
    markup = converter.convert_node(table)

    assert markup.count(f"background:{defaults.TABLE_STRIPE_COLOR};") == 2
    assert markup.count("<th ") == 2
    assert markup.count("<td ") == 6
    assert "width:80px;" in markup
    assert 'data-striped="true"' in markup
    assert 'data-cell-padding="10"' in markup


@pytest.mark.unit
def test_table_without_striping(converter):
    table = Table(rows=[["a"], ["b"]], style=TableStyle(striped=False, header_bg="#000000"))
    markup = converter.convert_node(table)

    assert defaults.TABLE_STRIPE_COLOR not in markup
    assert 'data-striped="false"' in markup
    assert 'data-header-bg="#000000"' in markup


@pytest.mark.unit
def test_table_cells_are_escaped(converter):
    markup = converter.convert_node(
        Table(columns=[TableColumn("R&D")], rows=[["<b>bold</b> & co"]])
    )

    assert ">R&amp;D</th>" in markup
    assert ">&lt;b&gt;bold&lt;/b&gt; &amp; co</td>" in markup


@pytest.mark.unit
def test_shapes(converter):
    rectangle = converter.convert_node(Rectangle(corner_radius=6, stroke_width=1))
    circle = converter.convert_node(Circle())

    assert "background-color:rgb(59,130,246);" in rectangle
    assert "border-radius:6px;" in rectangle
    assert "border-width:1px;" in rectangle
    assert "border-color" not in rectangle
    assert "border-radius:50%;" in circle
    assert "width:80px;height:80px;" in circle


@pytest.mark.unit
def test_line_uses_top_border_longhands(converter):
    markup = converter.convert_node(Line(width=300, thickness=3))

    assert markup.startswith('<hr data-pdf-type="Line"')
    assert "width:300px;" in markup
    assert "border-top-width:3px;" in markup
    assert "border-top-color:rgb(51,65,85);" in markup


@pytest.mark.unit
def test_attribute_values_are_escaped(converter):
    markup = converter.convert_node(Hyperlink(text="a<b", href='x"y&z'))

    assert 'href="x&quot;y&amp;z"' in markup
    assert ">a&lt;b</a>" in markup


@pytest.mark.unit
def test_dynamic_text_placeholder(converter):
    markup = converter.convert_node(DynamicText(binding="invoice.total", size=14))

    assert 'data-binding="invoice.total"' in markup
    assert "{{invoice.total}}" in markup
    assert "font-size:14px;" in markup


@pytest.mark.unit
def test_page_number_writes_format(converter):
    markup = converter.convert_node(PageNumber(align="right"))

    assert "Page {page} of {total}" in markup
    assert "text-align:right;" in markup


@pytest.mark.unit
def test_page_break_renders_nothing(converter):
    assert converter.convert_node(PageBreak()) == ""


@pytest.mark.unit
def test_unknown_node_raises(converter):
    with pytest.raises(UnsupportedTypeError):
        converter.convert_node(Widget())


@pytest.mark.unit
def test_unknown_child_is_skipped(converter):
    markup = converter.convert_children([Text(content="kept"), Widget()])

    assert "kept" in markup


@pytest.mark.unit
def test_page_wrapper_defaults(converter):
    markup = converter.generate_page(Column())

    assert markup.startswith('<div data-pdf-type="PageRoot"')
    assert 'data-page-size="A4"' in markup
    assert 'data-orientation="portrait"' in markup
    assert "data-page-width" not in markup
    assert "width:595px;min-height:842px;" in markup
    assert "background-color:white;" in markup
    assert "padding-top:40px;" in markup


@pytest.mark.unit
def test_page_wrapper_settings(converter):
    settings = PageSettings(
        size="Letter",
        orientation="landscape",
        margins=Margins(top=10, bottom=20, left=30, right=0),
        background_color="#fafafa",
    )
    markup = converter.generate_page(Column(), settings)

    assert 'data-page-size="Letter"' in markup
    assert 'data-orientation="landscape"' in markup
    assert 'data-background="#fafafa"' in markup
    assert "width:792px;min-height:612px;" in markup
    assert "padding-top:10px;padding-bottom:20px;padding-left:30px;padding-right:0px;" in markup


@pytest.mark.unit
def test_page_wrapper_custom_size(converter):
    markup = converter.generate_page(Column(), PageSettings(size="Custom", width=100, height=50))

    assert 'data-page-width="100"' in markup
    assert 'data-page-height="50"' in markup
    assert "width:283.46px;" in markup
