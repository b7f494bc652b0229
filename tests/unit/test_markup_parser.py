"""Unit tests for MarkupToTemplateConverter (editor markup -> template)."""

import pytest
from bs4 import BeautifulSoup

from pdfcore.contexts.templating import defaults
from pdfcore.contexts.templating.color import Color
from pdfcore.contexts.templating.markup_parser import MarkupToTemplateConverter
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
    PageNumber,
    PageSettings,
    Rectangle,
    Row,
    TableColumn,
    Text,
)

RED = Color(1.0, 0.0, 0.0)
GREEN = Color(0.0, 1.0, 0.0)


def export(markup):
    """Export markup and return only the root node."""
    root, _ = MarkupToTemplateConverter().convert_tree(markup)
    return root


@pytest.mark.unit
def test_bare_text_gets_defaults():
    root, settings = MarkupToTemplateConverter().convert_tree(
        '<div data-pdf-type="Text">Hello</div>'
    )

    assert root == Text(content="Hello")
    assert settings == PageSettings()


@pytest.mark.unit
def test_text_content_is_kept_verbatim():
    assert export('<div data-pdf-type="Text">  Hello  </div>').content == "  Hello  "
    assert export('<div data-pdf-type="PageNumber"> {page} </div>').format == " {page} "
    assert export('<a data-pdf-type="Hyperlink"> Docs</a>').text == " Docs"


@pytest.mark.unit
def test_size_marker_wins_over_font_size():
    markup = '<div data-pdf-type="Text" data-pdf-size="18" style="font-size:24px">x</div>'
    assert export(markup).size == 18.0


@pytest.mark.unit
def test_text_font_size_from_style():
    assert export('<div data-pdf-type="Text" style="font-size: 24px">x</div>').size == 24.0


@pytest.mark.unit
def test_text_colors_are_normalized():
    text = export(
        '<div data-pdf-type="Text" '
        'style="color: rgb(255, 0, 0); background-color: #00ff00">x</div>'
    )

    assert text.color == RED
    assert text.background_color == GREEN


@pytest.mark.unit
def test_color_keywords_keep_defaults():
    text = export(
        '<div data-pdf-type="Text" style="color: inherit; background-color: transparent">x</div>'
    )

    assert text.color == defaults.DEFAULT_TEXT_COLOR
    assert text.background_color is None


@pytest.mark.unit
def test_first_font_family_without_quotes():
    text = export(
        """<div data-pdf-type="Text" style="font-family: 'Open Sans', Arial, sans-serif">x</div>"""
    )
    assert text.font_family == "Open Sans"


@pytest.mark.unit
def test_text_weight_style_and_spacing():
    text = export(
        '<div data-pdf-type="Text" style="font-weight:700; font-style:italic; '
        'line-height:1.5; letter-spacing:2px; padding:6px; max-width:250px; '
        'opacity:0.5; transform:rotate(-10deg)">x</div>'
    )

    assert text.bold is True
    assert text.italic is True
    assert text.line_height == 1.5
    assert text.letter_spacing == 2.0
    assert text.padding == 6.0
    assert text.width == 250.0
    assert text.opacity == 0.5
    assert text.rotation == -10.0


@pytest.mark.unit
def test_normal_weight_and_line_height_are_defaults():
    text = export(
        '<div data-pdf-type="Text" style="font-weight:400; line-height:normal">x</div>'
    )

    assert text.bold is False
    assert text.line_height == defaults.DEFAULT_LINE_HEIGHT


@pytest.mark.unit
def test_border_shorthand_on_text():
    text = export('<div data-pdf-type="Text" style="border: 2px solid #ff0000">x</div>')

    assert text.border_width == 2.0
    assert text.border_color == RED


@pytest.mark.unit
def test_unknown_alignment_falls_back():
    assert export('<div data-pdf-type="Text" style="text-align:middle">x</div>').align == "left"
    assert export('<div data-pdf-type="Text" style="text-align:Center">x</div>').align == "center"


@pytest.mark.unit
def test_untyped_wrapper_with_one_child_collapses():
    assert export('<div><div data-pdf-type="Text">a</div></div>') == Text(content="a")


@pytest.mark.unit
def test_untyped_wrapper_with_several_children_becomes_column():
    root = export(
        '<section><div data-pdf-type="Text">a</div><div data-pdf-type="Text">b</div></section>'
    )
    assert root == Column(children=[Text(content="a"), Text(content="b")])


@pytest.mark.unit
def test_empty_untyped_wrapper_exports_nothing():
    root = export('<div></div><div data-pdf-type="Text">a</div>')
    assert root == Text(content="a")


@pytest.mark.unit
def test_editor_chrome_spans_are_skipped():
    root = export(
        '<div data-pdf-type="Column" style="gap:8px">'
        '<span class="drag-handle">::</span>'
        '<div data-pdf-type="Text">a</div>'
        "</div>"
    )
    assert root == Column(children=[Text(content="a")], spacing=8)


@pytest.mark.unit
def test_unknown_type_degrades_without_aborting_siblings():
    root = export(
        '<div data-pdf-type="Column">'
        '<div data-pdf-type="Widget"><div data-pdf-type="Text">lost</div></div>'
        '<div data-pdf-type="Text">kept</div>'
        "</div>"
    )
    assert root == Column(children=[Text(content="kept")])


@pytest.mark.unit
def test_malformed_css_numbers_fall_back_to_defaults():
    root = export(
        '<div data-pdf-type="Column">'
        '<div data-pdf-type="Text" style="transform:rotate(1.2.3deg)">bad angle</div>'
        '<div data-pdf-type="Text" style="color:rgb(1..2,0,0)">bad color</div>'
        '<div data-pdf-type="Text">good</div>'
        "</div>"
    )
    assert root == Column(
        children=[Text(content="bad angle"), Text(content="bad color"), Text(content="good")]
    )


@pytest.mark.unit
def test_page_break_is_dropped():
    root = export(
        '<div data-pdf-type="Row">'
        '<div data-pdf-type="PageBreak"></div>'
        '<div data-pdf-type="Text">a</div>'
        "</div>"
    )
    assert root == Row(children=[Text(content="a")])


@pytest.mark.unit
def test_page_root_settings():
    root, settings = MarkupToTemplateConverter().convert_tree(
        '<div data-pdf-type="PageRoot" data-page-size="Letter" data-orientation="landscape" '
        'data-background="#fafafa" style="padding-top:0px;padding-bottom:20px;padding-left:30px">'
        '<div data-pdf-type="Text">a</div>'
        "</div>"
    )

    assert root == Text(content="a")
    assert settings.size == "Letter"
    assert settings.orientation == "landscape"
    assert settings.background_color == "#fafafa"
    assert settings.margins.top == 0.0
    assert settings.margins.bottom == 20.0
    assert settings.margins.left == 30.0
    assert settings.margins.right == defaults.DEFAULT_MARGIN


@pytest.mark.unit
def test_page_root_custom_size_and_padding_shorthand():
    _, settings = MarkupToTemplateConverter().convert_tree(
        '<div data-pdf-type="PageRoot" data-page-size="Custom" data-page-width="100" '
        'data-page-height="50" style="padding:12px"></div>'
    )

    assert (settings.width, settings.height) == (100.0, 50.0)
    assert settings.margins.top == settings.margins.right == 12.0


@pytest.mark.unit
def test_page_root_unknown_orientation_becomes_portrait():
    _, settings = MarkupToTemplateConverter().convert_tree(
        '<div data-pdf-type="PageRoot" data-orientation="sideways"></div>'
    )
    assert settings.orientation == "portrait"


@pytest.mark.unit
def test_page_root_inside_full_document():
    root, settings = MarkupToTemplateConverter().convert_tree(
        "<html><head><title>t</title></head><body>"
        '<div data-pdf-type="PageRoot" data-page-size="Legal">'
        '<div data-pdf-type="Text">a</div><div data-pdf-type="Text">b</div>'
        "</div></body></html>"
    )

    assert root == Column(children=[Text(content="a"), Text(content="b")])
    assert settings.size == "Legal"


@pytest.mark.unit
def test_empty_document_exports_empty_column():
    root, settings = MarkupToTemplateConverter().convert_tree("")

    assert root == Column()
    assert settings == PageSettings()


@pytest.mark.unit
def test_image_logical_name_wins_over_embedded_src():
    image = export(
        '<div data-pdf-type="Image" data-pdf-src="logo.png" style="width:100px;height:50px">'
        '<img src="data:image/png;base64,AAAA"></div>'
    )
    assert image == Image(src="logo.png", width=100, height=50)


@pytest.mark.unit
def test_image_falls_back_to_img_src():
    image = export(
        '<div data-pdf-type="Image"><img src="https://example.com/a.png"></div>'
    )
    assert image.src == "https://example.com/a.png"
    assert image.width == defaults.DEFAULT_IMAGE_WIDTH


@pytest.mark.unit
def test_image_without_any_source():
    assert export('<div data-pdf-type="Image"></div>').src == ""


@pytest.mark.unit
def test_table_cells_and_style_block():
    table = export(
        '<table data-pdf-type="Table" data-header-bg="#000000" data-cell-padding="6" '
        'data-striped="false">'
        '<thead><tr><th style="width:80px">Item</th><th>Qty</th></tr></thead>'
        "<tbody><tr><td>Pen &amp; ink</td><td>2</td></tr><tr><td>&lt;b&gt;</td><td>1</td></tr></tbody>"
        "</table>"
    )

    assert table.columns == [TableColumn("Item", 80), TableColumn("Qty")]
    assert table.rows == [["Pen & ink", "2"], ["<b>", "1"]]
    assert table.style.header_bg == "#000000"
    assert table.style.header_color == "#ffffff"
    assert table.style.cell_padding == 6.0
    assert table.style.striped is False


@pytest.mark.unit
def test_table_without_head_or_body():
    table = export('<table data-pdf-type="Table"><tr><td>a</td></tr></table>')

    assert table.columns == []
    assert table.rows == []
    assert table.style.striped is True


@pytest.mark.unit
def test_container_padding_border_and_child():
    container = export(
        '<div data-pdf-type="Container" style="padding:8px; border:1px solid #ccc">'
        '<div data-pdf-type="Text">a</div></div>'
    )
    assert container == Container(child=Text(content="a"), padding=8, border=1)


@pytest.mark.unit
def test_empty_container_gets_empty_column():
    assert export('<div data-pdf-type="Container"></div>') == Container()


@pytest.mark.unit
def test_shapes_read_fill_and_radius():
    rectangle = export(
        '<div data-pdf-type="Rectangle" '
        'style="width:50px; background-color:#ff0000; border-radius:6px"></div>'
    )
    circle = export('<div data-pdf-type="Circle" style="background: #00ff00"></div>')

    assert rectangle == Rectangle(width=50, fill=RED, corner_radius=6)
    assert circle == Circle(fill=GREEN)


@pytest.mark.unit
def test_line_top_border_longhands():
    line = export(
        '<hr data-pdf-type="Line" style="width:300px;border:none;border-top-width:3px;'
        'border-top-style:solid;border-top-color:rgb(255,0,0)">'
    )
    assert line == Line(width=300, thickness=3, color=RED)


@pytest.mark.unit
def test_line_falls_back_to_height_and_border_color():
    line = export('<hr data-pdf-type="Line" style="height:5px; border-color:#00ff00">')

    assert line.thickness == 5.0
    assert line.color == GREEN


@pytest.mark.unit
def test_page_bands():
    root = export(
        '<div data-pdf-type="Header"><div data-pdf-type="Text">top</div></div>'
        '<div data-pdf-type="Footer"><div data-pdf-type="PageNumber"></div></div>'
    )
    assert root == Column(
        children=[Header(children=[Text(content="top")]), Footer(children=[PageNumber()])]
    )


@pytest.mark.unit
def test_hyperlink_and_defaults():
    link = export(
        '<a data-pdf-type="Hyperlink" href="https://example.org" style="font-size:14px">Docs</a>'
    )

    assert link == Hyperlink(text="Docs", href="https://example.org", size=14)
    assert export('<a data-pdf-type="Hyperlink"></a>') == Hyperlink()


@pytest.mark.unit
def test_dynamic_text_binding():
    node = export(
        '<span data-pdf-type="DynamicText" data-binding="customer.name" '
        'style="font-size:14px">{{customer.name}}</span>'
    )
    assert node == DynamicText(binding="customer.name", size=14)


@pytest.mark.unit
def test_input_tree_is_not_mutated():
    soup = BeautifulSoup(
        '<div data-pdf-type="PageRoot"><div data-pdf-type="Column">'
        '<span>chrome</span><div data-pdf-type="Text">a</div></div></div>',
        "html.parser",
    )
    before = str(soup)

    MarkupToTemplateConverter().convert_tree(soup)

    assert str(soup) == before
