"""Unit tests for inline CSS helpers and color normalization."""

import pytest

from pdfcore.contexts.templating.color import Color, color_to_css, css_to_color, hex_to_color
from pdfcore.utils.css_tools import (
    border_parts,
    escape_attribute,
    escape_text,
    format_number,
    format_style,
    parse_px,
    parse_rotation,
    parse_style,
    px,
    split_border_shorthand,
)


@pytest.mark.unit
def test_parse_style_normalizes_names():
    assert parse_style("font-size:12px; COLOR: #333;") == {"font-size": "12px", "color": "#333"}


@pytest.mark.unit
def test_parse_style_later_declaration_wins():
    assert parse_style("color:red;color:blue") == {"color": "blue"}


@pytest.mark.unit
def test_parse_style_empty():
    assert parse_style(None) == {}
    assert parse_style("") == {}
    assert parse_style("garbage;;") == {}


@pytest.mark.unit
def test_format_style_skips_none():
    assert format_style({"width": "10px", "opacity": None, "color": "red"}) == "width:10px;color:red;"


@pytest.mark.unit
def test_parse_px():
    assert parse_px("24px") == 24.0
    assert parse_px("-1.5px") == -1.5
    assert parse_px(None, 5.0) == 5.0
    assert parse_px("auto", 3.0) == 3.0


@pytest.mark.unit
def test_format_number_drops_trailing_zero():
    assert format_number(20.0) == "20"
    assert format_number(1.25) == "1.25"
    assert px(2.0) == "2px"


@pytest.mark.unit
def test_format_number_never_uses_exponents():
    assert format_number(0.00001) == "0.00001"
    assert format_number(-0.000002) == "-0.000002"
    assert px(0.00001) == "0.00001px"


@pytest.mark.unit
def test_parse_rotation():
    assert parse_rotation("rotate(45deg)") == 45.0
    assert parse_rotation("translate(2px) rotate(-10.5deg)") == -10.5
    assert parse_rotation("scale(2)") == 0.0
    assert parse_rotation(None) == 0.0
    assert parse_rotation("rotate(1.2.3deg)") == 0.0
    assert parse_rotation("rotate(-0.000002deg)") == -0.000002


@pytest.mark.unit
def test_split_border_shorthand():
    assert split_border_shorthand("2px solid #1e40af") == (2.0, "#1e40af")
    assert split_border_shorthand("1px solid rgb(1, 2, 3)") == (1.0, "rgb(1, 2, 3)")
    assert split_border_shorthand("dashed") == (None, None)
    assert split_border_shorthand(None) == (None, None)


@pytest.mark.unit
def test_border_longhand_wins_over_shorthand():
    style = {"border": "1px solid #ccc", "border-width": "3px"}
    assert border_parts(style) == (3.0, "#ccc")


@pytest.mark.unit
def test_border_parts_with_prefix():
    style = {"border-top": "4px solid red"}
    assert border_parts(style, prefix="border-top") == (4.0, "red")
    assert border_parts(style) == (None, None)


@pytest.mark.unit
def test_escape_text():
    assert escape_text("a & <b>") == "a &amp; &lt;b&gt;"


@pytest.mark.unit
def test_escape_attribute_escapes_ampersand_first():
    assert escape_attribute('say "hi" & bye') == "say &quot;hi&quot; &amp; bye"
    assert escape_attribute("&quot;") == "&amp;quot;"


@pytest.mark.unit
def test_css_to_color_notations():
    assert css_to_color("#fff") == Color(1.0, 1.0, 1.0)
    assert css_to_color("#FF0000") == Color(1.0, 0.0, 0.0)
    assert css_to_color("rgb(255, 0, 0)") == Color(1.0, 0.0, 0.0)
    assert css_to_color("rgba(0,0,255,0.5)") == Color(0.0, 0.0, 1.0, 0.5)


@pytest.mark.unit
def test_css_to_color_unrecognized():
    assert css_to_color("inherit") is None
    assert css_to_color("") is None
    assert css_to_color(None) is None
    assert css_to_color("rgb(1..2,0,0)") is None
    assert css_to_color("rgba(0,0,0,1e-05)") is None


@pytest.mark.unit
def test_hex_with_alpha():
    assert hex_to_color("#00000080").a == 128 / 255

    with pytest.raises(ValueError):
        hex_to_color("red")


@pytest.mark.unit
def test_color_to_css():
    assert color_to_css(Color(1, 0, 0)) == "rgb(255,0,0)"
    assert color_to_css(Color(0, 0, 1, 0.5)) == "rgba(0,0,255,0.5)"
    assert color_to_css(Color(0, 0, 1, 0.00001)) == "rgba(0,0,255,0.00001)"
    assert color_to_css(None) == ""


@pytest.mark.unit
def test_color_css_conversion_is_stable():
    """Colors on the 0-255 grid survive CSS formatting unchanged."""
    color = hex_to_color("#1e40af")
    assert css_to_color(color_to_css(color)) == color


@pytest.mark.unit
def test_color_dict_omits_opaque_alpha():
    assert Color(1.0, 0.0, 0.0).to_dict() == {"r": 1.0, "g": 0.0, "b": 0.0}
    assert Color(1.0, 0.0, 0.0, 0.25).to_dict()["a"] == 0.25
    assert Color.from_dict({"r": 1, "g": 0, "b": 0}) == Color(1.0, 0.0, 0.0)


@pytest.mark.unit
@pytest.mark.parametrize("data", [{"r": "red"}, {"r": 1, "g": [0]}, {"a": True}])
def test_color_from_dict_rejects_non_numbers(data):
    with pytest.raises(ValueError):
        Color.from_dict(data)
