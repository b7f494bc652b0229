"""
Color representation shared by the node model, exporter and importer.

Colors are normalized into 0-1 RGB components plus alpha, whatever notation the
editor used (hex or rgb()/rgba() function notation).
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pdfcore.utils.css_tools import NUMBER, format_number

RGB_PATTERN = re.compile(
    rf"^rgba?\(\s*({NUMBER})\s*,\s*({NUMBER})\s*,\s*({NUMBER})\s*(?:,\s*({NUMBER})\s*)?\)$", re.I
)
HEX_PATTERN = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6}|[0-9a-f]{8})$", re.I)


@dataclass(frozen=True)
class Color:
    """
    RGB(A) color with components in the 0-1 range.

    Attributes:
        r: Red component
        g: Green component
        b: Blue component
        a: Alpha (1.0 = opaque)
    """

    r: float
    g: float
    b: float
    a: float = 1.0

    def to_dict(self) -> Dict[str, float]:
        data = {"r": self.r, "g": self.g, "b": self.b}
        if self.a != 1.0:
            data["a"] = self.a
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Color":
        """
        Build a Color from its layout.json form ({"r", "g", "b", "a"?}).

        Raises:
            ValueError: If a component is not a number
        """
        components = {}
        for name, default in (("r", 0.0), ("g", 0.0), ("b", 0.0), ("a", 1.0)):
            value = data.get(name)
            if value is None:
                value = default
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"Color component {name!r} must be a number, got {value!r}")
            components[name] = float(value)
        return cls(**components)


def hex_to_color(value: str) -> Color:
    """
    Parse `#rgb`, `#rrggbb` or `#rrggbbaa` notation.

    Raises:
        ValueError: If the value is not a hex color
    """
    match = HEX_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Not a hex color: {value!r}")

    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)

    r, g, b = (int(digits[i:i + 2], 16) / 255 for i in (0, 2, 4))
    a = int(digits[6:8], 16) / 255 if len(digits) == 8 else 1.0
    return Color(r, g, b, a)


def css_to_color(css: Optional[str]) -> Optional[Color]:
    """
    Normalize a CSS color value into a Color.

    Supports hex notation and rgb()/rgba() function notation. Keywords like
    `inherit` or `transparent` (and anything unrecognized) yield None.

    Example:
        >>> css_to_color("rgb(255, 0, 0)")
        Color(r=1.0, g=0.0, b=0.0, a=1.0)
    """
    if not css:
        return None
    css = css.strip()

    match = RGB_PATTERN.match(css)
    if match:
        r, g, b, a = match.groups()
        return Color(
            float(r) / 255,
            float(g) / 255,
            float(b) / 255,
            float(a) if a is not None else 1.0,
        )

    if HEX_PATTERN.match(css):
        return hex_to_color(css)

    return None


def color_to_css(color: Optional[Color]) -> str:
    """
    Format a Color as CSS function notation.

    Opaque colors use rgb(); translucent ones use rgba(). Components are rounded
    to the nearest 0-255 integer.
    """
    if color is None:
        return ""
    r, g, b = (round(component * 255) for component in (color.r, color.g, color.b))
    if color.a < 1:
        return f"rgba({r},{g},{b},{format_number(color.a)})"
    return f"rgb({r},{g},{b})"
