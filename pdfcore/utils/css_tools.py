"""
Inline CSS and markup text utilities.

Helpers for reading and writing the `style` attribute of editor markup and for
escaping user text embedded in that markup. Color handling lives in
pdfcore.contexts.templating.color.
"""

import re
from decimal import Decimal
from typing import Dict, Optional, Tuple

NUMBER = r"-?\d+(?:\.\d+)?|-?\.\d+"
NUMBER_PATTERN = re.compile(NUMBER)
ROTATION_PATTERN = re.compile(rf"rotate\(\s*({NUMBER})deg\s*\)")
BORDER_STYLES = {
    "none", "hidden", "dotted", "dashed", "solid", "double",
    "groove", "ridge", "inset", "outset",
}


def parse_style(style: Optional[str]) -> Dict[str, str]:
    """
    Parse an inline `style` attribute into an ordered property dict.

    Property names are lowercased; values are stripped. Later declarations of the
    same property override earlier ones, as in the browser.

    Args:
        style: Raw attribute value (e.g., "font-size:12px; color:#333")

    Returns:
        Dict mapping property name to value

    Example:
        >>> parse_style("font-size:12px; color: #333;")
        {'font-size': '12px', 'color': '#333'}
    """
    declarations: Dict[str, str] = {}
    if not style:
        return declarations

    for declaration in style.split(";"):
        if ":" not in declaration:
            continue
        name, value = declaration.split(":", 1)
        name = name.strip().lower()
        value = value.strip()
        if name and value:
            declarations[name] = value
    return declarations


def format_style(declarations: Dict[str, object]) -> str:
    """
    Serialize a property dict back into an inline `style` value.

    None values are skipped so callers can build declarations conditionally.
    Every declaration is terminated with ';'.
    """
    return "".join(
        f"{name}:{value};" for name, value in declarations.items() if value is not None
    )


def parse_number(value: Optional[str]) -> Optional[float]:
    """
    Extract the first number from a CSS value ("12px" -> 12.0, "1.5" -> 1.5).

    Returns:
        The number, or None if the value is empty or has no numeric part
    """
    if value is None:
        return None
    match = NUMBER_PATTERN.search(str(value))
    if not match:
        return None
    return float(match.group(0))


def parse_px(value: Optional[str], default: Optional[float] = None) -> Optional[float]:
    """Parse a length like "24px" into a float, falling back to `default`."""
    number = parse_number(value)
    return default if number is None else number


def format_number(value: float) -> str:
    """
    Format a number for markup without a trailing ".0".

    >>> format_number(20.0)
    '20'
    >>> format_number(1.25)
    '1.25'
    >>> format_number(0.00001)
    '0.00001'
    """
    if float(value).is_integer():
        return str(int(value))
    # Fixed-point only; NUMBER_PATTERN does not read exponents
    return format(Decimal(repr(float(value))), "f")


def px(value: float) -> str:
    """Format a length in pixels."""
    return f"{format_number(value)}px"


def parse_rotation(transform: Optional[str]) -> float:
    """Read the angle from a `rotate(<n>deg)` transform, 0 when absent."""
    if not transform:
        return 0.0
    match = ROTATION_PATTERN.search(transform)
    return float(match.group(1)) if match else 0.0


def split_border_shorthand(value: Optional[str]) -> Tuple[Optional[float], Optional[str]]:
    """
    Split a `border` shorthand into (width, color).

    Example:
        >>> split_border_shorthand("2px solid #1e40af")
        (2.0, '#1e40af')
    """
    if not value:
        return None, None

    width = None
    color = None
    # Keep rgb(...) groups together when tokenizing
    tokens = re.findall(r"\w+\([^)]*\)|\S+", value)
    for token in tokens:
        if token.lower() in BORDER_STYLES:
            continue
        if width is None and NUMBER_PATTERN.fullmatch(token.replace("px", "")):
            width = float(token.replace("px", ""))
        elif color is None:
            color = token
    return width, color


def border_parts(
    style: Dict[str, str], prefix: str = "border"
) -> Tuple[Optional[float], Optional[str]]:
    """
    Resolve border width and color from longhand or shorthand declarations.

    Longhands (`border-width`, `border-color`) win over the shorthand.

    Args:
        style: Parsed style dict
        prefix: Property prefix ("border" or "border-top")

    Returns:
        (width, color) where either may be None
    """
    short_width, short_color = split_border_shorthand(style.get(prefix))
    width = parse_number(style.get(f"{prefix}-width"))
    color = style.get(f"{prefix}-color")
    return (
        width if width is not None else short_width,
        color if color is not None else short_color,
    )


def escape_text(text: str) -> str:
    """Escape text content for embedding in markup (&, <, >)."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_attribute(value: str) -> str:
    """Escape an attribute value for a double-quoted attribute (&, ")."""
    return value.replace("&", "&amp;").replace('"', "&quot;")
