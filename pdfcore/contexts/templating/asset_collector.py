"""
Asset Collector

Gathers the image bytes embedded in editor markup so they can be packed next to
the exported template, and builds the inverse data URLs used when a package is
imported back into the editor.
"""

import base64
import binascii
import mimetypes
from typing import Dict, Optional, Tuple
from urllib.parse import unquote_to_bytes

from pdfcore.contexts.templating.logger import _log_debug, _log_warning
from pdfcore.contexts.templating.markup_parser import MarkupTree, parse_markup
from pdfcore.contexts.templating.markup_patterns import MarkerAttributes

DEFAULT_MIME_TYPE = "application/octet-stream"


def decode_data_url(url: str) -> Tuple[str, bytes]:
    """
    Decode a `data:` URL.

    Args:
        url: URL of the form data:[<mediatype>][;base64],<data>

    Returns:
        (media type, payload bytes)

    Raises:
        ValueError: If the URL is not a well-formed data URL

    Example:
        >>> decode_data_url("data:text/plain,hi%21")
        ('text/plain', b'hi!')
    """
    if not url.startswith("data:") or "," not in url:
        raise ValueError(f"Not a data URL: {url[:40]!r}")

    header, payload = url[len("data:"):].split(",", 1)
    params = header.split(";")
    media_type = params[0] or "text/plain"

    if "base64" in (p.strip().lower() for p in params[1:]):
        try:
            return media_type, base64.b64decode(payload, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 payload: {e}") from e
    return media_type, unquote_to_bytes(payload)


def collect_assets(tree: MarkupTree) -> Dict[str, bytes]:
    """
    Collect inline image bytes keyed by logical asset name.

    Every Image element whose inner <img src> is a data URL and which carries a
    data-pdf-src name contributes one entry. Images pointing elsewhere are
    skipped. When two images share a name, the last one in document order wins.
    Undecodable data URLs are skipped with a warning.

    Args:
        tree: Markup text or parsed tree (not modified)

    Returns:
        Dict mapping logical name to raw bytes
    """
    tree = parse_markup(tree)
    assets: Dict[str, bytes] = {}

    for element in tree.find_all(attrs={MarkerAttributes.TYPE: "Image"}):
        name = element.get(MarkerAttributes.SRC)
        img = element.find("img")
        src = img.get("src") if img is not None else None

        if not name or not src or not src.startswith("data:"):
            continue

        try:
            _, data = decode_data_url(src)
        except ValueError as e:
            _log_warning(f"Skipping asset {name!r}: {e}")
            continue

        if name in assets:
            _log_debug(f"Asset {name!r} collected twice, keeping the later one")
        assets[name] = data

    return assets


def guess_mime_type(name: str) -> str:
    """MIME type for a logical asset name, from its extension."""
    mime_type, _ = mimetypes.guess_type(name)
    return mime_type or DEFAULT_MIME_TYPE


def asset_to_data_url(name: str, data: bytes, mime_type: Optional[str] = None) -> str:
    """
    Encode asset bytes as a base64 data URL the editor can display.

    Example:
        >>> asset_to_data_url("dot.png", b"\\x89PNG")
        'data:image/png;base64,iVBORw=='
    """
    mime_type = mime_type or guess_mime_type(name)
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def resolve_asset_urls(assets: Dict[str, bytes]) -> Dict[str, str]:
    """Build the importer's asset map (logical name -> data URL) from raw bytes."""
    return {name: asset_to_data_url(name, data) for name, data in assets.items()}
