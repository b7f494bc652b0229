"""
Packaging Context

Responsibilities:
- Serializes template trees, page settings, manifest, styles and assets into a package archive
- Deserializes package archives back into Package objects
- Maps archive and JSON failures onto the typed error hierarchy

Owns: The .pdfCoret archive format
Never: Interprets editor markup or renders pages
"""

from pdfcore.contexts.packaging.package_codec import (
    build_layout,
    pack,
    pack_package,
    parse_layout,
    read_package,
    unpack,
    write_package,
)

__all__ = [
    "build_layout",
    "parse_layout",
    "pack",
    "pack_package",
    "unpack",
    "read_package",
    "write_package",
]
