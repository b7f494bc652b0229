"""
Package Codec

Reads and writes .pdfCoret template packages: a ZIP archive holding

- layout.json    {"root": <node>, "settings"?: {...}, "queries"?: [...]}
- manifest.json  package metadata
- styles.json    named style map (opaque)
- assets/<name>  one member per embedded asset

JSON members are UTF-8 with 2-space indentation and a fixed key order, so
packing the same package twice yields identical members.
"""

import io
import json
import zipfile
from os import PathLike
from pathlib import Path, PureWindowsPath
from typing import Any, Dict, List, Optional, Union

from pdfcore.contexts.packaging.logger import (
    _log_debug,
    _log_warning,
    log_package_read,
    log_package_written,
)
from pdfcore.contexts.templating.exceptions import (
    FormatError,
    PackageError,
    ParseError,
    UnsupportedTypeError,
)
from pdfcore.contexts.templating.node_model import (
    Column,
    Manifest,
    Package,
    PageSettings,
    QueryDefinition,
    TemplateNode,
    count_nodes,
    node_from_dict,
    node_to_dict,
)

LAYOUT_MEMBER = "layout.json"
MANIFEST_MEMBER = "manifest.json"
STYLES_MEMBER = "styles.json"
ASSETS_PREFIX = "assets/"
RESERVED_MEMBERS = {LAYOUT_MEMBER, MANIFEST_MEMBER, STYLES_MEMBER}

PACKAGE_SUFFIX = ".pdfCoret"

# An asset is either its bytes or a file to stream into the archive
AssetSource = Union[bytes, str, PathLike]


def is_safe_asset_name(name: str) -> bool:
    """
    Check that an asset name stays inside assets/ when extracted.

    Rejects empty names, absolute paths, drive-qualified paths and any '..'
    segment, with either separator.

    >>> is_safe_asset_name("icons/logo.png")
    True
    >>> is_safe_asset_name("../../escaped.txt")
    False
    """
    if not name or name.startswith(("/", "\\")) or PureWindowsPath(name).drive:
        return False
    return ".." not in name.replace("\\", "/").split("/")


def dump_json(data: Any) -> bytes:
    """Serialize a JSON member (2-space indent, UTF-8, non-ASCII kept)."""
    return json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")


def build_layout(
    root: TemplateNode,
    settings: Optional[PageSettings] = None,
    queries: Optional[List[QueryDefinition]] = None,
) -> Dict[str, Any]:
    """
    Build the layout.json document for a template tree.

    This is also the serialized template handed to the rendering engine.
    """
    layout: Dict[str, Any] = {"root": node_to_dict(root)}
    if settings is not None:
        layout["settings"] = settings.to_dict()
    if queries is not None:
        layout["queries"] = [query.to_dict() for query in queries]
    return layout


def pack(
    root: TemplateNode,
    settings: Optional[PageSettings] = None,
    manifest: Optional[Manifest] = None,
    styles: Optional[Dict[str, Any]] = None,
    assets: Optional[Dict[str, AssetSource]] = None,
    queries: Optional[List[QueryDefinition]] = None,
) -> bytes:
    """
    Serialize a template and its assets into package bytes.

    Args:
        root: Template root node
        settings: Optional page settings
        manifest: Package metadata (defaults when None)
        styles: Named style map (empty when None)
        assets: Logical name -> bytes, or a path whose contents are streamed in
        queries: Optional query definitions

    Returns:
        ZIP archive bytes

    Raises:
        PackageError: If an asset name escapes assets/ or a path-valued asset
            cannot be read
    """
    manifest = manifest or Manifest()
    assets = assets or {}

    for name in assets:
        if not is_safe_asset_name(name):
            raise PackageError(f"Asset name {name!r} would escape {ASSETS_PREFIX}")

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(LAYOUT_MEMBER, dump_json(build_layout(root, settings, queries)))
        zf.writestr(MANIFEST_MEMBER, dump_json(manifest.to_dict()))
        zf.writestr(STYLES_MEMBER, dump_json(styles or {}))

        for name, source in assets.items():
            arcname = f"{ASSETS_PREFIX}{name}"
            if isinstance(source, (bytes, bytearray)):
                zf.writestr(arcname, bytes(source))
            else:
                try:
                    zf.write(Path(source), arcname)
                except OSError as e:
                    raise PackageError(f"Cannot read asset {name!r} from {source}: {e}") from e
            _log_debug(f"Added asset {arcname}")

    data = buffer.getvalue()
    log_package_written(manifest.name, len(data), len(assets))
    return data


def pack_package(package: Package) -> bytes:
    """Serialize a Package (see pack)."""
    return pack(
        root=package.root,
        settings=package.settings,
        manifest=package.manifest,
        styles=package.styles,
        assets=package.assets,
        queries=package.queries,
    )


def _read_json(zf: zipfile.ZipFile, member: str) -> Any:
    try:
        raw = zf.read(member)
    except (zipfile.BadZipFile, OSError) as e:
        raise PackageError(f"Cannot read member '{member}': {e}") from e

    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseError(member, e) from e


def parse_layout(layout: Any) -> Dict[str, Any]:
    """
    Decode a layout.json document.

    Returns:
        Dict with "root" (TemplateNode), "settings" (PageSettings or None) and
        "queries" (list of QueryDefinition or None)

    A root of unknown type degrades to an empty Column.

    Raises:
        FormatError: If the layout has no root or a malformed root/settings/queries
    """
    if not isinstance(layout, dict) or "root" not in layout:
        raise FormatError("Layout does not declare a root node", member=LAYOUT_MEMBER)

    try:
        try:
            root = node_from_dict(layout["root"])
        except UnsupportedTypeError as e:
            _log_warning(f"{e}; using an empty Column root")
            root = Column()
        settings = (
            PageSettings.from_dict(layout["settings"])
            if layout.get("settings") is not None
            else None
        )
        queries = layout.get("queries")
        if queries is not None:
            if not isinstance(queries, list):
                raise FormatError(f"queries must be a list, got {queries!r}")
            queries = [QueryDefinition.from_dict(query) for query in queries]
    except FormatError as e:
        raise FormatError(e.message, member=LAYOUT_MEMBER) from e

    return {"root": root, "settings": settings, "queries": queries}


def unpack(data: bytes) -> Package:
    """
    Deserialize package bytes.

    layout.json is mandatory; manifest.json and styles.json fall back to
    defaults. Every other file member is an asset named by its path with any
    assets/ prefix removed; members whose names would escape assets/ are
    skipped.

    Args:
        data: ZIP archive bytes

    Returns:
        Package

    Raises:
        PackageError: If the archive is corrupt
        FormatError: If layout.json or its root is missing
        ParseError: If a JSON member cannot be decoded
    """
    try:
        zf = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as e:
        raise PackageError(f"Not a valid package archive: {e}") from e

    with zf:
        names = set(zf.namelist())
        if LAYOUT_MEMBER not in names:
            raise FormatError("Package has no layout", member=LAYOUT_MEMBER)

        layout = parse_layout(_read_json(zf, LAYOUT_MEMBER))

        manifest = Manifest()
        if MANIFEST_MEMBER in names:
            manifest_data = _read_json(zf, MANIFEST_MEMBER)
            if not isinstance(manifest_data, dict):
                raise FormatError("Manifest must be an object", member=MANIFEST_MEMBER)
            manifest = Manifest.from_dict(manifest_data)

        styles: Dict[str, Any] = {}
        if STYLES_MEMBER in names:
            styles = _read_json(zf, STYLES_MEMBER)
            if not isinstance(styles, dict):
                _log_warning(f"Ignoring non-object {STYLES_MEMBER}")
                styles = {}

        assets: Dict[str, bytes] = {}
        for info in zf.infolist():
            if info.is_dir() or info.filename in RESERVED_MEMBERS:
                continue
            name = info.filename
            if name.startswith(ASSETS_PREFIX):
                name = name[len(ASSETS_PREFIX):]
            if not is_safe_asset_name(name):
                _log_warning(f"Skipping unsafe archive member {info.filename!r}")
                continue
            try:
                assets[name] = zf.read(info)
            except (zipfile.BadZipFile, OSError) as e:
                raise PackageError(f"Cannot read asset '{info.filename}': {e}") from e

    package = Package(
        root=layout["root"],
        settings=layout["settings"],
        manifest=manifest,
        styles=styles,
        queries=layout["queries"],
        assets=assets,
    )
    log_package_read(manifest.name, count_nodes(package.root), len(assets))
    return package


def write_package(path: Path, package: Package) -> Path:
    """
    Write a package archive to disk.

    Returns:
        The written path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(pack_package(package))
    return path


def read_package(path: Path) -> Package:
    """
    Read a package archive from disk.

    Raises:
        PackageError: If the file is missing or not a valid archive
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise PackageError(f"Cannot read package {path}: {e}") from e
    return unpack(data)
