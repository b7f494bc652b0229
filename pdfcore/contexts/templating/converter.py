"""
Editor Markup <-> Template Converter

Main module providing the conversion entry points between editor markup and the
portable template tree.

This module exports:
- Convenience functions: template_to_markup, markup_to_template
- Orchestration functions: editor_to_template, template_to_editor (with assets and logging)
- Validation: validate_roundtrip, diff_values
- Converter classes: TemplateToMarkupConverter, MarkupToTemplateConverter (re-exported)
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup

from pdfcore.contexts.templating import defaults
from pdfcore.contexts.templating.asset_collector import collect_assets, resolve_asset_urls
from pdfcore.contexts.templating.exceptions import AssetError
from pdfcore.contexts.templating.logger import (
    log_conversion_result,
    log_conversion_start,
    log_roundtrip_result,
)
from pdfcore.contexts.templating.markup_generator import TemplateToMarkupConverter
from pdfcore.contexts.templating.markup_parser import (
    MarkupToTemplateConverter,
    MarkupTree,
    parse_markup,
)
from pdfcore.contexts.templating.node_model import (
    Manifest,
    Package,
    PageSettings,
    TemplateNode,
    count_nodes,
    node_to_dict,
)

# Tolerances used when comparing trees after a roundtrip
NUMBER_TOLERANCE = 0.5
COLOR_TOLERANCE = 1 / 255 + 1e-9
COLOR_CHANNELS = {"r", "g", "b", "a"}


# Result dataclasses for orchestration functions


@dataclass
class ImportResult:
    """Result from template_to_editor()."""

    markup: str
    tree: BeautifulSoup
    node_count: int = 0
    unresolved_assets: List[AssetError] = field(default_factory=list)
    time_s: float = 0.0


@dataclass
class RoundtripResult:
    """Result from validate_roundtrip()."""

    success: bool
    diffs: List[str] = field(default_factory=list)
    node_count: int = 0
    markup: Optional[str] = None


def template_to_markup(
    root: TemplateNode,
    settings: Optional[PageSettings] = None,
    asset_urls: Optional[Dict[str, str]] = None,
) -> str:
    """
    Convert a template tree to editor markup.

    Args:
        root: Template root node
        settings: Page settings for the page wrapper (defaults when None)
        asset_urls: Logical asset name -> embeddable reference

    Returns:
        Markup rooted in a PageRoot wrapper
    """
    converter = TemplateToMarkupConverter(asset_urls=asset_urls)
    return converter.generate_page(root, settings)


def markup_to_template(markup: MarkupTree) -> Tuple[TemplateNode, PageSettings]:
    """
    Convert editor markup to a template tree.

    Args:
        markup: Markup text or parsed tree (not modified)

    Returns:
        (root node, page settings)
    """
    return MarkupToTemplateConverter().convert_tree(markup)


def editor_to_template(tree: MarkupTree, source_name: str = "editor") -> Package:
    """
    Export an editor tree as a complete package.

    The root and page settings come from the markup, assets are the inline
    images found in it, and the manifest carries the export defaults.

    Args:
        tree: Markup text or parsed tree
        source_name: Identifier used in log messages

    Returns:
        Package ready for pack_package()
    """
    start_time = time.time()
    log_conversion_start(source_name, "export")

    tree = parse_markup(tree)
    root, settings = markup_to_template(tree)
    assets = collect_assets(tree)

    package = Package(
        root=root,
        settings=settings,
        manifest=Manifest(
            name=defaults.EXPORTED_MANIFEST_NAME,
            version=defaults.DEFAULT_MANIFEST_VERSION,
        ),
        styles={},
        assets=assets,
    )

    log_conversion_result(source_name, count_nodes(root), 0, time.time() - start_time, "export")
    return package


def template_to_editor(package: Package, source_name: str = "template") -> ImportResult:
    """
    Import a package into a fresh editor tree.

    Package assets are turned into data URLs so embedded images display
    directly; any other Image reference that does not resolve is rendered as a
    placeholder and reported in `unresolved_assets`.

    Args:
        package: Package from unpack() or editor_to_template()
        source_name: Identifier used in log messages

    Returns:
        ImportResult with the markup, its parsed tree and the unresolved references
    """
    start_time = time.time()
    log_conversion_start(source_name, "import")

    converter = TemplateToMarkupConverter(asset_urls=resolve_asset_urls(package.assets))
    markup = converter.generate_page(package.root, package.settings)

    elapsed = time.time() - start_time
    result = ImportResult(
        markup=markup,
        tree=BeautifulSoup(markup, "html.parser"),
        node_count=count_nodes(package.root),
        unresolved_assets=list(converter.unresolved_assets),
        time_s=elapsed,
    )

    log_conversion_result(
        source_name, result.node_count, len(result.unresolved_assets), elapsed, "import"
    )
    return result


def diff_values(expected: Any, actual: Any, path: str = "root") -> List[str]:
    """
    Structural difference between two JSON-like values.

    Numbers are compared within NUMBER_TOLERANCE, color channels within one
    0-255 step.

    Returns:
        One line per differing path (empty when equal)
    """
    if isinstance(expected, dict) and isinstance(actual, dict):
        diffs = []
        for key in sorted(set(expected) | set(actual)):
            sub_path = f"{path}.{key}"
            if key not in actual:
                diffs.append(f"{sub_path}: missing after roundtrip")
            elif key not in expected:
                diffs.append(f"{sub_path}: unexpected value {actual[key]!r}")
            else:
                diffs.extend(diff_values(expected[key], actual[key], sub_path))
        return diffs

    if isinstance(expected, list) and isinstance(actual, list):
        if len(expected) != len(actual):
            return [f"{path}: length {len(expected)} != {len(actual)}"]
        diffs = []
        for index, (item1, item2) in enumerate(zip(expected, actual)):
            diffs.extend(diff_values(item1, item2, f"{path}[{index}]"))
        return diffs

    numeric = (int, float)
    if (
        isinstance(expected, numeric)
        and isinstance(actual, numeric)
        and not isinstance(expected, bool)
        and not isinstance(actual, bool)
    ):
        channel = path.rsplit(".", 1)[-1]
        tolerance = COLOR_TOLERANCE if channel in COLOR_CHANNELS else NUMBER_TOLERANCE
        if abs(expected - actual) > tolerance:
            return [f"{path}: {expected!r} != {actual!r}"]
        return []

    if expected != actual:
        return [f"{path}: {expected!r} != {actual!r}"]
    return []


def validate_roundtrip(
    root: TemplateNode,
    settings: Optional[PageSettings] = None,
    source_name: str = "template",
) -> RoundtripResult:
    """
    Validate import -> export fidelity for a template tree.

    Imports the tree into editor markup, exports the markup back and compares
    both trees (and page settings) field by field.

    Args:
        root: Template root node (PageBreak markers are dropped by export and
              therefore reported as differences)
        settings: Page settings (defaults when None)
        source_name: Identifier used in log messages

    Returns:
        RoundtripResult with the differing paths
    """
    settings = settings or PageSettings()
    markup = template_to_markup(root, settings)
    exported_root, exported_settings = markup_to_template(markup)

    diffs = diff_values(node_to_dict(root), node_to_dict(exported_root), "root")
    diffs.extend(diff_values(settings.to_dict(), exported_settings.to_dict(), "settings"))

    result = RoundtripResult(
        success=not diffs,
        diffs=diffs,
        node_count=count_nodes(root),
        markup=markup,
    )
    log_roundtrip_result(source_name, result)
    return result
