#!/usr/bin/env python3
"""
Command-line interface for PDFCore template packages.

Subcommands:
- render: Render a package to PDF through the configured engine
- pack: Build a package from a directory (layout.json, manifest.json, styles.json, assets/)
- unpack: Extract a package into a directory
- validate: Check that a package or layout declares a decodable root
- import-markup: Convert a package into editor markup
- export-markup: Convert editor markup into a package with its embedded assets
- roundtrip: Check that a template survives import -> export unchanged
"""

import json
import os
import zipfile
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from omegaconf import OmegaConf

from pdfcore.contexts.packaging.logger import setup_packaging_logger
from pdfcore.contexts.packaging.package_codec import (
    ASSETS_PREFIX,
    LAYOUT_MEMBER,
    MANIFEST_MEMBER,
    PACKAGE_SUFFIX,
    STYLES_MEMBER,
    build_layout,
    dump_json,
    pack,
    parse_layout,
    read_package,
    write_package,
)
from pdfcore.contexts.rendering import load_engine, render_package
from pdfcore.contexts.rendering.logger import setup_rendering_logger
from pdfcore.contexts.templating import (
    Manifest,
    editor_to_template,
    template_to_editor,
    validate_roundtrip,
)
from pdfcore.contexts.templating.exceptions import ParseError, TemplateError
from pdfcore.contexts.templating.logger import setup_templating_logger
from pdfcore.contexts.templating.node_model import count_nodes
from pdfcore.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    add_completion=False,
    help="Pack, inspect, convert and render PDFCore template packages",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def fail(message: str) -> None:
    """Print an error in red and exit with code 1."""
    typer.secho(f"\n✗ Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def read_json_file(path: Path):
    """
    Load a JSON file.

    Raises:
        ParseError: If the file is not UTF-8 JSON
    """
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseError(path.name, e) from e


def load_layout_source(path: Path):
    """Read (root, settings) from a package archive or a bare layout.json."""
    if zipfile.is_zipfile(path):
        package = read_package(path)
        return package.root, package.settings

    decoded = parse_layout(read_json_file(path))
    return decoded["root"], decoded["settings"]


@app.command("render")
def render_command(
    package_file: Path = typer.Argument(
        ..., help="Package to render", exists=True, file_okay=True, dir_okay=False
    ),
    data_file: Optional[Path] = typer.Option(
        None,
        "--data",
        "-d",
        help="Render-time data (JSON or YAML)",
        exists=True,
        dir_okay=False,
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output PDF (default: next to the package)"
    ),
    engine_ref: Optional[str] = typer.Option(
        None, "--engine", "-e", help="Engine as module:attribute (default: PDFCORE_ENGINE)"
    ),
):
    """
    Render a template package to PDF.

    Examples:\n

        $ pdfcore_cli.py render invoice.pdfCoret --data invoice.yaml

        $ pdfcore_cli.py render invoice.pdfCoret -e my_engine:Engine -o out/invoice.pdf
    """
    setup_rendering_logger(LOGS_PATH / f"render_{now()}")
    output_path = output or package_file.with_suffix(".pdf")

    try:
        package = read_package(package_file)
        data = {}
        if data_file is not None:
            data = OmegaConf.to_container(OmegaConf.load(data_file), resolve=True)
        engine = load_engine(engine_ref)
        result = render_package(package, data, engine, output_path=output_path)
    except TemplateError as e:
        fail(str(e))

    if not result.success:
        fail("; ".join(result.errors) or "render failed")

    typer.secho(f"\n✓ Rendered {output_path} ({len(result.pdf_bytes)} bytes)", fg=typer.colors.GREEN)


@app.command("pack")
def pack_command(
    source_dir: Path = typer.Argument(
        ...,
        help="Directory holding layout.json, optional manifest.json/styles.json and assets/",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help=f"Output archive (default: <dir>{PACKAGE_SUFFIX})"
    ),
):
    """
    Build a package archive from a directory.

    Example:\n

        $ pdfcore_cli.py pack templates/invoice -o invoice.pdfCoret
    """
    output_path = output or source_dir.with_suffix(PACKAGE_SUFFIX)
    setup_packaging_logger(LOGS_PATH / f"pack_{now()}", archive=output_path)

    layout_path = source_dir / LAYOUT_MEMBER
    if not layout_path.exists():
        fail(f"{source_dir} has no {LAYOUT_MEMBER}")

    try:
        layout = parse_layout(read_json_file(layout_path))

        manifest = Manifest()
        manifest_path = source_dir / MANIFEST_MEMBER
        if manifest_path.exists():
            manifest = Manifest.from_dict(read_json_file(manifest_path))

        styles = {}
        styles_path = source_dir / STYLES_MEMBER
        if styles_path.exists():
            styles = read_json_file(styles_path)

        assets = {}
        assets_dir = source_dir / ASSETS_PREFIX.rstrip("/")
        if assets_dir.is_dir():
            for asset_path in sorted(assets_dir.rglob("*")):
                if asset_path.is_file():
                    assets[asset_path.relative_to(assets_dir).as_posix()] = asset_path

        data = pack(
            layout["root"],
            settings=layout["settings"],
            manifest=manifest,
            styles=styles,
            assets=assets,
            queries=layout["queries"],
        )
    except TemplateError as e:
        fail(str(e))

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(data)
    typer.secho(
        f"\n✓ Packed {output_path} ({count_nodes(layout['root'])} nodes, {len(assets)} assets)",
        fg=typer.colors.GREEN,
    )


@app.command("unpack")
def unpack_command(
    package_file: Path = typer.Argument(
        ..., help="Package to extract", exists=True, file_okay=True, dir_okay=False
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Target directory (default: package name without suffix)"
    ),
):
    """
    Extract a package into layout.json, manifest.json, styles.json and assets/.

    Example:\n

        $ pdfcore_cli.py unpack invoice.pdfCoret -o templates/invoice
    """
    setup_packaging_logger(LOGS_PATH / f"unpack_{now()}", archive=package_file)
    target = output_dir or package_file.with_suffix("")

    try:
        package = read_package(package_file)
    except TemplateError as e:
        fail(str(e))

    assets_dir = (target / ASSETS_PREFIX).resolve()
    asset_paths = {}
    for name in package.assets:
        asset_path = (assets_dir / name).resolve()
        if assets_dir not in asset_path.parents:
            fail(f"Asset {name!r} would be written outside {assets_dir}")
        asset_paths[name] = asset_path

    target.mkdir(parents=True, exist_ok=True)
    layout = build_layout(package.root, package.settings, package.queries)
    (target / LAYOUT_MEMBER).write_bytes(dump_json(layout))
    (target / MANIFEST_MEMBER).write_bytes(dump_json(package.manifest.to_dict()))
    (target / STYLES_MEMBER).write_bytes(dump_json(package.styles))

    for name, data in package.assets.items():
        asset_paths[name].parent.mkdir(parents=True, exist_ok=True)
        asset_paths[name].write_bytes(data)

    typer.secho(
        f"\n✓ Unpacked to {target} ({len(package.assets)} assets)", fg=typer.colors.GREEN
    )


@app.command("validate")
def validate_command(
    source: Path = typer.Argument(
        ..., help="Package archive or layout.json", exists=True, file_okay=True, dir_okay=False
    ),
):
    """
    Check that a package or layout declares a decodable root node.

    Examples:\n

        $ pdfcore_cli.py validate invoice.pdfCoret

        $ pdfcore_cli.py validate templates/invoice/layout.json
    """
    try:
        root, _ = load_layout_source(source)
    except TemplateError as e:
        fail(str(e))

    typer.secho(
        f"✓ {source.name}: valid ({root.TYPE} root, {count_nodes(root)} nodes)",
        fg=typer.colors.GREEN,
    )


@app.command("import-markup")
def import_markup_command(
    package_file: Path = typer.Argument(
        ..., help="Package to import", exists=True, file_okay=True, dir_okay=False
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output markup file (default: <package>.html)"
    ),
):
    """
    Convert a package into editor markup.

    Package assets are embedded as data URLs; unresolved images become placeholders.

    Example:\n

        $ pdfcore_cli.py import-markup invoice.pdfCoret -o invoice.html
    """
    setup_templating_logger(LOGS_PATH / f"import_{now()}", phase="import")
    output_path = output or package_file.with_suffix(".html")

    try:
        package = read_package(package_file)
        result = template_to_editor(package, source_name=package_file.name)
    except TemplateError as e:
        fail(str(e))

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(result.markup, encoding="utf-8")

    for error in result.unresolved_assets:
        typer.secho(f"  ! {error}", fg=typer.colors.YELLOW)
    typer.secho(f"\n✓ Wrote {output_path} ({result.node_count} nodes)", fg=typer.colors.GREEN)


@app.command("export-markup")
def export_markup_command(
    markup_file: Path = typer.Argument(
        ..., help="Editor markup file", exists=True, file_okay=True, dir_okay=False
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help=f"Output package (default: <markup>{PACKAGE_SUFFIX})"
    ),
):
    """
    Convert editor markup into a package, collecting embedded images as assets.

    Example:\n

        $ pdfcore_cli.py export-markup invoice.html -o invoice.pdfCoret
    """
    setup_templating_logger(LOGS_PATH / f"export_{now()}", phase="export")
    output_path = output or markup_file.with_suffix(PACKAGE_SUFFIX)

    try:
        package = editor_to_template(
            markup_file.read_text(encoding="utf-8"), source_name=markup_file.name
        )
        write_package(output_path, package)
    except TemplateError as e:
        fail(str(e))

    typer.secho(
        f"\n✓ Wrote {output_path} ({count_nodes(package.root)} nodes, "
        f"{len(package.assets)} assets)",
        fg=typer.colors.GREEN,
    )


@app.command("roundtrip")
def roundtrip_command(
    source: Path = typer.Argument(
        ..., help="Package archive or layout.json", exists=True, file_okay=True, dir_okay=False
    ),
):
    """
    Check that a template survives import -> export unchanged.

    Example:\n

        $ pdfcore_cli.py roundtrip invoice.pdfCoret
    """
    setup_templating_logger(LOGS_PATH / f"roundtrip_{now()}", phase="roundtrip")

    try:
        root, settings = load_layout_source(source)
        result = validate_roundtrip(root, settings, source_name=source.name)
    except TemplateError as e:
        fail(str(e))

    if not result.success:
        for diff in result.diffs:
            typer.echo(f"  {diff}")
        fail(f"{len(result.diffs)} difference(s) after roundtrip")

    typer.secho(f"\n✓ Roundtrip passed ({result.node_count} nodes)", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
