"""
Templating Registries

Centralized registries for loading and caching markup fragment templates and
page size classes.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateNotFound
from omegaconf import OmegaConf

from pdfcore.contexts.templating.logger import _log_warning
from pdfcore.utils.css_tools import escape_attribute, escape_text, format_number

load_dotenv()
TEMPLATING_CONTEXT_PATH = Path(
    os.getenv("TEMPLATING_CONTEXT_PATH", str(Path(__file__).parent))
)
TYPES_PATH = TEMPLATING_CONTEXT_PATH / "template"
PAGE_SIZES_PATH = Path(
    os.getenv("PAGE_SIZES_PATH", str(Path(__file__).parents[2] / "config" / "page_sizes.yaml"))
)

MM_TO_PX = 72 / 25.4


class TemplateRegistry:
    """
    Registry for loading and caching Jinja2 templates for editor markup.

    Node fragments are stored in template/types/{type_name}/template.html.jinja and
    page-level structure in template/structure/. Custom delimiters keep literal
    `{{binding}}` placeholders (DynamicText) as plain text:
    - Variable: [[ var ]]
    - Block: [% block %]
    - Comment: [# comment #]

    Autoescaping is off; templates apply the `esc` (text content) and `ea`
    (attribute value) filters explicitly.
    """

    def __init__(self, base_path: Path = None):
        """
        Initialize the template registry.

        Args:
            base_path: Base path holding types/ and structure/. Defaults to
                       template/ under TEMPLATING_CONTEXT_PATH
        """
        if base_path is None:
            base_path = TYPES_PATH

        self.base_path = base_path
        self._cache: Dict[str, Template] = {}

        self.env = Environment(
            loader=FileSystemLoader(str(base_path)),
            # Catches silent failures
            undefined=StrictUndefined,
            variable_start_string="[[",
            variable_end_string="]]",
            block_start_string="[%",
            block_end_string="%]",
            comment_start_string="[#",
            comment_end_string="#]",
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
            autoescape=False,
        )
        self.env.filters["esc"] = escape_text
        self.env.filters["ea"] = escape_attribute
        self.env.filters["num"] = format_number

    def get_template(self, type_name: str) -> Template:
        """
        Get a node fragment template by type name, loading and caching it if necessary.

        Args:
            type_name: Node type (e.g., 'Text')

        Returns:
            Jinja2 Template object

        Raises:
            TemplateNotFound: If template file doesn't exist
        """
        if type_name in self._cache:
            return self._cache[type_name]

        template_path = f"types/{type_name}/template.html.jinja"

        try:
            template = self.env.get_template(template_path)
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"Template not found for type '{type_name}' at {self.base_path / template_path}"
            ) from e

        self._cache[type_name] = template
        return template

    def get_structure_template(self, name: str) -> Template:
        """Get a page-level template (e.g., 'page_root') from template/structure/."""
        key = f"structure/{name}"
        if key not in self._cache:
            self._cache[key] = self.env.get_template(f"structure/{name}.html.jinja")
        return self._cache[key]

    def get_template_path(self, type_name: str) -> Path:
        """
        Get the file path for a type's template.

        Args:
            type_name: Node type (e.g., 'Text')

        Returns:
            Path to template file
        """
        return self.base_path / "types" / type_name / "template.html.jinja"

    def clear_cache(self):
        """Clear the template cache."""
        self._cache.clear()

    def is_cached(self, type_name: str) -> bool:
        """Check if a template is in the cache."""
        return type_name in self._cache


@dataclass(frozen=True)
class PageGeometry:
    """
    Resolved page box in px (72 dpi, so 1px == 1pt).

    Attributes:
        width: Page width after orientation
        height: Page height after orientation
        margin_top, margin_bottom, margin_left, margin_right: Page margins
    """

    width: float
    height: float
    margin_top: float
    margin_bottom: float
    margin_left: float
    margin_right: float

    @property
    def content_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def content_height(self) -> float:
        return self.height - self.margin_top - self.margin_bottom


class PageSizeRegistry:
    """
    Registry of page size classes loaded from page_sizes.yaml.

    Resolves a PageSettings (size class, orientation, custom mm dimensions,
    margins) into a PageGeometry.
    """

    def __init__(self, config_path: Path = None):
        if config_path is None:
            config_path = PAGE_SIZES_PATH

        self.config_path = config_path
        self._sizes: Optional[Dict[str, Dict[str, Any]]] = None

    @property
    def sizes(self) -> Dict[str, Dict[str, Any]]:
        """Size classes, loaded lazily from the config file."""
        if self._sizes is None:
            config = OmegaConf.load(self.config_path)
            self._sizes = OmegaConf.to_container(config, resolve=True)
        return self._sizes

    def get_size(self, size_class: str) -> Dict[str, float]:
        """
        Portrait dimensions for a size class.

        Raises:
            KeyError: If the size class is not configured
        """
        if size_class not in self.sizes:
            raise KeyError(
                f"Page size '{size_class}' not found. Available sizes: {list(self.sizes)}"
            )
        dims = self.sizes[size_class]
        return {"width": float(dims["width"]), "height": float(dims["height"])}

    def get_geometry(self, settings) -> PageGeometry:
        """
        Resolve page settings to a concrete page box.

        Custom sizes use the settings' width/height in mm. Unknown size classes
        and incomplete custom sizes fall back to A4 with a warning.

        Args:
            settings: PageSettings

        Returns:
            PageGeometry with orientation applied
        """
        if settings.size == "Custom" and settings.width and settings.height:
            width = settings.width * MM_TO_PX
            height = settings.height * MM_TO_PX
        else:
            size_class = settings.size
            if size_class not in self.sizes:
                _log_warning(f"Unknown page size {size_class!r}, using A4")
                size_class = "A4"
            dims = self.get_size(size_class)
            width, height = dims["width"], dims["height"]

        if settings.orientation == "landscape":
            width, height = height, width

        margins = settings.margins
        return PageGeometry(
            width=round(width, 2),
            height=round(height, 2),
            margin_top=margins.top,
            margin_bottom=margins.bottom,
            margin_left=margins.left,
            margin_right=margins.right,
        )
