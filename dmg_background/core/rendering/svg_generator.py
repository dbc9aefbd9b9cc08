"""
SVG Generator
=============

Render DMG background template parameters into SVG markup.
Text lines are centered horizontally; the arrow sits between the Finder icons
when a window layout is known.
"""

from typing import Dict, List, Any
from pathlib import Path
import jinja2

from dmg_background.config.logging import get_logger
from dmg_background.core.rendering.errors import BackgroundGenerationError
from dmg_background.models.schemas import BackgroundSpec

logger = get_logger(__name__)

TEMPLATE_NAME = "background.svg"


class SVGGenerationError(BackgroundGenerationError):
    """Exception raised when SVG generation fails."""

    pass


class SVGGenerator:
    """Jinja2-based SVG generator."""

    def __init__(self) -> None:
        self.logger: Any = logger.bind(generator="svg")  # structlog.BoundLoggerBase
        self._setup_jinja2_environment()

    def _setup_jinja2_environment(self) -> None:
        """Setup Jinja2 template environment."""
        template_dir = Path(__file__).parent / "templates"
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            autoescape=jinja2.select_autoescape(["svg", "xml"]),
            undefined=jinja2.StrictUndefined,
        )

    def render(self, spec: BackgroundSpec) -> str:
        """
        Render SVG markup for the given template parameters.

        Args:
            spec: Template parameters

        Returns:
            SVG document as a string

        Raises:
            SVGGenerationError: If template rendering fails
        """
        try:
            template = self.env.get_template(TEMPLATE_NAME)
            svg = template.render(**self._prepare_context(spec))
        except jinja2.TemplateError as e:
            self.logger.error("SVG template rendering failed", error=str(e))
            raise SVGGenerationError(f"SVG generation failed: {e}") from e

        self.logger.debug("SVG generated", width=spec.width, height=spec.height, length=len(svg))
        return svg + "\n"

    def write(self, spec: BackgroundSpec, svg_path: Path) -> Path:
        """Render the SVG and overwrite ``svg_path`` with it."""
        svg = self.render(spec)
        try:
            svg_path.parent.mkdir(parents=True, exist_ok=True)
            svg_path.write_text(svg, encoding="utf-8")
        except OSError as e:
            self.logger.error("SVG template could not be written", path=str(svg_path), error=str(e))
            raise SVGGenerationError(f"Cannot write {svg_path}: {e}") from e
        self.logger.info("SVG template written", path=str(svg_path))
        return svg_path

    def _prepare_context(self, spec: BackgroundSpec) -> Dict[str, Any]:
        """Prepare template rendering context."""
        center_x = spec.width // 2
        arrow_x = center_x
        if spec.layout is not None:
            arrow_x = min(max(spec.layout.arrow_x, 0), spec.width)

        return {
            "spec": spec,
            "center_x": center_x,
            "arrow_x": arrow_x,
            "positions": text_positions(spec.height),
        }


def text_positions(height: int) -> Dict[str, int]:
    """Baseline y coordinates for each text line."""
    return {
        "title": 40,
        "subtitle": 60,
        "arrow": height // 2 + 5,
        "instruction": height - 40,
    }


def check_layout_consistency(spec: BackgroundSpec) -> List[str]:
    """
    Compare the background size against the Finder window layout.

    The DMG window shows the background unscaled from its top-left corner, so a
    background narrower than the window leaves a bare strip and a wider one is
    clipped.

    Returns:
        Human readable problems; empty when consistent or when no layout is set
    """
    layout = spec.layout
    if layout is None:
        return []

    problems: List[str] = []
    if layout.window_width != spec.width:
        problems.append(
            f"window width {layout.window_width} differs from background width {spec.width}"
        )
    if layout.window_height < spec.height:
        problems.append(
            f"window height {layout.window_height} is smaller than background height {spec.height}"
        )
    for name, (x, y) in (
        ("application icon", layout.app_icon_position),
        ("Applications link", layout.drop_link_position),
    ):
        if not (0 <= x <= spec.width and 0 <= y <= spec.height):
            problems.append(f"{name} at ({x}, {y}) lies outside the background")
    return problems


def generate_svg(spec: BackgroundSpec) -> str:
    """Render SVG markup with a fresh generator."""
    return SVGGenerator().render(spec)
