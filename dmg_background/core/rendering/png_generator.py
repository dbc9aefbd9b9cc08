"""
PNG Generator
=============

Produces the DMG background PNG: writes the SVG template, picks the first
installed rasterization backend in priority order, applies the corrective
transform a backend needs, then verifies the output's pixel dimensions.
"""

from typing import Any, List, Optional, Sequence
from pathlib import Path
import shutil

from dmg_background.config.logging import get_logger
from dmg_background.config.settings import Settings, get_settings, build_spec
from dmg_background.core.rendering.backends import (
    BackendFactory,
    Locator,
    RasterBackend,
    Runner,
    run_command,
    thumbnail_path,
)
from dmg_background.core.rendering.errors import (
    BackgroundGenerationError,
    DimensionMismatchError,
    ImageReadError,
    InvocationFailedError,
    NoBackendAvailable,
    ToolNotFoundError,
)
from dmg_background.core.rendering.image_utils import correct_dimensions, read_dimensions
from dmg_background.core.rendering.svg_generator import SVGGenerator, check_layout_consistency
from dmg_background.models.schemas import BackgroundSpec, GenerationResult

logger = get_logger(__name__)

__all__ = [
    "BackgroundGenerator",
    "BackgroundGenerationError",
    "DimensionMismatchError",
    "ImageReadError",
    "InvocationFailedError",
    "NoBackendAvailable",
    "ToolNotFoundError",
    "generate_background",
]


class BackgroundGenerator:
    """Generate a fixed-size DMG background PNG via external rasterizers."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        backends: Optional[Sequence[RasterBackend]] = None,
        svg_generator: Optional[SVGGenerator] = None,
        locator: Locator = shutil.which,
        runner: Runner = run_command,
    ):
        self.settings = settings or get_settings()
        self.logger: Any = logger.bind(component="background_generator")  # structlog.BoundLoggerBase
        self.svg_generator = svg_generator or SVGGenerator()

        if backends is None:
            backends = BackendFactory.create_backends(
                self.settings.backend_order,
                locator=locator,
                runner=runner,
                inkscape_app_path=self.settings.inkscape_app_path,
            )
        self.backends: List[RasterBackend] = list(backends)

    @property
    def svg_path(self) -> Path:
        return self.settings.svg_path

    @property
    def png_path(self) -> Path:
        return self.settings.png_path

    def available_backends(self) -> List[RasterBackend]:
        """Installed backends, in priority order."""
        return [backend for backend in self.backends if backend.is_available()]

    def generate(self, spec: Optional[BackgroundSpec] = None) -> GenerationResult:
        """
        Generate the background PNG.

        Args:
            spec: Template parameters; built from settings when omitted

        Returns:
            GenerationResult describing the verified PNG

        Raises:
            ToolNotFoundError: If no backend is installed
            InvocationFailedError: If every attempted backend failed
            DimensionMismatchError: If the output has the wrong size
        """
        spec = spec or build_spec(self.settings)

        self.logger.info(
            "Generating DMG background",
            title=spec.title,
            size=spec.size_label,
            output=str(self.png_path),
        )
        for problem in check_layout_consistency(spec):
            self.logger.warning("DMG window layout does not match background", problem=problem)

        self._remove_stale_outputs()
        self.svg_generator.write(spec, self.svg_path)

        available = self.available_backends()
        if not available:
            probed = [backend.name for backend in self.backends]
            self.logger.error("No rasterization backend available", probed=probed)
            raise ToolNotFoundError(probed)

        attempts = available if self.settings.fallback_on_failure else available[:1]
        last = len(attempts) - 1
        for index, backend in enumerate(attempts):
            try:
                return self._generate_with(backend, spec)
            except InvocationFailedError as e:
                self._remove_stale_outputs()
                self.logger.warning("Backend failed", backend=backend.name, error=str(e))
                if index == last:
                    raise

    def _generate_with(self, backend: RasterBackend, spec: BackgroundSpec) -> GenerationResult:
        """Run one backend and verify its output."""
        expected = (spec.width, spec.height)
        produced = backend.invoke(self.svg_path, self.png_path, spec)

        try:
            corrected = self._apply_correction(backend, produced, spec)
            actual = read_dimensions(produced)
        except ImageReadError as e:
            raise InvocationFailedError(f"{backend.name} produced an unreadable image: {e}") from e
        if actual != expected:
            produced.unlink(missing_ok=True)
            self.logger.error(
                "Output dimensions do not match",
                backend=backend.name,
                expected=spec.size_label,
                actual=f"{actual[0]}x{actual[1]}",
            )
            raise DimensionMismatchError(expected, actual)

        result = GenerationResult(
            png_path=produced,
            svg_path=self.svg_path,
            backend=backend.name,
            width=actual[0],
            height=actual[1],
            corrected=corrected,
            file_size=produced.stat().st_size,
        )
        self.logger.info(
            "DMG background created",
            backend=result.backend,
            size=result.size_label,
            corrected=corrected,
            file_size=result.file_size,
        )
        return result

    def _apply_correction(
        self, backend: RasterBackend, produced: Path, spec: BackgroundSpec
    ) -> bool:
        """Run the corrective transform when the backend needs it; True if applied."""
        if not backend.needs_correction:
            return False

        native = read_dimensions(produced)
        if native == (spec.width, spec.height):
            return False

        self.logger.info(
            "Applying corrective transform",
            backend=backend.name,
            native=f"{native[0]}x{native[1]}",
            target=spec.size_label,
        )
        correct_dimensions(produced, spec.width, spec.height)
        return True

    def _remove_stale_outputs(self) -> None:
        """Delete PNGs left over from an earlier run."""
        for stale in (self.png_path, thumbnail_path(self.svg_path)):
            if stale.exists():
                stale.unlink()
                self.logger.debug("Removed stale output", path=str(stale))


def generate_background(
    spec: Optional[BackgroundSpec] = None, settings: Optional[Settings] = None
) -> GenerationResult:
    """Generate the background with the default backend chain."""
    return BackgroundGenerator(settings=settings).generate(spec)
