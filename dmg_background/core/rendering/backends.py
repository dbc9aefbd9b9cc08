"""
Rasterization Backends
======================

Command-line SVG rasterizers behind one interface. Each backend probes for its
tool through an injectable locator and runs it through an injectable runner, so
the priority chain can be exercised without the tools installed.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence, Type
from abc import ABC, abstractmethod
from pathlib import Path
import shutil
import subprocess

from dmg_background.config.logging import get_logger
from dmg_background.core.rendering.errors import InvocationFailedError
from dmg_background.models.schemas import BackgroundSpec

logger = get_logger(__name__)

Locator = Callable[[str], Optional[str]]
Runner = Callable[[Sequence[str]], "subprocess.CompletedProcess[str]"]

DEFAULT_INKSCAPE_APP_PATH = Path("/Applications/Inkscape.app/Contents/MacOS/inkscape")


def run_command(args: Sequence[str]) -> "subprocess.CompletedProcess[str]":
    """
    Run an external command and wait for it.

    Raises:
        InvocationFailedError: If the executable cannot be started or exits non-zero
    """
    command = [str(arg) for arg in args]
    logger.debug("Running command", command=" ".join(command))

    try:
        result = subprocess.run(command, capture_output=True, text=True)
    except OSError as e:
        raise InvocationFailedError(
            f"Could not run {command[0]}: {e}", command=command
        ) from e

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        raise InvocationFailedError(
            f"{command[0]} exited with status {result.returncode}"
            + (f": {stderr}" if stderr else ""),
            command=command,
            returncode=result.returncode,
            stderr=stderr,
        )
    return result


class RasterBackend(ABC):
    """Abstract base class for rasterization backends."""

    name: str = ""
    # Output shape may differ from the request and must be cropped/resized
    needs_correction: bool = False

    def __init__(self, locator: Locator = shutil.which, runner: Runner = run_command):
        self.locator = locator
        self.runner = runner
        self.logger: Any = logger.bind(backend=self.name)  # structlog.BoundLoggerBase

    @abstractmethod
    def candidates(self) -> List[str]:
        """Executable names or paths to probe, in order."""
        pass

    @abstractmethod
    def build_command(
        self, executable: str, svg_path: Path, png_path: Path, spec: BackgroundSpec
    ) -> List[str]:
        """Command line that rasterizes ``svg_path``."""
        pass

    def resolve(self) -> Optional[str]:
        """Return the first installed executable, or None."""
        for candidate in self.candidates():
            found = self.locator(candidate)
            if found:
                return found
        return None

    def is_available(self) -> bool:
        return self.resolve() is not None

    def invoke(self, svg_path: Path, png_path: Path, spec: BackgroundSpec) -> Path:
        """
        Rasterize ``svg_path`` into ``png_path``.

        Returns:
            Path to the produced PNG

        Raises:
            InvocationFailedError: If the tool is gone, fails, or writes nothing
        """
        executable = self.resolve()
        if executable is None:
            raise InvocationFailedError(f"{self.name} is not installed")

        command = self.build_command(executable, svg_path, png_path, spec)
        self.logger.info("Rasterizing SVG", executable=executable, size=spec.size_label)
        self.runner(command)

        produced = self._collect_output(svg_path, png_path)
        if not produced.is_file():
            raise InvocationFailedError(
                f"{self.name} finished but produced no output at {produced}", command=command
            )
        return produced

    def _collect_output(self, svg_path: Path, png_path: Path) -> Path:
        """Locate the tool's output; most tools write ``png_path`` directly."""
        return png_path


class RsvgConvertBackend(RasterBackend):
    """librsvg's ``rsvg-convert``."""

    name = "rsvg-convert"

    def candidates(self) -> List[str]:
        return ["rsvg-convert"]

    def build_command(
        self, executable: str, svg_path: Path, png_path: Path, spec: BackgroundSpec
    ) -> List[str]:
        return [
            executable,
            "-w", str(spec.width),
            "-h", str(spec.height),
            str(svg_path),
            "-o", str(png_path),
        ]


class InkscapeBackend(RasterBackend):
    """Inkscape from PATH or from the macOS application bundle."""

    name = "inkscape"

    def __init__(
        self,
        locator: Locator = shutil.which,
        runner: Runner = run_command,
        app_path: Path = DEFAULT_INKSCAPE_APP_PATH,
    ):
        super().__init__(locator, runner)
        self.app_path = Path(app_path)

    def candidates(self) -> List[str]:
        return ["inkscape", str(self.app_path)]

    def build_command(
        self, executable: str, svg_path: Path, png_path: Path, spec: BackgroundSpec
    ) -> List[str]:
        return [
            executable,
            str(svg_path),
            f"--export-filename={png_path}",
            "-w", str(spec.width),
            "-h", str(spec.height),
        ]


class QuickLookBackend(RasterBackend):
    """
    macOS Quick Look thumbnailer (``qlmanage``).

    ``qlmanage -t -s SIZE`` fits the drawing into a SIZE x SIZE square and
    writes ``<svg name>.png`` into the output directory, so the result is moved
    into place and needs a corrective crop.
    """

    name = "qlmanage"
    needs_correction = True

    def candidates(self) -> List[str]:
        return ["qlmanage"]

    def build_command(
        self, executable: str, svg_path: Path, png_path: Path, spec: BackgroundSpec
    ) -> List[str]:
        return [
            executable,
            "-t",
            "-s", str(max(spec.width, spec.height)),
            "-o", str(svg_path.parent),
            str(svg_path),
        ]

    def _collect_output(self, svg_path: Path, png_path: Path) -> Path:
        thumbnail = thumbnail_path(svg_path)
        if not thumbnail.is_file():
            return thumbnail
        thumbnail.replace(png_path)
        return png_path


class ImageMagickBackend(RasterBackend):
    """ImageMagick 7 ``magick`` or the legacy ``convert`` binary."""

    name = "imagemagick"

    def candidates(self) -> List[str]:
        return ["magick", "convert"]

    def build_command(
        self, executable: str, svg_path: Path, png_path: Path, spec: BackgroundSpec
    ) -> List[str]:
        return [
            executable,
            str(svg_path),
            "-resize", f"{spec.width}x{spec.height}!",
            str(png_path),
        ]


def thumbnail_path(svg_path: Path) -> Path:
    """Where ``qlmanage`` writes the thumbnail for ``svg_path``."""
    return svg_path.with_name(svg_path.name + ".png")


class BackendFactory:
    """Factory for creating rasterization backends."""

    _backends: Dict[str, Type[RasterBackend]] = {
        RsvgConvertBackend.name: RsvgConvertBackend,
        InkscapeBackend.name: InkscapeBackend,
        QuickLookBackend.name: QuickLookBackend,
        ImageMagickBackend.name: ImageMagickBackend,
    }

    @classmethod
    def names(cls) -> List[str]:
        return list(cls._backends)

    @classmethod
    def create_backend(
        cls,
        name: str,
        locator: Locator = shutil.which,
        runner: Runner = run_command,
        inkscape_app_path: Path = DEFAULT_INKSCAPE_APP_PATH,
    ) -> RasterBackend:
        """
        Create one backend by name.

        Raises:
            ValueError: If the name is unknown
        """
        if name not in cls._backends:
            raise ValueError(
                f"Unknown backend {name!r}; expected one of: {', '.join(cls._backends)}"
            )

        backend_class = cls._backends[name]
        if backend_class is InkscapeBackend:
            return InkscapeBackend(locator, runner, app_path=inkscape_app_path)
        return backend_class(locator, runner)

    @classmethod
    def create_backends(
        cls,
        order: Sequence[str],
        locator: Locator = shutil.which,
        runner: Runner = run_command,
        inkscape_app_path: Path = DEFAULT_INKSCAPE_APP_PATH,
    ) -> List[RasterBackend]:
        """Create backends in priority order."""
        return [
            cls.create_backend(name, locator, runner, inkscape_app_path) for name in order
        ]
