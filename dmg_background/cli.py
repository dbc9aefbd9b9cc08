"""
Command Line Entry Point
========================

``dmg-background`` writes ``dmg-background.svg`` and ``dmg-background.png``
into the output directory. Template parameters come from settings; exit status
is 0 when a verified PNG was produced and 1 otherwise.
"""

from typing import List, Optional
import argparse
import sys
from pathlib import Path

from dmg_background.config.logging import get_logger, setup_logging
from dmg_background.config.settings import Settings, get_settings
from dmg_background.core.rendering.backends import BackendFactory
from dmg_background.core.rendering.errors import BackgroundGenerationError
from dmg_background.core.rendering.png_generator import BackgroundGenerator
from dmg_background.models.schemas import Preset

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dmg-background", description="Generate a DMG installer background image"
    )
    parser.add_argument("--output-dir", type=Path, help="Directory for the SVG and PNG files")
    parser.add_argument(
        "--preset",
        choices=[preset.value for preset in Preset],
        help="Background size: compact (540x380) or wide (600x400)",
    )
    parser.add_argument(
        "--backend",
        action="append",
        choices=BackendFactory.names(),
        dest="backends",
        help="Restrict to this backend; repeat to set a priority order",
    )
    parser.add_argument(
        "--list-backends", action="store_true", help="Show which backends are installed and exit"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return settings with command line overrides applied."""
    update = {}
    if args.output_dir is not None:
        update["output_dir"] = args.output_dir
    if args.preset is not None:
        update["preset"] = Preset(args.preset)
    if args.backends:
        update["backend_order"] = args.backends
    if args.verbose:
        update["log_level"] = "DEBUG"
    return settings.model_copy(update=update) if update else settings


def list_backends(generator: BackgroundGenerator) -> int:
    for backend in generator.backends:
        executable = backend.resolve()
        status = f"✓ {executable}" if executable else "✗ not installed"
        print(f"{backend.name:<14} {status}")
    return 0 if generator.available_backends() else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for DMG background generation."""
    args = build_parser().parse_args(argv)

    # pydantic's ValidationError is a ValueError, as is an unknown backend name
    try:
        settings = apply_overrides(get_settings(), args)
        setup_logging(settings)
        generator = BackgroundGenerator(settings=settings)
    except ValueError as e:
        print(f"❌ Invalid configuration: {e}")
        return 1

    if args.list_backends:
        return list_backends(generator)

    try:
        result = generator.generate()
    except BackgroundGenerationError as e:
        logger.error("Background generation failed", error=str(e))
        print(f"❌ Failed to create background: {e}")
        return 1

    print(f"✓ DMG background created: {result.png_path} ({result.size_label})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
