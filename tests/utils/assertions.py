"""
Test Assertions
===============

Custom assertion helpers for testing DMG background generation.
"""

from typing import Optional, Tuple
from pathlib import Path

from PIL import Image  # type: ignore

from dmg_background.models.schemas import GenerationResult

__all__ = ["assert_png_dimensions", "assert_valid_generation_result"]


def assert_png_dimensions(path: Path, expected: Tuple[int, int]) -> None:
    """Assert that a PNG exists with exactly the expected pixel size."""
    assert path.is_file(), f"Expected PNG at {path}"
    with Image.open(path) as image:
        assert image.format == "PNG"
        assert image.size == expected, f"Expected {expected}, got {image.size}"


def assert_valid_generation_result(
    result: GenerationResult,
    expected: Tuple[int, int],
    backend: Optional[str] = None,
) -> None:
    """Assert that a generation result describes a verified PNG."""
    assert isinstance(result, GenerationResult)
    assert (result.width, result.height) == expected
    assert result.size_label == f"{expected[0]}x{expected[1]}"
    assert result.svg_path.is_file()
    assert result.file_size == result.png_path.stat().st_size
    assert_png_dimensions(result.png_path, expected)

    if backend is not None:
        assert result.backend == backend
