"""
Pydantic Models and Schemas
===========================

Core data models for DMG background template parameters, Finder window layout
and generation results. Template parameters are frozen: one instance describes
exactly one run.
"""

from typing import Optional, Tuple
from enum import Enum
from pathlib import Path
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator


HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


# Enums
class Preset(str, Enum):
    """Background size presets."""
    COMPACT = "compact"
    WIDE = "wide"


PRESET_DIMENSIONS = {
    Preset.COMPACT: (540, 380),
    Preset.WIDE: (600, 400),
}


# Template Models
class Palette(BaseModel):
    """Colors used by the SVG template."""
    model_config = ConfigDict(frozen=True)

    background: str = Field("#fafafa", description="Background fill")
    text: str = Field("#0a0a0a", description="Title color")
    secondary: str = Field("#a3a3a3", description="Subtitle and instruction color")
    accent: str = Field("#d4d4d4", description="Arrow color")
    border: str = Field("#e5e5e5", description="Frame color")

    @field_validator("background", "text", "secondary", "accent", "border")
    @classmethod
    def validate_hex_color(cls, v: str) -> str:
        """Validate and normalize a hex color."""
        v = v.strip()
        if not HEX_COLOR_PATTERN.match(v):
            raise ValueError(f"Invalid hex color: {v!r}")
        return v.lower()


class DmgLayout(BaseModel):
    """Finder window layout the background is displayed in."""
    model_config = ConfigDict(frozen=True)

    window_width: int = Field(540, gt=0, description="Finder window width")
    window_height: int = Field(430, gt=0, description="Finder window height")
    icon_size: int = Field(80, gt=0, description="Finder icon size")
    app_icon_position: Tuple[int, int] = Field((160, 190), description="Application icon center")
    drop_link_position: Tuple[int, int] = Field((380, 190), description="Applications link center")

    @property
    def arrow_x(self) -> int:
        """Horizontal midpoint between the two icons."""
        return (self.app_icon_position[0] + self.drop_link_position[0]) // 2


class BackgroundSpec(BaseModel):
    """Immutable template parameters for one generation run."""
    model_config = ConfigDict(frozen=True)

    width: int = Field(540, gt=0, le=4000, description="Output width in pixels")
    height: int = Field(380, gt=0, le=4000, description="Output height in pixels")
    title: str = Field("Swipey", description="Product name")
    subtitle: str = Field("a 1273 project", description="Line under the title")
    arrow: str = Field("→", description="Arrow glyph")
    instruction: str = Field("Drag to Applications", description="Install instruction")
    font_family: str = Field(
        "SF Mono, SFMono-Regular, Menlo, monospace", description="SVG font-family"
    )
    palette: Palette = Field(default_factory=Palette)
    show_border: bool = Field(False, description="Draw a 1px frame around the image")
    layout: Optional[DmgLayout] = Field(None, description="Finder window layout")

    @classmethod
    def from_preset(cls, preset: Preset, **overrides) -> "BackgroundSpec":
        """Create a spec sized by a named preset."""
        width, height = PRESET_DIMENSIONS[Preset(preset)]
        return cls(width=width, height=height, **overrides)

    @property
    def size_label(self) -> str:
        return f"{self.width}x{self.height}"


# Result Models
class GenerationResult(BaseModel):
    """Result of a successful background generation."""
    png_path: Path = Field(..., description="Verified PNG path")
    svg_path: Path = Field(..., description="SVG template path")
    backend: str = Field(..., description="Backend that produced the PNG")
    width: int = Field(..., description="Actual image width")
    height: int = Field(..., description="Actual image height")
    corrected: bool = Field(False, description="Whether a corrective transform ran")
    file_size: int = Field(..., description="PNG size in bytes")

    @property
    def size_label(self) -> str:
        return f"{self.width}x{self.height}"
