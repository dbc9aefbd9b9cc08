"""
Application Settings
===================

Main application settings and environment configuration using Pydantic Settings.
Every template parameter has a hard-coded default; environment variables prefixed
with ``DMG_BG_`` (or a ``.env`` file) override them.
"""

from typing import Annotated, Optional, List, Union
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
import json
from pathlib import Path

from dmg_background.models.schemas import (
    BackgroundSpec,
    DmgLayout,
    Palette,
    Preset,
    PRESET_DIMENSIONS,
)


DEFAULT_BACKEND_ORDER = ["rsvg-convert", "inkscape", "qlmanage", "imagemagick"]


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="DMG Background Generator", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Rotating log file path")

    # Output Configuration
    output_dir: Path = Field(default=Path("."), description="Directory for generated files")
    svg_filename: str = Field(default="dmg-background.svg", description="SVG template filename")
    png_filename: str = Field(default="dmg-background.png", description="PNG output filename")

    # Template Configuration
    preset: Optional[Preset] = Field(default=None, description="Size preset: compact or wide")
    width: int = Field(default=540, gt=0, le=4000, description="Background width in pixels")
    height: int = Field(default=380, gt=0, le=4000, description="Background height in pixels")
    title: str = Field(default="Swipey", description="Product name")
    subtitle: str = Field(default="a 1273 project", description="Line under the title")
    arrow: str = Field(default="→", description="Arrow glyph")
    instruction: str = Field(default="Drag to Applications", description="Install instruction")
    font_family: str = Field(
        default="SF Mono, SFMono-Regular, Menlo, monospace", description="SVG font-family"
    )
    show_border: bool = Field(default=False, description="Draw a 1px frame around the image")

    # Palette Configuration
    background_color: str = Field(default="#fafafa", description="Background fill")
    text_color: str = Field(default="#0a0a0a", description="Title color")
    secondary_color: str = Field(default="#a3a3a3", description="Subtitle/instruction color")
    accent_color: str = Field(default="#d4d4d4", description="Arrow color")
    border_color: str = Field(default="#e5e5e5", description="Frame color")

    # DMG Window Layout
    window_width: int = Field(default=540, gt=0, description="Finder window width")
    window_height: int = Field(default=430, gt=0, description="Finder window height")
    icon_size: int = Field(default=80, gt=0, description="Finder icon size")
    app_icon_x: int = Field(default=160, description="Application icon x position")
    app_icon_y: int = Field(default=190, description="Application icon y position")
    drop_link_x: int = Field(default=380, description="Applications link x position")
    drop_link_y: int = Field(default=190, description="Applications link y position")

    # Backend Configuration
    backend_order: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_BACKEND_ORDER),
        description="Rasterization backends in priority order",
    )
    fallback_on_failure: bool = Field(
        default=True, description="Try the next available backend when one fails"
    )
    inkscape_app_path: Path = Field(
        default=Path("/Applications/Inkscape.app/Contents/MacOS/inkscape"),
        description="Inkscape binary inside the macOS app bundle",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("backend_order", mode="before")
    @classmethod
    def parse_backend_order(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse backend order from string or list."""
        if isinstance(v, str):
            # Handle JSON-like string: ["rsvg-convert", "qlmanage"]
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            # Handle comma-separated string: "rsvg-convert,qlmanage"
            return [name.strip() for name in v.split(",") if name.strip()]
        return v

    @property
    def svg_path(self) -> Path:
        return self.output_dir / self.svg_filename

    @property
    def png_path(self) -> Path:
        return self.output_dir / self.png_filename

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="DMG_BG_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings


def build_spec(settings: Settings) -> BackgroundSpec:
    """Build immutable template parameters from settings.

    A configured preset wins over the explicit width/height fields.
    """
    width, height = settings.width, settings.height
    if settings.preset is not None:
        width, height = PRESET_DIMENSIONS[Preset(settings.preset)]

    return BackgroundSpec(
        width=width,
        height=height,
        title=settings.title,
        subtitle=settings.subtitle,
        arrow=settings.arrow,
        instruction=settings.instruction,
        font_family=settings.font_family,
        show_border=settings.show_border,
        palette=Palette(
            background=settings.background_color,
            text=settings.text_color,
            secondary=settings.secondary_color,
            accent=settings.accent_color,
            border=settings.border_color,
        ),
        layout=build_layout(settings),
    )


def build_layout(settings: Settings) -> DmgLayout:
    """Build the Finder window layout the background is placed in."""
    return DmgLayout(
        window_width=settings.window_width,
        window_height=settings.window_height,
        icon_size=settings.icon_size,
        app_icon_position=(settings.app_icon_x, settings.app_icon_y),
        drop_link_position=(settings.drop_link_x, settings.drop_link_y),
    )
