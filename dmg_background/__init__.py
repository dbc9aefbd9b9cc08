"""
DMG Background Generator
========================

Generates the static PNG background shown in a macOS disk-image installer
window by templating an SVG and rasterizing it with whichever supported
command-line converter is installed.

This package provides:
- Environment-driven configuration and structured logging
- Pydantic models for template parameters and generation results
- SVG templating with Jinja2
- Rasterization backends with availability probing and fallback
- A console entry point for build scripts
"""

__version__ = "1.0.0"
__author__ = "DMG Background Team"
