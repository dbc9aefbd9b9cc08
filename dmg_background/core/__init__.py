"""
Core Business Logic
==================

Core business logic modules for DMG background generation.

Modules:
- rendering: SVG templating, rasterization backends and PNG verification
"""
