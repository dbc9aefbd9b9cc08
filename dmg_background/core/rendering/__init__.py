"""
Rendering Module
===============

SVG generation and PNG creation with external rasterization tools.

Components:
- svg_generator: Render template parameters into SVG markup
- backends: Command-line rasterizers with availability probing
- image_utils: Pixel dimension readback and corrective transforms
- png_generator: Backend selection, invocation and output verification
- templates: SVG template files
"""
