"""
Escape-time Mandelbrot renderer.

A parallel escape-time engine that renders a rectangle of the Mandelbrot
set into an RGBA8 pixel buffer, with Numba for JIT-compiled kernels and
Pygame for the interactive explorer and PNG export.

Quick Start:
    from escapetime import PixelBounds, ViewRectangle, render
    pixels = render(PixelBounds(800, 600), ViewRectangle(-3 + 2j, 1 - 2j), 256)

Or from command line:
    python -m escapetime mandel.png 1000x750 -1.20,0.35 -1,0.20
    python -m escapetime            # interactive explorer

Package Structure:
    - geometry.py: pixel/complex coordinate mapping, view rectangle, bounds
    - compute.py: JIT-compiled escape-time test and band kernel
    - colormaps.py: hsv gradient and alpha export color modes
    - renderer.py: parallel band renderer and background renderer
    - viewport.py: viewport state machine (zoom, reset, budget)
    - export.py: PNG export
    - settings.py: settings.json loading
    - app.py: interactive explorer and event loop
    - cli.py: command line entry point

Controls:
    - Left click: Zoom in around the cursor
    - Right click / Z: Zoom out
    - +/-: Double/halve the iteration budget
    - Arrow keys: Pan
    - R: Reset to default view
    - S: Save PNG
    - ESC: Quit
"""

from .colormaps import COLOR_MODES, color_for, get_color_mode, list_color_mode_names
from .compute import BOUNDED, escape_time
from .geometry import PixelBounds, ViewRectangle, pixel_to_point
from .renderer import MandelbrotRenderer, RenderBand, partition_bands, render
from .viewport import Command, ViewportController, ViewState

__version__ = "1.0.0"
__all__ = [
    "BOUNDED",
    "COLOR_MODES",
    "Command",
    "MandelbrotRenderer",
    "PixelBounds",
    "RenderBand",
    "ViewRectangle",
    "ViewState",
    "ViewportController",
    "color_for",
    "escape_time",
    "get_color_mode",
    "list_color_mode_names",
    "partition_bands",
    "pixel_to_point",
    "render",
]
