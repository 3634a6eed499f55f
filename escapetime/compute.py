"""
Escape-time computation functions using Numba JIT compilation.

This module contains the performance-critical kernels:
- escape_steps: the per-point divergence test for z <- z^2 + c
- render_band: fills one horizontal band of an RGBA8 pixel buffer

The kernels are compiled with nogil=True, so bands handed to a thread pool
by renderer.py run truly in parallel.
"""

import numpy as np
from numba import jit

from .colormaps import MODE_ALPHA, MODE_HSV, map_color
from .geometry import map_pixel


BOUNDED = -1  # escape_steps result for points that never escaped

ESCAPE_R2 = 4.0  # |z|^2 threshold, i.e. |z| > 2

MAX_BUDGET = 2**31 - 1  # largest budget a kernel call accepts


@jit(nopython=True, nogil=True, cache=True)
def escape_steps(cr, ci, limit):
    """
    Iterate z <- z^2 + c from z = 0 for at most `limit` steps.

    Returns:
        The index i in [0, limit) of the first iteration at which |z|^2
        exceeds 4.0, or BOUNDED if that never happens.
    """
    zr = 0.0
    zi = 0.0
    for i in range(limit):
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        if zr * zr + zi * zi > ESCAPE_R2:
            return i
    return BOUNDED


def escape_time(c, limit):
    """
    Decide whether `c` is in the Mandelbrot set using at most `limit` iterations.

    Returns:
        The escape step as an int, or None if `c` seems to be a member
        (the limit was reached without proving divergence).

    Raises:
        ValueError if limit is not a positive integer
    """
    check_budget(limit)
    c = complex(c)
    steps = escape_steps(c.real, c.imag, limit)
    if steps == BOUNDED:
        return None
    return int(steps)


def check_budget(budget):
    """Reject anything but a positive integer iteration budget."""
    if isinstance(budget, bool) or not isinstance(budget, (int, np.integer)):
        raise ValueError(f"iteration budget must be an integer, got {budget!r}")
    if budget < 1:
        raise ValueError(f"iteration budget must be at least 1, got {budget}")
    if budget > MAX_BUDGET:
        raise ValueError(f"iteration budget must be at most {MAX_BUDGET}, got {budget}")


@jit(nopython=True, nogil=True, cache=True)
def render_band(pixels, width, height, row_offset, ul_re, ul_im, lr_re, lr_im,
                limit, mode):
    """
    Fill one band of an RGBA8 buffer.

    Every pixel is mapped against the full image (width x height) using
    its absolute row, so a band renders the same bytes no matter how the
    buffer was partitioned.

    Args:
        pixels: flat uint8 array holding whole rows, modified in place
        width, height: full image dimensions
        row_offset: absolute index of the band's first row
        ul_re, ul_im, lr_re, lr_im: view rectangle corners
        limit: iteration budget
        mode: color mode id (see colormaps)
    """
    stride = 4 * width
    rows = pixels.shape[0] // stride
    for local_row in range(rows):
        row = row_offset + local_row
        base = local_row * stride
        for column in range(width):
            cr, ci = map_pixel(width, height, column, row, ul_re, ul_im, lr_re, lr_im)
            steps = escape_steps(cr, ci, limit)
            r, g, b, a = map_color(steps, limit, mode)
            offset = base + 4 * column
            pixels[offset] = np.uint8(r)
            pixels[offset + 1] = np.uint8(g)
            pixels[offset + 2] = np.uint8(b)
            pixels[offset + 3] = np.uint8(a)


def warmup_jit():
    """
    Warm up JIT compilation with a tiny dummy band.

    Call this once at startup to pre-compile the Numba functions,
    avoiding a delay on the first real render.
    """
    dummy = np.zeros(4 * 4 * 2, dtype=np.uint8)
    for mode in (MODE_HSV, MODE_ALPHA):
        render_band(dummy, 4, 2, 0, -2.0, 1.0, 1.0, -1.0, 8, mode)
    escape_steps(0.0, 0.0, 1)
