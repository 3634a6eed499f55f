"""
Pixel space and complex plane geometry.

PixelBounds describes the output image, ViewRectangle the region of the
complex plane shown in it. map_pixel is the JIT-compiled linear mapping
between the two; the band kernels in compute.py call it directly so every
code path maps pixels the same way.
"""

import math
from dataclasses import dataclass

from numba import jit


@dataclass(frozen=True)
class PixelBounds:
    """Width and height of the output buffer in pixels."""

    width: int
    height: int

    def __post_init__(self):
        for name in ('width', 'height'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise ValueError(f"{name} must be at least 1, got {value}")

    @property
    def buffer_size(self):
        """Length in bytes of an RGBA8 buffer of these dimensions."""
        return 4 * self.width * self.height


@dataclass(frozen=True)
class ViewRectangle:
    """
    Region of the complex plane mapped onto the pixel buffer.

    upper_left must lie strictly left of and above lower_right.
    """

    upper_left: complex
    lower_right: complex

    def __post_init__(self):
        ul = complex(self.upper_left)
        lr = complex(self.lower_right)
        object.__setattr__(self, 'upper_left', ul)
        object.__setattr__(self, 'lower_right', lr)
        for value in (ul.real, ul.imag, lr.real, lr.imag):
            if not math.isfinite(value):
                raise ValueError(f"view corners must be finite, got {ul} and {lr}")
        if not ul.real < lr.real:
            raise ValueError(
                f"upper_left.re ({ul.real}) must be less than lower_right.re ({lr.real})"
            )
        if not ul.imag > lr.imag:
            raise ValueError(
                f"upper_left.im ({ul.imag}) must be greater than lower_right.im ({lr.imag})"
            )
        if not (math.isfinite(lr.real - ul.real) and math.isfinite(ul.imag - lr.imag)):
            raise ValueError(f"view extent must be finite, got {ul} and {lr}")

    @property
    def width(self):
        """Extent along the real axis."""
        return self.lower_right.real - self.upper_left.real

    @property
    def height(self):
        """Extent along the imaginary axis."""
        return self.upper_left.imag - self.lower_right.imag

    @property
    def center(self):
        return (self.upper_left + self.lower_right) / 2


@jit(nopython=True, nogil=True, cache=True)
def map_pixel(width, height, column, row, ul_re, ul_im, lr_re, lr_im):
    """
    Map a (column, row) pixel to (re, im) on the complex plane.

    Rows grow downward while the imaginary axis grows upward, so the
    vertical term is subtracted.
    """
    re = ul_re + column * (lr_re - ul_re) / width
    im = ul_im - row * (ul_im - lr_im) / height
    return re, im


def pixel_to_point(bounds, pixel, view):
    """
    Return the complex number corresponding to a pixel of the image.

    Args:
        bounds: PixelBounds of the image
        pixel: (column, row) pair; values outside the image extrapolate
        view: ViewRectangle covered by the image

    Returns:
        complex point on the plane
    """
    column, row = pixel
    re, im = map_pixel(
        bounds.width, bounds.height, float(column), float(row),
        view.upper_left.real, view.upper_left.imag,
        view.lower_right.real, view.lower_right.imag
    )
    return complex(re, im)
