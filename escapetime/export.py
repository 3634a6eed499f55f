"""
PNG export of rendered buffers using pygame's image module.
"""

import os
from datetime import datetime

import pygame


def buffer_to_surface(buffer, bounds):
    """
    Wrap a row-major RGBA8 buffer in a pygame Surface of bounds.width x bounds.height.

    Raises:
        ValueError if the buffer length does not match the bounds
    """
    data = bytes(buffer)
    if len(data) != bounds.buffer_size:
        raise ValueError(
            f"buffer holds {len(data)} bytes, expected {bounds.buffer_size} "
            f"for {bounds.width}x{bounds.height} RGBA"
        )
    return pygame.image.frombytes(data, (bounds.width, bounds.height), 'RGBA')


def write_png(path, buffer, bounds):
    """
    Encode `buffer` as an RGBA PNG at `path`.

    pygame.error and OSError from the encoder propagate to the caller.
    """
    surface = buffer_to_surface(buffer, bounds)
    pygame.image.save(surface, os.fspath(path))
    return path


def timestamped_path(directory):
    """Generate a mandelbrot_<timestamp>.png filename inside `directory`."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return os.path.join(os.path.expanduser(directory), f"mandelbrot_{timestamp}.png")
