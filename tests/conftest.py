import os

# Run pygame headless.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from escapetime import PixelBounds, ViewRectangle


@pytest.fixture
def small_bounds():
    return PixelBounds(37, 23)


@pytest.fixture
def default_view():
    return ViewRectangle(complex(-3.0, 2.0), complex(1.0, -2.0))
