import pytest

from escapetime.geometry import PixelBounds, ViewRectangle, pixel_to_point


@pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-1, 5), (1.5, 2), (True, 3)])
def test_pixel_bounds_rejects_invalid(width, height):
    with pytest.raises(ValueError):
        PixelBounds(width, height)


def test_pixel_bounds_buffer_size():
    assert PixelBounds(3, 2).buffer_size == 24


@pytest.mark.parametrize("upper_left,lower_right", [
    (complex(1, 1), complex(-1, -1)),   # re reversed
    (complex(-1, -1), complex(1, 1)),   # im reversed
    (complex(0, 1), complex(0, -1)),    # zero width
    (complex(-1, 0), complex(1, 0)),    # zero height
    (complex(float("nan"), 1), complex(1, -1)),
    (complex(-1e308, 1e308), complex(1e308, -1e308)),  # extent overflows
])
def test_view_rectangle_rejects_degenerate(upper_left, lower_right):
    with pytest.raises(ValueError):
        ViewRectangle(upper_left, lower_right)


def test_view_rectangle_extent_and_center(default_view):
    assert default_view.width == 4.0
    assert default_view.height == 4.0
    assert default_view.center == complex(-1.0, 0.0)


@pytest.mark.parametrize("width,height", [(1, 1), (100, 100), (640, 480), (37, 23)])
def test_corners_map_to_view_corners(width, height):
    bounds = PixelBounds(width, height)
    view = ViewRectangle(complex(-1.2, 0.35), complex(-1.0, 0.20))
    assert pixel_to_point(bounds, (0, 0), view) == view.upper_left
    lower_right = pixel_to_point(bounds, (width, height), view)
    assert lower_right.real == pytest.approx(view.lower_right.real, abs=1e-12)
    assert lower_right.imag == pytest.approx(view.lower_right.imag, abs=1e-12)


def test_center_pixel_maps_to_origin():
    bounds = PixelBounds(100, 100)
    view = ViewRectangle(complex(-1, 1), complex(1, -1))
    assert pixel_to_point(bounds, (50, 50), view) == 0j


def test_rows_go_down_the_imaginary_axis(default_view):
    bounds = PixelBounds(200, 100)
    top = pixel_to_point(bounds, (10, 0), default_view)
    lower = pixel_to_point(bounds, (10, 60), default_view)
    assert lower.imag < top.imag
    assert lower.real == top.real


def test_pixels_outside_the_image_extrapolate(default_view):
    bounds = PixelBounds(400, 400)
    point = pixel_to_point(bounds, (-100, -100), default_view)
    assert point == complex(-4.0, 3.0)
