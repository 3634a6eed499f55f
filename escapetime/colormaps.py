"""
Color mapping from escape-time results to RGBA pixels.

Two color modes are supported:
- hsv: full hue gradient for interactive display. Escaped points get a
  hue proportional to their escape step at full saturation and value;
  points in the set are black (value 0).
- alpha: grayscale export. RGB is fixed to white and the raw escape step,
  clamped to a byte, is written to the alpha channel.

Points judged inside the set arrive as a negative step (compute.BOUNDED).
The color functions are JIT-compiled so the band kernel can call them
per pixel. To add a mode:
1. Write a color_xxx(step, limit) function returning (r, g, b, a)
2. Give it a MODE_ id, dispatch to it in map_color and register it in
   COLOR_MODES below
"""

from numba import jit


MODE_HSV = 0
MODE_ALPHA = 1

INSIDE_COLOR = (0, 0, 0, 255)  # hsv mode, points in the set


@jit(nopython=True, nogil=True, cache=True)
def hsv_to_rgb(h, s, v):
    """Convert HSV (0-1 range) to RGB (0-255 range)."""
    if s == 0.0:
        gray = int(v * 255)
        return gray, gray, gray

    h = h * 6.0
    i = int(h)
    f = h - i
    p = v * (1.0 - s)
    q = v * (1.0 - s * f)
    t = v * (1.0 - s * (1.0 - f))

    if i == 0:
        r, g, b = v, t, p
    elif i == 1:
        r, g, b = q, v, p
    elif i == 2:
        r, g, b = p, v, t
    elif i == 3:
        r, g, b = p, q, v
    elif i == 4:
        r, g, b = t, p, v
    else:
        r, g, b = v, p, q

    return int(r * 255), int(g * 255), int(b * 255)


@jit(nopython=True, nogil=True, cache=True)
def color_hsv(step, limit):
    """Hue gradient over [0, limit); black for points in the set."""
    if step < 0:
        r, g, b = hsv_to_rgb(0.0, 0.0, 0.0)
        return r, g, b, 255
    r, g, b = hsv_to_rgb(step / limit, 1.0, 1.0)
    return r, g, b, 255


@jit(nopython=True, nogil=True, cache=True)
def color_alpha(step, limit):
    """White pixel whose alpha is the escape step (opaque inside the set)."""
    if step < 0 or step > 255:
        return 255, 255, 255, 255
    return 255, 255, 255, step


@jit(nopython=True, nogil=True, cache=True)
def map_color(step, limit, mode):
    if mode == MODE_ALPHA:
        return color_alpha(step, limit)
    return color_hsv(step, limit)


# Registry of color modes by name, as accepted by the CLI and settings.json.
COLOR_MODES = {
    'hsv': MODE_HSV,
    'alpha': MODE_ALPHA,
}


def get_color_mode(name):
    """
    Get a color mode id by name.

    Raises:
        KeyError if name not found
    """
    return COLOR_MODES[name]


def list_color_mode_names():
    """Get list of available color mode names."""
    return list(COLOR_MODES.keys())


def color_for(result, limit, mode=MODE_HSV):
    """
    Color a single escape_time() result.

    Args:
        result: escape step, or None for a point judged inside the set
        limit: iteration budget the result was computed with
        mode: MODE_HSV or MODE_ALPHA

    Returns:
        (r, g, b, a) tuple of ints
    """
    step = -1 if result is None else int(result)
    return tuple(int(c) for c in map_color(step, limit, mode))
