"""
Session settings loaded from settings.json.

Missing or unreadable settings files fall back to the built-in defaults
with a warning; values that are present but invalid raise ValueError.
"""

import json
import os
from dataclasses import dataclass, field, fields

from .colormaps import list_color_mode_names
from .compute import check_budget
from .geometry import PixelBounds, ViewRectangle


SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')


def load_settings(path=None):
    """Load the raw settings dict from a JSON file, or None if unavailable."""
    settings_path = path or SETTINGS_PATH
    try:
        with open(settings_path, 'r') as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        print(f"Warning: Could not load {os.path.basename(settings_path)}: {e}")
        return None


@dataclass(frozen=True)
class Settings:
    width: int = 800
    height: int = 600
    max_iter: int = 256
    default_view: ViewRectangle = field(
        default_factory=lambda: ViewRectangle(complex(-3.0, 2.0), complex(1.0, -2.0))
    )
    zoom_half_extent: int = 100
    band_rows: int = 1
    workers: int = None
    color_mode: str = 'hsv'
    save_dir: str = '~/Desktop'

    def __post_init__(self):
        PixelBounds(self.width, self.height)
        for name in ('max_iter', 'zoom_half_extent', 'band_rows'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"setting {name!r} must be a positive integer, got {value!r}")
        check_budget(self.max_iter)
        if self.workers is not None and (not isinstance(self.workers, int) or self.workers < 1):
            raise ValueError(f"setting 'workers' must be null or a positive integer, got {self.workers!r}")
        if self.color_mode not in list_color_mode_names():
            raise ValueError(
                f"setting 'color_mode' must be one of {list_color_mode_names()}, "
                f"got {self.color_mode!r}"
            )

    @property
    def bounds(self):
        return PixelBounds(self.width, self.height)

    @classmethod
    def from_dict(cls, data):
        """Build settings from a parsed settings.json dict; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in (data or {}).items() if key in known}
        if 'default_view' in values:
            values['default_view'] = _parse_view(values['default_view'])
        return cls(**values)

    @classmethod
    def load(cls, path=None):
        return cls.from_dict(load_settings(path))


def _parse_view(value):
    try:
        (ul_re, ul_im), (lr_re, lr_im) = value
        return ViewRectangle(complex(float(ul_re), float(ul_im)),
                             complex(float(lr_re), float(lr_im)))
    except (TypeError, ValueError) as e:
        raise ValueError(f"setting 'default_view' is invalid: {e}") from e
