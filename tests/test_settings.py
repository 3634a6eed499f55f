import json

import pytest

from escapetime.geometry import PixelBounds, ViewRectangle
from escapetime.settings import Settings, load_settings


def test_packaged_settings_load():
    settings = Settings.load()
    assert settings.bounds == PixelBounds(800, 600)
    assert settings.max_iter == 256
    assert settings.default_view == ViewRectangle(complex(-3, 2), complex(1, -2))
    assert settings.zoom_half_extent == 100
    assert settings.workers is None
    assert settings.color_mode == 'hsv'


def test_missing_file_falls_back_to_defaults(tmp_path, capsys):
    path = tmp_path / "missing.json"
    assert load_settings(str(path)) is None
    assert "Warning" in capsys.readouterr().out
    assert Settings.load(str(path)) == Settings()


def test_unparsable_file_falls_back_to_defaults(tmp_path, capsys):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    assert Settings.load(str(path)) == Settings()
    assert "Warning" in capsys.readouterr().out


def test_values_override_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({
        "width": 320,
        "max_iter": 1024,
        "default_view": [[-2.0, 1.5], [1.0, -1.5]],
        "color_mode": "alpha",
        "unrelated": True,
    }))
    settings = Settings.load(str(path))
    assert settings.width == 320
    assert settings.height == 600
    assert settings.max_iter == 1024
    assert settings.default_view == ViewRectangle(complex(-2, 1.5), complex(1, -1.5))
    assert settings.color_mode == "alpha"


@pytest.mark.parametrize("data", [
    {"width": 0},
    {"max_iter": 0},
    {"max_iter": 2**31},
    {"band_rows": -1},
    {"workers": 0},
    {"color_mode": "sepia"},
    {"default_view": [[1, 1], [0, 0]]},
    {"default_view": "everything"},
])
def test_invalid_values_are_rejected(data):
    with pytest.raises(ValueError):
        Settings.from_dict(data)
