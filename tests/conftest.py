# tests/conftest.py

import os

import pytest
from PIL import Image

# Qt widgets need a platform plugin even when no window is ever shown.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# EXIF tag ids in the base IFD.
TAG_MAKE = 0x010F
TAG_MODEL = 0x0110
TAG_DATETIME = 0x0132


def write_image(path, make=None, model=None, date_time=None, size=(8, 6), color="white", fmt="JPEG"):
    """Writes a tiny image with the given EXIF camera fields and returns its path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new("RGB", size, color)
    exif = Image.Exif()
    if make is not None:
        exif[TAG_MAKE] = make
    if model is not None:
        exif[TAG_MODEL] = model
    if date_time is not None:
        exif[TAG_DATETIME] = date_time
    img.save(path, fmt, exif=exif)
    return path


@pytest.fixture
def make_image():
    """Factory fixture: make_image(path, make=..., model=..., date_time=...)."""
    return write_image


@pytest.fixture
def pics(tmp_path, make_image):
    """The classic scenario: two camera images and a text file in one folder."""
    root = tmp_path / "pics"
    make_image(root / "a.jpg", make="Nikon")
    make_image(root / "b.jpg", make="Canon")
    (root / "c.txt").write_text("not an image")
    return root


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Points the settings file at a temporary location for the duration of a test."""
    from smart_sorter.core import config_manager

    settings_path = tmp_path / "config" / "settings.json"
    monkeypatch.setattr(config_manager, "DEFAULT_SETTINGS_PATH", settings_path)
    return settings_path
