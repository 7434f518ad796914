"""Shared fixtures: directories of generated pages."""

import os
from pathlib import Path

import pytest
from PIL import Image


def make_image(path, fmt="PNG", size=(8, 8), color=(200, 30, 30)):
    """Write a small solid image to `path` and return the path."""
    path = Path(path)
    Image.new("RGB", size, color).save(path, format=fmt)
    return path


def make_corrupt_png(path):
    """Write a PNG whose header is valid but whose pixel data is cut short."""
    path = Path(path)
    noise = Image.effect_noise((64, 64), 64).convert("RGB")
    noise.save(path, format="PNG")
    data = path.read_bytes()
    path.write_bytes(data[: len(data) // 2])
    return path


@pytest.fixture
def comic_dir(tmp_path):
    """A chapter directory with pages in a deliberately awkward order."""
    chapter = tmp_path / "Chapter 1"
    chapter.mkdir()
    make_image(chapter / "b.png")
    make_image(chapter / "a.png")
    make_image(chapter / "10.png")
    return chapter


@pytest.fixture
def messy_dir(tmp_path):
    """Pages mixed with files that must never end up in the archive."""
    chapter = tmp_path / "Chapter 2"
    chapter.mkdir()
    make_image(chapter / "2.jpg", fmt="JPEG")
    make_image(chapter / "1.jpg", fmt="JPEG")
    (chapter / "notes.txt").write_text("scanlation credits")
    (chapter / "ComicInfo.xml").write_text("<ComicInfo/>")
    (chapter / ".DS_Store").write_bytes(b"\x00\x00\x00\x01Bud1")
    (chapter / "extras").mkdir()
    return chapter


@pytest.fixture
def umask():
    """Set the process umask for one test, restoring the old one afterwards."""
    original = os.umask(0o022)
    os.umask(original)
    yield os.umask
    os.umask(original)
