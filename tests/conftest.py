"""Shared fixtures for the generator tests.

Images are built in memory with Pillow; template files are written to a
per-test temporary directory so nothing touches ./assets.
"""

import io

import numpy as np
import pytest
from PIL import Image, ImageDraw

from layouts import TemplateKind
from templates import TemplateLibrary

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
QUADRANTS = {
    "tl": (255, 255, 0, 255),
    "tr": (255, 0, 255, 255),
    "bl": (0, 255, 255, 255),
    "br": (0, 128, 0, 255),
}

VERTICAL_TEMPLATE_COLOR = (20, 180, 90, 255)
SQUARE_TEMPLATE_COLOR = (200, 60, 30, 255)


def banded_photo(width, height):
    """
    A photo whose centered square holds four solid quadrants, while the
    excess on the longer axis is red (before) and blue (after).
    """
    img = Image.new("RGBA", (width, height), RED)
    draw = ImageDraw.Draw(img)

    side = min(width, height)
    x0 = (width - side) // 2
    y0 = (height - side) // 2
    half = side // 2

    if height > width:
        draw.rectangle((0, y0 + side, width - 1, height - 1), fill=BLUE)
    elif width > height:
        draw.rectangle((x0 + side, 0, width - 1, height - 1), fill=BLUE)

    draw.rectangle((x0, y0, x0 + half - 1, y0 + half - 1), fill=QUADRANTS["tl"])
    draw.rectangle((x0 + half, y0, x0 + side - 1, y0 + half - 1), fill=QUADRANTS["tr"])
    draw.rectangle((x0, y0 + half, x0 + half - 1, y0 + side - 1), fill=QUADRANTS["bl"])
    draw.rectangle((x0 + half, y0 + half, x0 + side - 1, y0 + side - 1), fill=QUADRANTS["br"])
    return img


def encode(img, fmt):
    buf = io.BytesIO()
    if fmt == "JPEG":
        img = img.convert("RGB")
    img.save(buf, format=fmt)
    return buf.getvalue()


def close(actual, expected, tol=3):
    return all(abs(int(a) - int(b)) <= tol for a, b in zip(actual, expected))


def pixels(img):
    return np.asarray(img.convert("RGBA")).astype(int)


@pytest.fixture
def template_files(tmp_path):
    vertical = tmp_path / "template_story.png"
    square = tmp_path / "template_post.png"
    Image.new("RGBA", (108, 192), VERTICAL_TEMPLATE_COLOR).save(vertical)
    Image.new("RGBA", (108, 108), SQUARE_TEMPLATE_COLOR).save(square)
    return {TemplateKind.VERTICAL: vertical, TemplateKind.SQUARE: square}


@pytest.fixture
def library(template_files):
    lib = TemplateLibrary(template_files).start()
    assert lib.wait(timeout=10)
    return lib


@pytest.fixture
def missing_font(tmp_path):
    return tmp_path / "no-such-font.ttf"


def bomb_png():
    """A tiny PNG whose pixel count trips Pillow's decompression-bomb guard."""
    buf = io.BytesIO()
    Image.new("1", (15000, 15000)).save(buf, format="PNG")
    return buf.getvalue()
