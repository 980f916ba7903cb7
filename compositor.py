from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from config import BORDER_COLOR, NAME_COLOR, NAME_FONT_PATH
from layouts import LayoutParams

CropBox = Tuple[float, float, float, float]


class RenderTarget:
    """
    A reusable RGBA drawing surface. Every render fully overwrites it.
    """

    def __init__(self, width: int, height: int):
        self.image = Image.new("RGBA", (width, height), (0, 0, 0, 0))

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def clear(self) -> None:
        self.image.paste((0, 0, 0, 0), (0, 0, *self.image.size))

    def snapshot(self) -> Image.Image:
        return self.image.copy()


def load_font(font_path: Union[str, Path], size: int) -> ImageFont.FreeTypeFont:
    """Load the name font, fall back to Pillow's scalable default."""
    try:
        return ImageFont.truetype(str(font_path), size=size)
    except OSError:
        return ImageFont.load_default(size=size)


def crop_window(width: int, height: int) -> CropBox:
    """
    Centered square crop: side = min(width, height), the excess on the
    longer axis is split evenly and discarded.
    """
    side = min(width, height)
    left = (width - side) / 2
    top = (height - side) / 2
    return left, top, left + side, top + side


def placement_box(layout: LayoutParams, width: int, height: int) -> Tuple[int, int, int]:
    """Returns (left, top, size) of the photo square on a width x height target."""
    center_x, center_y = layout.center(width, height)
    size = layout.size
    return round(center_x - size / 2), round(center_y - size / 2), size


def _check_dimensions(image: Image.Image, label: str) -> None:
    w, h = image.size
    if w <= 0 or h <= 0:
        raise ValueError(f"{label} has zero dimension: {w}x{h}")


def render(
    target: RenderTarget,
    template: Image.Image,
    photo: Image.Image,
    layout: LayoutParams,
    name: Optional[str] = None,
    *,
    font_path: Union[str, Path] = NAME_FONT_PATH,
    name_color: str = NAME_COLOR,
    border_color: str = BORDER_COLOR,
) -> None:
    """
    Draw one output variant onto `target`:

    - template stretched to fill the whole target (no letterboxing)
    - optional square border behind the photo
    - centered square crop of the photo, scaled to layout.size
    - optional name text centered below the photo

    Only `target` is modified. Same inputs → same pixels.
    """
    _check_dimensions(template, "template")
    _check_dimensions(photo, "photo")

    width, height = target.size

    # 1) Clear everything, alpha included
    target.clear()
    canvas = target.image

    # 2) Template underneath
    background = template.convert("RGBA").resize((width, height), Image.LANCZOS)
    canvas.alpha_composite(background)

    # 3) + 4) Crop window and placement
    box = crop_window(*photo.size)
    left, top, size = placement_box(layout, width, height)

    # 5) Border, flush around the photo
    border = layout.border_width
    if border:
        ImageDraw.Draw(canvas).rectangle(
            (left - border, top - border, left + size + border - 1, top + size + border - 1),
            fill=border_color,
        )

    # 6) Photo
    cropped = photo.convert("RGBA").resize((size, size), Image.LANCZOS, box=box)
    canvas.alpha_composite(cropped, dest=(left, top))

    # 7) Name on top
    text = (name or "").strip()
    if text and layout.font_size:
        center_x, _ = layout.center(width, height)
        font = load_font(font_path, layout.font_size)
        ImageDraw.Draw(canvas).text(
            (center_x, layout.text_y(height)),
            text,
            font=font,
            fill=name_color,
            anchor="ms",
        )
