# layouts.py

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class TemplateKind(str, Enum):
    VERTICAL = "vertical"
    SQUARE = "square"


class Resolution(str, Enum):
    PREVIEW = "preview"
    FULL = "full"


class Edition(str, Enum):
    """
    The three generator editions:

    - v1: vertical template, name text under the photo
    - v2: vertical + square templates, name text
    - v3: vertical + square templates, photo border, validated uploads
    """

    V1 = "v1"
    V2 = "v2"
    V3 = "v3"

    @property
    def template_kinds(self) -> Tuple[TemplateKind, ...]:
        if self is Edition.V1:
            return (TemplateKind.VERTICAL,)
        return (TemplateKind.VERTICAL, TemplateKind.SQUARE)

    @property
    def draws_name(self) -> bool:
        return self is not Edition.V3

    @property
    def draws_border(self) -> bool:
        return self is Edition.V3

    @property
    def validates_upload(self) -> bool:
        return self is Edition.V3


@dataclass(frozen=True)
class LayoutParams:
    canvas_size: Tuple[int, int]
    center_x_fraction: float
    center_y_fraction: float
    size: int
    font_size: int = 0
    text_offset: int = 0
    border_width: int = 0

    @property
    def width(self) -> int:
        return self.canvas_size[0]

    @property
    def height(self) -> int:
        return self.canvas_size[1]

    def center(self, width: int, height: int) -> Tuple[float, float]:
        return width * self.center_x_fraction, height * self.center_y_fraction

    def text_y(self, height: int) -> float:
        """Baseline of the name text, measured below the photo placement."""
        center_y = height * self.center_y_fraction
        return center_y + self.size / 2 + self.text_offset


CANVAS_SIZES: Dict[Tuple[TemplateKind, Resolution], Tuple[int, int]] = {
    (TemplateKind.VERTICAL, Resolution.PREVIEW): (1080, 1920),
    (TemplateKind.VERTICAL, Resolution.FULL): (2160, 3840),
    (TemplateKind.SQUARE, Resolution.PREVIEW): (1080, 1080),
    (TemplateKind.SQUARE, Resolution.FULL): (2160, 2160),
}


def _pair(kind, center_y, size, font_size=0, text_offset=0, border_width=0):
    # FULL is always exactly 2x PREVIEW on every linear measurement
    preview = LayoutParams(
        canvas_size=CANVAS_SIZES[(kind, Resolution.PREVIEW)],
        center_x_fraction=0.5,
        center_y_fraction=center_y,
        size=size[0],
        font_size=font_size[0] if font_size else 0,
        text_offset=text_offset[0] if text_offset else 0,
        border_width=border_width[0] if border_width else 0,
    )
    full = LayoutParams(
        canvas_size=CANVAS_SIZES[(kind, Resolution.FULL)],
        center_x_fraction=0.5,
        center_y_fraction=center_y,
        size=size[1],
        font_size=font_size[1] if font_size else 0,
        text_offset=text_offset[1] if text_offset else 0,
        border_width=border_width[1] if border_width else 0,
    )
    return {
        (kind, Resolution.PREVIEW): preview,
        (kind, Resolution.FULL): full,
    }


LAYOUTS: Dict[Edition, Dict[Tuple[TemplateKind, Resolution], LayoutParams]] = {
    Edition.V1: {
        **_pair(
            TemplateKind.VERTICAL,
            center_y=0.29,
            size=(360, 720),
            font_size=(80, 160),
            text_offset=(190, 380),
        ),
    },
    Edition.V2: {
        **_pair(
            TemplateKind.VERTICAL,
            center_y=0.327,
            size=(405, 810),
            font_size=(80, 160),
            text_offset=(190, 380),
        ),
        **_pair(
            TemplateKind.SQUARE,
            center_y=0.32,
            size=(324, 648),
            font_size=(60, 120),
            text_offset=(150, 300),
        ),
    },
    Edition.V3: {
        **_pair(
            TemplateKind.VERTICAL,
            center_y=0.327,
            size=(405, 810),
            border_width=(5, 10),
        ),
        **_pair(
            TemplateKind.SQUARE,
            center_y=0.32,
            size=(324, 648),
            border_width=(5, 10),
        ),
    },
}


def layout_for(edition: Edition, kind: TemplateKind, resolution: Resolution) -> LayoutParams:
    edition = Edition(edition)
    kind = TemplateKind(kind)
    table = LAYOUTS[edition]
    key = (kind, Resolution(resolution))

    if key not in table:
        raise ValueError(f"Edition {edition.value} has no {kind.value} template")

    return table[key]
