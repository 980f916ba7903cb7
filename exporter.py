# exporter.py

import re
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from config import EXPORT_PREFIX
from layouts import Edition, TemplateKind

FIXED_SUFFIXES = {
    TemplateKind.VERTICAL: "story",
    TemplateKind.SQUARE: "post",
}


def encode_png(image: Image.Image) -> bytes:
    out = BytesIO()
    image.save(out, "PNG")
    return out.getvalue()


def sanitize_name(name: str) -> str:
    return re.sub(r"\s+", "_", name)


def export_filename(edition: Edition, kind: TemplateKind, name: Optional[str] = None) -> str:
    """
    - v1/v2 name the file after the entered name (whitespace → underscores),
      the v2 square export gets a `_post` suffix
    - v3 uses fixed names
    """
    edition = Edition(edition)
    kind = TemplateKind(kind)

    if edition is Edition.V3:
        return f"{EXPORT_PREFIX}_{FIXED_SUFFIXES[kind]}.png"

    base = f"{EXPORT_PREFIX}_{sanitize_name(name or '')}"
    if kind is TemplateKind.SQUARE:
        return f"{base}_{FIXED_SUFFIXES[kind]}.png"
    return f"{base}.png"


def save_png(image: Image.Image, directory: Union[str, Path], filename: str) -> Path:
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    out = directory / filename
    out.write_bytes(encode_png(image))

    print(f"[exporter] Saved {out} ({image.width}x{image.height})")
    return out
