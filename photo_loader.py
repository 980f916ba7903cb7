from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from PIL import Image, ImageOps

from config import ALLOWED_MIME_TYPES, MAX_UPLOAD_BYTES
from layouts import Edition


class MissingInputError(ValueError):
    pass


class InvalidFileError(ValueError):
    pass


def _guess_mime_type(filename: str) -> str:
    ext = Path(filename).suffix.lower()
    if ext in [".jpg", ".jpeg"]:
        return "image/jpeg"
    if ext == ".png":
        return "image/png"
    return "application/octet-stream"


@dataclass(frozen=True)
class PhotoUpload:
    filename: str
    data: bytes
    content_type: Optional[str] = None

    @property
    def mime_type(self) -> str:
        return self.content_type or _guess_mime_type(self.filename)

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "PhotoUpload":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Photo not found: {path}")
        return cls(filename=path.name, data=path.read_bytes())


def validate_upload(
    upload: PhotoUpload,
    edition: Edition,
    *,
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> None:
    """
    Reject uploads the v3 generator does not accept: anything that is not
    JPEG/PNG, or bigger than `max_bytes`. Earlier editions accept anything.
    """
    if not Edition(edition).validates_upload:
        return

    if upload.mime_type not in ALLOWED_MIME_TYPES:
        raise InvalidFileError("Please upload a JPEG or PNG image")

    if upload.size > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise InvalidFileError(f"File is too large. Maximum size is {limit_mb:g} MB")


def decode_photo(data: bytes) -> Image.Image:
    """
    Decode uploaded bytes into a fully loaded RGBA bitmap, honouring the
    EXIF orientation tag the way browsers do.
    """
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (OSError, Image.DecompressionBombError, ValueError) as e:
        raise InvalidFileError(f"Could not read image: {e}") from e

    img = ImageOps.exif_transpose(img)

    w, h = img.size
    if w == 0 or h == 0:
        raise InvalidFileError(f"Image has zero dimension: {w}x{h}")

    return img.convert("RGBA")
