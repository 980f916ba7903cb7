from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from PIL import Image

from compositor import RenderTarget, render
from config import BORDER_COLOR, MAX_UPLOAD_BYTES, NAME_COLOR, NAME_FONT_PATH
from exporter import encode_png, export_filename, save_png
from layouts import Edition, Resolution, TemplateKind, layout_for
from photo_loader import (
    InvalidFileError,
    MissingInputError,
    PhotoUpload,
    decode_photo,
    validate_upload,
)
from templates import TemplateLibrary, TemplateLoadError

PREVIEW_KIND = TemplateKind.VERTICAL


@dataclass(frozen=True)
class GeneratedGraphic:
    edition: Edition
    preview: Image.Image
    full: Dict[TemplateKind, Image.Image]
    filenames: Dict[TemplateKind, str]

    def preview_png(self) -> bytes:
        return encode_png(self.preview)


class Session:
    """
    Everything one user works with: the loaded templates, the reusable
    render targets, the entered name and the current photo selection.

    Photo decoding runs on a worker thread. Every selection gets a new
    token; a decode that finishes after a newer selection is ignored.
    """

    def __init__(
        self,
        edition: Union[Edition, str],
        templates: TemplateLibrary,
        *,
        font_path: Union[str, Path] = NAME_FONT_PATH,
        name_color: str = NAME_COLOR,
        border_color: str = BORDER_COLOR,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
    ):
        self.edition = Edition(edition)
        self.templates = templates.start()
        self.font_path = font_path
        self.name_color = name_color
        self.border_color = border_color
        self.max_upload_bytes = max_upload_bytes

        self.name = ""
        self.result: Optional[GeneratedGraphic] = None

        self.preview_target = RenderTarget(
            *layout_for(self.edition, PREVIEW_KIND, Resolution.PREVIEW).canvas_size
        )
        self.full_targets = {
            kind: RenderTarget(*layout_for(self.edition, kind, Resolution.FULL).canvas_size)
            for kind in self.edition.template_kinds
        }

        self._lock = threading.Lock()
        self._selection = 0
        self._upload: Optional[PhotoUpload] = None
        self._photo: Optional[Image.Image] = None
        self._photo_error: Optional[Exception] = None
        self._photo_ready = threading.Event()

    # ----------------------------
    # Inputs
    # ----------------------------

    @property
    def can_generate(self) -> bool:
        return self.templates.ready.is_set()

    @property
    def has_photo(self) -> bool:
        return self._upload is not None

    @property
    def selection(self) -> int:
        return self._selection

    def set_name(self, value: Optional[str]) -> None:
        self.name = value or ""

    def clear_photo(self) -> None:
        with self._lock:
            self._selection += 1
            self._upload = None
            self._photo = None
            self._photo_error = None
            self._photo_ready.clear()

    def select_photo(self, upload: PhotoUpload) -> int:
        """
        Validate and start decoding a new upload. Returns its selection token.
        An invalid upload clears the current selection and raises.
        """
        try:
            validate_upload(upload, self.edition, max_bytes=self.max_upload_bytes)
        except InvalidFileError as e:
            print(f"[session] Rejected {upload.filename}: {e}")
            self.clear_photo()
            raise

        with self._lock:
            self._selection += 1
            token = self._selection
            self._upload = upload
            self._photo = None
            self._photo_error = None
            self._photo_ready.clear()

        t = threading.Thread(target=self._decode, args=(token, upload.data), daemon=True)
        t.start()
        return token

    def _decode(self, token: int, data: bytes) -> None:
        try:
            photo = decode_photo(data)
        except Exception as e:
            self._finish_decode(token, None, e)
            return
        self._finish_decode(token, photo)

    def _finish_decode(
        self,
        token: int,
        photo: Optional[Image.Image],
        error: Optional[Exception] = None,
    ) -> bool:
        with self._lock:
            if token != self._selection:
                print(f"[session] Ignoring stale photo decode #{token} (current #{self._selection})")
                return False

            self._photo = photo
            self._photo_error = error
            self._photo_ready.set()
            return True

    def wait_photo(self, timeout: Optional[float] = None) -> Image.Image:
        if not self._photo_ready.wait(timeout):
            raise TimeoutError("Photo is still decoding")

        with self._lock:
            if self._photo_error is not None:
                raise self._photo_error
            if self._photo is None:
                raise MissingInputError("Please upload a profile picture")
            return self._photo

    # ----------------------------
    # Generate / export
    # ----------------------------

    def _missing_input_message(self) -> str:
        if self.edition.draws_name:
            return "Please enter your name and upload a profile picture"
        return "Please upload a profile picture"

    def generate(self, timeout: Optional[float] = None) -> GeneratedGraphic:
        """
        Render the vertical preview plus one full-resolution image per
        template, once both the templates and the photo are ready.
        """
        missing_name = self.edition.draws_name and not self.name.strip()
        if missing_name or not self.has_photo:
            raise MissingInputError(self._missing_input_message())

        # join: templates ready + photo decoded, under one deadline
        deadline = None if timeout is None else time.monotonic() + timeout

        if not self.templates.wait(timeout):
            if not self.templates.done:
                raise TimeoutError("Templates are still loading")
            raise TemplateLoadError("Templates are not available, generate is disabled")

        remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
        photo = self.wait_photo(remaining)

        name = self.name if self.edition.draws_name else None
        print(f"[session] Generating {self.edition.value} graphic")

        self._render(self.preview_target, PREVIEW_KIND, Resolution.PREVIEW, photo, name)
        preview = self.preview_target.snapshot()

        full: Dict[TemplateKind, Image.Image] = {}
        filenames: Dict[TemplateKind, str] = {}
        for kind, target in self.full_targets.items():
            self._render(target, kind, Resolution.FULL, photo, name)
            full[kind] = target.snapshot()
            filenames[kind] = export_filename(self.edition, kind, self.name)

        self.result = GeneratedGraphic(
            edition=self.edition,
            preview=preview,
            full=full,
            filenames=filenames,
        )
        return self.result

    def _render(
        self,
        target: RenderTarget,
        kind: TemplateKind,
        resolution: Resolution,
        photo: Image.Image,
        name: Optional[str],
    ) -> None:
        render(
            target,
            self.templates.get(kind),
            photo,
            layout_for(self.edition, kind, resolution),
            name,
            font_path=self.font_path,
            name_color=self.name_color,
            border_color=self.border_color,
        )

    def export(self, directory: Union[str, Path]) -> List[Path]:
        if self.result is None:
            raise RuntimeError("Nothing generated yet")

        return [
            save_png(image, directory, self.result.filenames[kind])
            for kind, image in self.result.full.items()
        ]
