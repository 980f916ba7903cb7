# templates.py

from __future__ import annotations

import threading
from io import BytesIO
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

import requests
from PIL import Image

from config import HTTP_TIMEOUT_SECONDS, TEMPLATE_SQUARE_SOURCE, TEMPLATE_VERTICAL_SOURCE
from layouts import Edition, TemplateKind

Source = Union[str, Path]


class TemplateLoadError(RuntimeError):
    pass


def default_sources(edition: Edition) -> Dict[TemplateKind, Source]:
    configured = {
        TemplateKind.VERTICAL: TEMPLATE_VERTICAL_SOURCE,
        TemplateKind.SQUARE: TEMPLATE_SQUARE_SOURCE,
    }
    return {kind: configured[kind] for kind in Edition(edition).template_kinds}


def _read_source(source: Source) -> bytes:
    source_str = str(source)

    if source_str.startswith(("http://", "https://")):
        response = requests.get(source_str, timeout=HTTP_TIMEOUT_SECONDS)
        response.raise_for_status()
        return response.content

    path = Path(source_str)
    if not path.exists():
        raise FileNotFoundError(f"Template image not found: {path}")
    return path.read_bytes()


def load_template(source: Source) -> Image.Image:
    """
    Load a background template from a local path or a public http(s) URL.
    The bitmap is fully decoded and converted to RGBA.
    """
    try:
        data = _read_source(source)
        template = Image.open(BytesIO(data))
        template.load()
    except (OSError, Image.DecompressionBombError, ValueError, requests.RequestException) as e:
        raise TemplateLoadError(f"Could not load template {source}: {e}") from e

    w, h = template.size
    if w == 0 or h == 0:
        raise TemplateLoadError(f"Template {source} has zero dimension")

    return template.convert("RGBA")


class TemplateLibrary:
    """
    Loads every template once, in parallel, and reuses them for all renders.

    `ready` is only set when every template loaded. A failed load leaves the
    library un-ready for good: there is no retry.
    """

    def __init__(self, sources: Mapping[TemplateKind, Source]):
        self.sources = {TemplateKind(k): v for k, v in sources.items()}
        self.ready = threading.Event()
        self.errors: Dict[TemplateKind, Exception] = {}
        self._templates: Dict[TemplateKind, Image.Image] = {}
        self._lock = threading.Lock()
        self._threads: List[threading.Thread] = []
        self._done = threading.Event()

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    def start(self) -> "TemplateLibrary":
        if self._threads or self._done.is_set():
            return self

        if not self.sources:
            self.ready.set()
            self._done.set()
            return self

        for kind in self.sources:
            t = threading.Thread(target=self._load_one, args=(kind,), daemon=True)
            self._threads.append(t)

        for t in self._threads:
            t.start()

        return self

    def _load_one(self, kind: TemplateKind) -> None:
        source = self.sources[kind]
        try:
            template = load_template(source)
        except Exception as e:
            print(f"[templates] Failed to load {kind.value} template: {e}")
            with self._lock:
                self.errors[kind] = e
                self._check_done()
            return

        print(f"[templates] Loaded {kind.value} template {template.width}x{template.height}")
        with self._lock:
            self._templates[kind] = template
            self._check_done()

    def _check_done(self) -> None:
        if len(self._templates) + len(self.errors) < len(self.sources):
            return
        if not self.errors:
            self.ready.set()
        self._done.set()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until every load finished. Returns True if all succeeded."""
        self._done.wait(timeout)
        return self.ready.is_set()

    def get(self, kind: TemplateKind) -> Image.Image:
        kind = TemplateKind(kind)
        if not self.ready.is_set():
            raise RuntimeError("Templates are not loaded yet")
        return self._templates[kind]
