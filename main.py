# main.py
#
# Usage:
#   python main.py --photo me.jpg --name "Jane Doe" --edition v2
#   python main.py --photo me.png --out ./exports --preview preview.png

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from config import DEFAULT_EDITION, OUTPUT_DIR, TEMPLATE_LOAD_TIMEOUT_SECONDS
from exporter import save_png
from layouts import Edition
from photo_loader import InvalidFileError, MissingInputError, PhotoUpload
from session import Session
from templates import TemplateLibrary, TemplateLoadError, default_sources


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Put your photo (and name) on the event frame templates"
    )
    ap.add_argument("--photo", required=True, help="Profile photo (JPEG or PNG)")
    ap.add_argument("--name", default="", help="Name printed under the photo (v1/v2)")
    ap.add_argument(
        "--edition",
        default=DEFAULT_EDITION,
        choices=[e.value for e in Edition],
        help="Generator edition",
    )
    ap.add_argument("--out", default=str(OUTPUT_DIR), help="Directory for the PNG exports")
    ap.add_argument("--preview", default=None, help="Also write the preview PNG here")
    return ap


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    edition = Edition(args.edition)

    library = TemplateLibrary(default_sources(edition))
    session = Session(edition, library)
    session.set_name(args.name)

    try:
        session.select_photo(PhotoUpload.from_path(args.photo))
        result = session.generate(timeout=TEMPLATE_LOAD_TIMEOUT_SECONDS)
        paths = session.export(args.out)
    except (
        MissingInputError,
        InvalidFileError,
        TemplateLoadError,
        OSError,
        TimeoutError,
    ) as e:
        print(f"[main] Error: {e}")
        return 1

    if args.preview:
        preview_path = Path(args.preview)
        save_png(result.preview, preview_path.parent, preview_path.name)

    for p in paths:
        print(f"[main] Wrote {p}")
    return 0


if __name__ == "__main__":
    sys.exit(run())
