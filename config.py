"""
Global configuration for the profile frame generator.

Loads overrides from .env (TEMPLATE_*, NAME_*, MAX_UPLOAD_BYTES, ...),
and defines paths used across the app.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


BASE_DIR = Path(__file__).resolve().parent
ASSETS_DIR = BASE_DIR / "assets"
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", str(BASE_DIR / "output")))
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)


# ----------------------------
# Background templates
# ----------------------------
# Local paths or http(s) URLs. Place the files under ./assets/ to match
# the defaults below.

TEMPLATE_VERTICAL_SOURCE = os.getenv(
    "TEMPLATE_VERTICAL_SOURCE",
    str(ASSETS_DIR / "template_story.png"),
)

TEMPLATE_SQUARE_SOURCE = os.getenv(
    "TEMPLATE_SQUARE_SOURCE",
    str(ASSETS_DIR / "template_post.png"),
)

# Templates load once at startup; generate stays disabled until they do.
TEMPLATE_LOAD_TIMEOUT_SECONDS = float(os.getenv("TEMPLATE_LOAD_TIMEOUT_SECONDS", "30"))
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "60"))


# ----------------------------
# Name text / border styling
# ----------------------------

NAME_FONT_PATH = Path(
    os.getenv(
        "NAME_FONT_PATH",
        str(ASSETS_DIR / "fonts" / "Poppins-Regular.ttf"),
    )
)

NAME_COLOR = os.getenv("NAME_COLOR", "#000000")
BORDER_COLOR = os.getenv("BORDER_COLOR", "#FFFFFF")


# ----------------------------
# Upload validation
# ----------------------------

MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))  # 5 MiB
ALLOWED_MIME_TYPES = ("image/jpeg", "image/png")


# ----------------------------
# Export
# ----------------------------

EXPORT_PREFIX = os.getenv("EXPORT_PREFIX", "Wireframed2024")
DEFAULT_EDITION = os.getenv("DEFAULT_EDITION", "v3")
