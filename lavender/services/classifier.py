from __future__ import annotations

from pathlib import Path
from typing import Optional

from lavender.config import LavenderConfig
from lavender.schemas.media import Category

_CATEGORY_NAMES = {c.value: c for c in (Category.image, Category.video, Category.audio)}


def classify(token: Optional[str], config: LavenderConfig) -> Category:
    """Map an extension (``png``, ``.PNG``) or a category name (``video``) to a Category.

    Extension lists win over category names, and image > video > audio when an
    extension is listed twice.
    """
    if not token:
        return Category.unknown
    value = token.strip().lower()
    if value.startswith("."):
        value = value[1:]
    if not value:
        return Category.unknown

    exts = config.extensions
    if value in exts.image:
        return Category.image
    if value in exts.video:
        return Category.video
    if value in exts.audio:
        return Category.audio
    return _CATEGORY_NAMES.get(value, Category.unknown)


def classify_path(path: Path, config: LavenderConfig) -> Category:
    return classify(path.suffix, config)


def category_from_mime(mime: Optional[str]) -> Category:
    if not mime:
        return Category.unknown
    major = mime.split("/", 1)[0].strip().lower()
    return _CATEGORY_NAMES.get(major, Category.unknown)
