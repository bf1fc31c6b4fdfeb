from __future__ import annotations

"""
Derivative paths
----------------
Two on-disk conventions link an original to its generated variant:

- master:     <dir>/<stem>_master<suffix>        (downscaled images)
- thumbnails: <dir>/thumbnails/<stem>.<thumb-ext>

Everything here is pure path arithmetic. Nothing checks existence, because a
derivative may appear after the path was computed; the loader reports it missing.
"""

from pathlib import Path

from lavender.config import DerivativeConvention, LavenderConfig
from lavender.schemas.media import Category

MASTER_SUFFIX = "_master"
THUMBNAILS_DIRNAME = "thumbnails"


def master_path(original: Path) -> Path:
    original = Path(original)
    return original.parent / f"{original.stem}{MASTER_SUFFIX}{original.suffix}"


def thumbnail_path(original: Path, thumbnail_ext: str = "webp") -> Path:
    original = Path(original)
    ext = thumbnail_ext.lstrip(".")
    return original.parent / THUMBNAILS_DIRNAME / f"{original.stem}.{ext}"


def derivative_path(
    original: Path,
    category: Category,
    convention: DerivativeConvention = DerivativeConvention.master,
    thumbnail_ext: str = "webp",
) -> Path:
    if convention == DerivativeConvention.master and category == Category.image:
        return master_path(original)
    return thumbnail_path(original, thumbnail_ext)


def derivative_for(original: Path, category: Category, config: LavenderConfig) -> Path:
    settings = config.derivatives
    return derivative_path(original, category, settings.convention, settings.thumbnail_extension)


def is_derivative(path: Path) -> bool:
    path = Path(path)
    if path.parent.name == THUMBNAILS_DIRNAME:
        return True
    return path.stem.endswith(MASTER_SUFFIX)


__all__ = [
    "MASTER_SUFFIX",
    "THUMBNAILS_DIRNAME",
    "derivative_for",
    "derivative_path",
    "is_derivative",
    "master_path",
    "thumbnail_path",
]
