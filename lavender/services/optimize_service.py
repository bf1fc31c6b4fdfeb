from __future__ import annotations

"""
Optimize Service
----------------
Creates downscaled derivatives ("masters") for oversized images so listings can
ship small payloads.

- Only images (by extension) that do not already have a derivative are opened.
- Images larger than ``master_threshold`` on either side are resized by
  ``master_ratio`` (bicubic) and written where artifacts.derivative_for says.
- master convention: format ``master_format`` (PNG); thumbnails convention: the
  format matching ``thumbnail_extension`` (WEBP by default).
- Output goes to a hidden temp file first and is renamed into place, so readers
  never see a half-written derivative. Each write uses its own temp name and an
  existing derivative is never replaced.
- Broken images are reported and skipped; only an unreadable root aborts the run.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from PIL import Image

from lavender.config import DerivativeConvention, LavenderConfig
from lavender.schemas.media import Category, OptimizeFailure, OptimizeReport
from lavender.services.artifacts import derivative_for
from lavender.services.asset_loader import relative_display
from lavender.services.classifier import classify_path
from lavender.services.scanner import scan_with_config

_RESAMPLE = Image.Resampling.BICUBIC


def output_format(config: LavenderConfig) -> str:
    settings = config.derivatives
    if settings.convention == DerivativeConvention.master:
        return settings.master_format.upper()
    return Image.registered_extensions().get(f".{settings.thumbnail_extension}", "WEBP")


def needs_master(size: tuple[int, int], threshold: int) -> bool:
    width, height = size
    return width > threshold or height > threshold


def _prepare_mode(img: Image.Image, fmt: str) -> Image.Image:
    if fmt == "JPEG":
        return img if img.mode in {"RGB", "L"} else img.convert("RGB")
    if img.mode in {"RGB", "RGBA", "L", "LA"}:
        return img
    return img.convert("RGBA")


def write_master(img: Image.Image, dest: Path, *, ratio: float, fmt: str) -> Optional[tuple[int, int]]:
    """Write a downscaled copy of ``img`` to ``dest``.

    Returns the new size, or None when ``dest`` appeared while encoding (another
    run got there first). An existing ``dest`` is never replaced.
    """
    width, height = img.size
    new_size = (max(1, int(width * ratio)), max(1, int(height * ratio)))
    resized = _prepare_mode(img.resize(new_size, _RESAMPLE), fmt)

    dest.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=dest.parent, prefix=f".{dest.stem}.", suffix=".part")
    os.close(fd)
    tmp = Path(tmp_name)
    try:
        resized.save(tmp, format=fmt)
        if dest.exists():
            return None
        os.replace(tmp, dest)
    finally:
        if tmp.exists():
            try:
                tmp.unlink()
            except OSError:
                pass
    return new_size


def optimize(root: Path, config: LavenderConfig) -> OptimizeReport:
    settings = config.derivatives
    fmt = output_format(config)
    base = config.media_root
    report = OptimizeReport()

    for entry in scan_with_config(root, config, recursive=True):
        src = entry.path
        category = classify_path(src, config)
        if category != Category.image:
            continue
        dest = derivative_for(src, category, config)
        if dest.exists():
            report.skipped_existing += 1
            continue

        shown = relative_display(src, base)
        try:
            with Image.open(src) as img:
                if not needs_master(img.size, settings.master_threshold):
                    report.skipped_small += 1
                    continue
                new_size = write_master(img, dest, ratio=settings.master_ratio, fmt=fmt)
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            print(f"[optimize] skipped {shown}: {exc}")
            report.failed.append(OptimizeFailure(path=shown, reason=str(exc) or exc.__class__.__name__))
            continue
        if new_size is None:
            report.skipped_existing += 1
            continue

        print(f"[optimize] wrote {relative_display(dest, base)} ({new_size[0]}x{new_size[1]})")
        report.created.append(relative_display(dest, base))

    return report
