from __future__ import annotations

import base64
import mimetypes
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

import filetype

from lavender.config import LavenderConfig
from lavender.schemas.media import AssetItem, Category
from lavender.services.classifier import category_from_mime, classify, classify_path
from lavender.services.exceptions import AssetNotFoundError, AssetValidationError


def sniff(data: bytes, config: LavenderConfig) -> Tuple[Optional[str], Category]:
    """Guess MIME type and category from the file content.

    The sniffed format's canonical extension must be listed under the same
    category in ``[extensions]``; otherwise the category is unknown.
    """
    kind = filetype.guess(data) if data else None
    if kind is None:
        return None, Category.unknown
    category = category_from_mime(kind.mime)
    if classify(kind.extension, config) != category:
        return kind.mime, Category.unknown
    return kind.mime, category


def relative_display(path: Path, root: Optional[Path]) -> str:
    if root is not None:
        try:
            return path.relative_to(root).as_posix()
        except ValueError:
            pass
    return path.as_posix()


def load(path: Path, config: LavenderConfig, *, root: Optional[Path] = None) -> AssetItem:
    """Read one file and turn it into an AssetItem.

    Missing or unreadable files raise AssetNotFoundError. Files that exist but
    are empty or not a supported image/video/audio raise AssetValidationError.
    With ``loader.sniff_mime`` on, the type comes from the file content and the
    file name's extension is ignored.
    """
    target = Path(path)
    shown = relative_display(target, root)
    if not target.is_file():
        raise AssetNotFoundError(f"file not found: {shown}")
    try:
        data = target.read_bytes()
        st = target.stat()
    except OSError as exc:
        raise AssetNotFoundError(f"cannot read file: {shown}") from exc

    name = target.name
    if not name:
        raise AssetValidationError(f"file has no name: {shown}")
    if not data:
        raise AssetValidationError(f"file is empty: {shown}")

    if config.loader.sniff_mime:
        mime, category = sniff(data, config)
    else:
        mime, _ = mimetypes.guess_type(name)
        category = classify_path(target, config)
    if category == Category.unknown:
        detail = f" ({mime})" if mime else ""
        raise AssetValidationError(f"unsupported media type{detail}: {shown}")

    payload = base64.b64encode(data).decode("ascii")
    if not payload:
        raise AssetValidationError(f"empty payload: {shown}")

    return AssetItem(
        path=shown,
        name=name,
        category=category,
        mime=mime,
        modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc).isoformat(),
        size=st.st_size,
        base64=payload,
    )
