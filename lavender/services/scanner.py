from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List

from lavender.config import LavenderConfig
from lavender.services.artifacts import THUMBNAILS_DIRNAME, is_derivative
from lavender.services.exceptions import FilesystemError


@dataclass(frozen=True)
class ScanEntry:
    path: Path
    modified_ns: int


def _ensure_readable_dir(root: Path) -> Path:
    resolved = Path(root).expanduser().resolve(strict=False)
    if not resolved.exists():
        raise FilesystemError(f"path does not exist: {resolved}")
    if not resolved.is_dir():
        raise FilesystemError(f"path is not a directory: {resolved}")
    if not os.access(resolved, os.R_OK):
        raise FilesystemError(f"no read permission: {resolved}")
    return resolved


def _walk(
    root: Path,
    recursive: bool,
    *,
    include_hidden: bool,
    exclude_derivatives: bool,
) -> Iterator[os.DirEntry]:
    pending = [root]
    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as it:
                children = list(it)
        except OSError as exc:
            if current == root:
                raise FilesystemError(f"cannot read directory: {root}") from exc
            # unreadable sub-directories are skipped, not fatal
            continue
        for child in children:
            if not include_hidden and child.name.startswith("."):
                continue
            try:
                if child.is_dir(follow_symlinks=False):
                    if not recursive:
                        continue
                    if exclude_derivatives and child.name == THUMBNAILS_DIRNAME:
                        continue
                    pending.append(Path(child.path))
                elif child.is_file():
                    yield child
            except OSError:
                continue


def scan(
    root: Path,
    recursive: bool = True,
    *,
    include_hidden: bool = False,
    exclude_derivatives: bool = True,
    exclude_extensions: Iterable[str] = (),
) -> List[ScanEntry]:
    """Collect files under ``root``, most recently modified first.

    Ties on mtime are broken by path so repeated scans of an unchanged tree
    return the same order.
    """
    base = _ensure_readable_dir(root)
    excluded = {ext.lower().lstrip(".") for ext in exclude_extensions}

    entries: List[ScanEntry] = []
    for item in _walk(base, recursive, include_hidden=include_hidden, exclude_derivatives=exclude_derivatives):
        path = Path(item.path)
        ext = path.suffix.lower().lstrip(".")
        if not ext or ext in excluded:
            continue
        if exclude_derivatives and is_derivative(path):
            continue
        try:
            st = item.stat()
        except OSError:
            continue
        entries.append(ScanEntry(path=path, modified_ns=st.st_mtime_ns))

    entries.sort(key=lambda e: (-e.modified_ns, str(e.path)))
    return entries


def scan_with_config(root: Path, config: LavenderConfig, *, recursive: bool = True) -> List[ScanEntry]:
    return scan(
        root,
        recursive,
        include_hidden=config.scan.include_hidden,
        exclude_derivatives=True,
        exclude_extensions=config.scan.exclude_extensions,
    )


def count_files(root: Path, config: LavenderConfig) -> int:
    return len(scan_with_config(root, config, recursive=True))
