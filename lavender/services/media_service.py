from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from lavender.config import LavenderConfig
from lavender.schemas.media import AssetItem, LatestFilesResponse, OptimizeReport, ReturnKind
from lavender.services import asset_loader, optimize_service, scanner
from lavender.services.exceptions import PathOutsideRootError
from lavender.services.selector import SelectedEntry, select


def safe_join(root: Path, relative_path: Optional[str]) -> Path:
    rel = (relative_path or "").replace("\\", "/").lstrip("/")
    candidate = (root / rel).resolve(strict=False)
    try:
        common = os.path.commonpath([candidate, root])
    except ValueError:
        raise PathOutsideRootError(f"invalid path: {relative_path}") from None
    if common != str(root):
        raise PathOutsideRootError(f"path outside media root: {relative_path}")
    return candidate


def get_asset(config: LavenderConfig, relative_path: str) -> AssetItem:
    root = config.media_root
    return asset_loader.load(safe_join(root, relative_path), config, root=root)


def get_asset_name(relative_path: str) -> str:
    return relative_path.replace("\\", "/").rstrip("/").split("/")[-1]


def count_assets(config: LavenderConfig, relpath: Optional[str] = None) -> int:
    return scanner.count_files(safe_join(config.media_root, relpath), config)


def _load_all(selected: Optional[List[SelectedEntry]], config: LavenderConfig) -> Optional[List[AssetItem]]:
    if selected is None:
        return None
    root = config.media_root
    return [asset_loader.load(item.target, config, root=root) for item in selected]


def list_latest(
    config: LavenderConfig,
    *,
    relpath: Optional[str] = None,
    count: Optional[int] = None,
    offset: Optional[int] = None,
    category: Optional[str] = None,
    kind: ReturnKind = ReturnKind.thumbnails,
    recursive: bool = False,
) -> LatestFilesResponse:
    """Return the newest assets under ``relpath``.

    Derivatives are resolved per entry. A derivative that has not been generated
    yet surfaces as AssetNotFoundError from the loader.
    """
    base = safe_join(config.media_root, relpath)
    entries = scanner.scan_with_config(base, config, recursive=recursive)
    selection = select(
        entries,
        config,
        category_filter=category,
        kind=kind,
        count=count,
        offset=offset,
    )
    return LatestFilesResponse(
        entries=_load_all(selection.entries, config),
        thumbnails=_load_all(selection.derivatives, config),
    )


def optimize(config: LavenderConfig, relpath: Optional[str] = None) -> OptimizeReport:
    base = safe_join(config.media_root, relpath)
    print(f"[optimize] scanning {base}")
    report = optimize_service.optimize(base, config)
    print(
        f"[optimize] done: created={len(report.created)} existing={report.skipped_existing} "
        f"small={report.skipped_small} failed={len(report.failed)}"
    )
    return report
