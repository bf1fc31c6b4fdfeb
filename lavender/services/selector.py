from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from lavender.config import LavenderConfig
from lavender.schemas.media import Category, ReturnKind
from lavender.services.artifacts import derivative_for
from lavender.services.classifier import classify, classify_path
from lavender.services.exceptions import SelectionRangeError
from lavender.services.scanner import ScanEntry


@dataclass(frozen=True)
class SelectedEntry:
    entry: ScanEntry
    category: Category
    target: Path


@dataclass
class Selection:
    entries: Optional[List[SelectedEntry]] = None
    derivatives: Optional[List[SelectedEntry]] = None


def clamp_count(count: Optional[int], available: int) -> int:
    """Zero, negative and missing counts mean 1; anything above ``available`` is cut to it."""
    requested = 1 if count is None else count
    return max(1, min(requested, available))


def resolve_kind(kind: Optional[ReturnKind], master: Optional[bool] = None) -> ReturnKind:
    if kind is not None:
        return kind
    if master is None:
        return ReturnKind.thumbnails
    return ReturnKind.thumbnails if master else ReturnKind.entries


def filter_by_category(
    entries: Sequence[ScanEntry],
    category_filter: Optional[str],
    config: LavenderConfig,
) -> List[Tuple[ScanEntry, Category]]:
    wanted = classify(category_filter, config)
    tagged = [(entry, classify_path(entry.path, config)) for entry in entries]
    if wanted == Category.unknown:
        return tagged
    return [(entry, category) for entry, category in tagged if category == wanted]


def window(items: Sequence, count: Optional[int], offset: Optional[int]) -> list:
    total = len(items)
    if offset is not None:
        if offset < 0 or offset >= total:
            raise SelectionRangeError(f"offset {offset} is out of range for {total} entries")
        size = clamp_count(count, total - offset)
        return list(items[offset : offset + size])
    if total == 0:
        raise SelectionRangeError("no entries match the request")
    return list(items[: clamp_count(count, total)])


def select(
    entries: Sequence[ScanEntry],
    config: LavenderConfig,
    *,
    category_filter: Optional[str] = None,
    kind: ReturnKind = ReturnKind.thumbnails,
    count: Optional[int] = None,
    offset: Optional[int] = None,
) -> Selection:
    """Pick a recency-ordered page out of ``entries``.

    ``entries`` must already be sorted newest first (see scanner.scan). An empty
    page is never returned: it raises SelectionRangeError instead.
    """
    page = window(filter_by_category(entries, category_filter, config), count, offset)

    originals = [SelectedEntry(entry=e, category=c, target=e.path) for e, c in page]
    derived = [
        SelectedEntry(entry=e, category=c, target=derivative_for(e.path, c, config))
        for e, c in page
    ]

    if kind == ReturnKind.entries:
        return Selection(entries=originals)
    if kind == ReturnKind.both:
        return Selection(entries=originals, derivatives=derived)
    return Selection(derivatives=derived)
