from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Category(str, Enum):
    image = "image"
    video = "video"
    audio = "audio"
    unknown = "unknown"


class ReturnKind(str, Enum):
    entries = "entries"
    thumbnails = "thumbnails"
    both = "both"


class AssetItem(BaseModel):
    path: str = Field(..., description="Path relative to the media root, '/' separated")
    name: str
    category: Category
    mime: Optional[str] = None
    modified: str
    size: int
    base64: str


class LatestFilesResponse(BaseModel):
    entries: Optional[List[AssetItem]] = None
    thumbnails: Optional[List[AssetItem]] = None


class OptimizeFailure(BaseModel):
    path: str
    reason: str


class OptimizeReport(BaseModel):
    created: List[str] = []
    skipped_existing: int = 0
    skipped_small: int = 0
    failed: List[OptimizeFailure] = []
