from __future__ import annotations

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse

from lavender.config import LavenderConfig
from lavender.schemas.media import AssetItem, LatestFilesResponse, OptimizeReport, ReturnKind
from lavender.services import media_service
from lavender.services.auth import API_KEY_HEADER, verify_api_key
from lavender.services.exceptions import ServiceError
from lavender.services.selector import resolve_kind


def get_config(request: Request) -> LavenderConfig:
    config = getattr(request.app.state, "config", None)
    if config is None:
        raise HTTPException(status_code=500, detail="configuration not loaded")
    return config


def _raise_service_error(exc: ServiceError):
    detail = str(exc) or exc.__class__.__name__
    raise HTTPException(status_code=exc.status_code, detail=detail)


def require_api_key(
    api_key: str | None = Header(None, alias=API_KEY_HEADER),
    config: LavenderConfig = Depends(get_config),
) -> None:
    try:
        verify_api_key(api_key, config.api_hash)
    except ServiceError as exc:
        _raise_service_error(exc)


router = APIRouter(tags=["media"], dependencies=[Depends(require_api_key)])


@router.get("/file", response_model=AssetItem)
def get_file(
    path: str = Query(..., description="Path relative to the media root"),
    name_only: bool = Query(False, description="Only return the file name"),
    config: LavenderConfig = Depends(get_config),
):
    if name_only:
        return PlainTextResponse(media_service.get_asset_name(path))
    try:
        return media_service.get_asset(config, path)
    except ServiceError as exc:
        _raise_service_error(exc)


@router.get("/amount", response_class=PlainTextResponse)
def file_amount(
    relpath: str | None = Query(None, description="Sub-directory to count, defaults to the root"),
    config: LavenderConfig = Depends(get_config),
):
    try:
        return PlainTextResponse(str(media_service.count_assets(config, relpath)))
    except ServiceError as exc:
        _raise_service_error(exc)


@router.get("/latest", response_model=LatestFilesResponse)
def get_latest_files(
    count: int | None = Query(None, description="Number of assets; <1 means 1"),
    relpath: str | None = Query(None, description="Sub-directory to list"),
    offset: int | None = Query(None, description="Skip this many of the newest assets"),
    category: str | None = Query(None, alias="type", description="image/video/audio or an extension"),
    kind: ReturnKind | None = Query(None, description="entries, thumbnails or both"),
    master: bool | None = Query(None, description="Legacy toggle: true = thumbnails, false = entries"),
    recursive: bool = Query(False),
    config: LavenderConfig = Depends(get_config),
):
    try:
        return media_service.list_latest(
            config,
            relpath=relpath,
            count=count,
            offset=offset,
            category=category,
            kind=resolve_kind(kind, master),
            recursive=recursive,
        )
    except ServiceError as exc:
        _raise_service_error(exc)


@router.get("/optimize", response_model=OptimizeReport)
def create_optimized_images(
    relpath: str | None = Query(None),
    config: LavenderConfig = Depends(get_config),
):
    try:
        return media_service.optimize(config, relpath)
    except ServiceError as exc:
        _raise_service_error(exc)
