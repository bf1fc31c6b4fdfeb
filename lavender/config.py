from __future__ import annotations

"""
Configuration
-------------
Loads ``lavender.toml`` once at startup into an immutable model that is passed
to every service call.

- ``[config]``: host, port, media_path, api_hash
- ``[extensions]``: image / video / audio lists (no leading dot)
- ``[derivatives]``: master vs. thumbnails convention and downscale knobs
- ``[scan]`` / ``[loader]``: listing and validation switches

Environment overrides: LAVENDER_CONFIG, LAVENDER_HOST, LAVENDER_PORT,
LAVENDER_MEDIA_PATH, LAVENDER_API_HASH.
"""

import os
import tomllib
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional, Tuple

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from lavender.services.exceptions import ConfigError

DEFAULT_CONFIG_FILE = "lavender.toml"

DEFAULT_IMAGE_EXTS = ("png", "jpg", "jpeg", "gif", "bmp", "webp")
DEFAULT_VIDEO_EXTS = ("mp4", "mov", "avi", "mkv", "webm")
DEFAULT_AUDIO_EXTS = ("mp3", "wav", "flac", "ogg", "m4a")


def _normalize_exts(values) -> Tuple[str, ...]:
    out = []
    for raw in values or ():
        ext = str(raw).strip().lower().lstrip(".")
        if ext and ext not in out:
            out.append(ext)
    return tuple(out)


class DerivativeConvention(str, Enum):
    master = "master"
    thumbnails = "thumbnails"


class ExtensionSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    image: Tuple[str, ...] = DEFAULT_IMAGE_EXTS
    video: Tuple[str, ...] = DEFAULT_VIDEO_EXTS
    audio: Tuple[str, ...] = DEFAULT_AUDIO_EXTS

    @field_validator("image", "video", "audio", mode="before")
    @classmethod
    def _lower(cls, value):
        return _normalize_exts(value)


class DerivativeSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    convention: DerivativeConvention = DerivativeConvention.master
    thumbnail_extension: str = Field(default="webp", description="Extension of files under thumbnails/")
    master_threshold: int = Field(default=640, ge=1, description="Images wider or taller than this get a master")
    master_ratio: float = Field(default=0.25, gt=0, le=1)
    master_format: str = Field(default="PNG", description="Pillow format name for master files")

    @field_validator("thumbnail_extension", mode="before")
    @classmethod
    def _strip_dot(cls, value):
        return str(value).strip().lower().lstrip(".")

    @field_validator("master_format", mode="before")
    @classmethod
    def _writable_format(cls, value):
        fmt = str(value).strip().upper()
        Image.init()
        if fmt not in Image.SAVE:
            raise ValueError(f"Pillow cannot write {value!r}; use a format name such as PNG or JPEG")
        return fmt


class ScanSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    include_hidden: bool = False
    exclude_extensions: Tuple[str, ...] = ()

    @field_validator("exclude_extensions", mode="before")
    @classmethod
    def _lower(cls, value):
        return _normalize_exts(value)


class LoaderSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    sniff_mime: bool = Field(default=True, description="Validate assets by content instead of extension")


class LavenderConfig(BaseModel):
    """Process-wide settings; built once and never mutated."""

    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    media_path: Path
    api_hash: Optional[str] = Field(default=None, description="Hex SHA3-256 digest of the API key")
    extensions: ExtensionSettings = Field(default_factory=ExtensionSettings)
    derivatives: DerivativeSettings = Field(default_factory=DerivativeSettings)
    scan: ScanSettings = Field(default_factory=ScanSettings)
    loader: LoaderSettings = Field(default_factory=LoaderSettings)

    @property
    def media_root(self) -> Path:
        return self.media_path.expanduser().resolve(strict=False)


def load_config(
    path: str | os.PathLike | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> LavenderConfig:
    env = os.environ if environ is None else environ
    target = Path(path or env.get("LAVENDER_CONFIG") or DEFAULT_CONFIG_FILE).expanduser()
    try:
        with open(target, "rb") as fh:
            raw = tomllib.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(f"config file not found: {target}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {target}: {exc}") from exc

    data = dict(raw.get("config") or {})
    for section in ("extensions", "derivatives", "scan", "loader"):
        if section in raw:
            data[section] = raw[section]

    for key in ("host", "port", "media_path", "api_hash"):
        value = env.get(f"LAVENDER_{key.upper()}")
        if value:
            data[key] = value

    # relative media paths are anchored at the config file, not the cwd
    media_path = data.get("media_path")
    if media_path and not Path(str(media_path)).expanduser().is_absolute():
        data["media_path"] = target.resolve().parent / str(media_path)

    try:
        return LavenderConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"invalid config in {target}: {exc}") from exc


__all__ = [
    "DerivativeConvention",
    "DerivativeSettings",
    "ExtensionSettings",
    "LavenderConfig",
    "LoaderSettings",
    "ScanSettings",
    "load_config",
]
