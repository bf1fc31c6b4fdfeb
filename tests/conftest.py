import os
import sys
from pathlib import Path

import pytest
from PIL import Image

# let plain `pytest` find the lavender package and main.py
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lavender.config import LavenderConfig  # noqa: E402


@pytest.fixture()
def mp4_bytes():
    # 24-byte ISO-BMFF ftyp box with an "isom" brand, enough for MIME sniffing
    return b"\x00\x00\x00\x18ftypisom\x00\x00\x02\x00isommp42" + b"\x00" * 32


@pytest.fixture()
def mp3_bytes():
    return b"ID3\x03\x00\x00\x00\x00\x00\x0f" + b"\x00" * 32


@pytest.fixture()
def media_root(tmp_path):
    root = tmp_path / "media"
    root.mkdir()
    return root.resolve()


@pytest.fixture()
def config(media_root):
    return LavenderConfig(media_path=media_root)


@pytest.fixture()
def write_image():
    def _write(path: Path, size=(32, 32), fmt="PNG", mtime: float | None = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, (180, 120, 200)).save(path, format=fmt)
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _write


@pytest.fixture()
def write_bytes():
    def _write(path: Path, data: bytes, mtime: float | None = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _write
