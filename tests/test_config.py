from __future__ import annotations

import pytest
from pydantic import ValidationError

from lavender.config import DerivativeConvention, DerivativeSettings, load_config
from lavender.services.exceptions import ConfigError

SAMPLE = """
[config]
port = 9000
media_path = "library"

[extensions]
image = [".PNG", "jpg", "jpg"]
video = ["mp4"]
audio = ["mp3"]

[derivatives]
convention = "thumbnails"
thumbnail_extension = ".webp"

[scan]
exclude_extensions = ["WEBP"]
"""


@pytest.fixture()
def config_file(tmp_path):
    path = tmp_path / "lavender.toml"
    path.write_text(SAMPLE, encoding="utf-8")
    return path


def test_load_config_reads_tables(config_file, tmp_path):
    config = load_config(config_file, environ={})

    assert config.port == 9000
    assert config.host == "0.0.0.0"
    assert config.media_root == (tmp_path / "library").resolve()
    assert config.extensions.image == ("png", "jpg")
    assert config.extensions.video == ("mp4",)
    assert config.derivatives.convention == DerivativeConvention.thumbnails
    assert config.derivatives.thumbnail_extension == "webp"
    assert config.derivatives.master_threshold == 640
    assert config.scan.exclude_extensions == ("webp",)
    assert config.loader.sniff_mime is True
    assert config.api_hash is None


def test_environment_overrides(config_file, tmp_path):
    elsewhere = tmp_path / "elsewhere"
    config = load_config(
        config_file,
        environ={
            "LAVENDER_PORT": "8123",
            "LAVENDER_MEDIA_PATH": str(elsewhere),
            "LAVENDER_API_HASH": "abc123",
        },
    )
    assert config.port == 8123
    assert config.media_root == elsewhere.resolve()
    assert config.api_hash == "abc123"


def test_config_path_from_environment(config_file):
    config = load_config(environ={"LAVENDER_CONFIG": str(config_file)})
    assert config.port == 9000


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.toml", environ={})


def test_malformed_toml(tmp_path):
    path = tmp_path / "broken.toml"
    path.write_text("[config\nport = ", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path, environ={})


def test_invalid_values(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text('[config]\nmedia_path = "m"\n[derivatives]\nconvention = "sideways"\n', encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path, environ={})


def test_media_path_is_required(tmp_path):
    path = tmp_path / "empty.toml"
    path.write_text("[config]\nport = 1234\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path, environ={})


def test_config_is_immutable(config_file):
    config = load_config(config_file, environ={})
    with pytest.raises(ValidationError):
        config.port = 1


def test_master_format_is_normalized():
    assert DerivativeSettings(master_format=" jpeg ").master_format == "JPEG"
    assert DerivativeSettings().master_format == "PNG"


@pytest.mark.parametrize("fmt", ["JPG", "png8", ""])
def test_unwritable_master_format_is_rejected(tmp_path, fmt):
    path = tmp_path / "fmt.toml"
    path.write_text(f'[config]\nmedia_path = "m"\n[derivatives]\nmaster_format = "{fmt}"\n', encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path, environ={})
    with pytest.raises(ValidationError):
        DerivativeSettings(master_format=fmt)
