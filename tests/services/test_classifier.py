from __future__ import annotations

from pathlib import Path

import pytest

from lavender.config import ExtensionSettings, LavenderConfig
from lavender.schemas.media import Category
from lavender.services.classifier import category_from_mime, classify, classify_path


@pytest.mark.parametrize(
    "token, expected",
    [
        ("png", Category.image),
        ("PNG", Category.image),
        (".jpg", Category.image),
        ("mp4", Category.video),
        ("flac", Category.audio),
        ("txt", Category.unknown),
        ("", Category.unknown),
        (None, Category.unknown),
        (".", Category.unknown),
    ],
)
def test_classify_extensions(config, token, expected):
    assert classify(token, config) == expected


@pytest.mark.parametrize("token", ["image", "video", "audio", "VIDEO"])
def test_classify_accepts_category_names(config, token):
    assert classify(token, config) == Category(token.lower())


def test_unknown_is_not_a_filter_token(config):
    assert classify("unknown", config) == Category.unknown


def test_extension_listed_twice_prefers_image_then_video(tmp_path):
    config = LavenderConfig(
        media_path=tmp_path,
        extensions=ExtensionSettings(image=["dup"], video=["dup", "twice"], audio=["twice"]),
    )
    assert classify("dup", config) == Category.image
    assert classify("twice", config) == Category.video


def test_extension_list_beats_category_name(tmp_path):
    config = LavenderConfig(media_path=tmp_path, extensions=ExtensionSettings(audio=["video"]))
    assert classify("video", config) == Category.audio


def test_classify_path_uses_last_suffix(config):
    assert classify_path(Path("/m/clip.tar.mp4"), config) == Category.video
    assert classify_path(Path("/m/README"), config) == Category.unknown


@pytest.mark.parametrize(
    "mime, expected",
    [
        ("image/png", Category.image),
        ("video/mp4", Category.video),
        ("audio/mpeg", Category.audio),
        ("application/pdf", Category.unknown),
        (None, Category.unknown),
    ],
)
def test_category_from_mime(mime, expected):
    assert category_from_mime(mime) == expected
