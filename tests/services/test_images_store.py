"""Tests for the filesystem image store."""

import re

import pytest

from solo_stage.services.images import ImageStore, ImageValidationError, content_type_for

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture()
def store(tmp_path) -> ImageStore:
    return ImageStore(tmp_path / "images", public_base_url="https://blog.example/", max_bytes=1024)


def test_save_writes_file_and_builds_url(store) -> None:
    stored = store.save(PNG_BYTES, "image/png")

    assert re.fullmatch(r"\d{13}-[0-9a-f]{8}\.png", stored.filename)
    assert stored.url == f"https://blog.example/images/{stored.filename}"
    assert stored.content_type == "image/png"
    assert store.path_for(stored.filename).read_bytes() == PNG_BYTES


@pytest.mark.parametrize(
    ("content_type", "extension"),
    [
        ("image/jpeg", "jpg"),
        ("image/jpg", "jpg"),
        ("image/gif", "gif"),
        ("image/webp", "webp"),
        ("IMAGE/PNG", "png"),
    ],
)
def test_allowed_types(store, content_type, extension) -> None:
    assert store.validate(content_type, 10) == extension


@pytest.mark.parametrize("content_type", ["text/plain", "image/svg+xml", None, ""])
def test_rejects_other_types(store, content_type) -> None:
    with pytest.raises(ImageValidationError, match="Invalid file type"):
        store.validate(content_type, 10)


def test_rejects_oversized_file(tmp_path) -> None:
    store = ImageStore(tmp_path, public_base_url="https://blog.example", max_bytes=5 * 1024 * 1024)

    with pytest.raises(ImageValidationError, match="File size exceeds 5MB limit"):
        store.validate("image/png", 5 * 1024 * 1024 + 1)

    assert store.validate("image/png", 5 * 1024 * 1024) == "png"


def test_rejects_empty_file(store) -> None:
    with pytest.raises(ImageValidationError, match="No image file provided"):
        store.save(b"", "image/png")


@pytest.mark.parametrize(
    "filename",
    ["../secret.png", "1700000000000-deadbeef.exe", "notes.txt", "1700000000000-deadbeef.png"],
)
def test_path_for_unknown_or_malformed(store, filename) -> None:
    assert store.path_for(filename) is None


def test_content_type_for_extension() -> None:
    assert content_type_for("1700000000000-deadbeef.webp") == "image/webp"
    assert content_type_for("file.bin") == "application/octet-stream"
