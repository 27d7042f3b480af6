from __future__ import annotations

import pytest

from assessment_app.core.image_store import ImageStore


def test_save_returns_public_url(tmp_path):
    store = ImageStore(tmp_path / "images", "/images/")

    url = store.save("my photo.PNG", b"\x89PNG")

    assert url.startswith("/images/")
    assert url.endswith("_my_photo.PNG")
    path = store.path_for_url(url)
    assert path is not None
    assert path.read_bytes() == b"\x89PNG"


def test_save_file_uses_source_name(tmp_path):
    source = tmp_path / "diagram.jpg"
    source.write_bytes(b"jpeg")
    store = ImageStore(tmp_path / "images")

    url = store.save_file(source)

    assert url.endswith("_diagram.jpg")


@pytest.mark.parametrize(("name", "data"), [("notes.txt", b"x"), ("", b"x"), ("image.png", b"")])
def test_rejects_bad_uploads(tmp_path, name, data):
    store = ImageStore(tmp_path)
    with pytest.raises(ValueError):
        store.save(name, data)


def test_path_for_foreign_url(tmp_path):
    assert ImageStore(tmp_path).path_for_url("https://example.com/a.png") is None
