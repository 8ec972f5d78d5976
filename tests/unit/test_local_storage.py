from __future__ import annotations

from app.infrastructure.storage import LocalFileStorage


def test_save_writes_under_folder(tmp_path):
    storage = LocalFileStorage(str(tmp_path), public_base_url="/media/")

    blob = storage.save(b"jpeg-bytes", filename="Shop Front.JPG", folder="retailers/outlet_photos",
                        content_type="image/jpeg")

    assert blob.identifier.startswith("retailers/outlet_photos/")
    assert blob.identifier.endswith(".jpg")
    assert blob.url == f"/media/{blob.identifier}"
    assert blob.size == len(b"jpeg-bytes")
    assert (tmp_path / blob.identifier).read_bytes() == b"jpeg-bytes"
    assert blob.to_reference() == {"url": blob.url, "publicId": blob.identifier}


def test_folder_traversal_is_neutralized(tmp_path):
    storage = LocalFileStorage(str(tmp_path / "root"))

    blob = storage.save(b"x", filename="../../etc/passwd", folder="../../outside")

    assert not blob.identifier.startswith("..")
    assert (tmp_path / "root" / blob.identifier).is_file()


def test_delete_and_exists(tmp_path):
    storage = LocalFileStorage(str(tmp_path))
    blob = storage.save(b"x", filename="form.pdf", folder="retailers/registration_forms")

    assert storage.exists(blob.identifier)
    assert storage.delete(blob.identifier) is True
    assert not storage.exists(blob.identifier)
    assert storage.delete(blob.identifier) is False
