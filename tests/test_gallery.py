"""Tests for gallery export with pending writes."""

import numpy as np
import pytest

from inventarioti.gallery import GalleryExporter


@pytest.fixture
def gallery(tmp_path):
    return GalleryExporter(media_root=tmp_path, relative_path="Pictures/Comprobantes")


def test_album_dir(gallery, tmp_path):
    assert gallery.album_dir == tmp_path / "Pictures" / "Comprobantes"


def test_insert_is_pending_and_hidden(gallery):
    entry = gallery.insert("Router")
    assert entry.is_pending is True
    assert entry.display_name == "Router.jpg"
    assert entry.mime_type == "image/jpeg"
    assert entry.pending_path.name.startswith(".pending-")
    assert not entry.path.exists()


def test_write_then_publish(gallery):
    entry = gallery.insert("Router")
    gallery.write(entry, b"jpeg-bytes")
    assert entry.pending_path.exists()
    assert not entry.path.exists()

    gallery.publish(entry)
    assert entry.is_pending is False
    assert entry.path.read_bytes() == b"jpeg-bytes"
    assert not entry.pending_path.exists()


def test_unsafe_name_sanitized(gallery):
    entry = gallery.insert("Entrega 3/4: sala?")
    assert "/" not in entry.display_name
    assert entry.path.parent == gallery.album_dir


def test_save_image(gallery, mock_cv2):
    mock_cv2.imencode.return_value = (True, np.frombuffer(b"encoded", dtype=np.uint8))
    image = np.zeros((4, 4, 3), dtype=np.uint8)

    path = gallery.save_image(image, "Router")

    assert path == gallery.album_dir / "Router.jpg"
    assert path.read_bytes() == b"encoded"
    args = mock_cv2.imencode.call_args[0]
    assert args[0] == ".jpg"
    assert args[2] == [mock_cv2.IMWRITE_JPEG_QUALITY, 100]
    assert [p.name for p in gallery.album_dir.iterdir()] == ["Router.jpg"]


def test_save_image_encode_failure(gallery, mock_cv2):
    mock_cv2.imencode.return_value = (False, None)
    assert gallery.save_image(np.zeros((2, 2, 3), dtype=np.uint8), "X") is None


def test_save_image_write_failure_discards_pending(gallery, mock_cv2, monkeypatch):
    mock_cv2.imencode.return_value = (True, np.frombuffer(b"x", dtype=np.uint8))

    def boom(entry):
        raise OSError("disk full")

    monkeypatch.setattr(gallery, "publish", boom)
    assert gallery.save_image(np.zeros((2, 2, 3), dtype=np.uint8), "X") is None
    assert list(gallery.album_dir.iterdir()) == []
