"""Shared fixtures: JPEG files with EXIF tags and a mocked OpenCV."""

import sys
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image


def write_jpeg(path, *, taken_at=None, orientation=None, size=(20, 10)):
    """Write a small JPEG, optionally tagged with EXIF DateTime/Orientation."""
    img = Image.new("RGB", size, "white")
    exif = Image.Exif()
    if taken_at is not None:
        exif[306] = taken_at
    if orientation is not None:
        exif[274] = orientation
    if len(exif):
        img.save(path, "JPEG", exif=exif.tobytes())
    else:
        img.save(path, "JPEG")
    return path


@pytest.fixture
def jpeg(tmp_path):
    """Factory writing JPEGs into tmp_path."""
    def make(name="foto.jpg", **kwargs):
        return write_jpeg(tmp_path / name, **kwargs)

    return make


@pytest.fixture
def mock_cv2():
    """Inject a mock cv2 module into sys.modules."""
    mock = MagicMock()
    mock.IMREAD_COLOR = 1
    mock.IMREAD_IGNORE_ORIENTATION = 128
    mock.ROTATE_90_CLOCKWISE = 0
    mock.ROTATE_180 = 1
    mock.ROTATE_90_COUNTERCLOCKWISE = 2
    mock.IMWRITE_JPEG_QUALITY = 1
    with patch.dict(sys.modules, {"cv2": mock}):
        yield mock
