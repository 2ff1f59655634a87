"""Tests for the receipt camera (mocked OpenCV)."""

from pathlib import Path
from unittest.mock import MagicMock

import numpy as np
import pytest

from inventarioti.camera import ReceiptCamera


def _open_camera(mock_cv2, frame=True):
    mock_cap = MagicMock()
    mock_cap.isOpened.return_value = True
    if frame:
        mock_cap.read.return_value = (True, np.zeros((480, 640, 3), dtype=np.uint8))
    else:
        mock_cap.read.return_value = (False, None)
    mock_cv2.VideoCapture.return_value = mock_cap
    mock_cv2.imwrite.return_value = True
    return mock_cap


class TestReceiptCamera:
    def test_init_creates_cache_dir(self, tmp_path):
        cache = tmp_path / "sub" / "cache"
        ReceiptCamera(cache_dir=str(cache))
        assert cache.exists()

    def test_create_temp_target(self, tmp_path):
        cam = ReceiptCamera(cache_dir=str(tmp_path))
        target = cam.create_temp_target()
        assert target.parent == tmp_path
        assert target.name.startswith("temp_")
        assert target.suffix == ".jpg"

    def test_capture_success(self, mock_cv2, tmp_path):
        mock_cap = _open_camera(mock_cv2)
        cam = ReceiptCamera(camera_index=1, cache_dir=str(tmp_path))

        target = tmp_path / "shot.jpg"
        result = cam.capture(target)

        assert result == target
        mock_cv2.VideoCapture.assert_called_once_with(1)
        assert mock_cv2.imwrite.call_args[0][0] == str(target)
        mock_cap.release.assert_called_once()

    def test_capture_default_target(self, mock_cv2, tmp_path):
        _open_camera(mock_cv2)
        cam = ReceiptCamera(cache_dir=str(tmp_path))
        result = cam.capture()
        assert Path(result).name.startswith("temp_")

    def test_capture_camera_not_found(self, mock_cv2, tmp_path):
        mock_cap = MagicMock()
        mock_cap.isOpened.return_value = False
        mock_cv2.VideoCapture.return_value = mock_cap

        cam = ReceiptCamera(cache_dir=str(tmp_path))
        with pytest.raises(RuntimeError, match="cámara 0"):
            cam.capture()

    def test_capture_read_failure(self, mock_cv2, tmp_path):
        mock_cap = _open_camera(mock_cv2, frame=False)
        cam = ReceiptCamera(cache_dir=str(tmp_path))
        with pytest.raises(RuntimeError, match="obtener una imagen"):
            cam.capture()
        mock_cap.release.assert_called_once()

    def test_capture_write_failure(self, mock_cv2, tmp_path):
        _open_camera(mock_cv2)
        mock_cv2.imwrite.return_value = False
        cam = ReceiptCamera(cache_dir=str(tmp_path))
        with pytest.raises(RuntimeError, match="escribir"):
            cam.capture()

    def test_list_cameras(self, mock_cv2):
        caps = {}
        for i in range(10):
            m = MagicMock()
            m.isOpened.return_value = i in (0, 2)
            caps[i] = m

        mock_cv2.VideoCapture.side_effect = lambda i: caps[i]

        assert ReceiptCamera.list_cameras() == [0, 2]
