"""Camera capture using OpenCV."""

from __future__ import annotations

import time
from pathlib import Path

from .imaging import _import_cv2


class ReceiptCamera:
    """Take still photos for receipts from a local camera."""

    def __init__(self, camera_index: int = 0, cache_dir: str = "/tmp/inventarioti") -> None:
        self._camera_index = camera_index
        self._cache_dir = Path(cache_dir).expanduser()
        self._cache_dir.mkdir(parents=True, exist_ok=True)

    @property
    def camera_index(self) -> int:
        return self._camera_index

    def create_temp_target(self) -> Path:
        """Return a fresh cache-dir path for the next capture."""
        millis = int(time.time() * 1000)
        return self._cache_dir / f"temp_{millis}.jpg"

    def capture(self, target: str | Path | None = None) -> Path:
        """Capture a single frame and write it as JPEG.

        Raises:
            ImportError: If OpenCV is not installed.
            RuntimeError: If the camera cannot be opened or read.
        """
        cv2 = _import_cv2()

        filepath = Path(target) if target is not None else self.create_temp_target()

        cap = cv2.VideoCapture(self._camera_index)
        if not cap.isOpened():
            raise RuntimeError(
                f"No se pudo abrir la cámara {self._camera_index}. "
                f"Revisa la conexión."
            )

        try:
            ret, frame = cap.read()
            if not ret or frame is None:
                raise RuntimeError(
                    f"No se pudo obtener una imagen de la cámara {self._camera_index}."
                )

            if not cv2.imwrite(str(filepath), frame):
                raise RuntimeError(f"No se pudo escribir la captura en {filepath}")

            return filepath
        finally:
            cap.release()

    @staticmethod
    def list_cameras(max_check: int = 10) -> list[int]:
        """List available camera indices by probing."""
        cv2 = _import_cv2()

        available: list[int] = []
        for i in range(max_check):
            cap = cv2.VideoCapture(i)
            if cap.isOpened():
                available.append(i)
                cap.release()
        return available
