"""Export images to the shared picture gallery."""

from __future__ import annotations

import logging
import os
import re
import uuid
from dataclasses import dataclass
from pathlib import Path

from .imaging import _import_cv2

logger = logging.getLogger(__name__)

MIME_TYPE = "image/jpeg"

_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


@dataclass
class MediaEntry:
    """A gallery entry; ``is_pending`` until its bytes are complete."""

    display_name: str
    path: Path
    pending_path: Path
    mime_type: str = MIME_TYPE
    is_pending: bool = True


def _safe_name(name: str) -> str:
    cleaned = _UNSAFE_CHARS.sub("_", name).strip(" .")
    return cleaned or "comprobante"


class GalleryExporter:
    """Write JPEGs under ``<media_root>/<relative_path>``.

    Entries are written in two phases: bytes go to a hidden pending file
    first and only a complete file is renamed to its visible name.
    """

    def __init__(
        self,
        media_root: str | Path = "~",
        relative_path: str = "Pictures/Comprobantes",
    ) -> None:
        self._album_dir = Path(media_root).expanduser() / relative_path

    @property
    def album_dir(self) -> Path:
        return self._album_dir

    def insert(self, name: str) -> MediaEntry:
        """Reserve a pending entry for ``<name>.jpg``."""
        self._album_dir.mkdir(parents=True, exist_ok=True)
        display_name = f"{_safe_name(name)}.jpg"
        return MediaEntry(
            display_name=display_name,
            path=self._album_dir / display_name,
            pending_path=self._album_dir / f".pending-{uuid.uuid4().hex}-{display_name}",
        )

    def write(self, entry: MediaEntry, data: bytes) -> None:
        with open(entry.pending_path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

    def publish(self, entry: MediaEntry) -> None:
        """Clear the pending state: make the entry visible under its name."""
        os.replace(entry.pending_path, entry.path)
        entry.is_pending = False

    def discard(self, entry: MediaEntry) -> None:
        entry.pending_path.unlink(missing_ok=True)

    def save_image(self, image, name: str) -> Path | None:
        """Encode a decoded image as JPEG (quality 100) and publish it.

        Returns:
            Path of the gallery file, or None on failure.
        """
        cv2 = _import_cv2()

        ok, buffer = cv2.imencode(".jpg", image, [cv2.IMWRITE_JPEG_QUALITY, 100])
        if not ok:
            logger.error("No se pudo codificar la imagen %s", name)
            return None

        try:
            entry = self.insert(name)
        except OSError:
            logger.exception("No se pudo crear el álbum %s", self._album_dir)
            return None

        try:
            self.write(entry, buffer.tobytes())
            self.publish(entry)
        except OSError:
            logger.exception("Error al guardar %s en la galería", entry.display_name)
            self.discard(entry)
            return None

        logger.info("Imagen exportada a %s", entry.path)
        return entry.path
