"""Receipt workflow: capture, edit, delete, search and gallery export."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from .camera import ReceiptCamera
from .gallery import GalleryExporter
from .imaging import (
    format_date,
    format_time,
    load_oriented_image,
    save_image_to_internal_storage,
    uri_to_path,
)
from .models import Comprobante
from .notifications import Notifier
from .receipts import ReceiptStore, filter_by_name

logger = logging.getLogger(__name__)

MSG_SAVED = "Guardado exitosamente"
MSG_UPDATED = "Comprobante actualizado"
MSG_DELETED = "Comprobante eliminado"
MSG_NAME_REQUIRED = "Escribe el nombre del comprobante"
MSG_SAVE_FAILED = "Error al guardar la imagen"
MSG_CAPTURE_FAILED = "No se pudo capturar la imagen"
MSG_NOT_FOUND = "El comprobante ya no existe"
MSG_EXPORTED = "Imagen guardada en la galería"
MSG_LOAD_FAILED = "Error al cargar imagen"


class ComprobantesController:
    """State and actions behind the receipts tab."""

    def __init__(
        self,
        store: ReceiptStore,
        files_dir: str | Path,
        notifier: Notifier,
        camera: ReceiptCamera | None = None,
        gallery: GalleryExporter | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._files_dir = Path(files_dir).expanduser()
        self._notifier = notifier
        self._camera = camera
        self._gallery = gallery or GalleryExporter()
        self._clock = clock
        self.records: list[Comprobante] = store.load()

    def refresh(self) -> list[Comprobante]:
        self.records = self._store.load()
        return self.records

    def search(self, query: str) -> list[Comprobante]:
        return filter_by_name(self.records, query)

    def _take_photo(self) -> Path | None:
        if self._camera is None:
            self._notifier.notify(MSG_CAPTURE_FAILED)
            return None
        try:
            return self._camera.capture(self._camera.create_temp_target())
        except RuntimeError:
            logger.exception("Fallo de captura en la cámara")
            self._notifier.notify(MSG_CAPTURE_FAILED)
            return None

    def _store_image(self, source: str | Path, nombre: str) -> Comprobante | None:
        saved = save_image_to_internal_storage(source, self._files_dir)
        if saved is None:
            self._notifier.notify(MSG_SAVE_FAILED)
            return None
        now = self._clock()
        return Comprobante(
            uri=str(saved),
            nombre=nombre,
            fecha=format_date(now),
            hora=format_time(now),
        )

    def add_from_file(self, image_path: str | Path, nombre: str) -> Comprobante | None:
        """Save a new receipt from an existing image file."""
        if not nombre.strip():
            self._notifier.notify(MSG_NAME_REQUIRED)
            return None
        record = self._store_image(image_path, nombre)
        if record is None:
            return None
        self._store.append(record)
        self.refresh()
        self._notifier.notify(MSG_SAVED)
        return record

    def capture(self, nombre: str) -> Comprobante | None:
        """Photograph a new receipt with the camera and save it."""
        if not nombre.strip():
            self._notifier.notify(MSG_NAME_REQUIRED)
            return None
        photo = self._take_photo()
        if photo is None:
            return None
        return self.add_from_file(photo, nombre)

    def rename(self, record: Comprobante, nombre: str) -> Comprobante | None:
        """Change only the name; uri, fecha and hora are kept."""
        if not nombre.strip():
            self._notifier.notify(MSG_NAME_REQUIRED)
            return None
        updated = Comprobante(
            uri=record.uri, nombre=nombre, fecha=record.fecha, hora=record.hora
        )
        if not self._store.replace(record, updated):
            self._notifier.notify(MSG_NOT_FOUND)
            self.refresh()
            return None
        self.refresh()
        self._notifier.notify(MSG_UPDATED)
        return updated

    def replace_photo(
        self, record: Comprobante, image_path: str | Path | None = None
    ) -> Comprobante | None:
        """Swap the photo; the name is kept, uri/fecha/hora are new.

        Without ``image_path`` the camera takes the new photo.
        """
        source = image_path if image_path is not None else self._take_photo()
        if source is None:
            return None
        updated = self._store_image(source, record.nombre)
        if updated is None:
            return None
        if not self._store.replace(record, updated):
            uri_to_path(updated.uri).unlink(missing_ok=True)
            self._notifier.notify(MSG_NOT_FOUND)
            self.refresh()
            return None
        self.refresh()
        self._notifier.notify(MSG_SAVED)
        return updated

    def delete(self, record: Comprobante) -> bool:
        removed = self._store.remove(record)
        self.refresh()
        if removed:
            self._notifier.notify(MSG_DELETED)
        else:
            self._notifier.notify(MSG_NOT_FOUND)
        return removed

    def download(self, record: Comprobante) -> Path | None:
        """Export the receipt photo, upright, to the shared gallery."""
        image = load_oriented_image(record.uri)
        if image is None:
            self._notifier.notify(MSG_LOAD_FAILED)
            return None
        exported = self._gallery.save_image(image, record.nombre)
        if exported is None:
            self._notifier.notify(MSG_SAVE_FAILED)
            return None
        self._notifier.notify(MSG_EXPORTED)
        return exported
