"""Persistent receipt (comprobante) list backed by a preference store."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable

from .db import PreferencesDB
from .imaging import read_capture_time
from .models import Comprobante

logger = logging.getLogger(__name__)

PREFS_NAME = "comprobantes_prefs"
PREFS_KEY = "comprobantes"


class ReceiptStore:
    """Ordered receipts serialized as one JSON array under a single key.

    Every mutation rewrites the whole array (last writer wins).
    """

    def __init__(
        self,
        prefs: PreferencesDB,
        time_reader: Callable[[str], str] = read_capture_time,
    ) -> None:
        self._prefs = prefs
        self._time_reader = time_reader

    def _read_raw(self) -> list[Comprobante]:
        data = json.loads(self._prefs.get_string(PREFS_KEY, "[]") or "[]")
        return [Comprobante.from_dict(d) for d in data]

    def _write(self, records: Iterable[Comprobante]) -> None:
        payload = json.dumps(
            [r.to_dict() for r in records], ensure_ascii=False
        )
        self._prefs.put_string(PREFS_KEY, payload)

    def load(self) -> list[Comprobante]:
        """Return all receipts in stored order.

        Legacy records without ``hora`` get it from the image's EXIF time
        on every load; the derived value is not written back here.
        """
        records = []
        for record in self._read_raw():
            if record.hora is None:
                record = Comprobante(
                    uri=record.uri,
                    nombre=record.nombre,
                    fecha=record.fecha,
                    hora=self._time_reader(record.uri),
                )
            records.append(record)
        return records

    def append(self, record: Comprobante) -> None:
        """Add a receipt at the end. Identical duplicates are allowed."""
        records = self._read_raw()
        records.append(record)
        self._write(records)
        logger.debug("Comprobante agregado: %s", record.nombre)

    def replace_all(self, records: Iterable[Comprobante]) -> None:
        """Overwrite the stored list."""
        self._write(records)

    def remove(self, record: Comprobante) -> bool:
        """Remove the first receipt equal to ``record``.

        Returns:
            False if no stored receipt matched.
        """
        records = self.load()
        try:
            records.remove(record)
        except ValueError:
            return False
        self.replace_all(records)
        return True

    def replace(self, old: Comprobante, new: Comprobante) -> bool:
        """Swap ``old`` for ``new`` (the new record goes to the end).

        Returns:
            False, leaving the store untouched, if ``old`` is not found.
        """
        records = self.load()
        try:
            records.remove(old)
        except ValueError:
            logger.warning(
                "Comprobante a editar no encontrado: %s (%s)", old.nombre, old.uri
            )
            return False
        records.append(new)
        self.replace_all(records)
        return True


def filter_by_name(records: Iterable[Comprobante], query: str) -> list[Comprobante]:
    """Case-insensitive substring match on ``nombre``; blank query keeps all."""
    records = list(records)
    if not query.strip():
        return records
    needle = query.lower()
    return [r for r in records if needle in r.nombre.lower()]
