"""Data models for inventory items and delivery receipts."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field


def _new_id() -> str:
    return str(uuid.uuid4())


def _to_int(raw: str | int | None) -> int:
    """Parse form input the way the item dialog does: garbage becomes 0."""
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class InventoryItem:
    """A piece of technical-support equipment held in the inventory."""

    name: str
    serial_number: int
    status: str
    quantity: int
    id: str = field(default_factory=_new_id)

    @classmethod
    def from_form(
        cls,
        name: str,
        serial_number: str | int,
        status: str,
        quantity: str | int,
        item_id: str | None = None,
    ) -> InventoryItem:
        """Build an item from add/edit dialog fields.

        Editing passes the existing ``item_id`` so the record keeps its key.

        Raises:
            ValueError: If the quantity is not a positive number.
        """
        amount = _to_int(quantity)
        if amount < 1:
            raise ValueError(f"Cantidad inválida: {quantity}")
        return cls(
            name=name,
            serial_number=_to_int(serial_number),
            status=status,
            quantity=amount,
            id=item_id or _new_id(),
        )


@dataclass(frozen=True)
class Comprobante:
    """A delivery receipt: a photo paired with a name, date and time.

    Equality is structural; there is no identifier.
    """

    uri: str
    nombre: str
    fecha: str
    hora: str | None = None

    def to_dict(self) -> dict:
        return {
            "uri": self.uri,
            "nombre": self.nombre,
            "fecha": self.fecha,
            "hora": self.hora,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Comprobante:
        return cls(
            uri=data.get("uri", ""),
            nombre=data.get("nombre", ""),
            fecha=data.get("fecha", ""),
            hora=data.get("hora"),
        )
