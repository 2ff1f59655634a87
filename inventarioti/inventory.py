"""In-memory inventory list operations."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable

from .models import InventoryItem

logger = logging.getLogger(__name__)

Listener = Callable[[list[InventoryItem]], None]


class InventoryStore:
    """Ordered list of equipment items keyed by ``id``.

    Lives as long as the main view that owns it; nothing is persisted.
    Subscribers are called with a snapshot after every mutation.
    """

    def __init__(self, items: list[InventoryItem] | None = None) -> None:
        self._items: list[InventoryItem] = list(items or [])
        self._listeners: list[Listener] = []

    @property
    def items(self) -> list[InventoryItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.items
        for listener in list(self._listeners):
            listener(snapshot)

    def find(self, item_id: str) -> InventoryItem | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def upsert(self, item: InventoryItem) -> None:
        """Replace the item with the same id in place, or append it."""
        for index, current in enumerate(self._items):
            if current.id == item.id:
                self._items[index] = item
                break
        else:
            self._items.append(item)
        self._notify()

    def reduce_quantity(self, item: InventoryItem, amount: int) -> bool:
        """Take ``amount`` units out of an item.

        Removing the whole stock deletes the record; zero-quantity items are
        never kept. Amounts outside ``[1, quantity]`` change nothing.

        Returns:
            True if the inventory changed.
        """
        current = self.find(item.id)
        if current is None:
            return False
        if amount < 1 or amount > current.quantity:
            logger.debug(
                "Cantidad fuera de rango para %s: %d (actual %d)",
                current.id, amount, current.quantity,
            )
            return False

        remaining = current.quantity - amount
        if remaining > 0:
            self.upsert(dataclasses.replace(current, quantity=remaining))
        else:
            self.remove(current)
        return True

    def remove(self, item: InventoryItem) -> None:
        """Drop every record sharing the item's id."""
        self._items = [i for i in self._items if i.id != item.id]
        self._notify()

    def clear(self) -> None:
        self._items = []
        self._notify()

    def search(self, query: str) -> list[InventoryItem]:
        """Case-insensitive name filter applied for display only."""
        if not query.strip():
            return self.items
        needle = query.lower()
        return [i for i in self._items if needle in i.name.lower()]
