from __future__ import annotations

from typing import List, Optional, Protocol

from .models import InventoryItem, InventoryPayload


# ---- Store protocol ----

class InventoryStore(Protocol):
    """
    Backend-agnostic contract for the inventory operations.

    Every call is atomic with respect to every other call on the same store:
    a reader sees an item either entirely before or entirely after a write.
    Lookups for unknown ids raise NotFoundError; nothing else is raised in
    normal operation.
    """

    def add_item(self, payload: InventoryPayload) -> Optional[InventoryItem]:
        """Create an item from the payload. None only when ids are exhausted."""
        ...

    def get_item(self, item_id: int) -> InventoryItem:
        """Return the item with this id."""
        ...

    def list_items(self) -> List[InventoryItem]:
        """Return a snapshot of every stored item."""
        ...

    def update_item(self, item_id: int, payload: InventoryPayload) -> InventoryItem:
        """Overwrite name/quantity/price and stamp updated_at."""
        ...

    def delete_item(self, item_id: int) -> InventoryItem:
        """Remove the item and return its last value."""
        ...
