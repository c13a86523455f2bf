from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Callable, Dict, List, Optional

from ..errors import NotFoundError
from ..interface import InventoryStore
from ..models import InventoryItem, InventoryPayload, U64_MAX
from ...logging import get_logger

FIRST_ITEM_ID = 1


@dataclass
class _State:
    # The counter and the mapping are only ever touched together under one lock.
    items: Dict[int, InventoryItem] = field(default_factory=dict)
    next_id: int = FIRST_ITEM_ID


class MemoryInventoryStore(InventoryStore):
    """
    Process-local implementation.
    - All state lives in a single _State guarded by one re-entrant lock.
    - Items are frozen models: an update swaps in a new instance, so an item
      handed to a reader never changes underneath it.
    """

    def __init__(self, clock: Callable[[], int] = time.time_ns) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._state = _State()
        self.logger = get_logger(__name__)

    # ---------- persistence hook ----------

    def _persist(self, counter_changed: bool) -> None:
        """Called under the lock after every mutation. Nothing to do in memory."""

    def _persist_or_restore(
        self, item_id: int, previous: Optional[InventoryItem], counter_changed: bool
    ) -> None:
        try:
            self._persist(counter_changed)
        except Exception:
            if previous is None:
                self._state.items.pop(item_id, None)
            else:
                self._state.items[item_id] = previous
            if counter_changed:
                # The failed id was never handed out, so the next create may take it.
                self._state.next_id = item_id
            raise

    def _find(self, item_id: int) -> Optional[InventoryItem]:
        # bool is an int subclass and True == 1; neither it nor non-ints name an item.
        if isinstance(item_id, bool) or not isinstance(item_id, int):
            return None
        return self._state.items.get(item_id)

    # ---------- interface implementation ----------

    def add_item(self, payload: InventoryPayload) -> Optional[InventoryItem]:
        """Create an item with the next unused id.

        Returns None when the id counter has passed the unsigned 64-bit range;
        that is the only way this call can come back empty, and it is logged
        at ERROR level. The store is left unchanged in that case.
        """
        with self._lock:
            item_id = self._state.next_id
            if item_id > U64_MAX:
                self.logger.error(f"Item id counter exhausted at {item_id - 1}; cannot add {payload.name!r}")
                return None

            item = InventoryItem(
                id=item_id,
                name=payload.name,
                quantity=payload.quantity,
                price=payload.price,
                created_at=self._clock(),
                updated_at=None,
            )
            self._state.next_id = item_id + 1
            self._state.items[item_id] = item
            self._persist_or_restore(item_id, None, counter_changed=True)

        self.logger.info(f"Added item id={item.id} name={item.name!r}")
        return item

    def get_item(self, item_id: int) -> InventoryItem:
        with self._lock:
            item = self._find(item_id)
        if item is None:
            self.logger.warning(f"Lookup of missing item id={item_id}")
            raise NotFoundError(item_id, f"An item with id={item_id} not found")
        self.logger.debug(f"Fetched item id={item_id}")
        return item

    def list_items(self) -> List[InventoryItem]:
        with self._lock:
            items = sorted(self._state.items.values(), key=attrgetter("id"))
        self.logger.debug(f"Listed {len(items)} items")
        return items

    def update_item(self, item_id: int, payload: InventoryPayload) -> InventoryItem:
        with self._lock:
            current = self._find(item_id)
            if current is None:
                self.logger.warning(f"Update of missing item id={item_id}")
                raise NotFoundError(item_id, f"couldn't update an item with id={item_id}. item not found")

            updated = current.model_copy(
                update={
                    "name": payload.name,
                    "quantity": payload.quantity,
                    "price": payload.price,
                    # A wall clock stepping backwards must not put updated_at before created_at.
                    "updated_at": max(self._clock(), current.created_at),
                }
            )
            self._state.items[item_id] = updated
            self._persist_or_restore(item_id, current, counter_changed=False)

        self.logger.info(f"Updated item id={item_id}")
        return updated

    def delete_item(self, item_id: int) -> InventoryItem:
        with self._lock:
            removed = self._find(item_id)
            if removed is None:
                self.logger.warning(f"Delete of missing item id={item_id}")
                raise NotFoundError(item_id, f"couldn't delete an item with id={item_id}. item not found.")
            del self._state.items[item_id]
            self._persist_or_restore(item_id, removed, counter_changed=False)

        self.logger.info(f"Deleted item id={item_id}")
        return removed
