from __future__ import annotations

from typing import Literal, Optional

from .backends.csv_backend import CsvInventoryStore
from .backends.memory_backend import MemoryInventoryStore
from .interface import InventoryStore

from ..config import get_config


def get_inventory_store(kind: Optional[Literal["memory", "csv"]] = None) -> InventoryStore:
    config = get_config()
    kind = kind or config.store_backend
    if kind == "memory":
        return MemoryInventoryStore()
    if kind == "csv":
        # Reads from configured data folder
        return CsvInventoryStore(data_dir=config.data_dir)
    raise ValueError(f"Unknown inventory store kind: {kind}")
