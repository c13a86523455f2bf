from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Callable, Dict, List

import pandas as pd

from ..models import InventoryItem
from .memory_backend import FIRST_ITEM_ID, MemoryInventoryStore, _State

# Import config for default data directory
from ...config import get_config

ITEMS_FILE = "items.csv"
COUNTER_FILE = "counter.csv"

# Nullable unsigned dtypes keep u64 ids and nanosecond stamps exact; float64 would not.
ITEM_DTYPES: Dict[str, str] = {
    "id": "UInt64",
    "name": "string",
    "quantity": "UInt32",
    "price": "float64",
    "created_at": "UInt64",
    "updated_at": "UInt64",
}
ITEM_COLUMNS: List[str] = list(ITEM_DTYPES)


class CsvInventoryStore(MemoryInventoryStore):
    """
    CSV-backed implementation.
    - Loads items.csv and counter.csv from `data_dir` once at construction.
    - Every mutation is written through before the call returns, while the
      store lock is still held.
    """

    def __init__(self, data_dir: str | Path = None, clock: Callable[[], int] = time.time_ns) -> None:
        super().__init__(clock=clock)
        if data_dir is None:
            config = get_config()
            data_dir = config.data_dir

        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._state = self._load_state(self.data_dir)
        self.logger.debug(
            f"Loaded {len(self._state.items)} items from {self.data_dir} (next id {self._state.next_id})"
        )

    # ---------- loading helpers ----------

    @staticmethod
    def _load_state(data_dir: Path) -> _State:
        items_path = data_dir / ITEMS_FILE
        counter_path = data_dir / COUNTER_FILE

        try:
            items = CsvInventoryStore._read_items(items_path) if items_path.exists() else {}
            next_id = CsvInventoryStore._read_counter(counter_path) if counter_path.exists() else FIRST_ITEM_ID
        except Exception as e:
            raise RuntimeError(
                f"Error reading inventory files from {data_dir}: {e}\n"
                f"Please check that {ITEMS_FILE} and {COUNTER_FILE} are valid and readable."
            ) from e

        # A counter that lags the items (e.g. hand-edited files) must still never hand out a used id.
        if items:
            next_id = max(next_id, max(items) + 1)
        return _State(items=items, next_id=next_id)

    @staticmethod
    def _read_items(path: Path) -> Dict[int, InventoryItem]:
        df = pd.read_csv(
            path,
            dtype=ITEM_DTYPES,
            keep_default_na=False,
            # to_csv writes both a None updated_at and a NaN price as an empty cell.
            na_values={"updated_at": [""], "price": [""]},
            float_precision="round_trip",
        )
        missing = [c for c in ITEM_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"missing columns: {', '.join(missing)}")

        items: Dict[int, InventoryItem] = {}
        for rec in df.sort_values("id").to_dict("records"):
            updated_at = rec["updated_at"]
            item = InventoryItem(
                id=int(rec["id"]),
                name=str(rec["name"]),
                quantity=int(rec["quantity"]),
                price=float(rec["price"]),
                created_at=int(rec["created_at"]),
                updated_at=None if pd.isna(updated_at) else int(updated_at),
            )
            items[item.id] = item
        return items

    @staticmethod
    def _read_counter(path: Path) -> int:
        # Python int: the exhausted counter (2**64) is one past the UInt64 range.
        df = pd.read_csv(path, dtype={"next_id": "object"})
        if df.empty:
            return FIRST_ITEM_ID
        return int(df["next_id"].iloc[0])

    # ---------- write-through ----------

    @staticmethod
    def _atomic_write(df: pd.DataFrame, path: Path) -> None:
        tmp_path = path.with_name(path.name + ".tmp")
        df.to_csv(tmp_path, index=False)
        os.replace(tmp_path, path)

    def _items_frame(self) -> pd.DataFrame:
        records = [item.model_dump() for item in sorted(self._state.items.values(), key=lambda i: i.id)]
        return pd.DataFrame(
            {col: pd.array([r[col] for r in records], dtype=dtype) for col, dtype in ITEM_DTYPES.items()},
            columns=ITEM_COLUMNS,
        )

    def _persist(self, counter_changed: bool) -> None:
        # Counter first: a crash between the two writes can skip an id but never reuse one.
        if counter_changed:
            counter = pd.DataFrame({"next_id": [str(self._state.next_id)]})
            self._atomic_write(counter, self.data_dir / COUNTER_FILE)
        self._atomic_write(self._items_frame(), self.data_dir / ITEMS_FILE)
        self.logger.debug(f"Persisted {len(self._state.items)} items to {self.data_dir}")

    def reload(self) -> None:
        """Re-read the files from disk, replacing the in-memory view."""
        with self._lock:
            self._state = self._load_state(self.data_dir)
