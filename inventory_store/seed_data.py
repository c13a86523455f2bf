#!/usr/bin/env python3
"""
seed_data.py

Fills an inventory store with realistic fake hardware items so the console
page has something to show.

Run:
  python -m inventory_store.seed_data --count 50 --backend csv --data-dir inventory_data
"""

from __future__ import annotations
import argparse
import random
from typing import Dict, List, Optional

from inventory_store.config import get_config
from inventory_store.data.backends.csv_backend import CsvInventoryStore
from inventory_store.data.backends.memory_backend import MemoryInventoryStore
from inventory_store.data.interface import InventoryStore
from inventory_store.data.models import InventoryPayload
from inventory_store.logging import get_logger

# -----------------------------
# Catalogue building blocks
# -----------------------------

CATEGORIES: Dict[str, List[str]] = {
    "Fasteners": ["bolt", "nut", "washer", "screw", "rivet", "anchor"],
    "Tools": ["hammer", "wrench", "screwdriver", "pliers", "tape measure"],
    "Electrical": ["cable tie", "fuse", "switch", "socket", "terminal block"],
    "Plumbing": ["pipe clamp", "valve", "elbow fitting", "gasket"],
}

SIZES = ["M3", "M4", "M5", "M6", "M8", "M10", "1/4in", "3/8in", "1/2in"]

# (low, high) unit price per category
PRICE_BANDS = {
    "Fasteners": (0.05, 2.0),
    "Tools": (4.0, 60.0),
    "Electrical": (0.2, 25.0),
    "Plumbing": (1.0, 40.0),
}


# -----------------------------
# Utility functions
# -----------------------------

def price_round(p: float) -> float:
    return round(max(p, 0.01), 2)

def gen_payload(rng: random.Random) -> InventoryPayload:
    category = rng.choice(list(CATEGORIES))
    noun = rng.choice(CATEGORIES[category])
    name = f"{noun} {rng.choice(SIZES)}" if category == "Fasteners" else noun
    low, high = PRICE_BANDS[category]
    # fasteners come by the box, tools one at a time
    quantity = rng.randint(100, 5_000) if category == "Fasteners" else rng.randint(0, 120)
    return InventoryPayload(name=name, quantity=quantity, price=price_round(rng.uniform(low, high)))

def seed_store(store: InventoryStore, count: int, seed: int) -> int:
    """Add `count` generated items; returns how many were created."""
    rng = random.Random(seed)
    created = 0
    for _ in range(count):
        if store.add_item(gen_payload(rng)) is None:
            break
        created += 1
    return created


# -----------------------------
# Main
# -----------------------------

def main(argv: Optional[List[str]] = None) -> int:
    config = get_config()
    logger = get_logger(__name__)

    parser = argparse.ArgumentParser(description="Fill an inventory store with fake items.")
    parser.add_argument("--count", type=int, default=config.seed_item_count, help="Number of items to add.")
    parser.add_argument("--seed", type=int, default=config.seed_value)
    parser.add_argument("--backend", choices=["memory", "csv"], default=config.store_backend)
    parser.add_argument("--data-dir", type=str, default=config.data_dir)
    parser.add_argument("--no-overwrite", action="store_true", help="Fail if the store already holds items.")
    args = parser.parse_args(argv)

    if args.backend == "csv":
        store: InventoryStore = CsvInventoryStore(data_dir=args.data_dir)
    else:
        store = MemoryInventoryStore()

    if args.no_overwrite and store.list_items():
        logger.error(f"Refusing to seed non-empty store in {args.data_dir}")
        return 2

    created = seed_store(store, args.count, args.seed)

    # simple summary
    where = args.data_dir if args.backend == "csv" else "memory"
    print(f"Seeded {created} items into {where}")
    print(f" total items now: {len(store.list_items())}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
