from .inventory import (
    InventoryItem,
    InventoryPayload,
    U32_MAX,
    U64_MAX,
)

__all__ = [
    "InventoryItem",
    "InventoryPayload",
    "U32_MAX",
    "U64_MAX",
]
