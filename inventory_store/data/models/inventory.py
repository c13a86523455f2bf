from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1


class InventoryPayload(BaseModel):
    """Caller-supplied fields for creating or updating an item."""
    name: str = Field(description="Item name")
    quantity: int = Field(ge=0, le=U32_MAX, description="Units on hand (unsigned 32-bit)")
    price: float = Field(description="Unit price")


class InventoryItem(BaseModel):
    """A stored inventory record. Instances are never mutated; updates replace them."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0, le=U64_MAX, description="Unique item identifier, never reused")
    name: str = Field(description="Item name")
    quantity: int = Field(ge=0, le=U32_MAX, description="Units on hand (unsigned 32-bit)")
    price: float = Field(description="Unit price")
    created_at: int = Field(ge=0, le=U64_MAX, description="Creation time, nanoseconds since epoch")
    updated_at: Optional[int] = Field(
        default=None, ge=0, le=U64_MAX, description="Last update time, None until first update"
    )
