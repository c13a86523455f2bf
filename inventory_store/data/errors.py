from __future__ import annotations


class NotFoundError(LookupError):
    """Raised when an operation addresses an item id that is not in the store."""

    def __init__(self, item_id: int, msg: str) -> None:
        super().__init__(msg)
        self.item_id = item_id
        self.msg = msg
