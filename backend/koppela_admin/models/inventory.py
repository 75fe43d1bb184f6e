from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class AdjustmentType(str, Enum):
    DAMAGE = "DAMAGE"
    EXPIRED = "EXPIRED"
    THEFT = "THEFT"
    LOST = "LOST"
    QUALITY_ISSUE = "QUALITY_ISSUE"
    BREAKAGE = "BREAKAGE"
    SPOILAGE = "SPOILAGE"
    RETURN_TO_SUPPLIER = "RETURN_TO_SUPPLIER"
    OTHER = "OTHER"


@dataclass(frozen=True)
class StockLevel:
    quantity: int
    store_id: Optional[int] = None


@dataclass(frozen=True)
class AdjustableProduct:
    """Product with its per-store stock rows, as shown on the products screen."""
    id: int
    name: str
    cost_price: Optional[float] = None
    inventory: tuple[StockLevel, ...] = field(default_factory=tuple)

    @property
    def on_hand(self) -> int:
        # Negative rows are ignored rather than netted against positive stock
        return sum(max(0, level.quantity) for level in self.inventory)

    @classmethod
    def from_api(cls, payload: dict) -> "AdjustableProduct":
        levels = tuple(
            StockLevel(
                quantity=int(row.get("quantity") or 0),
                store_id=row.get("storeId") or (row.get("store") or {}).get("id"),
            )
            for row in payload.get("inventory") or []
        )
        cost = payload.get("costPrice")
        return cls(
            id=int(payload["id"]),
            name=payload.get("name") or "",
            cost_price=float(cost) if cost is not None else None,
            inventory=levels,
        )
