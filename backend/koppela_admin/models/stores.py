from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class StoreType(str, Enum):
    MAIN_STORE = "main_store"
    RETAIL_STORE = "retail_store"
    WAREHOUSE = "warehouse"


@dataclass(frozen=True)
class Store:
    """Store as listed by the admin API (read model)."""
    id: int
    name: str
    store_type: StoreType
    is_active: bool = True
    name_swahili: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    manager_id: Optional[int] = None
    inventory_count: int = 0

    @classmethod
    def from_api(cls, payload: dict) -> "Store":
        raw_type = payload.get("storeType") or StoreType.RETAIL_STORE.value
        try:
            store_type = StoreType(raw_type)
        except ValueError:
            store_type = StoreType.RETAIL_STORE
        counts = payload.get("_count") or {}
        return cls(
            id=int(payload["id"]),
            name=payload.get("name") or "",
            store_type=store_type,
            is_active=bool(payload.get("isActive", True)),
            name_swahili=payload.get("nameSwahili"),
            address=payload.get("address"),
            city=payload.get("city"),
            region=payload.get("region"),
            phone=payload.get("phone"),
            email=payload.get("email"),
            manager_id=payload.get("managerId"),
            inventory_count=int(payload.get("inventoryCount", counts.get("inventory", 0)) or 0),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "name_swahili": self.name_swahili,
            "store_type": self.store_type.value,
            "address": self.address,
            "city": self.city,
            "region": self.region,
            "phone": self.phone,
            "email": self.email,
            "manager_id": self.manager_id,
            "is_active": self.is_active,
            "inventory_count": self.inventory_count,
        }


@dataclass(frozen=True)
class InventoryItem:
    """
    One product's stock at one store.

    `quantity` is the last-known on-hand count and may be stale by the time
    a request depending on it is sent.
    """
    product_id: int
    name: str
    sku: str
    quantity: int
    name_swahili: Optional[str] = None
    reorder_point: Optional[int] = None

    @classmethod
    def from_api(cls, payload: dict) -> "InventoryItem":
        product = payload.get("product") or {}
        return cls(
            product_id=int(product.get("id", payload.get("productId"))),
            name=product.get("name") or "",
            name_swahili=product.get("nameSwahili"),
            sku=product.get("sku") or "",
            quantity=max(0, int(payload.get("quantity") or 0)),
            reorder_point=payload.get("reorderPoint"),
        )

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "name_swahili": self.name_swahili,
            "sku": self.sku,
            "quantity": self.quantity,
            "reorder_point": self.reorder_point,
        }
