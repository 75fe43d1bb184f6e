from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class DestinationType(str, Enum):
    STORE = "store"
    EXTERNAL = "external"


class TransferState(str, Enum):
    IDLE = "IDLE"
    SOURCE_SELECTION = "SOURCE_SELECTION"
    DESTINATION_SELECTION = "DESTINATION_SELECTION"
    ITEM_SELECTION = "ITEM_SELECTION"
    SUBMITTING = "SUBMITTING"


@dataclass
class TransferItem:
    product_id: int
    quantity: int = 0
    reason: str = ""

    def to_payload(self) -> dict:
        payload = {"productId": self.product_id, "quantity": self.quantity}
        if self.reason.strip():
            payload["reason"] = self.reason.strip()
        return payload


@dataclass(frozen=True)
class TransferRequest:
    """
    Batch movement sent to the inventory transfer endpoint.

    Exactly one of `to_store_id` / `external_destination` is set,
    discriminated by `is_external_movement`.
    """
    business_id: int
    from_store_id: int
    is_external_movement: bool
    transfers: tuple[TransferItem, ...] = field(default_factory=tuple)
    to_store_id: Optional[int] = None
    external_destination: Optional[str] = None

    def to_payload(self) -> dict:
        payload = {
            "businessId": self.business_id,
            "fromStoreId": self.from_store_id,
            "isExternalMovement": self.is_external_movement,
            "transfers": [item.to_payload() for item in self.transfers],
        }
        if self.is_external_movement:
            payload["externalDestination"] = self.external_destination
        else:
            payload["toStoreId"] = self.to_store_id
        return payload
