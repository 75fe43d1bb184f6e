from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class BillingCycle(str, Enum):
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


@dataclass(frozen=True)
class SubscriptionPlan:
    id: int
    name: str
    display_name: str
    price_monthly: float = 0.0
    display_name_swahili: Optional[str] = None
    description: Optional[str] = None
    features: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, payload: dict) -> "SubscriptionPlan":
        return cls(
            id=int(payload["id"]),
            name=payload.get("name") or "",
            display_name=payload.get("displayName") or payload.get("name") or "",
            display_name_swahili=payload.get("displayNameSwahili"),
            description=payload.get("description"),
            price_monthly=float(payload.get("priceMonthly") or 0),
            features=dict(payload.get("features") or {}),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "display_name": self.display_name,
            "display_name_swahili": self.display_name_swahili,
            "description": self.description,
            "price_monthly": self.price_monthly,
            "features": dict(self.features),
        }
