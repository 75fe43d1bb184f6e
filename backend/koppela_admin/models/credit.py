from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PaymentMethod(str, Enum):
    CASH = "CASH"
    MPESA = "MPESA"
    TIGOPESA = "TIGOPESA"
    AIRTEL = "AIRTEL"
    BANK_TRANSFER = "BANK_TRANSFER"
    CARD = "CARD"


class ReminderChannel(str, Enum):
    SMS = "SMS"
    EMAIL = "EMAIL"
    BOTH = "BOTH"


@dataclass(frozen=True)
class CreditSale:
    id: int
    sale_number: str
    customer_name: str
    outstanding_balance: float
    customer_id: Optional[int] = None
    total_amount: float = 0.0
    amount_paid: float = 0.0
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    due_date: Optional[str] = None

    @classmethod
    def from_api(cls, payload: dict) -> "CreditSale":
        return cls(
            id=int(payload["id"]),
            sale_number=payload.get("saleNumber") or "",
            customer_name=payload.get("customerName") or "",
            customer_id=payload.get("customerId"),
            total_amount=float(payload.get("totalAmount") or 0),
            amount_paid=float(payload.get("amountPaid") or 0),
            outstanding_balance=float(payload.get("outstandingBalance") or 0),
            customer_phone=payload.get("customerPhone"),
            customer_email=payload.get("customerEmail"),
            due_date=payload.get("dueDate"),
        )
