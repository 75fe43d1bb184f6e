from __future__ import annotations

from enum import Enum


class BusinessType(str, Enum):
    RETAIL = "RETAIL"
    WHOLESALE = "WHOLESALE"
    BOTH = "BOTH"


class BusinessCategory(str, Enum):
    GROCERY = "GROCERY"
    ELECTRONICS = "ELECTRONICS"
    FASHION = "FASHION"
    PHARMACY = "PHARMACY"
    RESTAURANT = "RESTAURANT"
    SERVICE = "SERVICE"
    OTHER = "OTHER"
