from __future__ import annotations

from enum import Enum


class ServiceType(str, Enum):
    LEASE = "LEASE"


class ServiceItemStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    RENTED = "RENTED"
    BOOKED = "BOOKED"
    MAINTENANCE = "MAINTENANCE"


class DurationUnit(str, Enum):
    MINUTES = "MINUTES"
    HOURS = "HOURS"
    DAYS = "DAYS"
    WEEKS = "WEEKS"
    MONTHS = "MONTHS"
    YEARS = "YEARS"
