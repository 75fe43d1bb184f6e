from __future__ import annotations

import math
import re
from typing import Any


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[+]?[\d\s\-()]{7,}$")
WEBSITE_PATTERN = re.compile(r"^(https?://)?[^\s/$.?#][^\s]*\.[^\s]+$", re.IGNORECASE)

MIN_PASSWORD_LENGTH = 8


class ValidationError(ValueError):
    """Client-side input problem detected before any request is sent."""


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value or ""))


def is_valid_phone(value: str) -> bool:
    return bool(PHONE_PATTERN.match(value or ""))


def is_valid_website(value: str) -> bool:
    return bool(WEBSITE_PATTERN.match((value or "").strip()))


def parse_int(value: Any, field: str) -> int:
    """
    Strict integer parsing for quantity-like inputs.

    Rejects floats, decimals and scientific notation instead of truncating them.
    """
    # Already an int (but not bool which is a subclass of int)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field} must be an integer")
        if "e" in stripped.lower():
            raise ValidationError(f"{field} must be a plain integer (scientific notation not allowed)")
        if "." in stripped:
            raise ValidationError(f"{field} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    if isinstance(value, float):
        raise ValidationError(f"{field} must be an integer, not a decimal")
    raise ValidationError(f"{field} must be an integer")


def parse_amount(value: Any, field: str) -> float:
    """Parse a money or cost input the way a number field reports it."""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            raise ValidationError(f"{field} must be a number")
    else:
        raise ValidationError(f"{field} must be a number")

    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{field} must be a finite number")
    return number


def password_errors(password: str, confirm_password: str, messages: dict[str, str]) -> dict[str, str]:
    """
    Field errors for a password/confirmation pair.

    `messages` supplies the localized texts for the keys
    password_required, password_too_short and passwords_do_not_match.
    """
    errors: dict[str, str] = {}
    if not password:
        errors["password"] = messages["password_required"]
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = messages["password_too_short"]

    if not confirm_password:
        errors["confirm_password"] = messages["password_required"]
    elif password != confirm_password:
        errors["confirm_password"] = messages["passwords_do_not_match"]
    return errors


def split_full_name(full_name: str) -> tuple[str, str]:
    """'Amina Said Juma' -> ('Amina', 'Said Juma')."""
    parts = (full_name or "").strip().split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])
