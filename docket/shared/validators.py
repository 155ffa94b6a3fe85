"""Shared validation utilities"""

import re
from typing import Optional

PHONE_ALLOWED_CHARS = re.compile(r"^[0-9+().\-\s]+$")


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate a contact phone number.

    Field crews record local extensions ("555-0101") as well as full numbers,
    so anything with 7 to 15 digits and ordinary separators is accepted.

    Returns:
        The stripped phone number as entered, or None for blank input

    Raises:
        ValueError: If phone number is invalid
    """
    if phone is None:
        return None

    phone = phone.strip()
    if not phone:
        return None

    if not PHONE_ALLOWED_CHARS.match(phone):
        raise ValueError("Phone number contains invalid characters")

    digits = re.sub(r"\D", "", phone)
    if not 7 <= len(digits) <= 15:
        raise ValueError("Phone number must have between 7 and 15 digits")

    return phone


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def blank_to_none(value: Optional[str]) -> Optional[str]:
    """Forms submit empty strings for untouched optional fields"""
    if value is None:
        return None
    value = value.strip()
    return value or None
