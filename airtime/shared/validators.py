"""Shared validation utilities"""

import re
from typing import Optional

from ..services.slots import format_clock, parse_clock

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase, trimmed email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email format")
    return email


def validate_clock(value: Optional[str]) -> Optional[str]:
    """Normalize an HH:MM[:SS] string to HH:MM"""
    if value is None:
        return value
    return format_clock(parse_clock(value))


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """Keep digits, spaces and a leading +; at least 7 digits"""
    if not phone:
        return phone

    phone = phone.strip()
    if not re.fullmatch(r"\+?[\d\s()-]+", phone) or len(re.sub(r"\D", "", phone)) < 7:
        raise ValueError("Invalid phone number")
    return phone
