"""Canonical forms for client contact fields before they are stored or compared."""

import re
from typing import Optional

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Reduce a US number to E.164, e.g. "(808) 555-0123" -> "+18085550123".

    Ten digits get the +1 country code; eleven digits must already start
    with 1. Anything else raises ValueError.
    """
    if not phone:
        return None

    digits = _NON_DIGITS.sub("", phone)
    if len(digits) == 10:
        digits = "1" + digits
    if len(digits) == 11 and digits[0] == "1":
        return f"+{digits}"

    raise ValueError(f"Invalid phone number '{phone}'. Use 10-digit US format (e.g., 8085551234).")


def normalize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    return email.strip().lower()


def normalize_name(name: Optional[str]) -> Optional[str]:
    """Collapse whitespace runs inside a person's name."""
    if not name:
        return None
    return " ".join(name.split())
