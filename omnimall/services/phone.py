"""Phone number canonicalization for SMS recipients and WhatsApp links.

Local Ghanaian numbers ("024 123 4567") become international digits
("233241234567"). Anything else passes through with only non-digits removed.
"""

import re

COUNTRY_CALLING_CODE = "233"

_NON_DIGITS = re.compile(r"\D")


def canonicalize(phone: str | None) -> str:
    """Canonicalize a phone number.

    Strips every non-digit, then replaces a single leading zero with the
    country calling code. Never raises; idempotent.

    Examples:
        >>> canonicalize("024-123-4567")
        '233241234567'
        >>> canonicalize("+233 24 123 4567")
        '233241234567'
    """
    cleaned = _NON_DIGITS.sub("", phone or "")
    if cleaned.startswith("0") and not cleaned.startswith("00"):
        cleaned = COUNTRY_CALLING_CODE + cleaned[1:]
    return cleaned


def whatsapp_link(phone: str | None) -> str | None:
    """wa.me deep link for a phone number, or None if nothing usable remains."""
    number = canonicalize(phone)
    if not number:
        return None
    return f"https://wa.me/{number}"
