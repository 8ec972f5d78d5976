"""
Identifier and one-time-password generators.

Generated codes are not guaranteed unique. The unique constraints on the
party tables are the authority, and insert paths regenerate on collision.
"""

import re
import secrets
import string
from typing import Any, Optional

CODE_ALPHABET = string.ascii_uppercase

_NON_DIGITS = re.compile(r"\D")


def generate_code(letters: int = 4, digits: int = 4, prefix: str = "") -> str:
    """
    Generate a human-readable code such as ``QWER4821``.

    Args:
        letters: Number of uppercase letters (A-Z)
        digits: Number of digits; the numeric part is drawn from
            ``[10**(digits-1), 10**digits - 1]`` so it never has a leading zero
        prefix: Fixed text prepended to the code

    Returns:
        Generated code
    """
    letter_part = "".join(secrets.choice(CODE_ALPHABET) for _ in range(letters))
    number_part = ""
    if digits > 0:
        low = 10 ** (digits - 1)
        number_part = str(low + secrets.randbelow(10 ** digits - low))
    return f"{prefix}{letter_part}{number_part}"


def generate_otp(length: int = 6) -> str:
    """Generate a numeric one-time password."""
    return "".join(secrets.choice(string.digits) for _ in range(length))


def normalize_phone(value: Any) -> Optional[str]:
    """Strip everything but digits from a phone value; ``None`` when nothing is left."""
    if value is None:
        return None
    digits = _NON_DIGITS.sub("", str(value).strip())
    return digits or None
