"""
Utilities module.
Contains common helper functions shared by the services.
"""

from .security import generate_code, generate_otp, normalize_phone
from .validation_utils import as_text, is_blank, is_valid_email, matches_pattern, missing_fields

__all__ = [
    "generate_code",
    "generate_otp",
    "normalize_phone",
    "as_text",
    "is_blank",
    "is_valid_email",
    "matches_pattern",
    "missing_fields",
]
