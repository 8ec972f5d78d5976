"""
Validation helpers shared by the bulk upload and registration paths.
"""

import math
import re
from functools import lru_cache
from typing import Any, Iterable, List, Mapping, Optional, Pattern

from email_validator import EmailNotValidError, validate_email as email_validate


def is_blank(value: Any) -> bool:
    """
    True for ``None``, NaN, and empty or whitespace-only strings.

    ``0`` and ``False`` are values, not blanks.
    """
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def as_text(value: Any) -> Optional[str]:
    """
    Render a cell value as trimmed text.

    Integral floats lose their ``.0`` so numeric contact numbers and
    pincodes read the way they were typed.
    """
    if is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


@lru_cache(maxsize=32)
def _compile(pattern: str) -> Pattern:
    return re.compile(pattern)


def matches_pattern(value: Any, pattern: str) -> bool:
    """Full-string regex match against the text form of ``value``."""
    text = as_text(value)
    if text is None:
        return False
    return _compile(pattern).fullmatch(text) is not None


def missing_fields(record: Mapping[str, Any], required_fields: Iterable[str]) -> List[str]:
    """Required field names whose value is absent or blank, in declared order."""
    return [field for field in required_fields if is_blank(record.get(field))]


def is_valid_email(value: Any, pattern: str) -> bool:
    """
    Configured shape check first, then the address syntax rules of
    ``email_validator``. No DNS lookups are made.
    """
    if not matches_pattern(value, pattern):
        return False
    try:
        email_validate(as_text(value), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True
