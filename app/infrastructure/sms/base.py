"""
Base interface for SMS delivery.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class SmsResult:
    """Outcome of one send."""
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class SmsGateway(ABC):
    """Abstract SMS provider."""

    @abstractmethod
    def send(self, phone: str, message: str) -> SmsResult:
        """Deliver ``message`` to ``phone``."""
