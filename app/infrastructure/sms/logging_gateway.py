import logging
import uuid

from .base import SmsGateway, SmsResult
from ...core.security import mask_sensitive_data

logger = logging.getLogger(__name__)


class LoggingSmsGateway(SmsGateway):
    """
    Gateway that records sends in the log instead of calling a provider.

    Message bodies carry OTPs, so only the length is logged.
    """

    def __init__(self):
        self.sent_count = 0

    def send(self, phone: str, message: str) -> SmsResult:
        message_id = uuid.uuid4().hex
        self.sent_count += 1
        logger.info(
            f"SMS queued to {mask_sensitive_data(phone)} "
            f"(id={message_id}, length={len(message)})"
        )
        return SmsResult(success=True, message_id=message_id)
