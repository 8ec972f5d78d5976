from .base import SmsGateway, SmsResult
from .logging_gateway import LoggingSmsGateway

__all__ = ["SmsGateway", "SmsResult", "LoggingSmsGateway"]
