"""
Database models package.
"""

from .base import BaseModel, TimestampMixin, BaseModelWithTimestamp
from .auth import User
from .party import Retailer, Employee
from .campaign import Campaign, CampaignRetailer, CampaignEmployee, EmployeeRetailerAssignment

__all__ = [
    "BaseModel",
    "BaseModelWithTimestamp",
    "TimestampMixin",
    "User",

    "Retailer",
    "Employee",

    "Campaign",
    "CampaignRetailer",
    "CampaignEmployee",
    "EmployeeRetailerAssignment",
]
