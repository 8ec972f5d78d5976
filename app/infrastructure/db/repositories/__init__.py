"""
Database repositories package.
"""

from .base import BaseRepository
from .campaign_repository import CampaignRepository
from .party_repository import CodeCollisionError, EmployeeRepository, PartyRepository, RetailerRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "CampaignRepository",
    "CodeCollisionError",
    "EmployeeRepository",
    "PartyRepository",
    "RetailerRepository",
    "UserRepository",
]
