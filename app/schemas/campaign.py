"""
Campaign request and response schemas.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import Field, field_validator

from .base import CamelModel


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat offset-less datetimes as UTC; stored timestamps are always aware."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CampaignCreate(CamelModel):
    name: str = Field(min_length=1)
    description: str = ""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    retailer_ids: List[str] = Field(default_factory=list)
    employee_ids: List[str] = Field(default_factory=list)

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class CampaignRetailerRead(CamelModel):
    retailer_id: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CampaignEmployeeRead(CamelModel):
    employee_id: str
    assigned_at: datetime


class CampaignRead(CamelModel):
    id: str
    name: str
    description: str = ""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: datetime
    assigned_retailers: List[CampaignRetailerRead] = Field(default_factory=list)
    assigned_employees: List[CampaignEmployeeRead] = Field(default_factory=list)


class RetailerDatesUpdate(CamelModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class RetailerDatesResponse(CamelModel):
    message: str
    retailer: CampaignRetailerRead


class EmployeeRetailerAssignRequest(CamelModel):
    campaign_id: Optional[str] = None
    retailer_id: Optional[str] = None
    employee_id: Optional[str] = None


class AssignmentRead(CamelModel):
    employee_id: str
    retailer_id: str
    assigned_at: datetime


class AssignmentResponse(CamelModel):
    message: str
    mapping: List[AssignmentRead]
