from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from app.infrastructure.db.models.base import BaseModel, BaseModelWithTimestamp, utcnow


class Campaign(BaseModelWithTimestamp, table=True):
    __tablename__ = "campaigns"

    name: str = Field(index=True)
    description: str = ""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class CampaignRetailer(SQLModel, table=True):
    """Retailer assigned to a campaign, with its own participation window."""
    __tablename__ = "campaign_retailers"

    campaign_id: str = Field(foreign_key="campaigns.id", primary_key=True)
    retailer_id: str = Field(foreign_key="retailers.id", primary_key=True)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CampaignEmployee(SQLModel, table=True):
    __tablename__ = "campaign_employees"

    campaign_id: str = Field(foreign_key="campaigns.id", primary_key=True)
    employee_id: str = Field(foreign_key="employees.id", primary_key=True)
    assigned_at: datetime = Field(default_factory=utcnow)


class EmployeeRetailerAssignment(BaseModel, table=True):
    """Employee responsible for a retailer within one campaign."""
    __tablename__ = "employee_retailer_assignments"
    __table_args__ = (
        UniqueConstraint("campaign_id", "employee_id", "retailer_id", name="uq_campaign_employee_retailer"),
    )

    campaign_id: str = Field(foreign_key="campaigns.id", index=True)
    employee_id: str = Field(foreign_key="employees.id")
    retailer_id: str = Field(foreign_key="retailers.id")
    assigned_at: datetime = Field(default_factory=utcnow)
