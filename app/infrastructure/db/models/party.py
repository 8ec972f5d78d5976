from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from app.core.enums import CreatedBy
from app.infrastructure.db.models.base import BaseModelWithTimestamp


class Retailer(BaseModelWithTimestamp, table=True):
    """Retailer party. Email and contact number are each unique."""
    __tablename__ = "retailers"

    unique_id: Optional[str] = Field(default=None, unique=True, index=True, max_length=16)
    retailer_code: Optional[str] = Field(default=None, unique=True, index=True, max_length=16)
    name: str
    contact_no: str = Field(unique=True, index=True, max_length=20)
    email: str = Field(unique=True, index=True, max_length=255)
    password: str
    dob: Optional[str] = None
    gender: str = ""
    govt_id_type: str = ""
    govt_id_number: str = ""
    govt_id_photo: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    person_photo: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    registration_form_file: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    personal_address: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    shop_details: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    bank_details: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    part_of_india: str = "N"
    created_by: str = CreatedBy.ADMIN_ADDED.value
    phone_verified: bool = False


class Employee(BaseModelWithTimestamp, table=True):
    """Field employee party. Email and contact number are each unique."""
    __tablename__ = "employees"

    employee_id: Optional[str] = Field(default=None, unique=True, index=True, max_length=16)
    name: str
    contact_no: str = Field(unique=True, index=True, max_length=20)
    email: str = Field(unique=True, index=True, max_length=255)
    password: str
    position: str = ""
    department: str = ""
    gender: str = ""
    created_by: str = CreatedBy.ADMIN_ADDED.value
