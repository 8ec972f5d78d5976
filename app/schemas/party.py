"""
Retailer and employee read schemas. Password hashes are never part of them.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from .base import CamelModel


class RetailerRead(CamelModel):
    id: str
    unique_id: Optional[str] = None
    retailer_code: Optional[str] = None
    name: str
    contact_no: str
    email: str
    dob: Optional[str] = None
    gender: str = ""
    govt_id_type: str = ""
    govt_id_number: str = ""
    govt_id_photo: Optional[Dict[str, Any]] = None
    person_photo: Optional[Dict[str, Any]] = None
    registration_form_file: Optional[Dict[str, Any]] = None
    personal_address: Optional[Dict[str, Any]] = None
    shop_details: Dict[str, Any] = {}
    bank_details: Dict[str, Any] = {}
    part_of_india: str = "N"
    created_by: str
    phone_verified: bool
    created_at: datetime


class RetailerListResponse(CamelModel):
    retailers: List[RetailerRead]


class RetailerRegistrationResponse(CamelModel):
    message: str
    unique_id: Optional[str] = None


class EmployeeRead(CamelModel):
    id: str
    employee_id: Optional[str] = None
    name: str
    email: str
    contact_no: str
    position: str = ""
    department: str = ""
    gender: str = ""
    created_at: datetime
