"""
Bulk upload response and export schemas.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .base import CamelModel


class UploadSummarySchema(CamelModel):
    total_rows: int
    successful: int
    failed: int
    success_rate: str


class FailedRowSchema(CamelModel):
    row_number: int
    reason: str
    data: Dict[str, Any] = Field(default_factory=dict)


class InsertedRetailerSchema(CamelModel):
    id: str
    name: str
    email: str
    contact_no: str
    unique_id: Optional[str] = None
    retailer_code: Optional[str] = None


class InsertedEmployeeSchema(CamelModel):
    id: str
    name: str
    email: str
    contact_no: str
    employee_id: Optional[str] = None


class BulkUploadResponse(CamelModel):
    """Shape shared by the 201, 207 and 400 bulk upload responses."""
    message: str
    success: bool
    summary: UploadSummarySchema
    inserted_retailers: Optional[List[InsertedRetailerSchema]] = None
    inserted_employees: Optional[List[InsertedEmployeeSchema]] = None
    failed_rows: List[FailedRowSchema] = Field(default_factory=list)


class FailedRowsExportRequest(CamelModel):
    failed_rows: List[FailedRowSchema]

    def as_records(self) -> List[Dict[str, Any]]:
        return [row.model_dump(by_alias=True) for row in self.failed_rows]
