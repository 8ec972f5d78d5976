"""
Upload report assembly.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence

from app.core.enums import PartyType
from app.infrastructure.db.models.party import Employee, Retailer
from app.processors.excel_processor import UploadRow
from app.services.batch_inserter import InsertConflict, InsertedRecord
from app.transformers.party_validator import Invalid


def format_success_rate(successful: int, total_rows: int) -> str:
    """Percentage with two decimals, or ``"0%"`` for an empty upload."""
    if total_rows == 0:
        return "0%"
    return "{:.2f}%".format(successful / total_rows * 100)


def summarize_retailer(retailer: Retailer) -> Dict[str, Any]:
    return {
        "id": retailer.id,
        "name": retailer.name,
        "email": retailer.email,
        "contactNo": retailer.contact_no,
        "uniqueId": retailer.unique_id,
        "retailerCode": retailer.retailer_code,
    }


def summarize_employee(employee: Employee) -> Dict[str, Any]:
    return {
        "id": employee.id,
        "name": employee.name,
        "email": employee.email,
        "contactNo": employee.contact_no,
        "employeeId": employee.employee_id,
    }


SUMMARIZERS: Dict[PartyType, Callable[[Any], Dict[str, Any]]] = {
    PartyType.RETAILER: summarize_retailer,
    PartyType.EMPLOYEE: summarize_employee,
}


@dataclass
class FailedRow:
    row_number: int
    reason: str
    data: UploadRow = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"rowNumber": self.row_number, "reason": self.reason, "data": self.data}


@dataclass
class UploadSummary:
    total_rows: int
    successful: int
    failed: int
    success_rate: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRows": self.total_rows,
            "successful": self.successful,
            "failed": self.failed,
            "successRate": self.success_rate,
        }


@dataclass
class UploadReport:
    party_type: PartyType
    summary: UploadSummary
    inserted: List[Dict[str, Any]] = field(default_factory=list)
    failed_rows: List[FailedRow] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            self.party_type.inserted_key: self.inserted,
            "failedRows": [failed.to_dict() for failed in self.failed_rows],
        }


class ReportBuilder:
    """
    Aggregates per-row outcomes into an UploadReport.

    Inserted items carry display fields only; password hashes and other
    internal columns never reach the report.
    """

    def __init__(self, party_type: PartyType):
        self.party_type = party_type
        self._summarize = SUMMARIZERS[party_type]

    def build(
        self,
        total_rows: int,
        inserted: Sequence[InsertedRecord],
        invalid: Sequence[Invalid] = (),
        conflicts: Sequence[InsertConflict] = (),
    ) -> UploadReport:
        failed_rows = [FailedRow(row.row_number, row.reason, row.raw) for row in invalid]
        failed_rows.extend(FailedRow(c.row_number, c.reason, c.raw) for c in conflicts)
        failed_rows.sort(key=lambda failed: failed.row_number)

        successful = len(inserted)
        summary = UploadSummary(
            total_rows=total_rows,
            successful=successful,
            failed=len(failed_rows),
            success_rate=format_success_rate(successful, total_rows),
        )

        return UploadReport(
            party_type=self.party_type,
            summary=summary,
            inserted=[self._summarize(record.model) for record in inserted],
            failed_rows=failed_rows,
        )
