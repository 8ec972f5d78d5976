"""
Bulk upload orchestration.

AuthCheck happens in the route dependency; this service runs the rest:
file presence, decode, per-row validation, unordered insert, report, and
response status selection.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from sqlmodel import Session

from app.core.config import UploadSettings
from app.core.enums import PartyType
from app.core.exceptions import BadRequestError, MissingInputError
from app.core.logging import StructuredLogger, audit_log
from app.infrastructure.db.repositories.party_repository import (
    EmployeeRepository,
    PartyRepository,
    RetailerRepository,
)
from app.processors.excel_processor import decode_workbook, encode_workbook, failed_rows_to_records
from app.services.base import BaseService
from app.services.batch_inserter import BatchInserter
from app.services.report_builder import ReportBuilder, UploadReport
from app.transformers.party_validator import Invalid, Valid, create_row_validator


@dataclass
class BulkUploadResult:
    status_code: int
    body: Dict[str, Any]
    report: UploadReport


def select_response(report: UploadReport) -> Tuple[int, str, bool]:
    """
    Pick ``(status_code, message, success)`` for a finished report.

    Total failure (including an empty sheet) is 400, full success 201 and
    anything mixed 207.
    """
    summary = report.summary
    plural = report.party_type.plural
    if summary.successful == 0:
        return 400, f"No {plural} were added", False
    if summary.failed > 0:
        return 207, "Partial success", True
    return 201, f"All {plural} added successfully", True


class BulkUploadService(BaseService):
    """
    Runs one bulk upload for a party type.

    Args:
        db_session: Session for the request's unit of work
        party_type: Retailer or Employee
        settings: Upload settings
        logger: Structured logger passed on to the validator and inserter
    """

    def __init__(
        self,
        db_session: Session,
        party_type: PartyType,
        settings: UploadSettings,
        logger: Optional[StructuredLogger] = None,
    ):
        super().__init__(db_session)
        self.party_type = party_type
        self.settings = settings
        self.events = logger or StructuredLogger(__name__, party_type=party_type.value)

    def get_service_name(self) -> str:
        return "BulkUploadService"

    def _repository(self) -> PartyRepository:
        if self.party_type is PartyType.RETAILER:
            return RetailerRepository(self.db, code_attempts=self.settings.code_attempts)
        return EmployeeRepository(self.db, code_attempts=self.settings.code_attempts)

    def process(
        self,
        file_bytes: Optional[bytes],
        filename: Optional[str] = None,
        uploaded_by: Optional[str] = None,
    ) -> BulkUploadResult:
        """
        Process an uploaded workbook.

        Raises:
            MissingInputError: No file was attached
            DecodeError: The file is not a readable workbook
        """
        if file_bytes is None:
            raise MissingInputError("Excel file is required", field="file")
        if len(file_bytes) > self.settings.max_file_size:
            raise BadRequestError(
                f"File exceeds the maximum size of {self.settings.max_file_size} bytes",
                details={"size": len(file_bytes)},
            )

        events = self.events.bind(filename=filename, uploaded_by=uploaded_by)
        rows = decode_workbook(file_bytes)
        events.info("Workbook decoded", total_rows=len(rows))

        repository = self._repository()
        validator = create_row_validator(self.party_type, repository, self.settings, events)
        outcomes = validator.validate_all(rows)

        valid = [outcome for outcome in outcomes if isinstance(outcome, Valid)]
        invalid = [outcome for outcome in outcomes if isinstance(outcome, Invalid)]

        inserted = BatchInserter(repository, events).insert(valid)
        self.commit("bulk_upload")

        report = ReportBuilder(self.party_type).build(
            total_rows=len(rows),
            inserted=inserted.inserted,
            invalid=invalid,
            conflicts=inserted.conflicts,
        )
        status_code, message, success = select_response(report)

        summary = report.summary.to_dict()
        events.info("Bulk upload finished", status_code=status_code, **summary)
        audit_log(
            action="BULK_UPLOAD",
            resource=self.party_type.value.upper(),
            user_id=uploaded_by,
            details=summary,
            success=success,
        )

        body = {"message": message, "success": success, **report.to_dict()}
        return BulkUploadResult(status_code=status_code, body=body, report=report)


def build_failed_rows_export(
    party_type: PartyType,
    failed_rows: Sequence[Mapping[str, Any]],
    sheet_name: str,
    today: Optional[date] = None,
) -> Tuple[bytes, str]:
    """
    Re-export failed rows as a workbook.

    Returns:
        ``(workbook_bytes, filename)``; the filename follows
        ``Failed_<Party>_Upload_<YYYY-MM-DD>.xlsx``
    """
    today = today or date.today()
    content = encode_workbook(failed_rows_to_records(failed_rows), sheet_name=sheet_name)
    filename = f"Failed_{party_type.value}_Upload_{today.isoformat()}.xlsx"
    return content, filename
