from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from sqlmodel import Session

from app.core.config import Settings, get_settings
from app.core.constants import SPREADSHEET_MEDIA_TYPE
from app.core.enums import PartyType
from app.infrastructure.db.connection import get_session_dependency
from app.infrastructure.db.models.auth import User
from app.interfaces.dependencies import require_admin
from app.schemas.bulk_upload import BulkUploadResponse, FailedRowsExportRequest
from app.schemas.base import ErrorResponse
from app.services.bulk_upload_service import BulkUploadService, build_failed_rows_export

router = APIRouter()

BULK_RESPONSES = {
    201: {"model": BulkUploadResponse, "description": "All rows inserted"},
    207: {"model": BulkUploadResponse, "description": "Partial success"},
    400: {"model": BulkUploadResponse, "description": "No rows inserted, missing file, or unreadable workbook"},
    403: {"model": ErrorResponse, "description": "Caller is not an admin"},
}


def _run_bulk_upload(
    party_type: PartyType,
    file: Optional[UploadFile],
    current_user: User,
    db: Session,
    settings: Settings,
) -> JSONResponse:
    file_bytes = file.file.read() if file is not None else None
    service = BulkUploadService(db, party_type, settings.upload)
    result = service.process(
        file_bytes,
        filename=file.filename if file is not None else None,
        uploaded_by=current_user.id,
    )
    return JSONResponse(status_code=result.status_code, content=jsonable_encoder(result.body))


@router.post("/retailers/bulk", status_code=201, responses=BULK_RESPONSES)
def bulk_upload_retailers(
    file: Optional[UploadFile] = File(None),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_session_dependency),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Register retailers from an Excel sheet"""
    return _run_bulk_upload(PartyType.RETAILER, file, current_user, db, settings)


@router.post("/employees/bulk", status_code=201, responses=BULK_RESPONSES)
def bulk_upload_employees(
    file: Optional[UploadFile] = File(None),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_session_dependency),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Register employees from an Excel sheet"""
    return _run_bulk_upload(PartyType.EMPLOYEE, file, current_user, db, settings)


@router.post("/bulk/failed-rows/export")
def export_failed_rows(
    payload: FailedRowsExportRequest,
    party_type: PartyType = Query(PartyType.RETAILER),
    current_user: User = Depends(require_admin),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Download failed rows as a spreadsheet"""
    content, filename = build_failed_rows_export(
        party_type,
        payload.as_records(),
        sheet_name=settings.upload.failed_rows_sheet,
    )
    return Response(
        content=content,
        media_type=SPREADSHEET_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
