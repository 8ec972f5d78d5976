from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from sqlmodel import Session

from app.core.config import Settings, get_settings
from app.core.constants import RETAILER_FILE_FOLDERS
from app.infrastructure.cache.base import OtpStore
from app.infrastructure.db.connection import get_session_dependency
from app.infrastructure.db.models.auth import User
from app.infrastructure.storage.base import StorageBackend
from app.interfaces.dependencies import get_blob_storage, get_otp_store, require_admin
from app.schemas.party import RetailerListResponse, RetailerRead, RetailerRegistrationResponse
from app.services.retailer_service import IncomingFile, RetailerService

router = APIRouter()
admin_router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=RetailerRegistrationResponse)
async def register_retailer(
    request: Request,
    db: Session = Depends(get_session_dependency),
    otp_store: OtpStore = Depends(get_otp_store),
    storage: StorageBackend = Depends(get_blob_storage),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Register a retailer from a multipart form with flat or dotted field names"""
    form = await request.form()

    fields: Dict[str, Any] = {}
    files: Dict[str, IncomingFile] = {}
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if key in RETAILER_FILE_FOLDERS and key not in files:
                files[key] = IncomingFile(
                    content=await value.read(),
                    filename=value.filename or key,
                    content_type=value.content_type,
                )
        else:
            fields.setdefault(key, value)

    service = RetailerService(db, otp_store=otp_store, storage=storage, code_attempts=settings.upload.code_attempts)
    return await run_in_threadpool(service.register, fields, files)


@admin_router.get("/retailers", response_model=RetailerListResponse)
def list_retailers(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_session_dependency),
) -> RetailerListResponse:
    """List all retailers"""
    retailers = RetailerService(db).list_retailers()
    return RetailerListResponse(retailers=[RetailerRead.model_validate(r) for r in retailers])
