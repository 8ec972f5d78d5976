"""
Single retailer registration and listing.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from sqlmodel import Session

from app.core.constants import RETAILER_FILE_FOLDERS
from app.core.enums import CreatedBy, PartyType
from app.core.exceptions import BadRequestError, ConflictError, MissingInputError, PersistenceConflictError
from app.core.logging import audit_log
from app.core.security import mask_sensitive_data
from app.infrastructure.cache.base import OtpStore
from app.infrastructure.db.models.party import Retailer
from app.infrastructure.db.repositories.party_repository import RetailerRepository
from app.infrastructure.storage.base import StorageBackend, StoredBlob
from app.services.base import BaseService
from app.transformers.field_mapping import resolve_fields
from app.transformers.party_validator import build_personal_address, build_retailer_record
from app.utils.validation_utils import as_text


@dataclass
class IncomingFile:
    """File part of a multipart registration."""
    content: bytes
    filename: str
    content_type: Optional[str] = None


class RetailerService(BaseService):
    """Service for retailer self-registration and admin listing."""

    def __init__(
        self,
        db_session: Session,
        otp_store: Optional[OtpStore] = None,
        storage: Optional[StorageBackend] = None,
        code_attempts: int = 5,
    ):
        super().__init__(db_session)
        self.otp_store = otp_store
        self.storage = storage
        self.retailers = RetailerRepository(db_session, code_attempts=code_attempts)

    def get_service_name(self) -> str:
        return "RetailerService"

    def _upload_files(self, files: Mapping[str, IncomingFile]) -> Dict[str, StoredBlob]:
        """Upload each known file field in turn."""
        uploaded: Dict[str, StoredBlob] = {}
        for field_name, folder in RETAILER_FILE_FOLDERS.items():
            incoming = files.get(field_name)
            if incoming is None:
                continue
            uploaded[field_name] = self.storage.save(
                incoming.content,
                filename=incoming.filename,
                folder=folder,
                content_type=incoming.content_type,
            )
        return uploaded

    def register(self, form: Mapping[str, Any], files: Optional[Mapping[str, IncomingFile]] = None) -> Dict[str, Any]:
        """
        Register one retailer from a form that may use flat or dotted keys.

        Raises:
            MissingInputError: Email or contact number absent
            BadRequestError: An OTP for the contact number is still pending
            ConflictError: Email or contact number already registered
        """
        fields = resolve_fields(form, PartyType.RETAILER)
        email = as_text(fields.get("email"))
        contact_no = as_text(fields.get("contactNo"))

        if not email or not contact_no:
            raise MissingInputError("Email and contact number are required")

        if self.otp_store is not None and self.otp_store.has(contact_no):
            raise BadRequestError("Please verify your phone number before registration")

        if self.retailers.find_by_email_or_contact(email, contact_no) is not None:
            raise ConflictError("Phone or email already registered", resource="Retailer")

        self.log_operation("register_retailer", {"contact_no": mask_sensitive_data(contact_no)})

        record = build_retailer_record(
            fields,
            created_by=as_text(fields.get("createdBy")) or CreatedBy.RETAILER_SELF.value,
        )
        record["personal_address"] = build_personal_address(fields)

        uploaded = self._upload_files(files or {}) if self.storage is not None else {}
        if "outletPhoto" in uploaded:
            record["shop_details"]["outletPhoto"] = uploaded["outletPhoto"].to_reference()
        for field_name, column in (
            ("govtIdPhoto", "govt_id_photo"),
            ("personPhoto", "person_photo"),
            ("registrationFormFile", "registration_form_file"),
        ):
            if field_name in uploaded:
                record[column] = uploaded[field_name].to_reference()

        retailer = self.retailers.build(record)
        try:
            self.retailers.insert_isolated(retailer)
        except PersistenceConflictError as e:
            raise ConflictError("Phone or email already registered", resource="Retailer") from e
        self.commit("register_retailer")

        audit_log("REGISTER", "RETAILER", user_id=retailer.id)
        return {"message": "Retailer registered successfully", "uniqueId": retailer.unique_id}

    def list_retailers(self) -> List[Retailer]:
        return self.retailers.get_multi(order_by="created_at")
