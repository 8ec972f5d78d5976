# ==============================================
# app/transformers/party_validator.py
# ==============================================
"""
Per-row validation for bulk party uploads.

Each row is checked in a fixed order (required fields, duplicates in the
store, then format rules) and stops at the first failing stage. Rows are
independent: a failing row never affects another.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from app.core.config import UploadSettings
from app.core.constants import (
    REASON_DUPLICATE,
    REASON_INVALID_CONTACT,
    REASON_INVALID_EMAIL,
    REASON_INVALID_PINCODE,
    REASON_MISSING_FIELDS,
)
from app.core.enums import CreatedBy, PartyType
from app.core.exceptions import RowValidationError
from app.core.logging import StructuredLogger
from app.infrastructure.db.repositories.party_repository import (
    EmployeeRepository,
    PartyRepository,
    RetailerRepository,
)
from app.processors.excel_processor import UploadRow
from app.transformers.field_mapping import resolve_fields
from app.utils.validation_utils import as_text, is_valid_email, matches_pattern, missing_fields


@dataclass
class Valid:
    """Row that passed every check, with its insert-ready record."""
    row_number: int
    record: Dict[str, Any]
    raw: UploadRow = field(default_factory=dict)


@dataclass
class Invalid:
    """Row rejected by validation."""
    row_number: int
    reasons: List[str]
    raw: UploadRow = field(default_factory=dict)

    @property
    def reason(self) -> str:
        return "; ".join(self.reasons)


ValidationOutcome = Union[Valid, Invalid]


def _text(fields: Dict[str, Any], name: str) -> str:
    return as_text(fields.get(name)) or ""


def _coordinate(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def build_shop_details(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Nested shop object assembled from resolved flat fields."""
    return {
        "shopName": _text(fields, "shopName"),
        "businessType": _text(fields, "businessType"),
        "ownershipType": _text(fields, "ownershipType"),
        "dateOfEstablishment": _text(fields, "dateOfEstablishment"),
        "GSTNo": _text(fields, "GSTNo"),
        "PANCard": _text(fields, "PANCard"),
        "shopAddress": {
            "address": _text(fields, "shopAddress"),
            "address2": _text(fields, "shopAddress2"),
            "city": _text(fields, "shopCity"),
            "state": _text(fields, "shopState"),
            "pincode": _text(fields, "shopPincode"),
            "geoTags": {
                "lat": _coordinate(fields.get("shopLat")),
                "lng": _coordinate(fields.get("shopLng")),
            },
        },
    }


def build_bank_details(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "bankName": _text(fields, "bankName"),
        "accountNumber": _text(fields, "accountNumber"),
        "IFSC": _text(fields, "IFSC"),
        "branchName": _text(fields, "branchName"),
    }


def build_personal_address(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "address": _text(fields, "address"),
        "city": _text(fields, "city"),
        "state": _text(fields, "state"),
        "geoTags": {
            "lat": _coordinate(fields.get("lat")),
            "lng": _coordinate(fields.get("lng")),
        },
    }


def build_retailer_record(fields: Dict[str, Any], created_by: str) -> Dict[str, Any]:
    """
    Insert-ready retailer values from resolved fields.

    The password seed is the contact number; the repository hashes it.
    """
    contact_no = _text(fields, "contactNo")
    return {
        "name": _text(fields, "name"),
        "email": _text(fields, "email"),
        "contact_no": contact_no,
        "password": contact_no,
        "dob": as_text(fields.get("dob")),
        "gender": _text(fields, "gender"),
        "govt_id_type": _text(fields, "govtIdType"),
        "govt_id_number": _text(fields, "govtIdNumber"),
        "shop_details": build_shop_details(fields),
        "bank_details": build_bank_details(fields),
        "part_of_india": _text(fields, "partOfIndia") or "N",
        "created_by": created_by,
        "phone_verified": True,
    }


class RowValidator:
    """
    Validates decoded rows for one party type.

    Args:
        repository: Party repository used for the duplicate check
        settings: Upload settings supplying patterns and the header offset
        logger: Structured logger; one event is emitted per row decision
    """

    party_type: PartyType
    required_fields: Tuple[str, ...] = ()

    def __init__(
        self,
        repository: PartyRepository,
        settings: UploadSettings,
        logger: Optional[StructuredLogger] = None,
    ):
        self.repository = repository
        self.settings = settings
        self.logger = logger or StructuredLogger(__name__, party_type=self.party_type.value)

    def row_number(self, index: int) -> int:
        return index + self.settings.header_offset

    def validate(self, row: UploadRow, index: int) -> ValidationOutcome:
        row_number = self.row_number(index)
        fields = resolve_fields(row, self.party_type)

        try:
            self.check(fields)
        except RowValidationError as e:
            self.logger.info("Row rejected", row_number=row_number, reasons=e.reasons)
            return Invalid(row_number=row_number, reasons=e.reasons, raw=row)

        self.logger.info("Row accepted", row_number=row_number)
        return Valid(row_number=row_number, record=self.build_record(fields), raw=row)

    def validate_all(self, rows: Iterable[UploadRow]) -> List[ValidationOutcome]:
        return [self.validate(row, index) for index, row in enumerate(rows)]

    def check(self, fields: Dict[str, Any]) -> None:
        """
        Run every stage against resolved fields.

        Raises:
            RowValidationError: At the first failing stage
        """
        missing = missing_fields(fields, self.required_fields)
        if missing:
            raise RowValidationError([REASON_MISSING_FIELDS.format(fields=", ".join(missing))])

        email = as_text(fields.get("email"))
        contact_no = as_text(fields.get("contactNo"))
        if self.repository.find_by_email_or_contact(email, contact_no) is not None:
            raise RowValidationError([REASON_DUPLICATE])

        if not is_valid_email(email, self.settings.email_pattern):
            raise RowValidationError([REASON_INVALID_EMAIL])

        if not matches_pattern(contact_no, self.settings.contact_pattern):
            raise RowValidationError([REASON_INVALID_CONTACT])

        self.check_party_rules(fields)

    def check_party_rules(self, fields: Dict[str, Any]) -> None:
        """Party-specific format checks, run after the shared ones."""

    def build_record(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError


class RetailerRowValidator(RowValidator):
    party_type = PartyType.RETAILER
    required_fields = (
        "shopName",
        "shopAddress",
        "shopCity",
        "shopState",
        "shopPincode",
        "businessType",
        "name",
        "PANCard",
        "contactNo",
        "email",
        "bankName",
        "accountNumber",
        "IFSC",
        "branchName",
    )

    def check_party_rules(self, fields: Dict[str, Any]) -> None:
        # length check only; the value is not parsed as a number
        if len(_text(fields, "shopPincode")) != self.settings.pincode_length:
            raise RowValidationError([REASON_INVALID_PINCODE])

    def build_record(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return build_retailer_record(fields, created_by=CreatedBy.ADMIN_ADDED.value)


class EmployeeRowValidator(RowValidator):
    party_type = PartyType.EMPLOYEE
    required_fields = ("name", "email", "contactNo", "position")

    def build_record(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        contact_no = _text(fields, "contactNo")
        return {
            "name": _text(fields, "name"),
            "email": _text(fields, "email"),
            "contact_no": contact_no,
            "password": contact_no,
            "position": _text(fields, "position"),
            "department": _text(fields, "department"),
            "gender": _text(fields, "gender"),
            "created_by": CreatedBy.ADMIN_ADDED.value,
        }


def create_row_validator(
    party_type: PartyType,
    repository: PartyRepository,
    settings: UploadSettings,
    logger: Optional[StructuredLogger] = None,
) -> RowValidator:
    """Build the validator matching ``party_type``."""
    if party_type is PartyType.RETAILER:
        if not isinstance(repository, RetailerRepository):
            raise TypeError("Retailer validation needs a RetailerRepository")
        return RetailerRowValidator(repository, settings, logger)
    if not isinstance(repository, EmployeeRepository):
        raise TypeError("Employee validation needs an EmployeeRepository")
    return EmployeeRowValidator(repository, settings, logger)
