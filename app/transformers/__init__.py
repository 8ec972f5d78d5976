# ==============================================
# app/transformers/__init__.py
# ==============================================
from .field_mapping import FIELD_TABLES, FieldSpec, resolve_fields, resolve_value
from .party_validator import (
    EmployeeRowValidator,
    Invalid,
    RetailerRowValidator,
    RowValidator,
    Valid,
    ValidationOutcome,
    create_row_validator,
)

__all__ = [
    "FIELD_TABLES",
    "FieldSpec",
    "resolve_fields",
    "resolve_value",
    "EmployeeRowValidator",
    "Invalid",
    "RetailerRowValidator",
    "RowValidator",
    "Valid",
    "ValidationOutcome",
    "create_row_validator",
]
