from starlette.status import HTTP_400_BAD_REQUEST
from typing import Any, Dict, List, Optional, Union

from .constants import REASON_INSERT_CONFLICT


class AppException(Exception):
    def __init__(self, message: str,
                 error_code: Optional[str] = None,
                 status_code: int = HTTP_400_BAD_REQUEST,
                 details: Optional[Dict[str, Any]] = None,):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.status_code}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', status_code={self.status_code})"


class UnauthorizedError(AppException):
    """Exception raised when authentication fails."""

    def __init__(
        self,
        message: str = "Authentication required",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_code="UNAUTHORIZED",
            details=details,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Exception raised when the caller lacks the required capability."""

    def __init__(
        self,
        message: str = "Access forbidden",
        role: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.role = role

        exception_details = details or {}
        if role:
            exception_details["required_role"] = role

        super().__init__(
            message=message,
            error_code="FORBIDDEN",
            details=exception_details,
            status_code=403,
        )


class MissingInputError(AppException):
    """Exception raised when a required request input is absent."""

    def __init__(
        self,
        message: str = "Required input is missing",
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.field = field

        exception_details = details or {}
        if field:
            exception_details["field"] = field

        super().__init__(
            message=message,
            error_code="MISSING_INPUT",
            details=exception_details,
            status_code=400,
        )


class DecodeError(AppException):
    """Exception raised when an uploaded file is not a readable workbook."""

    def __init__(
        self,
        message: str = "Uploaded file is not a valid Excel workbook",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_code="DECODE_ERROR",
            details=details,
            status_code=400,
        )


class NotFoundError(AppException):
    """Exception raised when a resource is not found."""

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[Union[str, int]] = None,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.resource = resource
        self.resource_id = resource_id

        if not message:
            if resource_id:
                message = f"{resource} with ID '{resource_id}' not found"
            else:
                message = f"{resource} not found"

        exception_details = details or {}
        if resource_id is not None:
            exception_details["resource_id"] = str(resource_id)

        super().__init__(
            message=message,
            error_code="NOT_FOUND",
            details=exception_details,
            status_code=404,
        )


class ConflictError(AppException):
    """Exception raised when a request conflicts with stored records."""

    def __init__(
        self,
        message: str = "Conflict with current state",
        resource: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.resource = resource

        exception_details = details or {}
        if resource:
            exception_details["resource"] = resource

        super().__init__(
            message=message,
            error_code="CONFLICT",
            details=exception_details,
            status_code=400,
        )


class BadRequestError(AppException):
    """Exception raised for bad requests."""

    def __init__(
        self,
        message: str = "Bad request",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_code="BAD_REQUEST",
            details=details,
            status_code=400,
        )


class OtpError(AppException):
    """Base class for OTP verification failures."""

    def __init__(self, message: str, error_code: str, status_code: int):
        super().__init__(message=message, error_code=error_code, status_code=status_code)


class OtpNotFoundError(OtpError):
    def __init__(self, message: str = "OTP not found. Please request a new one."):
        super().__init__(message, "OTP_NOT_FOUND", 404)


class OtpExpiredError(OtpError):
    def __init__(self, message: str = "OTP expired. Please request a new one."):
        super().__init__(message, "OTP_EXPIRED", 410)


class OtpAttemptsExceededError(OtpError):
    def __init__(self, message: str = "Maximum verification attempts exceeded"):
        super().__init__(message, "OTP_ATTEMPTS_EXCEEDED", 429)


class OtpMismatchError(OtpError):
    def __init__(self, message: str = "Invalid OTP"):
        super().__init__(message, "OTP_INVALID", 401)


class DatabaseError(AppException):
    """Exception raised for database-related errors."""

    def __init__(
        self,
        message: str = "Database error occurred",
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.operation = operation

        exception_details = details or {}
        if operation:
            exception_details["operation"] = operation

        super().__init__(
            message=message,
            error_code="DATABASE_ERROR",
            details=exception_details,
            status_code=500,
        )


class FileStorageError(AppException):
    """Exception raised for file storage-related errors."""

    def __init__(
        self,
        message: str = "File storage error occurred",
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        exception_details = details or {}
        if operation:
            exception_details["operation"] = operation

        super().__init__(
            message=message,
            error_code="FILE_STORAGE_ERROR",
            details=exception_details,
            status_code=500,
        )


class RowValidationError(Exception):
    """A single upload row failed validation. Collected, never returned to callers as an HTTP error."""

    def __init__(self, reasons: List[str]):
        self.reasons = list(reasons)
        super().__init__("; ".join(self.reasons))


class PersistenceConflictError(Exception):
    """A record was rejected by a store-level unique constraint."""

    def __init__(self, message: str = REASON_INSERT_CONFLICT,
                 row_number: Optional[int] = None):
        self.message = message
        self.row_number = row_number
        super().__init__(message)
