from .base import CamelModel, ErrorResponse, HealthCheckSchema, MessageResponse
from .auth import (
    OtpSendRequest,
    OtpVerifyRequest,
    PasswordResetInitiateRequest,
    PasswordResetRequest,
    Token,
    UserCreate,
    UserRead,
)
from .bulk_upload import BulkUploadResponse, FailedRowSchema, FailedRowsExportRequest, UploadSummarySchema
from .campaign import (
    AssignmentRead,
    AssignmentResponse,
    CampaignCreate,
    CampaignRead,
    EmployeeRetailerAssignRequest,
    RetailerDatesResponse,
    RetailerDatesUpdate,
)
from .party import EmployeeRead, RetailerListResponse, RetailerRead, RetailerRegistrationResponse

__all__ = [
    "CamelModel",
    "ErrorResponse",
    "HealthCheckSchema",
    "MessageResponse",
    "OtpSendRequest",
    "OtpVerifyRequest",
    "PasswordResetInitiateRequest",
    "PasswordResetRequest",
    "Token",
    "UserCreate",
    "UserRead",
    "BulkUploadResponse",
    "FailedRowSchema",
    "FailedRowsExportRequest",
    "UploadSummarySchema",
    "AssignmentRead",
    "AssignmentResponse",
    "CampaignCreate",
    "CampaignRead",
    "EmployeeRetailerAssignRequest",
    "RetailerDatesResponse",
    "RetailerDatesUpdate",
    "EmployeeRead",
    "RetailerListResponse",
    "RetailerRead",
    "RetailerRegistrationResponse",
]
