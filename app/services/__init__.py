from .auth_service import AuthService
from .bulk_upload_service import BulkUploadService, build_failed_rows_export
from .campaign_service import CampaignService
from .otp_service import OtpService
from .password_reset_service import PasswordResetService
from .retailer_service import IncomingFile, RetailerService

__all__ = [
    "AuthService",
    "BulkUploadService",
    "build_failed_rows_export",
    "CampaignService",
    "OtpService",
    "PasswordResetService",
    "IncomingFile",
    "RetailerService",
]
