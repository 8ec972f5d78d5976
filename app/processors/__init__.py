# ==============================================
# app/processors/__init__.py
# ==============================================
from .excel_processor import (
    UploadRow,
    decode_workbook,
    detect_engine,
    encode_workbook,
    failed_rows_to_records,
)

__all__ = [
    "UploadRow",
    "decode_workbook",
    "detect_engine",
    "encode_workbook",
    "failed_rows_to_records",
]
