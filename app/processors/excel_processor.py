# ==============================================
# app/processors/excel_processor.py
# ==============================================
"""
Spreadsheet codec for bulk uploads.

Decodes the first sheet of an uploaded workbook into row mappings keyed by
header text, and encodes row mappings back into a single-sheet ``.xlsx``.
"""
import io
import zipfile
from typing import Any, Dict, Iterable, List, Mapping

import numpy as np
import pandas as pd
import xlrd
from xlrd.compdoc import CompDocError
from openpyxl.utils.exceptions import InvalidFileException

from app.core.constants import EXPORT_REASON_COLUMN, EXPORT_ROW_NUMBER_COLUMN
from app.core.exceptions import DecodeError
from app.core.logging import get_logger

logger = get_logger(__name__)

UploadRow = Dict[str, Any]

XLSX_SIGNATURE = b"PK\x03\x04"
XLS_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

_READ_ERRORS = (
    ValueError,
    KeyError,
    OSError,
    zipfile.BadZipFile,
    xlrd.XLRDError,
    CompDocError,
    InvalidFileException,
)


def detect_engine(file_bytes: bytes) -> str:
    """
    Pick the pandas engine from the container signature.

    Raises:
        DecodeError: If the bytes are neither an OOXML nor an OLE2 workbook
    """
    if not file_bytes:
        raise DecodeError("Uploaded file is empty")
    if file_bytes.startswith(XLSX_SIGNATURE):
        return "openpyxl"
    if file_bytes.startswith(XLS_SIGNATURE):
        return "xlrd"
    raise DecodeError()


def _clean_value(value: Any) -> Any:
    """Convert a pandas cell to a plain Python scalar."""
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, pd.Timestamp):
        value = value.to_pydatetime()
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _is_empty(value: Any) -> bool:
    # whitespace-only strings are kept as typed; only missing cells are empty
    if isinstance(value, str):
        return False
    return value is None or bool(pd.isna(value))


def decode_workbook(file_bytes: bytes) -> List[UploadRow]:
    """
    Decode the first sheet of a workbook into rows.

    The header row supplies the keys, in sheet order and with their text
    unchanged. Empty cells are left out of each row, fully blank rows are
    skipped, and integral floats come back as ints.

    Raises:
        DecodeError: If the bytes are not a readable workbook
    """
    engine = detect_engine(file_bytes)

    try:
        df = pd.read_excel(
            io.BytesIO(file_bytes),
            sheet_name=0,
            header=0,
            engine=engine,
            dtype=object,
        )
    except _READ_ERRORS as e:
        logger.warning(f"Workbook decode failed ({engine}): {e}")
        raise DecodeError(details={"engine": engine}) from e

    # headerless columns carry pandas placeholder names
    columns = [column for column in df.columns if not str(column).startswith("Unnamed:")]
    df = df[columns].dropna(how="all")

    rows: List[UploadRow] = []
    for record in df.itertuples(index=False, name=None):
        row: UploadRow = {}
        for column, value in zip(columns, record):
            if _is_empty(value):
                continue
            row[str(column)] = _clean_value(value)
        if row:
            rows.append(row)

    logger.debug(f"Decoded {len(rows)} rows across {len(columns)} columns")
    return rows


def encode_workbook(rows: Iterable[Mapping[str, Any]], sheet_name: str = "Sheet1") -> bytes:
    """
    Encode rows into a single-sheet ``.xlsx`` workbook.

    Columns appear in first-seen order across all rows; missing keys become
    empty cells.
    """
    rows = [dict(row) for row in rows]
    columns: List[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)

    df = pd.DataFrame(rows, columns=columns)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
    return buffer.getvalue()


def failed_rows_to_records(failed_rows: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Flatten failed rows for re-export: ``Row Number`` and ``Reason`` first,
    then the row's original columns.
    """
    records = []
    for failed in failed_rows:
        record: Dict[str, Any] = {
            EXPORT_ROW_NUMBER_COLUMN: failed.get("rowNumber"),
            EXPORT_REASON_COLUMN: failed.get("reason"),
        }
        for key, value in (failed.get("data") or {}).items():
            record.setdefault(key, value)
        records.append(record)
    return records
