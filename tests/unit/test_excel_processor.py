from __future__ import annotations

import io

import numpy as np
import pandas as pd
import pytest
from openpyxl import Workbook

from app.core.exceptions import DecodeError
from app.processors import excel_processor
from app.processors.excel_processor import (
    XLS_SIGNATURE,
    decode_workbook,
    detect_engine,
    encode_workbook,
    failed_rows_to_records,
)
from tests.factories import build_xlsx


def _sheet(*rows) -> bytes:
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(list(row))
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def test_detect_engine_by_signature():
    assert detect_engine(build_xlsx([{"a": 1}])) == "openpyxl"
    assert detect_engine(XLS_SIGNATURE + b"\x00" * 32) == "xlrd"


@pytest.mark.parametrize("payload", [b"", b"name,email\nA,a@example.com\n", b"%PDF-1.7"])
def test_detect_engine_rejects_non_workbooks(payload):
    with pytest.raises(DecodeError):
        detect_engine(payload)


def test_decode_rejects_corrupt_zip():
    with pytest.raises(DecodeError) as exc:
        decode_workbook(b"PK\x03\x04 definitely not a workbook")
    assert exc.value.status_code == 400


def test_decode_rejects_truncated_xls():
    with pytest.raises(DecodeError) as exc:
        decode_workbook(XLS_SIGNATURE + b"\x00" * 504)
    assert exc.value.details == {"engine": "xlrd"}


def test_decode_legacy_xls_reads_through_xlrd(monkeypatch):
    calls = []

    def read_excel(buffer, **kwargs):
        calls.append(kwargs)
        return pd.DataFrame(
            [["Asha", 9876500001.0, "  "], ["Ravi", np.nan, pd.NaT], [None, np.nan, None]],
            columns=["name", "contactNo", "note"],
            dtype=object,
        )

    monkeypatch.setattr(excel_processor.pd, "read_excel", read_excel)

    rows = decode_workbook(XLS_SIGNATURE + b"\x00" * 504)

    assert calls[0]["engine"] == "xlrd"
    assert calls[0]["sheet_name"] == 0
    assert rows == [{"name": "Asha", "contactNo": 9876500001, "note": "  "}, {"name": "Ravi"}]


def test_decode_keys_rows_by_header_text():
    content = _sheet(
        ["name", "email", "shopPincode"],
        ["Asha", "asha@example.com", "560001"],
        ["Ravi", "ravi@example.com", 560002],
    )

    rows = decode_workbook(content)

    assert rows == [
        {"name": "Asha", "email": "asha@example.com", "shopPincode": "560001"},
        {"name": "Ravi", "email": "ravi@example.com", "shopPincode": 560002},
    ]
    assert list(rows[0]) == ["name", "email", "shopPincode"]


def test_decode_omits_empty_cells_and_blank_rows():
    content = _sheet(
        ["name", "email", "contactNo"],
        ["Asha", None, "9876500001"],
        [None, None, None],
        ["Ravi", "ravi@example.com", None],
    )

    rows = decode_workbook(content)

    assert rows == [
        {"name": "Asha", "contactNo": "9876500001"},
        {"name": "Ravi", "email": "ravi@example.com"},
    ]


def test_decode_converts_integral_floats():
    content = _sheet(["contactNo", "lat"], [9876500001.0, 12.5])

    row = decode_workbook(content)[0]

    assert row["contactNo"] == 9876500001
    assert isinstance(row["contactNo"], int)
    assert row["lat"] == 12.5


def test_decode_drops_headerless_columns():
    content = _sheet(["name", None, "email"], ["Asha", "stray", "asha@example.com"])

    assert decode_workbook(content) == [{"name": "Asha", "email": "asha@example.com"}]


def test_decode_header_only_sheet_has_no_rows():
    assert decode_workbook(_sheet(["name", "email"])) == []


def test_encode_orders_columns_by_first_appearance():
    content = encode_workbook([{"b": 1, "a": "x"}, {"a": "y", "c": 3}])

    rows = decode_workbook(content)

    assert rows == [{"b": 1, "a": "x"}, {"a": "y", "c": 3}]
    assert list(rows[1]) == ["a", "c"]


def test_failed_rows_to_records_puts_row_number_and_reason_first():
    records = failed_rows_to_records([
        {"rowNumber": 3, "reason": "Invalid email format", "data": {"name": "Asha", "email": "bad"}},
        {"rowNumber": 5, "reason": "Invalid pincode", "data": None},
    ])

    assert records[0] == {"Row Number": 3, "Reason": "Invalid email format", "name": "Asha", "email": "bad"}
    assert list(records[0])[:2] == ["Row Number", "Reason"]
    assert records[1] == {"Row Number": 5, "Reason": "Invalid pincode"}
