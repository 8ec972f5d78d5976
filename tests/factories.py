"""Row builders and test doubles shared across the suite."""
from __future__ import annotations

import io
from typing import Any, Dict, List, Optional

import pandas as pd

from app.infrastructure.sms.base import SmsGateway, SmsResult

ADMIN_PASSWORD = "s3cret-pass"


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSmsGateway(SmsGateway):
    def __init__(self):
        self.messages: List[tuple] = []

    def send(self, phone: str, message: str) -> SmsResult:
        self.messages.append((phone, message))
        return SmsResult(success=True, message_id=str(len(self.messages)))


def retailer_row(index: int = 1, **overrides: Any) -> Dict[str, Any]:
    """A retailer sheet row that passes validation. ``None`` overrides drop the key."""
    row = {
        "shopName": f"Shop {index}",
        "shopAddress": f"{index} Market Road",
        "shopCity": "Bengaluru",
        "shopState": "Karnataka",
        "shopPincode": "560001",
        "businessType": "Grocery",
        "name": f"Retailer {index}",
        "PANCard": f"ABCDE{1000 + index}F",
        "contactNo": f"98765{index:05d}",
        "email": f"retailer{index}@example.com",
        "bankName": "State Bank",
        "accountNumber": f"1000200030{index:02d}",
        "IFSC": "SBIN0001234",
        "branchName": "MG Road",
    }
    row.update(overrides)
    return {key: value for key, value in row.items() if value is not None}


def employee_row(index: int = 1, **overrides: Any) -> Dict[str, Any]:
    """An employee sheet row that passes validation. ``None`` overrides drop the key."""
    row = {
        "name": f"Employee {index}",
        "email": f"employee{index}@example.com",
        "contactNo": f"87654{index:05d}",
        "position": "Field Executive",
        "department": "Sales",
        "gender": "F",
    }
    row.update(overrides)
    return {key: value for key, value in row.items() if value is not None}


def build_xlsx(rows: List[Dict[str, Any]], columns: Optional[List[str]] = None) -> bytes:
    """Write rows to an in-memory .xlsx with a header row."""
    if columns is None:
        columns = []
        for row in rows:
            for key in row:
                if key not in columns:
                    columns.append(key)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        pd.DataFrame(rows, columns=columns).to_excel(writer, index=False)
    return buffer.getvalue()
