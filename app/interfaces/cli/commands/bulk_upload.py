"""
Upload a party spreadsheet to a running API and print the report.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

from app.core.config import get_settings
from app.core.enums import PartyType
from app.services.bulk_upload_service import build_failed_rows_export

from .base import BaseCommand

ALLOWED_EXTENSIONS = (".xlsx", ".xls")

ENDPOINTS = {
    PartyType.RETAILER: "/admin/retailers/bulk",
    PartyType.EMPLOYEE: "/admin/employees/bulk",
}

# (header, key) pairs for the inserted and failed tables
INSERTED_COLUMNS = {
    PartyType.RETAILER: [("Name", "name"), ("Email", "email"), ("Contact", "contactNo"),
                         ("Unique ID", "uniqueId"), ("Retailer Code", "retailerCode")],
    PartyType.EMPLOYEE: [("Name", "name"), ("Email", "email"), ("Contact", "contactNo"),
                         ("Employee ID", "employeeId")],
}
FAILED_COLUMNS = {
    PartyType.RETAILER: [("Name", "name"), ("Contact", "contactNo"), ("Shop Name", "shopName")],
    PartyType.EMPLOYEE: [("Name", "name"), ("Email", "email")],
}


def format_table(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    """Render rows as a plain fixed-width table."""
    cells = [[str(h) for h in headers]] + [["-" if v in (None, "") else str(v) for v in row] for row in rows]
    widths = [max(len(row[i]) for row in cells) for i in range(len(headers))]

    lines = []
    for index, row in enumerate(cells):
        lines.append("  ".join(value.ljust(width) for value, width in zip(row, widths)))
        if index == 0:
            lines.append("  ".join("-" * width for width in widths))
    return "\n".join(lines)


def inserted_table(party_type: PartyType, body: Dict[str, Any]) -> Tuple[List[str], List[List[Any]]]:
    columns = INSERTED_COLUMNS[party_type]
    headers = ["S.No"] + [header for header, _ in columns]
    rows = [
        [index] + [item.get(key) for _, key in columns]
        for index, item in enumerate(body.get(party_type.inserted_key) or [], start=1)
    ]
    return headers, rows


def failed_table(party_type: PartyType, body: Dict[str, Any]) -> Tuple[List[str], List[List[Any]]]:
    columns = FAILED_COLUMNS[party_type]
    headers = ["Row #", "Reason"] + [header for header, _ in columns]
    rows = [
        [failed.get("rowNumber"), failed.get("reason")]
        + [(failed.get("data") or {}).get(key) for _, key in columns]
        for failed in body.get("failedRows") or []
    ]
    return headers, rows


class Command(BaseCommand):
    name = "bulk-upload"
    description = "Upload a retailer or employee spreadsheet"

    def add_arguments(self, parser):
        parser.add_argument("file", help="Path to the .xlsx or .xls file")
        parser.add_argument(
            "--party-type",
            dest="party_type",
            choices=[p.value for p in PartyType],
            default=PartyType.RETAILER.value,
            help="Type of party in the sheet (default: Retailer)",
        )
        parser.add_argument(
            "--base-url",
            dest="base_url",
            default=os.environ.get("API_BASE_URL", "http://localhost:8000"),
            help="API base URL",
        )
        parser.add_argument(
            "--token",
            default=os.environ.get("API_TOKEN"),
            help="Admin bearer token (default: $API_TOKEN)",
        )
        parser.add_argument(
            "--failed-output",
            dest="failed_output",
            help="Write failed rows to this directory or .xlsx path",
        )
        parser.add_argument("--timeout", type=float, default=120.0)

    def handle(self, **kwargs) -> int:
        path = Path(kwargs["file"])
        party_type = PartyType(kwargs["party_type"])

        if path.suffix.lower() not in ALLOWED_EXTENSIONS:
            self.print_error("Please upload only Excel files (.xlsx or .xls)")
            return 2
        if not path.is_file():
            self.print_error(f"File not found: {path}")
            return 2
        if not kwargs.get("token"):
            self.print_error("An admin token is required (--token or API_TOKEN)")
            return 2

        url = kwargs["base_url"].rstrip("/") + ENDPOINTS[party_type]
        self.print_info(f"Uploading {path.name} to {url}")

        try:
            with path.open("rb") as fh:
                response = requests.post(
                    url,
                    files={"file": (path.name, fh)},
                    headers={"Authorization": f"Bearer {kwargs['token']}"},
                    timeout=kwargs["timeout"],
                )
        except requests.RequestException as e:
            self.print_error(f"Upload failed: {e}")
            return 1

        try:
            body = response.json()
        except ValueError:
            self.print_error(f"Unexpected response ({response.status_code}): {response.text[:200]}")
            return 1

        if "summary" not in body:
            self.print_error(body.get("message") or f"Upload failed with status {response.status_code}")
            return 1

        self.print_report(party_type, response.status_code, body)

        if kwargs.get("failed_output") and body.get("failedRows"):
            self.write_failed_rows(party_type, body["failedRows"], kwargs["failed_output"])

        return 0 if response.status_code in (200, 201) else 1

    def print_report(self, party_type: PartyType, status_code: int, body: Dict[str, Any]) -> None:
        summary = body["summary"]
        message = f"{body.get('message')} (HTTP {status_code})"
        if status_code == 201:
            self.print_success(message)
        elif status_code == 207:
            self.print_warning(message)
        else:
            self.print_error(message)

        print()
        print(format_table(
            ["Total Rows", "Successful", "Failed", "Success Rate"],
            [[summary.get("totalRows", 0), summary.get("successful", 0),
              summary.get("failed", 0), summary.get("successRate", "0%")]],
        ))

        if summary.get("successful"):
            print(f"\nSuccessfully Added ({summary['successful']})")
            print(format_table(*inserted_table(party_type, body)))

        if body.get("failedRows"):
            print(f"\nFailed Rows ({len(body['failedRows'])})")
            print(format_table(*failed_table(party_type, body)))

    def write_failed_rows(self, party_type: PartyType, failed_rows: List[Dict[str, Any]],
                          destination: str) -> Optional[Path]:
        content, filename = build_failed_rows_export(
            party_type, failed_rows, sheet_name=get_settings().upload.failed_rows_sheet
        )
        target = Path(destination)
        if target.suffix.lower() != ".xlsx":
            target.mkdir(parents=True, exist_ok=True)
            target = target / filename

        target.write_bytes(content)
        self.print_success(f"Failed rows written to {target}")
        return target
