from __future__ import annotations

import re

import pytest

from app.core.constants import SPREADSHEET_MEDIA_TYPE
from app.core.enums import PartyType
from app.infrastructure.db.connection import database_manager
from app.infrastructure.db.models.party import Retailer
from app.infrastructure.db.repositories.party_repository import EmployeeRepository, RetailerRepository
from app.processors.excel_processor import decode_workbook
from app.transformers.field_mapping import resolve_fields
from app.transformers.party_validator import build_retailer_record
from tests.factories import build_xlsx, employee_row, retailer_row

RETAILERS_URL = "/admin/retailers/bulk"
EMPLOYEES_URL = "/admin/employees/bulk"


def _upload(client, url, content, headers, filename="parties.xlsx"):
    return client.post(url, files={"file": (filename, content, SPREADSHEET_MEDIA_TYPE)}, headers=headers)


def _seed_retailer(**overrides):
    with database_manager.get_session() as db:
        repo = RetailerRepository(db)
        fields = resolve_fields(retailer_row(**overrides), PartyType.RETAILER)
        repo.insert_isolated(repo.build(build_retailer_record(fields, "AdminAdded")))


def _retailer_count() -> int:
    with database_manager.get_session() as db:
        return len(RetailerRepository(db).get_multi())


def test_partial_success_reports_every_row(client, admin_headers):
    _seed_retailer(index=5, email="existing@example.com")
    rows = [
        retailer_row(1),
        retailer_row(2, email=None),
        retailer_row(3),
        retailer_row(4, email=None),
        retailer_row(5),
    ]

    response = _upload(client, RETAILERS_URL, build_xlsx(rows), admin_headers)

    assert response.status_code == 207
    body = response.json()
    assert body["message"] == "Partial success"
    assert body["success"] is True
    assert body["summary"] == {"totalRows": 5, "successful": 2, "failed": 3, "successRate": "40.00%"}
    assert [f["rowNumber"] for f in body["failedRows"]] == [3, 5, 6]
    assert [f["reason"] for f in body["failedRows"]] == [
        "Missing required fields: email",
        "Missing required fields: email",
        "Duplicate entry: Email or Contact already exists",
    ]
    assert body["failedRows"][0]["data"]["name"] == "Retailer 2"

    inserted = body["insertedRetailers"]
    assert [r["contactNo"] for r in inserted] == ["9876500001", "9876500003"]
    for item in inserted:
        assert re.fullmatch(r"[A-Z]{4}\d{4}", item["uniqueId"])
        assert re.fullmatch(r"RET\d{6}", item["retailerCode"])
        assert "password" not in item
    assert _retailer_count() == 3


def test_full_success_then_reupload_inserts_nothing(client, admin_headers):
    content = build_xlsx([retailer_row(1), retailer_row(2)])

    first = _upload(client, RETAILERS_URL, content, admin_headers)
    second = _upload(client, RETAILERS_URL, content, admin_headers)

    assert first.status_code == 201
    assert first.json()["message"] == "All retailers added successfully"
    assert first.json()["failedRows"] == []

    assert second.status_code == 400
    body = second.json()
    assert body["success"] is False
    assert body["message"] == "No retailers were added"
    assert body["summary"] == {"totalRows": 2, "successful": 0, "failed": 2, "successRate": "0.00%"}
    assert {f["reason"] for f in body["failedRows"]} == {"Duplicate entry: Email or Contact already exists"}
    assert _retailer_count() == 2


def test_header_only_sheet(client, admin_headers):
    content = build_xlsx([], columns=list(retailer_row(1)))

    response = _upload(client, RETAILERS_URL, content, admin_headers)

    assert response.status_code == 400
    assert response.json()["summary"] == {"totalRows": 0, "successful": 0, "failed": 0, "successRate": "0%"}
    assert response.json()["insertedRetailers"] == []


def test_same_party_twice_in_one_file_conflicts_at_insert(client, admin_headers):
    rows = [retailer_row(1), retailer_row(2), retailer_row(1, name="Again")]

    response = _upload(client, RETAILERS_URL, build_xlsx(rows), admin_headers)

    assert response.status_code == 207
    failed = response.json()["failedRows"]
    assert failed == [{
        "rowNumber": 4,
        "reason": "Insert-time conflict: Email or Contact already exists",
        "data": rows[2],
    }]


def test_employee_upload(client, admin_headers):
    rows = [employee_row(1), employee_row(2, phone="7654300002", contactNo=None), employee_row(3, position=None)]

    response = _upload(client, EMPLOYEES_URL, build_xlsx(rows), admin_headers)

    assert response.status_code == 207
    body = response.json()
    assert "insertedRetailers" not in body
    assert [e["contactNo"] for e in body["insertedEmployees"]] == ["8765400001", "7654300002"]
    assert all(re.fullmatch(r"EMP\d{6}", e["employeeId"]) for e in body["insertedEmployees"])
    assert body["failedRows"][0]["reason"] == "Missing required fields: position"
    with database_manager.get_session() as db:
        assert len(EmployeeRepository(db).get_multi()) == 2


def test_numeric_cells_are_accepted(client, admin_headers):
    row = retailer_row(1, contactNo=9876500001, shopPincode=560001)

    response = _upload(client, RETAILERS_URL, build_xlsx([row]), admin_headers)

    assert response.status_code == 201
    assert response.json()["insertedRetailers"][0]["contactNo"] == "9876500001"


def test_missing_file(client, admin_headers):
    response = client.post(RETAILERS_URL, headers=admin_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Excel file is required"
    assert body["error"] == "MISSING_INPUT"


def test_unreadable_file(client, admin_headers):
    response = _upload(client, RETAILERS_URL, b"name,email\nA,a@example.com\n", admin_headers, "parties.xlsx")

    assert response.status_code == 400
    assert response.json()["error"] == "DECODE_ERROR"
    assert _retailer_count() == 0


def test_store_failure_returns_opaque_server_error(client, admin_headers, caplog):
    Retailer.__table__.drop(database_manager.get_engine())

    response = _upload(client, RETAILERS_URL, build_xlsx([retailer_row(1)]), admin_headers)

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Server error", "error": "INTERNAL_SERVER_ERROR"}
    assert "retailer1@example.com" not in response.text
    assert "no such table" in caplog.text


@pytest.mark.parametrize("url", [RETAILERS_URL, EMPLOYEES_URL])
def test_requires_admin(client, employee_headers, url):
    response = _upload(client, url, build_xlsx([retailer_row(1)]), employee_headers)

    assert response.status_code == 403
    assert response.json() == {
        "success": False,
        "message": "Only admins can perform this action",
        "error": "FORBIDDEN",
        "details": {"required_role": "admin"},
    }
    assert _retailer_count() == 0


def test_requires_authentication(client):
    assert _upload(client, RETAILERS_URL, build_xlsx([retailer_row(1)]), {}).status_code == 401
    bad = _upload(client, RETAILERS_URL, build_xlsx([retailer_row(1)]), {"Authorization": "Bearer nonsense"})
    assert bad.status_code == 401
    assert bad.json()["error"] == "UNAUTHORIZED"


def test_failed_rows_export(client, admin_headers):
    rows = [retailer_row(1, shopPincode="123"), retailer_row(2)]
    report = _upload(client, RETAILERS_URL, build_xlsx(rows), admin_headers).json()

    response = client.post(
        "/admin/bulk/failed-rows/export",
        params={"party_type": "Retailer"},
        json={"failedRows": report["failedRows"]},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == SPREADSHEET_MEDIA_TYPE
    assert re.search(r'filename="Failed_Retailer_Upload_\d{4}-\d{2}-\d{2}\.xlsx"',
                     response.headers["content-disposition"])

    exported = decode_workbook(response.content)
    assert len(exported) == 1
    assert list(exported[0])[:2] == ["Row Number", "Reason"]
    assert exported[0]["Row Number"] == 2
    assert exported[0]["Reason"] == "Invalid pincode"
    assert exported[0]["shopPincode"] == "123"
    assert exported[0]["email"] == "retailer1@example.com"
