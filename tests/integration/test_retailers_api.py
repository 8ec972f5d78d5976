from __future__ import annotations

from app.core.config import get_settings
from app.infrastructure.db.connection import database_manager
from app.infrastructure.db.repositories.party_repository import RetailerRepository
from tests.factories import retailer_row

REGISTER_URL = "/retailers/register"


def _stored(contact_no: str):
    with database_manager.get_session() as db:
        return RetailerRepository(db).find_by_contact(contact_no)


def test_register_with_flat_fields_and_files(client):
    form = retailer_row(1, gender="M", govtIdType="Aadhaar", govtIdNumber="1234", city="Mysuru")
    files = {
        "outletPhoto": ("front.jpg", b"jpeg", "image/jpeg"),
        "govtIdPhoto": ("id.png", b"png", "image/png"),
    }

    response = client.post(REGISTER_URL, data=form, files=files)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Retailer registered successfully"
    assert len(body["uniqueId"]) == 8

    stored = _stored("9876500001")
    assert stored.unique_id == body["uniqueId"]
    assert stored.created_by == "RetailerSelf"
    assert stored.personal_address["city"] == "Mysuru"
    assert stored.shop_details["outletPhoto"]["url"].startswith("/uploads/retailers/outlet_photos/")
    assert stored.govt_id_photo["publicId"].startswith("retailers/govt_id/")
    assert stored.person_photo is None

    storage_root = get_settings().storage.local_storage_path
    with open(f"{storage_root}/{stored.shop_details['outletPhoto']['publicId']}", "rb") as fh:
        assert fh.read() == b"jpeg"


def test_register_with_dotted_fields(client):
    form = {
        "name": "Dotted Retailer",
        "email": "dotted@example.com",
        "contactNo": "9876500009",
        "shopDetails.shopName": "Dotted Shop",
        "shopDetails.shopAddress.city": "Chennai",
        "shopDetails.shopAddress.geoTags.lat": "13.08",
        "bankDetails.IFSC": "HDFC0000001",
        "personalAddress.state": "Tamil Nadu",
        "createdBy": "AdminAdded",
    }

    response = client.post(REGISTER_URL, data=form)

    assert response.status_code == 201
    stored = _stored("9876500009")
    assert stored.shop_details["shopName"] == "Dotted Shop"
    assert stored.shop_details["shopAddress"]["city"] == "Chennai"
    assert stored.shop_details["shopAddress"]["geoTags"]["lat"] == 13.08
    assert stored.bank_details["IFSC"] == "HDFC0000001"
    assert stored.personal_address["state"] == "Tamil Nadu"
    assert stored.created_by == "AdminAdded"


def test_register_requires_email_and_contact(client):
    response = client.post(REGISTER_URL, data={"name": "No Contact", "email": "x@example.com"})

    assert response.status_code == 400
    assert response.json()["message"] == "Email and contact number are required"


def test_register_blocked_while_otp_pending(client, otp_store):
    otp_store.set("9876500001", "123456", 300)

    response = client.post(REGISTER_URL, data=retailer_row(1))

    assert response.status_code == 400
    assert response.json()["message"] == "Please verify your phone number before registration"
    assert _stored("9876500001") is None


def test_register_duplicate(client):
    assert client.post(REGISTER_URL, data=retailer_row(1)).status_code == 201

    response = client.post(REGISTER_URL, data=retailer_row(2, email="retailer1@example.com"),
                           files={"personPhoto": ("me.jpg", b"x", "image/jpeg")})

    assert response.status_code == 400
    assert response.json()["message"] == "Phone or email already registered"
    assert _stored("9876500002") is None


def test_admin_lists_retailers_without_passwords(client, admin_headers):
    client.post(REGISTER_URL, data=retailer_row(1))
    client.post(REGISTER_URL, data=retailer_row(2))

    response = client.get("/admin/retailers", headers=admin_headers)

    assert response.status_code == 200
    retailers = response.json()["retailers"]
    assert [r["contactNo"] for r in retailers] == ["9876500001", "9876500002"]
    assert all("password" not in r for r in retailers)
    assert retailers[0]["shopDetails"]["shopName"] == "Shop 1"


def test_listing_requires_admin(client, employee_headers):
    assert client.get("/admin/retailers", headers=employee_headers).status_code == 403
    assert client.get("/admin/retailers").status_code == 401
