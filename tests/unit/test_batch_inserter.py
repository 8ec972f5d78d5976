from __future__ import annotations

import pytest

from app.core.exceptions import PersistenceConflictError
from app.core.security import verify_password
from app.infrastructure.db.models.party import Retailer
from app.infrastructure.db.repositories import party_repository
from app.infrastructure.db.repositories.party_repository import (
    CodeCollisionError,
    EmployeeRepository,
    RetailerRepository,
)
from app.services.batch_inserter import BatchInserter
from app.transformers.party_validator import Valid, build_retailer_record
from app.transformers.field_mapping import resolve_fields
from app.core.enums import PartyType
from tests.factories import retailer_row


def _valid(row_number: int, index: int, **overrides) -> Valid:
    raw = retailer_row(index, **overrides)
    record = build_retailer_record(resolve_fields(raw, PartyType.RETAILER), created_by="AdminAdded")
    return Valid(row_number=row_number, record=record, raw=raw)


def test_inserts_all_rows_with_codes_and_hashed_passwords(session):
    result = BatchInserter(RetailerRepository(session)).insert([_valid(2, 1), _valid(3, 2)])
    session.commit()

    assert [r.row_number for r in result.inserted] == [2, 3]
    assert result.conflicts == []

    stored = session.get(Retailer, result.inserted[0].model.id)
    assert stored.unique_id and len(stored.unique_id) == 8
    assert stored.retailer_code.startswith("RET")
    assert stored.password != "9876500001"
    assert verify_password("9876500001", stored.password)


def test_store_rejection_becomes_conflict_and_others_continue(session):
    rows = [
        _valid(2, 1),
        _valid(3, 2, email="retailer1@example.com"),
        _valid(4, 3),
    ]

    result = BatchInserter(RetailerRepository(session)).insert(rows)
    session.commit()

    assert [r.row_number for r in result.inserted] == [2, 4]
    assert len(result.conflicts) == 1
    conflict = result.conflicts[0]
    assert conflict.row_number == 3
    assert conflict.reason == "Insert-time conflict: Email or Contact already exists"
    assert conflict.raw["email"] == "retailer1@example.com"
    assert len(RetailerRepository(session).get_multi()) == 2


def test_code_collisions_are_retried(session, monkeypatch):
    codes = iter(["AAAA1111", "RET100001", "AAAA1111", "RET100002", "BBBB2222", "RET100003"])
    monkeypatch.setattr(party_repository, "generate_code", lambda **kwargs: next(codes))

    result = BatchInserter(RetailerRepository(session)).insert([_valid(2, 1), _valid(3, 2)])

    assert len(result.inserted) == 2
    assert result.inserted[1].model.unique_id == "BBBB2222"


def test_exhausted_code_retries_count_as_failed_row(session, monkeypatch):
    monkeypatch.setattr(party_repository, "generate_code", lambda **kwargs: "SAME0000")

    result = BatchInserter(RetailerRepository(session, code_attempts=2)).insert([_valid(2, 1), _valid(3, 2)])

    assert [r.row_number for r in result.inserted] == [2]
    assert result.conflicts[0].row_number == 3
    assert "after 2 attempts" in result.conflicts[0].reason


def test_insert_isolated_distinguishes_conflicts(session, monkeypatch):
    repo = EmployeeRepository(session, code_attempts=1)
    repo.insert_isolated(repo.build({
        "name": "A", "email": "a@example.com", "contact_no": "8765400001", "password": "8765400001",
    }))

    with pytest.raises(PersistenceConflictError):
        repo.insert_isolated(repo.build({
            "name": "B", "email": "a@example.com", "contact_no": "8765400002", "password": "x",
        }))

    monkeypatch.setattr(party_repository, "generate_code", lambda **kwargs: "EMP000001")
    repo.insert_isolated(repo.build({
        "name": "C", "email": "c@example.com", "contact_no": "8765400003", "password": "x",
    }))
    with pytest.raises(CodeCollisionError):
        repo.insert_isolated(repo.build({
            "name": "D", "email": "d@example.com", "contact_no": "8765400004", "password": "x",
        }))


def test_find_by_phone_variants(session):
    repo = RetailerRepository(session)
    repo.insert_isolated(repo.build(
        build_retailer_record(resolve_fields(retailer_row(1, contactNo="919876500001"), PartyType.RETAILER), "AdminAdded")
    ))
    session.commit()

    assert repo.find_by_phone_variants("9876500001").contact_no == "919876500001"
    assert repo.find_by_phone_variants("9876500002") is None
