from __future__ import annotations

import math

import pytest

from app.utils.security import generate_code, generate_otp, normalize_phone
from app.utils.validation_utils import as_text, is_blank, is_valid_email, matches_pattern, missing_fields


@pytest.mark.parametrize("value", [None, "", "   ", "\t\n", math.nan])
def test_is_blank_true(value):
    assert is_blank(value)


@pytest.mark.parametrize("value", [0, 0.0, False, "0", "x"])
def test_is_blank_false(value):
    assert not is_blank(value)


def test_as_text_trims_and_drops_float_suffix():
    assert as_text("  Asha  ") == "Asha"
    assert as_text(9876500001.0) == "9876500001"
    assert as_text(560001) == "560001"
    assert as_text(12.5) == "12.5"
    assert as_text("  ") is None


def test_matches_pattern_is_full_match():
    pattern = r"^[6-9]\d{9}$"
    assert matches_pattern("9876500001", pattern)
    assert matches_pattern(9876500001, pattern)
    assert not matches_pattern("5876500001", pattern)
    assert not matches_pattern("98765000012", pattern)
    assert not matches_pattern(None, pattern)


def test_is_valid_email_applies_pattern_and_syntax():
    pattern = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
    assert is_valid_email(" asha.k@example.com ", pattern)
    assert not is_valid_email("asha..k@example.com", pattern)
    assert not is_valid_email("asha@localhost", pattern)
    assert not is_valid_email(None, pattern)
    # a stricter configured pattern still rejects syntactically valid addresses
    assert not is_valid_email("asha@example.org", r"^[^@]+@example\.com$")


def test_missing_fields_keeps_declared_order():
    record = {"name": "Asha", "email": " ", "contactNo": None}
    assert missing_fields(record, ["contactNo", "name", "email", "position"]) == [
        "contactNo",
        "email",
        "position",
    ]


def test_generate_code_shape():
    code = generate_code()
    assert len(code) == 8
    assert code[:4].isalpha() and code[:4].isupper()
    assert 1000 <= int(code[4:]) <= 9999

    prefixed = generate_code(letters=0, digits=6, prefix="RET")
    assert prefixed.startswith("RET")
    assert 100000 <= int(prefixed[3:]) <= 999999


def test_generate_otp_is_numeric():
    otp = generate_otp(6)
    assert len(otp) == 6 and otp.isdigit()


def test_normalize_phone():
    assert normalize_phone("+91 98765-00001") == "919876500001"
    assert normalize_phone(9876500001) == "9876500001"
    assert normalize_phone(" - ") is None
    assert normalize_phone(None) is None
