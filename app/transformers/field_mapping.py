# ==============================================
# app/transformers/field_mapping.py
# ==============================================
"""
Field resolution tables.

Bulk sheets use flat column names (``shopCity``); the interactive
registration form posts dotted keys (``shopDetails.shopAddress.city``).
Each canonical field lists the keys it accepts, flat first, and resolution
takes the first non-blank value.
"""
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from app.core.enums import PartyType
from app.utils.validation_utils import is_blank


@dataclass(frozen=True)
class FieldSpec:
    """Canonical field and the keys it may arrive under."""
    name: str
    flat: Tuple[str, ...] = ()
    nested: Tuple[str, ...] = ()

    @property
    def keys(self) -> Tuple[str, ...]:
        return (self.name,) + self.flat + self.nested


def _field(name: str, *nested: str, flat: Tuple[str, ...] = ()) -> FieldSpec:
    return FieldSpec(name=name, flat=flat, nested=nested)


RETAILER_FIELDS: Tuple[FieldSpec, ...] = (
    # shop
    _field("shopName", "shopDetails.shopName"),
    _field("businessType", "shopDetails.businessType"),
    _field("ownershipType", "shopDetails.ownershipType"),
    _field("dateOfEstablishment", "shopDetails.dateOfEstablishment"),
    _field("GSTNo", "shopDetails.GSTNo"),
    _field("PANCard", "shopDetails.PANCard"),
    _field("shopAddress", "shopDetails.shopAddress.address"),
    _field("shopAddress2", "shopDetails.shopAddress.address2"),
    _field("shopCity", "shopDetails.shopAddress.city"),
    _field("shopState", "shopDetails.shopAddress.state"),
    _field("shopPincode", "shopDetails.shopAddress.pincode"),
    _field("shopLat", "shopDetails.shopAddress.geoTags.lat"),
    _field("shopLng", "shopDetails.shopAddress.geoTags.lng"),
    # retailer
    _field("name"),
    _field("contactNo"),
    _field("email"),
    _field("dob"),
    _field("gender"),
    _field("govtIdType"),
    _field("govtIdNumber"),
    _field("address", "personalAddress.address"),
    _field("city", "personalAddress.city"),
    _field("state", "personalAddress.state"),
    _field("lat", "geoTags.lat", "personalAddress.geoTags.lat"),
    _field("lng", "geoTags.lng", "personalAddress.geoTags.lng"),
    _field("partOfIndia"),
    _field("createdBy"),
    # bank
    _field("bankName", "bankDetails.bankName"),
    _field("accountNumber", "bankDetails.accountNumber"),
    _field("IFSC", "bankDetails.IFSC"),
    _field("branchName", "bankDetails.branchName"),
)

EMPLOYEE_FIELDS: Tuple[FieldSpec, ...] = (
    _field("name"),
    _field("email"),
    _field("contactNo", flat=("phone",)),
    _field("position"),
    _field("department"),
    _field("gender"),
)

FIELD_TABLES: Dict[PartyType, Tuple[FieldSpec, ...]] = {
    PartyType.RETAILER: RETAILER_FIELDS,
    PartyType.EMPLOYEE: EMPLOYEE_FIELDS,
}


def resolve_value(row: Mapping[str, Any], spec: FieldSpec) -> Optional[Any]:
    """First non-blank value among the keys ``spec`` accepts."""
    for key in spec.keys:
        value = row.get(key)
        if not is_blank(value):
            return value
    return None


def resolve_fields(row: Mapping[str, Any], party_type: PartyType) -> Dict[str, Any]:
    """
    Map a raw row onto canonical field names.

    Every canonical field is present in the result; unresolved ones are
    ``None``.
    """
    return {spec.name: resolve_value(row, spec) for spec in FIELD_TABLES[party_type]}
