from enum import Enum


class PartyType(str, Enum):
    """Party record types accepted by the bulk upload pipeline."""
    RETAILER = "Retailer"
    EMPLOYEE = "Employee"

    @property
    def inserted_key(self) -> str:
        return "insertedRetailers" if self is PartyType.RETAILER else "insertedEmployees"

    @property
    def plural(self) -> str:
        return "retailers" if self is PartyType.RETAILER else "employees"


class UserRole(str, Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"
    RETAILER = "retailer"


class CreatedBy(str, Enum):
    ADMIN_ADDED = "AdminAdded"
    RETAILER_SELF = "RetailerSelf"
