import logging
from typing import Any, Dict, Optional, Type, TypeVar

from sqlmodel import Session, select, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ....core.exceptions import DatabaseError, PersistenceConflictError
from ....core.security import hash_password
from ....utils.security import generate_code
from ..models.party import Employee, Retailer
from .base import BaseRepository

logger = logging.getLogger(__name__)

PartyModel = TypeVar("PartyModel", Retailer, Employee)


class CodeCollisionError(Exception):
    """A generated code clashed with an existing one."""


class PartyRepository(BaseRepository[PartyModel]):
    """
    Repository for party records (retailers, employees).

    Passwords are hashed here, before anything reaches the table, and
    system-assigned codes are generated at insert time.
    """

    def __init__(self, model: Type[PartyModel], session: Session, code_attempts: int = 5):
        super().__init__(model, session)
        self.code_attempts = code_attempts

    def assign_codes(self, obj: PartyModel) -> None:
        raise NotImplementedError

    def find_by_email_or_contact(self, email: Optional[str], contact_no: Optional[str]) -> Optional[PartyModel]:
        """Return any record whose email or contact number matches."""
        conditions = []
        if email:
            conditions.append(self.model.email == email)
        if contact_no:
            conditions.append(self.model.contact_no == contact_no)
        if not conditions:
            return None

        try:
            statement = select(self.model).where(or_(*conditions)).limit(1)
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            logger.error(f"Duplicate lookup on {self.model.__name__} failed: {e}")
            raise DatabaseError(f"Failed to query {self.model.__name__}", operation="find_by_email_or_contact")

    def find_by_contact(self, contact_no: str) -> Optional[PartyModel]:
        statement = select(self.model).where(self.model.contact_no == contact_no)
        return self.session.exec(statement).first()

    def build(self, record: Dict[str, Any]) -> PartyModel:
        """Build an unsaved model from a normalized record, hashing its password seed."""
        values = dict(record)
        values["password"] = hash_password(str(values["password"]))
        return self.model(**values)

    def insert_isolated(self, obj: PartyModel) -> PartyModel:
        """
        Insert one record inside its own savepoint.

        A unique-constraint violation rolls back only this record. Code
        collisions are retried with fresh codes; email/contact collisions
        raise PersistenceConflictError.
        """
        for attempt in range(1, self.code_attempts + 1):
            self.assign_codes(obj)
            try:
                with self.session.begin_nested():
                    self.session.add(obj)
                    self.session.flush()
                return obj
            except IntegrityError as e:
                if self.find_by_email_or_contact(obj.email, obj.contact_no) is not None:
                    raise PersistenceConflictError() from e
                logger.warning(
                    f"Generated code collision on {self.model.__name__} (attempt {attempt}/{self.code_attempts})"
                )

        raise CodeCollisionError(
            f"Could not generate unique codes for {self.model.__name__} after {self.code_attempts} attempts"
        )


class RetailerRepository(PartyRepository[Retailer]):
    def __init__(self, session: Session, code_attempts: int = 5):
        super().__init__(Retailer, session, code_attempts)

    def assign_codes(self, obj: Retailer) -> None:
        obj.unique_id = generate_code()
        obj.retailer_code = generate_code(letters=0, digits=6, prefix="RET")

    def find_by_phone_variants(self, phone: str) -> Optional[Retailer]:
        """Match a 10-digit phone stored as-is, with a 91 country code, or with a leading zero."""
        for candidate in (phone, f"91{phone}", f"0{phone}"):
            retailer = self.find_by_contact(candidate)
            if retailer is not None:
                return retailer
        return None


class EmployeeRepository(PartyRepository[Employee]):
    def __init__(self, session: Session, code_attempts: int = 5):
        super().__init__(Employee, session, code_attempts)

    def assign_codes(self, obj: Employee) -> None:
        obj.employee_id = generate_code(letters=0, digits=6, prefix="EMP")
