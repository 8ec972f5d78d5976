"""
Unordered batch insert for validated party rows.
"""

from dataclasses import dataclass, field
from typing import Generic, List, Optional, Sequence

from app.core.exceptions import PersistenceConflictError
from app.core.logging import StructuredLogger
from app.infrastructure.db.repositories.party_repository import (
    CodeCollisionError,
    PartyModel,
    PartyRepository,
)
from app.processors.excel_processor import UploadRow
from app.transformers.party_validator import Valid


@dataclass
class InsertedRecord(Generic[PartyModel]):
    row_number: int
    model: PartyModel


@dataclass
class InsertConflict:
    """Row that passed validation but was rejected by the store."""
    row_number: int
    reason: str
    raw: UploadRow = field(default_factory=dict)


@dataclass
class BatchInsertResult:
    inserted: List[InsertedRecord] = field(default_factory=list)
    conflicts: List[InsertConflict] = field(default_factory=list)


class BatchInserter:
    """
    Insert validated records one savepoint at a time.

    A record rejected by a unique constraint is reported as a conflict and
    the remaining records are still attempted. Errors other than
    constraint conflicts propagate and abort the request.
    """

    def __init__(self, repository: PartyRepository, logger: Optional[StructuredLogger] = None):
        self.repository = repository
        self.logger = logger or StructuredLogger(__name__)

    def insert(self, rows: Sequence[Valid]) -> BatchInsertResult:
        result = BatchInsertResult()

        for row in rows:
            model = self.repository.build(row.record)
            try:
                self.repository.insert_isolated(model)
            except PersistenceConflictError as e:
                e.row_number = row.row_number
                self._record_conflict(result, row, e.message)
                continue
            except CodeCollisionError as e:
                self._record_conflict(result, row, str(e))
                continue

            result.inserted.append(InsertedRecord(row_number=row.row_number, model=model))
            self.logger.info("Row inserted", row_number=row.row_number, record_id=model.id)

        return result

    def _record_conflict(self, result: BatchInsertResult, row: Valid, reason: str) -> None:
        result.conflicts.append(InsertConflict(row_number=row.row_number, reason=reason, raw=row.raw))
        self.logger.warning("Row rejected at insert", row_number=row.row_number, reason=reason)
