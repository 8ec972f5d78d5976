import logging
from typing import Generic, TypeVar, Type, Optional, List, Dict, Any, Union

from sqlmodel import SQLModel, Session, select
from sqlalchemy.exc import SQLAlchemyError

from ....core.exceptions import DatabaseError

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """
    Base repository class with common CRUD operations.
    """

    def __init__(self, model: Type[ModelType], session: Session):
        self.model = model
        self.session = session

    def create(self, obj_in: Union[ModelType, Dict[str, Any]]) -> ModelType:
        """
        Create a new record.

        Args:
            obj_in: Model instance or dictionary with field values

        Returns:
            Created model instance

        Raises:
            DatabaseError: If creation fails
        """
        try:
            if isinstance(obj_in, dict):
                db_obj = self.model(**obj_in)
            else:
                db_obj = obj_in

            self.session.add(db_obj)
            self.session.flush()
            self.session.refresh(db_obj)

            logger.debug(f"Created {self.model.__name__} with ID: {db_obj.id}")
            return db_obj

        except SQLAlchemyError as e:
            logger.error(f"Failed to create {self.model.__name__}: {e}")
            raise DatabaseError(f"Failed to create {self.model.__name__}", operation="create")

    def get(self, id: str) -> Optional[ModelType]:
        """
        Get a record by ID.

        Returns:
            Model instance or None if not found
        """
        try:
            return self.session.get(self.model, id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to get {self.model.__name__} by ID {id}: {e}")
            raise DatabaseError(f"Failed to get {self.model.__name__}", operation="get")

    def get_many(self, ids: List[str]) -> List[ModelType]:
        """Get all records whose ID is in ``ids``."""
        if not ids:
            return []
        statement = select(self.model).where(self.model.id.in_(ids))
        return list(self.session.exec(statement).all())

    def get_multi(
        self,
        *,
        skip: int = 0,
        limit: Optional[int] = None,
        order_by: Optional[str] = None,
        **filters
    ) -> List[ModelType]:
        """
        Get multiple records with optional pagination and filtering.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return
            order_by: Field name for ordering
            **filters: Field filters

        Returns:
            List of model instances
        """
        try:
            statement = select(self.model)

            for field, value in filters.items():
                if hasattr(self.model, field) and value is not None:
                    statement = statement.where(getattr(self.model, field) == value)

            if order_by and hasattr(self.model, order_by):
                statement = statement.order_by(getattr(self.model, order_by))

            statement = statement.offset(skip)
            if limit is not None:
                statement = statement.limit(limit)

            return list(self.session.exec(statement).all())

        except SQLAlchemyError as e:
            logger.error(f"Failed to get multiple {self.model.__name__}: {e}")
            raise DatabaseError(f"Failed to get {self.model.__name__} list", operation="get_multi")
