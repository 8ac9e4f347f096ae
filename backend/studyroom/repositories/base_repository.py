# backend/studyroom/repositories/base_repository.py
"""
Shared data access for rooms, students and reservations.

Repositories never commit; the calling service owns the transaction. Any
SQLAlchemy failure other than an integrity violation surfaces as
RepositoryException so services can report the store as unavailable.
"""

from contextlib import contextmanager
import logging
from typing import Any, Generic, Iterator, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from studyroom.core.exceptions import RepositoryException

T = TypeVar("T")

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Primary-key and filter_by access for one mapped model.

    Attributes:
        db: SQLAlchemy session
        model: mapped class (must have a string ``id`` primary key)
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    @contextmanager
    def _storage_errors(self, action: str) -> Iterator[None]:
        """Log and wrap SQLAlchemy failures raised while performing ``action``."""
        try:
            yield
        except IntegrityError:
            # Constraint violations carry meaning (slot taken, duplicate student)
            raise
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to {action} {self.model.__name__}: {e}")
            raise RepositoryException(f"Failed to {action} {self.model.__name__}: {e}") from e

    def _apply_eager_loading(self, query: Query) -> Query:
        """Subclasses add joinedload options for display reads."""
        return query

    def get_by_id(self, id: str, load_relationships: bool = True) -> Optional[T]:
        with self._storage_errors("load"):
            query = self.db.query(self.model).filter(self.model.id == id)  # type: ignore[attr-defined]
            if load_relationships:
                query = self._apply_eager_loading(query)
            return query.first()

    def find_one_by(self, **filters: Any) -> Optional[T]:
        with self._storage_errors("find"):
            return self.db.query(self.model).filter_by(**filters).first()

    def create(self, **values: Any) -> T:
        """
        Add and flush a new row so its id is available. Does not commit.

        Raises:
            IntegrityError: unique or check constraint violated
            RepositoryException: any other storage failure
        """
        with self._storage_errors("create"):
            entity = self.model(**values)
            self.db.add(entity)
            self.db.flush()
            return entity

    def delete(self, id: str) -> bool:
        """Delete by primary key. Returns False if no such row."""
        with self._storage_errors("delete"):
            entity = self.get_by_id(id, load_relationships=False)
            if entity is None:
                return False
            self.db.delete(entity)
            self.db.flush()
            return True
