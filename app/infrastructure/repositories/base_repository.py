"""
SQLAlchemy implementation of the Base Repository.
"""

from typing import Any, Generic, List, Type, TypeVar

import structlog
from sqlalchemy.exc import DataError, IntegrityError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from app.core.exceptions import StoreUnavailableError, ValidationFailedError
from app.domain.repositories.base import BaseRepository
from app.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)

# Connection-level failures: the store is down or the pool is exhausted.
UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)

logger = structlog.get_logger(__name__)


class SQLAlchemyRepository(BaseRepository[ModelType], Generic[ModelType]):
    """Generic repository implementation for SQLAlchemy models."""

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def _order_by(self) -> list:
        return [self.model.id.desc()]

    def list_all(self) -> List[ModelType]:
        try:
            return self.db.query(self.model).order_by(*self._order_by()).all()
        except UNAVAILABLE_ERRORS as exc:
            raise self._unavailable("list", exc) from exc

    def create(self, obj_in: Any) -> ModelType:
        if hasattr(obj_in, "model_dump"):
            obj_data = obj_in.model_dump(exclude_unset=True)
        else:
            obj_data = dict(obj_in)

        db_obj = self.model(**obj_data)
        try:
            self.db.add(db_obj)
            self.db.commit()
            self.db.refresh(db_obj)
        except IntegrityError as exc:
            self.db.rollback()
            raise self._integrity_error(exc) from exc
        except DataError as exc:
            self.db.rollback()
            raise self._data_error(exc) from exc
        except UNAVAILABLE_ERRORS as exc:
            self.db.rollback()
            raise self._unavailable("create", exc) from exc
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return db_obj

    def _integrity_error(self, exc: IntegrityError) -> Exception:
        """Translate a constraint violation; subclasses know their constraints."""
        return exc

    def _data_error(self, exc: DataError) -> ValidationFailedError:
        logger.warning("Row rejected by the database", table=self.model.__tablename__, error=str(exc))
        return ValidationFailedError(
            [],
            [{"field": "", "message": "value rejected by the database"}],
        )

    def _unavailable(self, operation: str, exc: SQLAlchemyError) -> StoreUnavailableError:
        logger.error(
            "Database unavailable",
            table=self.model.__tablename__,
            operation=operation,
            error=str(exc),
        )
        return StoreUnavailableError()
