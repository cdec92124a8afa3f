"""
SQLAlchemy Implementation of User Repository.
"""

from sqlalchemy.exc import IntegrityError

from app.core.exceptions import DuplicateEmailError, ValidationFailedError
from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository

# SQLSTATE 23505 on PostgreSQL; SQLite reports the constraint in the message.
UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    if getattr(orig, "pgcode", None) == UNIQUE_VIOLATION:
        return True
    if getattr(orig, "sqlstate", None) == UNIQUE_VIOLATION:
        return True
    message = str(orig).lower()
    return "unique constraint" in message or "duplicate key" in message


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    """User repository implementation using SQLAlchemy."""

    def _order_by(self) -> list:
        return [User.created_at.desc(), User.id.desc()]

    def _integrity_error(self, exc: IntegrityError) -> Exception:
        if is_unique_violation(exc):
            return DuplicateEmailError()
        return ValidationFailedError(
            [],
            [{"field": "", "message": "row rejected by a database constraint"}],
        )
