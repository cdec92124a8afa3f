"""User domain model — maps to the 'users' table."""

from datetime import datetime, timezone

from pydantic import ValidationError
from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import validates

from app.core.exceptions import ValidationFailedError
from app.domain.rules import MAX_FIELD_LENGTH, is_blank, normalize_email
from app.infrastructure.database import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(255), nullable=False)
    # Column names kept camelCase so an existing table is reused as-is.
    created_at = Column("createdAt", DateTime(timezone=True), nullable=False, default=_utc_now)
    updated_at = Column("updatedAt", DateTime(timezone=True), nullable=False, default=_utc_now, onupdate=_utc_now)

    @validates("name", "phone")
    def _validate_required(self, key, value):
        if is_blank(value):
            raise ValidationFailedError([key], [{"field": key, "message": f"{key} must not be empty"}])
        if len(value) > MAX_FIELD_LENGTH:
            raise ValidationFailedError(
                [key], [{"field": key, "message": f"{key} must be at most {MAX_FIELD_LENGTH} characters"}]
            )
        return value

    @validates("email")
    def _validate_email(self, key, value):
        try:
            return normalize_email(value)
        except ValidationError as exc:
            raise ValidationFailedError(
                [key], [{"field": key, "message": "email must be a valid email address"}]
            ) from exc

    def __repr__(self):
        return f"<User {self.email}>"
