"""User service — validation and orchestration for user create/list."""

from typing import Any, Dict, List

import structlog
from pydantic import ValidationError

from app.core.exceptions import AppError, InternalError, ValidationFailedError
from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository
from app.domain.rules import MAX_FIELD_LENGTH, REQUIRED_USER_FIELDS
from app.domain.schemas.user import UserCreate

logger = structlog.get_logger(__name__)


def _error_message(error: Dict[str, Any]) -> str:
    if error["type"] == "missing":
        return "field is required"
    if error["type"] == "string_too_short":
        return "must not be empty"
    if error["type"] == "string_too_long":
        return f"must be at most {MAX_FIELD_LENGTH} characters"
    if error["type"] == "string_type":
        return "must be a string"
    if error["loc"] and error["loc"][0] == "email":
        return "must be a valid email address"
    return error["msg"].removeprefix("Value error, ")


def validate_user_payload(payload: Dict[str, Any]) -> UserCreate:
    """Check name/email/phone; raise ValidationFailedError listing every bad field."""
    try:
        return UserCreate.model_validate(payload)
    except ValidationError as exc:
        errors = []
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else ""
            errors.append({"field": field, "message": _error_message(error)})
        fields = [f for f in REQUIRED_USER_FIELDS if any(e["field"] == f for e in errors)]
        raise ValidationFailedError(
            fields,
            errors,
            message="All fields are required: " + ", ".join(REQUIRED_USER_FIELDS),
        ) from exc


def create_user(repo: UserRepository, payload: Dict[str, Any]) -> User:
    """Validate then persist. Unknown failures become a generic InternalError."""
    user_in = validate_user_payload(payload)
    try:
        user = repo.create(user_in)
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Error creating user")
        raise InternalError("Internal server error while creating the user") from exc

    logger.info("User created", user_id=user.id)
    return user


def list_users(repo: UserRepository) -> List[User]:
    try:
        return repo.list_all()
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Error listing users")
        raise InternalError("Internal server error while fetching users") from exc
