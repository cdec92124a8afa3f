"""
API Dependencies.
"""

from typing import Any, Dict, Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.application.services.request_normalizer import normalize_body
from app.config import Settings
from app.core.exceptions import PayloadTooLargeError
from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository
from app.infrastructure.database import Database
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    """The Database built by create_app, shared by every request."""
    return request.app.state.database


def get_db(database: Database = Depends(get_database)) -> Generator[Session, None, None]:
    with database.session() as db:
        yield db


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return SQLAlchemyUserRepository(db, User)


async def get_json_body(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Raw request body normalized into a JSON object."""
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > settings.MAX_BODY_BYTES:
        raise PayloadTooLargeError(settings.MAX_BODY_BYTES)
    raw = await request.body()
    return normalize_body(
        request.method,
        raw,
        content_type=request.headers.get("content-type"),
        max_bytes=settings.MAX_BODY_BYTES,
    )
