"""User API routes — create and list."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from app.application.services.user_service import create_user, list_users
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.user import UserRead
from app.interfaces.deps import get_json_body, get_user_repository

router = APIRouter(tags=["Users"])


@router.post("/users", status_code=status.HTTP_201_CREATED)
@router.post("/newUser", status_code=status.HTTP_201_CREATED, include_in_schema=False)
def create_user_route(
    body: Dict[str, Any] = Depends(get_json_body),
    repo: UserRepository = Depends(get_user_repository),
):
    """Create a user from {name, email, phone}."""
    user = create_user(repo, body)
    return {
        "message": "User created successfully",
        "user": UserRead.model_validate(user).to_json(),
    }


@router.get("/users")
@router.get("/allUsers", include_in_schema=False)
def list_users_route(repo: UserRepository = Depends(get_user_repository)):
    """List every user, most recently created first."""
    users = [UserRead.model_validate(u).to_json() for u in list_users(repo)]
    return {
        "message": "Users fetched successfully",
        "count": len(users),
        "users": users,
    }
