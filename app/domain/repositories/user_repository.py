"""
User Repository Interface.
"""

from typing import List

from app.domain.models.user import User
from app.domain.repositories.base import BaseRepository
from app.domain.schemas.user import UserCreate


class UserRepository(BaseRepository[User]):
    """Interface for User persistence.

    Failures surface as typed errors from app.core.exceptions:
    DuplicateEmailError, ValidationFailedError, StoreUnavailableError.
    """

    def create(self, obj_in: UserCreate) -> User:
        """Insert a user; the store assigns id and timestamps."""
        ...

    def list_all(self) -> List[User]:
        """All users ordered by creation time, most recent first."""
        ...
