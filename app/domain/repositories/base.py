"""
Base Repository Interface.
Defines the standard contract for data access operations.
"""

from typing import Any, List, Protocol, TypeVar

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for the write-once / read-all operations every entity supports."""

    def create(self, obj_in: Any) -> T:
        """Insert a new entity and return it with generated fields populated."""
        ...

    def list_all(self) -> List[T]:
        """Return every entity, newest first. Each call is a fresh snapshot."""
        ...
