"""Bookmark repository interface - abstraction for data access."""
from abc import ABC, abstractmethod
from typing import Optional, List
from app.domain.entities.bookmark import Bookmark


class DuplicateBookmarkError(Exception):
    """Raised by ``create`` when (user_id, content_id) already exists."""


class BookmarkRepository(ABC):
    """Repository interface for Bookmark entity.

    Implementations enforce uniqueness of (user_id, content_id).
    """

    @abstractmethod
    async def get(self, user_id: str, content_id: str) -> Optional[Bookmark]:
        """Get a user's bookmark for one attraction."""
        pass

    @abstractmethod
    async def create(self, bookmark: Bookmark) -> Bookmark:
        """Create new bookmark; raises DuplicateBookmarkError on conflict."""
        pass

    @abstractmethod
    async def delete(self, user_id: str, content_id: str) -> bool:
        """Delete a bookmark. Returns False when nothing was deleted."""
        pass

    @abstractmethod
    async def list_by_user(self, user_id: str) -> List[Bookmark]:
        """List a user's bookmarks, newest first."""
        pass
