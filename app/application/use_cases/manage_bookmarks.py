"""Use case: manage a user's bookmarks."""
import logging
from typing import List, Optional

from app.domain.entities.bookmark import Bookmark
from app.domain.repositories.bookmark_repository import BookmarkRepository, DuplicateBookmarkError
from app.exceptions import BookmarkError

logger = logging.getLogger(__name__)


class BookmarkUseCase:
    """Get, add, remove and list bookmarks.

    Adding is idempotent: a duplicate insert returns the row that already
    exists instead of failing.
    """

    def __init__(self, bookmark_repository: BookmarkRepository):
        self._repo = bookmark_repository

    async def get(self, user_id: str, content_id: str) -> Optional[Bookmark]:
        return await self._repo.get(user_id, content_id)

    async def add(self, user_id: str, content_id: str) -> Bookmark:
        bookmark = Bookmark(id=None, user_id=user_id, content_id=content_id)
        if not bookmark.is_valid():
            raise BookmarkError("user_id and content_id are required")

        try:
            created = await self._repo.create(bookmark)
            logger.info(f"Bookmark added: user={user_id} content={content_id}")
            return created
        except DuplicateBookmarkError:
            existing = await self._repo.get(user_id, content_id)
            if existing is None:
                raise BookmarkError(f"Bookmark conflict could not be resolved for content {content_id}")
            logger.info(f"Bookmark already present: user={user_id} content={content_id}")
            return existing

    async def remove(self, user_id: str, content_id: str) -> bool:
        removed = await self._repo.delete(user_id, content_id)
        if removed:
            logger.info(f"Bookmark removed: user={user_id} content={content_id}")
        return removed

    async def list(self, user_id: str) -> List[Bookmark]:
        return await self._repo.list_by_user(user_id)
