"""In-memory implementation of BookmarkRepository for testing."""
from datetime import datetime
from typing import Optional, List, Dict, Tuple
from app.domain.entities.bookmark import Bookmark
from app.domain.repositories.bookmark_repository import BookmarkRepository, DuplicateBookmarkError


class InMemoryBookmarkRepository(BookmarkRepository):
    """In-memory implementation; enforces the same (user, content) uniqueness."""

    def __init__(self):
        self._bookmarks: Dict[Tuple[str, str], Bookmark] = {}
        self._next_id = 1

    async def get(self, user_id: str, content_id: str) -> Optional[Bookmark]:
        return self._bookmarks.get((user_id, content_id))

    async def create(self, bookmark: Bookmark) -> Bookmark:
        if not bookmark.is_valid():
            raise ValueError("Invalid bookmark")

        key = (bookmark.user_id, bookmark.content_id)
        if key in self._bookmarks:
            raise DuplicateBookmarkError(
                f"Bookmark already exists: user={bookmark.user_id} content={bookmark.content_id}"
            )

        stored = Bookmark(
            id=self._next_id,
            user_id=bookmark.user_id,
            content_id=bookmark.content_id,
            created_at=bookmark.created_at or datetime.utcnow(),
        )
        self._next_id += 1
        self._bookmarks[key] = stored
        return stored

    async def delete(self, user_id: str, content_id: str) -> bool:
        return self._bookmarks.pop((user_id, content_id), None) is not None

    async def list_by_user(self, user_id: str) -> List[Bookmark]:
        """Newest first; ids break ties between equal timestamps."""
        bookmarks = [b for b in self._bookmarks.values() if b.user_id == user_id]
        return sorted(bookmarks, key=lambda b: (b.created_at, b.id), reverse=True)
