"""Repository interfaces."""
from app.domain.repositories.bookmark_repository import BookmarkRepository, DuplicateBookmarkError

__all__ = [
    "BookmarkRepository",
    "DuplicateBookmarkError",
]
