"""SQLAlchemy implementation of BookmarkRepository."""
from typing import Optional, List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.domain.entities.bookmark import Bookmark as BookmarkEntity
from app.domain.repositories.bookmark_repository import BookmarkRepository, DuplicateBookmarkError
from app.infrastructure.persistence import models


def _to_entity(row: models.Bookmark) -> BookmarkEntity:
    return BookmarkEntity(
        id=row.id,
        user_id=row.user_id,
        content_id=row.content_id,
        created_at=row.created_at,
    )


class SQLAlchemyBookmarkRepository(BookmarkRepository):
    """Bookmark repository using SQLAlchemy."""

    def __init__(self, session: Session):
        self.session = session

    async def get(self, user_id: str, content_id: str) -> Optional[BookmarkEntity]:
        row = (
            self.session.query(models.Bookmark)
            .filter(models.Bookmark.user_id == user_id, models.Bookmark.content_id == content_id)
            .first()
        )
        return _to_entity(row) if row else None

    async def create(self, bookmark: BookmarkEntity) -> BookmarkEntity:
        row = models.Bookmark(user_id=bookmark.user_id, content_id=bookmark.content_id)
        if bookmark.created_at is not None:
            row.created_at = bookmark.created_at
        self.session.add(row)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateBookmarkError(
                f"Bookmark already exists: user={bookmark.user_id} content={bookmark.content_id}"
            ) from e
        self.session.refresh(row)
        return _to_entity(row)

    async def delete(self, user_id: str, content_id: str) -> bool:
        deleted = (
            self.session.query(models.Bookmark)
            .filter(models.Bookmark.user_id == user_id, models.Bookmark.content_id == content_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted > 0

    async def list_by_user(self, user_id: str) -> List[BookmarkEntity]:
        rows = (
            self.session.query(models.Bookmark)
            .filter(models.Bookmark.user_id == user_id)
            .order_by(models.Bookmark.created_at.desc(), models.Bookmark.id.desc())
            .all()
        )
        return [_to_entity(r) for r in rows]
