"""SQLAlchemy models."""
from sqlalchemy import (
    Column,
    BigInteger,
    Integer,
    String,
    DateTime,
    UniqueConstraint,
    func,
)

from app.infrastructure.persistence.db import Base


class Bookmark(Base):
    __tablename__ = "bookmarks"
    __table_args__ = (
        UniqueConstraint("user_id", "content_id", name="uq_bookmarks_user_content"),
    )

    # BigInteger does not autoincrement on SQLite, which the tests run on
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=False, index=True)
    content_id = Column(String(64), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
