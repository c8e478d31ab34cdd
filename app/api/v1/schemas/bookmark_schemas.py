"""Pydantic schemas for bookmark requests and responses."""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List


class BookmarkCreateSchema(BaseModel):
    content_id: str = Field(..., min_length=1, max_length=64)


class BookmarkSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    content_id: str
    created_at: Optional[datetime] = None


class BookmarkStatusSchema(BaseModel):
    content_id: str
    bookmarked: bool
    bookmark: Optional[BookmarkSchema] = None


class BookmarkListSchema(BaseModel):
    items: List[BookmarkSchema]
    total: int


class BookmarkDeleteSchema(BaseModel):
    content_id: str
    removed: bool
