"""Bookmark API routes. Every route requires the X-User-Id header."""
from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_current_user_id
from app.api.v1.schemas.bookmark_schemas import (
    BookmarkCreateSchema,
    BookmarkDeleteSchema,
    BookmarkListSchema,
    BookmarkSchema,
    BookmarkStatusSchema,
)
from app.application.use_cases.manage_bookmarks import BookmarkUseCase
from app.core.dependencies import get_bookmark_use_case

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


@router.get("", response_model=BookmarkListSchema)
async def list_bookmarks(
    user_id: str = Depends(get_current_user_id),
    use_case: BookmarkUseCase = Depends(get_bookmark_use_case),
):
    """The user's bookmarks, newest first."""
    bookmarks = await use_case.list(user_id)
    return BookmarkListSchema(
        items=[BookmarkSchema.model_validate(b) for b in bookmarks],
        total=len(bookmarks),
    )


@router.post("", response_model=BookmarkSchema, status_code=status.HTTP_201_CREATED)
async def add_bookmark(
    payload: BookmarkCreateSchema,
    user_id: str = Depends(get_current_user_id),
    use_case: BookmarkUseCase = Depends(get_bookmark_use_case),
):
    """Bookmark an attraction. Re-adding returns the existing bookmark."""
    bookmark = await use_case.add(user_id, payload.content_id.strip())
    return BookmarkSchema.model_validate(bookmark)


@router.get("/{content_id}", response_model=BookmarkStatusSchema)
async def get_bookmark(
    content_id: str,
    user_id: str = Depends(get_current_user_id),
    use_case: BookmarkUseCase = Depends(get_bookmark_use_case),
):
    bookmark = await use_case.get(user_id, content_id)
    return BookmarkStatusSchema(
        content_id=content_id,
        bookmarked=bookmark is not None,
        bookmark=BookmarkSchema.model_validate(bookmark) if bookmark else None,
    )


@router.delete("/{content_id}", response_model=BookmarkDeleteSchema)
async def remove_bookmark(
    content_id: str,
    user_id: str = Depends(get_current_user_id),
    use_case: BookmarkUseCase = Depends(get_bookmark_use_case),
):
    removed = await use_case.remove(user_id, content_id)
    return BookmarkDeleteSchema(content_id=content_id, removed=removed)
