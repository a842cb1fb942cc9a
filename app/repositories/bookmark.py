from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.db.models.bookmark import Bookmark as BookmarkModel
from app.errors import NotFoundError


def get_bookmark_by_id(db: Session, bookmark_id: int) -> BookmarkModel | None:
    """Get a bookmark by ID."""
    return db.query(BookmarkModel).filter(BookmarkModel.bookmark_id == bookmark_id).first()


def get_bookmarks_by_ids(db: Session, bookmark_ids: list[int]) -> list[BookmarkModel]:
    """Get bookmarks by IDs, ordered by ID."""
    if not bookmark_ids:
        return []
    return (
        db.query(BookmarkModel)
        .filter(BookmarkModel.bookmark_id.in_(bookmark_ids))
        .order_by(BookmarkModel.bookmark_id)
        .all()
    )


def get_bookmark_by_name(
    db: Session, bookmark_name: str, exclude_id: int | None = None
) -> BookmarkModel | None:
    """Get a bookmark by name. Used to check for duplicates."""
    query = db.query(BookmarkModel).filter(BookmarkModel.bookmark_name == bookmark_name)
    if exclude_id is not None:
        query = query.filter(BookmarkModel.bookmark_id != exclude_id)
    return query.first()


def get_bookmarks_paginated(
    db: Session,
    page: int = 1,
    page_size: int = 100,
) -> tuple[list[BookmarkModel], int]:
    """
    Get all bookmarks ordered by ID with pagination.

    Returns:
        Tuple of (list of bookmarks, total count)
    """
    query = db.query(BookmarkModel)
    total = query.count()
    skip = (page - 1) * page_size
    bookmarks = query.order_by(BookmarkModel.bookmark_id).offset(skip).limit(page_size).all()
    return bookmarks, total


def create_bookmark(db: Session, **fields) -> BookmarkModel:
    """Create a new bookmark in the database. Pure data access - no business logic."""
    now = datetime.now(timezone.utc)
    db_bookmark = BookmarkModel(created_on=now, last_updated_on=now, **fields)
    db.add(db_bookmark)
    db.commit()
    db.refresh(db_bookmark)
    return db_bookmark


def update_bookmark(db: Session, bookmark_id: int, **kwargs) -> BookmarkModel:
    """
    Update a bookmark. Only updates fields that are explicitly provided.

    To clear a field (set to None), explicitly pass it with None value.
    """
    bookmark = get_bookmark_by_id(db, bookmark_id)
    if not bookmark:
        raise NotFoundError("Bookmark not found")

    for name, value in kwargs.items():
        setattr(bookmark, name, value)
    bookmark.last_updated_on = datetime.now(timezone.utc)

    db.commit()
    db.refresh(bookmark)
    return bookmark


def delete_bookmark(db: Session, bookmark_id: int) -> None:
    """Delete a bookmark from the database. Pure data access - no business logic."""
    bookmark = get_bookmark_by_id(db, bookmark_id)
    if not bookmark:
        raise NotFoundError("Bookmark not found")

    db.delete(bookmark)
    db.commit()
