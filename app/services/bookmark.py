from sqlalchemy.orm import Session

import app.repositories.bookmark as bookmark_repo
import app.repositories.bookmark_template as bookmark_template_repo
from app.db.models.bookmark import Bookmark as BookmarkModel
from app.domain.search_filter import FILTER_TYPES_BY_NAME, SearchFilters
from app.domain.search_query import parse_search_term
from app.errors import DuplicateResourceError, NotFoundError, ReferentialGuardError

_NO_RIGHT_INFORMATION = "no_right_information"


def bookmark_filters(bookmark: BookmarkModel) -> SearchFilters:
    """Rebuild the typed filters of a persisted bookmark."""
    raw_filters = {
        name: getattr(bookmark, f"filter_{name}")
        for name in FILTER_TYPES_BY_NAME
        if name != _NO_RIGHT_INFORMATION
    }
    if bookmark.filter_no_right_information:
        raw_filters[_NO_RIGHT_INFORMATION] = "true"
    return SearchFilters.from_strings(**raw_filters)


def _filter_columns(filters: SearchFilters | None) -> dict:
    raw_filters = (filters or SearchFilters()).to_strings()
    columns = {
        f"filter_{name}": value
        for name, value in raw_filters.items()
        if name != _NO_RIGHT_INFORMATION
    }
    columns["filter_no_right_information"] = raw_filters[_NO_RIGHT_INFORMATION] is not None
    return columns


def create_bookmark(
    db: Session,
    bookmark_name: str,
    description: str | None = None,
    search_term: str | None = None,
    filters: SearchFilters | None = None,
) -> BookmarkModel:
    """
    Create a bookmark with business logic validation.

    - Enforces uniqueness of bookmark_name
    - Validates the search term (malformed boolean expressions are rejected)

    Raises:
        DuplicateResourceError: If the name is already taken
        DomainValidationError: If the search term is malformed
    """
    if bookmark_repo.get_bookmark_by_name(db, bookmark_name):
        raise DuplicateResourceError(f"Bookmark with name '{bookmark_name}' already exists")
    parse_search_term(search_term)

    return bookmark_repo.create_bookmark(
        db,
        bookmark_name=bookmark_name,
        description=description,
        search_term=search_term,
        **_filter_columns(filters),
    )


def create_bookmark_raw(
    db: Session,
    bookmark_name: str,
    description: str | None = None,
    search_term: str | None = None,
    **raw_filters: str | None,
) -> BookmarkModel:
    """Create a bookmark from filters given in their canonical string form."""
    return create_bookmark(
        db,
        bookmark_name=bookmark_name,
        description=description,
        search_term=search_term,
        filters=SearchFilters.from_strings(**raw_filters),
    )


def update_bookmark(
    db: Session,
    bookmark_id: int,
    bookmark_name: str,
    description: str | None = None,
    search_term: str | None = None,
    filters: SearchFilters | None = None,
) -> BookmarkModel:
    """
    Replace a bookmark's name, description, search term and filters.

    Raises:
        NotFoundError: If the bookmark doesn't exist
        DuplicateResourceError: If the new name is taken by another bookmark
    """
    if not bookmark_repo.get_bookmark_by_id(db, bookmark_id):
        raise NotFoundError("Bookmark not found")
    if bookmark_repo.get_bookmark_by_name(db, bookmark_name, exclude_id=bookmark_id):
        raise DuplicateResourceError(f"Bookmark with name '{bookmark_name}' already exists")
    parse_search_term(search_term)

    return bookmark_repo.update_bookmark(
        db,
        bookmark_id=bookmark_id,
        bookmark_name=bookmark_name,
        description=description,
        search_term=search_term,
        **_filter_columns(filters),
    )


def delete_bookmark(db: Session, bookmark_id: int) -> None:
    """
    Delete a bookmark.

    Raises:
        NotFoundError: If the bookmark doesn't exist
        ReferentialGuardError: If a template still uses the bookmark
    """
    if not bookmark_repo.get_bookmark_by_id(db, bookmark_id):
        raise NotFoundError("Bookmark not found")

    right_ids = bookmark_template_repo.get_right_ids_by_bookmark_id(db, bookmark_id)
    if right_ids:
        raise ReferentialGuardError(
            f"Cannot delete bookmark {bookmark_id}: it is used by templates",
            referenced_by=right_ids,
        )

    bookmark_repo.delete_bookmark(db, bookmark_id)
