from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.domain.search_filter import (
    AccessStateFilter,
    EndDateFilter,
    FormalRuleFilter,
    LicenceUrlFilter,
    NoRightInformationFilter,
    PaketSigelFilter,
    PublicationDateFilter,
    PublicationTypeFilter,
    RightValidOnFilter,
    SearchFilters,
    SeriesFilter,
    StartDateFilter,
    TemplateNameFilter,
    TemporalValidityFilter,
    ZDBIdFilter,
)
from app.services.bookmark import (
    create_bookmark,
    create_bookmark_raw,
    delete_bookmark,
    update_bookmark,
)
import app.repositories.bookmark as bookmark_repo
from app.schemas.bookmark import Bookmark, BookmarkCreate, BookmarkRawCreate
from app.schemas.pagination import PaginatedResponse
from app.errors import NotFoundError

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


def _optional(filter_cls, value):
    """Empty lists and missing values mean no filter."""
    return filter_cls(value) if value else None


def _search_filters(data: BookmarkCreate) -> SearchFilters:
    """Build typed filters from the structured request body."""
    date_range = data.filter_publication_date
    return SearchFilters.of(
        [
            PublicationDateFilter(date_range.from_year, date_range.to_year) if date_range else None,
            _optional(PublicationTypeFilter, data.filter_publication_type),
            _optional(AccessStateFilter, data.filter_access_state),
            _optional(TemporalValidityFilter, data.filter_temporal_validity),
            _optional(StartDateFilter, data.filter_start_date),
            _optional(EndDateFilter, data.filter_end_date),
            _optional(FormalRuleFilter, data.filter_formal_rule),
            _optional(RightValidOnFilter, data.filter_valid_on),
            _optional(PaketSigelFilter, data.filter_paket_sigel),
            _optional(ZDBIdFilter, data.filter_zdb_id),
            _optional(SeriesFilter, data.filter_series),
            _optional(TemplateNameFilter, data.filter_template_name),
            _optional(LicenceUrlFilter, data.filter_licence_url),
            NoRightInformationFilter() if data.filter_no_right_information else None,
        ]
    )


@router.post("", response_model=Bookmark, status_code=status.HTTP_201_CREATED)
def create_new_bookmark(
    bookmark_data: BookmarkCreate,
    db: Session = Depends(get_db),
):
    bookmark = create_bookmark(
        db,
        bookmark_name=bookmark_data.bookmark_name,
        description=bookmark_data.description,
        search_term=bookmark_data.search_term,
        filters=_search_filters(bookmark_data),
    )
    return Bookmark.model_validate(bookmark)


@router.post("/raw", response_model=Bookmark, status_code=status.HTTP_201_CREATED)
def create_new_bookmark_raw(
    bookmark_data: BookmarkRawCreate,
    db: Session = Depends(get_db),
):
    """
    Create a bookmark from filters in their string form, as used by search query parameters.
    """
    raw = bookmark_data.model_dump()
    bookmark = create_bookmark_raw(
        db,
        bookmark_name=raw.pop("bookmark_name"),
        description=raw.pop("description"),
        search_term=raw.pop("search_term"),
        **{name.removeprefix("filter_"): value for name, value in raw.items()},
    )
    return Bookmark.model_validate(bookmark)


@router.get("", response_model=PaginatedResponse[Bookmark])
def get_all_bookmarks(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(100, ge=1, le=1000, description="Number of items per page"),
    db: Session = Depends(get_db),
):
    bookmarks, total = bookmark_repo.get_bookmarks_paginated(db, page=page, page_size=page_size)
    return PaginatedResponse(
        items=[Bookmark.model_validate(b) for b in bookmarks],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{bookmark_id}", response_model=Bookmark)
def get_bookmark_by_id(
    bookmark_id: int,
    db: Session = Depends(get_db),
):
    bookmark = bookmark_repo.get_bookmark_by_id(db, bookmark_id)
    if not bookmark:
        raise NotFoundError("Bookmark not found")
    return Bookmark.model_validate(bookmark)


@router.put("/{bookmark_id}", response_model=Bookmark)
def update_bookmark_by_id(
    bookmark_id: int,
    bookmark_data: BookmarkCreate,
    db: Session = Depends(get_db),
):
    """
    Replace a bookmark. Filters missing from the request are removed.
    """
    bookmark = update_bookmark(
        db,
        bookmark_id=bookmark_id,
        bookmark_name=bookmark_data.bookmark_name,
        description=bookmark_data.description,
        search_term=bookmark_data.search_term,
        filters=_search_filters(bookmark_data),
    )
    return Bookmark.model_validate(bookmark)


@router.delete("/{bookmark_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bookmark_by_id(
    bookmark_id: int,
    db: Session = Depends(get_db),
):
    """
    Delete a bookmark. Refused while a template uses it.
    """
    delete_bookmark(db, bookmark_id)
