from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.config import settings
from app.domain.search_filter import SearchFilters
from app.services.item import delete_item_entry, insert_item_entry
from app.services.search import Item as SearchItem, search_query
import app.repositories.item as item_repo
import app.repositories.metadata as metadata_repo
import app.repositories.right as right_repo
from app.schemas.item import Item, ItemCount, ItemEntry, ItemEntryCreate
from app.schemas.pagination import PaginatedResponse
from app.schemas.search import SearchResult
from app.errors import NotFoundError

router = APIRouter(prefix="/items", tags=["items"])


@router.post("", response_model=ItemEntry, status_code=status.HTTP_201_CREATED)
def create_item_entry(
    entry_data: ItemEntryCreate,
    db: Session = Depends(get_db),
):
    """
    Link a right to a metadata record.

    Refused with 409 when the right's validity window conflicts with a right
    already linked to the record. With delete_right_on_conflict the rejected
    right is deleted too.
    """
    entry = insert_item_entry(
        db,
        metadata_id=entry_data.metadata_id,
        right_id=entry_data.right_id,
        delete_right_on_conflict=entry_data.delete_right_on_conflict,
    )
    return ItemEntry.model_validate(entry)


@router.get("", response_model=PaginatedResponse[Item])
def get_all_items(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(100, ge=1, le=1000, description="Number of items per page"),
    db: Session = Depends(get_db),
):
    """
    Get all metadata records that have at least one linked right.
    """
    metadata_ids, total = item_repo.get_items_paginated(db, page=page, page_size=page_size)
    rights_by_metadata = item_repo.get_rights_by_metadata_ids(db, metadata_ids)
    return PaginatedResponse(
        items=[
            Item.model_validate(SearchItem(metadata=m, rights=rights_by_metadata[m.metadata_id]))
            for m in metadata_repo.get_metadata_by_ids(db, metadata_ids)
        ],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/search", response_model=SearchResult)
def search_items(
    search_term: str | None = Query(None, description="e.g. tit:'some title' zdb:123"),
    limit: int = Query(settings.search_default_limit, ge=0, le=settings.search_max_limit),
    offset: int = Query(0, ge=0),
    filter_publication_date: str | None = Query(None, description="e.g. 2000-2010"),
    filter_publication_type: str | None = Query(None, description="e.g. book,article"),
    filter_access_state: str | None = Query(None, description="e.g. open,restricted"),
    filter_temporal_validity: str | None = Query(None, description="e.g. present,past"),
    filter_start_date: str | None = Query(None, description="YYYY-MM-DD"),
    filter_end_date: str | None = Query(None, description="YYYY-MM-DD"),
    filter_formal_rule: str | None = Query(None, description="e.g. licenceContract"),
    filter_valid_on: str | None = Query(None, description="YYYY-MM-DD"),
    filter_paket_sigel: str | None = Query(None),
    filter_zdb_id: str | None = Query(None),
    filter_series: str | None = Query(None),
    filter_template_name: str | None = Query(None),
    filter_licence_url: str | None = Query(None),
    filter_no_right_information: str | None = Query(None, description="true or false"),
    db: Session = Depends(get_db),
):
    """
    Search items by free-text term and filters.

    Facets and number_of_results cover all matches, not just the returned page.
    """
    filters = SearchFilters.from_strings(
        publication_date=filter_publication_date,
        publication_type=filter_publication_type,
        access_state=filter_access_state,
        temporal_validity=filter_temporal_validity,
        start_date=filter_start_date,
        end_date=filter_end_date,
        formal_rule=filter_formal_rule,
        valid_on=filter_valid_on,
        paket_sigel=filter_paket_sigel,
        zdb_id=filter_zdb_id,
        series=filter_series,
        template_name=filter_template_name,
        licence_url=filter_licence_url,
        no_right_information=filter_no_right_information,
    )
    result = search_query(
        db,
        search_term,
        limit=limit,
        offset=offset,
        metadata_filters=filters.metadata_filters,
        right_filters=filters.right_filters,
        no_right_information_filter=filters.no_right_information,
    )
    return SearchResult.model_validate(result)


@router.get("/count/right/{right_id}", response_model=ItemCount)
def count_items_by_right(
    right_id: str,
    db: Session = Depends(get_db),
):
    if not right_repo.right_contains_id(db, right_id):
        raise NotFoundError("Right not found")
    return ItemCount(right_id=right_id, count=item_repo.count_items_by_right_id(db, right_id))


@router.get("/{metadata_id}", response_model=Item)
def get_item_by_metadata_id(
    metadata_id: str,
    db: Session = Depends(get_db),
):
    metadata = metadata_repo.get_metadata_by_id(db, metadata_id)
    if not metadata:
        raise NotFoundError("Metadata not found")
    rights = item_repo.get_rights_by_metadata_id(db, metadata_id)
    return Item.model_validate(SearchItem(metadata=metadata, rights=rights))


@router.delete("/{metadata_id}/{right_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item_entry_by_ids(
    metadata_id: str,
    right_id: str,
    db: Session = Depends(get_db),
):
    delete_item_entry(db, metadata_id, right_id)
