from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.services.metadata import create_metadata, delete_metadata, upsert_metadata
import app.repositories.metadata as metadata_repo
from app.schemas.metadata import ItemMetadata, ItemMetadataCreate
from app.schemas.pagination import PaginatedResponse
from app.errors import NotFoundError

router = APIRouter(prefix="/metadata", tags=["metadata"])


@router.post("", response_model=ItemMetadata, status_code=status.HTTP_201_CREATED)
def create_new_metadata(
    metadata_data: ItemMetadataCreate,
    db: Session = Depends(get_db),
):
    """
    Create a new metadata record. The metadata_id must not exist yet.
    """
    metadata = create_metadata(db, **metadata_data.model_dump())
    return ItemMetadata.model_validate(metadata)


@router.put("", response_model=list[ItemMetadata])
def upsert_metadata_batch(
    metadata_data: list[ItemMetadataCreate],
    db: Session = Depends(get_db),
):
    """
    Insert or update a batch of metadata records in one transaction.
    """
    records = upsert_metadata(db, [m.model_dump() for m in metadata_data])
    return [ItemMetadata.model_validate(m) for m in records]


@router.get("", response_model=PaginatedResponse[ItemMetadata])
def get_all_metadata(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(100, ge=1, le=1000, description="Number of items per page"),
    db: Session = Depends(get_db),
):
    records, total = metadata_repo.get_metadata_paginated(db, page=page, page_size=page_size)
    return PaginatedResponse(
        items=[ItemMetadata.model_validate(m) for m in records],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{metadata_id}", response_model=ItemMetadata)
def get_metadata_by_id(
    metadata_id: str,
    db: Session = Depends(get_db),
):
    metadata = metadata_repo.get_metadata_by_id(db, metadata_id)
    if not metadata:
        raise NotFoundError("Metadata not found")
    return ItemMetadata.model_validate(metadata)


@router.delete("/{metadata_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_metadata_by_id(
    metadata_id: str,
    db: Session = Depends(get_db),
):
    """
    Delete a metadata record. Refused while rights are linked to it.
    """
    delete_metadata(db, metadata_id)
