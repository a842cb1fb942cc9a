from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.db.models.metadata import ItemMetadata as ItemMetadataModel
from app.errors import NotFoundError

# Fields set once on insert and never overwritten by an upsert.
_CREATION_FIELDS = ("created_on", "created_by")


def get_metadata_by_id(db: Session, metadata_id: str) -> ItemMetadataModel | None:
    """Get a metadata record by ID."""
    return (
        db.query(ItemMetadataModel)
        .filter(ItemMetadataModel.metadata_id == metadata_id)
        .first()
    )


def get_metadata_by_ids(db: Session, metadata_ids: list[str]) -> list[ItemMetadataModel]:
    """Get metadata records by IDs, ordered by ID."""
    if not metadata_ids:
        return []
    return (
        db.query(ItemMetadataModel)
        .filter(ItemMetadataModel.metadata_id.in_(metadata_ids))
        .order_by(ItemMetadataModel.metadata_id)
        .all()
    )


def metadata_contains_id(db: Session, metadata_id: str) -> bool:
    return get_metadata_by_id(db, metadata_id) is not None


def get_metadata_paginated(
    db: Session,
    page: int = 1,
    page_size: int = 100,
) -> tuple[list[ItemMetadataModel], int]:
    """
    Get metadata records ordered by ID with pagination.

    Returns:
        Tuple of (list of metadata records, total count)
    """
    query = db.query(ItemMetadataModel)
    total = query.count()
    skip = (page - 1) * page_size
    records = (
        query.order_by(ItemMetadataModel.metadata_id)
        .offset(skip)
        .limit(page_size)
        .all()
    )
    return records, total


def create_metadata(db: Session, **fields) -> ItemMetadataModel:
    """Create a new metadata record. Pure data access - no business logic."""
    now = datetime.now(timezone.utc)
    db_metadata = ItemMetadataModel(
        created_on=now,
        last_updated_on=now,
        **fields,
    )
    db.add(db_metadata)
    db.commit()
    db.refresh(db_metadata)
    return db_metadata


def upsert_metadata_batch(db: Session, records: list[dict]) -> list[ItemMetadataModel]:
    """
    Insert or update many metadata records in a single transaction.

    Existing records keep their creation audit fields; every other provided
    field is overwritten.
    """
    now = datetime.now(timezone.utc)
    upserted = []
    try:
        for fields in records:
            metadata = get_metadata_by_id(db, fields["metadata_id"])
            if metadata is None:
                metadata = ItemMetadataModel(created_on=now, **fields)
                db.add(metadata)
            else:
                for name, value in fields.items():
                    if name not in _CREATION_FIELDS:
                        setattr(metadata, name, value)
            metadata.last_updated_on = now
            upserted.append(metadata)
            db.flush()
        db.commit()
    except Exception:
        db.rollback()
        raise
    for metadata in upserted:
        db.refresh(metadata)
    return upserted


def delete_metadata(db: Session, metadata_id: str) -> None:
    """Delete a metadata record from the database. Pure data access - no business logic."""
    metadata = get_metadata_by_id(db, metadata_id)
    if not metadata:
        raise NotFoundError("Metadata not found")

    db.delete(metadata)
    db.commit()
