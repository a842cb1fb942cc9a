from sqlalchemy.orm import Session

import app.repositories.item as item_repo
import app.repositories.metadata as metadata_repo
from app.db.models.metadata import ItemMetadata as ItemMetadataModel
from app.errors import DuplicateResourceError, NotFoundError, ReferentialGuardError


def create_metadata(db: Session, metadata_id: str, **fields) -> ItemMetadataModel:
    """
    Create a metadata record.

    Raises:
        DuplicateResourceError: If a record with ``metadata_id`` already exists
    """
    if metadata_repo.metadata_contains_id(db, metadata_id):
        raise DuplicateResourceError(f"Metadata with id {metadata_id} already exists")
    return metadata_repo.create_metadata(db, metadata_id=metadata_id, **fields)


def upsert_metadata(db: Session, records: list[dict]) -> list[ItemMetadataModel]:
    """Insert or update a batch of metadata records, as delivered by ingestion."""
    return metadata_repo.upsert_metadata_batch(db, records)


def delete_metadata(db: Session, metadata_id: str) -> None:
    """
    Delete a metadata record.

    Raises:
        NotFoundError: If the record doesn't exist
        ReferentialGuardError: If a right is still linked to the record
    """
    if not metadata_repo.metadata_contains_id(db, metadata_id):
        raise NotFoundError("Metadata not found")

    linked_rights = item_repo.get_rights_by_metadata_id(db, metadata_id)
    if linked_rights:
        raise ReferentialGuardError(
            f"Cannot delete metadata {metadata_id}: rights are still linked to it",
            referenced_by=[r.right_id for r in linked_rights],
        )

    metadata_repo.delete_metadata(db, metadata_id)
