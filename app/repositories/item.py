from collections import defaultdict

from sqlalchemy.orm import Session

from app.db.models.item import ItemLink as ItemLinkModel
from app.db.models.right import ItemRight as ItemRightModel
from app.errors import NotFoundError


def get_rights_by_metadata_id(db: Session, metadata_id: str) -> list[ItemRightModel]:
    """Get all rights linked to a metadata record, ordered by start date."""
    return (
        db.query(ItemRightModel)
        .join(ItemLinkModel, ItemLinkModel.right_id == ItemRightModel.right_id)
        .filter(ItemLinkModel.metadata_id == metadata_id)
        .order_by(ItemRightModel.start_date, ItemRightModel.right_id)
        .all()
    )


def get_rights_by_metadata_ids(
    db: Session, metadata_ids: list[str]
) -> dict[str, list[ItemRightModel]]:
    """Get the linked rights of many metadata records in one query."""
    rights_by_metadata = defaultdict(list)
    if not metadata_ids:
        return rights_by_metadata
    rows = (
        db.query(ItemLinkModel.metadata_id, ItemRightModel)
        .join(ItemRightModel, ItemRightModel.right_id == ItemLinkModel.right_id)
        .filter(ItemLinkModel.metadata_id.in_(metadata_ids))
        .order_by(ItemRightModel.start_date, ItemRightModel.right_id)
        .all()
    )
    for metadata_id, right in rows:
        rights_by_metadata[metadata_id].append(right)
    return rights_by_metadata


def get_item_entry(db: Session, metadata_id: str, right_id: str) -> ItemLinkModel | None:
    return (
        db.query(ItemLinkModel)
        .filter(
            ItemLinkModel.metadata_id == metadata_id,
            ItemLinkModel.right_id == right_id,
        )
        .first()
    )


def item_contains_entry(db: Session, metadata_id: str, right_id: str) -> bool:
    return get_item_entry(db, metadata_id, right_id) is not None


def item_contains_right(db: Session, right_id: str) -> bool:
    return (
        db.query(ItemLinkModel.id).filter(ItemLinkModel.right_id == right_id).first()
        is not None
    )


def item_contains_metadata(db: Session, metadata_id: str) -> bool:
    return (
        db.query(ItemLinkModel.id).filter(ItemLinkModel.metadata_id == metadata_id).first()
        is not None
    )


def count_items_by_right_id(db: Session, right_id: str) -> int:
    return db.query(ItemLinkModel).filter(ItemLinkModel.right_id == right_id).count()


def get_metadata_ids_by_right_id(db: Session, right_id: str) -> list[str]:
    rows = (
        db.query(ItemLinkModel.metadata_id)
        .filter(ItemLinkModel.right_id == right_id)
        .order_by(ItemLinkModel.metadata_id)
        .all()
    )
    return [row.metadata_id for row in rows]


def get_items_paginated(
    db: Session,
    page: int = 1,
    page_size: int = 100,
) -> tuple[list[str], int]:
    """
    Get the IDs of metadata records that have at least one linked right.

    Returns:
        Tuple of (list of metadata IDs, total count)
    """
    query = db.query(ItemLinkModel.metadata_id).distinct()
    total = query.count()
    skip = (page - 1) * page_size
    rows = query.order_by(ItemLinkModel.metadata_id).offset(skip).limit(page_size).all()
    return [row.metadata_id for row in rows], total


def create_item_entry(db: Session, metadata_id: str, right_id: str) -> ItemLinkModel:
    """Link a right to a metadata record. Pure data access - no business logic."""
    db_item = ItemLinkModel(metadata_id=metadata_id, right_id=right_id)
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    return db_item


def delete_item_entry(db: Session, metadata_id: str, right_id: str) -> None:
    item = get_item_entry(db, metadata_id, right_id)
    if not item:
        raise NotFoundError(f"No link between metadata {metadata_id} and right {right_id}")

    db.delete(item)
    db.commit()


def delete_items_by_right_id(db: Session, right_id: str) -> int:
    deleted = (
        db.query(ItemLinkModel)
        .filter(ItemLinkModel.right_id == right_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted


def replace_items_for_right(db: Session, right_id: str, metadata_ids: list[str]) -> None:
    """
    Replace every link of ``right_id`` with one link per metadata ID.

    Only flushes: the caller owns the transaction so that the replacement and
    any related updates are committed or rolled back together.
    """
    db.query(ItemLinkModel).filter(ItemLinkModel.right_id == right_id).delete(
        synchronize_session=False
    )
    db.add_all(ItemLinkModel(metadata_id=m, right_id=right_id) for m in metadata_ids)
    db.flush()
