from datetime import datetime, timezone

from sqlalchemy.orm import Session, selectinload

from app.db.models.right import ItemRight as ItemRightModel
from app.db.models.right import RightGroup as RightGroupModel
from app.errors import NotFoundError


def get_right_by_id(db: Session, right_id: str) -> ItemRightModel | None:
    """Get a right by ID with its groups loaded."""
    return (
        db.query(ItemRightModel)
        .options(selectinload(ItemRightModel.groups))
        .filter(ItemRightModel.right_id == right_id)
        .first()
    )


def get_rights_by_ids(db: Session, right_ids: list[str]) -> list[ItemRightModel]:
    if not right_ids:
        return []
    return (
        db.query(ItemRightModel)
        .options(selectinload(ItemRightModel.groups))
        .filter(ItemRightModel.right_id.in_(right_ids))
        .order_by(ItemRightModel.right_id)
        .all()
    )


def right_contains_id(db: Session, right_id: str) -> bool:
    return (
        db.query(ItemRightModel.right_id)
        .filter(ItemRightModel.right_id == right_id)
        .first()
        is not None
    )


def get_template_by_name(
    db: Session, template_name: str, exclude_id: str | None = None
) -> ItemRightModel | None:
    """Get a template by its unique name. Used to check for duplicates."""
    query = db.query(ItemRightModel).filter(ItemRightModel.template_name == template_name)
    if exclude_id is not None:
        query = query.filter(ItemRightModel.right_id != exclude_id)
    return query.first()


def get_all_template_ids(db: Session) -> list[str]:
    rows = (
        db.query(ItemRightModel.right_id)
        .filter(ItemRightModel.is_template.is_(True))
        .order_by(ItemRightModel.right_id)
        .all()
    )
    return [row.right_id for row in rows]


def get_templates_paginated(
    db: Session,
    page: int = 1,
    page_size: int = 100,
) -> tuple[list[ItemRightModel], int]:
    """
    Get all templates ordered by name with pagination.

    Returns:
        Tuple of (list of templates, total count)
    """
    query = db.query(ItemRightModel).filter(ItemRightModel.is_template.is_(True))
    total = query.count()
    skip = (page - 1) * page_size
    templates = (
        query.options(selectinload(ItemRightModel.groups))
        .order_by(ItemRightModel.template_name)
        .offset(skip)
        .limit(page_size)
        .all()
    )
    return templates, total


def get_exception_template_ids(db: Session, base_right_id: str) -> list[str]:
    """Get IDs of templates declaring ``exception_from == base_right_id``."""
    rows = (
        db.query(ItemRightModel.right_id)
        .filter(
            ItemRightModel.is_template.is_(True),
            ItemRightModel.exception_from == base_right_id,
        )
        .order_by(ItemRightModel.right_id)
        .all()
    )
    return [row.right_id for row in rows]


def create_right(db: Session, group_ids: list[str] | None = None, **fields) -> ItemRightModel:
    """Create a new right in the database. Pure data access - no business logic."""
    now = datetime.now(timezone.utc)
    db_right = ItemRightModel(
        created_on=now,
        last_updated_on=now,
        **fields,
    )
    db_right.groups = [RightGroupModel(group_id=g) for g in dict.fromkeys(group_ids or [])]
    db.add(db_right)
    db.commit()
    db.refresh(db_right)
    return db_right


def update_right(
    db: Session,
    right_id: str,
    **kwargs,
) -> ItemRightModel:
    """
    Update a right. Only updates fields that are explicitly provided.

    To clear a field (set to None), explicitly pass it with None value.
    Fields not provided are not updated. ``group_ids`` replaces the group
    assignment: groups not listed anymore are removed, new ones are added.
    """
    right = get_right_by_id(db, right_id)
    if not right:
        raise NotFoundError("Right not found")

    group_ids = kwargs.pop("group_ids", None)
    if group_ids is not None:
        wanted = list(dict.fromkeys(group_ids))
        right.groups = [g for g in right.groups if g.group_id in wanted]
        existing = set(right.group_ids)
        for group_id in wanted:
            if group_id not in existing:
                right.groups.append(RightGroupModel(group_id=group_id))

    for name, value in kwargs.items():
        setattr(right, name, value)
    right.last_updated_on = datetime.now(timezone.utc)

    db.commit()
    db.refresh(right)
    return right


def set_last_applied_on(db: Session, right_id: str, applied_on: datetime) -> None:
    """Set ``last_applied_on`` of a template. The caller owns the transaction."""
    db.query(ItemRightModel).filter(ItemRightModel.right_id == right_id).update(
        {ItemRightModel.last_applied_on: applied_on},
        synchronize_session=False,
    )


def delete_right(db: Session, right_id: str) -> None:
    """Delete a right and its group assignments. Pure data access - no business logic."""
    right = get_right_by_id(db, right_id)
    if not right:
        raise NotFoundError("Right not found")

    db.delete(right)
    db.commit()
