from sqlalchemy.orm import Session

from app.db.models.bookmark_template import BookmarkTemplate as BookmarkTemplateModel


def get_bookmark_ids_by_right_id(db: Session, right_id: str) -> list[int]:
    rows = (
        db.query(BookmarkTemplateModel.bookmark_id)
        .filter(BookmarkTemplateModel.right_id == right_id)
        .order_by(BookmarkTemplateModel.bookmark_id)
        .all()
    )
    return [row.bookmark_id for row in rows]


def get_right_ids_by_bookmark_id(db: Session, bookmark_id: int) -> list[str]:
    rows = (
        db.query(BookmarkTemplateModel.right_id)
        .filter(BookmarkTemplateModel.bookmark_id == bookmark_id)
        .order_by(BookmarkTemplateModel.right_id)
        .all()
    )
    return [row.right_id for row in rows]


def upsert_pairs(db: Session, pairs: list[tuple[int, str]]) -> list[tuple[int, str]]:
    """
    Insert (bookmark_id, right_id) pairs, skipping those that already exist.

    Returns:
        The pairs that were actually inserted.
    """
    inserted = []
    for bookmark_id, right_id in dict.fromkeys(pairs):
        exists = (
            db.query(BookmarkTemplateModel)
            .filter(
                BookmarkTemplateModel.bookmark_id == bookmark_id,
                BookmarkTemplateModel.right_id == right_id,
            )
            .first()
        )
        if exists is None:
            db.add(BookmarkTemplateModel(bookmark_id=bookmark_id, right_id=right_id))
            inserted.append((bookmark_id, right_id))
    db.commit()
    return inserted


def delete_pair(db: Session, bookmark_id: int, right_id: str) -> int:
    deleted = (
        db.query(BookmarkTemplateModel)
        .filter(
            BookmarkTemplateModel.bookmark_id == bookmark_id,
            BookmarkTemplateModel.right_id == right_id,
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted


def delete_pairs_by_right_id(db: Session, right_id: str) -> int:
    deleted = (
        db.query(BookmarkTemplateModel)
        .filter(BookmarkTemplateModel.right_id == right_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted
