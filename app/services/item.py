import logging

from sqlalchemy.orm import Session

import app.repositories.item as item_repo
import app.repositories.metadata as metadata_repo
import app.repositories.right as right_repo
from app.db.models.item import ItemLink as ItemLinkModel
from app.domain.validity import ValidityWindow, find_conflicts
from app.errors import DateConflictError, DuplicateResourceError, NotFoundError

logger = logging.getLogger(__name__)


def check_for_date_conflict(db: Session, metadata_id: str, right) -> list[str]:
    """
    Return the IDs of rights linked to ``metadata_id`` whose validity window
    conflicts with the window of ``right``. The right itself is ignored.
    """
    others = [
        r for r in item_repo.get_rights_by_metadata_id(db, metadata_id)
        if r.right_id != right.right_id
    ]
    return sorted(r.right_id for r in find_conflicts(ValidityWindow.of(right), others))


def insert_item_entry(
    db: Session,
    metadata_id: str,
    right_id: str,
    delete_right_on_conflict: bool = False,
) -> ItemLinkModel:
    """
    Link a right to a metadata record.

    - Validates both exist and are not linked yet
    - Refuses a link whose validity window conflicts with an existing right
      of the item; with ``delete_right_on_conflict`` the right is deleted as
      well, unless it is a template or already linked elsewhere

    Raises:
        NotFoundError: If the metadata record or the right doesn't exist
        DuplicateResourceError: If the link already exists
        DateConflictError: If the validity windows conflict
    """
    if not metadata_repo.metadata_contains_id(db, metadata_id):
        raise NotFoundError(f"Metadata with id {metadata_id} not found")
    right = right_repo.get_right_by_id(db, right_id)
    if not right:
        raise NotFoundError(f"Right with id {right_id} not found")

    if item_repo.item_contains_entry(db, metadata_id, right_id):
        raise DuplicateResourceError(
            f"Right {right_id} is already linked to metadata {metadata_id}"
        )

    conflicting_ids = check_for_date_conflict(db, metadata_id, right)
    if conflicting_ids:
        if (
            delete_right_on_conflict
            and not right.is_template
            and not item_repo.item_contains_right(db, right_id)
        ):
            logger.info("Deleting right %s after date conflict on %s", right_id, metadata_id)
            right_repo.delete_right(db, right_id)
        raise DateConflictError(
            f"Right {right_id} conflicts with rights {', '.join(conflicting_ids)} "
            f"of metadata {metadata_id}",
            metadata_id=metadata_id,
            right_id=right_id,
            conflicting_right_ids=conflicting_ids,
        )

    return item_repo.create_item_entry(db, metadata_id, right_id)


def delete_item_entry(db: Session, metadata_id: str, right_id: str) -> None:
    item_repo.delete_item_entry(db, metadata_id, right_id)
