from sqlalchemy.orm import Session

import app.repositories.bookmark_template as bookmark_template_repo
import app.repositories.item as item_repo
import app.repositories.right as right_repo
from app.db.models.right import ItemRight as ItemRightModel
from app.errors import (
    DomainValidationError,
    DuplicateResourceError,
    NotFoundError,
    ReferentialGuardError,
)


def _validate_dates(start_date, end_date) -> None:
    if end_date is not None and start_date is not None and end_date < start_date:
        raise DomainValidationError(
            f"End date ({end_date}) cannot precede start date ({start_date})"
        )


def _validate_exception_from(db: Session, right_id: str | None, exception_from: str) -> None:
    """
    Validate the base template of an exception template.

    - The base exists and is a template
    - A template cannot be an exception of itself
    - The base is not an exception itself, and the exception template has no
      exceptions of its own (chains are one level deep)
    """
    if right_id is not None and exception_from == right_id:
        raise DomainValidationError("A template cannot be an exception of itself")

    base = right_repo.get_right_by_id(db, exception_from)
    if not base:
        raise NotFoundError(f"Template with id {exception_from} not found")
    if not base.is_template:
        raise DomainValidationError(f"Right {exception_from} is not a template")
    if base.exception_from is not None:
        raise DomainValidationError(
            f"Template {exception_from} is itself an exception and cannot have exceptions"
        )
    if right_id is not None and right_repo.get_exception_template_ids(db, right_id):
        raise DomainValidationError(
            f"Template {right_id} has exceptions and cannot be an exception itself"
        )


def create_right(
    db: Session,
    group_ids: list[str] | None = None,
    **fields,
) -> ItemRightModel:
    """
    Create a right or a template with business logic validation.

    - Validates end_date doesn't precede start_date
    - Templates require a unique template_name
    - exception_from is only allowed on templates and must point to a base template

    Raises:
        DomainValidationError: If a rule above is violated
        DuplicateResourceError: If the template name is already taken
        NotFoundError: If the exception_from template doesn't exist
    """
    _validate_dates(fields.get("start_date"), fields.get("end_date"))

    if fields.get("is_template"):
        template_name = fields.get("template_name")
        if not template_name:
            raise DomainValidationError("A template requires a template_name")
        if right_repo.get_template_by_name(db, template_name):
            raise DuplicateResourceError(f"Template with name '{template_name}' already exists")
        if fields.get("exception_from") is not None:
            _validate_exception_from(db, None, fields["exception_from"])
    elif fields.get("template_name") or fields.get("exception_from"):
        raise DomainValidationError(
            "template_name and exception_from are only allowed on templates"
        )

    return right_repo.create_right(db, group_ids=group_ids, **fields)


def update_right(
    db: Session,
    right_id: str,
    **update_fields,
) -> ItemRightModel:
    """
    Update a right or template with business logic validation.

    Only fields explicitly provided in update_fields will be updated.
    To clear a field (set to None), explicitly include it with None value.
    The template flag itself cannot be changed.
    """
    right = right_repo.get_right_by_id(db, right_id)
    if not right:
        raise NotFoundError("Right not found")

    update_fields.pop("is_template", None)

    start_date = update_fields.get("start_date", right.start_date)
    end_date = update_fields.get("end_date", right.end_date)
    _validate_dates(start_date, end_date)

    if right.is_template:
        if "template_name" in update_fields:
            template_name = update_fields["template_name"]
            if not template_name:
                raise DomainValidationError("A template requires a template_name")
            if right_repo.get_template_by_name(db, template_name, exclude_id=right_id):
                raise DuplicateResourceError(
                    f"Template with name '{template_name}' already exists"
                )
        exception_from = update_fields.get("exception_from")
        if exception_from is not None and exception_from != right.exception_from:
            _validate_exception_from(db, right_id, exception_from)
    elif update_fields.get("template_name") or update_fields.get("exception_from"):
        raise DomainValidationError(
            "template_name and exception_from are only allowed on templates"
        )

    return right_repo.update_right(db, right_id=right_id, **update_fields)


def delete_right(db: Session, right_id: str) -> None:
    """
    Delete a right or template.

    - Validates the right exists
    - Refuses while any item link references it
    - Refuses while another template declares it as exception_from
    - Removes its bookmark pairs

    Raises:
        NotFoundError: If the right doesn't exist
        ReferentialGuardError: If the right is still referenced
    """
    right = right_repo.get_right_by_id(db, right_id)
    if not right:
        raise NotFoundError("Right not found")

    if item_repo.item_contains_right(db, right_id):
        raise ReferentialGuardError(
            f"Cannot delete right {right_id}: it is still linked to items",
            referenced_by=item_repo.get_metadata_ids_by_right_id(db, right_id),
        )

    exception_ids = right_repo.get_exception_template_ids(db, right_id)
    if exception_ids:
        raise ReferentialGuardError(
            f"Cannot delete template {right_id}: other templates are exceptions of it",
            referenced_by=exception_ids,
        )

    bookmark_template_repo.delete_pairs_by_right_id(db, right_id)
    right_repo.delete_right(db, right_id)
