"""Template application engine.

Applying a template re-links its right to the items its bookmarks currently
match:

1. Collect the candidates: the union of all bookmark search results.
2. Remove every candidate claimed by an exception template of this template.
3. Skip candidates on which another linked right's validity window conflicts
   with the template's window; each conflict is reported as a RightError.
4. Replace all existing links of the template with the surviving candidates
   and stamp ``last_applied_on``, in one transaction.

Applying twice with unchanged data yields the same links.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from threading import Event

from sqlalchemy.orm import Session, sessionmaker

import app.repositories.bookmark as bookmark_repo
import app.repositories.bookmark_template as bookmark_template_repo
import app.repositories.item as item_repo
import app.repositories.right as right_repo
from app.domain.enums import ConflictType
from app.domain.validity import ValidityWindow, find_conflicts
from app.errors import NotFoundError
from app.services.bookmark import bookmark_filters
from app.services.search import find_matching_metadata_ids

logger = logging.getLogger(__name__)


@dataclass
class RightError:
    """A candidate item skipped because of a conflicting right."""

    metadata_id: str
    right_id_source: str
    conflicting_right_id: str
    conflict_type: ConflictType
    message: str


@dataclass
class TemplateApplication:
    right_id: str
    metadata_ids: list[str] = field(default_factory=list)
    errors: list[RightError] = field(default_factory=list)

    @property
    def number_of_applied_entries(self) -> int:
        return len(self.metadata_ids)


def template_candidates(db: Session, right_id: str, today: date | None = None) -> set[str]:
    """Union of the current search results of every bookmark of a template."""
    bookmark_ids = bookmark_template_repo.get_bookmark_ids_by_right_id(db, right_id)
    candidates = set()
    for bookmark in bookmark_repo.get_bookmarks_by_ids(db, bookmark_ids):
        candidates |= find_matching_metadata_ids(
            db, bookmark.search_term, bookmark_filters(bookmark), today
        )
    return candidates


def _candidates_in_new_session(
    session_factory: sessionmaker, right_id: str, today: date | None
) -> set[str]:
    with session_factory() as session:
        return template_candidates(session, right_id, today)


def _relink(
    db: Session,
    template,
    candidates: set[str],
    exception_candidates: set[str],
) -> TemplateApplication:
    result = TemplateApplication(right_id=template.right_id)
    window = ValidityWindow.of(template)
    remaining = sorted(candidates - exception_candidates)
    rights_by_metadata = item_repo.get_rights_by_metadata_ids(db, remaining)

    for metadata_id in remaining:
        others = [r for r in rights_by_metadata[metadata_id] if r.right_id != template.right_id]
        conflicts = find_conflicts(window, others)
        if not conflicts:
            result.metadata_ids.append(metadata_id)
            continue
        for conflicting in conflicts:
            result.errors.append(
                RightError(
                    metadata_id=metadata_id,
                    right_id_source=template.right_id,
                    conflicting_right_id=conflicting.right_id,
                    conflict_type=ConflictType.DATE_OVERLAP,
                    message=(
                        f"Template {template.right_id} overlaps with right "
                        f"{conflicting.right_id} on metadata {metadata_id}"
                    ),
                )
            )

    try:
        item_repo.replace_items_for_right(db, template.right_id, result.metadata_ids)
        right_repo.set_last_applied_on(db, template.right_id, datetime.now(timezone.utc))
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Applied template %s: %d items linked, %d conflicts",
        template.right_id,
        len(result.metadata_ids),
        len(result.errors),
    )
    for error in result.errors:
        logger.debug(error.message)
    return result


def apply_template(db: Session, right_id: str, today: date | None = None) -> TemplateApplication:
    """
    Apply one template.

    A missing right or a right that is not a template yields an empty result.
    """
    template = right_repo.get_right_by_id(db, right_id)
    if not template or not template.is_template:
        logger.info("Skipping %s: not a template", right_id)
        return TemplateApplication(right_id=right_id)

    exception_ids = right_repo.get_exception_template_ids(db, right_id)
    exception_candidates = set()
    for exception_id in exception_ids:
        exception_candidates |= template_candidates(db, exception_id, today)

    return _relink(
        db,
        template,
        template_candidates(db, right_id, today),
        exception_candidates,
    )


def apply_templates(
    db: Session,
    right_ids: list[str],
    max_workers: int = 1,
    session_factory: sessionmaker | None = None,
    cancel_event: Event | None = None,
    today: date | None = None,
) -> dict[str, TemplateApplication]:
    """
    Apply many templates in two phases.

    Phase 1 computes the candidates of the requested templates and of their
    exception templates. With a ``session_factory`` and ``max_workers > 1``
    this runs on a thread pool, one session per task.

    Phase 2 re-links template by template, bases before their exceptions, one
    transaction each. Setting ``cancel_event`` stops phase 2 before the next
    template; templates not reached are missing from the result.
    """
    results = {}
    templates = []
    for right_id in dict.fromkeys(right_ids):
        template = right_repo.get_right_by_id(db, right_id)
        if not template or not template.is_template:
            logger.info("Skipping %s: not a template", right_id)
            results[right_id] = TemplateApplication(right_id=right_id)
        else:
            templates.append(template)

    exception_ids_by_template = {
        t.right_id: right_repo.get_exception_template_ids(db, t.right_id) for t in templates
    }
    to_compute = sorted(
        {t.right_id for t in templates}.union(*exception_ids_by_template.values())
    )

    # Phase 1
    if session_factory is not None and max_workers > 1 and len(to_compute) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                right_id: executor.submit(
                    _candidates_in_new_session, session_factory, right_id, today
                )
                for right_id in to_compute
            }
            candidates = {right_id: future.result() for right_id, future in futures.items()}
    else:
        candidates = {right_id: template_candidates(db, right_id, today) for right_id in to_compute}

    # Phase 2
    for template in sorted(templates, key=lambda t: (t.exception_from is not None, t.right_id)):
        if cancel_event is not None and cancel_event.is_set():
            logger.warning(
                "Template application cancelled before %s (%d of %d done)",
                template.right_id,
                len(results),
                len(right_ids),
            )
            break
        exception_ids = exception_ids_by_template[template.right_id]
        exception_candidates = set().union(*(candidates[e] for e in exception_ids))
        results[template.right_id] = _relink(
            db,
            template,
            candidates[template.right_id],
            exception_candidates,
        )
    return results


def apply_all_templates(
    db: Session,
    max_workers: int = 1,
    session_factory: sessionmaker | None = None,
    cancel_event: Event | None = None,
    today: date | None = None,
) -> dict[str, TemplateApplication]:
    """Apply every template, see apply_templates."""
    return apply_templates(
        db,
        right_repo.get_all_template_ids(db),
        max_workers=max_workers,
        session_factory=session_factory,
        cancel_event=cancel_event,
        today=today,
    )


def add_bookmarks(
    db: Session, right_id: str, bookmark_ids: list[int], delete_old: bool = False
) -> list[int]:
    """
    Attach bookmarks to a template.

    With ``delete_old`` the template's existing bookmarks are detached first.

    Raises:
        NotFoundError: If the template or one of the bookmarks doesn't exist

    Returns:
        The bookmark IDs newly attached.
    """
    template = right_repo.get_right_by_id(db, right_id)
    if not template or not template.is_template:
        raise NotFoundError(f"Template with id {right_id} not found")

    found = {b.bookmark_id for b in bookmark_repo.get_bookmarks_by_ids(db, bookmark_ids)}
    missing = [b for b in bookmark_ids if b not in found]
    if missing:
        raise NotFoundError(f"Bookmarks not found: {', '.join(str(b) for b in missing)}")

    if delete_old:
        bookmark_template_repo.delete_pairs_by_right_id(db, right_id)
    inserted = bookmark_template_repo.upsert_pairs(db, [(b, right_id) for b in bookmark_ids])
    return [bookmark_id for bookmark_id, _ in inserted]


def remove_bookmark(db: Session, right_id: str, bookmark_id: int) -> None:
    """
    Detach a bookmark from a template.

    Raises:
        NotFoundError: If the pair doesn't exist
    """
    if not bookmark_template_repo.delete_pair(db, bookmark_id, right_id):
        raise NotFoundError(f"Bookmark {bookmark_id} is not attached to template {right_id}")
