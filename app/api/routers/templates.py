from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, sessionmaker

from app.api.deps import get_db
from app.core.config import settings
from app.services.right import create_right, delete_right, update_right
from app.services.search import search_by_template
from app.services.template import (
    add_bookmarks,
    apply_all_templates,
    apply_templates,
    remove_bookmark,
)
import app.repositories.bookmark as bookmark_repo
import app.repositories.bookmark_template as bookmark_template_repo
import app.repositories.right as right_repo
from app.schemas.bookmark import Bookmark
from app.schemas.pagination import PaginatedResponse
from app.schemas.right import Right, RightUpdate, TemplateCreate
from app.schemas.search import SearchResult
from app.schemas.template import (
    TemplateApplication,
    TemplateApplications,
    TemplateApplicationsRequest,
    TemplateBookmarks,
    TemplateBookmarksAdded,
)
from app.errors import NotFoundError

router = APIRouter(prefix="/templates", tags=["templates"])


def _get_template_or_404(db: Session, right_id: str):
    template = right_repo.get_right_by_id(db, right_id)
    if not template or not template.is_template:
        raise NotFoundError("Template not found")
    return template


@router.post("", response_model=Right, status_code=status.HTTP_201_CREATED)
def create_new_template(
    template_data: TemplateCreate,
    db: Session = Depends(get_db),
):
    """
    Create a new template. Template names are unique.
    """
    template = create_right(db, is_template=True, **template_data.model_dump())
    return Right.model_validate(template)


@router.get("", response_model=PaginatedResponse[Right])
def get_all_templates(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(100, ge=1, le=1000, description="Number of items per page"),
    db: Session = Depends(get_db),
):
    templates, total = right_repo.get_templates_paginated(db, page=page, page_size=page_size)
    return PaginatedResponse(
        items=[Right.model_validate(t) for t in templates],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("/applications", response_model=TemplateApplications)
def apply_templates_by_ids(
    request: TemplateApplicationsRequest,
    apply_all: bool = Query(False, alias="all", description="Apply every template, ignoring right_ids"),
    db: Session = Depends(get_db),
):
    """
    Apply templates: re-link each template's right to the items its bookmarks
    currently match. Items with conflicting rights are skipped and reported.
    """
    options = dict(
        max_workers=settings.template_apply_workers,
        session_factory=sessionmaker(bind=db.get_bind(), autoflush=False),
    )
    if apply_all:
        results = apply_all_templates(db, **options)
    else:
        results = apply_templates(db, request.right_ids, **options)
    return TemplateApplications(
        applications=[TemplateApplication.model_validate(r) for r in results.values()]
    )


@router.get("/{right_id}", response_model=Right)
def get_template_by_id(
    right_id: str,
    db: Session = Depends(get_db),
):
    return Right.model_validate(_get_template_or_404(db, right_id))


@router.put("/{right_id}", response_model=Right)
def update_template_by_id(
    right_id: str,
    template_data: RightUpdate,
    db: Session = Depends(get_db),
):
    """
    Update a template.

    Fields not included in the request are not updated.
    To clear a field (set to null), explicitly include it with null value.
    """
    _get_template_or_404(db, right_id)
    template = update_right(db, right_id=right_id, **template_data.model_dump(exclude_unset=True))
    return Right.model_validate(template)


@router.delete("/{right_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template_by_id(
    right_id: str,
    db: Session = Depends(get_db),
):
    """
    Delete a template. Refused while it is linked to items or has exception templates.
    """
    _get_template_or_404(db, right_id)
    delete_right(db, right_id)


@router.post(
    "/{right_id}/bookmarks",
    response_model=TemplateBookmarksAdded,
    status_code=status.HTTP_201_CREATED,
)
def add_template_bookmarks(
    right_id: str,
    request: TemplateBookmarks,
    delete_old: bool = Query(False, description="Detach all current bookmarks first"),
    db: Session = Depends(get_db),
):
    inserted = add_bookmarks(db, right_id, request.bookmark_ids, delete_old=delete_old)
    return TemplateBookmarksAdded(right_id=right_id, bookmark_ids=inserted)


@router.get("/{right_id}/bookmarks", response_model=list[Bookmark])
def get_template_bookmarks(
    right_id: str,
    db: Session = Depends(get_db),
):
    _get_template_or_404(db, right_id)
    bookmark_ids = bookmark_template_repo.get_bookmark_ids_by_right_id(db, right_id)
    return [Bookmark.model_validate(b) for b in bookmark_repo.get_bookmarks_by_ids(db, bookmark_ids)]


@router.delete("/{right_id}/bookmarks/{bookmark_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template_bookmark(
    right_id: str,
    bookmark_id: int,
    db: Session = Depends(get_db),
):
    remove_bookmark(db, right_id, bookmark_id)


@router.get("/{right_id}/search", response_model=SearchResult)
def search_template_items(
    right_id: str,
    limit: int = Query(settings.search_default_limit, ge=0, le=settings.search_max_limit),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """
    Preview the items the template's bookmarks currently match.
    """
    result = search_by_template(db, right_id, limit=limit, offset=offset)
    return SearchResult.model_validate(result)
