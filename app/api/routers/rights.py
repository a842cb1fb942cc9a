from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.services.right import create_right, delete_right, update_right
import app.repositories.right as right_repo
from app.schemas.right import Right, RightCreate, RightUpdate
from app.errors import NotFoundError

router = APIRouter(prefix="/rights", tags=["rights"])


@router.post("", response_model=Right, status_code=status.HTTP_201_CREATED)
def create_new_right(
    right_data: RightCreate,
    db: Session = Depends(get_db),
):
    """
    Create a new right. The right_id is generated by the server.
    """
    right = create_right(db, **right_data.model_dump())
    return Right.model_validate(right)


@router.get("/{right_id}", response_model=Right)
def get_right_by_id(
    right_id: str,
    db: Session = Depends(get_db),
):
    right = right_repo.get_right_by_id(db, right_id)
    if not right:
        raise NotFoundError("Right not found")
    return Right.model_validate(right)


@router.put("/{right_id}", response_model=Right)
def update_right_by_id(
    right_id: str,
    right_data: RightUpdate,
    db: Session = Depends(get_db),
):
    """
    Update a right.

    Fields not included in the request are not updated.
    To clear a field (set to null), explicitly include it with null value.
    """
    update_data = right_data.model_dump(exclude_unset=True)
    right = update_right(db, right_id=right_id, **update_data)
    return Right.model_validate(right)


@router.delete("/{right_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_right_by_id(
    right_id: str,
    db: Session = Depends(get_db),
):
    """
    Delete a right. Refused while it is linked to any item.
    """
    delete_right(db, right_id)
