from datetime import date

import pytest
from sqlalchemy.orm import Session

from app.errors import DomainValidationError, NotFoundError, ReferentialGuardError
from app.services.item import insert_item_entry
from app.services.right import create_right, delete_right, update_right


RIGHT_PAYLOAD = {
    "access_state": "open",
    "start_date": "2020-01-01",
    "end_date": "2020-12-31",
    "licence_contract": "contract-1",
}


# ============================================================================
# CREATE RIGHT TESTS
# ============================================================================


def test_create_right_success(client, db: Session):
    """Test successful right creation with a generated id."""
    response = client.post("/api/v1/rights", json={**RIGHT_PAYLOAD, "group_ids": ["g2", "g1"]})
    assert response.status_code == 201
    data = response.json()
    assert data["right_id"]
    assert data["access_state"] == "open"
    assert data["start_date"] == "2020-01-01"
    assert data["end_date"] == "2020-12-31"
    assert data["is_template"] is False
    assert data["group_ids"] == ["g1", "g2"]
    assert data["created_on"] is not None


def test_create_right_open_ended(client, db: Session):
    """Test creating a right without end date."""
    response = client.post("/api/v1/rights", json={"start_date": "2020-01-01"})
    assert response.status_code == 201
    assert response.json()["end_date"] is None


def test_create_right_end_before_start(client, db: Session):
    """Test end_date before start_date is rejected."""
    response = client.post(
        "/api/v1/rights",
        json={"start_date": "2020-01-01", "end_date": "2019-12-31"},
    )
    assert response.status_code == 422


def test_create_right_missing_start_date(client, db: Session):
    response = client.post("/api/v1/rights", json={"access_state": "open"})
    assert response.status_code == 422


def test_plain_right_cannot_carry_template_fields(db: Session):
    """Test template_name is reserved for templates."""
    with pytest.raises(DomainValidationError):
        create_right(db, start_date=date(2020, 1, 1), template_name="not a template")


# ============================================================================
# READ / UPDATE RIGHT TESTS
# ============================================================================


def test_get_right_by_id(client, db: Session, make_right):
    right = make_right(date(2021, 1, 1), None)

    response = client.get(f"/api/v1/rights/{right.right_id}")
    assert response.status_code == 200
    assert response.json()["right_id"] == right.right_id


def test_get_right_not_found(client, db: Session):
    response = client.get("/api/v1/rights/missing")
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_update_right_partial(client, db: Session, make_right):
    """Test only provided fields are updated and updated_on is stamped."""
    right = make_right(date(2021, 1, 1), None, licence_contract="keep-me")

    response = client.put(
        f"/api/v1/rights/{right.right_id}",
        json={"end_date": "2021-12-31", "last_updated_by": "tester"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["end_date"] == "2021-12-31"
    assert data["licence_contract"] == "keep-me"
    assert data["last_updated_by"] == "tester"
    assert data["last_updated_on"] is not None


def test_update_right_groups(client, db: Session, make_right):
    """Test group_ids replace the existing groups."""
    right = make_right(group_ids=["a", "b"])

    response = client.put(f"/api/v1/rights/{right.right_id}", json={"group_ids": ["b", "c"]})
    assert response.status_code == 200
    assert response.json()["group_ids"] == ["b", "c"]


def test_update_right_end_before_start(client, db: Session, make_right):
    """Test an update producing end_date before start_date is rejected."""
    right = make_right(date(2021, 1, 1), None)

    response = client.put(f"/api/v1/rights/{right.right_id}", json={"end_date": "2020-01-01"})
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_update_right_not_found(db: Session):
    with pytest.raises(NotFoundError):
        update_right(db, "missing", notes_general="x")


# ============================================================================
# DELETE RIGHT TESTS
# ============================================================================


def test_delete_right(client, db: Session, make_right):
    right = make_right()

    response = client.delete(f"/api/v1/rights/{right.right_id}")
    assert response.status_code == 204
    assert client.get(f"/api/v1/rights/{right.right_id}").status_code == 404


def test_delete_linked_right_is_refused(client, db: Session, make_metadata, make_right):
    """Test a right linked to an item cannot be deleted."""
    make_metadata("m1")
    right = make_right()
    insert_item_entry(db, "m1", right.right_id)

    response = client.delete(f"/api/v1/rights/{right.right_id}")
    assert response.status_code == 409
    data = response.json()
    assert data["code"] == "RESOURCE_IN_USE"
    assert data["conflicting_ids"] == ["m1"]


def test_delete_template_with_exceptions_is_refused(db: Session, make_template):
    """Test a template referenced by an exception template cannot be deleted."""
    base = make_template("base")
    exception = make_template("exception", exception_from=base.right_id)

    with pytest.raises(ReferentialGuardError) as exc_info:
        delete_right(db, base.right_id)
    assert exc_info.value.referenced_by == [exception.right_id]

    delete_right(db, exception.right_id)
    delete_right(db, base.right_id)


def test_delete_right_not_found(client, db: Session):
    assert client.delete("/api/v1/rights/missing").status_code == 404
