from datetime import date

import pytest
from sqlalchemy.orm import Session

import app.repositories.right as right_repo
from app.errors import DateConflictError, DuplicateResourceError, NotFoundError
from app.services.item import check_for_date_conflict, insert_item_entry


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture(scope="function")
def metadata(make_metadata):
    return make_metadata("m1")


@pytest.fixture(scope="function")
def open_right(make_right):
    """Open-ended right starting 2020-01-01."""
    return make_right(date(2020, 1, 1), None)


# ============================================================================
# SERVICE TESTS
# ============================================================================


def test_insert_item_entry(db: Session, metadata, open_right):
    """Test linking a right to a metadata record."""
    entry = insert_item_entry(db, "m1", open_right.right_id)

    assert entry.metadata_id == "m1"
    assert entry.right_id == open_right.right_id


def test_insert_item_entry_unknown_ids(db: Session, metadata, open_right):
    """Test linking fails when either side doesn't exist."""
    with pytest.raises(NotFoundError):
        insert_item_entry(db, "missing", open_right.right_id)
    with pytest.raises(NotFoundError):
        insert_item_entry(db, "m1", "missing")


def test_insert_item_entry_twice(db: Session, metadata, open_right):
    """Test linking the same pair twice fails."""
    insert_item_entry(db, "m1", open_right.right_id)

    with pytest.raises(DuplicateResourceError):
        insert_item_entry(db, "m1", open_right.right_id)


def test_insert_conflicting_right(db: Session, metadata, open_right, make_right):
    """Test a second open-ended right on the same item is refused."""
    insert_item_entry(db, "m1", open_right.right_id)
    second = make_right(date(2024, 1, 1), None)

    with pytest.raises(DateConflictError) as exc_info:
        insert_item_entry(db, "m1", second.right_id)

    assert exc_info.value.conflicting_right_ids == [open_right.right_id]
    assert right_repo.right_contains_id(db, second.right_id)


def test_insert_conflicting_right_deletes_it_on_request(db: Session, metadata, open_right, make_right):
    """Test delete_right_on_conflict removes the rejected right."""
    insert_item_entry(db, "m1", open_right.right_id)
    second = make_right(date(2024, 1, 1), None)

    with pytest.raises(DateConflictError):
        insert_item_entry(db, "m1", second.right_id, delete_right_on_conflict=True)

    assert not right_repo.right_contains_id(db, second.right_id)


def test_conflicting_template_is_never_deleted(db: Session, metadata, open_right, make_template):
    """Test delete_right_on_conflict keeps templates."""
    insert_item_entry(db, "m1", open_right.right_id)
    template = make_template("kept", date(2024, 1, 1), None)

    with pytest.raises(DateConflictError):
        insert_item_entry(db, "m1", template.right_id, delete_right_on_conflict=True)

    assert right_repo.right_contains_id(db, template.right_id)


def test_bounded_rights_before_open_right_do_not_conflict(db: Session, metadata, open_right, make_right):
    """Test a bounded right ending before an open right starts is accepted."""
    insert_item_entry(db, "m1", open_right.right_id)
    earlier = make_right(date(2015, 1, 1), date(2019, 12, 31))

    assert check_for_date_conflict(db, "m1", earlier) == []
    insert_item_entry(db, "m1", earlier.right_id)


def test_touching_bounded_rights_conflict(db: Session, metadata, make_right):
    """Test bounded rights sharing a boundary day conflict."""
    first = make_right(date(2020, 1, 1), date(2020, 12, 31))
    insert_item_entry(db, "m1", first.right_id)
    second = make_right(date(2020, 12, 31), date(2021, 12, 31))

    assert check_for_date_conflict(db, "m1", second) == [first.right_id]


# ============================================================================
# API TESTS
# ============================================================================


def test_create_item_entry(client, db: Session, metadata, open_right):
    """Test POST /items links a right."""
    response = client.post(
        "/api/v1/items",
        json={"metadata_id": "m1", "right_id": open_right.right_id},
    )
    assert response.status_code == 201
    assert response.json() == {"metadata_id": "m1", "right_id": open_right.right_id}


def test_create_item_entry_duplicate(client, db: Session, metadata, open_right):
    """Test linking the same pair twice returns 409."""
    payload = {"metadata_id": "m1", "right_id": open_right.right_id}
    assert client.post("/api/v1/items", json=payload).status_code == 201

    response = client.post("/api/v1/items", json=payload)
    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_RESOURCE"


def test_create_item_entry_conflict(client, db: Session, metadata, open_right, make_right):
    """Test a conflicting link returns 409 with the conflicting right IDs."""
    insert_item_entry(db, "m1", open_right.right_id)
    second = make_right(date(2024, 1, 1), None)

    response = client.post(
        "/api/v1/items",
        json={"metadata_id": "m1", "right_id": second.right_id, "delete_right_on_conflict": True},
    )
    assert response.status_code == 409
    data = response.json()
    assert data["code"] == "DATE_CONFLICT"
    assert data["conflicting_ids"] == [open_right.right_id]
    assert client.get(f"/api/v1/rights/{second.right_id}").status_code == 404


def test_create_item_entry_unknown_metadata(client, db: Session, open_right):
    """Test linking to a missing metadata record returns 404."""
    response = client.post(
        "/api/v1/items",
        json={"metadata_id": "missing", "right_id": open_right.right_id},
    )
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_get_item(client, db: Session, metadata, open_right, make_right):
    """Test GET /items/{metadata_id} returns metadata and rights by start date."""
    earlier = make_right(date(2015, 1, 1), date(2019, 12, 31))
    insert_item_entry(db, "m1", open_right.right_id)
    insert_item_entry(db, "m1", earlier.right_id)

    response = client.get("/api/v1/items/m1")
    assert response.status_code == 200
    data = response.json()
    assert data["metadata"]["metadata_id"] == "m1"
    assert [r["right_id"] for r in data["rights"]] == [earlier.right_id, open_right.right_id]


def test_get_item_not_found(client, db: Session):
    """Test GET /items/{metadata_id} for a missing record returns 404."""
    assert client.get("/api/v1/items/missing").status_code == 404


def test_get_all_items_lists_only_linked_records(client, db: Session, make_metadata, open_right):
    """Test GET /items only lists metadata that has rights."""
    make_metadata("m1")
    make_metadata("m2")
    insert_item_entry(db, "m2", open_right.right_id)

    response = client.get("/api/v1/items")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["items"][0]["metadata"]["metadata_id"] == "m2"


def test_count_items_by_right(client, db: Session, make_metadata, open_right):
    """Test counting the items linked to a right."""
    make_metadata("m1")
    make_metadata("m2")
    insert_item_entry(db, "m1", open_right.right_id)
    insert_item_entry(db, "m2", open_right.right_id)

    response = client.get(f"/api/v1/items/count/right/{open_right.right_id}")
    assert response.status_code == 200
    assert response.json() == {"right_id": open_right.right_id, "count": 2}


def test_count_items_unknown_right(client, db: Session):
    assert client.get("/api/v1/items/count/right/missing").status_code == 404


def test_delete_item_entry(client, db: Session, metadata, open_right):
    """Test unlinking a right, then unlinking again fails."""
    insert_item_entry(db, "m1", open_right.right_id)

    response = client.delete(f"/api/v1/items/m1/{open_right.right_id}")
    assert response.status_code == 204

    response = client.delete(f"/api/v1/items/m1/{open_right.right_id}")
    assert response.status_code == 404


def test_search_items_endpoint(client, db: Session, make_metadata, open_right):
    """Test GET /items/search with a term, a filter string and warnings."""
    make_metadata("m1", title="Economics of Foo", publication_date=date(2001, 1, 1))
    make_metadata("m2", title="Economics of Bar", publication_date=date(2015, 1, 1))
    insert_item_entry(db, "m1", open_right.right_id)

    response = client.get(
        "/api/v1/items/search",
        params={
            "search_term": "tit:economics foo:bar",
            "filter_publication_date": "2000-2010",
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["number_of_results"] == 1
    assert data["results"][0]["metadata"]["metadata_id"] == "m1"
    assert data["results"][0]["rights"][0]["right_id"] == open_right.right_id
    assert data["invalid_search_keys"] == ["foo"]


def test_search_items_invalid_filter(client, db: Session):
    """Test a malformed filter string returns 400."""
    response = client.get(
        "/api/v1/items/search", params={"filter_publication_date": "twenty-ten"}
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
