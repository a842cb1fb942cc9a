from datetime import date

import pytest
from sqlalchemy.orm import Session

import app.repositories.item as item_repo
from app.domain.enums import AccessState, FormalRule, PublicationType, TemporalValidity
from app.domain.search_filter import (
    AccessStateFilter,
    FormalRuleFilter,
    NoRightInformationFilter,
    PublicationDateFilter,
    PublicationTypeFilter,
    RightValidOnFilter,
    StartDateFilter,
    TemplateNameFilter,
    TemporalValidityFilter,
)
from app.errors import DomainValidationError
from app.services.search import search_query

TODAY = date(2024, 6, 15)


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture(scope="function")
def catalogue(db: Session, make_metadata, make_right):
    """
    Four metadata records:

    - m1: "Foo Bar", article, 2001, zdb 111, open right 2020-2022 and closed right from 2023
    - m2: "foo", book, 2005, zdb 222, restricted right from 2025 with a licence contract
    - m3: "Other", article, 2015, zdb 111, no rights
    - m4: "Foo Baz", article, 1999, no zdb, no rights
    """
    m1 = make_metadata(
        "m1", title="Foo Bar", publication_date=date(2001, 5, 1), zdb_id="111", paket_sigel="ZDB-1"
    )
    m2 = make_metadata(
        "m2",
        title="foo",
        publication_date=date(2005, 5, 1),
        publication_type=PublicationType.BOOK,
        zdb_id="222",
        paket_sigel="ZDB-1",
    )
    m3 = make_metadata("m3", title="Other", publication_date=date(2015, 5, 1), zdb_id="111")
    m4 = make_metadata("m4", title="Foo Baz", publication_date=date(1999, 5, 1))

    open_right = make_right(date(2020, 1, 1), date(2022, 12, 31), access_state=AccessState.OPEN)
    closed_right = make_right(date(2023, 1, 1), None, access_state=AccessState.CLOSED)
    future_right = make_right(
        date(2025, 1, 1),
        None,
        access_state=AccessState.RESTRICTED,
        licence_contract="contract-7",
    )
    item_repo.create_item_entry(db, "m1", open_right.right_id)
    item_repo.create_item_entry(db, "m1", closed_right.right_id)
    item_repo.create_item_entry(db, "m2", future_right.right_id)
    return {
        "m1": m1,
        "m2": m2,
        "m3": m3,
        "m4": m4,
        "open": open_right,
        "closed": closed_right,
        "future": future_right,
    }


def ids(result) -> list[str]:
    return [item.metadata.metadata_id for item in result.results]


# ============================================================================
# FREE TEXT
# ============================================================================


def test_search_without_term_returns_everything_by_id(db: Session, catalogue):
    result = search_query(db, None)

    assert ids(result) == ["m1", "m2", "m3", "m4"]
    assert result.number_of_results == 4


def test_search_matches_case_insensitive_substring(db: Session, catalogue):
    result = search_query(db, "tit:FOO")

    assert sorted(ids(result)) == ["m1", "m2", "m4"]


def test_exact_matches_rank_first(db: Session, catalogue):
    result = search_query(db, "tit:foo")

    assert ids(result)[0] == "m2"
    assert ids(result)[1:] == ["m1", "m4"]


def test_repeated_key_is_or_combined(db: Session, catalogue):
    result = search_query(db, "zdb:111 zdb:222")

    assert sorted(ids(result)) == ["m1", "m2", "m3"]


def test_distinct_keys_are_and_combined(db: Session, catalogue):
    result = search_query(db, "zdb:111 tit:foo")

    assert ids(result) == ["m1"]


def test_search_reports_warnings(db: Session, catalogue):
    result = search_query(db, "tit:foo nope:1 loose")

    assert result.invalid_search_keys == ["nope"]
    assert result.has_search_token_with_no_key
    assert sorted(ids(result)) == ["m1", "m2", "m4"]


def test_boolean_expression_search(db: Session, catalogue):
    result = search_query(db, "tit:foo & !zdb:111")

    assert sorted(ids(result)) == ["m2", "m4"]


def test_parenthesised_text_is_searched_with_a_warning(db: Session, catalogue):
    result = search_query(db, "tit:foo (2010)")

    assert result.has_search_token_with_no_key
    assert sorted(ids(result)) == ["m1", "m2", "m4"]


def test_text_without_keys_matches_everything_with_a_warning(db: Session, catalogue):
    result = search_query(db, "hello world!")

    assert result.has_search_token_with_no_key
    assert result.number_of_results == 4


def test_licence_url_with_query_string(db: Session, catalogue, make_metadata):
    make_metadata("m5", licence_url="https://x.org/l?a=1&b=2")

    result = search_query(db, "lur:https://x.org/l?a=1&b=2")

    assert ids(result) == ["m5"]
    assert not result.has_search_token_with_no_key


def test_malformed_expression_is_rejected(db: Session, catalogue):
    with pytest.raises(DomainValidationError):
        search_query(db, "tit:foo & (zdb:1")


# ============================================================================
# FILTERS
# ============================================================================


def test_publication_date_range_is_inclusive(db: Session, catalogue):
    result = search_query(db, None, metadata_filters=[PublicationDateFilter(2001, 2005)])

    assert ids(result) == ["m1", "m2"]


def test_publication_type_filter(db: Session, catalogue):
    result = search_query(
        db, None, metadata_filters=[PublicationTypeFilter((PublicationType.BOOK,))]
    )

    assert ids(result) == ["m2"]


def test_access_state_filter_values_are_or_combined(db: Session, catalogue):
    result = search_query(
        db,
        None,
        right_filters=[AccessStateFilter((AccessState.OPEN, AccessState.RESTRICTED))],
    )

    assert ids(result) == ["m1", "m2"]


def test_right_filters_must_hold_for_the_same_right(db: Session, catalogue):
    # m1 has an open right and a right starting 2023-01-01, but not one right with both
    result = search_query(
        db,
        None,
        right_filters=[
            AccessStateFilter((AccessState.OPEN,)),
            StartDateFilter(date(2023, 1, 1)),
        ],
    )

    assert ids(result) == []


@pytest.mark.parametrize(
    "validity, expected",
    [
        (TemporalValidity.PAST, ["m1"]),
        (TemporalValidity.PRESENT, ["m1"]),
        (TemporalValidity.FUTURE, ["m2"]),
    ],
)
def test_temporal_validity_filter(db: Session, catalogue, validity, expected):
    result = search_query(
        db, None, right_filters=[TemporalValidityFilter((validity,))], today=TODAY
    )

    assert ids(result) == expected


def test_right_valid_on_filter(db: Session, catalogue):
    result = search_query(db, None, right_filters=[RightValidOnFilter(date(2021, 6, 1))])

    assert ids(result) == ["m1"]


def test_formal_rule_filter(db: Session, catalogue):
    result = search_query(
        db, None, right_filters=[FormalRuleFilter((FormalRule.LICENCE_CONTRACT,))]
    )

    assert ids(result) == ["m2"]


def test_template_name_filter(db: Session, catalogue, make_template):
    template = make_template("Open access 2020")
    item_repo.create_item_entry(db, "m3", template.right_id)

    result = search_query(db, None, right_filters=[TemplateNameFilter(("Open access 2020",))])

    assert ids(result) == ["m3"]


def test_no_right_information_suppresses_right_filters(db: Session, catalogue):
    result = search_query(
        db,
        None,
        right_filters=[AccessStateFilter((AccessState.OPEN,))],
        no_right_information_filter=NoRightInformationFilter(),
    )

    assert ids(result) == ["m3", "m4"]
    assert result.facets.access_states == {}


# ============================================================================
# PAGING AND FACETS
# ============================================================================


def test_paging_by_limit_and_offset(db: Session, catalogue):
    result = search_query(db, None, limit=2, offset=1)

    assert ids(result) == ["m2", "m3"]
    assert result.number_of_results == 4


def test_negative_limit_is_rejected(db: Session, catalogue):
    with pytest.raises(DomainValidationError):
        search_query(db, None, limit=-1)


def test_facets_cover_the_whole_match_set(db: Session, catalogue):
    result = search_query(db, None, limit=1)

    assert len(result.results) == 1
    assert result.facets.publication_types == {
        PublicationType.ARTICLE: 3,
        PublicationType.BOOK: 1,
    }
    assert result.facets.zdb_ids == {"111": 2, "222": 1}
    assert result.facets.paket_sigels == {"ZDB-1": 2}
    assert result.facets.access_states == {
        AccessState.OPEN: 1,
        AccessState.CLOSED: 1,
        AccessState.RESTRICTED: 1,
    }
    assert result.facets.has_licence_contract
    assert not result.facets.has_zbw_user_agreement


def test_results_carry_linked_rights(db: Session, catalogue):
    result = search_query(db, "zdb:111")

    rights_by_id = {item.metadata.metadata_id: item.rights for item in result.results}
    assert [r.right_id for r in rights_by_id["m1"]] == [
        catalogue["open"].right_id,
        catalogue["closed"].right_id,
    ]
    assert rights_by_id["m3"] == []
