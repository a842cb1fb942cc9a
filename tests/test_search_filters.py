from datetime import date

import pytest

from app.domain.enums import AccessState, PublicationType, TemporalValidity
from app.domain.search_filter import (
    MAX_YEAR,
    MIN_YEAR,
    AccessStateFilter,
    NoRightInformationFilter,
    PaketSigelFilter,
    PublicationDateFilter,
    PublicationTypeFilter,
    SearchFilters,
    StartDateFilter,
    TemporalValidityFilter,
    ZDBIdFilter,
)
from app.errors import DomainValidationError


# ============================================================================
# PUBLICATION DATE
# ============================================================================


def test_publication_date_filter_string_form():
    search_filter = PublicationDateFilter.from_string("2000-2010")

    assert search_filter == PublicationDateFilter(2000, 2010)
    assert search_filter.to_string() == "2000-2010"
    assert search_filter.from_date == date(2000, 1, 1)
    assert search_filter.to_date == date(2010, 12, 31)


def test_publication_date_filter_open_sides_use_bounds():
    assert PublicationDateFilter.from_string("-2010") == PublicationDateFilter(MIN_YEAR, 2010)
    assert PublicationDateFilter.from_string("2000-") == PublicationDateFilter(2000, MAX_YEAR)


def test_publication_date_filter_single_year_is_allowed():
    assert PublicationDateFilter(2005, 2005).to_string() == "2005-2005"


@pytest.mark.parametrize(
    "from_year, to_year",
    [(2010, 2000), (MIN_YEAR - 1, 2000), (2000, MAX_YEAR + 1)],
)
def test_publication_date_filter_rejects_invalid_ranges(from_year, to_year):
    with pytest.raises(DomainValidationError):
        PublicationDateFilter(from_year, to_year)


@pytest.mark.parametrize("raw", ["2000", "abc-2010", "2000-2010-2020"])
def test_publication_date_filter_rejects_malformed_strings(raw):
    with pytest.raises(DomainValidationError):
        PublicationDateFilter.from_string(raw)


# ============================================================================
# VALUE AND ENUM LISTS
# ============================================================================


def test_enum_list_filter_accepts_values_and_member_names():
    search_filter = PublicationTypeFilter.from_string("book, ARTICLE")

    assert search_filter.values == (PublicationType.BOOK, PublicationType.ARTICLE)
    assert search_filter.to_string() == "book,article"


def test_enum_list_filter_rejects_unknown_value():
    with pytest.raises(DomainValidationError):
        AccessStateFilter.from_string("open,sometimes")


def test_enum_list_filter_coerces_plain_strings():
    assert AccessStateFilter(["open"]).values == (AccessState.OPEN,)


def test_value_list_filter_requires_a_value():
    with pytest.raises(DomainValidationError):
        PaketSigelFilter([])


def test_empty_string_means_no_filter():
    assert ZDBIdFilter.from_string("") is None
    assert TemporalValidityFilter.from_string("   ") is None
    assert StartDateFilter.from_string(None) is None


def test_date_filter_string_form():
    search_filter = StartDateFilter.from_string("2023-01-31")

    assert search_filter.date == date(2023, 1, 31)
    assert search_filter.to_string() == "2023-01-31"


def test_date_filter_rejects_malformed_date():
    with pytest.raises(DomainValidationError):
        StartDateFilter.from_string("31.01.2023")


def test_no_right_information_filter_string_form():
    assert NoRightInformationFilter.from_string("true") == NoRightInformationFilter()
    assert NoRightInformationFilter.from_string("false") is None
    with pytest.raises(DomainValidationError):
        NoRightInformationFilter.from_string("maybe")


# ============================================================================
# FILTER SETS
# ============================================================================


def test_search_filters_partition_by_kind():
    filters = SearchFilters.from_strings(
        publication_date="2000-2010",
        access_state="open",
        temporal_validity="present",
        no_right_information="true",
    )

    assert filters.metadata_filters == [PublicationDateFilter(2000, 2010)]
    assert filters.right_filters == [
        AccessStateFilter((AccessState.OPEN,)),
        TemporalValidityFilter((TemporalValidity.PRESENT,)),
    ]
    assert filters.no_right_information == NoRightInformationFilter()


def test_search_filters_to_strings_lists_every_category():
    filters = SearchFilters.of([ZDBIdFilter(("123", "456")), None])

    strings = filters.to_strings()

    assert strings["zdb_id"] == "123,456"
    assert strings["publication_date"] is None
    assert strings["no_right_information"] is None
    assert SearchFilters.from_strings(**strings) == filters


def test_search_filters_reject_unknown_category():
    with pytest.raises(DomainValidationError):
        SearchFilters.from_strings(colour="blue")


def test_search_filters_reject_two_filters_of_one_kind():
    with pytest.raises(DomainValidationError):
        SearchFilters.of([ZDBIdFilter(("1",)), ZDBIdFilter(("2",))])
