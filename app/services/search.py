from collections import Counter
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.orm import Session

import app.repositories.bookmark as bookmark_repo
import app.repositories.bookmark_template as bookmark_template_repo
import app.repositories.item as item_repo
import app.repositories.right as right_repo
import app.repositories.search as search_repo
from app.db.models.metadata import ItemMetadata as ItemMetadataModel
from app.domain.search_expression import expression_search_pairs
from app.domain.search_filter import NoRightInformationFilter, SearchFilters
from app.domain.search_query import ParsedSearchTerm, parse_search_term
from app.errors import DomainValidationError, NotFoundError
from app.repositories.search import Facets
from app.services.bookmark import bookmark_filters


@dataclass
class Item:
    """A metadata record together with its linked rights."""

    metadata: ItemMetadataModel
    rights: list = field(default_factory=list)


@dataclass
class SearchQueryResult:
    number_of_results: int
    results: list[Item]
    facets: Facets
    invalid_search_keys: list[str] = field(default_factory=list)
    has_search_token_with_no_key: bool = False


def _validate_paging(limit: int | None, offset: int) -> None:
    if limit is not None and limit < 0:
        raise DomainValidationError("limit must not be negative")
    if offset < 0:
        raise DomainValidationError("offset must not be negative")


def _criteria(parsed: ParsedSearchTerm, filters: SearchFilters, today: date | None) -> list:
    return search_repo.build_search_criteria(
        pairs=parsed.pairs,
        expression=parsed.expression,
        metadata_filters=filters.metadata_filters,
        right_filters=filters.right_filters,
        no_right_information=filters.no_right_information is not None,
        today=today,
    )


def _rank_pairs(parsed: ParsedSearchTerm) -> list:
    if parsed.expression is not None:
        return expression_search_pairs(parsed.expression)
    return parsed.pairs


def _run_search(
    db: Session,
    search_term: str | None,
    filters: SearchFilters,
    limit: int | None,
    offset: int,
    today: date | None,
) -> SearchQueryResult:
    _validate_paging(limit, offset)
    parsed = parse_search_term(search_term)
    criteria = _criteria(parsed, filters, today)

    records = search_repo.search_metadata(
        db, criteria, rank_pairs=_rank_pairs(parsed), limit=limit, offset=offset
    )
    rights_by_metadata = item_repo.get_rights_by_metadata_ids(
        db, [m.metadata_id for m in records]
    )
    return SearchQueryResult(
        number_of_results=search_repo.count_search_metadata(db, criteria),
        results=[Item(metadata=m, rights=rights_by_metadata[m.metadata_id]) for m in records],
        facets=search_repo.search_facets(
            db,
            criteria,
            right_filters=filters.right_filters,
            no_right_information=filters.no_right_information is not None,
            today=today,
        ),
        invalid_search_keys=parsed.invalid_search_keys,
        has_search_token_with_no_key=parsed.has_search_token_with_no_key,
    )


def search_query(
    db: Session,
    search_term: str | None,
    limit: int | None = None,
    offset: int = 0,
    metadata_filters: list | None = None,
    right_filters: list | None = None,
    no_right_information_filter: NoRightInformationFilter | None = None,
    today: date | None = None,
) -> SearchQueryResult:
    """
    Search metadata records by free-text term and structural filters.

    - Unknown search keys and text outside of any key are reported as warnings
    - A ``limit`` of None returns every match
    - Facets and the total count cover the complete match set
    - With ``no_right_information_filter`` right filters are ignored

    Raises:
        DomainValidationError: If the term is a malformed boolean expression or
            the paging arguments are negative
    """
    filters = SearchFilters.of(
        [*(metadata_filters or []), *(right_filters or []), no_right_information_filter]
    )
    return _run_search(db, search_term, filters, limit, offset, today)


def find_matching_metadata_ids(
    db: Session,
    search_term: str | None,
    filters: SearchFilters,
    today: date | None = None,
) -> set[str]:
    """IDs of every metadata record matching a search, without paging."""
    parsed = parse_search_term(search_term)
    return search_repo.search_metadata_ids(db, _criteria(parsed, filters, today))


def _merge_facets(target: Facets, other: Facets) -> None:
    for name in ("access_states", "publication_types", "paket_sigels", "zdb_ids"):
        setattr(target, name, dict(Counter(getattr(target, name)) + Counter(getattr(other, name))))
    target.has_licence_contract |= other.has_licence_contract
    target.has_open_content_licence |= other.has_open_content_licence
    target.has_zbw_user_agreement |= other.has_zbw_user_agreement


def search_by_template(
    db: Session,
    right_id: str,
    limit: int | None = None,
    offset: int = 0,
    today: date | None = None,
) -> SearchQueryResult:
    """
    Preview the items a template's bookmarks currently match.

    Bookmarks are searched in ID order and their results concatenated; the
    limit and offset apply to the concatenation. Counts and facets are summed
    over all bookmarks.

    Raises:
        NotFoundError: If the template doesn't exist
    """
    _validate_paging(limit, offset)
    right = right_repo.get_right_by_id(db, right_id)
    if not right or not right.is_template:
        raise NotFoundError(f"Template with id {right_id} not found")

    combined = SearchQueryResult(number_of_results=0, results=[], facets=Facets())
    remaining_offset = offset
    remaining_limit = limit
    bookmark_ids = bookmark_template_repo.get_bookmark_ids_by_right_id(db, right_id)
    for bookmark in bookmark_repo.get_bookmarks_by_ids(db, bookmark_ids):
        result = _run_search(
            db,
            bookmark.search_term,
            bookmark_filters(bookmark),
            limit=remaining_limit,
            offset=remaining_offset,
            today=today,
        )
        combined.number_of_results += result.number_of_results
        combined.results.extend(result.results)
        _merge_facets(combined.facets, result.facets)
        for key in result.invalid_search_keys:
            if key not in combined.invalid_search_keys:
                combined.invalid_search_keys.append(key)
        combined.has_search_token_with_no_key |= result.has_search_token_with_no_key

        remaining_offset = max(remaining_offset - result.number_of_results, 0)
        if remaining_limit is not None:
            remaining_limit = max(remaining_limit - len(result.results), 0)
    return combined
