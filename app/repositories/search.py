"""Lowering of search terms and filters to SQL, and the queries built on top.

All functions here are read-only. Free-text pairs match case-insensitive
substrings of the column their key maps to; pairs sharing a key are
OR-combined, distinct keys are AND-combined. Right filters must all hold for
one and the same linked right, which is expressed as a correlated EXISTS over
the item link table.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy import and_, case, func, not_, or_, select
from sqlalchemy.orm import Session

from app.db.models.item import ItemLink as ItemLinkModel
from app.db.models.metadata import ItemMetadata as ItemMetadataModel
from app.db.models.right import ItemRight as ItemRightModel
from app.domain.enums import FormalRule, TemporalValidity
from app.domain.search_expression import And, Not, Or, Variable
from app.domain.search_filter import (
    AccessStateFilter,
    EndDateFilter,
    FormalRuleFilter,
    LicenceUrlFilter,
    PaketSigelFilter,
    PublicationDateFilter,
    PublicationTypeFilter,
    RightValidOnFilter,
    SeriesFilter,
    StartDateFilter,
    TemplateNameFilter,
    TemporalValidityFilter,
    ZDBIdFilter,
)
from app.domain.search_query import SearchPair


@dataclass
class Facets:
    """Aggregates over the complete match set of a search, not just one page."""

    access_states: dict = field(default_factory=dict)
    publication_types: dict = field(default_factory=dict)
    paket_sigels: dict = field(default_factory=dict)
    zdb_ids: dict = field(default_factory=dict)
    has_licence_contract: bool = False
    has_open_content_licence: bool = False
    has_zbw_user_agreement: bool = False


def _column(pair: SearchPair):
    return getattr(ItemMetadataModel, pair.key.column_name)


def _pair_clause(pair: SearchPair):
    return func.coalesce(_column(pair), "").icontains(pair.values, autoescape=True)


def _pair_rank(pair: SearchPair):
    column = func.coalesce(_column(pair), "")
    return case(
        (func.lower(column) == pair.values.lower(), 2),
        (column.icontains(pair.values, autoescape=True), 1),
        else_=0,
    )


def pairs_clause(pairs: list[SearchPair]):
    """OR within a repeated key, AND across distinct keys."""
    by_key = defaultdict(list)
    for pair in pairs:
        by_key[pair.key].append(_pair_clause(pair))
    return and_(*(or_(*clauses) for clauses in by_key.values()))


def expression_clause(expression):
    if isinstance(expression, Variable):
        return _pair_clause(expression.search_pair)
    if isinstance(expression, Not):
        return not_(expression_clause(expression.body))
    if isinstance(expression, And):
        return and_(expression_clause(expression.left), expression_clause(expression.right))
    if isinstance(expression, Or):
        return or_(expression_clause(expression.left), expression_clause(expression.right))
    raise TypeError(f"Unsupported search expression node: {type(expression).__name__}")


def _temporal_validity_clause(validity: TemporalValidity, today: date):
    if validity is TemporalValidity.FUTURE:
        return ItemRightModel.start_date > today
    if validity is TemporalValidity.PAST:
        return ItemRightModel.end_date < today
    if validity is TemporalValidity.PRESENT:
        return and_(
            ItemRightModel.start_date < today,
            or_(ItemRightModel.end_date.is_(None), ItemRightModel.end_date > today),
        )
    raise TypeError(f"Unsupported temporal validity: {validity!r}")


def _formal_rule_clause(rule: FormalRule):
    if rule is FormalRule.LICENCE_CONTRACT:
        return and_(
            ItemRightModel.licence_contract.is_not(None),
            ItemRightModel.licence_contract != "",
        )
    if rule is FormalRule.OPEN_CONTENT_LICENCE:
        return or_(
            and_(
                ItemRightModel.open_content_licence.is_not(None),
                ItemRightModel.open_content_licence != "",
            ),
            ItemRightModel.non_standard_open_content_licence.is_(True),
            and_(
                ItemRightModel.non_standard_open_content_licence_url.is_not(None),
                ItemRightModel.non_standard_open_content_licence_url != "",
            ),
            ItemRightModel.restricted_open_content_licence.is_(True),
        )
    if rule is FormalRule.ZBW_USER_AGREEMENT:
        return ItemRightModel.zbw_user_agreement.is_(True)
    raise TypeError(f"Unsupported formal rule: {rule!r}")


def filter_predicate(search_filter, today: date | None = None):
    """Lower one structural filter to a SQL predicate.

    Metadata filters yield predicates on ``item_metadata``; right filters yield
    predicates on ``item_right`` that must be wrapped by the caller.
    """
    today = today or date.today()

    # Metadata filters
    if isinstance(search_filter, PublicationDateFilter):
        return ItemMetadataModel.publication_date.between(
            search_filter.from_date, search_filter.to_date
        )
    if isinstance(search_filter, PublicationTypeFilter):
        return ItemMetadataModel.publication_type.in_(search_filter.values)
    if isinstance(search_filter, PaketSigelFilter):
        return ItemMetadataModel.paket_sigel.in_(search_filter.values)
    if isinstance(search_filter, ZDBIdFilter):
        return ItemMetadataModel.zdb_id.in_(search_filter.values)
    if isinstance(search_filter, SeriesFilter):
        return ItemMetadataModel.title_series.in_(search_filter.values)
    if isinstance(search_filter, LicenceUrlFilter):
        return ItemMetadataModel.licence_url.icontains(search_filter.url, autoescape=True)

    # Right filters
    if isinstance(search_filter, AccessStateFilter):
        return ItemRightModel.access_state.in_(search_filter.values)
    if isinstance(search_filter, TemporalValidityFilter):
        return or_(*(_temporal_validity_clause(v, today) for v in search_filter.values))
    if isinstance(search_filter, StartDateFilter):
        return ItemRightModel.start_date == search_filter.date
    if isinstance(search_filter, EndDateFilter):
        return ItemRightModel.end_date == search_filter.date
    if isinstance(search_filter, RightValidOnFilter):
        return and_(
            ItemRightModel.start_date <= search_filter.date,
            or_(
                ItemRightModel.end_date.is_(None),
                ItemRightModel.end_date >= search_filter.date,
            ),
        )
    if isinstance(search_filter, FormalRuleFilter):
        return or_(*(_formal_rule_clause(rule) for rule in search_filter.values))
    if isinstance(search_filter, TemplateNameFilter):
        return ItemRightModel.template_name.in_(search_filter.values)

    raise TypeError(f"Unsupported search filter: {type(search_filter).__name__}")


def _linked_right_exists(right_predicates: list):
    return (
        select(ItemLinkModel.id)
        .join(ItemRightModel, ItemRightModel.right_id == ItemLinkModel.right_id)
        .where(ItemLinkModel.metadata_id == ItemMetadataModel.metadata_id, *right_predicates)
        .exists()
    )


def build_search_criteria(
    pairs: list[SearchPair] | None = None,
    expression=None,
    metadata_filters: list | None = None,
    right_filters: list | None = None,
    no_right_information: bool = False,
    today: date | None = None,
) -> list:
    """Build the WHERE clauses of a metadata search.

    ``no_right_information`` selects metadata without any link and causes
    ``right_filters`` to be ignored.
    """
    today = today or date.today()
    criteria = []
    if expression is not None:
        criteria.append(expression_clause(expression))
    elif pairs:
        criteria.append(pairs_clause(pairs))
    criteria.extend(filter_predicate(f, today) for f in metadata_filters or [])
    if no_right_information:
        criteria.append(~_linked_right_exists([]))
    elif right_filters:
        criteria.append(_linked_right_exists([filter_predicate(f, today) for f in right_filters]))
    return criteria


def search_metadata(
    db: Session,
    criteria: list,
    rank_pairs: list[SearchPair] | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[ItemMetadataModel]:
    """Run a metadata search.

    Results are ordered by relevance (exact matches before substring matches)
    when ``rank_pairs`` is given, and by metadata ID otherwise. A ``limit`` of
    None returns every match.
    """
    query = db.query(ItemMetadataModel).filter(*criteria)
    if rank_pairs:
        rank = sum((_pair_rank(p) for p in rank_pairs[1:]), _pair_rank(rank_pairs[0]))
        query = query.order_by(rank.desc(), ItemMetadataModel.metadata_id)
    else:
        query = query.order_by(ItemMetadataModel.metadata_id)
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def count_search_metadata(db: Session, criteria: list) -> int:
    return db.query(ItemMetadataModel).filter(*criteria).count()


def search_metadata_ids(db: Session, criteria: list) -> set[str]:
    """IDs of the complete match set."""
    rows = db.query(ItemMetadataModel.metadata_id).filter(*criteria).all()
    return {row.metadata_id for row in rows}


def _grouped_counts(db: Session, column, criteria: list) -> dict:
    rows = (
        db.query(column, func.count(ItemMetadataModel.metadata_id))
        .filter(*criteria, column.is_not(None))
        .group_by(column)
        .all()
    )
    return {value: count for value, count in rows}


def search_facets(
    db: Session,
    criteria: list,
    right_filters: list | None = None,
    no_right_information: bool = False,
    today: date | None = None,
) -> Facets:
    """Compute facets over every match of ``criteria``.

    Right-based facets only consider linked rights satisfying ``right_filters``.
    """
    today = today or date.today()
    facets = Facets(
        publication_types=_grouped_counts(db, ItemMetadataModel.publication_type, criteria),
        paket_sigels=_grouped_counts(db, ItemMetadataModel.paket_sigel, criteria),
        zdb_ids=_grouped_counts(db, ItemMetadataModel.zdb_id, criteria),
    )
    if no_right_information:
        return facets

    matched_ids = select(ItemMetadataModel.metadata_id).where(*criteria)
    right_predicates = [filter_predicate(f, today) for f in right_filters or []]

    def linked_rights():
        return (
            db.query(ItemLinkModel)
            .join(ItemRightModel, ItemRightModel.right_id == ItemLinkModel.right_id)
            .filter(ItemLinkModel.metadata_id.in_(matched_ids), *right_predicates)
        )

    rows = (
        linked_rights()
        .filter(ItemRightModel.access_state.is_not(None))
        .with_entities(
            ItemRightModel.access_state,
            func.count(func.distinct(ItemLinkModel.metadata_id)),
        )
        .group_by(ItemRightModel.access_state)
        .all()
    )
    facets.access_states = {state: count for state, count in rows}
    facets.has_licence_contract = (
        linked_rights().filter(_formal_rule_clause(FormalRule.LICENCE_CONTRACT)).first()
        is not None
    )
    facets.has_open_content_licence = (
        linked_rights().filter(_formal_rule_clause(FormalRule.OPEN_CONTENT_LICENCE)).first()
        is not None
    )
    facets.has_zbw_user_agreement = (
        linked_rights().filter(_formal_rule_clause(FormalRule.ZBW_USER_AGREEMENT)).first()
        is not None
    )
    return facets
