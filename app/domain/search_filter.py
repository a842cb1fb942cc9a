"""Structural search filters.

The set of filters is closed: every filter kind is a frozen dataclass below and
``app.repositories.search.filter_predicate`` lowers each of them to a SQL
predicate. Filters of one kind OR-combine their values; different kinds are
AND-combined by the search engine.

Every filter has a canonical string form (``to_string``/``from_string``) used
for bookmark persistence and raw query parameters:

- publication date: ``"2000-2010"``
- value lists: comma separated, e.g. ``"book,article"``
- dates: ISO-8601, e.g. ``"2023-01-31"``
- no right information: ``"true"``
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable, Union

from app.domain.enums import AccessState, FormalRule, PublicationType, TemporalValidity
from app.errors import DomainValidationError

MIN_YEAR = 1800
MAX_YEAR = 2200


def _split_values(raw: str) -> tuple[str, ...]:
    return tuple(v.strip() for v in raw.split(",") if v.strip())


def _parse_enum(enum_cls: type[Enum], raw: str):
    """Accept either the value ("book") or the member name ("BOOK")."""
    for member in enum_cls:
        if raw == member.value or raw.upper() == member.name:
            return member
    raise DomainValidationError(f"Unknown {enum_cls.__name__} value: {raw!r}")


def _parse_date(raw: str) -> date:
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        raise DomainValidationError(f"Invalid date {raw!r}, expected YYYY-MM-DD")


def _require_values(values: tuple, filter_name: str) -> None:
    if not values:
        raise DomainValidationError(f"{filter_name} requires at least one value")


class _ValueListFilter:
    """Shared behaviour of filters carrying a list of plain string values."""

    values: tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))
        _require_values(self.values, type(self).__name__)

    def to_string(self) -> str:
        return ",".join(self.values)

    @classmethod
    def from_string(cls, raw: str | None):
        if raw is None or not raw.strip():
            return None
        return cls(_split_values(raw))


class _EnumListFilter:
    """Shared behaviour of filters carrying a list of enum members."""

    enum_cls: type[Enum]
    values: tuple

    def __post_init__(self):
        object.__setattr__(
            self,
            "values",
            tuple(v if isinstance(v, self.enum_cls) else _parse_enum(self.enum_cls, v) for v in self.values),
        )
        _require_values(self.values, type(self).__name__)

    def to_string(self) -> str:
        return ",".join(v.value for v in self.values)

    @classmethod
    def from_string(cls, raw: str | None):
        if raw is None or not raw.strip():
            return None
        return cls(_split_values(raw))


class _DateFilter:
    date: date

    def to_string(self) -> str:
        return self.date.isoformat()

    @classmethod
    def from_string(cls, raw: str | None):
        if raw is None or not raw.strip():
            return None
        return cls(_parse_date(raw))


# ---------------------------------------------------------------------------
# Metadata filters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PublicationDateFilter:
    """Inclusive publication year range, bounded to [MIN_YEAR, MAX_YEAR]."""

    from_year: int
    to_year: int

    def __post_init__(self):
        for year in (self.from_year, self.to_year):
            if not (MIN_YEAR <= year <= MAX_YEAR):
                raise DomainValidationError(
                    f"Publication year {year} is outside of [{MIN_YEAR}, {MAX_YEAR}]"
                )
        if self.from_year > self.to_year:
            raise DomainValidationError(
                f"Publication year range is empty: {self.from_year} > {self.to_year}"
            )

    @property
    def from_date(self) -> date:
        return date(self.from_year, 1, 1)

    @property
    def to_date(self) -> date:
        return date(self.to_year, 12, 31)

    def to_string(self) -> str:
        return f"{self.from_year}-{self.to_year}"

    @classmethod
    def from_string(cls, raw: str | None) -> PublicationDateFilter | None:
        if raw is None or not raw.strip():
            return None
        parts = raw.strip().split("-")
        if len(parts) != 2:
            raise DomainValidationError(f"Invalid publication date filter {raw!r}, expected FROM-TO")
        # An empty side falls back to the system-wide bound.
        try:
            from_year = int(parts[0]) if parts[0].strip() else MIN_YEAR
            to_year = int(parts[1]) if parts[1].strip() else MAX_YEAR
        except ValueError:
            raise DomainValidationError(f"Invalid publication date filter {raw!r}, expected FROM-TO")
        return cls(from_year, to_year)


@dataclass(frozen=True, slots=True)
class PublicationTypeFilter(_EnumListFilter):
    values: tuple[PublicationType, ...]
    enum_cls = PublicationType


@dataclass(frozen=True, slots=True)
class PaketSigelFilter(_ValueListFilter):
    values: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ZDBIdFilter(_ValueListFilter):
    values: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class SeriesFilter(_ValueListFilter):
    values: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class LicenceUrlFilter:
    """Substring match on the licence URL of a metadata record."""

    url: str

    def __post_init__(self):
        if not self.url.strip():
            raise DomainValidationError("LicenceUrlFilter requires a non-empty URL")

    def to_string(self) -> str:
        return self.url

    @classmethod
    def from_string(cls, raw: str | None) -> LicenceUrlFilter | None:
        if raw is None or not raw.strip():
            return None
        return cls(raw.strip())


# ---------------------------------------------------------------------------
# Right filters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AccessStateFilter(_EnumListFilter):
    values: tuple[AccessState, ...]
    enum_cls = AccessState


@dataclass(frozen=True, slots=True)
class TemporalValidityFilter(_EnumListFilter):
    """FUTURE, PAST and PRESENT relative to the evaluation day, OR-combined."""

    values: tuple[TemporalValidity, ...]
    enum_cls = TemporalValidity


@dataclass(frozen=True, slots=True)
class StartDateFilter(_DateFilter):
    date: date


@dataclass(frozen=True, slots=True)
class EndDateFilter(_DateFilter):
    date: date


@dataclass(frozen=True, slots=True)
class RightValidOnFilter(_DateFilter):
    """Rights whose validity window contains the given day."""

    date: date


@dataclass(frozen=True, slots=True)
class FormalRuleFilter(_EnumListFilter):
    values: tuple[FormalRule, ...]
    enum_cls = FormalRule


@dataclass(frozen=True, slots=True)
class TemplateNameFilter(_ValueListFilter):
    values: tuple[str, ...]


# ---------------------------------------------------------------------------
# Special filter
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NoRightInformationFilter:
    """Metadata without any linked right. Suppresses all right filters."""

    def to_string(self) -> str:
        return "true"

    @classmethod
    def from_string(cls, raw: str | None) -> NoRightInformationFilter | None:
        if raw is None or not raw.strip():
            return None
        value = raw.strip().lower()
        if value == "true":
            return cls()
        if value == "false":
            return None
        raise DomainValidationError(f"Invalid boolean {raw!r} for no right information filter")


MetadataSearchFilter = Union[
    PublicationDateFilter,
    PublicationTypeFilter,
    PaketSigelFilter,
    ZDBIdFilter,
    SeriesFilter,
    LicenceUrlFilter,
]

RightSearchFilter = Union[
    AccessStateFilter,
    TemporalValidityFilter,
    StartDateFilter,
    EndDateFilter,
    RightValidOnFilter,
    FormalRuleFilter,
    TemplateNameFilter,
]

METADATA_FILTER_TYPES = (
    PublicationDateFilter,
    PublicationTypeFilter,
    PaketSigelFilter,
    ZDBIdFilter,
    SeriesFilter,
    LicenceUrlFilter,
)

RIGHT_FILTER_TYPES = (
    AccessStateFilter,
    TemporalValidityFilter,
    StartDateFilter,
    EndDateFilter,
    RightValidOnFilter,
    FormalRuleFilter,
    TemplateNameFilter,
)


# Persisted name of every filter category, in canonical order.
FILTER_TYPES_BY_NAME = {
    "publication_date": PublicationDateFilter,
    "publication_type": PublicationTypeFilter,
    "access_state": AccessStateFilter,
    "temporal_validity": TemporalValidityFilter,
    "start_date": StartDateFilter,
    "end_date": EndDateFilter,
    "formal_rule": FormalRuleFilter,
    "valid_on": RightValidOnFilter,
    "paket_sigel": PaketSigelFilter,
    "zdb_id": ZDBIdFilter,
    "series": SeriesFilter,
    "template_name": TemplateNameFilter,
    "licence_url": LicenceUrlFilter,
    "no_right_information": NoRightInformationFilter,
}


@dataclass
class SearchFilters:
    """The filters of one search, at most one per category."""

    metadata_filters: list = field(default_factory=list)
    right_filters: list = field(default_factory=list)
    no_right_information: NoRightInformationFilter | None = None

    @classmethod
    def of(cls, filters: Iterable) -> SearchFilters:
        """Partition filters by kind. ``None`` entries are skipped."""
        result = cls()
        seen = set()
        for search_filter in filters:
            if search_filter is None:
                continue
            kind = type(search_filter)
            if kind in seen:
                raise DomainValidationError(f"Only one {kind.__name__} is allowed per search")
            seen.add(kind)
            if isinstance(search_filter, METADATA_FILTER_TYPES):
                result.metadata_filters.append(search_filter)
            elif isinstance(search_filter, RIGHT_FILTER_TYPES):
                result.right_filters.append(search_filter)
            elif isinstance(search_filter, NoRightInformationFilter):
                result.no_right_information = search_filter
            else:
                raise TypeError(f"Unsupported search filter: {kind.__name__}")
        return result

    @classmethod
    def from_strings(cls, **raw_filters: str | None) -> SearchFilters:
        """Parse filters from their canonical strings, keyed by category name."""
        unknown = set(raw_filters) - set(FILTER_TYPES_BY_NAME)
        if unknown:
            raise DomainValidationError(f"Unknown filter categories: {', '.join(sorted(unknown))}")
        return cls.of(
            FILTER_TYPES_BY_NAME[name].from_string(raw) for name, raw in raw_filters.items()
        )

    def to_strings(self) -> dict[str, str | None]:
        """Canonical string of every category, None where no filter is set."""
        by_type = {type(f): f for f in self.all_filters()}
        return {
            name: by_type[kind].to_string() if kind in by_type else None
            for name, kind in FILTER_TYPES_BY_NAME.items()
        }

    def all_filters(self) -> list:
        filters = [*self.metadata_filters, *self.right_filters]
        if self.no_right_information is not None:
            filters.append(self.no_right_information)
        return filters
