from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.domain.enums import AccessState, FormalRule, PublicationType, TemporalValidity
from app.domain.search_filter import MAX_YEAR, MIN_YEAR


class PublicationDateRange(BaseModel):
    from_year: int = Field(MIN_YEAR, ge=MIN_YEAR, le=MAX_YEAR)
    to_year: int = Field(MAX_YEAR, ge=MIN_YEAR, le=MAX_YEAR)

    @model_validator(mode="after")
    def validate_range(self):
        """Ensure from_year doesn't exceed to_year."""
        if self.from_year > self.to_year:
            raise ValueError(f"from_year ({self.from_year}) cannot exceed to_year ({self.to_year})")
        return self


class Bookmark(BaseModel):
    """A saved search. Filters are returned in their canonical string form."""

    model_config = ConfigDict(from_attributes=True)

    bookmark_id: int
    bookmark_name: str
    description: str | None = None
    search_term: str | None = None
    filter_publication_date: str | None = None
    filter_publication_type: str | None = None
    filter_access_state: str | None = None
    filter_temporal_validity: str | None = None
    filter_start_date: str | None = None
    filter_end_date: str | None = None
    filter_formal_rule: str | None = None
    filter_valid_on: str | None = None
    filter_paket_sigel: str | None = None
    filter_zdb_id: str | None = None
    filter_series: str | None = None
    filter_template_name: str | None = None
    filter_licence_url: str | None = None
    filter_no_right_information: bool = False
    created_on: datetime | None = None
    last_updated_on: datetime | None = None


class BookmarkCreate(BaseModel):
    bookmark_name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    search_term: str | None = None
    filter_publication_date: PublicationDateRange | None = None
    filter_publication_type: list[PublicationType] | None = None
    filter_access_state: list[AccessState] | None = None
    filter_temporal_validity: list[TemporalValidity] | None = None
    filter_start_date: date | None = None
    filter_end_date: date | None = None
    filter_formal_rule: list[FormalRule] | None = None
    filter_valid_on: date | None = None
    filter_paket_sigel: list[str] | None = None
    filter_zdb_id: list[str] | None = None
    filter_series: list[str] | None = None
    filter_template_name: list[str] | None = None
    filter_licence_url: str | None = None
    filter_no_right_information: bool = False


class BookmarkRawCreate(BaseModel):
    """Bookmark with every filter given as its canonical string, e.g. ``"2000-2010"``."""

    bookmark_name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    search_term: str | None = None
    filter_publication_date: str | None = None
    filter_publication_type: str | None = None
    filter_access_state: str | None = None
    filter_temporal_validity: str | None = None
    filter_start_date: str | None = None
    filter_end_date: str | None = None
    filter_formal_rule: str | None = None
    filter_valid_on: str | None = None
    filter_paket_sigel: str | None = None
    filter_zdb_id: str | None = None
    filter_series: str | None = None
    filter_template_name: str | None = None
    filter_licence_url: str | None = None
    filter_no_right_information: str | None = None
