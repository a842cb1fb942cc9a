from pydantic import BaseModel, ConfigDict

from app.domain.enums import AccessState, PublicationType
from app.schemas.item import Item


class Facets(BaseModel):
    """Aggregates over every match of a search."""

    model_config = ConfigDict(from_attributes=True)

    access_states: dict[AccessState, int] = {}
    publication_types: dict[PublicationType, int] = {}
    paket_sigels: dict[str, int] = {}
    zdb_ids: dict[str, int] = {}
    has_licence_contract: bool = False
    has_open_content_licence: bool = False
    has_zbw_user_agreement: bool = False


class SearchResult(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    number_of_results: int
    results: list[Item]
    facets: Facets
    invalid_search_keys: list[str] = []
    has_search_token_with_no_key: bool = False
