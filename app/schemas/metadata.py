from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import PublicationType


class ItemMetadataBase(BaseModel):
    handle: str
    ppn: str | None = None
    title: str
    title_journal: str | None = None
    title_series: str | None = None
    publication_date: date
    band: str | None = None
    publication_type: PublicationType
    doi: str | None = None
    isbn: str | None = None
    issn: str | None = None
    paket_sigel: str | None = None
    zdb_id: str | None = None
    author: str | None = None
    collection_name: str | None = None
    community_name: str | None = None
    licence_url: str | None = None
    storage_date: datetime | None = None


class ItemMetadata(ItemMetadataBase):
    model_config = ConfigDict(from_attributes=True)

    metadata_id: str
    created_on: datetime | None = None
    created_by: str | None = None
    last_updated_on: datetime | None = None
    last_updated_by: str | None = None


class ItemMetadataCreate(ItemMetadataBase):
    metadata_id: str = Field(..., min_length=1, max_length=255)
    created_by: str | None = None
