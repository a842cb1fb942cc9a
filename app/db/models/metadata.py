from sqlalchemy import Column, Date, DateTime, Enum, String

from app.db.base import Base
from app.domain.enums import PublicationType


class ItemMetadata(Base):
    __tablename__ = "item_metadata"

    metadata_id = Column(String(255), primary_key=True, index=True)
    handle = Column(String, nullable=False)
    ppn = Column(String, nullable=True)
    title = Column(String, nullable=False)
    title_journal = Column(String, nullable=True)
    title_series = Column(String, nullable=True)
    publication_date = Column(Date, nullable=False)
    band = Column(String, nullable=True)
    publication_type = Column(
        Enum(PublicationType, native_enum=False, length=32), nullable=False
    )
    doi = Column(String, nullable=True)
    isbn = Column(String, nullable=True)
    issn = Column(String, nullable=True)
    paket_sigel = Column(String, nullable=True, index=True)
    zdb_id = Column(String, nullable=True, index=True)
    author = Column(String, nullable=True)
    collection_name = Column(String, nullable=True)
    community_name = Column(String, nullable=True)
    licence_url = Column(String, nullable=True)
    storage_date = Column(DateTime(timezone=True), nullable=True)
    created_on = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(String, nullable=True)
    last_updated_on = Column(DateTime(timezone=True), nullable=True)
    last_updated_by = Column(String, nullable=True)
