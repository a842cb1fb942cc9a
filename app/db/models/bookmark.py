from sqlalchemy import Boolean, Column, DateTime, Integer, String

from app.db.base import Base


class Bookmark(Base):
    """A saved search: free-text term plus one filter per category.

    Filters are stored in their canonical string form (see app.domain.search_filter).
    """

    __tablename__ = "bookmark"

    bookmark_id = Column(Integer, primary_key=True, index=True)
    bookmark_name = Column(String(255), nullable=False, unique=True)
    description = Column(String, nullable=True)
    search_term = Column(String, nullable=True)
    filter_publication_date = Column(String, nullable=True)
    filter_publication_type = Column(String, nullable=True)
    filter_access_state = Column(String, nullable=True)
    filter_temporal_validity = Column(String, nullable=True)
    filter_start_date = Column(String, nullable=True)
    filter_end_date = Column(String, nullable=True)
    filter_formal_rule = Column(String, nullable=True)
    filter_valid_on = Column(String, nullable=True)
    filter_paket_sigel = Column(String, nullable=True)
    filter_zdb_id = Column(String, nullable=True)
    filter_series = Column(String, nullable=True)
    filter_template_name = Column(String, nullable=True)
    filter_licence_url = Column(String, nullable=True)
    filter_no_right_information = Column(Boolean, nullable=False, default=False)
    created_on = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(String, nullable=True)
    last_updated_on = Column(DateTime(timezone=True), nullable=True)
    last_updated_by = Column(String, nullable=True)
