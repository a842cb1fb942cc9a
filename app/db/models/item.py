from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base


class ItemLink(Base):
    """Link between a metadata record and a right."""

    __tablename__ = "item"
    __table_args__ = (UniqueConstraint("metadata_id", "right_id", name="uq_item_metadata_right"),)

    id = Column(Integer, primary_key=True, index=True)
    metadata_id = Column(
        String(255), ForeignKey("item_metadata.metadata_id"), nullable=False, index=True
    )
    right_id = Column(String(64), ForeignKey("item_right.right_id"), nullable=False, index=True)

    # Relationships
    right = relationship("ItemRight")
