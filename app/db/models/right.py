from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    String,
)
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.domain.enums import AccessState, BasisAccessState, BasisStorage


def _generate_right_id() -> str:
    return uuid4().hex


class ItemRight(Base):
    __tablename__ = "item_right"

    right_id = Column(String(64), primary_key=True, index=True, default=_generate_right_id)
    access_state = Column(Enum(AccessState, native_enum=False, length=32), nullable=True)
    basis_access_state = Column(
        Enum(BasisAccessState, native_enum=False, length=32), nullable=True
    )
    basis_storage = Column(Enum(BasisStorage, native_enum=False, length=32), nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    licence_contract = Column(String, nullable=True)
    author_right_exception = Column(Boolean, nullable=True)
    zbw_user_agreement = Column(Boolean, nullable=True)
    open_content_licence = Column(String, nullable=True)
    non_standard_open_content_licence = Column(Boolean, nullable=True)
    non_standard_open_content_licence_url = Column(String, nullable=True)
    restricted_open_content_licence = Column(Boolean, nullable=True)
    notes_general = Column(String, nullable=True)
    notes_formal_rules = Column(String, nullable=True)
    notes_process_documentation = Column(String, nullable=True)
    notes_management_related = Column(String, nullable=True)
    is_template = Column(Boolean, nullable=False, default=False)
    template_name = Column(String, nullable=True, unique=True)
    template_description = Column(String, nullable=True)
    exception_from = Column(String(64), ForeignKey("item_right.right_id"), nullable=True)
    last_applied_on = Column(DateTime(timezone=True), nullable=True)
    created_on = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(String, nullable=True)
    last_updated_on = Column(DateTime(timezone=True), nullable=True)
    last_updated_by = Column(String, nullable=True)

    # Relationships
    groups = relationship(
        "RightGroup",
        backref="right",
        cascade="all, delete-orphan",
        order_by="RightGroup.group_id",
    )

    @property
    def group_ids(self) -> list[str]:
        return [g.group_id for g in self.groups]


class RightGroup(Base):
    """Access-restriction group assigned to a right."""

    __tablename__ = "right_group"

    right_id = Column(String(64), ForeignKey("item_right.right_id"), primary_key=True)
    group_id = Column(String(255), primary_key=True)
