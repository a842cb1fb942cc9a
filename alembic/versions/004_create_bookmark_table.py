"""create bookmark table

Revision ID: 004
Revises: 003
Create Date: 2025-02-04 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


FILTER_COLUMNS = (
    "filter_publication_date",
    "filter_publication_type",
    "filter_access_state",
    "filter_temporal_validity",
    "filter_start_date",
    "filter_end_date",
    "filter_formal_rule",
    "filter_valid_on",
    "filter_paket_sigel",
    "filter_zdb_id",
    "filter_series",
    "filter_template_name",
    "filter_licence_url",
)


def upgrade() -> None:
    op.create_table(
        "bookmark",
        sa.Column("bookmark_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("bookmark_name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("search_term", sa.String(), nullable=True),
        *(sa.Column(name, sa.String(), nullable=True) for name in FILTER_COLUMNS),
        sa.Column(
            "filter_no_right_information",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column("created_on", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("last_updated_on", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_updated_by", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("bookmark_id"),
        sa.UniqueConstraint("bookmark_name", name="uq_bookmark_bookmark_name"),
    )
    op.create_index("ix_bookmark_bookmark_id", "bookmark", ["bookmark_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_bookmark_bookmark_id", table_name="bookmark")
    op.drop_table("bookmark")
