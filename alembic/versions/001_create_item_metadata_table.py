"""create item_metadata table

Revision ID: 001
Revises:
Create Date: 2025-02-03 10:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "item_metadata",
        sa.Column("metadata_id", sa.String(length=255), nullable=False),
        sa.Column("handle", sa.String(), nullable=False),
        sa.Column("ppn", sa.String(), nullable=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("title_journal", sa.String(), nullable=True),
        sa.Column("title_series", sa.String(), nullable=True),
        sa.Column("publication_date", sa.Date(), nullable=False),
        sa.Column("band", sa.String(), nullable=True),
        # Enum member names, stored as plain strings
        sa.Column("publication_type", sa.String(length=32), nullable=False),
        sa.Column("doi", sa.String(), nullable=True),
        sa.Column("isbn", sa.String(), nullable=True),
        sa.Column("issn", sa.String(), nullable=True),
        sa.Column("paket_sigel", sa.String(), nullable=True),
        sa.Column("zdb_id", sa.String(), nullable=True),
        sa.Column("author", sa.String(), nullable=True),
        sa.Column("collection_name", sa.String(), nullable=True),
        sa.Column("community_name", sa.String(), nullable=True),
        sa.Column("licence_url", sa.String(), nullable=True),
        sa.Column("storage_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_on", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("last_updated_on", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_updated_by", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("metadata_id"),
    )
    op.create_index("ix_item_metadata_metadata_id", "item_metadata", ["metadata_id"], unique=False)
    op.create_index("ix_item_metadata_paket_sigel", "item_metadata", ["paket_sigel"], unique=False)
    op.create_index("ix_item_metadata_zdb_id", "item_metadata", ["zdb_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_item_metadata_zdb_id", table_name="item_metadata")
    op.drop_index("ix_item_metadata_paket_sigel", table_name="item_metadata")
    op.drop_index("ix_item_metadata_metadata_id", table_name="item_metadata")
    op.drop_table("item_metadata")
