"""create item table

Revision ID: 003
Revises: 002
Create Date: 2025-02-03 11:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "item",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("metadata_id", sa.String(length=255), nullable=False),
        sa.Column("right_id", sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["metadata_id"], ["item_metadata.metadata_id"]),
        sa.ForeignKeyConstraint(["right_id"], ["item_right.right_id"]),
        # A right is linked to a metadata record at most once
        sa.UniqueConstraint("metadata_id", "right_id", name="uq_item_metadata_right"),
    )
    op.create_index("ix_item_id", "item", ["id"], unique=False)
    op.create_index("ix_item_metadata_id", "item", ["metadata_id"], unique=False)
    op.create_index("ix_item_right_id", "item", ["right_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_item_right_id", table_name="item")
    op.drop_index("ix_item_metadata_id", table_name="item")
    op.drop_index("ix_item_id", table_name="item")
    op.drop_table("item")
