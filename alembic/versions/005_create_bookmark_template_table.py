"""create bookmark_template table

Revision ID: 005
Revises: 004
Create Date: 2025-02-04 09:30:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "bookmark_template",
        sa.Column("bookmark_id", sa.Integer(), nullable=False),
        sa.Column("right_id", sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint("bookmark_id", "right_id"),
        sa.ForeignKeyConstraint(["bookmark_id"], ["bookmark.bookmark_id"]),
        sa.ForeignKeyConstraint(["right_id"], ["item_right.right_id"]),
    )
    op.create_index("ix_bookmark_template_right_id", "bookmark_template", ["right_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_bookmark_template_right_id", table_name="bookmark_template")
    op.drop_table("bookmark_template")
