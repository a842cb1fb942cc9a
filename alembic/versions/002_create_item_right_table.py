"""create item_right and right_group tables

Revision ID: 002
Revises: 001
Create Date: 2025-02-03 10:30:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "item_right",
        sa.Column("right_id", sa.String(length=64), nullable=False),
        sa.Column("access_state", sa.String(length=32), nullable=True),
        sa.Column("basis_access_state", sa.String(length=32), nullable=True),
        sa.Column("basis_storage", sa.String(length=32), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("licence_contract", sa.String(), nullable=True),
        sa.Column("author_right_exception", sa.Boolean(), nullable=True),
        sa.Column("zbw_user_agreement", sa.Boolean(), nullable=True),
        sa.Column("open_content_licence", sa.String(), nullable=True),
        sa.Column("non_standard_open_content_licence", sa.Boolean(), nullable=True),
        sa.Column("non_standard_open_content_licence_url", sa.String(), nullable=True),
        sa.Column("restricted_open_content_licence", sa.Boolean(), nullable=True),
        sa.Column("notes_general", sa.String(), nullable=True),
        sa.Column("notes_formal_rules", sa.String(), nullable=True),
        sa.Column("notes_process_documentation", sa.String(), nullable=True),
        sa.Column("notes_management_related", sa.String(), nullable=True),
        sa.Column("is_template", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("template_name", sa.String(), nullable=True),
        sa.Column("template_description", sa.String(), nullable=True),
        sa.Column("exception_from", sa.String(length=64), nullable=True),
        sa.Column("last_applied_on", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_on", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("last_updated_on", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_updated_by", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("right_id"),
        sa.ForeignKeyConstraint(["exception_from"], ["item_right.right_id"]),
        sa.UniqueConstraint("template_name", name="uq_item_right_template_name"),
        # CHECK constraint: a validity window cannot end before it starts
        sa.CheckConstraint(
            "end_date IS NULL OR end_date >= start_date",
            name="ck_item_right_end_date_after_start_date",
        ),
    )
    op.create_index("ix_item_right_right_id", "item_right", ["right_id"], unique=False)
    op.create_index("ix_item_right_exception_from", "item_right", ["exception_from"], unique=False)

    op.create_table(
        "right_group",
        sa.Column("right_id", sa.String(length=64), nullable=False),
        sa.Column("group_id", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("right_id", "group_id"),
        sa.ForeignKeyConstraint(["right_id"], ["item_right.right_id"]),
    )


def downgrade() -> None:
    op.drop_table("right_group")
    op.drop_index("ix_item_right_exception_from", table_name="item_right")
    op.drop_index("ix_item_right_right_id", table_name="item_right")
    op.drop_table("item_right")
