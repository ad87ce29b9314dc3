"""picar gallery tables

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-17 12:00:00.000000

"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "picar_images",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tag", sa.String(), nullable=False),
        sa.Column("img_url", sa.Text(), nullable=False),
        sa.Column("uploader", sa.String(), nullable=False),
        sa.Column("uploaderId", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("upload_time", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_picar_images_tag", "picar_images", ["tag"], unique=False)

    op.create_table(
        "picar_tags",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tag", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tag"),
    )


def downgrade() -> None:
    op.drop_table("picar_tags")
    op.drop_index("idx_picar_images_tag", table_name="picar_images")
    op.drop_table("picar_images")
