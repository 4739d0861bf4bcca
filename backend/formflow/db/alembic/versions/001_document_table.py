"""document table

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

from typing import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the generic JSON document table."""
    op.create_table(
        "document",
        sa.Column("collection", sa.Text, primary_key=True, nullable=False),
        sa.Column("doc_id", sa.Text, primary_key=True, nullable=False),
        sa.Column("data", sa.JSON, nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    )
    op.create_index("idx_document_collection", "document", ["collection"])


def downgrade() -> None:
    """Drop the document table."""
    op.drop_index("idx_document_collection", table_name="document")
    op.drop_table("document")
