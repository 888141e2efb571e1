"""pgvector embedding_vector column on products

Revision ID: 8c4e2d7a5b31
Revises: 3a1f0c2b9d10
Create Date: 2025-02-20 09:30:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '8c4e2d7a5b31'
down_revision = '3a1f0c2b9d10'
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    bind.execute(sa.text("CREATE EXTENSION IF NOT EXISTS vector"))
    bind.execute(sa.text("ALTER TABLE products ADD COLUMN IF NOT EXISTS embedding_vector vector(1536)"))

    # backfill from the JSON text column ('[0.1,0.2,...]' casts directly)
    bind.execute(
        sa.text(
            """
            UPDATE products
               SET embedding_vector = embedding::vector(1536)
             WHERE embedding IS NOT NULL
               AND TRIM(embedding) <> ''
               AND TRIM(embedding) <> '[]'
            """
        )
    )

    # HNSW (cosine) for nearest-neighbour search; not CONCURRENTLY so it can run inside the migration transaction
    bind.execute(
        sa.text(
            """
            CREATE INDEX IF NOT EXISTS products_embedding_vector_hnsw_idx
                ON products
             USING hnsw (embedding_vector vector_cosine_ops)
              WITH (m = 16, ef_construction = 64)
             WHERE embedding_vector IS NOT NULL
            """
        )
    )


def downgrade() -> None:
    bind = op.get_bind()
    bind.execute(sa.text("DROP INDEX IF EXISTS products_embedding_vector_hnsw_idx"))
    bind.execute(sa.text("ALTER TABLE products DROP COLUMN IF EXISTS embedding_vector"))
