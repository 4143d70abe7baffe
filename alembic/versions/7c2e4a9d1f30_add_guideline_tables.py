"""add guideline tables

Revision ID: 7c2e4a9d1f30
Revises:
Create Date: 2026-10-19 09:12:41.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from pgvector.sqlalchemy import Vector

# revision identifiers, used by Alembic.
revision: str = '7c2e4a9d1f30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

EMBEDDING_DIMENSION = 1536


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("CREATE EXTENSION IF NOT EXISTS vector")

    op.create_table('guideline_documents',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('url', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('page_id', sa.String(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_fetched', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('url')
    )
    op.create_index(op.f('ix_guideline_documents_id'), 'guideline_documents', ['id'], unique=False)

    op.create_table('guideline_chunks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('document_id', sa.Integer(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('title', sa.Text(), nullable=True),
        sa.Column('sequence', sa.Integer(), nullable=False),
        sa.Column('embedding', Vector(EMBEDDING_DIMENSION), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['document_id'], ['guideline_documents.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('document_id', 'sequence', name='uq_guideline_chunks_document_sequence')
    )
    op.create_index(op.f('ix_guideline_chunks_id'), 'guideline_chunks', ['id'], unique=False)
    op.create_index(op.f('ix_guideline_chunks_document_id'), 'guideline_chunks', ['document_id'], unique=False)

    # Approximate nearest-neighbour index for cosine distance
    op.execute(
        "CREATE INDEX ix_guideline_chunks_embedding ON guideline_chunks "
        "USING hnsw (embedding vector_cosine_ops)"
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP INDEX IF EXISTS ix_guideline_chunks_embedding")
    op.drop_index(op.f('ix_guideline_chunks_document_id'), table_name='guideline_chunks')
    op.drop_index(op.f('ix_guideline_chunks_id'), table_name='guideline_chunks')
    op.drop_table('guideline_chunks')
    op.drop_index(op.f('ix_guideline_documents_id'), table_name='guideline_documents')
    op.drop_table('guideline_documents')
