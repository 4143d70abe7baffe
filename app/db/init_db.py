"""
Database initialization.
"""
import logging

from sqlalchemy import text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


def ensure_vector_extension(engine: Engine) -> None:
    """
    Enable pgvector on PostgreSQL databases.

    Args:
        engine: Bound SQLAlchemy engine
    """
    if engine.dialect.name != "postgresql":
        logger.info(f"Skipping vector extension on dialect {engine.dialect.name}")
        return

    with engine.begin() as conn:
        conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
    logger.info("pgvector extension ready")
