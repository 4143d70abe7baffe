"""
Script to initialize the database with the guideline tables.
"""
from app.db.base import engine
from app.db.init_db import ensure_vector_extension
from app.models import Base


def init() -> None:
    """Initialize database."""
    print("Enabling vector extension...")
    ensure_vector_extension(engine)

    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("✅ Database tables created")

    print("🎉 Database initialization complete!")


if __name__ == "__main__":
    init()
