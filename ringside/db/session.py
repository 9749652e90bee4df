from sqlmodel import create_engine, SQLModel
from ringside.core.config import get_settings

settings = get_settings()

# Create database engine
engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False} if "sqlite" in settings.DATABASE_URL else {},
    echo=False
)


def create_db_and_tables(bind=None):
    """Create database tables."""
    # Register table models on the metadata
    from ringside.models import mention, metrics  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)

