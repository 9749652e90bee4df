import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from ringside.db.session import create_db_and_tables


@pytest.fixture
def test_engine():
    """Create a test database engine."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    create_db_and_tables(engine)
    return engine
