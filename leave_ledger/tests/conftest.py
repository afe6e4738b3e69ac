"""
Pytest configuration and fixtures
"""
import os

# Keep the app's own engine off disk during tests
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from leave_ledger.main import app  # noqa: E402
from leave_ledger.db.base import Base  # noqa: E402
from leave_ledger.core.deps import get_db  # noqa: E402

# Import all models to ensure they're registered with Base.metadata
from leave_ledger.models import User, LeaveRequest, BalanceTransaction  # noqa: E402,F401
from leave_ledger.utils.datetime_utils import now_utc  # noqa: E402


# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Test client fixture with database override"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def this_year() -> int:
    return now_utc().year


@pytest.fixture
def day(this_year):
    """day(n) -> midnight UTC on January n of the current year"""
    def _day(n: int, month: int = 1) -> datetime:
        return datetime(this_year, month, n, tzinfo=timezone.utc)
    return _day


@pytest.fixture
def test_user(db):
    """A user with the default 21 available days"""
    user = User(
        id="0f8fad5b-d9cb-469f-a165-70867728950e",
        name="Test User",
        email="test.user@example.com",
        available_days=21,
        created_at=now_utc(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
