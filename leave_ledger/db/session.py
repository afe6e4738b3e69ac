"""
Database session management
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from leave_ledger.core.config import settings
from leave_ledger.db.base import Base

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=connect_args,
    echo=False
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_models() -> None:
    """Create the users, leave_requests and balance_transactions tables if missing"""
    # Register models with Base.metadata before create_all
    import leave_ledger.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
