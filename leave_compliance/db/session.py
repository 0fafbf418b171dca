"""
Database engine and session factory
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from leave_compliance.core.config import settings
from leave_compliance.db.base import Base

# SQLite connections are shared across FastAPI's threadpool
connect_args = {"check_same_thread": False} if settings.is_sqlite else {}

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=connect_args,
)

# Local SQLite databases get their schema without Alembic
if settings.is_sqlite:
    import leave_compliance.models  # noqa: F401  (register models on Base.metadata)
    Base.metadata.create_all(bind=engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
