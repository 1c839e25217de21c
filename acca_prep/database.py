from datetime import datetime, timezone
from sqlalchemy import create_engine, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.types import TypeDecorator
from acca_prep.config import settings


class UTCDateTime(TypeDecorator):
    """
    Timestamp column that always hands back timezone-aware UTC datetimes.

    SQLite drops tzinfo on write, so values are normalised to naive UTC going
    in and re-tagged as UTC coming out. Naive input is taken to be UTC already.
    """
    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_db_engine(database_url: str):
    """Create an engine; SQLite connections may be shared across threads"""
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(database_url)


engine = create_db_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db(bind=None):
    """Create all tables"""
    # Register models on Base.metadata
    import acca_prep.models  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
