"""SQLAlchemy models for the bookkeep record store."""

from datetime import datetime, UTC

from sqlalchemy import JSON, Column, DateTime, Integer, String, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class RecordCollection(Base):
    """All records stored under one category key."""

    __tablename__ = "record_collections"

    id = Column(Integer, primary_key=True)
    key = Column(String, unique=True, nullable=False)
    records = Column(JSON, nullable=False, default=list)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
