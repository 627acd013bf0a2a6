"""
Durable key-value storage using SQLAlchemy.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional

from sqlalchemy import Column, DateTime, String, Text, create_engine, select
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


class StoredRecord(Base):
    """One top-level record of the local store."""

    __tablename__ = "local_storage"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<StoredRecord(key={self.key}, size={len(self.value or '')})>"


class DatabaseManager:
    """Manages the storage engine and sessions."""

    def __init__(self, database_url: str):
        self.database_url = database_url
        self.engine = None
        self.session_factory = None

    def init_database(self) -> None:
        """Initialize database connection and create tables."""
        is_sqlite = "sqlite" in self.database_url
        in_memory = is_sqlite and (":memory:" in self.database_url or self.database_url.endswith("sqlite://"))

        self.engine = create_engine(
            self.database_url,
            poolclass=StaticPool if in_memory else None,
            connect_args={"check_same_thread": False} if is_sqlite else {}
        )
        self.session_factory = sessionmaker(self.engine, expire_on_commit=False)

        Base.metadata.create_all(self.engine)
        logger.debug(f"Local storage ready at {self.database_url}")

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """Get database session."""
        if not self.session_factory:
            self.init_database()

        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_item(self, key: str) -> Optional[str]:
        """Read the raw value stored under ``key``."""
        with self.get_session() as session:
            record = session.execute(
                select(StoredRecord).where(StoredRecord.key == key)
            ).scalar_one_or_none()
            return record.value if record else None

    def set_item(self, key: str, value: str) -> None:
        """Insert or replace the raw value stored under ``key``."""
        with self.get_session() as session:
            record = session.get(StoredRecord, key)
            if record is None:
                session.add(StoredRecord(key=key, value=value))
            else:
                record.value = value
                record.updated_at = datetime.utcnow()

    def remove_item(self, key: str) -> None:
        with self.get_session() as session:
            record = session.get(StoredRecord, key)
            if record is not None:
                session.delete(record)

    def close(self) -> None:
        """Close database connections."""
        if self.engine:
            self.engine.dispose()
