"""Repository classes for data access."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session, sessionmaker

from .db import DEFAULT_DB_URL, create_db_engine
from .models import Base, LocalRecord


class DatabaseManager:
    """Manages database connection and session factory."""

    def __init__(self, db_url: str = DEFAULT_DB_URL):
        """
        Initialize database manager.

        Args:
            db_url: SQLAlchemy database URL (default: sqlite:///peervisit.db)
        """
        self.db_url = db_url
        self.engine = create_db_engine(db_url)
        self.SessionLocal = sessionmaker(bind=self.engine)

    def create_tables(self):
        """Create all tables if they don't exist."""
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        """Get a new database session."""
        return self.SessionLocal()


class LocalRecordRepository:
    """Repository for namespaced wire records."""

    @staticmethod
    def get_all(session: Session, namespace: str) -> List[LocalRecord]:
        """Get all records in a namespace, oldest first."""
        return (
            session.query(LocalRecord)
            .filter(LocalRecord.namespace == namespace)
            .order_by(LocalRecord.id)
            .all()
        )

    @staticmethod
    def get_by_key(session: Session, namespace: str, record_key: str) -> Optional[LocalRecord]:
        """Get a record by namespace and key."""
        return (
            session.query(LocalRecord)
            .filter(LocalRecord.namespace == namespace, LocalRecord.record_key == record_key)
            .first()
        )

    @staticmethod
    def upsert(session: Session, namespace: str, record_key: str, payload: str) -> LocalRecord:
        """Replace the payload stored under a key, or create it."""
        record = LocalRecordRepository.get_by_key(session, namespace, record_key)
        if record is None:
            record = LocalRecord(namespace=namespace, record_key=record_key, payload=payload)
            session.add(record)
        else:
            record.payload = payload
            record.updated_at = datetime.utcnow()
        session.commit()
        session.refresh(record)
        return record
