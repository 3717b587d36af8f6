"""SQLAlchemy models for the local record store."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class LocalRecord(Base):
    """A JSON-serialised wire record stored under a fixed namespace."""

    __tablename__ = "local_records"
    __table_args__ = (UniqueConstraint("namespace", "record_key", name="uq_local_records_key"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    namespace = Column(String(50), nullable=False, index=True)  # pt_app_schedules, pt_app_assessments
    record_key = Column(String(100), nullable=False)  # ISO date for schedules, token for assessments
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<LocalRecord(id={self.id}, namespace='{self.namespace}', key='{self.record_key}')>"
