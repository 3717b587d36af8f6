"""Local fallback store backed by the SQLAlchemy record table."""

from __future__ import annotations

import json
from typing import Dict, List

from sqlalchemy.exc import SQLAlchemyError

from peervisit.domain.repositories import DatabaseManager, LocalRecordRepository

from .base import LOCAL_NAMESPACES, PersistenceGateway, RecordKind, record_key


class LocalGateway(PersistenceGateway):
    """Stores wire records as JSON rows, one namespace per record kind."""

    def __init__(self, manager: DatabaseManager):
        self.manager = manager
        self.manager.create_tables()

    def list(self, kind: RecordKind) -> List[Dict]:
        session = self.manager.get_session()
        try:
            rows = LocalRecordRepository.get_all(session, LOCAL_NAMESPACES[kind])
            return [json.loads(row.payload) for row in rows]
        finally:
            session.close()

    def upsert(self, kind: RecordKind, record: Dict) -> bool:
        session = self.manager.get_session()
        try:
            LocalRecordRepository.upsert(
                session,
                LOCAL_NAMESPACES[kind],
                record_key(kind, record),
                json.dumps(record, ensure_ascii=False),
            )
            return True
        except SQLAlchemyError as e:
            session.rollback()
            print(f"[ERROR] Local save of {kind.value} failed: {e}")
            return False
        finally:
            session.close()
