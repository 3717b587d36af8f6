"""Persistence gateway interface shared by the local and remote stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List


class RecordKind(str, Enum):
    SCHEDULE = "schedule"
    ASSESSMENT = "assessment"


# Fixed local namespaces per kind
LOCAL_NAMESPACES = {
    RecordKind.SCHEDULE: "pt_app_schedules",
    RecordKind.ASSESSMENT: "pt_app_assessments",
}


def record_key(kind: RecordKind, record: Dict) -> str:
    """Schedules are keyed by date, assessments by their id."""
    if kind == RecordKind.SCHEDULE:
        return str(record["date"])
    return str(record["id"])


class PersistenceGateway(ABC):
    """
    Abstract base class for record stores.

    Records cross this boundary in their wire shape (plain dicts). Callers
    convert them with ScheduleEntry.from_wire / AssessmentRecord.from_wire.
    """

    @abstractmethod
    def list(self, kind: RecordKind) -> List[Dict]:
        """
        Return all stored records of a kind.

        Args:
            kind: RecordKind.SCHEDULE or RecordKind.ASSESSMENT

        Returns:
            List of wire dicts (empty if nothing is stored)
        """
        pass

    @abstractmethod
    def upsert(self, kind: RecordKind, record: Dict) -> bool:
        """
        Store a record, replacing any record with the same key.

        Returns:
            True on success, False if the write failed
        """
        pass
