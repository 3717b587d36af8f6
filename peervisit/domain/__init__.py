"""Domain models and data access layer."""

from .facilities import HOME_FACILITY, Facility
from .models import Base, LocalRecord
from .records import AssessmentRecord, Comment, ScheduleEntry
from .repositories import DatabaseManager, LocalRecordRepository
from .rubric import STANDARDS_RUBRIC, RubricDefinition, StandardCategory, StandardItem

__all__ = [
    "Facility",
    "HOME_FACILITY",
    "Base",
    "LocalRecord",
    "AssessmentRecord",
    "Comment",
    "ScheduleEntry",
    "DatabaseManager",
    "LocalRecordRepository",
    "RubricDefinition",
    "StandardCategory",
    "StandardItem",
    "STANDARDS_RUBRIC",
]
