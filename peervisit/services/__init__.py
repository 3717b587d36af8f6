"""Services for scoring and schedule validation."""

from .constraints import Violation, ViolationCode, check_save_preconditions, find_visiting_team, validate
from .reports import facility_summary, grade_counts, schedules_by_month, summarize_dashboard
from .scoring import Grade, ScoreResult, ScoringPolicy, score, unrated_items

__all__ = [
    "Violation",
    "ViolationCode",
    "validate",
    "check_save_preconditions",
    "find_visiting_team",
    "Grade",
    "ScoreResult",
    "ScoringPolicy",
    "score",
    "unrated_items",
    "facility_summary",
    "grade_counts",
    "schedules_by_month",
    "summarize_dashboard",
]
