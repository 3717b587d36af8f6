"""Schedule entries and assessment records with their wire shapes."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from .facilities import Facility, parse_optional
from .rubric import RubricDefinition

SLOT_COUNT = 5


def parse_date(value) -> date:
    """Coerce a date, datetime or ISO string to a calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        ts = pd.Timestamp(str(value))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid date: {value!r}") from e
    if pd.isna(ts):
        raise ValueError(f"Invalid date: {value!r}")
    return ts.date()


@dataclass(frozen=True)
class ScheduleEntry:
    """One visit day: a host facility and the visiting team slots."""

    date: date
    host: Optional[Facility]
    slots: Tuple[Optional[Facility], ...]

    @property
    def id(self) -> str:
        return self.date.isoformat()

    @classmethod
    def create(cls, on_date, host, slots: Iterable = ()) -> "ScheduleEntry":
        """
        Build an entry, padding the team to the fixed slot count.

        Raises:
            ValueError: On an unknown facility, a bad date or more than five slots
        """
        parsed = [parse_optional(s) for s in slots]
        if len(parsed) > SLOT_COUNT:
            raise ValueError(f"A visiting team has at most {SLOT_COUNT} slots, got {len(parsed)}")
        parsed.extend([None] * (SLOT_COUNT - len(parsed)))
        return cls(date=parse_date(on_date), host=parse_optional(host), slots=tuple(parsed))

    def team(self) -> List[Facility]:
        """Non-empty slots in slot order."""
        return [s for s in self.slots if s is not None]

    def to_wire(self) -> Dict:
        return {
            "id": self.id,
            "date": self.id,
            "hostHospital": self.host.value if self.host else None,
            "hospitals": [s.value if s else None for s in self.slots],
        }

    @classmethod
    def from_wire(cls, data: Mapping) -> "ScheduleEntry":
        return cls.create(data["date"], data.get("hostHospital"), data.get("hospitals") or [])


@dataclass(frozen=True)
class Comment:
    commendation: str = ""
    suggestion: str = ""


def normalize_scores(
    rubric: RubricDefinition,
    scores: Mapping[str, int],
    max_rating: int = 5,
) -> Dict[str, int]:
    """
    Validate a raw score set against the rubric.

    Unrated items are simply absent from the result; a rating of 0 is treated
    as unrated and dropped.

    Args:
        rubric: Rubric the ratings belong to
        scores: item id -> rating
        max_rating: Highest allowed rating

    Returns:
        Cleaned mapping of item id -> int rating

    Raises:
        ValueError: On unknown item ids or ratings outside [1, max_rating]
    """
    known = set(rubric.item_ids())
    cleaned: Dict[str, int] = {}
    for item_id, rating in scores.items():
        item_id = str(item_id)
        if item_id not in known:
            raise ValueError(f"Unknown rubric item: {item_id}")
        if rating is None:
            continue
        if isinstance(rating, float) and not rating.is_integer():
            raise ValueError(f"Rating for item {item_id} is not an integer: {rating!r}")
        try:
            value = int(rating)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Rating for item {item_id} is not an integer: {rating!r}") from e
        if value == 0:
            continue
        if not 1 <= value <= max_rating:
            raise ValueError(f"Rating for item {item_id} must be between 1 and {max_rating}, got {value}")
        cleaned[item_id] = value
    return cleaned


def new_record_id() -> str:
    return uuid.uuid4().hex


def _wire_mapping(value, name: str) -> Mapping:
    if not value:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"Expected a mapping for {name}, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class AssessmentRecord:
    """Scored assessment of one facility on one day. Never mutated after creation."""

    id: str
    facility: Facility
    date: date
    scores: Dict[str, int]
    total_score: int
    grade: str
    passed: bool
    comments: Dict[int, Comment] = field(default_factory=dict)
    visitors: Tuple[Facility, ...] = ()

    def to_wire(self) -> Dict:
        return {
            "id": self.id,
            "hospital": self.facility.value,
            "date": self.date.isoformat(),
            "scores": dict(self.scores),
            "comments": {
                str(cid): {"commendation": c.commendation, "suggestion": c.suggestion}
                for cid, c in self.comments.items()
            },
            "totalScore": self.total_score,
            "grade": self.grade,
            "passed": self.passed,
            "visitors": [v.value for v in self.visitors],
        }

    @classmethod
    def from_wire(cls, data: Mapping) -> "AssessmentRecord":
        """
        Rebuild a record from its stored shape.

        Raises:
            ValueError: If scores, comments or a comment entry is not a mapping
        """
        comments = {}
        for cid, c in _wire_mapping(data.get("comments"), "comments").items():
            c = _wire_mapping(c, f"comment {cid}")
            comments[int(cid)] = Comment(
                commendation=str(c.get("commendation", "")),
                suggestion=str(c.get("suggestion", "")),
            )
        return cls(
            id=str(data["id"]),
            facility=Facility.parse(data["hospital"]),
            date=parse_date(data["date"]),
            scores={str(k): int(v) for k, v in _wire_mapping(data.get("scores"), "scores").items()},
            total_score=int(data.get("totalScore", 0)),
            grade=str(data.get("grade", "")),
            passed=bool(data.get("passed", False)),
            comments=comments,
            visitors=tuple(Facility.parse(v) for v in (data.get("visitors") or [])),
        )


def parse_comments(raw: Optional[Mapping], rubric: RubricDefinition) -> Dict[int, Comment]:
    """Parse a category id -> {commendation, suggestion} mapping, dropping empty entries."""
    if not raw:
        return {}
    known = set(rubric.category_ids())
    comments: Dict[int, Comment] = {}
    for cid, value in raw.items():
        category_id = int(cid)
        if category_id not in known:
            raise ValueError(f"Unknown rubric category: {cid}")
        if isinstance(value, Comment):
            comment = value
        elif isinstance(value, (tuple, list)):
            commendation, suggestion = (list(value) + ["", ""])[:2]
            comment = Comment(str(commendation or ""), str(suggestion or ""))
        else:
            comment = Comment(
                commendation=str(value.get("commendation", "") or ""),
                suggestion=str(value.get("suggestion", "") or ""),
            )
        if comment.commendation or comment.suggestion:
            comments[category_id] = comment
    return comments
