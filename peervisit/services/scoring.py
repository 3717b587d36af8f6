"""Assessment scoring: weighted total, critical-item gate and grade."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Optional, Tuple

from peervisit.domain.rubric import RubricDefinition


class Grade(str, Enum):
    EXCELLENT = "ดีเยี่ยม"
    VERY_GOOD = "ดีมาก"
    GOOD = "ดี"
    FAIL = "ไม่ผ่าน"


@dataclass(frozen=True)
class ScoringPolicy:
    critical_weight: int = 3
    critical_pass_rating: int = 3
    max_rating: int = 5
    pass_percent: float = 60.0
    # denominator of percent; None uses the rubric ceiling
    percent_base: Optional[int] = 300
    # (minimum total, grade), highest first; anything below the last is FAIL
    grade_thresholds: Tuple[Tuple[int, Grade], ...] = (
        (240, Grade.EXCELLENT),
        (210, Grade.VERY_GOOD),
        (180, Grade.GOOD),
    )


@dataclass(frozen=True)
class CriticalCheck:
    id: str
    passed: bool


@dataclass(frozen=True)
class ScoreResult:
    total_score: int
    percent: float
    grade: Grade
    passed: bool
    critical_breakdown: List[CriticalCheck] = field(default_factory=list)


DEFAULT_POLICY = ScoringPolicy()


def grade_for_total(total_score: int, policy: ScoringPolicy = DEFAULT_POLICY) -> Grade:
    """First threshold the total reaches, in descending order."""
    for minimum, grade in policy.grade_thresholds:
        if total_score >= minimum:
            return grade
    return Grade.FAIL


def score(
    rubric: RubricDefinition,
    raw_scores: Mapping[str, int],
    policy: ScoringPolicy | None = None,
) -> ScoreResult:
    """
    Score a set of raw ratings against the rubric.

    Unrated items count as 0. Critical items contribute their rating times the
    critical weight, but pass or fail on the unweighted rating. A failed
    critical item or a percentage below the pass mark forces the FAIL grade.
    The percentage is taken against the policy's fixed base (300 by default),
    not the rubric ceiling, so totals above the base exceed 100%.

    Args:
        rubric: Rubric definition
        raw_scores: item id -> rating (1-5); missing ids are unrated
        policy: Scoring constants (defaults: weight 3, critical pass 3, pass 60% of 300)

    Returns:
        ScoreResult with total, percent, grade, passed flag and critical breakdown
    """
    policy = policy or DEFAULT_POLICY

    total = 0
    breakdown: List[CriticalCheck] = []
    for item in rubric.items():
        rating = int(raw_scores.get(item.id) or 0)
        if item.is_critical:
            total += rating * policy.critical_weight
            breakdown.append(CriticalCheck(id=item.id, passed=rating >= policy.critical_pass_rating))
        else:
            total += rating

    base = policy.percent_base or rubric.max_score(policy.critical_weight, policy.max_rating)
    percent = total * 100 / base if base else 0.0

    passed = percent >= policy.pass_percent and all(check.passed for check in breakdown)
    grade = grade_for_total(total, policy) if passed else Grade.FAIL

    return ScoreResult(
        total_score=total,
        percent=percent,
        grade=grade,
        passed=passed,
        critical_breakdown=breakdown,
    )


def unrated_items(rubric: RubricDefinition, raw_scores: Mapping[str, int]) -> List[str]:
    """Item ids without a rating, in rubric order."""
    return [item_id for item_id in rubric.item_ids() if not raw_scores.get(item_id)]
