"""Orchestrator - wires the validator, the scoring engine and the gateway into save workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Mapping, Optional, TypeVar

from peervisit.config import VisitConfig
from peervisit.domain.facilities import Facility
from peervisit.domain.records import (
    AssessmentRecord,
    ScheduleEntry,
    new_record_id,
    normalize_scores,
    parse_comments,
    parse_date,
)
from peervisit.domain.rubric import RubricDefinition
from peervisit.gateway.base import PersistenceGateway, RecordKind
from peervisit.services.constraints import (
    Violation,
    check_save_preconditions,
    find_visiting_team,
    validate,
)
from peervisit.services.scoring import ScoreResult, score, unrated_items

T = TypeVar("T")


@dataclass
class SaveOutcome:
    """Result of a save attempt. Nothing was written unless saved is True."""

    saved: bool
    errors: List[Violation] = field(default_factory=list)
    needs_confirmation: bool = False
    unrated: List[str] = field(default_factory=list)
    transport_failed: bool = False
    result: Optional[ScoreResult] = None
    record: Optional[AssessmentRecord] = None


class VisitOrchestrator:
    """
    Coordinates schedule and assessment saves against one gateway.

    The validator and scoring engine stay pure; this class reads history from
    the gateway, applies the hard save rules and writes the record.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        cfg: VisitConfig | None = None,
        rubric: RubricDefinition | None = None,
    ):
        self.gateway = gateway
        self.cfg = cfg or VisitConfig()
        self.rubric = rubric or self.cfg.load_rubric()
        self.policy = self.cfg.scoring.policy()

    def _load(self, kind: RecordKind, parse: Callable[[Mapping], T]) -> List[T]:
        items: List[T] = []
        for raw in self.gateway.list(kind):
            try:
                items.append(parse(raw))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                print(f"[WARN] Skipping malformed {kind.value} record {raw!r}: {e}")
        return items

    def load_schedules(self) -> List[ScheduleEntry]:
        return self._load(RecordKind.SCHEDULE, ScheduleEntry.from_wire)

    def load_assessments(self) -> List[AssessmentRecord]:
        return self._load(RecordKind.ASSESSMENT, AssessmentRecord.from_wire)

    def check_schedule(
        self,
        candidate: ScheduleEntry,
        history: Optional[List[ScheduleEntry]] = None,
    ) -> List[Violation]:
        """Advisory warnings for a candidate entry (does not apply the save preconditions)."""
        if history is None:
            history = self.load_schedules()
        return validate(
            candidate,
            history,
            home=self.cfg.home_facility,
            window_months=self.cfg.rotation.window_months,
            max_visits=self.cfg.rotation.max_visits,
        )

    def save_schedule(self, candidate: ScheduleEntry) -> SaveOutcome:
        """
        Validate and persist a schedule entry, superseding any entry for the same date.

        Missing host, a team size outside the configured range and every
        constraint violation block the save.
        """
        errors = check_save_preconditions(
            candidate,
            min_team=self.cfg.team.min_size,
            max_team=self.cfg.team.max_size,
        )
        errors.extend(self.check_schedule(candidate))

        if errors:
            print(f"[WARN] Schedule for {candidate.id} not saved: {len(errors)} problem(s)")
            for err in errors:
                print(f"  - {err.describe()}")
            return SaveOutcome(saved=False, errors=errors)

        if not self.gateway.upsert(RecordKind.SCHEDULE, candidate.to_wire()):
            return SaveOutcome(saved=False, transport_failed=True)

        print(f"[OK] Schedule saved for {candidate.id}: host={candidate.host.name}, team={len(candidate.team())}")
        return SaveOutcome(saved=True)

    def preview_score(self, scores: Mapping[str, int]) -> ScoreResult:
        return score(self.rubric, normalize_scores(self.rubric, scores, self.policy.max_rating), self.policy)

    def save_assessment(
        self,
        facility,
        on_date,
        scores: Mapping[str, int],
        comments: Optional[Mapping] = None,
        allow_incomplete: bool = False,
    ) -> SaveOutcome:
        """
        Score and persist an assessment.

        Args:
            facility: Facility assessed (Facility, wire value or member name)
            on_date: Assessment date
            scores: item id -> rating (1-5)
            comments: category id -> {commendation, suggestion}
            allow_incomplete: Save even if some items are unrated (they score 0)

        Returns:
            SaveOutcome; needs_confirmation is set when unrated items exist and
            allow_incomplete is False

        Raises:
            ValueError: On an unknown facility, bad date, unknown item or out-of-range rating
        """
        facility = Facility.parse(facility)
        day = parse_date(on_date)
        cleaned = normalize_scores(self.rubric, scores, self.policy.max_rating)
        parsed_comments = parse_comments(comments, self.rubric)
        result = score(self.rubric, cleaned, self.policy)

        missing = unrated_items(self.rubric, cleaned)
        if missing and not allow_incomplete:
            print(f"[WARN] {len(missing)} rubric item(s) unrated; confirmation required")
            return SaveOutcome(saved=False, needs_confirmation=True, unrated=missing, result=result)

        visitors = find_visiting_team(self.load_schedules(), facility, day)
        record = AssessmentRecord(
            id=new_record_id(),
            facility=facility,
            date=day,
            scores=cleaned,
            total_score=result.total_score,
            grade=result.grade.value,
            passed=result.passed,
            comments=parsed_comments,
            visitors=tuple(visitors),
        )

        if not self.gateway.upsert(RecordKind.ASSESSMENT, record.to_wire()):
            return SaveOutcome(saved=False, transport_failed=True, unrated=missing, result=result)

        print(
            f"[OK] Assessment saved for {facility.name} on {day}: "
            f"{result.total_score} ({result.grade.name}, passed={result.passed})"
        )
        return SaveOutcome(saved=True, unrated=missing, result=result, record=record)
