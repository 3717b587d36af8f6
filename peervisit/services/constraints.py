"""Constraint checking for visit schedule entries."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, List, Optional

import pandas as pd

from peervisit.domain.facilities import HOME_FACILITY, Facility
from peervisit.domain.records import ScheduleEntry


class ViolationCode(str, Enum):
    HOST_IN_TEAM = "host_in_team"
    DUPLICATE_VISITOR = "duplicate_visitor"
    VISIT_QUOTA_EXCEEDED = "visit_quota_exceeded"
    MISSING_HOST = "missing_host"
    TEAM_SIZE_OUT_OF_RANGE = "team_size_out_of_range"


@dataclass(frozen=True)
class Violation:
    code: ViolationCode
    facility: Optional[Facility] = None

    def describe(self) -> str:
        name = self.facility.name if self.facility else ""
        if self.code == ViolationCode.HOST_IN_TEAM:
            return f"{name} is the host and cannot also be in the visiting team"
        if self.code == ViolationCode.DUPLICATE_VISITOR:
            return f"{name} appears more than once in the visiting team"
        if self.code == ViolationCode.VISIT_QUOTA_EXCEEDED:
            return f"{name} has reached its visit quota for the trailing window"
        if self.code == ViolationCode.MISSING_HOST:
            return "No host facility selected"
        return "Visiting team size is outside the allowed range"


def window_start(on_date: date, months: int = 3) -> date:
    """
    Start of the trailing window, the same day `months` calendar months earlier.

    Month-end dates clamp to the last day of the shorter month (31 May -> 28/29 Feb)
    instead of rolling over into the following month (31 May -> 3 Mar), so the
    window can be a few days longer than a rolled-over one.
    """
    return (pd.Timestamp(on_date) - pd.DateOffset(months=months)).date()


def count_recent_visits(
    facility: Facility,
    history: Iterable[ScheduleEntry],
    on_date: date,
    window_months: int = 3,
) -> int:
    """
    Count history entries in [on_date - window_months, on_date) whose team includes the facility.

    Entries dated on_date itself are never counted.
    """
    start = window_start(on_date, window_months)
    return sum(
        1
        for entry in history
        if start <= entry.date < on_date and facility in entry.slots
    )


def validate(
    candidate: ScheduleEntry,
    history: Iterable[ScheduleEntry],
    home: Facility = HOME_FACILITY,
    window_months: int = 3,
    max_visits: int = 3,
) -> List[Violation]:
    """
    Check a candidate entry against the same-day and rotation-fairness rules.

    Every rule runs; nothing short-circuits. The validator only reports.

    Args:
        candidate: Entry being scheduled or edited
        history: Previously saved entries (may include the candidate's own date)
        home: Facility exempt from the rotation quota
        window_months: Length of the trailing window in calendar months
        max_visits: Visits in the window at which a facility is over quota

    Returns:
        List of violations (empty when the entry is acceptable)
    """
    violations: List[Violation] = []
    team = candidate.team()

    # 1. Host cannot visit itself
    if candidate.host is not None and candidate.host in team:
        violations.append(Violation(ViolationCode.HOST_IN_TEAM, candidate.host))

    # 2. Same facility twice on one day
    counts = Counter(team)
    for facility in dict.fromkeys(team):
        if counts[facility] > 1:
            violations.append(Violation(ViolationCode.DUPLICATE_VISITOR, facility))

    # 3. Rotation fairness over the trailing window
    prior = [entry for entry in history if entry.date != candidate.date]
    for facility in dict.fromkeys(team):
        if facility == home:
            continue
        visits = count_recent_visits(facility, prior, candidate.date, window_months)
        if visits >= max_visits:
            violations.append(Violation(ViolationCode.VISIT_QUOTA_EXCEEDED, facility))

    return violations


def check_save_preconditions(
    candidate: ScheduleEntry,
    min_team: int = 3,
    max_team: int = 5,
) -> List[Violation]:
    """Hard requirements before an entry may be persisted: a host and a team of min..max."""
    errors: List[Violation] = []
    if candidate.host is None:
        errors.append(Violation(ViolationCode.MISSING_HOST))
    size = len(candidate.team())
    if size < min_team or size > max_team:
        errors.append(Violation(ViolationCode.TEAM_SIZE_OUT_OF_RANGE))
    return errors


def find_visiting_team(
    entries: Iterable[ScheduleEntry],
    host: Facility,
    on_date: date,
) -> List[Facility]:
    """Visiting team scheduled for a host on a date; empty if nothing is scheduled."""
    for entry in entries:
        if entry.host == host and entry.date == on_date:
            return entry.team()
    return []
