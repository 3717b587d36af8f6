"""Tests for the schedule constraint validator."""

from datetime import date

from peervisit.domain.facilities import Facility
from peervisit.domain.records import ScheduleEntry
from peervisit.services.constraints import (
    ViolationCode,
    check_save_preconditions,
    count_recent_visits,
    find_visiting_team,
    validate,
    window_start,
)

F = Facility
HOME = F.CHAIYAPHUM


def _entry(day, host, team):
    return ScheduleEntry.create(day, host, team)


def _history_with(facility, days):
    """One entry per day, each with the facility plus two fillers."""
    return [_entry(d, F.KHON_SAN, [facility, F.BAN_THAEN, F.SAP_YAI]) for d in days]


def _codes(violations):
    return [(v.code, v.facility) for v in violations]


def test_clean_candidate_has_no_violations():
    candidate = _entry("2025-06-15", F.KHON_SAN, [F.SAP_YAI, F.CHATTURAT, F.BAN_KHWAO])
    assert validate(candidate, []) == []


def test_host_in_team():
    candidate = _entry("2025-06-15", F.KHON_SAN, [F.KHON_SAN, F.CHATTURAT, F.BAN_KHWAO])
    assert _codes(validate(candidate, [])) == [(ViolationCode.HOST_IN_TEAM, F.KHON_SAN)]


def test_duplicate_visitor():
    """[A, A, None, None, None] always yields a duplicate violation for A."""
    candidate = _entry("2025-06-15", F.KHON_SAN, [F.SAP_YAI, F.SAP_YAI, None, None, None])
    assert _codes(validate(candidate, [])) == [(ViolationCode.DUPLICATE_VISITOR, F.SAP_YAI)]


def test_duplicate_reported_once_per_facility():
    candidate = _entry("2025-06-15", F.KHON_SAN, [F.SAP_YAI, F.SAP_YAI, F.SAP_YAI, F.BAN_THAEN, F.BAN_THAEN])
    codes = _codes(validate(candidate, []))
    assert codes == [
        (ViolationCode.DUPLICATE_VISITOR, F.SAP_YAI),
        (ViolationCode.DUPLICATE_VISITOR, F.BAN_THAEN),
    ]


def test_quota_exceeded_at_three_prior_visits():
    history = _history_with(F.PHU_KHIEO, ["2025-03-15", "2025-04-10", "2025-05-20"])
    candidate = _entry("2025-06-15", F.KHON_SAWAN, [F.PHU_KHIEO, F.CHATTURAT, F.BAN_KHWAO])

    violations = validate(candidate, history)

    assert (ViolationCode.VISIT_QUOTA_EXCEEDED, F.PHU_KHIEO) in _codes(violations)


def test_two_prior_visits_are_within_quota():
    history = _history_with(F.PHU_KHIEO, ["2025-04-10", "2025-05-20"])
    candidate = _entry("2025-06-15", F.KHON_SAWAN, [F.PHU_KHIEO, F.CHATTURAT, F.BAN_KHWAO])
    assert validate(candidate, history) == []


def test_home_facility_is_exempt():
    history = _history_with(HOME, ["2025-03-20", "2025-04-10", "2025-05-20", "2025-06-01"])
    candidate = _entry("2025-06-15", F.KHON_SAWAN, [HOME, F.CHATTURAT, F.BAN_KHWAO])
    assert validate(candidate, history) == []


def test_configured_home_is_exempt():
    history = _history_with(F.PHU_KHIEO, ["2025-03-20", "2025-04-10", "2025-05-20"])
    candidate = _entry("2025-06-15", F.KHON_SAWAN, [F.PHU_KHIEO, F.CHATTURAT, F.BAN_KHWAO])
    assert validate(candidate, history, home=F.PHU_KHIEO) == []


def test_window_excludes_entries_before_start():
    """Window is [2025-03-15, 2025-06-15); the 14 March visit does not count."""
    history = _history_with(F.PHU_KHIEO, ["2025-03-14", "2025-04-10", "2025-05-20"])
    candidate = _entry("2025-06-15", F.KHON_SAWAN, [F.PHU_KHIEO, F.CHATTURAT, F.BAN_KHWAO])
    assert validate(candidate, history) == []


def test_future_entries_do_not_count():
    history = _history_with(F.PHU_KHIEO, ["2025-06-16", "2025-07-01", "2025-08-01"])
    candidate = _entry("2025-06-15", F.KHON_SAWAN, [F.PHU_KHIEO, F.CHATTURAT, F.BAN_KHWAO])
    assert validate(candidate, history) == []


def test_entry_under_edit_does_not_count_itself():
    """Two prior visits plus the saved version of the same date stays within quota."""
    history = _history_with(F.PHU_KHIEO, ["2025-04-10", "2025-05-20"])
    candidate = _entry("2025-06-15", F.KHON_SAWAN, [F.PHU_KHIEO, F.CHATTURAT, F.BAN_KHWAO])
    history.append(candidate)

    assert validate(candidate, history) == []


def test_rules_are_independent():
    history = _history_with(F.PHU_KHIEO, ["2025-04-01", "2025-04-10", "2025-05-20"])
    candidate = _entry(
        "2025-06-15", F.KHON_SAWAN, [F.KHON_SAWAN, F.PHU_KHIEO, F.PHU_KHIEO, F.BAN_KHWAO]
    )

    codes = [v.code for v in validate(candidate, history)]

    assert codes == [
        ViolationCode.HOST_IN_TEAM,
        ViolationCode.DUPLICATE_VISITOR,
        ViolationCode.VISIT_QUOTA_EXCEEDED,
    ]


def test_window_start_clamps_to_month_end():
    assert window_start(date(2025, 5, 31)) == date(2025, 2, 28)
    assert window_start(date(2024, 5, 31)) == date(2024, 2, 29)
    assert window_start(date(2025, 6, 15)) == date(2025, 3, 15)


def test_count_recent_visits():
    history = _history_with(F.PHU_KHIEO, ["2025-03-15", "2025-04-10", "2025-06-15"])
    assert count_recent_visits(F.PHU_KHIEO, history, date(2025, 6, 15)) == 2
    assert count_recent_visits(F.SAP_YAI, history, date(2025, 6, 15)) == 2
    assert count_recent_visits(F.CHATTURAT, history, date(2025, 6, 15)) == 0


def test_preconditions_missing_host_and_small_team():
    candidate = _entry("2025-06-15", None, [F.SAP_YAI, F.CHATTURAT])
    codes = [v.code for v in check_save_preconditions(candidate)]
    assert codes == [ViolationCode.MISSING_HOST, ViolationCode.TEAM_SIZE_OUT_OF_RANGE]


def test_preconditions_accept_three_to_five():
    for team in (
        [F.SAP_YAI, F.CHATTURAT, F.BAN_KHWAO],
        [F.SAP_YAI, None, F.CHATTURAT, None, F.BAN_KHWAO],
        [F.SAP_YAI, F.CHATTURAT, F.BAN_KHWAO, F.BAN_THAEN, F.THEP_SATHIT],
    ):
        assert check_save_preconditions(_entry("2025-06-15", F.KHON_SAN, team)) == []


def test_find_visiting_team():
    entries = [
        _entry("2025-06-15", F.KHON_SAN, [F.SAP_YAI, None, F.CHATTURAT, F.BAN_KHWAO]),
        _entry("2025-06-16", F.BAN_THAEN, [F.THEP_SATHIT, F.KAENG_KHRO, F.NOEN_SA_NGA]),
    ]
    assert find_visiting_team(entries, F.KHON_SAN, date(2025, 6, 15)) == [F.SAP_YAI, F.CHATTURAT, F.BAN_KHWAO]
    assert find_visiting_team(entries, F.KHON_SAN, date(2025, 6, 16)) == []
