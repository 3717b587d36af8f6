"""Pre-aggregated dashboard figures."""

from __future__ import annotations

from typing import Dict, List, Sequence

import pandas as pd

from peervisit.domain.records import AssessmentRecord, ScheduleEntry


def assessments_frame(records: Sequence[AssessmentRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "id": r.id,
                "facility": r.facility.name,
                "date": pd.Timestamp(r.date),
                "total_score": r.total_score,
                "grade": r.grade,
                "passed": r.passed,
            }
            for r in records
        ],
        columns=["id", "facility", "date", "total_score", "grade", "passed"],
    )


def facility_summary(records: Sequence[AssessmentRecord]) -> pd.DataFrame:
    """Assessment count, average total and pass count per facility, best average first."""
    df = assessments_frame(records)
    if df.empty:
        return pd.DataFrame(columns=["assessments", "avg_total", "passed"])
    summary = df.groupby("facility").agg(
        assessments=("id", "count"),
        avg_total=("total_score", "mean"),
        passed=("passed", "sum"),
    )
    summary["passed"] = summary["passed"].astype(int)
    return summary.sort_values(["avg_total", "assessments"], ascending=[False, False])


def grade_counts(records: Sequence[AssessmentRecord]) -> Dict[str, int]:
    df = assessments_frame(records)
    if df.empty:
        return {}
    return {str(grade): int(n) for grade, n in df["grade"].value_counts().items()}


def schedules_by_month(entries: Sequence[ScheduleEntry]) -> Dict[str, List[ScheduleEntry]]:
    """Entries sorted by date and grouped under YYYY-MM keys."""
    groups: Dict[str, List[ScheduleEntry]] = {}
    for entry in sorted(entries, key=lambda e: e.date):
        groups.setdefault(entry.date.strftime("%Y-%m"), []).append(entry)
    return groups


def summarize_dashboard(
    records: Sequence[AssessmentRecord],
    entries: Sequence[ScheduleEntry],
) -> str:
    lines = ["Visit schedule by month:"]
    months = schedules_by_month(entries)
    if not months:
        lines.append("  (no visits scheduled)")
    for month, items in months.items():
        lines.append(f"  {month}")
        for entry in items:
            host = entry.host.name if entry.host else "-"
            lines.append(f"    {entry.id}  host={host}  team={len(entry.team())}")
    lines.append("")

    lines.append("Assessments per facility:")
    summary = facility_summary(records)
    lines.append(summary.to_string() if not summary.empty else "  (no assessments)")
    lines.append("")

    lines.append("Grade distribution:")
    counts = grade_counts(records)
    if not counts:
        lines.append("  (no assessments)")
    for grade, n in counts.items():
        lines.append(f"  {grade}: {n}")
    return "\n".join(lines)
