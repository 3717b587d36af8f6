"""Command-line interface for visit scheduling and assessment scoring."""

from __future__ import annotations

import argparse
from pathlib import Path

import yaml

from peervisit.config import VisitConfig, load_config
from peervisit.domain.db import init_database
from peervisit.domain.records import ScheduleEntry
from peervisit.engine.orchestrator import VisitOrchestrator
from peervisit.exceptions import ConfigError, RubricDefinitionError
from peervisit.gateway.factory import build_gateway
from peervisit.services.reports import summarize_dashboard


def _config(args: argparse.Namespace) -> VisitConfig:
    cfg = load_config(args.config) if args.config else VisitConfig()
    if args.db:
        cfg.gateway.db_url = args.db
    return cfg


def _orchestrator(args: argparse.Namespace) -> VisitOrchestrator:
    cfg = _config(args)
    return VisitOrchestrator(build_gateway(cfg.gateway), cfg)


def _read_mapping(path: str | Path) -> dict:
    """Read a YAML (or JSON) mapping file; keys are returned as strings."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise SystemExit(f"{path} must contain a mapping")
    return {str(k): v for k, v in data.items()}


def _candidate(args: argparse.Namespace) -> ScheduleEntry:
    return ScheduleEntry.create(args.date, args.host, args.team or [])


def _cmd_init_db(args: argparse.Namespace) -> None:
    """Initialize the local store."""
    cfg = _config(args)
    init_database(cfg.gateway.db_url)
    print(f"[OK] Database initialized: {cfg.gateway.db_url}")


def _cmd_check_schedule(args: argparse.Namespace) -> None:
    """Report constraint warnings for a candidate entry without saving."""
    orch = _orchestrator(args)
    warnings = orch.check_schedule(_candidate(args))
    if not warnings:
        print("[OK] No constraint violations")
        return
    print(f"[WARN] {len(warnings)} constraint violation(s):")
    for w in warnings:
        print(f"  - {w.describe()}")


def _cmd_save_schedule(args: argparse.Namespace) -> None:
    """Validate and save a schedule entry."""
    outcome = _orchestrator(args).save_schedule(_candidate(args))
    if not outcome.saved:
        raise SystemExit(1)


def _cmd_score(args: argparse.Namespace) -> None:
    """Score a ratings file without saving."""
    orch = _orchestrator(args)
    result = orch.preview_score(_read_mapping(args.scores))
    print(f"Total: {result.total_score} ({result.percent:.1f}%)")
    print(f"Grade: {result.grade.value} ({result.grade.name})")
    print(f"Passed: {result.passed}")
    for check in result.critical_breakdown:
        print(f"  critical {check.id}: {'pass' if check.passed else 'FAIL'}")


def _cmd_save_assessment(args: argparse.Namespace) -> None:
    """Score and save an assessment."""
    orch = _orchestrator(args)
    comments = _read_mapping(args.comments) if args.comments else None
    outcome = orch.save_assessment(
        args.facility,
        args.date,
        _read_mapping(args.scores),
        comments=comments,
        allow_incomplete=args.allow_incomplete,
    )
    if outcome.needs_confirmation:
        print(f"[WARN] Unrated items: {', '.join(outcome.unrated)}")
        print("[WARN] Re-run with --allow-incomplete to save anyway")
    if not outcome.saved:
        raise SystemExit(1)


def _cmd_summary(args: argparse.Namespace) -> None:
    """Print dashboard figures."""
    orch = _orchestrator(args)
    print(summarize_dashboard(orch.load_assessments(), orch.load_schedules()))


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="peervisit",
        description="Peer-visit scheduling and standards assessment scoring",
    )

    # Global options
    parser.add_argument("--config", help="Path to config YAML/JSON (default: built-in settings)")
    parser.add_argument("--db", help="Local store database URL (overrides config)")

    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-db", help="Initialize the local store")
    init.set_defaults(func=_cmd_init_db)

    for name, func, help_text in (
        ("check-schedule", _cmd_check_schedule, "Show constraint warnings for a visit"),
        ("save-schedule", _cmd_save_schedule, "Validate and save a visit"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--date", required=True, help="Visit date (YYYY-MM-DD)")
        p.add_argument("--host", help="Host facility (member name, e.g. KHON_SAN)")
        p.add_argument("--team", nargs="*", help="Visiting facilities, up to 5")
        p.set_defaults(func=func)

    sc = sub.add_parser("score", help="Score a ratings file without saving")
    sc.add_argument("--scores", required=True, help="YAML/JSON mapping of item id -> rating")
    sc.set_defaults(func=_cmd_score)

    sa = sub.add_parser("save-assessment", help="Score and save an assessment")
    sa.add_argument("--facility", required=True, help="Assessed facility")
    sa.add_argument("--date", required=True, help="Assessment date (YYYY-MM-DD)")
    sa.add_argument("--scores", required=True, help="YAML/JSON mapping of item id -> rating")
    sa.add_argument("--comments", help="YAML/JSON mapping of category id -> {commendation, suggestion}")
    sa.add_argument("--allow-incomplete", action="store_true", help="Save even if items are unrated")
    sa.set_defaults(func=_cmd_save_assessment)

    summ = sub.add_parser("summary", help="Print dashboard figures")
    summ.set_defaults(func=_cmd_summary)

    args = parser.parse_args(argv)
    try:
        args.func(args)
    except (ConfigError, RubricDefinitionError, ValueError) as e:
        print(f"[ERROR] {args.command} failed: {e}")
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
