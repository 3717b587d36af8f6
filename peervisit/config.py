"""Configuration loading (YAML or JSON)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from peervisit.domain.facilities import HOME_FACILITY, Facility
from peervisit.domain.rubric import RubricDefinition, load_rubric
from peervisit.exceptions import ConfigError
from peervisit.services.scoring import Grade, ScoringPolicy


@dataclass
class RotationConfig:
    window_months: int = 3
    max_visits: int = 3


@dataclass
class TeamConfig:
    min_size: int = 3
    max_size: int = 5


@dataclass
class ScoringConfig:
    critical_weight: int = 3
    critical_pass_rating: int = 3
    max_rating: int = 5
    pass_percent: float = 60.0
    percent_base: Optional[int] = 300
    excellent: int = 240
    very_good: int = 210
    good: int = 180

    def policy(self) -> ScoringPolicy:
        return ScoringPolicy(
            critical_weight=self.critical_weight,
            critical_pass_rating=self.critical_pass_rating,
            max_rating=self.max_rating,
            pass_percent=self.pass_percent,
            percent_base=self.percent_base,
            grade_thresholds=(
                (self.excellent, Grade.EXCELLENT),
                (self.very_good, Grade.VERY_GOOD),
                (self.good, Grade.GOOD),
            ),
        )


@dataclass
class RubricConfig:
    path: Optional[str] = None
    expected_max_score: Optional[int] = None


@dataclass
class GatewayConfig:
    mode: str = "local"  # local or remote
    remote_url: Optional[str] = None
    timeout: float = 30.0
    db_url: str = "sqlite:///peervisit.db"


@dataclass
class VisitConfig:
    home_facility: Facility = HOME_FACILITY
    rotation: RotationConfig = field(default_factory=RotationConfig)
    team: TeamConfig = field(default_factory=TeamConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    rubric: RubricConfig = field(default_factory=RubricConfig)
    gateway: GatewayConfig = field(default_factory=GatewayConfig)

    def load_rubric(self) -> RubricDefinition:
        return load_rubric(
            self.rubric.path,
            expected_max_score=self.rubric.expected_max_score,
            critical_weight=self.scoring.critical_weight,
            max_rating=self.scoring.max_rating,
        )


def _section(cls, raw: Any, name: str):
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    known = set(cls.__dataclass_fields__)
    unknown = set(raw) - known
    if unknown:
        raise ConfigError(f"Unknown keys in '{name}': {', '.join(sorted(unknown))}")
    try:
        return cls(**raw)
    except TypeError as e:
        raise ConfigError(f"Invalid section '{name}': {e}") from e


def _validate(cfg: VisitConfig) -> None:
    if cfg.rotation.window_months < 1 or cfg.rotation.max_visits < 1:
        raise ConfigError("rotation.window_months and rotation.max_visits must be positive")
    if not 0 <= cfg.team.min_size <= cfg.team.max_size <= 5:
        raise ConfigError("team sizes must satisfy 0 <= min_size <= max_size <= 5")
    s = cfg.scoring
    if s.critical_weight < 1 or s.max_rating < 1:
        raise ConfigError("scoring.critical_weight and scoring.max_rating must be positive")
    if s.percent_base is not None and s.percent_base < 1:
        raise ConfigError("scoring.percent_base must be positive or null")
    if not s.excellent >= s.very_good >= s.good:
        raise ConfigError("grade thresholds must be descending: excellent >= very_good >= good")
    if cfg.gateway.mode not in ("local", "remote"):
        raise ConfigError(f"gateway.mode must be 'local' or 'remote', got {cfg.gateway.mode!r}")
    if cfg.gateway.mode == "remote" and not cfg.gateway.remote_url:
        raise ConfigError("gateway.remote_url is required in remote mode")


def config_from_dict(data: Dict[str, Any]) -> VisitConfig:
    """Build and validate a VisitConfig from a parsed mapping."""
    data = dict(data or {})
    known = set(VisitConfig.__dataclass_fields__)
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    try:
        home = Facility.parse(data.get("home_facility", HOME_FACILITY))
    except ValueError as e:
        raise ConfigError(str(e)) from e

    cfg = VisitConfig(
        home_facility=home,
        rotation=_section(RotationConfig, data.get("rotation"), "rotation"),
        team=_section(TeamConfig, data.get("team"), "team"),
        scoring=_section(ScoringConfig, data.get("scoring"), "scoring"),
        rubric=_section(RubricConfig, data.get("rubric"), "rubric"),
        gateway=_section(GatewayConfig, data.get("gateway"), "gateway"),
    )
    _validate(cfg)
    return cfg


def load_config(path: str | Path) -> VisitConfig:
    """
    Load configuration from a YAML or JSON file.

    Args:
        path: .yaml/.yml or .json file

    Returns:
        Validated VisitConfig

    Raises:
        ConfigError: If the file is missing, unparsable or has invalid values
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise ConfigError(f"Config root in {path} must be a mapping")

    cfg = config_from_dict(data or {})
    if cfg.rubric.path and not Path(cfg.rubric.path).is_absolute():
        cfg.rubric.path = str(path.parent / cfg.rubric.path)
    return cfg
