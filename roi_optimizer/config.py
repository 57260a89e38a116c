"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``: committed static defaults
  2. ``config/local.toml``: optional local overrides (gitignored)
  3. ``.env``: local env overrides (gitignored)
  4. Environment variables: ``ROI_OPTIMIZER_*`` prefix (see ``_ENV_OVERRIDES``)

Entry point: ``load_config(config_path=None) -> AppConfig``

The engines never read configuration themselves. They take an optional
``RecommendationThresholds`` / trend window argument whose defaults
reproduce the standard rule set; the CLI passes the loaded values through.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Callable, Literal, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class TrendConfig(BaseModel):
    """Recent-vs-older window comparison settings."""

    model_config = ConfigDict(frozen=True)

    window: int = 3

    @field_validator("window")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"trend window must be >= 1, got {v}.")
        return v


class RecommendationThresholds(BaseModel):
    """Trigger thresholds for every rule in the recommendation battery.

    Percentages are on a 0–100 scale except the ``*_ratio`` fields, which
    are fractional growth ratios as returned by ``compute_trend()``.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    # ROI performance
    low_roi_pct: float = 50.0
    long_payback_months: int = 12
    strong_roi_min_pct: float = 100.0
    strong_roi_max_pct: float = 200.0

    # Conversion rate
    low_conversion_pct: float = 15.0
    good_conversion_pct: float = 25.0
    conversion_decline_ratio: float = 0.90

    # Time savings (hours per sales record)
    low_time_saved_hours: float = 20.0
    high_time_saved_hours: float = 40.0

    # Cost efficiency
    max_cost_to_revenue_pct: float = 30.0
    crm_min_roi_pct: float = 80.0

    # Revenue growth
    stagnant_growth_ratio: float = 0.10
    strong_growth_ratio: float = 0.30
    low_deal_volume: float = 10.0

    @model_validator(mode="after")
    def validate_ordering(self) -> "RecommendationThresholds":
        if self.strong_roi_min_pct >= self.strong_roi_max_pct:
            raise ValueError("strong_roi_min_pct must be < strong_roi_max_pct.")
        if self.low_conversion_pct > self.good_conversion_pct:
            raise ValueError("low_conversion_pct must be <= good_conversion_pct.")
        if self.low_time_saved_hours > self.high_time_saved_hours:
            raise ValueError("low_time_saved_hours must be <= high_time_saved_hours.")
        if self.stagnant_growth_ratio > self.strong_growth_ratio:
            raise ValueError("stagnant_growth_ratio must be <= strong_growth_ratio.")
        if not 0.0 < self.conversion_decline_ratio <= 1.0:
            raise ValueError(
                f"conversion_decline_ratio must be in (0.0, 1.0], got {self.conversion_decline_ratio}."
            )
        return self


class HistoryConfig(BaseModel):
    """Analysis history retention."""

    model_config = ConfigDict(frozen=True)

    max_entries: int = 50
    history_file: str = "data/history.json"

    @field_validator("max_entries")
    @classmethod
    def validate_max_entries(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_entries must be >= 1, got {v}.")
        return v


class IngestionConfig(BaseModel):
    """How incoming sales records are interpreted."""

    model_config = ConfigDict(frozen=True)

    conversion_scale: Literal["percent", "fraction"] = "percent"


class OutputConfig(BaseModel):
    """Where exported reports are written."""

    model_config = ConfigDict(frozen=True)

    output_dir: str = "data/outputs"


class AppConfig(BaseModel):
    """Complete application configuration, the single source of truth.

    Constructed by ``load_config()``, which merges TOML + .env + env vars.
    """

    model_config = ConfigDict(frozen=True)

    logging: LoggingConfig = LoggingConfig()
    trend: TrendConfig = TrendConfig()
    thresholds: RecommendationThresholds = RecommendationThresholds()
    history: HistoryConfig = HistoryConfig()
    ingestion: IngestionConfig = IngestionConfig()
    output: OutputConfig = OutputConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

ENV_PREFIX = "ROI_OPTIMIZER_"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# ROI_OPTIMIZER_<suffix> → (section, key, parser); section None is top level.
_ENV_OVERRIDES: dict[str, tuple[Optional[str], str, Callable[[str], Any]]] = {
    "LOG_LEVEL": ("logging", "level", str.upper),
    "TREND_WINDOW": ("trend", "window", int),
    "HISTORY_LIMIT": ("history", "max_entries", int),
    "HISTORY_FILE": ("history", "history_file", str),
    "CONVERSION_SCALE": ("ingestion", "conversion_scale", str.lower),
    "OUTPUT_DIR": ("output", "output_dir", str),
    "DEBUG": (None, "debug", _parse_bool),
}


def _find_project_root() -> Path:
    """Nearest directory holding ``pyproject.toml`` above the package, else above cwd.

    Falls back to the current working directory when neither search finds one
    (e.g. a non-editable install run from an arbitrary directory).
    """
    for base in (Path(__file__).resolve().parent, Path.cwd()):
        for candidate in (base, *base.parents):
            if (candidate / "pyproject.toml").exists():
                return candidate
    return Path.cwd()


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit TOML file. Defaults to
            ``<project_root>/config/default.toml``. A ``local.toml`` next to
            it is merged on top when present.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If an ``ROI_OPTIMIZER_*`` variable cannot be parsed.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()
    load_dotenv(dotenv_path=root / ".env", override=False)

    path = Path(config_path) if config_path is not None else root / "config" / "default.toml"
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            "Create config/default.toml or pass --config."
        )

    raw = _read_toml(path)
    local_path = path.parent / "local.toml"
    if local_path.exists() and local_path.resolve() != path.resolve():
        raw = _deep_merge(raw, _read_toml(local_path))

    return _build_app_config(_apply_env_overrides(raw, os.environ))


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    result = dict(base)
    for key, val in override.items():
        if isinstance(result.get(key), dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    """Return a copy of ``raw`` with every set ``ROI_OPTIMIZER_*`` variable applied.

    Empty variables are ignored. See ``_ENV_OVERRIDES`` for the supported
    suffixes and the config key each one targets.

    Raises:
        ValueError: If a numeric override is not a valid integer.
    """
    overrides: dict[str, Any] = {}
    for suffix, (section, key, parse) in _ENV_OVERRIDES.items():
        name = ENV_PREFIX + suffix
        value = environ.get(name)
        if not value:
            continue
        try:
            parsed = parse(value)
        except ValueError as exc:
            raise ValueError(f"{name}={value!r} is not valid: {exc}") from exc
        target = overrides if section is None else overrides.setdefault(section, {})
        target[key] = parsed
    return _deep_merge(raw, overrides)


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map the merged raw dict onto ``AppConfig``.

    ``[project] debug`` is honoured when no top-level ``debug`` was set.
    """
    project = raw.get("project", {})
    return AppConfig(
        logging=LoggingConfig(**raw.get("logging", {})),
        trend=TrendConfig(**raw.get("trend", {})),
        thresholds=RecommendationThresholds(**raw.get("thresholds", {})),
        history=HistoryConfig(**raw.get("history", {})),
        ingestion=IngestionConfig(**raw.get("ingestion", {})),
        output=OutputConfig(**raw.get("output", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
