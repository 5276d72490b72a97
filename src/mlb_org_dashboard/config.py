"""Dashboard configuration models using Pydantic."""

from enum import Enum
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .registry import ORG_TEAM_IDS, SPORT_IDS


class BackoffStrategy(str, Enum):
    """Retry backoff strategies."""

    EXPONENTIAL = "exponential"
    LINEAR = "linear"
    CONSTANT = "constant"


class RetryConfig(BaseModel):
    """Retry configuration for upstream requests.

    A single attempt is the default: failures surface to the caller, which
    decides whether to re-trigger the fetch.
    """

    max_attempts: int = Field(default=1, ge=1, le=10)
    backoff: BackoffStrategy = BackoffStrategy.EXPONENTIAL
    initial_delay: float = Field(default=1, ge=0)  # seconds
    max_delay: float = Field(default=30, ge=1)  # seconds


class ClientConfig(BaseModel):
    """MLB Stats API connection settings."""

    base_url: str = Field(
        default="https://statsapi.mlb.com/api",
        description="API root; versioned paths (v1, v1.1) are appended per endpoint",
    )
    timeout: float = Field(default=30.0, gt=0, le=300, description="Request timeout in seconds")
    user_agent: str = "mlb-org-dashboard/0.1"
    schedule_hydrate: Optional[str] = Field(
        default="probablePitcher",
        description="Schedule hydration (probable pitchers are absent without it)",
    )
    retry: RetryConfig = Field(default_factory=RetryConfig)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class OrganizationConfig(BaseModel):
    """Which organization the dashboard follows."""

    name: str = "Miami Marlins"
    team_ids: list[int] = Field(default_factory=lambda: list(ORG_TEAM_IDS), min_length=1)
    sport_ids: list[int] = Field(default_factory=lambda: list(SPORT_IDS), min_length=1)
    roster_team_ids: list[int] = Field(
        default_factory=lambda: [146, 385, 467, 564, 554],
        description="Teams whose rosters feed player search",
    )
    default_team_id: int = 146


class LeaderboardConfig(BaseModel):
    """Leaderboard and player panel bounds."""

    roster_prefix: int = Field(default=25, ge=1, description="Roster entries fetched for stats")
    top_n: int = Field(default=10, ge=1)
    game_log_limit: int = Field(default=10, ge=1)
    default_season: int = Field(default=2025, ge=1876)


class DashboardConfig(BaseModel):
    """Complete dashboard configuration."""

    client: ClientConfig = Field(default_factory=ClientConfig)
    organization: OrganizationConfig = Field(default_factory=OrganizationConfig)
    leaderboard: LeaderboardConfig = Field(default_factory=LeaderboardConfig)


def load_dashboard_config(path: str | Path) -> DashboardConfig:
    """Load dashboard configuration from YAML file.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated DashboardConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If config is invalid
    """
    config_path = Path(path)

    if not config_path.exists():
        raise FileNotFoundError(f"Dashboard config not found: {config_path}")

    with open(config_path) as f:
        config_data = yaml.safe_load(f) or {}

    return DashboardConfig(**config_data)
