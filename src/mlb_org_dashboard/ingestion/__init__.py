"""Ingestion layer for MLB Stats API data.

Provides:
- StatsAPIClient: Async httpx client for schedule, teams, live feed,
  roster and player stats endpoints
- UpstreamError and subclasses: typed request failures
"""

from .client import StatsAPIClient
from .errors import (
    NetworkError,
    UpstreamError,
    UpstreamShapeError,
    UpstreamStatusError,
)

__all__ = [
    "StatsAPIClient",
    "UpstreamError",
    "NetworkError",
    "UpstreamStatusError",
    "UpstreamShapeError",
]
