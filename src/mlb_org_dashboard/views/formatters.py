"""Display formatting for stat values, times and dates."""

from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo

from ..pipeline.stats import to_float

PLACEHOLDER = "—"
EASTERN = ZoneInfo("America/New_York")

THREE_DECIMAL_STATS = frozenset({"avg", "obp", "slg", "ops", "whip", "battingAverageAgainst"})
TWO_DECIMAL_STATS = frozenset({"era"})
ONE_DECIMAL_STATS = frozenset({"inningsPitched"})


def format_stat_value(value: Any, key: str) -> str:
    """Format a raw stat value for display.

    Args:
        value: Raw upstream value (number or numeric string)
        key: Stat name, which selects the precision

    Returns:
        Formatted value, or the placeholder for absent/non-numeric values

    Example:
        >>> format_stat_value(".285", "avg")
        '0.285'
        >>> format_stat_value(3.4, "era")
        '3.40'
        >>> format_stat_value(None, "homeRuns")
        '—'
    """
    number = to_float(value)
    if number is None:
        return PLACEHOLDER

    if key in THREE_DECIMAL_STATS:
        return f"{number:.3f}"
    if key in TWO_DECIMAL_STATS:
        return f"{number:.2f}"
    if key in ONE_DECIMAL_STATS:
        return f"{number:.1f}"
    if number.is_integer():
        return str(int(number))
    return str(number)


def format_local_time(iso_string: str | None, tz: ZoneInfo = EASTERN) -> str:
    """Format an ISO-8601 start time as ``H:MM AM/PM`` in ``tz``.

    Naive timestamps are taken as UTC. Returns "" for unparseable input.
    """
    if not iso_string:
        return ""
    try:
        moment = datetime.fromisoformat(iso_string.replace("Z", "+00:00"))
    except (ValueError, TypeError, AttributeError):
        return ""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=ZoneInfo("UTC"))
    local = moment.astimezone(tz)

    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {suffix}"


def today_eastern(now: datetime | None = None) -> date:
    """Today's date in America/New_York (the default schedule date)."""
    now = now or datetime.now(tz=EASTERN)
    if now.tzinfo is None:
        return now.date()
    return now.astimezone(EASTERN).date()
