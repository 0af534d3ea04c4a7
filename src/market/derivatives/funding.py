"""Funding-rate level and slope.

CRITICAL: All computations use Decimal. Never use float for rates.
"""

from collections.abc import Sequence
from decimal import Decimal

from market.config import FundingSettings
from market.data.models import FundingRatePoint, FundingRateReading
from market.models import FundingRecord

_ZERO = Decimal("0")
_MS_PER_HOUR = Decimal("3600000")


def compute_funding_slope(history: Sequence[FundingRatePoint], limit: int = 8) -> Decimal:
    """Funding-rate change per hour across the most recent ``limit`` history points.

    Formula: (last_rate - first_rate) / hours_between(first, last)

    Returns:
        Slope per hour, or Decimal("0") with fewer than 2 points or when the
        points share a timestamp.
    """
    recent = history[-limit:] if limit > 0 else history
    if len(recent) < 2:
        return _ZERO

    first = recent[0]
    last = recent[-1]
    hours = Decimal(last.timestamp_ms - first.timestamp_ms) / _MS_PER_HOUR
    if hours == _ZERO:
        return _ZERO

    return (last.rate - first.rate) / hours


def compute_funding(
    reading: FundingRateReading | None,
    history: Sequence[FundingRatePoint],
    settings: FundingSettings,
) -> FundingRecord:
    """Combine the latest funding reading with the slope of recent history.

    A missing reading keeps rate and next funding time at zero; the slope is
    still derived from history.
    """
    slope = compute_funding_slope(history, settings.history_limit)
    if reading is None:
        return FundingRecord(slope_per_hour=slope)

    return FundingRecord(
        rate=reading.rate,
        slope_per_hour=slope,
        next_funding_time_ms=reading.next_funding_time_ms,
    )
