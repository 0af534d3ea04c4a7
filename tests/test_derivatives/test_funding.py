"""Tests for funding-rate level and slope."""

from decimal import Decimal

from market.config import FundingSettings
from market.data.models import FundingRatePoint, FundingRateReading
from market.derivatives.funding import compute_funding, compute_funding_slope

HOUR_MS = 3_600_000
START_MS = 1_700_000_000_000


def _history(*rates: str, step_hours: int = 8) -> list[FundingRatePoint]:
    return [
        FundingRatePoint(rate=Decimal(r), timestamp_ms=START_MS + i * step_hours * HOUR_MS)
        for i, r in enumerate(rates)
    ]


class TestComputeFundingSlope:
    """Tests for compute_funding_slope."""

    def test_known_slope(self) -> None:
        """0.0001 -> 0.0009 over 16 hours = 0.00005 per hour."""
        history = _history("0.0001", "0.0005", "0.0009")
        assert compute_funding_slope(history) == Decimal("0.00005")

    def test_negative_slope(self) -> None:
        history = _history("0.0008", "0.0000")
        assert compute_funding_slope(history) == Decimal("-0.0001")

    def test_uses_most_recent_points_only(self) -> None:
        """With limit 2 only the last two readings count."""
        history = _history("0.5", "0.0001", "0.0009")
        assert compute_funding_slope(history, limit=2) == Decimal("0.0001")

    def test_fewer_than_two_points(self) -> None:
        assert compute_funding_slope(_history("0.0001")) == Decimal("0")
        assert compute_funding_slope([]) == Decimal("0")

    def test_same_timestamp_is_zero(self) -> None:
        history = _history("0.0001", "0.0003", step_hours=0)
        assert compute_funding_slope(history) == Decimal("0")


class TestComputeFunding:
    """Tests for compute_funding."""

    def test_reading_and_slope(self) -> None:
        reading = FundingRateReading(rate=Decimal("0.0003"), next_funding_time_ms=START_MS)
        record = compute_funding(reading, _history("0.0001", "0.0009"), FundingSettings())
        assert record.rate == Decimal("0.0003")
        assert record.next_funding_time_ms == START_MS
        assert record.slope_per_hour == Decimal("0.0001")

    def test_missing_reading_keeps_slope(self) -> None:
        record = compute_funding(None, _history("0.0001", "0.0009"), FundingSettings())
        assert record.rate == Decimal("0")
        assert record.next_funding_time_ms == 0
        assert record.slope_per_hour == Decimal("0.0001")

    def test_history_limit_from_settings(self) -> None:
        history = _history("0.5", "0.0001", "0.0009")
        record = compute_funding(None, history, FundingSettings(history_limit=2))
        assert record.slope_per_hour == Decimal("0.0001")
