"""Tests for ATR, Bollinger band width and realized volatility."""

from decimal import Decimal

import pytest

from market.indicators.volatility import (
    compute_atr,
    compute_bollinger_width,
    compute_realized_volatility,
)

_TOLERANCE = Decimal("1e-20")


class TestComputeAtr:
    """Tests for compute_atr."""

    def test_insufficient_history_returns_zero(self, make_candles) -> None:
        candles = make_candles([100] * 14, range_offset=Decimal("1"))
        assert compute_atr(candles, period=14) == Decimal("0")

    def test_constant_range(self, make_candles) -> None:
        """Every true range is high - low = 2, so ATR is 2."""
        candles = make_candles([100] * 30, range_offset=Decimal("1"))
        assert compute_atr(candles, period=14) == Decimal("2")

    def test_gap_uses_previous_close(self, make_candles) -> None:
        """Candle 1: max(21 - 19, |21 - 10|, |19 - 10|) = 11."""
        candles = make_candles([10, 20], range_offset=Decimal("1"))
        assert compute_atr(candles, period=1) == Decimal("11")

    def test_wilder_smoothing_step(self, make_candles) -> None:
        """TRs: 2, 2, 7 with period 2 -> seed 2, then (2 * 1 + 7) / 2 = 4.5."""
        candles = make_candles([100, 100, 100, 106], range_offset=Decimal("1"))
        # candle 3: max(107 - 105, |107 - 100|, |105 - 100|) = 7
        assert compute_atr(candles, period=2) == Decimal("4.5")

    def test_never_negative(self, make_candles) -> None:
        candles = make_candles(
            [100 + (i * 5 % 9) for i in range(40)], range_offset=Decimal("0.5")
        )
        assert compute_atr(candles, period=14) >= Decimal("0")


class TestComputeBollingerWidth:
    """Tests for compute_bollinger_width."""

    def test_insufficient_history_returns_zero(self, make_candles) -> None:
        candles = make_candles([100] * 19)
        assert compute_bollinger_width(candles, period=20, k=2) == Decimal("0")

    def test_constant_series_is_zero(self, make_candles) -> None:
        candles = make_candles([100] * 20)
        assert compute_bollinger_width(candles, period=20, k=2) == Decimal("0")

    def test_zero_mean_returns_zero(self, make_candles) -> None:
        candles = make_candles([0] * 20)
        assert compute_bollinger_width(candles, period=20, k=2) == Decimal("0")

    def test_known_width_uses_last_period_closes(self, make_candles) -> None:
        """Last 4 closes 2..5: mean 3.5, variance 1.25, width = 4 * sqrt(1.25) / 3.5."""
        candles = make_candles([1000, 2, 3, 4, 5])
        result = compute_bollinger_width(candles, period=4, k=2)
        expected = Decimal("4") * Decimal("1.25").sqrt() / Decimal("3.5")
        assert abs(result - expected) < _TOLERANCE

    def test_never_negative(self, make_candles) -> None:
        candles = make_candles([100 + (i * 3 % 7) for i in range(30)])
        assert compute_bollinger_width(candles) >= Decimal("0")


class TestComputeRealizedVolatility:
    """Tests for compute_realized_volatility."""

    def test_insufficient_history_returns_zero(self, make_candles) -> None:
        """len == period is not enough."""
        candles = make_candles([100, 110] * 10)
        assert compute_realized_volatility(candles, period=20) == Decimal("0")

    def test_constant_series_is_zero(self, make_candles) -> None:
        candles = make_candles([100] * 30)
        assert compute_realized_volatility(candles, period=20) == Decimal("0")

    def test_alternating_series(self, make_candles) -> None:
        """Returns alternate +ln(1.1), -ln(1.1): population std is ln(1.1)."""
        candles = make_candles([100, 110, 100, 110, 100])
        result = compute_realized_volatility(candles, period=4)
        assert abs(result - Decimal("1.1").ln()) < _TOLERANCE

    def test_skips_non_positive_previous_close(self, make_candles) -> None:
        """Only one valid return remains, whose deviation from itself is zero."""
        candles = make_candles([0, 100, 110])
        assert compute_realized_volatility(candles, period=2) == Decimal("0")

    def test_no_valid_returns_is_zero(self, make_candles) -> None:
        candles = make_candles([0, 0, 0])
        assert compute_realized_volatility(candles, period=2) == Decimal("0")

    @pytest.mark.parametrize("period", [5, 20])
    def test_never_negative(self, make_candles, period: int) -> None:
        candles = make_candles([100 + (i * 11 % 17) for i in range(40)])
        assert compute_realized_volatility(candles, period=period) >= Decimal("0")
