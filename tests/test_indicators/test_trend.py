"""Tests for EMA and MACD.

All test values use Decimal (project convention). Tests cover SMA seeding,
the recursive update, insufficient-history sentinels and MACD composition.
"""

from decimal import Decimal

from market.data.models import Candle
from market.indicators.trend import (
    compute_ema,
    compute_macd,
    ema_min_history,
    macd_min_history,
)


class TestComputeEma:
    """Tests for EMA computation."""

    def test_empty_series_returns_zero(self, make_candles) -> None:
        assert compute_ema([], period=3) == Decimal("0")

    def test_insufficient_history_returns_zero(self, make_candles) -> None:
        """19 candles cannot produce an EMA(20)."""
        candles = make_candles([100] * 19)
        assert compute_ema(candles, period=20) == Decimal("0")

    def test_exactly_period_returns_sma_seed(self, make_candles) -> None:
        candles = make_candles([1, 2, 3])
        assert compute_ema(candles, period=3) == Decimal("2")

    def test_known_values_period_3(self, make_candles) -> None:
        """Verify the recursive update after SMA seeding.

        seed = mean(1, 2, 3) = 2, multiplier = 2 / 4 = 0.5
        close 4: (4 - 2) * 0.5 + 2 = 3
        close 5: (5 - 3) * 0.5 + 3 = 4
        """
        candles = make_candles([1, 2, 3, 4, 5])
        assert compute_ema(candles, period=3) == Decimal("4")

    def test_constant_series_equals_constant(self, make_candles) -> None:
        candles = make_candles(["42.5"] * 60)
        assert compute_ema(candles, period=20) == Decimal("42.5")

    def test_keeps_full_precision(self, make_candles) -> None:
        """seed = 7 / 3, then (1 - 7/3) * 0.5 + 7/3 = 5 / 3."""
        candles = make_candles(["1", "2", "4", "1"])
        result = compute_ema(candles, period=3)
        assert abs(result - Decimal(5) / Decimal(3)) < Decimal("1e-26")

    def test_float_derived_constant_is_exact(self) -> None:
        close = 0.1 + 0.2
        candles = [Candle.from_row([i, close, close, close, close, 1, i + 1]) for i in range(30)]
        assert compute_ema(candles, period=20) == Decimal("0.30000000000000004")

    def test_tiny_constant_is_not_rounded_to_zero(self, make_candles) -> None:
        candles = make_candles(["4E-13"] * 30)
        assert compute_ema(candles, period=20) == Decimal("4E-13")

    def test_huge_constant_does_not_raise(self, make_candles) -> None:
        candles = make_candles([10**17] * 30)
        assert compute_ema(candles, period=20) == Decimal(10**17)
        assert compute_macd(candles) == Decimal("0")

    def test_non_positive_period_returns_zero(self, make_candles) -> None:
        candles = make_candles([1, 2, 3])
        assert compute_ema(candles, period=0) == Decimal("0")

    def test_min_history(self) -> None:
        assert ema_min_history(20) == 20


class TestComputeMacd:
    """Tests for MACD computation."""

    def test_insufficient_history_returns_zero(self, make_candles) -> None:
        candles = make_candles(list(range(1, 26)))  # 25 < 26
        assert compute_macd(candles) == Decimal("0")

    def test_constant_series_is_zero(self, make_candles) -> None:
        candles = make_candles([100] * 40)
        assert compute_macd(candles) == Decimal("0")

    def test_uses_full_series_emas(self, make_candles) -> None:
        """MACD is EMA12 - EMA26 where both EMAs span the whole series."""
        candles = make_candles([100 + (i * 7 % 13) for i in range(50)])
        expected = compute_ema(candles, 12) - compute_ema(candles, 26)
        assert compute_macd(candles) == expected

    def test_rising_series_is_positive(self, make_candles) -> None:
        candles = make_candles(list(range(1, 41)))
        assert compute_macd(candles) > Decimal("0")

    def test_falling_series_is_negative(self, make_candles) -> None:
        candles = make_candles(list(range(40, 0, -1)))
        assert compute_macd(candles) < Decimal("0")

    def test_custom_periods(self, make_candles) -> None:
        candles = make_candles([100 + i for i in range(10)])
        expected = compute_ema(candles, 3) - compute_ema(candles, 6)
        assert compute_macd(candles, fast=3, slow=6) == expected

    def test_min_history(self) -> None:
        assert macd_min_history() == 26
        assert macd_min_history(10) == 10
