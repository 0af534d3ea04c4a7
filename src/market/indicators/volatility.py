"""Volatility indicators: ATR, Bollinger band width and realized volatility.

All three are non-negative for positive price series and return the
``Decimal("0")`` sentinel on insufficient history.

CRITICAL: All computations use Decimal. Never use float.
"""

from collections.abc import Sequence
from decimal import Decimal

from market.data.models import Candle, CandleSeries

_ZERO = Decimal("0")


def atr_min_history(period: int) -> int:
    """Minimum number of candles before ``compute_atr`` yields a value."""
    return period + 1


def bollinger_min_history(period: int) -> int:
    """Minimum number of candles before ``compute_bollinger_width`` yields a value."""
    return period


def realized_vol_min_history(period: int) -> int:
    """Minimum number of candles before ``compute_realized_volatility`` yields a value."""
    return period + 1


def _true_range(candle: Candle, prev_close: Decimal) -> Decimal:
    """max(high - low, |high - prev_close|, |low - prev_close|)."""
    return max(
        candle.high - candle.low,
        abs(candle.high - prev_close),
        abs(candle.low - prev_close),
    )


def _mean_and_std(values: Sequence[Decimal]) -> tuple[Decimal, Decimal]:
    """Return the mean and population standard deviation of ``values``."""
    n = Decimal(len(values))
    mean = sum(values, _ZERO) / n
    variance = sum(((v - mean) ** 2 for v in values), _ZERO) / n
    return mean, variance.sqrt()


def compute_atr(candles: CandleSeries, period: int) -> Decimal:
    """Compute Average True Range with Wilder smoothing.

    Candle 0 has no previous close and therefore no true range. The seed
    is the mean true range of candles 1..period; each later candle applies
        atr = (atr * (period - 1) + tr) / period

    Returns:
        ATR at the last candle, or Decimal("0") if ``len(candles) <= period``.
    """
    if period <= 0 or len(candles) < atr_min_history(period):
        return _ZERO

    true_ranges = [
        _true_range(candles[i], candles[i - 1].close) for i in range(1, len(candles))
    ]

    p = Decimal(period)
    atr = sum(true_ranges[:period], _ZERO) / p
    for tr in true_ranges[period:]:
        atr = (atr * (p - 1) + tr) / p

    return atr


def compute_bollinger_width(
    candles: CandleSeries,
    period: int = 20,
    k: Decimal | int = 2,
) -> Decimal:
    """Compute relative Bollinger band width over the last ``period`` closes.

    Formula: (upper - lower) / mean = 2 * k * sigma / mean, with sigma the
    population standard deviation.

    Returns:
        Band width, or Decimal("0") if ``len(candles) < period`` or the
        mean close is zero.
    """
    if period <= 0 or len(candles) < bollinger_min_history(period):
        return _ZERO

    closes = [c.close for c in candles[-period:]]
    mean, std_dev = _mean_and_std(closes)
    if mean == _ZERO:
        return _ZERO

    k = Decimal(k)
    upper = mean + k * std_dev
    lower = mean - k * std_dev
    return (upper - lower) / mean


def compute_realized_volatility(candles: CandleSeries, period: int = 20) -> Decimal:
    """Compute population standard deviation of log returns over the last ``period`` closes.

    A step is skipped when it is index 0 or when either close is not
    strictly positive (the log return is undefined).

    Returns:
        Realized volatility (per bar, not annualized), or Decimal("0") if
        ``len(candles) <= period`` or no valid return exists.
    """
    if period <= 0 or len(candles) < realized_vol_min_history(period):
        return _ZERO

    returns: list[Decimal] = []
    for i in range(len(candles) - period, len(candles)):
        if i == 0:
            continue
        prev = candles[i - 1].close
        current = candles[i].close
        if prev <= _ZERO or current <= _ZERO:
            continue
        returns.append((current / prev).ln())

    if not returns:
        return _ZERO

    _, std_dev = _mean_and_std(returns)
    return std_dev
