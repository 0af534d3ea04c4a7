"""Trend indicators: EMA and MACD over a candle series.

Both return a single point value for the most recent candle. When the
series is shorter than the indicator's minimum history the result is the
``Decimal("0")`` sentinel, meaning "not yet computable" rather than a
measured zero. Callers that must tell the two apart compare the series
length against ``ema_min_history`` / ``macd_min_history``.

CRITICAL: All computations use Decimal. Never use float.
"""

from decimal import Decimal

from market.data.models import CandleSeries

_ZERO = Decimal("0")


def ema_min_history(period: int) -> int:
    """Minimum number of candles before ``compute_ema`` yields a value."""
    return period


def macd_min_history(slow: int = 26) -> int:
    """Minimum number of candles before ``compute_macd`` yields a value."""
    return slow


def compute_ema(candles: CandleSeries, period: int) -> Decimal:
    """Compute the Exponential Moving Average of closes, seeded with an SMA.

    Seed = simple mean of the first ``period`` closes. Every later candle
    applies the recursive update:
        multiplier = 2 / (period + 1)
        ema = (close - ema) * multiplier + ema

    Intermediate results keep full Decimal context precision, so a constant
    series returns that constant exactly at any magnitude.

    Args:
        candles: Candle series ordered oldest-first.
        period: EMA period.

    Returns:
        EMA value at the last candle, or Decimal("0") if
        ``len(candles) < period``.
    """
    if period <= 0 or len(candles) < ema_min_history(period):
        return _ZERO

    ema = sum((c.close for c in candles[:period]), _ZERO) / Decimal(period)

    multiplier = Decimal("2") / (Decimal(period) + Decimal("1"))
    for candle in candles[period:]:
        ema = (candle.close - ema) * multiplier + ema

    return ema


def compute_macd(candles: CandleSeries, fast: int = 12, slow: int = 26) -> Decimal:
    """Compute the MACD line: EMA(fast) - EMA(slow).

    Both EMAs run over the full series (not a truncated prefix), so the
    fast EMA is seeded at index ``fast`` and warmed up over every later
    candle, exactly as a standalone ``compute_ema(candles, fast)`` would.

    Returns:
        MACD value, or Decimal("0") if ``len(candles) < slow``.
    """
    if len(candles) < macd_min_history(slow):
        return _ZERO

    return compute_ema(candles, fast) - compute_ema(candles, slow)
