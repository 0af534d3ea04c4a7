"""Relative Strength Index with Wilder smoothing.

CRITICAL: All computations use Decimal. Never use float.
"""

from decimal import Decimal

from market.data.models import CandleSeries

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def rsi_min_history(period: int) -> int:
    """Minimum number of candles before ``compute_rsi`` yields a value."""
    return period + 1


def compute_rsi(candles: CandleSeries, period: int) -> Decimal:
    """Compute RSI over closes using Wilder-smoothed average gain and loss.

    Seeding: average gain/loss are the means of the first ``period``
    candle-to-candle changes, each change counting only on its own side.
    Every later change updates both averages:
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period
    where the non-applicable side contributes 0 for that step.

    If the final average loss is exactly zero the RSI saturates at 100.

    Args:
        candles: Candle series ordered oldest-first.
        period: RSI period (7 and 14 are used by the timeframe metrics).

    Returns:
        RSI in [0, 100], or Decimal("0") if ``len(candles) <= period``.
    """
    if period <= 0 or len(candles) < rsi_min_history(period):
        return _ZERO

    p = Decimal(period)

    gains = _ZERO
    losses = _ZERO
    for i in range(1, period + 1):
        change = candles[i].close - candles[i - 1].close
        if change > 0:
            gains += change
        else:
            losses -= change

    avg_gain = gains / p
    avg_loss = losses / p

    for i in range(period + 1, len(candles)):
        change = candles[i].close - candles[i - 1].close
        gain = change if change > 0 else _ZERO
        loss = -change if change < 0 else _ZERO
        avg_gain = (avg_gain * (p - 1) + gain) / p
        avg_loss = (avg_loss * (p - 1) + loss) / p

    if avg_loss == _ZERO:
        return _HUNDRED

    rs = avg_gain / avg_loss
    return _HUNDRED - _HUNDRED / (Decimal("1") + rs)
