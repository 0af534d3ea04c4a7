"""Volume averages and simple price change measures over a candle series.

CRITICAL: All values use Decimal. Never use float for volumes or prices.
"""

from decimal import Decimal

from market.data.models import CandleSeries

_ZERO = Decimal("0")


def compute_volume_average(
    candles: CandleSeries, period: int = 20
) -> tuple[Decimal, Decimal]:
    """Return the current volume and the average volume.

    The average covers the last ``period`` candles, or every candle when
    fewer than ``period`` exist (graceful degradation instead of zero).

    Args:
        candles: Candle series ordered oldest-first.
        period: Averaging window.

    Returns:
        Tuple of (current_volume, average_volume). Both are Decimal("0")
        for an empty series.
    """
    if not candles:
        return _ZERO, _ZERO

    current = candles[-1].volume
    window = candles[-period:] if 0 < period <= len(candles) else candles
    average = sum((c.volume for c in window), _ZERO) / Decimal(len(window))
    return current, average


def compute_price_delta(candles: CandleSeries, bars_back: int) -> Decimal:
    """Absolute change of the last close versus the close ``bars_back`` candles earlier.

    Returns:
        Price delta, or Decimal("0") if ``bars_back <= 0`` or the series
        has no candle ``bars_back`` positions before the last one.
    """
    if bars_back <= 0 or len(candles) <= bars_back:
        return _ZERO

    latest = candles[-1].close
    reference = candles[-1 - bars_back].close
    return latest - reference


def compute_percentage_change(candles: CandleSeries, bars_back: int) -> Decimal:
    """Percentage change of the last close versus the close ``bars_back`` candles earlier.

    Returns:
        Change in percent (1.5 means +1.5%), or Decimal("0") if the series
        is too short, ``bars_back <= 0`` or the reference close is zero.
    """
    if bars_back <= 0 or len(candles) <= bars_back:
        return _ZERO

    latest = candles[-1].close
    reference = candles[-1 - bars_back].close
    if reference == _ZERO:
        return _ZERO

    return (latest - reference) / reference * Decimal("100")
