"""Open-interest rate of change paired with price change over the same horizon.

For each configured granularity the OI delta is the difference of the two
most recent history points; the paired price delta compares closes of a
matching candle series a fixed number of bars apart.

CRITICAL: All values use Decimal. Never use float.
"""

from collections.abc import Mapping, Sequence
from decimal import Decimal

from market.config import OpenInterestSettings
from market.data.models import CandleSeries, OpenInterestPoint
from market.indicators import compute_price_delta
from market.models import OpenInterestDelta, OpenInterestRecord

_ZERO = Decimal("0")


def compute_history_delta(history: Sequence[OpenInterestPoint]) -> Decimal:
    """Last value minus second-to-last value, or Decimal("0") with fewer than 2 points."""
    if len(history) < 2:
        return _ZERO
    return history[-1].value - history[-2].value


def compute_average_open_interest(
    history: Sequence[OpenInterestPoint], latest: Decimal
) -> Decimal:
    """Mean of the history values, falling back to ``latest`` when history is empty."""
    if not history:
        return latest
    return sum((p.value for p in history), _ZERO) / Decimal(len(history))


def compute_open_interest(
    latest: OpenInterestPoint | None,
    history_by_granularity: Mapping[str, Sequence[OpenInterestPoint]],
    candles_by_interval: Mapping[str, CandleSeries],
    settings: OpenInterestSettings,
) -> OpenInterestRecord:
    """Build the open-interest record.

    Granularities with fewer than two history points get a zero OI delta
    and a zero price delta. A missing latest reading yields latest = 0 but
    the history-derived fields are still computed.

    Args:
        latest: Latest single open-interest reading, or None.
        history_by_granularity: OI history per granularity, oldest first.
        candles_by_interval: Candle series referenced by
            ``settings.price_reference``.
        settings: Granularity -> (interval, bars back) pairing and the
            granularity used for the average.

    Returns:
        OpenInterestRecord with one OpenInterestDelta per configured granularity.
    """
    latest_value = latest.value if latest is not None else _ZERO

    deltas: list[OpenInterestDelta] = []
    for granularity, (interval, bars_back) in settings.price_reference.items():
        history = history_by_granularity.get(granularity, ())
        if len(history) < 2:
            deltas.append(OpenInterestDelta(granularity=granularity))
            continue
        deltas.append(
            OpenInterestDelta(
                granularity=granularity,
                delta=compute_history_delta(history),
                price_delta=compute_price_delta(
                    candles_by_interval.get(interval, ()), bars_back
                ),
            )
        )

    return OpenInterestRecord(
        latest=latest_value,
        average=compute_average_open_interest(
            history_by_granularity.get(settings.average_granularity, ()),
            latest_value,
        ),
        timestamp_ms=latest.timestamp_ms if latest is not None else 0,
        deltas=tuple(deltas),
    )
