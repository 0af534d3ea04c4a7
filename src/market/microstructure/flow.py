"""Trade-flow aggregation: cumulative volume delta (CVD) and order-flow imbalance (OFI).

A trade where the buyer was the resting (maker) side was initiated by a
seller and counts as sell volume; every other trade counts as buy volume.

CRITICAL: All values use Decimal. Never use float for volumes.
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal

from market.data.models import Trade
from market.models import FlowMetrics

_ZERO = Decimal("0")
_MS_PER_MINUTE = 60_000


def filter_trades_since(trades: Iterable[Trade], cutoff_ms: int) -> list[Trade]:
    """Return the trades at or after ``cutoff_ms``, preserving order."""
    return [t for t in trades if t.timestamp_ms >= cutoff_ms]


def compute_flow(trades: Sequence[Trade], horizon_minutes: int) -> FlowMetrics:
    """Aggregate buy/sell volume of an already-filtered trade tape.

    Formula:
        cvd = buy_volume - sell_volume
        ofi = cvd / (buy_volume + sell_volume), or 0 when total volume is 0

    Args:
        trades: Trades inside the horizon.
        horizon_minutes: Horizon label carried into the result.

    Returns:
        FlowMetrics. An empty tape yields cvd = ofi = 0.
    """
    buy_volume = _ZERO
    sell_volume = _ZERO
    for trade in trades:
        if trade.buyer_is_maker:
            sell_volume += trade.quantity
        else:
            buy_volume += trade.quantity

    cvd = buy_volume - sell_volume
    total = buy_volume + sell_volume
    ofi = cvd / total if total != _ZERO else _ZERO

    return FlowMetrics(
        horizon_minutes=horizon_minutes,
        buy_volume=buy_volume,
        sell_volume=sell_volume,
        cvd=cvd,
        ofi=ofi,
        trade_count=len(trades),
    )


def compute_flow_for_horizon(
    trades: Iterable[Trade], now_ms: int, horizon_minutes: int
) -> FlowMetrics:
    """Re-filter the tape to the last ``horizon_minutes`` before ``now_ms`` and aggregate it."""
    cutoff_ms = now_ms - horizon_minutes * _MS_PER_MINUTE
    return compute_flow(filter_trades_since(trades, cutoff_ms), horizon_minutes)
