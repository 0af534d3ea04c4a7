"""Timeframe metrics orchestrator.

Applies the indicator library with one fixed parameter set to every
configured interval and collects one TimeframeMetrics record per label.
Intervals are independent of each other, so the async variant fans them
out to worker threads and joins the results without any shared state.
"""

import asyncio
from collections.abc import Mapping

from market.config import IndicatorSettings
from market.data.models import CandleSeries
from market.indicators import (
    atr_min_history,
    bollinger_min_history,
    compute_atr,
    compute_bollinger_width,
    compute_ema,
    compute_macd,
    compute_realized_volatility,
    compute_rsi,
    compute_volume_average,
    ema_min_history,
    macd_min_history,
    realized_vol_min_history,
    rsi_min_history,
)
from market.logging import get_logger
from market.models import TimeframeMetrics

logger = get_logger(__name__)


def _available_fields(count: int, settings: IndicatorSettings) -> frozenset[str]:
    """Names of the TimeframeMetrics fields whose minimum history is met by ``count`` candles."""
    thresholds = {
        "close": 1,
        "current_volume": 1,
        "average_volume": 1,
        "rsi_fast": rsi_min_history(settings.rsi_fast),
        "rsi_slow": rsi_min_history(settings.rsi_slow),
        "macd": macd_min_history(settings.macd_slow),
        "ema_fast": ema_min_history(settings.ema_fast),
        "ema_slow": ema_min_history(settings.ema_slow),
        "bollinger_width": bollinger_min_history(settings.bollinger_period),
        "atr": atr_min_history(settings.atr_period),
        "realized_vol": realized_vol_min_history(settings.realized_vol_period),
    }
    return frozenset(name for name, needed in thresholds.items() if count >= needed)


def compute_timeframe_metrics(
    interval: str,
    candles: CandleSeries,
    settings: IndicatorSettings,
) -> TimeframeMetrics:
    """Compute the full indicator set for one interval.

    An empty series yields an all-zero record rather than an error.

    Args:
        interval: Interval label (e.g. "3m").
        candles: Candle series for that interval, oldest first.
        settings: Indicator periods.

    Returns:
        TimeframeMetrics for ``interval``.
    """
    if not candles:
        return TimeframeMetrics(interval=interval)

    current_volume, average_volume = compute_volume_average(
        candles, settings.volume_period
    )

    return TimeframeMetrics(
        interval=interval,
        candle_count=len(candles),
        close=candles[-1].close,
        rsi_fast=compute_rsi(candles, settings.rsi_fast),
        rsi_slow=compute_rsi(candles, settings.rsi_slow),
        macd=compute_macd(candles, settings.macd_fast, settings.macd_slow),
        ema_fast=compute_ema(candles, settings.ema_fast),
        ema_slow=compute_ema(candles, settings.ema_slow),
        bollinger_width=compute_bollinger_width(
            candles, settings.bollinger_period, settings.bollinger_k
        ),
        atr=compute_atr(candles, settings.atr_period),
        realized_vol=compute_realized_volatility(candles, settings.realized_vol_period),
        current_volume=current_volume,
        average_volume=average_volume,
        available=_available_fields(len(candles), settings),
    )


def compute_all_timeframes(
    candles_by_interval: Mapping[str, CandleSeries],
    settings: IndicatorSettings,
) -> dict[str, TimeframeMetrics]:
    """Compute TimeframeMetrics for every interval in the mapping.

    Returns:
        Dict mapping interval label -> TimeframeMetrics, in input order.
    """
    result = {
        interval: compute_timeframe_metrics(interval, candles, settings)
        for interval, candles in candles_by_interval.items()
    }
    logger.debug("timeframe_metrics_computed", intervals=list(result))
    return result


async def compute_all_timeframes_async(
    candles_by_interval: Mapping[str, CandleSeries],
    settings: IndicatorSettings,
) -> dict[str, TimeframeMetrics]:
    """Concurrent variant of ``compute_all_timeframes``.

    Each interval runs in a worker thread via asyncio.to_thread; results
    are joined with asyncio.gather and are identical to the sync version.
    """
    intervals = list(candles_by_interval)
    metrics = await asyncio.gather(
        *(
            asyncio.to_thread(
                compute_timeframe_metrics,
                interval,
                candles_by_interval[interval],
                settings,
            )
            for interval in intervals
        )
    )
    logger.debug("timeframe_metrics_computed", intervals=intervals, concurrent=True)
    return dict(zip(intervals, metrics))
