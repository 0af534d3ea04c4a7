"""Snapshot builder composing every derived record into one MarketSnapshot.

Data flow:
1. Validate that every mandatory interval has a candle series
2. Timeframe metrics for each configured interval
3. Headline price and indicators from the base interval
4. Percentage price changes, open-interest and funding records
5. Microstructure record from the trade tape and depth snapshot
6. Intraday trajectory (base interval) and longer-term context

Insufficient history never fails a build. An empty base series or a
missing mandatory interval does, because that is a contract violation by
the data-acquisition layer rather than a "not enough history yet" state.
"""

import time
from collections.abc import Mapping
from types import MappingProxyType

from market.config import AppSettings
from market.data.models import CandleSeries, MarketInputs
from market.derivatives import compute_funding, compute_open_interest
from market.exceptions import EmptySeriesError, MissingTimeframeError
from market.indicators import compute_percentage_change
from market.logging import get_logger
from market.microstructure import compute_microstructure, compute_microstructure_async
from market.models import MarketSnapshot, MicrostructureRecord, TimeframeMetrics
from market.timeframes import (
    compute_all_timeframes,
    compute_all_timeframes_async,
    compute_timeframe_metrics,
)
from market.trajectory import TrajectoryGenerator

logger = get_logger(__name__)


def required_intervals(settings: AppSettings) -> list[str]:
    """Every interval a snapshot reads candles from, without duplicates, in a stable order.

    Covers the configured timeframes, the base and longer-term intervals and
    the intervals referenced by price-change horizons and OI price pairing.
    """
    tf = settings.timeframes
    ordered = [
        *tf.intervals,
        tf.base_interval,
        tf.longer_term_interval,
        *(interval for interval, _ in tf.price_change_horizons.values()),
        *(interval for interval, _ in settings.open_interest.price_reference.values()),
    ]
    return list(dict.fromkeys(ordered))


def current_time_ms() -> int:
    """Wall-clock time in Unix milliseconds."""
    return int(time.time() * 1000)


class SnapshotBuilder:
    """Builds immutable MarketSnapshot records from pre-fetched inputs.

    Args:
        settings: Application settings; every period, horizon and interval
            used in a build comes from here.
    """

    def __init__(self, settings: AppSettings) -> None:
        self._settings = settings
        self._trajectories = TrajectoryGenerator(settings.indicators, settings.trajectory)

    def build(
        self, symbol: str, inputs: MarketInputs, now_ms: int | None = None
    ) -> MarketSnapshot:
        """Build a snapshot synchronously.

        Args:
            symbol: Instrument symbol, carried into the snapshot as-is.
            inputs: Pre-fetched raw data.
            now_ms: Reference time for trade-flow horizons (Unix ms).
                Defaults to the current wall clock.

        Raises:
            MissingTimeframeError: A configured interval has no series.
            EmptySeriesError: The base interval's series is empty.
        """
        self._validate(inputs)
        timeframes = compute_all_timeframes(
            self._timeframe_inputs(inputs), self._settings.indicators
        )
        microstructure = compute_microstructure(
            inputs.trades,
            inputs.order_book,
            now_ms if now_ms is not None else current_time_ms(),
            self._settings.microstructure,
        )
        return self._assemble(symbol, inputs, timeframes, microstructure)

    async def build_async(
        self, symbol: str, inputs: MarketInputs, now_ms: int | None = None
    ) -> MarketSnapshot:
        """Same as ``build`` but fans timeframes and flow horizons out to worker threads."""
        self._validate(inputs)
        timeframes = await compute_all_timeframes_async(
            self._timeframe_inputs(inputs), self._settings.indicators
        )
        microstructure = await compute_microstructure_async(
            inputs.trades,
            inputs.order_book,
            now_ms if now_ms is not None else current_time_ms(),
            self._settings.microstructure,
        )
        return self._assemble(symbol, inputs, timeframes, microstructure)

    def _validate(self, inputs: MarketInputs) -> None:
        tf = self._settings.timeframes
        mandatory = [*tf.intervals, tf.base_interval, tf.longer_term_interval]
        missing = [i for i in dict.fromkeys(mandatory) if i not in inputs.candles]
        if missing:
            raise MissingTimeframeError(f"No candle series for intervals: {missing}")
        if not inputs.candles[tf.base_interval]:
            raise EmptySeriesError(f"Base interval {tf.base_interval} has no candles")

    def _timeframe_inputs(self, inputs: MarketInputs) -> dict[str, CandleSeries]:
        return {i: inputs.candles[i] for i in self._settings.timeframes.intervals}

    def _assemble(
        self,
        symbol: str,
        inputs: MarketInputs,
        timeframes: Mapping[str, TimeframeMetrics],
        microstructure: MicrostructureRecord,
    ) -> MarketSnapshot:
        tf = self._settings.timeframes
        base_candles = inputs.candles[tf.base_interval]

        base = timeframes.get(tf.base_interval)
        if base is None:
            base = compute_timeframe_metrics(
                tf.base_interval, base_candles, self._settings.indicators
            )

        price_changes = {
            label: compute_percentage_change(inputs.candles.get(interval, ()), bars_back)
            for label, (interval, bars_back) in tf.price_change_horizons.items()
        }

        snapshot = MarketSnapshot(
            symbol=symbol,
            current_price=base_candles[-1].close,
            current_ema=base.ema_fast,
            current_macd=base.macd,
            current_rsi=base.rsi_fast,
            price_changes=MappingProxyType(price_changes),
            timeframes=MappingProxyType(dict(timeframes)),
            open_interest=compute_open_interest(
                inputs.open_interest,
                inputs.open_interest_history,
                inputs.candles,
                self._settings.open_interest,
            ),
            funding=compute_funding(
                inputs.funding, inputs.funding_history, self._settings.funding
            ),
            microstructure=microstructure,
            intraday=self._trajectories.intraday(base_candles),
            longer_term=self._trajectories.longer_term(
                inputs.candles[tf.longer_term_interval]
            ),
        )

        logger.info(
            "snapshot_built",
            symbol=symbol,
            current_price=str(snapshot.current_price),
            timeframes=list(snapshot.timeframes),
            intraday_points=len(snapshot.intraday.mid_prices),
        )
        return snapshot
