"""Market data service: fetch every input concurrently, then build a snapshot.

Candle series are mandatory: a failed candle fetch propagates to the
caller. Every other input is optional and degrades to an empty value
(logged at WARNING) so a partial snapshot is still produced.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TYPE_CHECKING, TypeVar

from market.config import AppSettings
from market.data.models import MarketInputs
from market.logging import get_logger, setup_logging, snapshot_context
from market.snapshot import SnapshotBuilder, current_time_ms, required_intervals

if TYPE_CHECKING:
    from market.data.source import MarketDataSource
    from market.models import MarketSnapshot

logger = get_logger(__name__)

T = TypeVar("T")

_MS_PER_MINUTE = 60_000


class MarketDataService:
    """Coordinates a data source and the SnapshotBuilder.

    Args:
        source: Data-acquisition collaborator.
        settings: Application settings shared with the builder.
    """

    def __init__(self, source: MarketDataSource, settings: AppSettings) -> None:
        self._source = source
        self._settings = settings
        self._builder = SnapshotBuilder(settings)

    @classmethod
    def from_settings(
        cls, source: MarketDataSource, settings: AppSettings | None = None
    ) -> MarketDataService:
        """Process entry point: load settings, configure logging, build the service.

        Args:
            source: Data-acquisition collaborator.
            settings: Preloaded settings; read from the environment when None.
        """
        settings = settings or AppSettings()
        setup_logging(settings.log_level, settings.log_format)
        logger.info(
            "market_data_service_configured",
            intervals=required_intervals(settings),
            log_level=settings.log_level,
        )
        return cls(source, settings)

    async def get_snapshot(self, symbol: str, now_ms: int | None = None) -> MarketSnapshot:
        """Fetch all inputs for ``symbol`` and build its snapshot.

        Args:
            symbol: Instrument symbol as understood by the data source.
            now_ms: Reference time (Unix ms); defaults to the wall clock.

        Raises:
            MarketDataError: A candle fetch failed or the base series is empty.
        """
        now = now_ms if now_ms is not None else current_time_ms()
        with snapshot_context(symbol):
            inputs = await self.fetch_inputs(symbol, now)
            return await self._builder.build_async(symbol, inputs, now)

    async def fetch_inputs(self, symbol: str, now_ms: int) -> MarketInputs:
        """Fetch candles and optional market inputs concurrently."""
        tf = self._settings.timeframes
        oi = self._settings.open_interest
        micro = self._settings.microstructure

        intervals = required_intervals(self._settings)
        tasks = [
            asyncio.create_task(
                self._source.fetch_candles(symbol, interval, tf.limit_for(interval))
            )
            for interval in intervals
        ]
        try:
            series = await asyncio.gather(*tasks)
        except Exception:
            # Cancel sibling fetches so none outlives the failed call.
            for task in tasks:
                task.cancel()
            raise
        candles = dict(zip(intervals, series))

        max_horizon = max(micro.flow_horizons_minutes, default=0)
        granularities = list(
            dict.fromkeys([*oi.price_reference, oi.average_granularity])
        )

        trades, order_book, latest_oi, funding, funding_history, *oi_histories = (
            await asyncio.gather(
                self._optional(
                    "trades",
                    self._source.fetch_trades(
                        symbol, now_ms - max_horizon * _MS_PER_MINUTE
                    ),
                    [],
                ),
                self._optional(
                    "order_book",
                    self._source.fetch_order_book(symbol, micro.book_depth),
                    None,
                ),
                self._optional(
                    "open_interest", self._source.fetch_open_interest(symbol), None
                ),
                self._optional(
                    "funding_rate", self._source.fetch_funding_rate(symbol), None
                ),
                self._optional(
                    "funding_rate_history",
                    self._source.fetch_funding_rate_history(
                        symbol, self._settings.funding.history_limit
                    ),
                    [],
                ),
                *(
                    self._optional(
                        f"open_interest_history_{granularity}",
                        self._source.fetch_open_interest_history(
                            symbol, granularity, oi.history_limit
                        ),
                        [],
                    )
                    for granularity in granularities
                ),
            )
        )

        logger.debug(
            "market_inputs_fetched",
            intervals=intervals,
            trades=len(trades),
            has_order_book=order_book is not None,
        )

        return MarketInputs(
            candles=candles,
            trades=trades,
            order_book=order_book,
            open_interest=latest_oi,
            open_interest_history=dict(zip(granularities, oi_histories)),
            funding=funding,
            funding_history=funding_history,
        )

    async def _optional(self, name: str, fetch: Awaitable[T], default: T) -> T:
        """Await an optional fetch, returning ``default`` if it fails."""
        try:
            return await fetch
        except Exception as e:
            logger.warning(f"{name}_unavailable", error=str(e), exc_info=True)
            return default
