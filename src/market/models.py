"""Derived metric records and the aggregate MarketSnapshot.

CRITICAL: All monetary and indicator values use Decimal. Never use float.

Every record is frozen and holds tuples / read-only mappings, so a
snapshot handed to a reporting collaborator cannot be altered after it
has been built. ``to_dict()`` serializes Decimal values as strings for
JSON transport.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType

_ZERO = Decimal("0")


def _strs(values: tuple[Decimal, ...]) -> list[str]:
    return [str(v) for v in values]


@dataclass(frozen=True)
class TimeframeMetrics:
    """Indicator readings for one interval label.

    Period defaults: RSI 7 / 14, MACD 12-26, EMA 20 / 60, Bollinger 20 x 2 sigma,
    ATR 14, realized volatility 20, volume average 20.

    Fields whose minimum history was not met hold Decimal("0");
    ``available`` names the fields that carry a real reading so callers can
    tell "indicator is zero" from "not yet computable".
    """

    interval: str
    candle_count: int = 0
    close: Decimal = _ZERO
    rsi_fast: Decimal = _ZERO
    rsi_slow: Decimal = _ZERO
    macd: Decimal = _ZERO
    ema_fast: Decimal = _ZERO
    ema_slow: Decimal = _ZERO
    bollinger_width: Decimal = _ZERO
    atr: Decimal = _ZERO
    realized_vol: Decimal = _ZERO
    current_volume: Decimal = _ZERO
    average_volume: Decimal = _ZERO
    available: frozenset[str] = frozenset()

    def is_available(self, name: str) -> bool:
        """Return True if ``name`` holds a computed value rather than the sentinel."""
        return name in self.available

    def to_dict(self) -> dict:
        """Serialize to JSON-safe dict with Decimal values as strings."""
        return {
            "interval": self.interval,
            "candle_count": self.candle_count,
            "close": str(self.close),
            "rsi_fast": str(self.rsi_fast),
            "rsi_slow": str(self.rsi_slow),
            "macd": str(self.macd),
            "ema_fast": str(self.ema_fast),
            "ema_slow": str(self.ema_slow),
            "bollinger_width": str(self.bollinger_width),
            "atr": str(self.atr),
            "realized_vol": str(self.realized_vol),
            "current_volume": str(self.current_volume),
            "average_volume": str(self.average_volume),
            "available": sorted(self.available),
        }


@dataclass(frozen=True)
class IntradayTrajectory:
    """Trailing indicator readings for the base interval, oldest first.

    Sequences may be shorter than ``mid_prices``: an indicator only starts
    contributing once its minimum history is reached, so element k of two
    sequences does not necessarily refer to the same candle.
    """

    mid_prices: tuple[Decimal, ...] = ()
    ema_values: tuple[Decimal, ...] = ()
    macd_values: tuple[Decimal, ...] = ()
    rsi_fast_values: tuple[Decimal, ...] = ()
    rsi_slow_values: tuple[Decimal, ...] = ()

    def to_dict(self) -> dict:
        return {
            "mid_prices": _strs(self.mid_prices),
            "ema_values": _strs(self.ema_values),
            "macd_values": _strs(self.macd_values),
            "rsi_fast_values": _strs(self.rsi_fast_values),
            "rsi_slow_values": _strs(self.rsi_slow_values),
        }


@dataclass(frozen=True)
class LongerTermContext:
    """Single-point readings plus MACD / slow-RSI trajectories for the longer-term interval.

    Period defaults: EMA 20 / 50, ATR 3 / 14. ``average_volume`` is the mean
    over the whole series.
    """

    ema_fast: Decimal = _ZERO
    ema_slow: Decimal = _ZERO
    atr_fast: Decimal = _ZERO
    atr_slow: Decimal = _ZERO
    current_volume: Decimal = _ZERO
    average_volume: Decimal = _ZERO
    macd_values: tuple[Decimal, ...] = ()
    rsi_slow_values: tuple[Decimal, ...] = ()

    def to_dict(self) -> dict:
        return {
            "ema_fast": str(self.ema_fast),
            "ema_slow": str(self.ema_slow),
            "atr_fast": str(self.atr_fast),
            "atr_slow": str(self.atr_slow),
            "current_volume": str(self.current_volume),
            "average_volume": str(self.average_volume),
            "macd_values": _strs(self.macd_values),
            "rsi_slow_values": _strs(self.rsi_slow_values),
        }


@dataclass(frozen=True)
class FlowMetrics:
    """Trade-flow aggregation over one lookback horizon."""

    horizon_minutes: int
    buy_volume: Decimal = _ZERO
    sell_volume: Decimal = _ZERO
    cvd: Decimal = _ZERO  # buy_volume - sell_volume
    ofi: Decimal = _ZERO  # cvd / total volume, in [-1, 1]
    trade_count: int = 0

    def to_dict(self) -> dict:
        return {
            "horizon_minutes": self.horizon_minutes,
            "buy_volume": str(self.buy_volume),
            "sell_volume": str(self.sell_volume),
            "cvd": str(self.cvd),
            "ofi": str(self.ofi),
            "trade_count": self.trade_count,
        }


@dataclass(frozen=True)
class MicrostructureRecord:
    """Point-in-time order-flow and order-book measures."""

    flows: tuple[FlowMetrics, ...] = ()
    book_imbalance: Decimal = _ZERO
    micro_price: Decimal = _ZERO
    book_depth: int = 10

    def flow(self, horizon_minutes: int) -> FlowMetrics:
        """Return the flow for a horizon, or a zero-valued record if it was not computed."""
        for flow in self.flows:
            if flow.horizon_minutes == horizon_minutes:
                return flow
        return FlowMetrics(horizon_minutes=horizon_minutes)

    def to_dict(self) -> dict:
        return {
            "flows": [f.to_dict() for f in self.flows],
            "book_imbalance": str(self.book_imbalance),
            "micro_price": str(self.micro_price),
            "book_depth": self.book_depth,
        }


@dataclass(frozen=True)
class OpenInterestDelta:
    """Open-interest change at one granularity paired with the price change over it."""

    granularity: str
    delta: Decimal = _ZERO
    price_delta: Decimal = _ZERO

    def to_dict(self) -> dict:
        return {
            "granularity": self.granularity,
            "delta": str(self.delta),
            "price_delta": str(self.price_delta),
        }


@dataclass(frozen=True)
class OpenInterestRecord:
    """Latest and average open interest with per-granularity deltas."""

    latest: Decimal = _ZERO
    average: Decimal = _ZERO
    timestamp_ms: int = 0
    deltas: tuple[OpenInterestDelta, ...] = ()

    def delta_for(self, granularity: str) -> OpenInterestDelta:
        """Return the delta for a granularity, or a zero-valued record if absent."""
        for delta in self.deltas:
            if delta.granularity == granularity:
                return delta
        return OpenInterestDelta(granularity=granularity)

    def to_dict(self) -> dict:
        return {
            "latest": str(self.latest),
            "average": str(self.average),
            "timestamp_ms": self.timestamp_ms,
            "deltas": [d.to_dict() for d in self.deltas],
        }


@dataclass(frozen=True)
class FundingRecord:
    """Current funding rate and its recent slope."""

    rate: Decimal = _ZERO
    slope_per_hour: Decimal = _ZERO
    next_funding_time_ms: int = 0

    def to_dict(self) -> dict:
        return {
            "rate": str(self.rate),
            "slope_per_hour": str(self.slope_per_hour),
            "next_funding_time_ms": self.next_funding_time_ms,
        }


@dataclass(frozen=True)
class MarketSnapshot:
    """Aggregate root: every derived measurement for one instrument at one moment.

    Built exactly once per invocation by SnapshotBuilder and never mutated.
    Headline indicators come from the base interval's TimeframeMetrics.
    """

    symbol: str
    current_price: Decimal
    current_ema: Decimal
    current_macd: Decimal
    current_rsi: Decimal
    price_changes: Mapping[str, Decimal] = field(
        default_factory=lambda: MappingProxyType({})
    )
    timeframes: Mapping[str, TimeframeMetrics] = field(
        default_factory=lambda: MappingProxyType({})
    )
    open_interest: OpenInterestRecord = OpenInterestRecord()
    funding: FundingRecord = FundingRecord()
    microstructure: MicrostructureRecord = MicrostructureRecord()
    intraday: IntradayTrajectory = IntradayTrajectory()
    longer_term: LongerTermContext = LongerTermContext()

    def to_dict(self) -> dict:
        """Serialize the whole snapshot to a JSON-safe dict."""
        return {
            "symbol": self.symbol,
            "current_price": str(self.current_price),
            "current_ema": str(self.current_ema),
            "current_macd": str(self.current_macd),
            "current_rsi": str(self.current_rsi),
            "price_changes": {k: str(v) for k, v in self.price_changes.items()},
            "timeframes": {k: v.to_dict() for k, v in self.timeframes.items()},
            "open_interest": self.open_interest.to_dict(),
            "funding": self.funding.to_dict(),
            "microstructure": self.microstructure.to_dict(),
            "intraday": self.intraday.to_dict(),
            "longer_term": self.longer_term.to_dict(),
        }
