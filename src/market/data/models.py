"""Raw input models consumed by the indicator and microstructure engine.

CRITICAL: All monetary values use Decimal. Never use float for prices, quantities, or rates.
All records are frozen: the engine never mutates its inputs.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class Candle:
    """A single OHLCV candle.

    Within a series, index order is time order (oldest first). Ordering is
    the caller's responsibility and is not verified.
    """

    open_time_ms: int
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal
    close_time_ms: int

    @classmethod
    def from_row(cls, row: Sequence) -> "Candle":
        """Build a candle from ``[open_time, open, high, low, close, volume, close_time]``.

        Numeric fields may be str, int or float; they are routed through
        ``str`` so floats do not leak binary noise into the Decimal.
        """
        return cls(
            open_time_ms=int(row[0]),
            open=Decimal(str(row[1])),
            high=Decimal(str(row[2])),
            low=Decimal(str(row[3])),
            close=Decimal(str(row[4])),
            volume=Decimal(str(row[5])),
            close_time_ms=int(row[6]),
        )


#: Ordered candles, oldest first. Empty and short series are valid inputs.
CandleSeries = Sequence[Candle]


@dataclass(frozen=True)
class Trade:
    """A single aggregated trade from the tape.

    ``buyer_is_maker`` True means the buyer's order was resting, so the
    trade was initiated by a seller.
    """

    quantity: Decimal
    price: Decimal
    buyer_is_maker: bool
    timestamp_ms: int


@dataclass(frozen=True)
class BookLevel:
    """One price level of an order book side."""

    price: Decimal
    quantity: Decimal


@dataclass(frozen=True)
class DepthSnapshot:
    """Order book depth, best level first on each side."""

    bids: tuple[BookLevel, ...] = ()
    asks: tuple[BookLevel, ...] = ()

    @classmethod
    def from_pairs(
        cls,
        bids: Sequence[Sequence],
        asks: Sequence[Sequence],
    ) -> "DepthSnapshot":
        """Build a snapshot from ``[[price, qty], ...]`` pairs per side."""
        return cls(
            bids=tuple(BookLevel(Decimal(str(p)), Decimal(str(q))) for p, q in bids),
            asks=tuple(BookLevel(Decimal(str(p)), Decimal(str(q))) for p, q in asks),
        )


@dataclass(frozen=True)
class OpenInterestPoint:
    """A single open-interest reading."""

    value: Decimal
    timestamp_ms: int


@dataclass(frozen=True)
class FundingRatePoint:
    """A single historical funding rate record."""

    rate: Decimal
    timestamp_ms: int


@dataclass(frozen=True)
class FundingRateReading:
    """Latest funding rate with its next scheduled settlement time."""

    rate: Decimal
    next_funding_time_ms: int


@dataclass(frozen=True)
class MarketInputs:
    """Everything a single snapshot computation consumes.

    Candles are mandatory for every configured interval. All other inputs
    are optional: missing ones produce zero-valued sub-records.
    """

    candles: Mapping[str, CandleSeries]
    trades: Sequence[Trade] = ()
    order_book: DepthSnapshot | None = None
    open_interest: OpenInterestPoint | None = None
    open_interest_history: Mapping[str, Sequence[OpenInterestPoint]] = field(
        default_factory=dict
    )
    funding: FundingRateReading | None = None
    funding_history: Sequence[FundingRatePoint] = ()
