"""Abstract market data source interface.

Defines the contract for data-acquisition collaborators. The snapshot
service depends only on this interface; HTTP transport, authentication,
rate limiting and venue-specific decoding live in concrete implementations
outside this package.

All history methods return records ordered oldest-first.
"""

from abc import ABC, abstractmethod

from market.data.models import (
    Candle,
    DepthSnapshot,
    FundingRatePoint,
    FundingRateReading,
    OpenInterestPoint,
    Trade,
)


class MarketDataSource(ABC):
    """Abstract base class for market data providers."""

    @abstractmethod
    async def fetch_candles(self, symbol: str, interval: str, limit: int) -> list[Candle]:
        """Fetch the most recent ``limit`` candles for an interval label (e.g. "3m")."""
        ...

    @abstractmethod
    async def fetch_trades(self, symbol: str, since_ms: int) -> list[Trade]:
        """Fetch the trade tape from ``since_ms`` up to now."""
        ...

    @abstractmethod
    async def fetch_order_book(self, symbol: str, depth: int) -> DepthSnapshot:
        """Fetch the top ``depth`` levels of each side of the book."""
        ...

    @abstractmethod
    async def fetch_open_interest(self, symbol: str) -> OpenInterestPoint:
        """Fetch the latest single open-interest reading."""
        ...

    @abstractmethod
    async def fetch_open_interest_history(
        self, symbol: str, granularity: str, limit: int
    ) -> list[OpenInterestPoint]:
        """Fetch open-interest history at a granularity (e.g. "5m", "4h")."""
        ...

    @abstractmethod
    async def fetch_funding_rate(self, symbol: str) -> FundingRateReading:
        """Fetch the latest funding rate and next funding time."""
        ...

    @abstractmethod
    async def fetch_funding_rate_history(
        self, symbol: str, limit: int
    ) -> list[FundingRatePoint]:
        """Fetch the most recent ``limit`` funding rate records."""
        ...
