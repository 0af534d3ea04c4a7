"""Raw market data layer.

Provides the input data models (candles, trades, depth, open interest,
funding) and the abstract MarketDataSource contract that acquisition
collaborators implement.
"""

from market.data.models import (
    BookLevel,
    Candle,
    CandleSeries,
    DepthSnapshot,
    FundingRatePoint,
    FundingRateReading,
    MarketInputs,
    OpenInterestPoint,
    Trade,
)
from market.data.source import MarketDataSource

__all__ = [
    "BookLevel",
    "Candle",
    "CandleSeries",
    "DepthSnapshot",
    "FundingRatePoint",
    "FundingRateReading",
    "MarketDataSource",
    "MarketInputs",
    "OpenInterestPoint",
    "Trade",
]
