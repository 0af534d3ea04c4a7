"""Custom exceptions for the market snapshot engine.

Insufficient history is never an error here: indicators return their
zero sentinel instead. These exceptions cover contract violations by the
data-acquisition layer and failures raised by data sources.
"""


class MarketDataError(Exception):
    """Base exception for all market data errors."""


class EmptySeriesError(MarketDataError):
    """Raised when a mandatory candle series is empty (e.g. the base interval)."""


class MissingTimeframeError(MarketDataError):
    """Raised when a configured interval has no candle series in the input mapping."""


class DataSourceError(MarketDataError):
    """Raised by a data source when a fetch fails."""
