"""Shared test fixtures for the market snapshot engine."""

from collections.abc import Callable, Sequence
from decimal import Decimal

import pytest

from market.config import AppSettings
from market.data.models import Candle

CandleFactory = Callable[..., list[Candle]]


def _make_candles(
    closes: Sequence[Decimal | int | str],
    volumes: Sequence[Decimal | int | str] | None = None,
    range_offset: Decimal = Decimal("0"),
    start_ms: int = 1_700_000_000_000,
    interval_ms: int = 60_000,
) -> list[Candle]:
    """Create candles with controllable closes and volumes.

    Open equals close; high/low sit ``range_offset`` above/below the close.
    Volumes default to 1000 per candle.
    """
    if volumes is None:
        volumes = [Decimal("1000")] * len(closes)
    candles = []
    for i, (close, volume) in enumerate(zip(closes, volumes)):
        c = Decimal(str(close))
        candles.append(
            Candle(
                open_time_ms=start_ms + i * interval_ms,
                open=c,
                high=c + range_offset,
                low=c - range_offset,
                close=c,
                volume=Decimal(str(volume)),
                close_time_ms=start_ms + (i + 1) * interval_ms - 1,
            )
        )
    return candles


@pytest.fixture
def make_candles() -> CandleFactory:
    """Factory building candle series from close (and optional volume) lists."""
    return _make_candles


@pytest.fixture
def settings() -> AppSettings:
    """Return AppSettings with default periods and intervals."""
    return AppSettings(log_level="DEBUG")
