"""Indicator library: stateless, deterministic functions over a candle series.

Every function returns the ``Decimal("0")`` sentinel when the series is
too short; the ``*_min_history`` helpers state the exact thresholds.
"""

from market.indicators.momentum import compute_rsi, rsi_min_history
from market.indicators.trend import (
    compute_ema,
    compute_macd,
    ema_min_history,
    macd_min_history,
)
from market.indicators.volatility import (
    atr_min_history,
    bollinger_min_history,
    compute_atr,
    compute_bollinger_width,
    compute_realized_volatility,
    realized_vol_min_history,
)
from market.indicators.volume import (
    compute_percentage_change,
    compute_price_delta,
    compute_volume_average,
)

__all__ = [
    "atr_min_history",
    "bollinger_min_history",
    "compute_atr",
    "compute_bollinger_width",
    "compute_ema",
    "compute_macd",
    "compute_percentage_change",
    "compute_price_delta",
    "compute_realized_volatility",
    "compute_rsi",
    "compute_volume_average",
    "ema_min_history",
    "macd_min_history",
    "realized_vol_min_history",
    "rsi_min_history",
]
