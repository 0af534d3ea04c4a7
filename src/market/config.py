"""Configuration system using pydantic-settings with environment variable loading.

Every orchestrator in the package receives these settings explicitly, so
tests can exercise arbitrary timeframe sets and indicator periods without
touching globals.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class IndicatorSettings(BaseSettings):
    """Indicator periods applied uniformly to every configured timeframe."""

    model_config = SettingsConfigDict(env_prefix="INDICATOR_")

    rsi_fast: int = 7
    rsi_slow: int = 14
    macd_fast: int = 12
    macd_slow: int = 26
    ema_fast: int = 20
    ema_slow: int = 60
    bollinger_period: int = 20
    bollinger_k: int = 2  # band width in standard deviations
    atr_period: int = 14
    realized_vol_period: int = 20
    volume_period: int = 20


class TimeframeSettings(BaseSettings):
    """Which candle intervals to analyze and which of them play special roles."""

    model_config = SettingsConfigDict(env_prefix="TIMEFRAME_")

    intervals: list[str] = Field(default_factory=lambda: ["1m", "3m", "15m", "1h", "4h"])
    base_interval: str = "3m"  # current price, headline indicators, intraday trajectory
    longer_term_interval: str = "4h"
    candle_limit: int = 200
    candle_limit_overrides: dict[str, int] = Field(default_factory=lambda: {"4h": 120})

    # label -> (interval, bars back) for the snapshot's percentage price changes
    price_change_horizons: dict[str, tuple[str, int]] = Field(
        default_factory=lambda: {"1h": ("1m", 60), "4h": ("1h", 4)}
    )

    def limit_for(self, interval: str) -> int:
        """Number of candles to request for ``interval``."""
        return self.candle_limit_overrides.get(interval, self.candle_limit)


class TrajectorySettings(BaseSettings):
    """Trailing-window sizes and longer-term context periods."""

    model_config = SettingsConfigDict(env_prefix="TRAJECTORY_")

    window: int = 10
    long_ema_fast: int = 20
    long_ema_slow: int = 50
    long_atr_fast: int = 3
    long_atr_slow: int = 14


class MicrostructureSettings(BaseSettings):
    """Trade-flow lookback horizons and order-book depth."""

    model_config = SettingsConfigDict(env_prefix="MICROSTRUCTURE_")

    flow_horizons_minutes: list[int] = Field(default_factory=lambda: [1, 3, 15])
    book_depth: int = 10


class OpenInterestSettings(BaseSettings):
    """Open-interest history granularities and their paired price references."""

    model_config = SettingsConfigDict(env_prefix="OPEN_INTEREST_")

    history_limit: int = 20
    # OI granularity -> (candle interval, bars back) used for the paired price delta
    price_reference: dict[str, tuple[str, int]] = Field(
        default_factory=lambda: {
            "5m": ("1m", 5),
            "15m": ("15m", 1),
            "1h": ("1h", 1),
            "4h": ("4h", 1),
        }
    )
    average_granularity: str = "4h"


class FundingSettings(BaseSettings):
    """Funding-rate history window used for the slope."""

    model_config = SettingsConfigDict(env_prefix="FUNDING_")

    history_limit: int = 8


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: str = "console"
    indicators: IndicatorSettings = IndicatorSettings()
    timeframes: TimeframeSettings = TimeframeSettings()
    trajectory: TrajectorySettings = TrajectorySettings()
    microstructure: MicrostructureSettings = MicrostructureSettings()
    open_interest: OpenInterestSettings = OpenInterestSettings()
    funding: FundingSettings = FundingSettings()
