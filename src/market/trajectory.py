"""Windowed trajectory generator.

Produces "what would this indicator have read at each of the last N bars"
by recomputing every indicator from scratch over the expanding prefix
``candles[:i + 1]`` for each index ``i`` of the trailing window. This is
O(window x len(candles)) per indicator, which is fine for windows of ~10
and series of a few hundred candles.

An indicator contributes a value at index ``i`` only once the prefix is
long enough (``i >= min_history - 1``). Sequences therefore have
different lengths and are aligned on their most recent element, not on
their first.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from functools import partial

from market.config import IndicatorSettings, TrajectorySettings
from market.data.models import CandleSeries
from market.indicators import (
    compute_atr,
    compute_ema,
    compute_macd,
    compute_rsi,
    compute_volume_average,
    ema_min_history,
    macd_min_history,
    rsi_min_history,
)
from market.models import IntradayTrajectory, LongerTermContext


@dataclass(frozen=True)
class TrackedIndicator:
    """An indicator to evaluate over each prefix of the trailing window.

    Attributes:
        name: Key of the produced sequence.
        min_history: Prefix length at which the indicator first has a value.
        compute: Function of a candle prefix returning the point value.
    """

    name: str
    min_history: int
    compute: Callable[[CandleSeries], Decimal]


def _last_close(candles: CandleSeries) -> Decimal:
    return candles[-1].close


def generate_trajectories(
    candles: CandleSeries,
    indicators: Sequence[TrackedIndicator],
    window: int = 10,
) -> dict[str, tuple[Decimal, ...]]:
    """Evaluate each indicator over expanding prefixes of the last ``window`` candles.

    Indices are processed oldest to newest. For index ``i`` every indicator
    whose ``min_history - 1 <= i`` is computed on ``candles[:i + 1]`` and
    appended to its sequence.

    Args:
        candles: Candle series ordered oldest-first.
        indicators: Indicators to track.
        window: Number of trailing candles (fewer if the series is shorter).

    Returns:
        Dict mapping indicator name -> tuple of values, oldest first.
    """
    values: dict[str, list[Decimal]] = {ind.name: [] for ind in indicators}
    if window <= 0:
        return {name: () for name in values}

    start = max(len(candles) - window, 0)
    for i in range(start, len(candles)):
        prefix = candles[: i + 1]
        for ind in indicators:
            if i >= ind.min_history - 1:
                values[ind.name].append(ind.compute(prefix))

    return {name: tuple(seq) for name, seq in values.items()}


class TrajectoryGenerator:
    """Builds the intraday trajectory and the longer-term context.

    Args:
        indicator_settings: Periods shared with the timeframe metrics
            (EMA fast, MACD fast/slow, RSI fast/slow).
        trajectory_settings: Window size and longer-term EMA/ATR periods.
    """

    def __init__(
        self,
        indicator_settings: IndicatorSettings,
        trajectory_settings: TrajectorySettings,
    ) -> None:
        self._indicators = indicator_settings
        self._settings = trajectory_settings

    def _macd(self) -> TrackedIndicator:
        s = self._indicators
        return TrackedIndicator(
            name="macd",
            min_history=macd_min_history(s.macd_slow),
            compute=partial(compute_macd, fast=s.macd_fast, slow=s.macd_slow),
        )

    def _rsi(self, name: str, period: int) -> TrackedIndicator:
        return TrackedIndicator(
            name=name,
            min_history=rsi_min_history(period),
            compute=partial(compute_rsi, period=period),
        )

    def intraday(self, candles: CandleSeries) -> IntradayTrajectory:
        """Trailing mid-price, EMA, MACD and both RSIs for the base interval.

        With default periods an indicator first appears at index 19 (EMA20),
        25 (MACD), 7 (RSI7) and 14 (RSI14).
        """
        s = self._indicators
        tracked = [
            TrackedIndicator(name="mid", min_history=1, compute=_last_close),
            TrackedIndicator(
                name="ema",
                min_history=ema_min_history(s.ema_fast),
                compute=partial(compute_ema, period=s.ema_fast),
            ),
            self._macd(),
            self._rsi("rsi_fast", s.rsi_fast),
            self._rsi("rsi_slow", s.rsi_slow),
        ]
        series = generate_trajectories(candles, tracked, self._settings.window)

        return IntradayTrajectory(
            mid_prices=series["mid"],
            ema_values=series["ema"],
            macd_values=series["macd"],
            rsi_fast_values=series["rsi_fast"],
            rsi_slow_values=series["rsi_slow"],
        )

    def longer_term(self, candles: CandleSeries) -> LongerTermContext:
        """Longer-term context: windowed MACD / slow RSI plus full-series point values.

        EMA, ATR and volume figures are computed once over the whole series;
        the average volume spans every candle, not a fixed window.
        """
        s = self._settings
        series = generate_trajectories(
            candles,
            [self._macd(), self._rsi("rsi_slow", self._indicators.rsi_slow)],
            s.window,
        )
        current_volume, average_volume = compute_volume_average(candles, len(candles))

        return LongerTermContext(
            ema_fast=compute_ema(candles, s.long_ema_fast),
            ema_slow=compute_ema(candles, s.long_ema_slow),
            atr_fast=compute_atr(candles, s.long_atr_fast),
            atr_slow=compute_atr(candles, s.long_atr_slow),
            current_volume=current_volume,
            average_volume=average_volume,
            macd_values=series["macd"],
            rsi_slow_values=series["rsi_slow"],
        )
