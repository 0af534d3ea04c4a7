"""Microstructure record assembly from a trade tape and a depth snapshot.

All values are point measurements computed fresh from the supplied
inputs; nothing is carried between invocations. Flow horizons are
independent, so the async variant computes them in worker threads and
joins with asyncio.gather.
"""

import asyncio
from collections.abc import Sequence

from market.config import MicrostructureSettings
from market.data.models import DepthSnapshot, Trade
from market.logging import get_logger
from market.microstructure.book import compute_book_imbalance, compute_micro_price
from market.microstructure.flow import compute_flow_for_horizon
from market.models import FlowMetrics, MicrostructureRecord

logger = get_logger(__name__)


def _build_record(
    flows: Sequence[FlowMetrics],
    order_book: DepthSnapshot | None,
    settings: MicrostructureSettings,
) -> MicrostructureRecord:
    if order_book is None:
        logger.debug("order_book_missing")

    record = MicrostructureRecord(
        flows=tuple(flows),
        book_imbalance=compute_book_imbalance(order_book, settings.book_depth),
        micro_price=compute_micro_price(order_book),
        book_depth=settings.book_depth,
    )
    logger.debug(
        "microstructure_computed",
        horizons=[f.horizon_minutes for f in record.flows],
        book_imbalance=str(record.book_imbalance),
        micro_price=str(record.micro_price),
    )
    return record


def compute_microstructure(
    trades: Sequence[Trade],
    order_book: DepthSnapshot | None,
    now_ms: int,
    settings: MicrostructureSettings,
) -> MicrostructureRecord:
    """Compute CVD/OFI per configured horizon plus book imbalance and micro-price.

    Args:
        trades: Trade tape, oldest first, covering at least the largest horizon.
        order_book: Depth snapshot, or None when unavailable.
        now_ms: Reference "now" in Unix milliseconds; each horizon keeps the
            trades at or after ``now_ms - horizon``.
        settings: Horizons and book depth.

    Returns:
        MicrostructureRecord. Missing inputs produce zero-valued fields.
    """
    flows = [
        compute_flow_for_horizon(trades, now_ms, minutes)
        for minutes in settings.flow_horizons_minutes
    ]
    return _build_record(flows, order_book, settings)


async def compute_microstructure_async(
    trades: Sequence[Trade],
    order_book: DepthSnapshot | None,
    now_ms: int,
    settings: MicrostructureSettings,
) -> MicrostructureRecord:
    """Concurrent variant of ``compute_microstructure`` with identical results."""
    flows = await asyncio.gather(
        *(
            asyncio.to_thread(compute_flow_for_horizon, trades, now_ms, minutes)
            for minutes in settings.flow_horizons_minutes
        )
    )
    return _build_record(flows, order_book, settings)
