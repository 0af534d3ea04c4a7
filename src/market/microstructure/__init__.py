"""Microstructure analyzer: trade-flow CVD/OFI, book imbalance and micro-price."""

from market.microstructure.analyzer import (
    compute_microstructure,
    compute_microstructure_async,
)
from market.microstructure.book import compute_book_imbalance, compute_micro_price
from market.microstructure.flow import (
    compute_flow,
    compute_flow_for_horizon,
    filter_trades_since,
)

__all__ = [
    "compute_book_imbalance",
    "compute_flow",
    "compute_flow_for_horizon",
    "compute_micro_price",
    "compute_microstructure",
    "compute_microstructure_async",
    "filter_trades_since",
]
