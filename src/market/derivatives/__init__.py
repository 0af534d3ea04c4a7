"""Rate-of-change aggregator for perpetual-futures data: open interest and funding."""

from market.derivatives.funding import compute_funding, compute_funding_slope
from market.derivatives.open_interest import (
    compute_average_open_interest,
    compute_history_delta,
    compute_open_interest,
)

__all__ = [
    "compute_average_open_interest",
    "compute_funding",
    "compute_funding_slope",
    "compute_history_delta",
    "compute_open_interest",
]
