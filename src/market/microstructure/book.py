"""Order-book measures: depth imbalance and micro-price.

Both tolerate a missing or one-sided book by returning Decimal("0").

CRITICAL: All values use Decimal. Never use float for prices or quantities.
"""

from decimal import Decimal

from market.data.models import DepthSnapshot

_ZERO = Decimal("0")


def compute_book_imbalance(book: DepthSnapshot | None, depth: int = 10) -> Decimal:
    """Compute order-book imbalance over the top ``depth`` levels.

    Quantities are summed over ``min(len(bids), len(asks))`` levels (capped
    at ``depth``) so both sides cover the same number of levels.

    Formula: (sum_bid - sum_ask) / (sum_bid + sum_ask)

    Returns:
        Imbalance in [-1, 1]. Decimal("0") if either side is empty or both
        sums are zero.
    """
    if book is None or not book.bids or not book.asks or depth <= 0:
        return _ZERO

    levels = min(len(book.bids), len(book.asks), depth)
    sum_bids = sum((lvl.quantity for lvl in book.bids[:levels]), _ZERO)
    sum_asks = sum((lvl.quantity for lvl in book.asks[:levels]), _ZERO)

    total = sum_bids + sum_asks
    if total == _ZERO:
        return _ZERO

    return (sum_bids - sum_asks) / total


def compute_micro_price(book: DepthSnapshot | None) -> Decimal:
    """Compute the size-weighted micro-price from the best bid and ask.

    Formula: (ask_price * bid_qty + bid_price * ask_qty) / (bid_qty + ask_qty)

    A heavier bid pulls the estimate toward the ask and vice versa.

    Returns:
        Micro-price; the simple mid if both best quantities are zero;
        Decimal("0") if either side of the book is empty.
    """
    if book is None or not book.bids or not book.asks:
        return _ZERO

    best_bid = book.bids[0]
    best_ask = book.asks[0]
    denom = best_bid.quantity + best_ask.quantity
    if denom == _ZERO:
        return (best_bid.price + best_ask.price) / Decimal("2")

    return (best_ask.price * best_bid.quantity + best_bid.price * best_ask.quantity) / denom
