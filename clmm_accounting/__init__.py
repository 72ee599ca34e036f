from .decoding import (
    decode_account,
    decode_pool,
    decode_position,
    decode_tick_array,
    detect_variant,
)
from .math import (
    compute_uncollected_fees,
    liquidity_to_amounts,
    position_amounts,
    sqrt_price_at_tick,
)
from .position import evaluate_position
from .valuation import value_portfolio, value_position

__all__ = [
    "compute_uncollected_fees",
    "decode_account",
    "decode_pool",
    "decode_position",
    "decode_tick_array",
    "detect_variant",
    "evaluate_position",
    "liquidity_to_amounts",
    "position_amounts",
    "sqrt_price_at_tick",
    "value_portfolio",
    "value_position",
]
