from .fee_math import (
    accrued_fees,
    check_position_pool,
    check_position_ticks,
    compute_uncollected_fees,
    fee_growth_inside,
)
from .full_math import FullMathModule
from .liquidity_math import (
    get_amount_a_delta,
    get_amount_b_delta,
    liquidity_to_amounts,
    position_amounts,
)
from .shared import (
    MAX_TICK_INDEX,
    MIN_SQRT_PRICE_X64,
    MIN_TICK_INDEX,
    Q64,
    Q128,
    RAYDIUM_MAX_SQRT_PRICE_X64,
    UINT_128_MAX,
    WHIRLPOOL_MAX_SQRT_PRICE_X64,
)
from .tick_math import TickMathModule


class ClmmMath:
    """
    Namespace grouping the integer math used by Whirlpool & Raydium CLMM programs
    """

    MAX_TICK_INDEX = MAX_TICK_INDEX
    MIN_TICK_INDEX = MIN_TICK_INDEX
    MIN_SQRT_PRICE_X64 = MIN_SQRT_PRICE_X64
    WHIRLPOOL_MAX_SQRT_PRICE_X64 = WHIRLPOOL_MAX_SQRT_PRICE_X64
    RAYDIUM_MAX_SQRT_PRICE_X64 = RAYDIUM_MAX_SQRT_PRICE_X64

    UINT_128_MAX = UINT_128_MAX
    Q64 = Q64
    Q128 = Q128

    # Math Modules
    full_math = FullMathModule
    tick_math = TickMathModule

    # Fee Methods
    fee_growth_inside = staticmethod(fee_growth_inside)
    accrued_fees = staticmethod(accrued_fees)
    compute_uncollected_fees = staticmethod(compute_uncollected_fees)

    # Liquidity Methods
    get_amount_a_delta = staticmethod(get_amount_a_delta)
    get_amount_b_delta = staticmethod(get_amount_b_delta)
    liquidity_to_amounts = staticmethod(liquidity_to_amounts)
    position_amounts = staticmethod(position_amounts)


sqrt_price_at_tick = TickMathModule.sqrt_price_at_tick
tick_array_start_index = TickMathModule.tick_array_start_index

__all__ = [
    "ClmmMath",
    "FullMathModule",
    "TickMathModule",
    "accrued_fees",
    "check_position_pool",
    "check_position_ticks",
    "compute_uncollected_fees",
    "fee_growth_inside",
    "get_amount_a_delta",
    "get_amount_b_delta",
    "liquidity_to_amounts",
    "position_amounts",
    "sqrt_price_at_tick",
    "tick_array_start_index",
]
