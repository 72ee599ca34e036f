import logging

from clmm_accounting.exceptions import InvalidRange
from clmm_accounting.types import AmountResult, Pool, Position

from .full_math import FullMathModule
from .shared import Q64, Q64_RESOLUTION
from .tick_math import TickMathModule

root_logger = logging.getLogger("clmm_accounting")
logger = root_logger.getChild("math").getChild("liquidity")


def get_amount_a_delta(sqrt_price_lower: int, sqrt_price_upper: int, liquidity: int) -> int:
    """
    Token A represented by liquidity between two Q64.64 sqrt prices.

    Computes liquidity * (upper - lower) * 2**64 / (upper * lower), rounded down.  The 2**64 factor restores
    the fractional bits removed by multiplying two Q64.64 prices in the denominator.
    """
    return FullMathModule.mul_div(
        liquidity * (sqrt_price_upper - sqrt_price_lower),
        Q64,
        sqrt_price_upper * sqrt_price_lower,
    )


def get_amount_b_delta(sqrt_price_lower: int, sqrt_price_upper: int, liquidity: int) -> int:
    """
    Token B represented by liquidity between two Q64.64 sqrt prices.

    Computes liquidity * (upper - lower) / 2**64, rounded down.
    """
    return FullMathModule.mul_shift_right(liquidity, sqrt_price_upper - sqrt_price_lower, Q64_RESOLUTION)


def liquidity_to_amounts(
    liquidity: int,
    sqrt_price_lower: int,
    sqrt_price_upper: int,
    sqrt_price_current: int,
) -> AmountResult:
    """
    Converts liquidity into the token amounts it represents at the current price.

    * Current price at or below the range: all liquidity is held in token A
    * Current price at or above the range: all liquidity is held in token B
    * Current price inside the range: token A covers [current, upper], token B covers [lower, current]

    :param liquidity: liquidity of the position
    :param sqrt_price_lower: Q64.64 sqrt price at the lower tick
    :param sqrt_price_upper: Q64.64 sqrt price at the upper tick
    :param sqrt_price_current: Q64.64 sqrt price of the pool
    :return: AmountResult in raw token units
    :raises InvalidRange: if sqrt_price_lower >= sqrt_price_upper or prices are not positive
    """
    if sqrt_price_lower >= sqrt_price_upper:
        raise InvalidRange(f"sqrt_price_lower {sqrt_price_lower} must be less than sqrt_price_upper {sqrt_price_upper}")
    if sqrt_price_lower <= 0 or sqrt_price_current <= 0:
        raise InvalidRange("sqrt prices must be positive")
    if liquidity < 0:
        raise ValueError("liquidity cannot be negative")

    if sqrt_price_current <= sqrt_price_lower:
        amount_a = get_amount_a_delta(sqrt_price_lower, sqrt_price_upper, liquidity)
        amount_b = 0
    elif sqrt_price_current >= sqrt_price_upper:
        amount_a = 0
        amount_b = get_amount_b_delta(sqrt_price_lower, sqrt_price_upper, liquidity)
    else:
        amount_a = get_amount_a_delta(sqrt_price_current, sqrt_price_upper, liquidity)
        amount_b = get_amount_b_delta(sqrt_price_lower, sqrt_price_current, liquidity)

    return AmountResult(amount_a=amount_a, amount_b=amount_b)


def position_amounts(pool: Pool, position: Position) -> AmountResult:
    """
    Computes the token amounts held by a position's liquidity at the pool's current sqrt price.
    Does not include uncollected fees.

    :param pool: decoded pool
    :param position: decoded position
    :return: AmountResult in raw token units
    :raises InvalidRange: if the position's tick_lower >= tick_upper
    """
    if position.tick_lower_index >= position.tick_upper_index:
        raise InvalidRange(
            f"Position tick_lower {position.tick_lower_index} must be less than tick_upper {position.tick_upper_index}"
        )

    sqrt_price_lower = TickMathModule.sqrt_price_at_tick(position.tick_lower_index, pool.variant)
    sqrt_price_upper = TickMathModule.sqrt_price_at_tick(position.tick_upper_index, pool.variant)

    logger.debug(
        f"Converting liquidity {position.liquidity} between sqrt prices {sqrt_price_lower} and {sqrt_price_upper} "
        f"at current sqrt price {pool.current_sqrt_price_q64}"
    )

    return liquidity_to_amounts(
        position.liquidity,
        sqrt_price_lower,
        sqrt_price_upper,
        pool.current_sqrt_price_q64,
    )
