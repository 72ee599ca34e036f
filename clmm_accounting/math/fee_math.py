"""
Fee accrual for concentrated liquidity positions.

Fee growth values are cumulative fees per unit of liquidity, stored as Q64.64 numbers that are allowed to
overflow and wrap at 2**128.  The on-chain programs rely on this wraparound: every subtraction here is taken
modulo 2**128, and differences remain correct as long as less than 2**128 of growth accrued between checkpoints.
"""
import logging

from clmm_accounting.exceptions import PoolMismatch, TickMismatch
from clmm_accounting.types import FeeResult, Pool, Position, Tick
from clmm_accounting.utils import wrapping_sub

from .full_math import FullMathModule
from .shared import Q64_RESOLUTION

root_logger = logging.getLogger("clmm_accounting")
logger = root_logger.getChild("math").getChild("fees")


def fee_growth_inside(
    tick_current: int,
    tick_lower: Tick,
    tick_upper: Tick,
    fee_growth_global_a: int,
    fee_growth_global_b: int,
) -> tuple[int, int]:
    """
    Computes the fee growth per unit of liquidity that accrued between tick_lower and tick_upper

    :param tick_current: current tick of the pool
    :param tick_lower: lower boundary tick.  Uninitialized ticks have zero outside growth
    :param tick_upper: upper boundary tick
    :param fee_growth_global_a: global token A fee growth of the pool
    :param fee_growth_global_b: global token B fee growth of the pool
    :return: (fee_growth_inside_a, fee_growth_inside_b), each modulo 2**128
    """
    if tick_current >= tick_lower.tick_index:
        fee_growth_below_a = tick_lower.fee_growth_outside_a
        fee_growth_below_b = tick_lower.fee_growth_outside_b
    else:
        fee_growth_below_a = wrapping_sub(fee_growth_global_a, tick_lower.fee_growth_outside_a)
        fee_growth_below_b = wrapping_sub(fee_growth_global_b, tick_lower.fee_growth_outside_b)

    if tick_current < tick_upper.tick_index:
        fee_growth_above_a = tick_upper.fee_growth_outside_a
        fee_growth_above_b = tick_upper.fee_growth_outside_b
    else:
        fee_growth_above_a = wrapping_sub(fee_growth_global_a, tick_upper.fee_growth_outside_a)
        fee_growth_above_b = wrapping_sub(fee_growth_global_b, tick_upper.fee_growth_outside_b)

    return (
        wrapping_sub(fee_growth_global_a, fee_growth_below_a, fee_growth_above_a),
        wrapping_sub(fee_growth_global_b, fee_growth_below_b, fee_growth_above_b),
    )


def accrued_fees(
    fee_growth_inside_current: int,
    fee_growth_inside_last: int,
    liquidity: int,
    resolution: int = Q64_RESOLUTION,
) -> int:
    """
    Fees earned by liquidity since the last checkpoint, in raw token units

    :param fee_growth_inside_current: current fee growth inside the position range
    :param fee_growth_inside_last: fee growth inside the range recorded on the position
    :param liquidity: liquidity of the position
    :param resolution: fractional bits of the fee growth values
    :return: ((current - last) mod 2**128 * liquidity) >> resolution
    """
    if liquidity == 0:
        return 0
    delta = wrapping_sub(fee_growth_inside_current, fee_growth_inside_last)
    return FullMathModule.mul_shift_right(delta, liquidity, resolution)


def check_position_ticks(position: Position, tick_lower: Tick, tick_upper: Tick):
    """
    Checks that the boundary ticks supplied for a position match the position's tick range.
    Raises TickMismatch if either tick does not match.
    """
    if tick_lower.tick_index != position.tick_lower_index:
        raise TickMismatch(
            f"Lower tick {tick_lower.tick_index} does not match position lower tick {position.tick_lower_index}"
        )
    if tick_upper.tick_index != position.tick_upper_index:
        raise TickMismatch(
            f"Upper tick {tick_upper.tick_index} does not match position upper tick {position.tick_upper_index}"
        )


def check_position_pool(pool: Pool, position: Position):
    """
    Checks that a position belongs to the pool it is evaluated against.  Skipped if the pool address is
    unknown.  Raises PoolMismatch otherwise.
    """
    if pool.variant != position.variant:
        raise PoolMismatch(
            f"{position.variant.pretty()} position cannot be evaluated against a {pool.variant.pretty()} pool"
        )
    if pool.address is not None and pool.address != position.pool_address:
        raise PoolMismatch(f"Position belongs to pool {position.pool_address}, not {pool.address}")


def compute_uncollected_fees(
    pool: Pool,
    position: Position,
    tick_lower: Tick,
    tick_upper: Tick,
    resolution: int = Q64_RESOLUTION,
) -> FeeResult:
    """
    Computes the fees a position could collect right now: fees already owed on the position, plus fees
    accrued since the position's last checkpoint.

    :param pool: decoded pool state
    :param position: decoded position
    :param tick_lower: tick at position.tick_lower_index.  Pass :meth:`Tick.uninitialized` for ticks missing
        from their tick array
    :param tick_upper: tick at position.tick_upper_index
    :param resolution: fractional bits of the fee growth values
    :return: FeeResult with raw token amounts
    :raises TickMismatch: if a tick does not match the position boundary
    :raises PoolMismatch: if the position belongs to another pool
    """
    check_position_pool(pool, position)
    check_position_ticks(position, tick_lower, tick_upper)

    inside_a, inside_b = fee_growth_inside(
        pool.current_tick_index,
        tick_lower,
        tick_upper,
        pool.fee_growth_global_a,
        pool.fee_growth_global_b,
    )

    accrued_a = accrued_fees(inside_a, position.fee_growth_inside_last_a, position.liquidity, resolution)
    accrued_b = accrued_fees(inside_b, position.fee_growth_inside_last_b, position.liquidity, resolution)

    logger.debug(
        f"Fee growth inside A: {inside_a}, B: {inside_b}.  Accrued since checkpoint A: {accrued_a}, B: {accrued_b}"
    )

    return FeeResult(
        uncollected_a=position.token_fees_owed_a + accrued_a,
        uncollected_b=position.token_fees_owed_b + accrued_b,
    )
