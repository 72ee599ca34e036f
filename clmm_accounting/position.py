import logging

from clmm_accounting.decoding import (
    decode_pool,
    decode_position,
    decode_tick_array,
    detect_variant,
    get_layout,
)
from clmm_accounting.exceptions import MalformedAccount, PoolMismatch
from clmm_accounting.math import (
    TickMathModule,
    compute_uncollected_fees,
    position_amounts,
)
from clmm_accounting.types import (
    AccountKind,
    Pool,
    Position,
    PositionSnapshot,
    ProtocolVariant,
    Tick,
    TickArray,
)

root_logger = logging.getLogger("clmm_accounting")
logger = root_logger.getChild("position")


def locate_boundary_ticks(
    position: Position,
    lower_tick_array: TickArray,
    upper_tick_array: TickArray | None = None,
) -> tuple[Tick, Tick]:
    """
    Looks up the lower & upper ticks of a position.  Ticks missing from their array are returned as
    zeroed uninitialized ticks.

    :param position: decoded position
    :param lower_tick_array: tick array containing position.tick_lower_index
    :param upper_tick_array: tick array containing position.tick_upper_index.  If None, both ticks are
        expected in lower_tick_array
    :return: (tick_lower, tick_upper)
    :raises TickMismatch: if a boundary tick is not covered by the supplied array
    :raises PoolMismatch: if a tick array belongs to another pool
    """
    upper_tick_array = upper_tick_array or lower_tick_array

    for tick_array in (lower_tick_array, upper_tick_array):
        if tick_array.variant != position.variant:
            raise PoolMismatch(
                f"{tick_array.variant.pretty()} tick array cannot be used with a {position.variant.pretty()} position"
            )
        if tick_array.pool_address != position.pool_address:
            raise PoolMismatch(
                f"Tick array starting at {tick_array.start_tick_index} belongs to pool {tick_array.pool_address}, "
                f"position belongs to {position.pool_address}"
            )

    return (
        lower_tick_array.get_tick(position.tick_lower_index),
        upper_tick_array.get_tick(position.tick_upper_index),
    )


def evaluate_decoded_position(
    pool: Pool,
    position: Position,
    lower_tick_array: TickArray,
    upper_tick_array: TickArray | None = None,
) -> PositionSnapshot:
    """
    Computes uncollected fees & token amounts of a position from decoded accounts

    :param pool: decoded pool
    :param position: decoded position belonging to pool
    :param lower_tick_array: tick array containing the position's lower tick
    :param upper_tick_array: tick array containing the position's upper tick.  Defaults to lower_tick_array
    :return: PositionSnapshot
    """
    tick_lower, tick_upper = locate_boundary_ticks(position, lower_tick_array, upper_tick_array)

    fees = compute_uncollected_fees(
        pool,
        position,
        tick_lower,
        tick_upper,
        resolution=get_layout(pool.variant).fee_growth_resolution,
    )
    amounts = position_amounts(pool, position)

    return PositionSnapshot(
        pool=pool,
        position=position,
        fees=fees,
        amounts=amounts,
        in_range=TickMathModule.is_in_range(
            pool.current_tick_index, position.tick_lower_index, position.tick_upper_index
        ),
    )


def evaluate_position(
    pool_data: bytes,
    position_data: bytes,
    lower_tick_array_data: bytes,
    upper_tick_array_data: bytes | None = None,
    variant: ProtocolVariant | None = None,
    pool_address: str | None = None,
    position_address: str | None = None,
) -> PositionSnapshot:
    """
    Decodes raw pool, position & tick array accounts and computes the position's uncollected fees and
    token amounts.  All accounts must be captured at the same slot.

    :param pool_data: raw pool account bytes
    :param position_data: raw position account bytes
    :param lower_tick_array_data: raw bytes of the tick array containing the lower tick
    :param upper_tick_array_data: raw bytes of the tick array containing the upper tick.  Can be omitted
        when both ticks are in the same array
    :param variant: protocol of the accounts.  Detected from the pool discriminator if not provided
    :param pool_address: base58 address of the pool.  Enables pool membership checks for the position
    :param position_address: base58 address of the position
    :return: PositionSnapshot
    :raises MalformedAccount: if any account fails to decode
    """
    if variant is None:
        variant, kind = detect_variant(pool_data)
        if kind != AccountKind.pool:
            raise MalformedAccount(f"Expected pool account data, found {variant.pretty()} {kind.value} account")

    pool = decode_pool(pool_data, variant, pool_address)
    position = decode_position(position_data, variant, position_address)
    lower_tick_array = decode_tick_array(lower_tick_array_data, variant, pool.tick_spacing)
    upper_tick_array = (
        decode_tick_array(upper_tick_array_data, variant, pool.tick_spacing)
        if upper_tick_array_data is not None
        else None
    )

    snapshot = evaluate_decoded_position(pool, position, lower_tick_array, upper_tick_array)
    logger.debug(
        f"Evaluated {variant.pretty()} position {position_address or position.position_mint}: "
        f"fees ({snapshot.fees.uncollected_a}, {snapshot.fees.uncollected_b}), "
        f"amounts ({snapshot.amounts.amount_a}, {snapshot.amounts.amount_b})"
    )
    return snapshot
