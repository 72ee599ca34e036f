"""
Program derived addresses of concentrated liquidity accounts.

Tick arrays and positions are PDAs of their program, so the accounts needed to evaluate a position can be
located from the decoded pool & position without scanning the program's accounts.
"""
import logging

from solders.pubkey import Pubkey

from clmm_accounting.decoding import get_layout
from clmm_accounting.math import TickMathModule, check_position_pool
from clmm_accounting.types import Pool, Position, ProtocolVariant
from clmm_accounting.utils import decode_key

root_logger = logging.getLogger("clmm_accounting")
logger = root_logger.getChild("addresses")

WHIRLPOOL_PROGRAM_ID = Pubkey.from_string("whirLbMiicVdio4qvUfM5KAg6Ct8VwpYzGff3uctyCc")
RAYDIUM_CLMM_PROGRAM_ID = Pubkey.from_string("CAMMCzo5YL8w4VFF8KVHrK22GGUsp5VTaW7grrKgrWqK")

PROGRAM_IDS: dict[ProtocolVariant, Pubkey] = {
    ProtocolVariant.orca_whirlpool: WHIRLPOOL_PROGRAM_ID,
    ProtocolVariant.raydium_clmm: RAYDIUM_CLMM_PROGRAM_ID,
}

TICK_ARRAY_SEED = b"tick_array"
POSITION_SEED = b"position"


def tick_array_seeds(pool_address: str, start_tick_index: int, variant: ProtocolVariant) -> list[bytes]:
    """
    Returns the PDA seeds of a tick array.  Whirlpool encodes the start index as its decimal string, while
    Raydium encodes it as a big-endian i32.

    :param pool_address: base58 address of the pool owning the array
    :param start_tick_index: first tick index stored in the array
    :param variant: protocol owning the pool
    :return: list of seeds, without the bump
    """
    pool_key = decode_key(pool_address)
    match variant:
        case ProtocolVariant.orca_whirlpool:
            index_seed = str(start_tick_index).encode()
        case ProtocolVariant.raydium_clmm:
            index_seed = start_tick_index.to_bytes(4, "big", signed=True)
        case _:
            raise ValueError(f"Unsupported protocol variant: {variant}")

    return [TICK_ARRAY_SEED, pool_key, index_seed]


def tick_array_address(pool_address: str, start_tick_index: int, variant: ProtocolVariant) -> str:
    """
    Derives the address of the tick array starting at start_tick_index

    :param pool_address: base58 address of the pool owning the array
    :param start_tick_index: first tick index stored in the array
    :param variant: protocol owning the pool
    :return: base58 address of the tick array account
    """
    address, _ = Pubkey.find_program_address(
        tick_array_seeds(pool_address, start_tick_index, variant),
        PROGRAM_IDS[variant],
    )
    return str(address)


def position_tick_array_addresses(pool: Pool, position: Position) -> tuple[tuple[int, str], tuple[int, str]]:
    """
    Locates the tick arrays holding the lower & upper ticks of a position.  Both entries are equal when the
    ticks share an array.

    :param pool: decoded pool.  Supplies the tick spacing
    :param position: decoded position belonging to pool
    :return: ((lower_start_index, lower_address), (upper_start_index, upper_address))
    :raises PoolMismatch: if the position belongs to another pool
    """
    check_position_pool(pool, position)
    ticks_per_array = get_layout(pool.variant).tick_array.ticks_per_array

    lower_start, upper_start = (
        TickMathModule.tick_array_start_index(tick, pool.tick_spacing, ticks_per_array)
        for tick in (position.tick_lower_index, position.tick_upper_index)
    )
    logger.debug(
        f"Position ticks [{position.tick_lower_index}, {position.tick_upper_index}] are stored in arrays "
        f"starting at {lower_start} and {upper_start}"
    )

    return (
        (lower_start, tick_array_address(position.pool_address, lower_start, pool.variant)),
        (upper_start, tick_array_address(position.pool_address, upper_start, pool.variant)),
    )


def position_address(position_mint: str, variant: ProtocolVariant) -> str:
    """Derives the position account of a position NFT.  Both programs seed it with the NFT mint"""
    address, _ = Pubkey.find_program_address([POSITION_SEED, decode_key(position_mint)], PROGRAM_IDS[variant])
    return str(address)
