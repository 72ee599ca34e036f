import random

from clmm_accounting.decoding import get_layout
from clmm_accounting.types import ProtocolVariant
from clmm_accounting.utils import decode_key, encode_key

Q64 = 2**64


def uint_max(bits: int) -> int:
    return 2**bits - 1


def random_key() -> str:
    return encode_key(random.randbytes(31) + b"\x01")


def _write_int(buffer: bytearray, offset: int, value: int, width: int, signed: bool = False):
    buffer[offset : offset + width] = value.to_bytes(width, "little", signed=signed)


def _write_key(buffer: bytearray, offset: int, key: str):
    buffer[offset : offset + 32] = decode_key(key)


def _new_account(account_layout) -> bytearray:
    buffer = bytearray(account_layout.account_size)
    buffer[:8] = account_layout.discriminator
    return buffer


def build_pool_data(
    variant: ProtocolVariant,
    mint_a: str | None = None,
    mint_b: str | None = None,
    tick_spacing: int = 64,
    liquidity: int = 0,
    sqrt_price: int = Q64,
    tick_current: int = 0,
    fee_growth_global_a: int = 0,
    fee_growth_global_b: int = 0,
    decimals_a: int = 6,
    decimals_b: int = 9,
) -> bytes:
    """Builds pool account bytes.  Decimals are only written for layouts that store them"""
    layout = get_layout(variant).pool
    buffer = _new_account(layout)

    _write_key(buffer, layout.mint_a, mint_a or random_key())
    _write_key(buffer, layout.mint_b, mint_b or random_key())
    _write_int(buffer, layout.tick_spacing, tick_spacing, 2)
    _write_int(buffer, layout.liquidity, liquidity, 16)
    _write_int(buffer, layout.sqrt_price, sqrt_price, 16)
    _write_int(buffer, layout.tick_current, tick_current, 4, signed=True)
    _write_int(buffer, layout.fee_growth_global_a, fee_growth_global_a, 16)
    _write_int(buffer, layout.fee_growth_global_b, fee_growth_global_b, 16)

    if layout.decimals_a is not None:
        _write_int(buffer, layout.decimals_a, decimals_a, 1)
    if layout.decimals_b is not None:
        _write_int(buffer, layout.decimals_b, decimals_b, 1)

    return bytes(buffer)


def build_position_data(
    variant: ProtocolVariant,
    pool: str,
    position_mint: str | None = None,
    tick_lower: int = -128,
    tick_upper: int = 128,
    liquidity: int = 0,
    fee_growth_inside_a: int = 0,
    fee_growth_inside_b: int = 0,
    fee_owed_a: int = 0,
    fee_owed_b: int = 0,
) -> bytes:
    layout = get_layout(variant).position
    buffer = _new_account(layout)

    _write_key(buffer, layout.pool, pool)
    _write_key(buffer, layout.position_mint, position_mint or random_key())
    _write_int(buffer, layout.tick_lower, tick_lower, 4, signed=True)
    _write_int(buffer, layout.tick_upper, tick_upper, 4, signed=True)
    _write_int(buffer, layout.liquidity, liquidity, 16)
    _write_int(buffer, layout.fee_growth_inside_a, fee_growth_inside_a, 16)
    _write_int(buffer, layout.fee_growth_inside_b, fee_growth_inside_b, 16)
    _write_int(buffer, layout.fee_owed_a, fee_owed_a, 8)
    _write_int(buffer, layout.fee_owed_b, fee_owed_b, 8)

    return bytes(buffer)


def build_tick_array_data(
    variant: ProtocolVariant,
    pool: str,
    start_tick_index: int,
    tick_spacing: int,
    ticks: dict[int, dict] | None = None,
) -> bytes:
    """
    Builds tick array bytes.  ticks maps a tick index to its fields.  Raydium ticks are only treated as
    initialized when liquidity_gross > 0, so liquidity_gross defaults to 1.  A stored_tick_index key
    overrides the index written into Raydium tick records.
    """
    layout = get_layout(variant).tick_array
    tick_layout = layout.tick
    buffer = _new_account(layout)

    _write_key(buffer, layout.pool, pool)
    _write_int(buffer, layout.start_tick_index, start_tick_index, 4, signed=True)

    for tick_index, fields in (ticks or {}).items():
        slot, remainder = divmod(tick_index - start_tick_index, tick_spacing)
        assert remainder == 0 and 0 <= slot < layout.ticks_per_array, f"Tick {tick_index} does not fit the array"

        base = layout.ticks + slot * tick_layout.size
        if tick_layout.initialized is not None:
            _write_int(buffer, base + tick_layout.initialized, int(fields.get("initialized", True)), 1)
        if tick_layout.tick_index is not None:
            _write_int(
                buffer, base + tick_layout.tick_index, fields.get("stored_tick_index", tick_index), 4, signed=True
            )

        _write_int(buffer, base + tick_layout.liquidity_net, fields.get("liquidity_net", 0), 16, signed=True)
        _write_int(buffer, base + tick_layout.liquidity_gross, fields.get("liquidity_gross", 1), 16)
        _write_int(buffer, base + tick_layout.fee_growth_outside_a, fields.get("fee_growth_outside_a", 0), 16)
        _write_int(buffer, base + tick_layout.fee_growth_outside_b, fields.get("fee_growth_outside_b", 0), 16)

    return bytes(buffer)
