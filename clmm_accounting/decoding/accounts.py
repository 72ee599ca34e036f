import logging

from pydantic import ValidationError

from clmm_accounting.exceptions import MalformedAccount
from clmm_accounting.types import (
    AccountKind,
    Pool,
    Position,
    ProtocolVariant,
    Tick,
    TickArray,
)
from clmm_accounting.utils import decode_key

from .layouts import DISCRIMINATOR_LENGTH, PROTOCOL_LAYOUTS, get_layout
from .reader import AccountReader

root_logger = logging.getLogger("clmm_accounting")
logger = root_logger.getChild("decoding")


def _open_account(data: bytes, account_name: str, discriminator: bytes, account_size: int) -> AccountReader:
    if len(data) < DISCRIMINATOR_LENGTH or bytes(data[:DISCRIMINATOR_LENGTH]) != discriminator:
        raise MalformedAccount(
            f"Account data does not start with the {account_name} discriminator {discriminator.hex()}.  "
            f"Found: {bytes(data[:DISCRIMINATOR_LENGTH]).hex()}"
        )
    if len(data) < account_size:
        raise MalformedAccount(
            f"{account_name} account data is truncated.  Expected {account_size} bytes, received {len(data)}"
        )
    return AccountReader(data, account_name)


def _check_address(address: str | None) -> str | None:
    if address is None:
        return None
    try:
        decode_key(address)
    except ValueError as exc:
        raise MalformedAccount(f"Invalid account address: {address}") from exc
    return address


def detect_variant(data: bytes) -> tuple[ProtocolVariant, AccountKind]:
    """
    Identifies the protocol & account kind of account bytes from their discriminator

    :param data: raw account bytes
    :return: (ProtocolVariant, AccountKind)
    :raises MalformedAccount: if the discriminator does not belong to a supported account
    """
    prefix = bytes(data[:DISCRIMINATOR_LENGTH])
    for variant, protocol_layout in PROTOCOL_LAYOUTS.items():
        for kind in AccountKind:
            if protocol_layout.for_kind(kind).discriminator == prefix:
                return variant, kind

    raise MalformedAccount(f"Unrecognized account discriminator: {prefix.hex()}")


def decode_pool(data: bytes, variant: ProtocolVariant, address: str | None = None) -> Pool:
    """
    Decodes a Whirlpool or Raydium PoolState account

    :param data: raw account bytes, including the discriminator
    :param variant: protocol that owns the account
    :param address: optional base58 address of the account, stored on the decoded record
    :return: Pool
    """
    layout = get_layout(variant).pool
    reader = _open_account(data, layout.account_name, layout.discriminator, layout.account_size)

    try:
        pool = Pool(
            variant=variant,
            address=_check_address(address),
            asset_mint_a=reader.key(layout.mint_a, "token mint A"),
            asset_mint_b=reader.key(layout.mint_b, "token mint B"),
            decimals_a=reader.u8(layout.decimals_a) if layout.decimals_a is not None else None,
            decimals_b=reader.u8(layout.decimals_b) if layout.decimals_b is not None else None,
            tick_spacing=reader.u16(layout.tick_spacing),
            liquidity=reader.u128(layout.liquidity),
            current_tick_index=reader.i32(layout.tick_current),
            current_sqrt_price_q64=reader.u128(layout.sqrt_price),
            fee_growth_global_a=reader.u128(layout.fee_growth_global_a),
            fee_growth_global_b=reader.u128(layout.fee_growth_global_b),
        )
    except ValidationError as exc:
        raise MalformedAccount(f"Invalid {layout.account_name} field values: {exc}") from exc

    logger.debug(f"Decoded {variant.pretty()} pool {address}: tick {pool.current_tick_index}")
    return pool


def decode_position(data: bytes, variant: ProtocolVariant, address: str | None = None) -> Position:
    """
    Decodes a Whirlpool Position or Raydium PersonalPositionState account

    :param data: raw account bytes, including the discriminator
    :param variant: protocol that owns the account
    :param address: optional base58 address of the account, stored on the decoded record
    :return: Position
    """
    layout = get_layout(variant).position
    reader = _open_account(data, layout.account_name, layout.discriminator, layout.account_size)

    try:
        position = Position(
            variant=variant,
            address=_check_address(address),
            pool_address=reader.key(layout.pool, "pool"),
            position_mint=reader.key(layout.position_mint, "position mint"),
            tick_lower_index=reader.i32(layout.tick_lower),
            tick_upper_index=reader.i32(layout.tick_upper),
            liquidity=reader.u128(layout.liquidity),
            fee_growth_inside_last_a=reader.u128(layout.fee_growth_inside_a),
            fee_growth_inside_last_b=reader.u128(layout.fee_growth_inside_b),
            token_fees_owed_a=reader.u64(layout.fee_owed_a),
            token_fees_owed_b=reader.u64(layout.fee_owed_b),
        )
    except ValidationError as exc:
        raise MalformedAccount(f"Invalid {layout.account_name} field values: {exc}") from exc

    logger.debug(
        f"Decoded {variant.pretty()} position {address}: ticks [{position.tick_lower_index}, "
        f"{position.tick_upper_index}], liquidity {position.liquidity}"
    )
    return position


def decode_tick_array(data: bytes, variant: ProtocolVariant, tick_spacing: int) -> TickArray:
    """
    Decodes a Whirlpool TickArray or Raydium TickArrayState account.  Uninitialized ticks are dropped, and
    default to zero when looked up with :meth:`TickArray.get_tick`.

    :param data: raw account bytes, including the discriminator
    :param variant: protocol that owns the account
    :param tick_spacing: tick spacing of the pool that owns the array.  Ticks are stored at
        start_tick_index + slot * tick_spacing
    :return: TickArray
    """
    if tick_spacing <= 0:
        raise ValueError(f"Tick spacing must be positive, received {tick_spacing}")

    layout = get_layout(variant).tick_array
    tick_layout = layout.tick
    reader = _open_account(data, layout.account_name, layout.discriminator, layout.account_size)

    start_tick_index = reader.i32(layout.start_tick_index)
    ticks = []
    for slot in range(layout.ticks_per_array):
        base = layout.ticks + slot * tick_layout.size
        tick_index = start_tick_index + slot * tick_spacing

        liquidity_gross = reader.u128(base + tick_layout.liquidity_gross)
        if tick_layout.initialized is not None:
            initialized = reader.flag(base + tick_layout.initialized)
        else:
            initialized = liquidity_gross > 0

        if not initialized:
            continue

        if tick_layout.tick_index is not None:
            stored_index = reader.i32(base + tick_layout.tick_index)
            if stored_index != tick_index:
                raise MalformedAccount(
                    f"{layout.account_name} slot {slot} stores tick {stored_index}, expected {tick_index} "
                    f"for start index {start_tick_index} and tick spacing {tick_spacing}"
                )

        try:
            ticks.append(
                Tick(
                    tick_index=tick_index,
                    initialized=True,
                    liquidity_net=reader.i128(base + tick_layout.liquidity_net),
                    liquidity_gross=liquidity_gross,
                    fee_growth_outside_a=reader.u128(base + tick_layout.fee_growth_outside_a),
                    fee_growth_outside_b=reader.u128(base + tick_layout.fee_growth_outside_b),
                )
            )
        except ValidationError as exc:
            raise MalformedAccount(f"Invalid {layout.account_name} tick in slot {slot}: {exc}") from exc

    try:
        tick_array = TickArray(
            variant=variant,
            pool_address=reader.key(layout.pool, "pool"),
            start_tick_index=start_tick_index,
            tick_spacing=tick_spacing,
            ticks_per_array=layout.ticks_per_array,
            ticks=tuple(ticks),
        )
    except ValidationError as exc:
        raise MalformedAccount(f"Invalid {layout.account_name} field values: {exc}") from exc

    logger.debug(
        f"Decoded {variant.pretty()} tick array starting at {start_tick_index} with {len(ticks)} initialized ticks"
    )
    return tick_array


def decode_account(
    data: bytes,
    kind: AccountKind | None = None,
    variant: ProtocolVariant | None = None,
    address: str | None = None,
    tick_spacing: int | None = None,
) -> Pool | Position | TickArray:
    """
    Decodes any supported account.  If kind or variant are not specified, they are detected from the
    account discriminator.

    :param data: raw account bytes
    :param kind: expected account kind
    :param variant: expected protocol variant
    :param address: address of pool & position accounts
    :param tick_spacing: pool tick spacing.  Required when decoding tick arrays
    :return: decoded account record
    """
    if kind is None or variant is None:
        detected_variant, detected_kind = detect_variant(data)
        kind = kind or detected_kind
        variant = variant or detected_variant

    match kind:
        case AccountKind.pool:
            return decode_pool(data, variant, address)
        case AccountKind.position:
            return decode_position(data, variant, address)
        case AccountKind.tick_array:
            if tick_spacing is None:
                raise ValueError("tick_spacing is required to decode tick arrays")
            return decode_tick_array(data, variant, tick_spacing)

    raise ValueError(f"Unsupported account kind: {kind}")
