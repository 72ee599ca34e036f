"""
Binary layouts of the concentrated liquidity accounts.

Offsets are measured from the start of the account data, so every offset includes the 8 byte Anchor
discriminator.  All integers are little-endian.  Each account type is identified by the discriminator
``sha256("account:<AccountName>")[:8]``.
"""
import hashlib
from dataclasses import dataclass

from clmm_accounting.math.shared import RAYDIUM_TICKS_PER_ARRAY, WHIRLPOOL_TICKS_PER_ARRAY
from clmm_accounting.types import AccountKind, ProtocolVariant

DISCRIMINATOR_LENGTH = 8
KEY_LENGTH = 32


def anchor_discriminator(account_name: str) -> bytes:
    """
    Computes the 8 byte Anchor account discriminator for an account struct name

    :param account_name: Rust struct name of the account, ie "Whirlpool" or "PoolState"
    :return: first 8 bytes of sha256("account:<account_name>")
    """
    return hashlib.sha256(f"account:{account_name}".encode()).digest()[:DISCRIMINATOR_LENGTH]


@dataclass(slots=True, frozen=True)
class PoolLayout:
    """Field offsets of a pool account"""

    account_name: str
    discriminator: bytes
    account_size: int

    tick_spacing: int
    liquidity: int
    sqrt_price: int
    tick_current: int
    mint_a: int
    mint_b: int
    fee_growth_global_a: int
    fee_growth_global_b: int
    decimals_a: int | None = None
    decimals_b: int | None = None


@dataclass(slots=True, frozen=True)
class PositionLayout:
    """Field offsets of a position account"""

    account_name: str
    discriminator: bytes
    account_size: int

    pool: int
    position_mint: int
    liquidity: int
    tick_lower: int
    tick_upper: int
    fee_growth_inside_a: int
    fee_growth_inside_b: int
    fee_owed_a: int
    fee_owed_b: int


@dataclass(slots=True, frozen=True)
class TickLayout:
    """Field offsets within a single tick record, relative to the start of the record"""

    size: int
    liquidity_net: int
    liquidity_gross: int
    fee_growth_outside_a: int
    fee_growth_outside_b: int
    initialized: int | None = None
    """ Offset of the initialized flag.  Raydium ticks have no flag, and are initialized if liquidity_gross > 0 """
    tick_index: int | None = None
    """ Offset of the stored tick index.  Whirlpool ticks derive the index from their position in the array """


@dataclass(slots=True, frozen=True)
class TickArrayLayout:
    """Field offsets of a tick array account"""

    account_name: str
    discriminator: bytes
    account_size: int

    start_tick_index: int
    pool: int
    ticks: int
    ticks_per_array: int
    tick: TickLayout


@dataclass(slots=True, frozen=True)
class ProtocolLayout:
    """
    Layout descriptor for a concentrated liquidity program.  A single fee & valuation engine is shared between
    programs, and only the account layouts & fixed point resolution differ.
    """

    variant: ProtocolVariant
    pool: PoolLayout
    position: PositionLayout
    tick_array: TickArrayLayout
    fee_growth_resolution: int = 64
    """ Number of fractional bits of fee growth values.  Accrued fees are shifted right by this amount """

    def for_kind(self, kind: AccountKind) -> PoolLayout | PositionLayout | TickArrayLayout:
        """Returns the layout for an account kind"""
        match kind:
            case AccountKind.pool:
                return self.pool
            case AccountKind.position:
                return self.position
            case AccountKind.tick_array:
                return self.tick_array
        raise ValueError(f"Unknown account kind: {kind}")


WHIRLPOOL_LAYOUT = ProtocolLayout(
    variant=ProtocolVariant.orca_whirlpool,
    pool=PoolLayout(
        account_name="Whirlpool",
        discriminator=anchor_discriminator("Whirlpool"),
        account_size=653,
        tick_spacing=41,
        liquidity=49,
        sqrt_price=65,
        tick_current=81,
        mint_a=101,
        fee_growth_global_a=165,
        mint_b=181,
        fee_growth_global_b=245,
    ),
    position=PositionLayout(
        account_name="Position",
        discriminator=anchor_discriminator("Position"),
        account_size=216,
        pool=8,
        position_mint=40,
        liquidity=72,
        tick_lower=88,
        tick_upper=92,
        fee_growth_inside_a=96,
        fee_owed_a=112,
        fee_growth_inside_b=120,
        fee_owed_b=136,
    ),
    tick_array=TickArrayLayout(
        account_name="TickArray",
        discriminator=anchor_discriminator("TickArray"),
        account_size=9988,
        start_tick_index=8,
        ticks=12,
        ticks_per_array=WHIRLPOOL_TICKS_PER_ARRAY,
        pool=9956,
        tick=TickLayout(
            size=113,
            initialized=0,
            liquidity_net=1,
            liquidity_gross=17,
            fee_growth_outside_a=33,
            fee_growth_outside_b=49,
        ),
    ),
)

RAYDIUM_CLMM_LAYOUT = ProtocolLayout(
    variant=ProtocolVariant.raydium_clmm,
    pool=PoolLayout(
        account_name="PoolState",
        discriminator=anchor_discriminator("PoolState"),
        account_size=1544,
        mint_a=73,
        mint_b=105,
        decimals_a=233,
        decimals_b=234,
        tick_spacing=235,
        liquidity=237,
        sqrt_price=253,
        tick_current=269,
        fee_growth_global_a=277,
        fee_growth_global_b=293,
    ),
    position=PositionLayout(
        account_name="PersonalPositionState",
        discriminator=anchor_discriminator("PersonalPositionState"),
        account_size=281,
        position_mint=9,
        pool=41,
        tick_lower=73,
        tick_upper=77,
        liquidity=81,
        fee_growth_inside_a=97,
        fee_growth_inside_b=113,
        fee_owed_a=129,
        fee_owed_b=137,
    ),
    tick_array=TickArrayLayout(
        account_name="TickArrayState",
        discriminator=anchor_discriminator("TickArrayState"),
        account_size=10240,
        pool=8,
        start_tick_index=40,
        ticks=44,
        ticks_per_array=RAYDIUM_TICKS_PER_ARRAY,
        tick=TickLayout(
            size=168,
            tick_index=0,
            liquidity_net=4,
            liquidity_gross=20,
            fee_growth_outside_a=36,
            fee_growth_outside_b=52,
        ),
    ),
)

PROTOCOL_LAYOUTS: dict[ProtocolVariant, ProtocolLayout] = {
    ProtocolVariant.orca_whirlpool: WHIRLPOOL_LAYOUT,
    ProtocolVariant.raydium_clmm: RAYDIUM_CLMM_LAYOUT,
}


def get_layout(variant: ProtocolVariant) -> ProtocolLayout:
    """Returns the layout descriptor of a protocol variant"""
    return PROTOCOL_LAYOUTS[variant]
