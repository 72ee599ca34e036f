from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from clmm_accounting.exceptions import TickMismatch

# Disabling naming check that wants enums to use UPPER_CASE
# pylint: disable=invalid-name

U64 = Annotated[int, Field(ge=0, lt=2**64)]
U128 = Annotated[int, Field(ge=0, lt=2**128)]
I128 = Annotated[int, Field(ge=-(2**127), lt=2**127)]
I32 = Annotated[int, Field(ge=-(2**31), lt=2**31)]


class ProtocolVariant(Enum):
    """Concentrated liquidity program that produced a set of account bytes"""

    orca_whirlpool = "orca_whirlpool"
    raydium_clmm = "raydium_clmm"

    def pretty(self):
        """Returns a pretty version of the protocol name"""
        match self:
            case ProtocolVariant.orca_whirlpool:
                return "Orca Whirlpool"
            case ProtocolVariant.raydium_clmm:
                return "Raydium CLMM"


class AccountKind(Enum):
    """Kind of account record that can be decoded"""

    pool = "pool"
    position = "position"
    tick_array = "tick_array"


class FrozenAccountModel(BaseModel):
    """Base model for decoded accounts.  Decoded records are never mutated after decoding"""

    model_config = ConfigDict(frozen=True)


class Pool(FrozenAccountModel):
    """Decoded pool state for a single trading pair & fee tier"""

    variant: ProtocolVariant

    address: Optional[str] = None
    """
        Base58 address of the pool account.  Account bytes do not contain their own address, so this value is
        only present when supplied by the caller
    """
    asset_mint_a: str
    """ Base58 mint of token A (token_0 on Raydium) """
    asset_mint_b: str
    """ Base58 mint of token B (token_1 on Raydium) """
    decimals_a: Optional[int] = None
    """
        Decimals of token A.  Raydium pools store mint decimals in the pool account, Whirlpools do not, and
        decimals have to be supplied from token metadata
    """
    decimals_b: Optional[int] = None

    tick_spacing: Annotated[int, Field(gt=0, lt=2**16)]
    """ Number of ticks between initializable ticks """
    liquidity: U128
    """ Active liquidity at the current tick """
    current_tick_index: I32
    """ Tick bracketing the current price """
    current_sqrt_price_q64: U128
    """ Square root of the token B / token A price as a Q64.64 fixed point number """
    fee_growth_global_a: U128
    """
        Cumulative fees per unit of liquidity for token A, stored as Q64.64 and wrapping at 2**128
    """
    fee_growth_global_b: U128
    """ Cumulative fees per unit of liquidity for token B """


class Tick(FrozenAccountModel):
    """Liquidity & fee growth data for a single tick boundary"""

    tick_index: I32
    initialized: bool
    liquidity_net: I128
    """
    Net liquidity added when price crosses this tick moving up, and removed when the price crosses moving down
    """
    liquidity_gross: U128
    """ Total liquidity referencing this tick as an upper or lower bound """
    fee_growth_outside_a: U128
    """ Token A fee growth on the opposite side of this tick from the current price """
    fee_growth_outside_b: U128
    """ Token B fee growth on the opposite side of this tick from the current price """

    @classmethod
    def uninitialized(cls, tick_index: int) -> "Tick":
        """
        Returns an uninitialized tick with each field set to 0.  Ticks that were never crossed or referenced
        by a position are stored zeroed on-chain.
        """
        return Tick(
            tick_index=tick_index,
            initialized=False,
            liquidity_net=0,
            liquidity_gross=0,
            fee_growth_outside_a=0,
            fee_growth_outside_b=0,
        )


class TickArray(FrozenAccountModel):
    """
    Fixed size segment of consecutive ticks.  Only initialized ticks are kept after decoding.
    """

    variant: ProtocolVariant
    pool_address: str
    start_tick_index: I32
    tick_spacing: Annotated[int, Field(gt=0, lt=2**16)]
    ticks_per_array: int
    ticks: tuple[Tick, ...]

    @property
    def end_tick_index(self) -> int:
        """First tick index past the end of this array"""
        return self.start_tick_index + self.ticks_per_array * self.tick_spacing

    def contains(self, tick_index: int) -> bool:
        """Whether tick_index falls within the range covered by this array"""
        return self.start_tick_index <= tick_index < self.end_tick_index

    def get_tick(self, tick_index: int) -> Tick:
        """
        Returns the tick stored at tick_index.  If the tick is not initialized, an all-zero tick is returned.

        :param tick_index: tick to look up
        :raises TickMismatch: if tick_index is outside of this array or not a multiple of the tick spacing
        """
        if not self.contains(tick_index):
            raise TickMismatch(
                f"Tick {tick_index} is outside of tick array [{self.start_tick_index}, {self.end_tick_index})"
            )
        if (tick_index - self.start_tick_index) % self.tick_spacing != 0:
            raise TickMismatch(f"Tick {tick_index} is not aligned to tick spacing {self.tick_spacing}")

        for tick in self.ticks:
            if tick.tick_index == tick_index:
                return tick

        return Tick.uninitialized(tick_index)


class Position(FrozenAccountModel):
    """
    Liquidity position within a pool.

    .. note::
        Checkpoints & owed amounts are only updated on-chain when liquidity is modified or fees are collected,
        so tokens_fees_owed alone understates the fees available for collection.
    """

    variant: ProtocolVariant

    address: Optional[str] = None
    pool_address: str
    position_mint: str
    """ Base58 mint of the NFT representing ownership of this position """

    tick_lower_index: I32
    tick_upper_index: I32
    liquidity: U128

    fee_growth_inside_last_a: U128
    """ Token A fee growth inside the range at the last fee settlement.  Allowed to wrap at 2**128 """
    fee_growth_inside_last_b: U128
    token_fees_owed_a: U64
    """ Token A fees already settled into the position and not yet collected """
    token_fees_owed_b: U64
