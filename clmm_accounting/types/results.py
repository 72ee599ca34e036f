from dataclasses import dataclass
from decimal import Decimal

from .accounts import Pool, Position


@dataclass(slots=True, frozen=True)
class FeeResult:
    """Uncollected fees for a position in raw token units"""

    uncollected_a: int
    uncollected_b: int


@dataclass(slots=True, frozen=True)
class AmountResult:
    """Raw token amounts represented by a position's liquidity at the current price"""

    amount_a: int
    amount_b: int


@dataclass(slots=True, frozen=True)
class PositionSnapshot:
    """Fees & amounts computed from a single consistent set of pool, position, and tick accounts"""

    pool: Pool
    position: Position
    fees: FeeResult
    amounts: AmountResult
    in_range: bool


@dataclass(slots=True, frozen=True)
class TokenValuation:
    """Human readable amounts for one side of a position"""

    mint: str
    decimals: int
    amount: Decimal
    fees: Decimal
    price: Decimal | None = None

    @property
    def value(self) -> Decimal | None:
        """Fiat value of the liquidity amount.  None if no price is available"""
        return None if self.price is None else self.amount * self.price

    @property
    def fee_value(self) -> Decimal | None:
        """Fiat value of the uncollected fees.  None if no price is available"""
        return None if self.price is None else self.fees * self.price


@dataclass(slots=True, frozen=True)
class PositionValuation:
    """Display ready valuation of a single position"""

    variant: str
    position_address: str | None
    pool_address: str | None
    in_range: bool
    token_a: TokenValuation
    token_b: TokenValuation

    @property
    def total_value(self) -> Decimal | None:
        """Fiat value of liquidity and fees on both sides.  None unless both tokens are priced"""
        sides = (self.token_a, self.token_b)
        if any(side.price is None for side in sides):
            return None
        return sum((side.value + side.fee_value for side in sides), Decimal(0))  # type: ignore[operator]

    @property
    def total_fee_value(self) -> Decimal | None:
        """Fiat value of uncollected fees on both sides.  None unless both tokens are priced"""
        if self.token_a.fee_value is None or self.token_b.fee_value is None:
            return None
        return self.token_a.fee_value + self.token_b.fee_value


@dataclass(slots=True)
class PortfolioValuation:
    """Valuations for a set of positions.  Positions that failed to evaluate are stored in errors"""

    positions: list[PositionValuation]
    errors: dict[str, Exception]

    @property
    def total_value(self) -> Decimal:
        """Sum of fiat values across priced positions"""
        return sum((p.total_value for p in self.positions if p.total_value is not None), Decimal(0))

    @property
    def total_fee_value(self) -> Decimal:
        """Sum of fiat fee values across priced positions"""
        return sum((p.total_fee_value for p in self.positions if p.total_fee_value is not None), Decimal(0))
