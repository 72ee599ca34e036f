from .accounts import (
    AccountKind,
    Pool,
    Position,
    ProtocolVariant,
    Tick,
    TickArray,
)
from .results import (
    AmountResult,
    FeeResult,
    PortfolioValuation,
    PositionSnapshot,
    PositionValuation,
    TokenValuation,
)

__all__ = [
    "AccountKind",
    "AmountResult",
    "FeeResult",
    "Pool",
    "PortfolioValuation",
    "Position",
    "PositionSnapshot",
    "PositionValuation",
    "ProtocolVariant",
    "Tick",
    "TickArray",
    "TokenValuation",
]
