"""
Assembles raw fee & amount results into human readable valuations.

Raw integers are scaled by the mint decimals, and optionally priced with fiat prices from a
:class:`PriceSource`.  Price lookups, token metadata, and persistence are left to the caller.
"""
import logging
from decimal import Decimal
from typing import Iterable, Mapping, Protocol

from clmm_accounting.exceptions import POSITION_ERRORS, MissingDecimals
from clmm_accounting.types import (
    PortfolioValuation,
    PositionSnapshot,
    PositionValuation,
    TokenValuation,
)

root_logger = logging.getLogger("clmm_accounting")
logger = root_logger.getChild("valuation")


class PriceSource(Protocol):
    """Source of fiat prices for token mints"""

    def get_prices(self, mints: Iterable[str]) -> Mapping[str, Decimal]:
        """Return the fiat price for each mint with a known price.  Mints without a price are omitted"""
        ...


class StaticPriceSource:
    """PriceSource backed by a fixed mapping of mint to price"""

    def __init__(self, prices: Mapping[str, Decimal | float | str] | None = None):
        self.prices = {mint: Decimal(str(price)) for mint, price in (prices or {}).items()}

    def get_prices(self, mints: Iterable[str]) -> dict[str, Decimal]:
        return {mint: self.prices[mint] for mint in mints if mint in self.prices}


def scale_amount(raw_amount: int, decimals: int) -> Decimal:
    """
    Converts a raw token amount into whole token units.  Exact for any amount & decimal count.

    :param raw_amount: amount in the smallest unit of the token
    :param decimals: decimals of the token mint
    :return: raw_amount / 10 ** decimals
    """
    if decimals < 0:
        raise ValueError(f"Decimals cannot be negative: {decimals}")
    sign, digits, exponent = Decimal(raw_amount).as_tuple()
    return Decimal((sign, digits, exponent - decimals))


def _resolve_decimals(override: int | None, pool_decimals: int | None, mint: str) -> int:
    if override is not None:
        return override
    if pool_decimals is not None:
        return pool_decimals
    raise MissingDecimals(f"Decimals for mint {mint} are not stored in the pool and were not supplied")


def value_position(
    snapshot: PositionSnapshot,
    decimals_a: int | None = None,
    decimals_b: int | None = None,
    prices: Mapping[str, Decimal] | None = None,
) -> PositionValuation:
    """
    Scales a position snapshot into token units and attaches fiat prices

    :param snapshot: fees & amounts computed for a position
    :param decimals_a: decimals of token A.  Defaults to the decimals stored in the pool account
    :param decimals_b: decimals of token B.  Defaults to the decimals stored in the pool account
    :param prices: fiat price per mint.  Sides without a price have no fiat value
    :return: PositionValuation
    :raises MissingDecimals: if decimals are neither supplied nor stored in the pool
    """
    pool, prices = snapshot.pool, prices or {}

    decimals_a = _resolve_decimals(decimals_a, pool.decimals_a, pool.asset_mint_a)
    decimals_b = _resolve_decimals(decimals_b, pool.decimals_b, pool.asset_mint_b)

    return PositionValuation(
        variant=pool.variant.value,
        position_address=snapshot.position.address,
        pool_address=snapshot.position.pool_address,
        in_range=snapshot.in_range,
        token_a=TokenValuation(
            mint=pool.asset_mint_a,
            decimals=decimals_a,
            amount=scale_amount(snapshot.amounts.amount_a, decimals_a),
            fees=scale_amount(snapshot.fees.uncollected_a, decimals_a),
            price=prices.get(pool.asset_mint_a),
        ),
        token_b=TokenValuation(
            mint=pool.asset_mint_b,
            decimals=decimals_b,
            amount=scale_amount(snapshot.amounts.amount_b, decimals_b),
            fees=scale_amount(snapshot.fees.uncollected_b, decimals_b),
            price=prices.get(pool.asset_mint_b),
        ),
    )


def value_portfolio(
    snapshots: Mapping[str, PositionSnapshot | Exception],
    price_source: PriceSource | None = None,
    decimals: Mapping[str, int] | None = None,
    strict: bool = False,
) -> PortfolioValuation:
    """
    Values a set of positions.  Positions that failed upstream, or fail to value, are reported in
    PortfolioValuation.errors instead of being counted as zero.

    :param snapshots: position key (usually the position address) mapped to its snapshot, or to the exception
        raised while evaluating it
    :param price_source: source of fiat prices.  Positions are valued without prices if None
    :param decimals: decimals per mint, used for pools that do not store decimals
    :param strict: re-raise the first failure instead of collecting it
    :return: PortfolioValuation
    """
    decimals = decimals or {}
    mints = {
        mint
        for snapshot in snapshots.values()
        if isinstance(snapshot, PositionSnapshot)
        for mint in (snapshot.pool.asset_mint_a, snapshot.pool.asset_mint_b)
    }
    prices = dict(price_source.get_prices(sorted(mints))) if price_source and mints else {}

    positions: list[PositionValuation] = []
    errors: dict[str, Exception] = {}

    for key, snapshot in snapshots.items():
        if isinstance(snapshot, Exception):
            if strict:
                raise snapshot
            logger.warning(f"Excluding position {key} from portfolio: {snapshot}")
            errors[key] = snapshot
            continue

        try:
            positions.append(
                value_position(
                    snapshot,
                    decimals_a=decimals.get(snapshot.pool.asset_mint_a),
                    decimals_b=decimals.get(snapshot.pool.asset_mint_b),
                    prices=prices,
                )
            )
        except POSITION_ERRORS as exc:
            if strict:
                raise
            logger.warning(f"Excluding position {key} from portfolio: {exc}")
            errors[key] = exc

    logger.info(f"Valued {len(positions)} positions, {len(errors)} failed")
    return PortfolioValuation(positions=positions, errors=errors)
