import pytest

from clmm_accounting.types import Pool, Position, ProtocolVariant, Tick

from .utils import Q64, random_key


@pytest.fixture(name="random_key")
def fixture_random_key():
    return random_key


@pytest.fixture(name="build_pool")
def fixture_build_pool():
    def _build_pool(variant: ProtocolVariant = ProtocolVariant.orca_whirlpool, **kwargs) -> Pool:
        pool_params = {
            "variant": variant,
            "asset_mint_a": random_key(),
            "asset_mint_b": random_key(),
            "tick_spacing": 1,
            "liquidity": 0,
            "current_tick_index": 0,
            "current_sqrt_price_q64": Q64,
            "fee_growth_global_a": 0,
            "fee_growth_global_b": 0,
        }
        pool_params.update(kwargs)
        return Pool(**pool_params)

    return _build_pool


@pytest.fixture(name="build_position")
def fixture_build_position():
    def _build_position(pool: Pool, **kwargs) -> Position:
        position_params = {
            "variant": pool.variant,
            "pool_address": pool.address or random_key(),
            "position_mint": random_key(),
            "tick_lower_index": -100,
            "tick_upper_index": 100,
            "liquidity": 1,
            "fee_growth_inside_last_a": 0,
            "fee_growth_inside_last_b": 0,
            "token_fees_owed_a": 0,
            "token_fees_owed_b": 0,
        }
        position_params.update(kwargs)
        return Position(**position_params)

    return _build_position


@pytest.fixture(name="build_tick")
def fixture_build_tick():
    def _build_tick(tick_index: int, fee_growth_outside_a: int = 0, fee_growth_outside_b: int = 0) -> Tick:
        return Tick(
            tick_index=tick_index,
            initialized=True,
            liquidity_net=0,
            liquidity_gross=1,
            fee_growth_outside_a=fee_growth_outside_a,
            fee_growth_outside_b=fee_growth_outside_b,
        )

    return _build_tick
