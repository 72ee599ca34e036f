"""
Accounts in this module are assembled byte by byte at the field offsets published by each program, without
going through the layout descriptors, so a shifted offset in a descriptor fails here.
"""
import pytest

from clmm_accounting.decoding import (
    RAYDIUM_CLMM_LAYOUT,
    WHIRLPOOL_LAYOUT,
    decode_pool,
    decode_position,
    decode_tick_array,
)
from clmm_accounting.types import ProtocolVariant
from clmm_accounting.utils import decode_key

from ..utils import random_key


def _u(value: int, width: int) -> bytes:
    return value.to_bytes(width, "little")


def _i(value: int, width: int) -> bytes:
    return value.to_bytes(width, "little", signed=True)


def _account(size: int, discriminator: str, fields: dict[int, bytes]) -> bytes:
    buffer = bytearray(size)
    buffer[:8] = bytes.fromhex(discriminator)
    for offset, raw in fields.items():
        buffer[offset : offset + len(raw)] = raw
    assert len(buffer) == size
    return bytes(buffer)


class TestWhirlpoolOffsets:
    def test_pool(self):
        mint_a, mint_b = random_key(), random_key()
        data = _account(
            653,
            "3f95d10ce1806309",
            {
                41: _u(64, 2),
                49: _u(0x0102030405060708090A0B0C0D0E0F10, 16),
                65: _u(0x1122334455667788_99AABBCCDDEEFF00, 16),
                81: _i(-12345, 4),
                101: decode_key(mint_a),
                165: _u(0xA1A2A3A4A5A6A7A8_A9AAABACADAEAFB0, 16),
                181: decode_key(mint_b),
                245: _u(0xB1B2B3B4B5B6B7B8_B9BABBBCBDBEBFC0, 16),
            },
        )
        pool = decode_pool(data, ProtocolVariant.orca_whirlpool)

        assert pool.tick_spacing == 64
        assert pool.liquidity == 0x0102030405060708090A0B0C0D0E0F10
        assert pool.current_sqrt_price_q64 == 0x1122334455667788_99AABBCCDDEEFF00
        assert pool.current_tick_index == -12345
        assert pool.asset_mint_a == mint_a
        assert pool.asset_mint_b == mint_b
        assert pool.fee_growth_global_a == 0xA1A2A3A4A5A6A7A8_A9AAABACADAEAFB0
        assert pool.fee_growth_global_b == 0xB1B2B3B4B5B6B7B8_B9BABBBCBDBEBFC0
        assert pool.decimals_a is None and pool.decimals_b is None

    def test_position(self):
        pool_key, mint = random_key(), random_key()
        data = _account(
            216,
            "aabc8fe47a40f7d0",
            {
                8: decode_key(pool_key),
                40: decode_key(mint),
                72: _u(987654321987654321, 16),
                88: _i(-5440, 4),
                92: _i(-64, 4),
                96: _u(0xC1C2C3C4C5C6C7C8_C9CACBCCCDCECFD0, 16),
                112: _u(0xD1D2D3D4D5D6D7D8, 8),
                120: _u(0xE1E2E3E4E5E6E7E8_E9EAEBECEDEEEFF0, 16),
                136: _u(0xF1F2F3F4F5F6F7F8, 8),
            },
        )
        position = decode_position(data, ProtocolVariant.orca_whirlpool)

        assert position.pool_address == pool_key
        assert position.position_mint == mint
        assert position.liquidity == 987654321987654321
        assert position.tick_lower_index == -5440
        assert position.tick_upper_index == -64
        assert position.fee_growth_inside_last_a == 0xC1C2C3C4C5C6C7C8_C9CACBCCCDCECFD0
        assert position.token_fees_owed_a == 0xD1D2D3D4D5D6D7D8
        assert position.fee_growth_inside_last_b == 0xE1E2E3E4E5E6E7E8_E9EAEBECEDEEEFF0
        assert position.token_fees_owed_b == 0xF1F2F3F4F5F6F7F8

    def test_tick_array_records_are_113_bytes(self):
        pool_key = random_key()
        # start -5632 with spacing 64, so slot 3 is tick -5440 and slot 87 is tick -64
        slot_3, slot_87 = 12 + 3 * 113, 12 + 87 * 113
        data = _account(
            9988,
            "4561bdbe6e0742bb",
            {
                8: _i(-5632, 4),
                slot_3: b"\x01",
                slot_3 + 1: _i(-77, 16),
                slot_3 + 17: _u(77, 16),
                slot_3 + 33: _u(111, 16),
                slot_3 + 49: _u(222, 16),
                slot_87: b"\x01",
                slot_87 + 1: _i(77, 16),
                slot_87 + 17: _u(77, 16),
                slot_87 + 33: _u(333, 16),
                slot_87 + 49: _u(444, 16),
                9956: decode_key(pool_key),
            },
        )
        tick_array = decode_tick_array(data, ProtocolVariant.orca_whirlpool, tick_spacing=64)

        assert tick_array.pool_address == pool_key
        assert tick_array.start_tick_index == -5632
        assert [tick.tick_index for tick in tick_array.ticks] == [-5440, -64]

        lower = tick_array.get_tick(-5440)
        assert (lower.liquidity_net, lower.liquidity_gross) == (-77, 77)
        assert (lower.fee_growth_outside_a, lower.fee_growth_outside_b) == (111, 222)

        upper = tick_array.get_tick(-64)
        assert (upper.liquidity_net, upper.liquidity_gross) == (77, 77)
        assert (upper.fee_growth_outside_a, upper.fee_growth_outside_b) == (333, 444)


class TestRaydiumOffsets:
    def test_pool(self):
        mint_0, mint_1 = random_key(), random_key()
        data = _account(
            1544,
            "f7ede3f5d7c3de46",
            {
                73: decode_key(mint_0),
                105: decode_key(mint_1),
                233: _u(6, 1),
                234: _u(9, 1),
                235: _u(10, 2),
                237: _u(0x0102030405060708090A0B0C0D0E0F10, 16),
                253: _u(0x1122334455667788_99AABBCCDDEEFF00, 16),
                269: _i(-580, 4),
                277: _u(0xA1A2A3A4A5A6A7A8_A9AAABACADAEAFB0, 16),
                293: _u(0xB1B2B3B4B5B6B7B8_B9BABBBCBDBEBFC0, 16),
            },
        )
        pool = decode_pool(data, ProtocolVariant.raydium_clmm)

        assert pool.asset_mint_a == mint_0
        assert pool.asset_mint_b == mint_1
        assert (pool.decimals_a, pool.decimals_b) == (6, 9)
        assert pool.tick_spacing == 10
        assert pool.liquidity == 0x0102030405060708090A0B0C0D0E0F10
        assert pool.current_sqrt_price_q64 == 0x1122334455667788_99AABBCCDDEEFF00
        assert pool.current_tick_index == -580
        assert pool.fee_growth_global_a == 0xA1A2A3A4A5A6A7A8_A9AAABACADAEAFB0
        assert pool.fee_growth_global_b == 0xB1B2B3B4B5B6B7B8_B9BABBBCBDBEBFC0

    def test_position(self):
        pool_key, mint = random_key(), random_key()
        data = _account(
            281,
            "466f967ee60f1975",
            {
                9: decode_key(mint),
                41: decode_key(pool_key),
                73: _i(-580, 4),
                77: _i(-10, 4),
                81: _u(987654321987654321, 16),
                97: _u(0xC1C2C3C4C5C6C7C8_C9CACBCCCDCECFD0, 16),
                113: _u(0xE1E2E3E4E5E6E7E8_E9EAEBECEDEEEFF0, 16),
                129: _u(0xD1D2D3D4D5D6D7D8, 8),
                137: _u(0xF1F2F3F4F5F6F7F8, 8),
            },
        )
        position = decode_position(data, ProtocolVariant.raydium_clmm)

        assert position.position_mint == mint
        assert position.pool_address == pool_key
        assert position.tick_lower_index == -580
        assert position.tick_upper_index == -10
        assert position.liquidity == 987654321987654321
        assert position.fee_growth_inside_last_a == 0xC1C2C3C4C5C6C7C8_C9CACBCCCDCECFD0
        assert position.fee_growth_inside_last_b == 0xE1E2E3E4E5E6E7E8_E9EAEBECEDEEEFF0
        assert position.token_fees_owed_a == 0xD1D2D3D4D5D6D7D8
        assert position.token_fees_owed_b == 0xF1F2F3F4F5F6F7F8

    def test_tick_array_records_are_168_bytes(self):
        pool_key = random_key()
        # start -600 with spacing 10, so slot 2 is tick -580 and slot 59 is tick -10
        slot_2, slot_59 = 44 + 2 * 168, 44 + 59 * 168
        data = _account(
            10240,
            "c09b55cd31f9812a",
            {
                8: decode_key(pool_key),
                40: _i(-600, 4),
                slot_2: _i(-580, 4),
                slot_2 + 4: _i(-77, 16),
                slot_2 + 20: _u(77, 16),
                slot_2 + 36: _u(111, 16),
                slot_2 + 52: _u(222, 16),
                slot_59: _i(-10, 4),
                slot_59 + 4: _i(77, 16),
                slot_59 + 20: _u(77, 16),
                slot_59 + 36: _u(333, 16),
                slot_59 + 52: _u(444, 16),
            },
        )
        tick_array = decode_tick_array(data, ProtocolVariant.raydium_clmm, tick_spacing=10)

        assert tick_array.pool_address == pool_key
        assert tick_array.start_tick_index == -600
        assert [tick.tick_index for tick in tick_array.ticks] == [-580, -10]

        lower = tick_array.get_tick(-580)
        assert (lower.liquidity_net, lower.liquidity_gross) == (-77, 77)
        assert (lower.fee_growth_outside_a, lower.fee_growth_outside_b) == (111, 222)

        upper = tick_array.get_tick(-10)
        assert (upper.liquidity_net, upper.liquidity_gross) == (77, 77)
        assert (upper.fee_growth_outside_a, upper.fee_growth_outside_b) == (333, 444)


@pytest.mark.parametrize(
    "protocol_layout, expected",
    [
        (
            WHIRLPOOL_LAYOUT,
            {
                "pool": (653, 41, 49, 65, 81, 101, 181, 165, 245, None, None),
                "position": (216, 8, 40, 72, 88, 92, 96, 120, 112, 136),
                "tick_array": (9988, 8, 9956, 12, 88),
                "tick": (113, 1, 17, 33, 49, 0, None),
            },
        ),
        (
            RAYDIUM_CLMM_LAYOUT,
            {
                "pool": (1544, 235, 237, 253, 269, 73, 105, 277, 293, 233, 234),
                "position": (281, 41, 9, 81, 73, 77, 97, 113, 129, 137),
                "tick_array": (10240, 40, 8, 44, 60),
                "tick": (168, 4, 20, 36, 52, None, 0),
            },
        ),
    ],
)
def test_descriptor_offsets(protocol_layout, expected):
    pool, position, tick_array = protocol_layout.pool, protocol_layout.position, protocol_layout.tick_array
    tick = tick_array.tick

    assert expected["pool"] == (
        pool.account_size,
        pool.tick_spacing,
        pool.liquidity,
        pool.sqrt_price,
        pool.tick_current,
        pool.mint_a,
        pool.mint_b,
        pool.fee_growth_global_a,
        pool.fee_growth_global_b,
        pool.decimals_a,
        pool.decimals_b,
    )
    assert expected["position"] == (
        position.account_size,
        position.pool,
        position.position_mint,
        position.liquidity,
        position.tick_lower,
        position.tick_upper,
        position.fee_growth_inside_a,
        position.fee_growth_inside_b,
        position.fee_owed_a,
        position.fee_owed_b,
    )
    assert expected["tick_array"] == (
        tick_array.account_size,
        tick_array.start_tick_index,
        tick_array.pool,
        tick_array.ticks,
        tick_array.ticks_per_array,
    )
    assert expected["tick"] == (
        tick.size,
        tick.liquidity_net,
        tick.liquidity_gross,
        tick.fee_growth_outside_a,
        tick.fee_growth_outside_b,
        tick.initialized,
        tick.tick_index,
    )
