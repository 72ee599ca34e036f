from clmm_accounting.exceptions import TickMathError
from clmm_accounting.types import ProtocolVariant

from .shared import MAX_TICK_INDEX, MIN_TICK_INDEX, Q64_RESOLUTION, UINT_128_MAX

# Whirlpool: Q64.64 values of 1 / sqrt(1.0001) ** (2 ** bit), used for negative ticks
_WHIRLPOOL_NEGATIVE_RATIOS = (
    18445821805675392311,
    18444899583751176498,
    18443055278223354162,
    18439367220385604838,
    18431993317065449817,
    18417254355718160513,
    18387811781193591352,
    18329067761203520168,
    18212142134806087854,
    17980523815641551639,
    17526086738831147013,
    16651378430235024244,
    15030750278693429944,
    12247334978882834399,
    8131365268884726200,
    3584323654723342297,
    696457651847595233,
    26294789957452057,
    37481735321082,
)

# Whirlpool: Q32.96 values of sqrt(1.0001) ** (2 ** bit), used for positive ticks
_WHIRLPOOL_POSITIVE_RATIOS = (
    79232123823359799118286999567,
    79236085330515764027303304731,
    79244008939048815603706035061,
    79259858533276714757314932305,
    79291567232598584799939703904,
    79355022692464371645785046466,
    79482085999252804386437311141,
    79736823300114093921829183326,
    80248749790819932309965073892,
    81282483887344747381513967011,
    83390072131320151908154831281,
    87770609709833776024991924138,
    97234110755111693312479820773,
    119332217159966728226237229890,
    179736315981702064433883588727,
    407748233172238350107850275304,
    2098478828474011932436660412517,
    55581415166113811149459800483533,
    38992368544603139932233054999993551,
)

# Raydium: Q64.64 values of 1 / sqrt(1.0001) ** (2 ** bit) for both signs.  Positive ticks are inverted
_RAYDIUM_RATIOS = (
    0xFFFCB933BD6FB800,
    0xFFF97272373D4000,
    0xFFF2E50F5F657000,
    0xFFE5CACA7E10F000,
    0xFFCB9843D60F7000,
    0xFF973B41FA98E800,
    0xFF2EA16466C9B000,
    0xFE5DEE046A9A3800,
    0xFCBE86C7900BB000,
    0xF987A7253AC65800,
    0xF3392B0822BB6000,
    0xE7159475A2CAF000,
    0xD097F3BDFD2F2000,
    0xA9F746462D9F8000,
    0x70D869A156F31C00,
    0x31BE135F97ED3200,
    0x9AA508B5B85A500,
    0x5D6AF8DEDC582C,
    0x2216E584F5FA,
)


def _multiply_ratios(abs_tick: int, ratios: tuple[int, ...], one: int, resolution: int) -> int:
    ratio = ratios[0] if abs_tick & 0x1 else one
    for bit, bit_ratio in enumerate(ratios[1:], start=1):
        if abs_tick & (1 << bit):
            ratio = (ratio * bit_ratio) >> resolution
    return ratio


class TickMathModule:
    """
    Module for converting tick indexes into Q64.64 sqrt prices & locating the tick arrays storing ticks.

    Each program rounds intermediate products differently, so sqrt prices are computed with the integer
    algorithm of the program that owns the pool.  Results match the on-chain values bit for bit.
    """

    MAX_TICK_INDEX = MAX_TICK_INDEX
    MIN_TICK_INDEX = MIN_TICK_INDEX

    @classmethod
    def check_tick(cls, tick: int):
        """
        Checks that tick is within MIN and MAX tick indexes.  Raises TickMathError if the tick is out of bounds.
        """
        if tick > MAX_TICK_INDEX or tick < MIN_TICK_INDEX:
            raise TickMathError(f"Tick Index out of Bounds: {tick}")

    @classmethod
    def whirlpool_sqrt_price_at_tick(cls, tick: int) -> int:
        """
        Whirlpool tick to sqrt price conversion.  Negative ticks multiply Q64.64 ratios, while positive ticks
        multiply Q32.96 ratios and drop the extra 32 fractional bits at the end.
        """
        cls.check_tick(tick)
        if tick >= 0:
            ratio = _multiply_ratios(tick, _WHIRLPOOL_POSITIVE_RATIOS, 1 << 96, 96)
            return ratio >> 32
        return _multiply_ratios(-tick, _WHIRLPOOL_NEGATIVE_RATIOS, 1 << 64, Q64_RESOLUTION)

    @classmethod
    def raydium_sqrt_price_at_tick(cls, tick: int) -> int:
        """
        Raydium CLMM tick to sqrt price conversion.  Computes 1 / sqrt(1.0001 ** abs(tick)) in Q64.64, and
        inverts the ratio with u128::MAX / ratio for positive ticks.
        """
        cls.check_tick(tick)
        ratio = _multiply_ratios(abs(tick), _RAYDIUM_RATIOS, 1 << 64, Q64_RESOLUTION)
        if tick > 0:
            ratio = UINT_128_MAX // ratio
        return ratio

    @classmethod
    def sqrt_price_at_tick(cls, tick: int, variant: ProtocolVariant) -> int:
        """
        Returns the sqrt price as a Q64.64 fixed point number corresponding to the given tick, exactly as
        computed by the program of the pool.

        :param int tick: Tick to get sqrt price at.
        :param variant: protocol whose rounding is reproduced
        :return: sqrt price encoded as a Q64.64 fixed point number
        """
        match variant:
            case ProtocolVariant.orca_whirlpool:
                return cls.whirlpool_sqrt_price_at_tick(tick)
            case ProtocolVariant.raydium_clmm:
                return cls.raydium_sqrt_price_at_tick(tick)
        raise ValueError(f"Unsupported protocol variant: {variant}")

    @classmethod
    def tick_array_start_index(cls, tick: int, tick_spacing: int, ticks_per_array: int) -> int:
        """
        Returns the start tick index of the tick array containing tick.  Rounds towards negative infinity,
        so tick -1 is stored in the array ending at tick 0.

        :param tick: tick index to locate
        :param tick_spacing: tick spacing of the pool
        :param ticks_per_array: number of ticks stored in each array
        :return: start index of the tick array
        """
        if tick_spacing <= 0 or ticks_per_array <= 0:
            raise TickMathError("tick_spacing and ticks_per_array must be positive")
        ticks_in_array = tick_spacing * ticks_per_array
        return (tick // ticks_in_array) * ticks_in_array

    @classmethod
    def is_in_range(cls, current_tick: int, tick_lower: int, tick_upper: int) -> bool:
        """Liquidity is active when tick_lower <= current_tick < tick_upper"""
        return tick_lower <= current_tick < tick_upper
