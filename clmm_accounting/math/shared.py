MAX_TICK_INDEX = 443636
MIN_TICK_INDEX = -MAX_TICK_INDEX
MIN_SQRT_PRICE_X64 = 4295048016
WHIRLPOOL_MAX_SQRT_PRICE_X64 = 79226673515401279992447579055
RAYDIUM_MAX_SQRT_PRICE_X64 = 79226673521066979257578248091

Q64_RESOLUTION = 64
Q64 = 0x10000000000000000
Q128 = 0x100000000000000000000000000000000
UINT_128_MAX = 2**128 - 1

WHIRLPOOL_TICKS_PER_ARRAY = 88
RAYDIUM_TICKS_PER_ARRAY = 60
