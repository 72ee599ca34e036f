from .accounts import (
    decode_account,
    decode_pool,
    decode_position,
    decode_tick_array,
    detect_variant,
)
from .layouts import (
    PROTOCOL_LAYOUTS,
    RAYDIUM_CLMM_LAYOUT,
    WHIRLPOOL_LAYOUT,
    ProtocolLayout,
    anchor_discriminator,
    get_layout,
)

__all__ = [
    "PROTOCOL_LAYOUTS",
    "RAYDIUM_CLMM_LAYOUT",
    "WHIRLPOOL_LAYOUT",
    "ProtocolLayout",
    "anchor_discriminator",
    "decode_account",
    "decode_pool",
    "decode_position",
    "decode_tick_array",
    "detect_variant",
    "get_layout",
]
