import base64
import binascii
from typing import Literal

import base58

ZERO_KEY = bytes(32)


def uint_over_under_flow(value: int, precision: Literal[64, 128, 256]) -> int:
    """
    Handle uint over/underflow.  If value exceeds the max size of the uint, the value will overflow
    and start back at 0.  If value is less than 0, the value will underflow and start back at the max.

    Works for any number of wraps, so chained subtractions like (a - b - c) can be wrapped once.

    :param value: Number to wrap
    :param precision: bits of precision
    :return: within range uint
    """
    return value % (2**precision)


def wrapping_sub(minuend: int, *subtrahends: int, precision: Literal[64, 128, 256] = 128) -> int:
    """
    Subtracts each subtrahend from minuend with unsigned wraparound

    :param minuend: value to subtract from
    :param subtrahends: values to subtract
    :param precision: bits of precision.  Defaults to 128
    :return: (minuend - sum(subtrahends)) mod 2**precision
    """
    return uint_over_under_flow(minuend - sum(subtrahends), precision)


def encode_key(key_bytes: bytes) -> str:
    """
    Encodes a 32 byte public key as a base58 string

    :param key_bytes: raw key bytes
    :return: base58 encoded key
    """
    if len(key_bytes) != 32:
        raise ValueError(f"Public keys must be 32 bytes, received {len(key_bytes)} bytes")
    return base58.b58encode(key_bytes).decode("ascii")


def decode_key(key: str) -> bytes:
    """
    Decodes a base58 public key string into its 32 raw bytes

    :param key: base58 encoded key
    :return: 32 key bytes
    """
    try:
        key_bytes = base58.b58decode(key)
    except ValueError as exc:
        raise ValueError(f"{key} is not a valid base58 string") from exc

    if len(key_bytes) != 32:
        raise ValueError(f"{key} decodes to {len(key_bytes)} bytes instead of 32")
    return key_bytes


def to_bytes(data: str | bytes, encoding: Literal["raw", "hex", "base64"] = "raw") -> bytes:
    """
    Converts account data read from a file or an RPC response into raw bytes

    :param data: account data
    :param encoding: "raw" for unmodified bytes, "hex" for hex strings (0x prefix allowed), "base64" for
        base64 strings as returned by Solana RPC nodes
    :return: raw account bytes
    """
    if encoding == "raw":
        return data.encode() if isinstance(data, str) else bytes(data)

    try:
        text = data.decode("ascii") if isinstance(data, bytes) else data
        text = "".join(text.split())
        if encoding == "hex":
            return bytes.fromhex(text[2:] if text.startswith("0x") else text)
        if encoding == "base64":
            return base64.b64decode(text, validate=True)
    except (ValueError, binascii.Error) as exc:
        raise ValueError(f"Account data is not valid {encoding}") from exc

    raise ValueError(f"Unsupported account data encoding: {encoding}")
