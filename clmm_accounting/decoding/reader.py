from clmm_accounting.exceptions import MalformedAccount
from clmm_accounting.utils import ZERO_KEY, encode_key

from .layouts import KEY_LENGTH


class AccountReader:
    """
    Reads fixed width little-endian fields from account bytes at explicit offsets.

    Every read is bounds checked, and raises MalformedAccount instead of returning a partial value.
    """

    def __init__(self, data: bytes, account_name: str):
        self.data = bytes(data)
        self.account_name = account_name

    def _slice(self, offset: int, width: int) -> bytes:
        if offset < 0 or offset + width > len(self.data):
            raise MalformedAccount(
                f"{self.account_name} field at offset {offset} with width {width} exceeds "
                f"account length of {len(self.data)} bytes"
            )
        return self.data[offset : offset + width]

    def _int(self, offset: int, width: int, signed: bool) -> int:
        return int.from_bytes(self._slice(offset, width), "little", signed=signed)

    def u8(self, offset: int) -> int:
        return self._int(offset, 1, False)

    def u16(self, offset: int) -> int:
        return self._int(offset, 2, False)

    def i32(self, offset: int) -> int:
        return self._int(offset, 4, True)

    def u64(self, offset: int) -> int:
        return self._int(offset, 8, False)

    def u128(self, offset: int) -> int:
        return self._int(offset, 16, False)

    def i128(self, offset: int) -> int:
        return self._int(offset, 16, True)

    def flag(self, offset: int) -> bool:
        value = self.u8(offset)
        if value not in (0, 1):
            raise MalformedAccount(f"{self.account_name} boolean at offset {offset} has invalid value {value}")
        return value == 1

    def key(self, offset: int, field_name: str) -> str:
        """
        Reads a 32 byte public key and returns it base58 encoded.  The all-zero default key is rejected, since
        mints and pool references are always set on initialized accounts.
        """
        key_bytes = self._slice(offset, KEY_LENGTH)
        if key_bytes == ZERO_KEY:
            raise MalformedAccount(f"{self.account_name} {field_name} is the default public key")
        return encode_key(key_bytes)
