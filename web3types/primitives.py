"""Fixed-size hashes, raw byte strings and hex quantity encoding for JSON-RPC payloads."""

from __future__ import annotations

import binascii
import re
import secrets
from typing import Any, ClassVar

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")
_DEC_DIGITS = re.compile(r"[0-9]+")


def _unhex(text: str) -> bytes:
    try:
        return binascii.unhexlify(text.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise ValueError(f"Invalid hex: {exc}") from None


def encode_quantity(value: int) -> str:
    """Encode a non-negative integer as a 0x-prefixed hex quantity without leading zeros."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer quantity, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"quantity must not be negative: {value}")
    return f"0x{value:x}"


def decode_quantity(value: Any, bits: int = 256) -> int:
    """Decode a JSON quantity: 0x-prefixed hex, or plain decimal digits.

    Raises ValueError when the text is malformed or the number needs more than `bits` bits.
    """
    if not isinstance(value, str):
        raise ValueError(f"expected a quantity string, got {value!r}")
    if value.startswith("0x"):
        digits = value[2:]
        if not _HEX_DIGITS.fullmatch(digits):
            raise ValueError(f"invalid hex quantity: {value!r}")
        number = int(digits, 16)
    else:
        if not _DEC_DIGITS.fullmatch(value):
            raise ValueError(f"invalid quantity: {value!r}")
        number = int(value)
    if number >> bits:
        raise ValueError(f"quantity {value!r} does not fit in {bits} bits")
    return number


class FixedHash(bytes):
    """A byte string of a fixed length, shown and serialized as 0x-prefixed hex."""

    SIZE: ClassVar[int] = 0

    def __new__(cls, data: bytes | bytearray | memoryview | None = None) -> "FixedHash":
        if cls.SIZE == 0:
            raise TypeError("FixedHash has no size; use a sized subclass such as H256")
        if data is None:
            raw = bytes(cls.SIZE)
        elif isinstance(data, (bytes, bytearray, memoryview)):
            raw = bytes(data)
        else:
            raise TypeError(f"{cls.__name__} is built from bytes, not {type(data).__name__}")
        if len(raw) != cls.SIZE:
            raise ValueError(f"{cls.__name__} takes {cls.SIZE} bytes, got {len(raw)}")
        return super().__new__(cls, raw)

    @classmethod
    def from_hex(cls, text: str) -> "FixedHash":
        """Parse hex digits, with or without a 0x prefix."""
        if not isinstance(text, str):
            raise ValueError(f"expected a hex string, got {text!r}")
        digits = text[2:] if text.startswith("0x") else text
        if len(digits) != 2 * cls.SIZE:
            raise ValueError(
                f"{cls.__name__} needs {2 * cls.SIZE} hex digits, got {len(digits)}"
            )
        return cls(_unhex(digits))

    @classmethod
    def from_low_u64_be(cls, value: int) -> "FixedHash":
        """Put a 64-bit integer into the low-order bytes, big-endian."""
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < 1 << 64:
            raise ValueError(f"not a 64-bit unsigned integer: {value!r}")
        return cls.from_int(value)

    @classmethod
    def from_int(cls, value: int) -> "FixedHash":
        """Encode an unsigned integer big-endian into the full width."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected an integer, got {type(value).__name__}")
        if not 0 <= value < 1 << (8 * cls.SIZE):
            raise ValueError(f"{value} does not fit in {cls.__name__}")
        return cls(value.to_bytes(cls.SIZE, "big"))

    def to_int(self) -> int:
        return int.from_bytes(self, "big")

    @classmethod
    def zero(cls) -> "FixedHash":
        return cls()

    @classmethod
    def random(cls) -> "FixedHash":
        return cls(secrets.token_bytes(cls.SIZE))

    def to_json(self) -> str:
        return "0x" + self.hex()

    @classmethod
    def from_json(cls, value: Any) -> "FixedHash":
        """Parse the JSON form, which must be a 0x-prefixed string of the exact width."""
        if not isinstance(value, str) or not value.startswith("0x"):
            raise ValueError(f"expected a 0x-prefixed hex string, got {value!r}")
        return cls.from_hex(value)

    def __repr__(self) -> str:
        return "0x" + self.hex()

    def __str__(self) -> str:
        return f"0x{self[:2].hex()}\u2026{self[-2:].hex()}"

    def __format__(self, spec: str) -> str:
        if spec == "":
            return str(self)
        if spec == "x":
            return self.hex()
        if spec == "#x":
            return "0x" + self.hex()
        raise ValueError(f"unsupported format spec {spec!r} for {type(self).__name__}")


class H64(FixedHash):
    SIZE = 8


class H128(FixedHash):
    SIZE = 16


class H160(FixedHash):
    SIZE = 20


class H256(FixedHash):
    SIZE = 32


class H512(FixedHash):
    SIZE = 64


class H520(FixedHash):
    SIZE = 65


class H2048(FixedHash):
    SIZE = 256


class Bytes(bytes):
    """Raw bytes serialized as a 0x-prefixed hex string."""

    def __new__(cls, data: Any = b"") -> "Bytes":
        if isinstance(data, str):
            data = data.encode("utf-8")
        elif isinstance(data, int):
            raise TypeError("Bytes is built from a byte sequence, not an integer")
        return super().__new__(cls, data)

    def to_json(self) -> str:
        return "0x" + self.hex()

    @classmethod
    def from_json(cls, value: Any) -> "Bytes":
        if not isinstance(value, str) or not value.startswith("0x"):
            raise ValueError(f"invalid value {value!r}, expected 0x prefix")
        return cls(_unhex(value[2:]))


class BytesArray(bytes):
    """Bytes serialized as a JSON array of small integers."""

    def __new__(cls, data: Any = b"") -> "BytesArray":
        if isinstance(data, (str, int)):
            raise TypeError("BytesArray is built from a byte sequence")
        return super().__new__(cls, data)

    def to_json(self) -> list[int]:
        return list(self)

    @classmethod
    def from_json(cls, value: Any) -> "BytesArray":
        if not isinstance(value, list):
            raise ValueError(f"expected a JSON array of bytes, got {value!r}")
        for item in value:
            if isinstance(item, bool) or not isinstance(item, int) or not 0 <= item <= 255:
                raise ValueError(f"not a byte value: {item!r}")
        return cls(value)