"""Data for recovering the address that signed a message or a transaction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from web3types.primitives import H256, Bytes
from web3types.signed import SignedData, SignedTransaction

_SIGNATURE_LENGTH = 65


class ParseSignatureError(ValueError):
    """A raw signature did not have exactly 65 bytes."""

    def __init__(self) -> None:
        super().__init__("error parsing raw signature: wrong number of bytes, expected 65")


def _raw_bytes(value: Any) -> bytes:
    if isinstance(value, Bytes):
        return bytes.fromhex(value.to_json()[2:])
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"expected bytes, got {value!r}")


def _hash_bytes(value: H256) -> bytes:
    return value.to_int().to_bytes(32, "big")


def _hash_from(chunk: bytes) -> H256:
    return H256.from_int(int.from_bytes(chunk, "big"))


@dataclass(frozen=True)
class RecoveryMessage:
    """Either message bytes, hashed per EIP-191 before recovery, or a precomputed hash."""

    data: Optional[bytes] = None
    hash: Optional[H256] = None

    def __post_init__(self) -> None:
        if (self.data is None) == (self.hash is None):
            raise ValueError("a recovery message holds either data or a hash")

    @property
    def is_hash(self) -> bool:
        return self.hash is not None

    @classmethod
    def from_value(cls, value: Any) -> "RecoveryMessage":
        """Wrap a hash as a hash; text and any byte string, whatever its length, as data."""
        if isinstance(value, RecoveryMessage):
            return value
        if isinstance(value, H256):
            return cls(hash=value)
        if isinstance(value, str):
            return cls(data=value.encode("utf-8"))
        if isinstance(value, (Bytes, bytes, bytearray, memoryview)):
            return cls(data=_raw_bytes(value))
        raise TypeError(f"cannot make a recovery message from {value!r}")


MessageLike = Union[RecoveryMessage, H256, Bytes, bytes, bytearray, str]


@dataclass
class Recovery:
    """A message with a signature in Electrum notation: `v` is 27, 28, or 35 + 2 * chain id (+1)."""

    message: RecoveryMessage
    v: int
    r: H256
    s: H256

    def __post_init__(self) -> None:
        self.message = RecoveryMessage.from_value(self.message)
        if isinstance(self.v, bool) or not isinstance(self.v, int) or self.v < 0:
            raise ValueError(f"v must be a non-negative integer, got {self.v!r}")

    @classmethod
    def from_raw_signature(cls, message: MessageLike, raw_signature: Any) -> "Recovery":
        """Split a 65-byte signature into r (32 bytes), s (32 bytes) and v (1 byte)."""
        signature = _raw_bytes(raw_signature)
        if len(signature) != _SIGNATURE_LENGTH:
            raise ParseSignatureError()
        return cls(message, signature[64], _hash_from(signature[:32]), _hash_from(signature[32:64]))

    @classmethod
    def from_signed_data(cls, signed: SignedData) -> "Recovery":
        return cls(signed.message_hash, signed.v, signed.r, signed.s)

    @classmethod
    def from_signed_transaction(cls, tx: SignedTransaction) -> "Recovery":
        return cls(tx.message_hash, tx.v, tx.r, tx.s)

    def recovery_id(self) -> Optional[int]:
        """The standard recovery id (0 or 1), or None if `v` is not valid."""
        if self.v == 27:
            return 0
        if self.v == 28:
            return 1
        if self.v >= 35:
            return (self.v - 1) % 2
        return None

    def as_signature(self) -> Optional[tuple[bytes, int]]:
        """The 64-byte compact signature r || s and the recovery id, or None if `v` is invalid."""
        recovery_id = self.recovery_id()
        if recovery_id is None:
            return None
        return _hash_bytes(self.r) + _hash_bytes(self.s), recovery_id