"""A miner's work package, as returned by eth_getWork."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from web3types.primitives import H256, encode_quantity

_U64_LIMIT = 1 << 64


@dataclass(frozen=True)
class Work:
    """Proof-of-work hash, seed hash, target and, when known, the block number."""

    pow_hash: H256
    seed_hash: H256
    target: H256
    number: Optional[int] = None

    def to_json(self) -> list[str]:
        out = [self.pow_hash.to_json(), self.seed_hash.to_json(), self.target.to_json()]
        if self.number is not None:
            out.append(encode_quantity(self.number))
        return out

    @classmethod
    def from_json(cls, value: Any) -> "Work":
        """Read a three-hash array, optionally followed by the block number as a JSON integer."""
        try:
            return cls._parse(value)
        except ValueError as exc:
            raise ValueError(f"Cannot deserialize Work: {exc}") from None

    @classmethod
    def _parse(cls, value: Any) -> "Work":
        if not isinstance(value, list):
            raise ValueError(f"expected a JSON array, got {value!r}")
        if len(value) not in (3, 4):
            raise ValueError(f"invalid length {len(value)}, expected 3 or 4 elements")
        pow_hash, seed_hash, target = (H256.from_json(item) for item in value[:3])
        number = None
        if len(value) == 4:
            raw = value[3]
            if isinstance(raw, bool) or not isinstance(raw, int) or not 0 <= raw < _U64_LIMIT:
                raise ValueError(f"invalid block number {raw!r}, expected u64")
            number = raw
        return cls(pow_hash, seed_hash, target, number)