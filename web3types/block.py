"""Blocks, block headers and the ways of naming a block in JSON-RPC calls."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from web3types.primitives import (
    H64,
    H160,
    H256,
    H2048,
    Bytes,
    decode_quantity,
    encode_quantity,
)

_TAGS = ("latest", "earliest", "pending")
_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")
_U64_LIMIT = 1 << 64


def _object(data: Any) -> Mapping:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected a JSON object, got {data!r}")
    return data


def _required(data: Mapping, key: str, parse: Callable[[Any], Any]) -> Any:
    try:
        raw = data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None
    return parse(raw)


def _optional(data: Mapping, key: str, parse: Callable[[Any], Any]) -> Any:
    raw = data.get(key)
    return None if raw is None else parse(raw)


def _list_of(parse: Callable[[Any], Any] | None) -> Callable[[Any], list]:
    """Build a parser for a JSON array; without ``parse`` items are kept as they are."""

    def parse_list(raw: Any) -> list:
        if not isinstance(raw, list):
            raise ValueError(f"expected a JSON array, got {raw!r}")
        if parse is None:
            return list(raw)
        return [parse(item) for item in raw]

    return parse_list


def _u64(value: Any) -> int:
    return decode_quantity(value, 64)


def _u256(value: Any) -> int:
    return decode_quantity(value, 256)


def _encode(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, int):
        return encode_quantity(value)
    return value.to_json()


def _parse_u64_hex(digits: str) -> int:
    if not digits:
        raise ValueError("cannot parse integer from empty string")
    if not _HEX_DIGITS.fullmatch(digits):
        raise ValueError("invalid digit found in string")
    number = int(digits, 16)
    if number >= _U64_LIMIT:
        raise ValueError("number too large to fit in target type")
    return number


def parse_author(value: Any) -> H160:
    """Parse a miner address; null or absent means the zero address.

    Strings longer than 40 characters keep only their last 40 hex digits.
    """
    if value is None:
        return H160()
    if not isinstance(value, str):
        raise ValueError(f"expected an address string, got {value!r}")
    text = value[-40:] if len(value) > 40 else value
    return H160.from_hex(text)


@dataclass(frozen=True)
class BlockNumber:
    """A block named by tag ("latest", "earliest", "pending") or by number."""

    value: int | str

    def __post_init__(self) -> None:
        if isinstance(self.value, str):
            if self.value not in _TAGS:
                raise ValueError(f"unknown block tag: {self.value!r}")
        elif (
            isinstance(self.value, bool)
            or not isinstance(self.value, int)
            or not 0 <= self.value < _U64_LIMIT
        ):
            raise ValueError(f"not a valid block number: {self.value!r}")

    @classmethod
    def latest(cls) -> "BlockNumber":
        return cls("latest")

    @classmethod
    def earliest(cls) -> "BlockNumber":
        return cls("earliest")

    @classmethod
    def pending(cls) -> "BlockNumber":
        return cls("pending")

    @classmethod
    def of(cls, number: int) -> "BlockNumber":
        if isinstance(number, str):
            raise ValueError(f"not a valid block number: {number!r}")
        return cls(number)

    def to_json(self) -> str:
        if isinstance(self.value, str):
            return self.value
        return encode_quantity(self.value)

    @classmethod
    def from_json(cls, value: Any) -> "BlockNumber":
        if not isinstance(value, str):
            raise ValueError("invalid block number: expected a string")
        if value in _TAGS:
            return cls(value)
        if value.startswith("0x"):
            try:
                return cls(_parse_u64_hex(value[2:]))
            except ValueError as exc:
                raise ValueError(f"invalid block number: {exc}") from None
        raise ValueError("invalid block number: missing 0x prefix")


@dataclass(frozen=True)
class BlockId:
    """A block named by hash or by number."""

    value: H256 | BlockNumber

    def __post_init__(self) -> None:
        if not isinstance(self.value, (H256, BlockNumber)):
            raise TypeError(f"BlockId takes an H256 or a BlockNumber, not {self.value!r}")

    @classmethod
    def from_hash(cls, block_hash: H256) -> "BlockId":
        return cls(block_hash)

    @classmethod
    def from_number(cls, number: BlockNumber | int) -> "BlockId":
        if isinstance(number, BlockNumber):
            return cls(number)
        return cls(BlockNumber.of(number))

    def to_json(self) -> Any:
        if isinstance(self.value, H256):
            return {"blockHash": repr(self.value)}
        return self.value.to_json()


@dataclass
class BlockHeader:
    """The block header returned from RPC calls."""

    hash: Optional[H256]
    parent_hash: H256
    uncles_hash: H256
    author: H160
    state_root: H256
    transactions_root: H256
    receipts_root: H256
    number: Optional[int]
    gas_used: int
    gas_limit: int
    base_fee_per_gas: Optional[int]
    extra_data: Bytes
    logs_bloom: H2048
    timestamp: int
    difficulty: int
    mix_hash: Optional[H256]
    nonce: Optional[H64]

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "hash": _encode(self.hash),
            "parentHash": _encode(self.parent_hash),
            "sha3Uncles": _encode(self.uncles_hash),
            "miner": _encode(self.author),
            "stateRoot": _encode(self.state_root),
            "transactionsRoot": _encode(self.transactions_root),
            "receiptsRoot": _encode(self.receipts_root),
            "number": _encode(self.number),
            "gasUsed": _encode(self.gas_used),
            "gasLimit": _encode(self.gas_limit),
        }
        if self.base_fee_per_gas is not None:
            out["baseFeePerGas"] = _encode(self.base_fee_per_gas)
        out.update(
            {
                "extraData": _encode(self.extra_data),
                "logsBloom": _encode(self.logs_bloom),
                "timestamp": _encode(self.timestamp),
                "difficulty": _encode(self.difficulty),
                "mixHash": _encode(self.mix_hash),
                "nonce": _encode(self.nonce),
            }
        )
        return out

    @classmethod
    def from_json(cls, data: Any) -> "BlockHeader":
        data = _object(data)
        return cls(
            hash=_optional(data, "hash", H256.from_json),
            parent_hash=_required(data, "parentHash", H256.from_json),
            uncles_hash=_required(data, "sha3Uncles", H256.from_json),
            author=parse_author(data.get("miner")),
            state_root=_required(data, "stateRoot", H256.from_json),
            transactions_root=_required(data, "transactionsRoot", H256.from_json),
            receipts_root=_required(data, "receiptsRoot", H256.from_json),
            number=_optional(data, "number", _u64),
            gas_used=_required(data, "gasUsed", _u256),
            gas_limit=_required(data, "gasLimit", _u256),
            base_fee_per_gas=_optional(data, "baseFeePerGas", _u256),
            extra_data=_required(data, "extraData", Bytes.from_json),
            logs_bloom=_required(data, "logsBloom", H2048.from_json),
            timestamp=_required(data, "timestamp", _u256),
            difficulty=_required(data, "difficulty", _u256),
            mix_hash=_optional(data, "mixHash", H256.from_json),
            nonce=_optional(data, "nonce", H64.from_json),
        )


@dataclass
class Block:
    """A block returned from RPC calls; transactions are kept in whatever form the caller parses."""

    hash: Optional[H256] = None
    parent_hash: H256 = field(default_factory=H256)
    uncles_hash: H256 = field(default_factory=H256)
    author: H160 = field(default_factory=H160)
    state_root: H256 = field(default_factory=H256)
    transactions_root: H256 = field(default_factory=H256)
    receipts_root: H256 = field(default_factory=H256)
    number: Optional[int] = None
    gas_used: int = 0
    gas_limit: int = 0
    base_fee_per_gas: Optional[int] = None
    extra_data: Bytes = field(default_factory=Bytes)
    logs_bloom: Optional[H2048] = None
    timestamp: int = 0
    difficulty: int = 0
    total_difficulty: Optional[int] = None
    seal_fields: list[Bytes] = field(default_factory=list)
    uncles: list[H256] = field(default_factory=list)
    transactions: list[Any] = field(default_factory=list)
    size: Optional[int] = None
    mix_hash: Optional[H256] = None
    nonce: Optional[H64] = None

    def to_json(self, encode_transaction: Callable[[Any], Any] | None = None) -> dict[str, Any]:
        if encode_transaction is None:
            transactions = list(self.transactions)
        else:
            transactions = [encode_transaction(tx) for tx in self.transactions]
        out: dict[str, Any] = {
            "hash": _encode(self.hash),
            "parentHash": _encode(self.parent_hash),
            "sha3Uncles": _encode(self.uncles_hash),
            "miner": _encode(self.author),
            "stateRoot": _encode(self.state_root),
            "transactionsRoot": _encode(self.transactions_root),
            "receiptsRoot": _encode(self.receipts_root),
            "number": _encode(self.number),
            "gasUsed": _encode(self.gas_used),
            "gasLimit": _encode(self.gas_limit),
        }
        if self.base_fee_per_gas is not None:
            out["baseFeePerGas"] = _encode(self.base_fee_per_gas)
        out.update(
            {
                "extraData": _encode(self.extra_data),
                "logsBloom": _encode(self.logs_bloom),
                "timestamp": _encode(self.timestamp),
                "difficulty": _encode(self.difficulty),
                "totalDifficulty": _encode(self.total_difficulty),
                "sealFields": [seal.to_json() for seal in self.seal_fields],
                "uncles": [uncle.to_json() for uncle in self.uncles],
                "transactions": transactions,
                "size": _encode(self.size),
                "mixHash": _encode(self.mix_hash),
                "nonce": _encode(self.nonce),
            }
        )
        return out

    @classmethod
    def from_json(
        cls, data: Any, parse_transaction: Callable[[Any], Any] | None = None
    ) -> "Block":
        data = _object(data)
        seal_fields = (
            _required(data, "sealFields", _list_of(Bytes.from_json))
            if "sealFields" in data
            else []
        )
        return cls(
            hash=_optional(data, "hash", H256.from_json),
            parent_hash=_required(data, "parentHash", H256.from_json),
            uncles_hash=_required(data, "sha3Uncles", H256.from_json),
            author=parse_author(data.get("miner")),
            state_root=_required(data, "stateRoot", H256.from_json),
            transactions_root=_required(data, "transactionsRoot", H256.from_json),
            receipts_root=_required(data, "receiptsRoot", H256.from_json),
            number=_optional(data, "number", _u64),
            gas_used=_required(data, "gasUsed", _u256),
            gas_limit=_required(data, "gasLimit", _u256),
            base_fee_per_gas=_optional(data, "baseFeePerGas", _u256),
            extra_data=_required(data, "extraData", Bytes.from_json),
            logs_bloom=_optional(data, "logsBloom", H2048.from_json),
            timestamp=_required(data, "timestamp", _u256),
            difficulty=_required(data, "difficulty", _u256),
            total_difficulty=_optional(data, "totalDifficulty", _u256),
            seal_fields=seal_fields,
            uncles=_required(data, "uncles", _list_of(H256.from_json)),
            transactions=_required(data, "transactions", _list_of(parse_transaction)),
            size=_optional(data, "size", _u256),
            mix_hash=_optional(data, "mixHash", H256.from_json),
            nonce=_optional(data, "nonce", H64.from_json),
        )