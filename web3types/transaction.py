"""Transactions, receipts, access lists and the ways of naming a transaction."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from web3types.block import BlockId, BlockNumber
from web3types.log import Log
from web3types.primitives import (
    H160,
    H256,
    H2048,
    Bytes,
    decode_quantity,
    encode_quantity,
)

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


def _list_of(parse: Callable[[Any], Any]) -> Callable[[Any], list]:
    def parse_list(raw: Any) -> list:
        if not isinstance(raw, list):
            raise ValueError(f"expected a JSON array, got {raw!r}")
        return [parse(item) for item in raw]

    return parse_list


def _u64(value: Any) -> int:
    return decode_quantity(value, 64)


def _u256(value: Any) -> int:
    return decode_quantity(value, 256)


def _encode(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return encode_quantity(value)
    return value.to_json()


def _encode_access_list(items: Optional[list["AccessListItem"]]) -> Any:
    if items is None:
        return None
    return [item.to_json() for item in items]


@dataclass
class AccessListItem:
    """An address and the storage keys a transaction will touch there."""

    address: H160 = field(default_factory=H160)
    storage_keys: list[H256] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            "address": self.address.to_json(),
            "storageKeys": [key.to_json() for key in self.storage_keys],
        }

    @classmethod
    def from_json(cls, data: Any) -> "AccessListItem":
        data = _object(data)
        return cls(
            address=_required(data, "address", H160.from_json),
            storage_keys=_required(data, "storageKeys", _list_of(H256.from_json)),
        )


_parse_access_list = _list_of(AccessListItem.from_json)


@dataclass
class Transaction:
    """A transaction, pending or in the chain."""

    hash: H256 = field(default_factory=H256)
    nonce: int = 0
    block_hash: Optional[H256] = None
    block_number: Optional[int] = None
    transaction_index: Optional[int] = None
    from_: Optional[H160] = None
    to: Optional[H160] = None
    value: int = 0
    gas_price: Optional[int] = None
    gas: int = 0
    input: Bytes = field(default_factory=Bytes)
    v: Optional[int] = None
    r: Optional[int] = None
    s: Optional[int] = None
    raw: Optional[Bytes] = None
    transaction_type: Optional[int] = None
    access_list: Optional[list[AccessListItem]] = None
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "hash": self.hash.to_json(),
            "nonce": encode_quantity(self.nonce),
            "blockHash": _encode(self.block_hash),
            "blockNumber": _encode(self.block_number),
            "transactionIndex": _encode(self.transaction_index),
        }
        if self.from_ is not None:
            out["from"] = self.from_.to_json()
        out.update(
            {
                "to": _encode(self.to),
                "value": encode_quantity(self.value),
                "gasPrice": _encode(self.gas_price),
                "gas": encode_quantity(self.gas),
                "input": self.input.to_json(),
            }
        )
        optional = (
            ("v", _encode(self.v)),
            ("r", _encode(self.r)),
            ("s", _encode(self.s)),
            ("raw", _encode(self.raw)),
            ("type", _encode(self.transaction_type)),
            ("accessList", _encode_access_list(self.access_list)),
            ("maxFeePerGas", _encode(self.max_fee_per_gas)),
            ("maxPriorityFeePerGas", _encode(self.max_priority_fee_per_gas)),
        )
        out.update((key, value) for key, value in optional if value is not None)
        return out

    @classmethod
    def from_json(cls, data: Any) -> "Transaction":
        data = _object(data)
        return cls(
            hash=_required(data, "hash", H256.from_json),
            nonce=_required(data, "nonce", _u256),
            block_hash=_optional(data, "blockHash", H256.from_json),
            block_number=_optional(data, "blockNumber", _u64),
            transaction_index=_optional(data, "transactionIndex", _u64),
            from_=_optional(data, "from", H160.from_json),
            to=_optional(data, "to", H160.from_json),
            value=_required(data, "value", _u256),
            gas_price=_optional(data, "gasPrice", _u256),
            gas=_required(data, "gas", _u256),
            input=_required(data, "input", Bytes.from_json),
            v=_optional(data, "v", _u64),
            r=_optional(data, "r", _u256),
            s=_optional(data, "s", _u256),
            raw=_optional(data, "raw", Bytes.from_json),
            transaction_type=_optional(data, "type", _u64),
            access_list=_optional(data, "accessList", _parse_access_list),
            max_fee_per_gas=_optional(data, "maxFeePerGas", _u256),
            max_priority_fee_per_gas=_optional(data, "maxPriorityFeePerGas", _u256),
        )


@dataclass
class Receipt:
    """The receipt of an executed transaction: details of its execution."""

    transaction_hash: H256 = field(default_factory=H256)
    transaction_index: int = 0
    block_hash: Optional[H256] = None
    block_number: Optional[int] = None
    from_: H160 = field(default_factory=H160)
    to: Optional[H160] = None
    cumulative_gas_used: int = 0
    gas_used: Optional[int] = None
    contract_address: Optional[H160] = None
    logs: list[Log] = field(default_factory=list)
    status: Optional[int] = None
    root: Optional[H256] = None
    logs_bloom: H2048 = field(default_factory=H2048)
    transaction_type: Optional[int] = None
    effective_gas_price: Optional[int] = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "transactionHash": self.transaction_hash.to_json(),
            "transactionIndex": encode_quantity(self.transaction_index),
            "blockHash": _encode(self.block_hash),
            "blockNumber": _encode(self.block_number),
            "from": self.from_.to_json(),
            "to": _encode(self.to),
            "cumulativeGasUsed": encode_quantity(self.cumulative_gas_used),
            "gasUsed": _encode(self.gas_used),
            "contractAddress": _encode(self.contract_address),
            "logs": [log.to_json() for log in self.logs],
            "status": _encode(self.status),
            "root": _encode(self.root),
            "logsBloom": self.logs_bloom.to_json(),
        }
        if self.transaction_type is not None:
            out["type"] = encode_quantity(self.transaction_type)
        out["effectiveGasPrice"] = _encode(self.effective_gas_price)
        return out

    @classmethod
    def from_json(cls, data: Any) -> "Receipt":
        """Parse a receipt; a missing `from` becomes the zero address."""
        data = _object(data)
        sender = H160.from_json(data["from"]) if "from" in data else H160()
        return cls(
            transaction_hash=_required(data, "transactionHash", H256.from_json),
            transaction_index=_required(data, "transactionIndex", _u64),
            block_hash=_optional(data, "blockHash", H256.from_json),
            block_number=_optional(data, "blockNumber", _u64),
            from_=sender,
            to=_optional(data, "to", H160.from_json),
            cumulative_gas_used=_required(data, "cumulativeGasUsed", _u256),
            gas_used=_optional(data, "gasUsed", _u256),
            contract_address=_optional(data, "contractAddress", H160.from_json),
            logs=_required(data, "logs", _list_of(Log.from_json)),
            status=_optional(data, "status", _u64),
            root=_optional(data, "root", H256.from_json),
            logs_bloom=_required(data, "logsBloom", H2048.from_json),
            transaction_type=_optional(data, "type", _u64),
            effective_gas_price=_optional(data, "effectiveGasPrice", _u256),
        )


@dataclass
class RawTransaction:
    """A signed transaction not yet sent: its raw bytes and its details."""

    raw: Bytes = field(default_factory=Bytes)
    tx: Transaction = field(default_factory=Transaction)

    def to_json(self) -> dict[str, Any]:
        return {"raw": self.raw.to_json(), "tx": self.tx.to_json()}

    @classmethod
    def from_json(cls, data: Any) -> "RawTransaction":
        data = _object(data)
        return cls(
            raw=_required(data, "raw", Bytes.from_json),
            tx=_required(data, "tx", Transaction.from_json),
        )


def _as_block_id(block: Any) -> BlockId:
    if isinstance(block, BlockId):
        return block
    if isinstance(block, H256):
        return BlockId.from_hash(block)
    if isinstance(block, (BlockNumber, int)) and not isinstance(block, bool):
        return BlockId.from_number(block)
    raise TypeError(f"cannot name a block with {block!r}")


@dataclass(frozen=True)
class TransactionId:
    """A transaction named by hash, or by block and index within it."""

    hash: Optional[H256] = None
    block: Optional[BlockId] = None
    index: Optional[int] = None

    def __post_init__(self) -> None:
        if self.hash is not None:
            if self.block is not None or self.index is not None:
                raise ValueError("a transaction is named by hash or by block and index, not both")
            if not isinstance(self.hash, H256):
                raise TypeError(f"transaction hash must be an H256, not {self.hash!r}")
            return
        if not isinstance(self.block, BlockId):
            raise ValueError("a transaction id needs a hash or a block and an index")
        if (
            isinstance(self.index, bool)
            or not isinstance(self.index, int)
            or not 0 <= self.index < _U64_LIMIT
        ):
            raise ValueError(f"not a valid transaction index: {self.index!r}")

    @classmethod
    def from_hash(cls, tx_hash: H256) -> "TransactionId":
        return cls(hash=tx_hash)

    @classmethod
    def from_block(cls, block: BlockId | BlockNumber | H256 | int, index: int) -> "TransactionId":
        return cls(block=_as_block_id(block), index=index)


def access_list_from(items: Iterable[AccessListItem]) -> list[AccessListItem]:
    """Collect access list items into a list."""
    return list(items)