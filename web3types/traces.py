"""Types for the ad-hoc tracing API of Parity/OpenEthereum nodes."""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

from web3types.primitives import H160, H256, Bytes, decode_quantity, encode_quantity
from web3types.trace_filtering import (
    Action,
    ActionType,
    Res,
    parse_action,
    parse_result,
)

T = TypeVar("T")

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


def _count(value: Any, limit: Optional[int] = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"expected a non-negative integer, got {value!r}")
    if limit is not None and value >= limit:
        raise ValueError(f"integer {value} is out of range")
    return value


def _u64(value: Any) -> int:
    return _count(value, _U64_LIMIT)


def _u256(value: Any) -> int:
    return decode_quantity(value, 256)


def _string(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {value!r}")
    return value


def _list_of(parse: Callable[[Any], Any]) -> Callable[[Any], list]:
    def parse_list(raw: Any) -> list:
        if not isinstance(raw, list):
            raise ValueError(f"expected a JSON array, got {raw!r}")
        return [parse(item) for item in raw]

    return parse_list


def _action_type(value: Any) -> ActionType:
    try:
        return ActionType(value)
    except ValueError:
        names = ", ".join(f"`{member.value}`" for member in ActionType)
        raise ValueError(f"unknown variant {value!r}, expected one of {names}") from None


def _encode_hash(value: Any) -> Any:
    return value.to_json()


def _encode_bytes(value: Bytes) -> str:
    return value.to_json()


class TraceType(enum.Enum):
    """The kind of trace to ask a node for."""

    TRACE = "trace"
    VM_TRACE = "vmTrace"
    STATE_DIFF = "stateDiff"


class DiffKind(enum.Enum):
    """How a value changed between two states."""

    SAME = "="
    BORN = "+"
    DIED = "-"
    CHANGED = "*"


@dataclass(frozen=True)
class Diff(Generic[T]):
    """A change of one value: unchanged, created, removed, or changed from `old` to `new`."""

    kind: DiffKind
    old: Optional[T] = None
    new: Optional[T] = None

    @classmethod
    def same(cls) -> "Diff[T]":
        return cls(DiffKind.SAME)

    @classmethod
    def born(cls, value: T) -> "Diff[T]":
        return cls(DiffKind.BORN, new=value)

    @classmethod
    def died(cls, value: T) -> "Diff[T]":
        return cls(DiffKind.DIED, old=value)

    @classmethod
    def changed(cls, old: T, new: T) -> "Diff[T]":
        return cls(DiffKind.CHANGED, old=old, new=new)

    def to_json(self, encode: Callable[[T], Any]) -> Any:
        if self.kind is DiffKind.SAME:
            return DiffKind.SAME.value
        if self.kind is DiffKind.BORN:
            return {DiffKind.BORN.value: encode(self.new)}
        if self.kind is DiffKind.DIED:
            return {DiffKind.DIED.value: encode(self.old)}
        return {DiffKind.CHANGED.value: {"from": encode(self.old), "to": encode(self.new)}}

    @classmethod
    def from_json(cls, value: Any, parse: Callable[[Any], T]) -> "Diff[T]":
        """Read `"="`, `{"+": v}`, `{"-": v}` or `{"*": {"from": a, "to": b}}`."""
        if isinstance(value, str):
            if value == DiffKind.SAME.value:
                return cls.same()
            raise ValueError(f"unknown variant {value!r}, expected `=`")
        if not isinstance(value, Mapping) or len(value) != 1:
            raise ValueError(f"expected `=` or an object with one key, got {value!r}")
        ((key, payload),) = value.items()
        if key == DiffKind.BORN.value:
            return cls.born(parse(payload))
        if key == DiffKind.DIED.value:
            return cls.died(parse(payload))
        if key == DiffKind.CHANGED.value:
            payload = _object(payload)
            return cls.changed(
                _required(payload, "from", parse), _required(payload, "to", parse)
            )
        raise ValueError(f"unknown variant {key!r}, expected one of `=`, `+`, `-`, `*`")


def _parse_balance_diff(value: Any) -> Diff[int]:
    return Diff.from_json(value, _u256)


def _parse_code_diff(value: Any) -> Diff[Bytes]:
    return Diff.from_json(value, Bytes.from_json)


def _parse_storage(value: Any) -> dict[H256, Diff[H256]]:
    value = _object(value)
    return {
        H256.from_json(key): Diff.from_json(diff, H256.from_json) for key, diff in value.items()
    }


@dataclass
class AccountDiff:
    """Changes to one account's balance, nonce, code and storage."""

    balance: Diff[int]
    nonce: Diff[int]
    code: Diff[Bytes]
    storage: dict[H256, Diff[H256]] = field(default_factory=dict)

    def to_json(self) -> dict[str, Any]:
        ordered = sorted(self.storage.items(), key=lambda item: item[0].to_int())
        return {
            "balance": self.balance.to_json(encode_quantity),
            "nonce": self.nonce.to_json(encode_quantity),
            "code": self.code.to_json(_encode_bytes),
            "storage": {key.to_json(): diff.to_json(_encode_hash) for key, diff in ordered},
        }

    @classmethod
    def from_json(cls, data: Any) -> "AccountDiff":
        data = _object(data)
        return cls(
            balance=_required(data, "balance", _parse_balance_diff),
            nonce=_required(data, "nonce", _parse_balance_diff),
            code=_required(data, "code", _parse_code_diff),
            storage=_required(data, "storage", _parse_storage),
        )


@dataclass
class StateDiff:
    """Changes to every account touched, keyed by address."""

    accounts: dict[H160, AccountDiff] = field(default_factory=dict)

    def __getitem__(self, address: H160) -> AccountDiff:
        return self.accounts[address]

    def __len__(self) -> int:
        return len(self.accounts)

    def __iter__(self) -> Iterator[H160]:
        return iter(self.accounts)

    def to_json(self) -> dict[str, Any]:
        ordered = sorted(self.accounts.items(), key=lambda item: item[0].to_int())
        return {address.to_json(): diff.to_json() for address, diff in ordered}

    @classmethod
    def from_json(cls, data: Any) -> "StateDiff":
        data = _object(data)
        return cls(
            {H160.from_json(key): AccountDiff.from_json(diff) for key, diff in data.items()}
        )


@dataclass
class MemoryDiff:
    """A changed chunk of memory."""

    off: int = 0
    data: Bytes = field(default_factory=Bytes)

    def to_json(self) -> dict[str, Any]:
        return {"off": self.off, "data": self.data.to_json()}

    @classmethod
    def from_json(cls, data: Any) -> "MemoryDiff":
        data = _object(data)
        return cls(
            off=_required(data, "off", _count),
            data=_required(data, "data", Bytes.from_json),
        )


@dataclass
class StorageDiff:
    """A storage key and the value it was changed to."""

    key: int = 0
    val: int = 0

    def to_json(self) -> dict[str, Any]:
        return {"key": encode_quantity(self.key), "val": encode_quantity(self.val)}

    @classmethod
    def from_json(cls, data: Any) -> "StorageDiff":
        data = _object(data)
        return cls(key=_required(data, "key", _u256), val=_required(data, "val", _u256))


@dataclass
class VMExecutedOperation:
    """The effects of one executed VM operation."""

    used: int = 0
    push: list[int] = field(default_factory=list)
    mem: Optional[MemoryDiff] = None
    store: Optional[StorageDiff] = None

    def to_json(self) -> dict[str, Any]:
        return {
            "used": self.used,
            "push": [encode_quantity(item) for item in self.push],
            "mem": None if self.mem is None else self.mem.to_json(),
            "store": None if self.store is None else self.store.to_json(),
        }

    @classmethod
    def from_json(cls, data: Any) -> "VMExecutedOperation":
        data = _object(data)
        return cls(
            used=_required(data, "used", _u64),
            push=_required(data, "push", _list_of(_u256)),
            mem=_optional(data, "mem", MemoryDiff.from_json),
            store=_optional(data, "store", StorageDiff.from_json),
        )


@dataclass
class VMOperation:
    """One executed VM operation, with the trace of any CALL/CREATE it made."""

    pc: int = 0
    cost: int = 0
    ex: Optional[VMExecutedOperation] = None
    sub: Optional["VMTrace"] = None

    def to_json(self) -> dict[str, Any]:
        return {
            "pc": self.pc,
            "cost": self.cost,
            "ex": None if self.ex is None else self.ex.to_json(),
            "sub": None if self.sub is None else self.sub.to_json(),
        }

    @classmethod
    def from_json(cls, data: Any) -> "VMOperation":
        data = _object(data)
        return cls(
            pc=_required(data, "pc", _count),
            cost=_required(data, "cost", _u64),
            ex=_optional(data, "ex", VMExecutedOperation.from_json),
            sub=_optional(data, "sub", VMTrace.from_json),
        )


@dataclass
class VMTrace:
    """A full VM trace of a CALL/CREATE: the code run and the operations executed."""

    code: Bytes = field(default_factory=Bytes)
    ops: list[VMOperation] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {"code": self.code.to_json(), "ops": [op.to_json() for op in self.ops]}

    @classmethod
    def from_json(cls, data: Any) -> "VMTrace":
        data = _object(data)
        return cls(
            code=_required(data, "code", Bytes.from_json),
            ops=_required(data, "ops", _list_of(VMOperation.from_json)),
        )


@dataclass
class TransactionTrace:
    """One call-tree entry of a transaction trace."""

    trace_address: list[int]
    subtraces: int
    action: Action
    action_type: ActionType
    result: Res = None
    error: Optional[str] = None

    def to_json(self) -> dict[str, Any]:
        return {
            "traceAddress": list(self.trace_address),
            "subtraces": self.subtraces,
            "action": self.action.to_json(),
            "type": self.action_type.value,
            "result": None if self.result is None else self.result.to_json(),
            "error": self.error,
        }

    @classmethod
    def from_json(cls, data: Any) -> "TransactionTrace":
        data = _object(data)
        return cls(
            trace_address=_required(data, "traceAddress", _list_of(_count)),
            subtraces=_required(data, "subtraces", _count),
            action=_required(data, "action", parse_action),
            action_type=_required(data, "type", _action_type),
            result=parse_result(data.get("result")),
            error=_optional(data, "error", _string),
        )


@dataclass
class BlockTrace:
    """The result of an ad-hoc trace: output and whichever traces were asked for."""

    output: Bytes = field(default_factory=Bytes)
    trace: Optional[list[TransactionTrace]] = None
    vm_trace: Optional[VMTrace] = None
    state_diff: Optional[StateDiff] = None
    transaction_hash: Optional[H256] = None

    def to_json(self) -> dict[str, Any]:
        return {
            "output": self.output.to_json(),
            "trace": None if self.trace is None else [entry.to_json() for entry in self.trace],
            "vmTrace": None if self.vm_trace is None else self.vm_trace.to_json(),
            "stateDiff": None if self.state_diff is None else self.state_diff.to_json(),
            "transactionHash": None
            if self.transaction_hash is None
            else self.transaction_hash.to_json(),
        }

    @classmethod
    def from_json(cls, data: Any) -> "BlockTrace":
        data = _object(data)
        return cls(
            output=_required(data, "output", Bytes.from_json),
            trace=_optional(data, "trace", _list_of(TransactionTrace.from_json)),
            vm_trace=_optional(data, "vmTrace", VMTrace.from_json),
            state_diff=_optional(data, "stateDiff", StateDiff.from_json),
            transaction_hash=_optional(data, "transactionHash", H256.from_json),
        )