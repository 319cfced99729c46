"""Types for the transaction-trace filtering API of Parity/OpenEthereum nodes."""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Union

from web3types.block import BlockNumber
from web3types.primitives import H160, H256, Bytes, decode_quantity, encode_quantity

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


def _u256(value: Any) -> int:
    return decode_quantity(value, 256)


def _count(value: Any, limit: Optional[int] = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"expected a non-negative integer, got {value!r}")
    if limit is not None and value >= limit:
        raise ValueError(f"integer {value} is out of range")
    return value


def _u64(value: Any) -> int:
    return _count(value, _U64_LIMIT)


def _string(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {value!r}")
    return value


def _counts(value: Any) -> list[int]:
    if not isinstance(value, list):
        raise ValueError(f"expected a JSON array, got {value!r}")
    return [_count(item) for item in value]


def _variant(enum_type: type[enum.Enum]) -> Callable[[Any], Any]:
    def parse(value: Any) -> Any:
        try:
            return enum_type(value)
        except ValueError:
            names = ", ".join(f"`{member.value}`" for member in enum_type)
            raise ValueError(f"unknown variant {value!r}, expected one of {names}") from None

    return parse


@dataclass(frozen=True)
class TraceFilter:
    """A filter for trace_filter: block range, addresses and paging."""

    from_block: Optional[BlockNumber] = None
    to_block: Optional[BlockNumber] = None
    from_address: Optional[tuple[H160, ...]] = None
    to_address: Optional[tuple[H160, ...]] = None
    after: Optional[int] = None
    count: Optional[int] = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.from_block is not None:
            out["fromBlock"] = self.from_block.to_json()
        if self.to_block is not None:
            out["toBlock"] = self.to_block.to_json()
        if self.from_address is not None:
            out["fromAddress"] = [address.to_json() for address in self.from_address]
        if self.to_address is not None:
            out["toAddress"] = [address.to_json() for address in self.to_address]
        if self.after is not None:
            out["after"] = self.after
        if self.count is not None:
            out["count"] = self.count
        return out


class TraceFilterBuilder:
    """Builds a TraceFilter; each call returns a new builder."""

    def __init__(self, spec: TraceFilter | None = None) -> None:
        self._filter = spec if spec is not None else TraceFilter()

    def _with(self, **changes: Any) -> "TraceFilterBuilder":
        return TraceFilterBuilder(replace(self._filter, **changes))

    def from_block(self, block: BlockNumber) -> "TraceFilterBuilder":
        return self._with(from_block=block)

    def to_block(self, block: BlockNumber) -> "TraceFilterBuilder":
        return self._with(to_block=block)

    def to_address(self, addresses: Iterable[H160]) -> "TraceFilterBuilder":
        return self._with(to_address=tuple(addresses))

    def from_address(self, addresses: Iterable[H160]) -> "TraceFilterBuilder":
        return self._with(from_address=tuple(addresses))

    def after(self, after: int) -> "TraceFilterBuilder":
        """Skip this many traces of the output."""
        return self._with(after=_count(after))

    def count(self, count: int) -> "TraceFilterBuilder":
        """Return at most this many traces."""
        return self._with(count=_count(count))

    def build(self) -> TraceFilter:
        return self._filter


class ActionType(enum.Enum):
    """The kind of external action a trace records."""

    CALL = "call"
    CREATE = "create"
    SUICIDE = "suicide"
    REWARD = "reward"


class CallType(enum.Enum):
    """The kind of call."""

    NONE = "none"
    CALL = "call"
    CALL_CODE = "callcode"
    DELEGATE_CALL = "delegatecall"
    STATIC_CALL = "staticcall"


class RewardType(enum.Enum):
    """What a reward was paid for."""

    BLOCK = "block"
    UNCLE = "uncle"
    EMPTY_STEP = "emptyStep"
    EXTERNAL = "external"


@dataclass
class Call:
    """A call action."""

    from_: H160 = field(default_factory=H160)
    to: H160 = field(default_factory=H160)
    value: int = 0
    gas: int = 0
    input: Bytes = field(default_factory=Bytes)
    call_type: CallType = CallType.NONE

    def to_json(self) -> dict[str, Any]:
        return {
            "from": self.from_.to_json(),
            "to": self.to.to_json(),
            "value": encode_quantity(self.value),
            "gas": encode_quantity(self.gas),
            "input": self.input.to_json(),
            "callType": self.call_type.value,
        }

    @classmethod
    def from_json(cls, data: Any) -> "Call":
        data = _object(data)
        return cls(
            from_=_required(data, "from", H160.from_json),
            to=_required(data, "to", H160.from_json),
            value=_required(data, "value", _u256),
            gas=_required(data, "gas", _u256),
            input=_required(data, "input", Bytes.from_json),
            call_type=_required(data, "callType", _variant(CallType)),
        )


@dataclass
class Create:
    """A contract creation action."""

    from_: H160 = field(default_factory=H160)
    value: int = 0
    gas: int = 0
    init: Bytes = field(default_factory=Bytes)

    def to_json(self) -> dict[str, Any]:
        return {
            "from": self.from_.to_json(),
            "value": encode_quantity(self.value),
            "gas": encode_quantity(self.gas),
            "init": self.init.to_json(),
        }

    @classmethod
    def from_json(cls, data: Any) -> "Create":
        data = _object(data)
        return cls(
            from_=_required(data, "from", H160.from_json),
            value=_required(data, "value", _u256),
            gas=_required(data, "gas", _u256),
            init=_required(data, "init", Bytes.from_json),
        )


@dataclass
class Suicide:
    """A self-destruct action."""

    address: H160 = field(default_factory=H160)
    refund_address: H160 = field(default_factory=H160)
    balance: int = 0

    def to_json(self) -> dict[str, Any]:
        return {
            "address": self.address.to_json(),
            "refundAddress": self.refund_address.to_json(),
            "balance": encode_quantity(self.balance),
        }

    @classmethod
    def from_json(cls, data: Any) -> "Suicide":
        data = _object(data)
        return cls(
            address=_required(data, "address", H160.from_json),
            refund_address=_required(data, "refundAddress", H160.from_json),
            balance=_required(data, "balance", _u256),
        )


@dataclass
class Reward:
    """A reward action."""

    author: H160
    value: int
    reward_type: RewardType

    def to_json(self) -> dict[str, Any]:
        return {
            "author": self.author.to_json(),
            "value": encode_quantity(self.value),
            "rewardType": self.reward_type.value,
        }

    @classmethod
    def from_json(cls, data: Any) -> "Reward":
        data = _object(data)
        return cls(
            author=_required(data, "author", H160.from_json),
            value=_required(data, "value", _u256),
            reward_type=_required(data, "rewardType", _variant(RewardType)),
        )


@dataclass
class CallResult:
    """The outcome of a call."""

    gas_used: int = 0
    output: Bytes = field(default_factory=Bytes)

    def to_json(self) -> dict[str, Any]:
        return {"gasUsed": encode_quantity(self.gas_used), "output": self.output.to_json()}

    @classmethod
    def from_json(cls, data: Any) -> "CallResult":
        data = _object(data)
        return cls(
            gas_used=_required(data, "gasUsed", _u256),
            output=_required(data, "output", Bytes.from_json),
        )


@dataclass
class CreateResult:
    """The outcome of a contract creation."""

    gas_used: int = 0
    code: Bytes = field(default_factory=Bytes)
    address: H160 = field(default_factory=H160)

    def to_json(self) -> dict[str, Any]:
        return {
            "gasUsed": encode_quantity(self.gas_used),
            "code": self.code.to_json(),
            "address": self.address.to_json(),
        }

    @classmethod
    def from_json(cls, data: Any) -> "CreateResult":
        data = _object(data)
        return cls(
            gas_used=_required(data, "gasUsed", _u256),
            code=_required(data, "code", Bytes.from_json),
            address=_required(data, "address", H160.from_json),
        )


Action = Union[Call, Create, Suicide, Reward]
Res = Union[CallResult, CreateResult, None]

_ACTION_TYPES: tuple[type, ...] = (Call, Create, Suicide, Reward)
_RESULT_TYPES: tuple[type, ...] = (CallResult, CreateResult)


def _first_match(data: Any, candidates: tuple[type, ...], name: str) -> Any:
    for candidate in candidates:
        try:
            return candidate.from_json(data)
        except (ValueError, TypeError):
            continue
    raise ValueError(f"data did not match any variant of untagged enum {name}")


def parse_action(data: Any) -> Action:
    """Read an action as the first of call, create, suicide or reward whose fields it has."""
    return _first_match(data, _ACTION_TYPES, "Action")


def parse_result(data: Any) -> Res:
    """Read a result as a call result, a create result, or None for null."""
    if data is None:
        return None
    return _first_match(data, _RESULT_TYPES, "Res")


@dataclass
class Trace:
    """One trace as returned by the trace filtering API."""

    action: Action
    result: Res
    trace_address: list[int]
    subtraces: int
    transaction_position: Optional[int]
    transaction_hash: Optional[H256]
    block_number: int
    block_hash: H256
    action_type: ActionType
    error: Optional[str] = None

    def to_json(self) -> dict[str, Any]:
        return {
            "action": self.action.to_json(),
            "result": None if self.result is None else self.result.to_json(),
            "traceAddress": list(self.trace_address),
            "subtraces": self.subtraces,
            "transactionPosition": self.transaction_position,
            "transactionHash": None
            if self.transaction_hash is None
            else self.transaction_hash.to_json(),
            "blockNumber": self.block_number,
            "blockHash": self.block_hash.to_json(),
            "type": self.action_type.value,
            "error": self.error,
        }

    @classmethod
    def from_json(cls, data: Any) -> "Trace":
        data = _object(data)
        return cls(
            action=_required(data, "action", parse_action),
            result=parse_result(data.get("result")),
            trace_address=_required(data, "traceAddress", _counts),
            subtraces=_required(data, "subtraces", _count),
            transaction_position=_optional(data, "transactionPosition", _count),
            transaction_hash=_optional(data, "transactionHash", H256.from_json),
            block_number=_required(data, "blockNumber", _u64),
            block_hash=_required(data, "blockHash", H256.from_json),
            action_type=_required(data, "type", _variant(ActionType)),
            error=_optional(data, "error", _string),
        )