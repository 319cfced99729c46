"""Requests for eth_call, eth_estimateGas and eth_sendTransaction."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from web3types.primitives import H160, Bytes, decode_quantity, encode_quantity
from web3types.transaction import AccessListItem

_U64_LIMIT = 1 << 64
_CONDITION_KEYS = {"block": "block", "time": "time"}


def _object(data: Any) -> Mapping:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected a JSON object, got {data!r}")
    return data


def _optional(data: Mapping, key: str, parse: Callable[[Any], Any]) -> Any:
    raw = data.get(key)
    return None if raw is None else parse(raw)


def _u64(value: Any) -> int:
    return decode_quantity(value, 64)


def _u256(value: Any) -> int:
    return decode_quantity(value, 256)


def _access_list(raw: Any) -> list[AccessListItem]:
    if not isinstance(raw, list):
        raise ValueError(f"`accessList` must be a JSON array, got {raw!r}")
    return [AccessListItem.from_json(item) for item in raw]


def _encode(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, list):
        return [item.to_json() for item in value]
    if isinstance(value, int) and not isinstance(value, bool):
        return encode_quantity(value)
    return value.to_json()


def _without_none(pairs: Iterable[tuple[str, Any]]) -> dict[str, Any]:
    return {key: _encode(value) for key, value in pairs if value is not None}


def _check_u64(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < _U64_LIMIT:
        raise ValueError(f"{what} must be a 64-bit unsigned integer, got {value!r}")
    return value


@dataclass(frozen=True)
class TransactionCondition:
    """A minimum block number or unix time before which a transaction is not included."""

    kind: str
    value: int

    def __post_init__(self) -> None:
        if self.kind not in _CONDITION_KEYS:
            raise ValueError(f"unknown condition kind: {self.kind!r}")
        _check_u64(self.value, "condition value")

    @classmethod
    def block(cls, number: int) -> "TransactionCondition":
        return cls("block", number)

    @classmethod
    def timestamp(cls, seconds: int) -> "TransactionCondition":
        return cls("time", seconds)

    def to_json(self) -> dict[str, int]:
        return {self.kind: self.value}

    @classmethod
    def from_json(cls, data: Any) -> "TransactionCondition":
        data = _object(data)
        if len(data) != 1:
            raise ValueError(f"expected exactly one of `block` or `time`, got {dict(data)!r}")
        ((key, value),) = data.items()
        if key not in _CONDITION_KEYS:
            raise ValueError(f"unknown variant `{key}`, expected `block` or `time`")
        return cls(key, value)


@dataclass
class CallRequest:
    """A contract call; for eth_call `to` must be set, for eth_estimateGas all is optional."""

    from_: Optional[H160] = None
    to: Optional[H160] = None
    gas: Optional[int] = None
    gas_price: Optional[int] = None
    value: Optional[int] = None
    data: Optional[Bytes] = None
    transaction_type: Optional[int] = None
    access_list: Optional[list[AccessListItem]] = None
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None

    @classmethod
    def builder(cls) -> "CallRequestBuilder":
        return CallRequestBuilder()

    def to_json(self) -> dict[str, Any]:
        return _without_none(
            (
                ("from", self.from_),
                ("to", self.to),
                ("gas", self.gas),
                ("gasPrice", self.gas_price),
                ("value", self.value),
                ("data", self.data),
                ("type", self.transaction_type),
                ("accessList", self.access_list),
                ("maxFeePerGas", self.max_fee_per_gas),
                ("maxPriorityFeePerGas", self.max_priority_fee_per_gas),
            )
        )

    @classmethod
    def from_json(cls, data: Any) -> "CallRequest":
        data = _object(data)
        return cls(
            from_=_optional(data, "from", H160.from_json),
            to=_optional(data, "to", H160.from_json),
            gas=_optional(data, "gas", _u256),
            gas_price=_optional(data, "gasPrice", _u256),
            value=_optional(data, "value", _u256),
            data=_optional(data, "data", Bytes.from_json),
            transaction_type=_optional(data, "type", _u64),
            access_list=_optional(data, "accessList", _access_list),
            max_fee_per_gas=_optional(data, "maxFeePerGas", _u256),
            max_priority_fee_per_gas=_optional(data, "maxPriorityFeePerGas", _u256),
        )


class CallRequestBuilder:
    """Builds a CallRequest; each call returns a new builder."""

    def __init__(self, request: CallRequest | None = None) -> None:
        self._request = request if request is not None else CallRequest()

    def _with(self, **changes: Any) -> "CallRequestBuilder":
        return CallRequestBuilder(replace(self._request, **changes))

    def from_(self, address: H160) -> "CallRequestBuilder":
        return self._with(from_=address)

    def to(self, address: H160) -> "CallRequestBuilder":
        return self._with(to=address)

    def gas(self, gas: int) -> "CallRequestBuilder":
        return self._with(gas=gas)

    def gas_price(self, gas_price: int) -> "CallRequestBuilder":
        return self._with(gas_price=gas_price)

    def value(self, value: int) -> "CallRequestBuilder":
        return self._with(value=value)

    def data(self, data: Bytes) -> "CallRequestBuilder":
        return self._with(data=Bytes(data))

    def transaction_type(self, transaction_type: int) -> "CallRequestBuilder":
        return self._with(transaction_type=_check_u64(transaction_type, "transaction type"))

    def access_list(self, access_list: Iterable[AccessListItem]) -> "CallRequestBuilder":
        return self._with(access_list=list(access_list))

    def build(self) -> CallRequest:
        return replace(self._request)


@dataclass
class TransactionRequest:
    """Parameters for sending a transaction."""

    from_: H160 = field(default_factory=H160)
    to: Optional[H160] = None
    gas: Optional[int] = None
    gas_price: Optional[int] = None
    value: Optional[int] = None
    data: Optional[Bytes] = None
    nonce: Optional[int] = None
    condition: Optional[TransactionCondition] = None
    transaction_type: Optional[int] = None
    access_list: Optional[list[AccessListItem]] = None
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None

    @classmethod
    def builder(cls) -> "TransactionRequestBuilder":
        return TransactionRequestBuilder()

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {"from": self.from_.to_json()}
        out.update(
            _without_none(
                (
                    ("to", self.to),
                    ("gas", self.gas),
                    ("gasPrice", self.gas_price),
                    ("value", self.value),
                    ("data", self.data),
                    ("nonce", self.nonce),
                    ("condition", self.condition),
                    ("type", self.transaction_type),
                    ("accessList", self.access_list),
                    ("maxFeePerGas", self.max_fee_per_gas),
                    ("maxPriorityFeePerGas", self.max_priority_fee_per_gas),
                )
            )
        )
        return out

    @classmethod
    def from_json(cls, data: Any) -> "TransactionRequest":
        data = _object(data)
        if "from" not in data:
            raise ValueError("missing field `from`")
        return cls(
            from_=H160.from_json(data["from"]),
            to=_optional(data, "to", H160.from_json),
            gas=_optional(data, "gas", _u256),
            gas_price=_optional(data, "gasPrice", _u256),
            value=_optional(data, "value", _u256),
            data=_optional(data, "data", Bytes.from_json),
            nonce=_optional(data, "nonce", _u256),
            condition=_optional(data, "condition", TransactionCondition.from_json),
            transaction_type=_optional(data, "type", _u64),
            access_list=_optional(data, "accessList", _access_list),
            max_fee_per_gas=_optional(data, "maxFeePerGas", _u256),
            max_priority_fee_per_gas=_optional(data, "maxPriorityFeePerGas", _u256),
        )


class TransactionRequestBuilder:
    """Builds a TransactionRequest; each call returns a new builder."""

    def __init__(self, request: TransactionRequest | None = None) -> None:
        self._request = request if request is not None else TransactionRequest()

    def _with(self, **changes: Any) -> "TransactionRequestBuilder":
        return TransactionRequestBuilder(replace(self._request, **changes))

    def from_(self, address: H160) -> "TransactionRequestBuilder":
        return self._with(from_=address)

    def to(self, address: H160) -> "TransactionRequestBuilder":
        return self._with(to=address)

    def gas(self, gas: int) -> "TransactionRequestBuilder":
        return self._with(gas=gas)

    def value(self, value: int) -> "TransactionRequestBuilder":
        return self._with(value=value)

    def data(self, data: Bytes) -> "TransactionRequestBuilder":
        return self._with(data=Bytes(data))

    def nonce(self, nonce: int) -> "TransactionRequestBuilder":
        return self._with(nonce=nonce)

    def condition(self, condition: TransactionCondition) -> "TransactionRequestBuilder":
        return self._with(condition=condition)

    def transaction_type(self, transaction_type: int) -> "TransactionRequestBuilder":
        return self._with(transaction_type=_check_u64(transaction_type, "transaction type"))

    def access_list(self, access_list: Iterable[AccessListItem]) -> "TransactionRequestBuilder":
        return self._with(access_list=list(access_list))

    def build(self) -> TransactionRequest:
        return replace(self._request)