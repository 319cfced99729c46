"""Peer information and pending-transaction filters specific to Parity/OpenEthereum nodes."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Union

from web3types.primitives import H160, decode_quantity, encode_quantity

_U32_LIMIT = 1 << 32
_U64_LIMIT = 1 << 64


def _object(data: Any) -> Mapping:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected a JSON object, got {data!r}")
    return data


def _required(data: Mapping, key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None


def _count(value: Any, limit: Optional[int] = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"expected a non-negative integer, got {value!r}")
    if limit is not None and value >= limit:
        raise ValueError(f"integer {value} is out of range")
    return value


def _string(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {value!r}")
    return value


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        raise ValueError(f"expected a JSON array, got {value!r}")
    return [_string(item) for item in value]


@dataclass
class PeerNetworkInfo:
    """Remote and local addresses of a peer connection."""

    remote_address: str
    local_address: str

    def to_json(self) -> dict[str, Any]:
        return {"remoteAddress": self.remote_address, "localAddress": self.local_address}

    @classmethod
    def from_json(cls, data: Any) -> "PeerNetworkInfo":
        data = _object(data)
        return cls(
            remote_address=_string(_required(data, "remoteAddress")),
            local_address=_string(_required(data, "localAddress")),
        )


@dataclass
class EthProtocolInfo:
    """eth protocol version, difficulty and head of chain."""

    version: int
    difficulty: Optional[int]
    head: str

    def to_json(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "difficulty": None if self.difficulty is None else encode_quantity(self.difficulty),
            "head": self.head,
        }

    @classmethod
    def from_json(cls, data: Any) -> "EthProtocolInfo":
        data = _object(data)
        difficulty = data.get("difficulty")
        return cls(
            version=_count(_required(data, "version"), _U32_LIMIT),
            difficulty=None if difficulty is None else decode_quantity(difficulty, 256),
            head=_string(_required(data, "head")),
        )


@dataclass
class PipProtocolInfo:
    """pip protocol version, difficulty and head of chain."""

    version: int
    difficulty: int
    head: str

    def to_json(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "difficulty": encode_quantity(self.difficulty),
            "head": self.head,
        }

    @classmethod
    def from_json(cls, data: Any) -> "PipProtocolInfo":
        data = _object(data)
        return cls(
            version=_count(_required(data, "version"), _U32_LIMIT),
            difficulty=decode_quantity(_required(data, "difficulty"), 256),
            head=_string(_required(data, "head")),
        )


@dataclass
class PeerProtocolsInfo:
    """The chain protocols a peer speaks."""

    eth: Optional[EthProtocolInfo] = None
    pip: Optional[PipProtocolInfo] = None

    def to_json(self) -> dict[str, Any]:
        return {
            "eth": None if self.eth is None else self.eth.to_json(),
            "pip": None if self.pip is None else self.pip.to_json(),
        }

    @classmethod
    def from_json(cls, data: Any) -> "PeerProtocolsInfo":
        data = _object(data)
        eth = data.get("eth")
        pip = data.get("pip")
        return cls(
            eth=None if eth is None else EthProtocolInfo.from_json(eth),
            pip=None if pip is None else PipProtocolInfo.from_json(pip),
        )


@dataclass
class ParityPeerInfo:
    """Details of one peer."""

    id: Optional[str]
    name: str
    caps: list[str]
    network: PeerNetworkInfo
    protocols: PeerProtocolsInfo

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "caps": list(self.caps),
            "network": self.network.to_json(),
            "protocols": self.protocols.to_json(),
        }

    @classmethod
    def from_json(cls, data: Any) -> "ParityPeerInfo":
        data = _object(data)
        peer_id = data.get("id")
        return cls(
            id=None if peer_id is None else _string(peer_id),
            name=_string(_required(data, "name")),
            caps=_strings(_required(data, "caps")),
            network=PeerNetworkInfo.from_json(_required(data, "network")),
            protocols=PeerProtocolsInfo.from_json(_required(data, "protocols")),
        )


@dataclass
class ParityPeerType:
    """Active, connected and maximum peer counts with the list of peers."""

    active: int
    connected: int
    max: int
    peers: list[ParityPeerInfo] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            "active": self.active,
            "connected": self.connected,
            "max": self.max,
            "peers": [peer.to_json() for peer in self.peers],
        }

    @classmethod
    def from_json(cls, data: Any) -> "ParityPeerType":
        data = _object(data)
        peers = _required(data, "peers")
        if not isinstance(peers, list):
            raise ValueError(f"`peers` must be a JSON array, got {peers!r}")
        return cls(
            active=_count(_required(data, "active")),
            connected=_count(_required(data, "connected")),
            max=_count(_required(data, "max"), _U32_LIMIT),
            peers=[ParityPeerInfo.from_json(peer) for peer in peers],
        )


class Comparison(enum.Enum):
    """How a pending-transaction field is compared with a value."""

    LOWER_THAN = "lt"
    EQUAL = "eq"
    GREATER_THAN = "gt"


FilterValue = Union[H160, int]


def _encode_value(value: FilterValue) -> str:
    if isinstance(value, H160):
        return value.to_json()
    return encode_quantity(value)


@dataclass(frozen=True)
class FilterCondition:
    """A comparison of a field with a value, such as `gas > 21000`."""

    comparison: Comparison
    value: FilterValue

    @classmethod
    def lower_than(cls, value: FilterValue) -> "FilterCondition":
        return cls(Comparison.LOWER_THAN, value)

    @classmethod
    def equal(cls, value: FilterValue) -> "FilterCondition":
        return cls(Comparison.EQUAL, value)

    @classmethod
    def greater_than(cls, value: FilterValue) -> "FilterCondition":
        return cls(Comparison.GREATER_THAN, value)

    def to_json(self) -> dict[str, str]:
        return {self.comparison.value: _encode_value(self.value)}


@dataclass(frozen=True)
class ToFilter:
    """Match the recipient address, or contract creation when no address is given."""

    address_value: Optional[H160] = None

    @classmethod
    def address(cls, address: H160) -> "ToFilter":
        if not isinstance(address, H160):
            raise TypeError(f"expected an H160 address, got {address!r}")
        return cls(address)

    @classmethod
    def action(cls) -> "ToFilter":
        return cls(None)

    @property
    def is_action(self) -> bool:
        return self.address_value is None

    def to_json(self) -> dict[str, str]:
        if self.address_value is None:
            return {"action": "contract_creation"}
        return {"eq": self.address_value.to_json()}


def _condition(value: Any, limit: int) -> FilterCondition:
    condition = value if isinstance(value, FilterCondition) else FilterCondition.equal(value)
    number = condition.value
    if isinstance(number, bool) or not isinstance(number, int) or not 0 <= number < limit:
        raise ValueError(f"not a valid filter value: {number!r}")
    return condition


@dataclass(frozen=True)
class ParityPendingTransactionFilter:
    """A filter for pending transactions."""

    from_: Optional[FilterCondition] = None
    to: Optional[ToFilter] = None
    gas: Optional[FilterCondition] = None
    gas_price: Optional[FilterCondition] = None
    value: Optional[FilterCondition] = None
    nonce: Optional[FilterCondition] = None

    @classmethod
    def builder(cls) -> "ParityPendingTransactionFilterBuilder":
        return ParityPendingTransactionFilterBuilder()

    def to_json(self) -> dict[str, Any]:
        entries = (
            ("from", self.from_),
            ("to", self.to),
            ("gas", self.gas),
            ("gas_price", self.gas_price),
            ("value", self.value),
            ("nonce", self.nonce),
        )
        return {key: item.to_json() for key, item in entries if item is not None}


class ParityPendingTransactionFilterBuilder:
    """Builds a ParityPendingTransactionFilter; each call returns a new builder."""

    def __init__(self, spec: ParityPendingTransactionFilter | None = None) -> None:
        self._filter = spec if spec is not None else ParityPendingTransactionFilter()

    def _with(self, **changes: Any) -> "ParityPendingTransactionFilterBuilder":
        return ParityPendingTransactionFilterBuilder(replace(self._filter, **changes))

    def from_(self, address: H160) -> "ParityPendingTransactionFilterBuilder":
        """Match transactions sent from exactly this address."""
        if not isinstance(address, H160):
            raise TypeError(f"expected an H160 address, got {address!r}")
        return self._with(from_=FilterCondition.equal(address))

    def to(self, to_or_action: ToFilter | H160) -> "ParityPendingTransactionFilterBuilder":
        if isinstance(to_or_action, H160):
            to_or_action = ToFilter.address(to_or_action)
        if not isinstance(to_or_action, ToFilter):
            raise TypeError(f"expected a ToFilter, got {to_or_action!r}")
        return self._with(to=to_or_action)

    def gas(self, gas: FilterCondition | int) -> "ParityPendingTransactionFilterBuilder":
        return self._with(gas=_condition(gas, _U64_LIMIT))

    def gas_price(self, gas_price: FilterCondition | int) -> "ParityPendingTransactionFilterBuilder":
        return self._with(gas_price=_condition(gas_price, _U64_LIMIT))

    def value(self, value: FilterCondition | int) -> "ParityPendingTransactionFilterBuilder":
        return self._with(value=_condition(value, 1 << 256))

    def nonce(self, nonce: FilterCondition | int) -> "ParityPendingTransactionFilterBuilder":
        return self._with(nonce=_condition(nonce, 1 << 256))

    def build(self) -> ParityPendingTransactionFilter:
        return self._filter