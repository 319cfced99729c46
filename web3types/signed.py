"""Signed data, signed transactions and the parameters used to sign a transaction."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from web3types.primitives import H160, H256, Bytes
from web3types.transaction import AccessListItem
from web3types.transaction_request import CallRequest

TRANSACTION_DEFAULT_GAS = 100_000


def _required(data: Mapping, key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None


def _byte(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
        raise ValueError(f"{what} must be an integer from 0 to 255, got {value!r}")
    return value


@dataclass
class SignedData:
    """A signed message with its hash and signature parts; `v` is in Electrum notation."""

    message: bytes
    message_hash: H256
    v: int
    r: H256
    s: H256
    signature: Bytes

    def to_json(self) -> dict[str, Any]:
        return {
            "message": list(self.message),
            "messageHash": self.message_hash.to_json(),
            "v": self.v,
            "r": self.r.to_json(),
            "s": self.s.to_json(),
            "signature": self.signature.to_json(),
        }

    @classmethod
    def from_json(cls, data: Any) -> "SignedData":
        if not isinstance(data, Mapping):
            raise ValueError(f"expected a JSON object, got {data!r}")
        message = _required(data, "message")
        if not isinstance(message, list):
            raise ValueError(f"`message` must be a JSON array, got {message!r}")
        return cls(
            message=bytes(_byte(item, "message byte") for item in message),
            message_hash=H256.from_json(_required(data, "messageHash")),
            v=_byte(_required(data, "v"), "v"),
            r=H256.from_json(_required(data, "r")),
            s=H256.from_json(_required(data, "s")),
            signature=Bytes.from_json(_required(data, "signature")),
        )


@dataclass
class TransactionParameters:
    """Transaction data for signing; unset optional fields are filled in when signing."""

    nonce: Optional[int] = None
    to: Optional[H160] = None
    gas: int = TRANSACTION_DEFAULT_GAS
    gas_price: Optional[int] = None
    value: int = 0
    data: Bytes = field(default_factory=Bytes)
    chain_id: Optional[int] = None
    transaction_type: Optional[int] = None
    access_list: Optional[list[AccessListItem]] = None
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None

    @classmethod
    def from_call_request(cls, call: CallRequest) -> "TransactionParameters":
        return cls(
            to=call.to,
            gas=TRANSACTION_DEFAULT_GAS if call.gas is None else call.gas,
            gas_price=call.gas_price,
            value=0 if call.value is None else call.value,
            data=Bytes() if call.data is None else call.data,
            transaction_type=call.transaction_type,
            access_list=call.access_list,
            max_fee_per_gas=call.max_fee_per_gas,
            max_priority_fee_per_gas=call.max_priority_fee_per_gas,
        )

    def to_call_request(self) -> CallRequest:
        return CallRequest(
            to=self.to,
            gas=self.gas,
            gas_price=self.gas_price,
            value=self.value,
            data=self.data,
            transaction_type=self.transaction_type,
            access_list=self.access_list,
            max_fee_per_gas=self.max_fee_per_gas,
            max_priority_fee_per_gas=self.max_priority_fee_per_gas,
        )


@dataclass
class SignedTransaction:
    """An offline-signed transaction ready for eth_sendRawTransaction."""

    message_hash: H256
    v: int
    r: H256
    s: H256
    raw_transaction: Bytes
    transaction_hash: H256