"""The account and storage proof returned by eth_getProof (EIP-1186)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from web3types.primitives import H256, Bytes, decode_quantity, encode_quantity


def _object(data: Any) -> Mapping:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected a JSON object, got {data!r}")
    return data


def _required(data: Mapping, key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None


def _byte_list(raw: Any, key: str) -> list[Bytes]:
    if not isinstance(raw, list):
        raise ValueError(f"`{key}` must be a JSON array, got {raw!r}")
    return [Bytes.from_json(item) for item in raw]


@dataclass
class StorageProof:
    """A storage key, its value, and the proof of that value."""

    key: int = 0
    value: int = 0
    proof: list[Bytes] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            "key": encode_quantity(self.key),
            "value": encode_quantity(self.value),
            "proof": [node.to_json() for node in self.proof],
        }

    @classmethod
    def from_json(cls, data: Any) -> "StorageProof":
        data = _object(data)
        return cls(
            key=decode_quantity(_required(data, "key"), 256),
            value=decode_quantity(_required(data, "value"), 256),
            proof=_byte_list(_required(data, "proof"), "proof"),
        )


@dataclass
class Proof:
    """An account's state together with Merkle proofs of it and of requested storage."""

    balance: int = 0
    code_hash: H256 = field(default_factory=H256)
    nonce: int = 0
    storage_hash: H256 = field(default_factory=H256)
    account_proof: list[Bytes] = field(default_factory=list)
    storage_proof: list[StorageProof] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            "balance": encode_quantity(self.balance),
            "codeHash": self.code_hash.to_json(),
            "nonce": encode_quantity(self.nonce),
            "storageHash": self.storage_hash.to_json(),
            "accountProof": [node.to_json() for node in self.account_proof],
            "storageProof": [entry.to_json() for entry in self.storage_proof],
        }

    @classmethod
    def from_json(cls, data: Any) -> "Proof":
        data = _object(data)
        storage = _required(data, "storageProof")
        if not isinstance(storage, list):
            raise ValueError(f"`storageProof` must be a JSON array, got {storage!r}")
        return cls(
            balance=decode_quantity(_required(data, "balance"), 256),
            code_hash=H256.from_json(_required(data, "codeHash")),
            nonce=decode_quantity(_required(data, "nonce"), 256),
            storage_hash=H256.from_json(_required(data, "storageHash")),
            account_proof=_byte_list(_required(data, "accountProof"), "accountProof"),
            storage_proof=[StorageProof.from_json(entry) for entry in storage],
        )