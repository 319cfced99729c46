"""The fee history returned by the eth_feeHistory call."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from web3types.block import BlockNumber
from web3types.primitives import decode_quantity, encode_quantity


def _field(data: Mapping, key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None


def _array(raw: Any, key: str) -> list:
    if not isinstance(raw, list):
        raise ValueError(f"`{key}` must be a JSON array, got {raw!r}")
    return raw


def _ratio(item: Any) -> float:
    if isinstance(item, bool) or not isinstance(item, (int, float)):
        raise ValueError(f"not a gas used ratio: {item!r}")
    return float(item)


@dataclass
class FeeHistory:
    """Base fees, gas usage ratios and optional rewards for a range of blocks."""

    oldest_block: BlockNumber
    base_fee_per_gas: list[int]
    gas_used_ratio: list[float]
    reward: Optional[list[list[int]]] = None

    def to_json(self) -> dict[str, Any]:
        return {
            "oldestBlock": self.oldest_block.to_json(),
            "baseFeePerGas": [encode_quantity(fee) for fee in self.base_fee_per_gas],
            "gasUsedRatio": [float(ratio) for ratio in self.gas_used_ratio],
            "reward": None
            if self.reward is None
            else [[encode_quantity(value) for value in row] for row in self.reward],
        }

    @classmethod
    def from_json(cls, data: Any) -> "FeeHistory":
        if not isinstance(data, Mapping):
            raise ValueError(f"expected a JSON object, got {data!r}")
        raw_reward = data.get("reward")
        reward = None
        if raw_reward is not None:
            reward = [
                [decode_quantity(value, 256) for value in _array(row, "reward")]
                for row in _array(raw_reward, "reward")
            ]
        return cls(
            oldest_block=BlockNumber.from_json(_field(data, "oldestBlock")),
            base_fee_per_gas=[
                decode_quantity(fee, 256)
                for fee in _array(_field(data, "baseFeePerGas"), "baseFeePerGas")
            ],
            gas_used_ratio=[
                _ratio(item) for item in _array(_field(data, "gasUsedRatio"), "gasUsedRatio")
            ],
            reward=reward,
        )