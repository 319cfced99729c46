"""Transaction logs and the filter used to query them."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Union

from web3types.block import BlockNumber, parse_author
from web3types.primitives import H160, H256, Bytes, decode_quantity, encode_quantity

Topic = Union[None, H256, Sequence[H256]]


def _required(data: Mapping, key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None


def _optional(data: Mapping, key: str, parse) -> Any:
    raw = data.get(key)
    return None if raw is None else parse(raw)


def _encode(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return encode_quantity(value)
    return value.to_json()


def _string(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {value!r}")
    return value


def _boolean(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"expected a boolean, got {value!r}")
    return value


def _value_or_array(items: Sequence[Any]) -> Any:
    """One item is written bare, several as an array, none as null."""
    if not items:
        return None
    if len(items) == 1:
        return items[0].to_json()
    return [item.to_json() for item in items]


@dataclass
class Log:
    """A log produced by a transaction."""

    address: H160 = field(default_factory=H160)
    topics: list[H256] = field(default_factory=list)
    data: Bytes = field(default_factory=Bytes)
    block_hash: Optional[H256] = None
    block_number: Optional[int] = None
    transaction_hash: Optional[H256] = None
    transaction_index: Optional[int] = None
    log_index: Optional[int] = None
    transaction_log_index: Optional[int] = None
    log_type: Optional[str] = None
    removed: Optional[bool] = None

    def is_removed(self) -> bool:
        """True if the log was removed, judged by `removed`, else by `log_type`."""
        if self.removed is not None:
            return self.removed
        return self.log_type == "removed"

    def to_json(self) -> dict[str, Any]:
        return {
            "address": self.address.to_json(),
            "topics": [topic.to_json() for topic in self.topics],
            "data": self.data.to_json(),
            "blockHash": _encode(self.block_hash),
            "blockNumber": _encode(self.block_number),
            "transactionHash": _encode(self.transaction_hash),
            "transactionIndex": _encode(self.transaction_index),
            "logIndex": _encode(self.log_index),
            "transactionLogIndex": _encode(self.transaction_log_index),
            "logType": self.log_type,
            "removed": self.removed,
        }

    @classmethod
    def from_json(cls, data: Any) -> "Log":
        if not isinstance(data, Mapping):
            raise ValueError(f"expected a JSON object, got {data!r}")
        topics = _required(data, "topics")
        if not isinstance(topics, list):
            raise ValueError(f"`topics` must be a JSON array, got {topics!r}")
        return cls(
            address=parse_author(data.get("address")),
            topics=[H256.from_json(topic) for topic in topics],
            data=Bytes.from_json(_required(data, "data")),
            block_hash=_optional(data, "blockHash", H256.from_json),
            block_number=_optional(data, "blockNumber", lambda v: decode_quantity(v, 64)),
            transaction_hash=_optional(data, "transactionHash", H256.from_json),
            transaction_index=_optional(
                data, "transactionIndex", lambda v: decode_quantity(v, 64)
            ),
            log_index=_optional(data, "logIndex", lambda v: decode_quantity(v, 256)),
            transaction_log_index=_optional(
                data, "transactionLogIndex", lambda v: decode_quantity(v, 256)
            ),
            log_type=_optional(data, "logType", _string),
            removed=_optional(data, "removed", _boolean),
        )


@dataclass(frozen=True)
class TopicFilter:
    """Topics to match; each is None for any, one hash, or a sequence of alternatives."""

    topic0: Topic = None
    topic1: Topic = None
    topic2: Topic = None
    topic3: Topic = None


def _topic_to_option(topic: Topic) -> Optional[list[H256]]:
    if topic is None:
        return None
    if isinstance(topic, H256):
        return [topic]
    return list(topic)


@dataclass(frozen=True)
class Filter:
    """A log filter as sent to eth_getLogs and eth_newFilter."""

    from_block: Optional[BlockNumber] = None
    to_block: Optional[BlockNumber] = None
    block_hash: Optional[H256] = None
    address: Optional[tuple[H160, ...]] = None
    topics: Optional[tuple[Optional[tuple[H256, ...]], ...]] = None
    limit: Optional[int] = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.from_block is not None:
            out["fromBlock"] = self.from_block.to_json()
        if self.to_block is not None:
            out["toBlock"] = self.to_block.to_json()
        if self.block_hash is not None:
            out["blockHash"] = self.block_hash.to_json()
        if self.address is not None:
            out["address"] = _value_or_array(self.address)
        if self.topics is not None:
            out["topics"] = [
                None if topic is None else _value_or_array(topic) for topic in self.topics
            ]
        if self.limit is not None:
            out["limit"] = self.limit
        return out


class FilterBuilder:
    """Builds a Filter; each call returns a new builder."""

    def __init__(self, spec: Filter | None = None) -> None:
        self._filter = spec if spec is not None else Filter()

    def from_block(self, block: BlockNumber) -> "FilterBuilder":
        """Set the first block; clears a block hash set earlier."""
        return FilterBuilder(replace(self._filter, block_hash=None, from_block=block))

    def to_block(self, block: BlockNumber) -> "FilterBuilder":
        """Set the last block; clears a block hash set earlier."""
        return FilterBuilder(replace(self._filter, block_hash=None, to_block=block))

    def block_hash(self, block_hash: H256) -> "FilterBuilder":
        """Select one block by hash; clears the block range set earlier."""
        return FilterBuilder(
            replace(self._filter, from_block=None, to_block=None, block_hash=block_hash)
        )

    def address(self, addresses: Iterable[H160]) -> "FilterBuilder":
        return FilterBuilder(replace(self._filter, address=tuple(addresses)))

    def topics(
        self,
        topic1: Optional[Iterable[H256]] = None,
        topic2: Optional[Iterable[H256]] = None,
        topic3: Optional[Iterable[H256]] = None,
        topic4: Optional[Iterable[H256]] = None,
    ) -> "FilterBuilder":
        """Set up to four topic positions; trailing unset positions are dropped."""
        given = [topic1, topic2, topic3, topic4]
        while given and given[-1] is None:
            given.pop()
        topics = tuple(None if topic is None else tuple(topic) for topic in given)
        return FilterBuilder(replace(self._filter, topics=topics))

    def topic_filter(self, topic_filter: TopicFilter) -> "FilterBuilder":
        return self.topics(
            _topic_to_option(topic_filter.topic0),
            _topic_to_option(topic_filter.topic1),
            _topic_to_option(topic_filter.topic2),
            _topic_to_option(topic_filter.topic3),
        )

    def limit(self, limit: int) -> "FilterBuilder":
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise ValueError(f"limit must be a non-negative integer, got {limit!r}")
        return FilterBuilder(replace(self._filter, limit=limit))

    def build(self) -> Filter:
        return self._filter