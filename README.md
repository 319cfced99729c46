# web3types

Plain Python data types for the values exchanged with Ethereum JSON-RPC
nodes: blocks, transactions, receipts, logs and filters, fee history,
proofs, mining work, Parity peer and trace APIs, and signature recovery
data.

Each type converts to and from the JSON shapes nodes use. Quantities are
`0x`-prefixed hex, hashes and addresses are fixed-width hex, and byte strings
are `0x`-prefixed hex. Use `to_json()` to build a value for a request and
`from_json()` to read one from a response. Malformed input raises
`ValueError`.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Examples

Block identifiers:

```python
from web3types.block import BlockNumber, BlockId
from web3types.primitives import H256

BlockNumber.latest().to_json()          # "latest"
BlockNumber.of(100).to_json()           # "0x64"
BlockNumber.from_json("0x64")           # equal to BlockNumber.of(100)
BlockNumber.from_json("64")             # ValueError: invalid block number: missing 0x prefix
BlockId.from_hash(H256.from_low_u64_be(1)).to_json()
# {"blockHash": "0x000...0001"}
```

Reading a block whose transactions are given as hashes:

```python
from web3types.block import Block
from web3types.primitives import H256

block = Block.from_json(response, H256.from_json)
print(block.author, block.number, block.base_fee_per_gas)
```

A `null` or missing `miner` field reads as the zero address.

Log filters:

```python
from web3types.block import BlockNumber
from web3types.log import FilterBuilder
from web3types.primitives import H160, H256

flt = (
    FilterBuilder()
    .from_block(BlockNumber.earliest())
    .to_block(BlockNumber.latest())
    .address([H160.from_low_u64_be(5)])
    .topics([H256.from_low_u64_be(3)], None, None, None)
    .limit(10)
    .build()
)
params = flt.to_json()
```

Each builder call returns a new builder. Setting a block hash clears the
block range, and setting either end of the range clears the block hash.

Call and transaction requests:

```python
from web3types.primitives import Bytes, H160
from web3types.transaction_request import CallRequest, TransactionCondition, TransactionRequest

call = (
    CallRequest.builder()
    .to(H160.from_low_u64_be(5))
    .gas(21_000)
    .value(5_000_000)
    .data(Bytes(b"\x01\x02\x03"))
    .build()
)
call.to_json()
# {"to": "0x...05", "gas": "0x5208", "value": "0x4c4b40", "data": "0x010203"}

tx = (
    TransactionRequest.builder()
    .from_(H160.from_low_u64_be(5))
    .condition(TransactionCondition.block(5))
    .build()
)
```

Signature recovery data from a 65-byte raw signature:

```python
from web3types.recovery import Recovery

recovery = Recovery.from_raw_signature("Some data", raw_signature)
signature, recovery_id = recovery.as_signature()
```

A signature of any other length raises `ParseSignatureError`, a subclass of
`ValueError`. `as_signature()` returns `None` when `v` is not 27, 28 or at
least 35.

Trace APIs:

```python
from web3types.trace_filtering import Trace, TraceFilterBuilder
from web3types.traces import BlockTrace, TraceType

trace = Trace.from_json(response)
replay = BlockTrace.from_json(replay_response)
[t.value for t in TraceType]            # ["trace", "vmTrace", "stateDiff"]
```

## Modules

- `web3types.primitives`: fixed-size hashes (`H64`, `H128`, `H160`, `H256`, `H512`, `H520`, `H2048`), `Bytes`, `BytesArray`, `encode_quantity`, `decode_quantity`
- `web3types.block`: `Block`, `BlockHeader`, `BlockNumber`, `BlockId`, `parse_author`
- `web3types.fee_history`: `FeeHistory`
- `web3types.log`: `Log`, `Filter`, `FilterBuilder`, `TopicFilter`
- `web3types.proof`: `Proof`, `StorageProof`
- `web3types.work`: `Work`
- `web3types.transaction`: `Transaction`, `Receipt`, `RawTransaction`, `AccessListItem`, `TransactionId`
- `web3types.parity`: peer information (`ParityPeerType`, `ParityPeerInfo` and friends) and pending-transaction filters (`ParityPendingTransactionFilter`, its builder, `FilterCondition`, `ToFilter`)
- `web3types.transaction_request`: `CallRequest`, `TransactionRequest`, their builders, `TransactionCondition`
- `web3types.signed`: `SignedData`, `SignedTransaction`, `TransactionParameters`
- `web3types.recovery`: `Recovery`, `RecoveryMessage`, `ParseSignatureError`
- `web3types.trace_filtering`: trace-filtering API types, `parse_action`, `parse_result`
- `web3types.traces`: ad-hoc trace API types (`BlockTrace`, `StateDiff`, `VMTrace`, `Diff` and friends)

## What this package does not do

- It has no client: it sends no requests and opens no connections. It only
  builds and reads the JSON values.
- It has no type for the result of `eth_syncing`.
- It does no cryptography: `Recovery` splits and checks signature data, but
  recovering an address or signing a transaction is left to other code.