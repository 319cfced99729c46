import copy

import pytest

from web3types.block import BlockId, BlockNumber
from web3types.log import Log
from web3types.primitives import H160, H256, H2048, Bytes
from web3types.transaction import (
    AccessListItem,
    RawTransaction,
    Receipt,
    Transaction,
    TransactionId,
)

BLOOM = "0x" + "0" * 512

BASE_RECEIPT = {
    "blockHash": "0x83eaba432089a0bfe99e9fc9022d1cfcb78f95f407821be81737c84ae0b439c5",
    "blockNumber": "0x38",
    "contractAddress": "0x03d8c4566478a6e1bf75650248accce16a98509f",
    "from": "0x407d73d8a49eeb85d32cf465507dd71d507100c1",
    "to": "0x853f43d8a49eeb85d32cf465507dd71d507100c1",
    "cumulativeGasUsed": "0x927c0",
    "gasUsed": "0x927c0",
    "logs": [],
    "logsBloom": BLOOM,
    "root": None,
    "transactionHash": "0x422fb0d5953c0c48cbb42fb58e1c30f5e150441c68374d70ca7d4f191fd56f26",
    "transactionIndex": "0x0",
    "effectiveGasPrice": "0x100",
}


def _receipt(**changes):
    data = copy.deepcopy(BASE_RECEIPT)
    for key, value in changes.items():
        if value is ...:
            data.pop(key, None)
        else:
            data[key] = value
    return data


def test_deserialize_receipt():
    receipt = Receipt.from_json(_receipt())
    assert receipt.block_number == 0x38
    assert receipt.from_ == H160.from_hex("0x407d73d8a49eeb85d32cf465507dd71d507100c1")
    assert receipt.to == H160.from_hex("0x853f43d8a49eeb85d32cf465507dd71d507100c1")
    assert receipt.cumulative_gas_used == 0x927C0
    assert receipt.effective_gas_price == 0x100
    assert receipt.root is None
    assert receipt.status is None
    assert receipt.logs_bloom == H2048()


def test_deserialize_receipt_without_from_to():
    receipt = Receipt.from_json(_receipt(**{"from": ..., "to": ..., "status": "0x1"}))
    assert receipt.from_ == H160()
    assert receipt.to is None
    assert receipt.status == 1


def test_deserialize_receipt_with_status():
    receipt = Receipt.from_json(_receipt(status="0x1"))
    assert receipt.status == 1
    assert receipt.transaction_index == 0


def test_deserialize_receipt_without_to():
    receipt = Receipt.from_json(_receipt(to=None, status="0x1"))
    assert receipt.to is None
    assert receipt.from_ == H160.from_hex("0x407d73d8a49eeb85d32cf465507dd71d507100c1")


def test_deserialize_receipt_without_gas():
    receipt = Receipt.from_json(_receipt(gasUsed=None, status="0x1"))
    assert receipt.gas_used is None
    assert receipt.cumulative_gas_used == 0x927C0


def test_receipt_missing_required_field():
    with pytest.raises(ValueError, match="transactionHash"):
        Receipt.from_json(_receipt(transactionHash=...))


def test_receipt_null_from_is_rejected():
    with pytest.raises(ValueError):
        Receipt.from_json(_receipt(**{"from": None}))


def test_receipt_round_trip_with_logs():
    log = Log(
        address=H160.from_low_u64_be(1),
        topics=[H256.from_low_u64_be(2)],
        data=Bytes(b"\x01\x02"),
        block_hash=H256.from_low_u64_be(3),
        block_number=1,
        removed=False,
    )
    receipt = Receipt.from_json(_receipt(status="0x1"))
    receipt.logs = [log]
    receipt.transaction_type = 2
    encoded = receipt.to_json()
    assert encoded["type"] == "0x2"
    assert Receipt.from_json(encoded) == receipt


def test_receipt_omits_type_when_absent():
    encoded = Receipt().to_json()
    assert "type" not in encoded
    assert encoded["from"] == H160().to_json()


def test_deserialize_signed_tx_parity():
    raw = RawTransaction.from_json(
        {
            "raw": "0xd46e8dd67c5d32be8d46e8dd67c5d32be8058bb8eb970870f072445675058bb8eb970870f072445675",
            "tx": {
                "hash": "0xc6ef2fc5426d6ad6fd9e2a26abeab0aa2411b7ab17f30a99d3cb96aed1d1055b",
                "nonce": "0x0",
                "blockHash": "0xbeab0aa2411b7ab17f30a99d3cb9c6ef2fc5426d6ad6fd9e2a26a6aed1d1055b",
                "blockNumber": "0x15df",
                "transactionIndex": "0x1",
                "from": "0x407d73d8a49eeb85d32cf465507dd71d507100c1",
                "to": "0x853f43d8a49eeb85d32cf465507dd71d507100c1",
                "value": "0x7f110",
                "gas": "0x7f110",
                "gasPrice": "0x09184e72a000",
                "input": "0x603880600c6000396000f300603880600c6000396000f3603880600c6000396000f360",
                "s": "0x777",
            },
        }
    )
    assert raw.tx.s == 0x777
    assert raw.tx.r is None
    assert raw.tx.v is None
    assert raw.tx.gas_price == 0x09184E72A000
    assert raw.tx.block_number == 0x15DF
    assert raw.tx.transaction_index == 1
    assert raw.raw.to_json() == (
        "0xd46e8dd67c5d32be8d46e8dd67c5d32be8058bb8eb970870f072445675058bb8eb970870f072445675"
    )


def test_deserialize_signed_tx_geth():
    raw = RawTransaction.from_json(
        {
            "raw": "0xf85d01018094f3b3138e5eb1c75b43994d1bb760e2f9f735789680801ca06484d00575e961a7db35ebe5badaaca5cb7ee65d1f2f22f22da87c238b99d30da07a85d65797e4b555c1d3f64beebb2cb6f16a6fbd40c43cc48451eaf85305f66e",
            "tx": {
                "gas": "0x0",
                "gasPrice": "0x1",
                "hash": "0x0a32fb4e18bc6f7266a164579237b1b5c74271d453c04eab70444ca367d38418",
                "input": "0x",
                "nonce": "0x1",
                "to": "0xf3b3138e5eb1c75b43994d1bb760e2f9f7357896",
                "r": "0x6484d00575e961a7db35ebe5badaaca5cb7ee65d1f2f22f22da87c238b99d30d",
                "s": "0x7a85d65797e4b555c1d3f64beebb2cb6f16a6fbd40c43cc48451eaf85305f66e",
                "v": "0x1c",
                "value": "0x0",
            },
        }
    )
    tx = raw.tx
    assert tx.v == 0x1C
    assert tx.r == 0x6484D00575E961A7DB35EBE5BADAACA5CB7EE65D1F2F22F22DA87C238B99D30D
    assert tx.from_ is None
    assert tx.block_hash is None
    assert tx.input == b""
    assert RawTransaction.from_json(raw.to_json()) == raw


def test_transaction_json_skips_absent_optionals():
    encoded = Transaction().to_json()
    assert "from" not in encoded
    assert "v" not in encoded
    assert "accessList" not in encoded
    assert encoded["to"] is None
    assert encoded["gasPrice"] is None


def test_transaction_access_list_round_trip():
    tx = Transaction(
        hash=H256.from_low_u64_be(9),
        from_=H160.from_low_u64_be(1),
        transaction_type=1,
        access_list=[
            AccessListItem(H160.from_low_u64_be(2), [H256.from_low_u64_be(3)]),
        ],
        max_fee_per_gas=10,
        max_priority_fee_per_gas=2,
    )
    encoded = tx.to_json()
    assert encoded["accessList"] == [
        {
            "address": H160.from_low_u64_be(2).to_json(),
            "storageKeys": [H256.from_low_u64_be(3).to_json()],
        }
    ]
    assert Transaction.from_json(encoded) == tx


def test_transaction_missing_input():
    data = Transaction().to_json()
    del data["input"]
    with pytest.raises(ValueError, match="input"):
        Transaction.from_json(data)


def test_transaction_id_by_hash():
    tx_hash = H256.from_low_u64_be(7)
    tx_id = TransactionId.from_hash(tx_hash)
    assert tx_id.hash == tx_hash
    assert tx_id.block is None


def test_transaction_id_by_block():
    tx_id = TransactionId.from_block(BlockNumber.latest(), 3)
    assert tx_id.block == BlockId.from_number(BlockNumber.latest())
    assert tx_id.index == 3
    assert TransactionId.from_block(5, 0).block == BlockId.from_number(5)


def test_transaction_id_rejects_mixed_forms():
    with pytest.raises(ValueError):
        TransactionId(hash=H256(), block=BlockId.from_number(1), index=0)
    with pytest.raises(ValueError):
        TransactionId()
    with pytest.raises(ValueError):
        TransactionId.from_block(1, -1)