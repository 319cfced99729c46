import json

import pytest

from web3types.primitives import H160, H256, Bytes
from web3types.transaction import AccessListItem
from web3types.transaction_request import (
    CallRequest,
    CallRequestBuilder,
    TransactionCondition,
    TransactionRequest,
    TransactionRequestBuilder,
)

CALL_JSON = """{
  "to": "0x0000000000000000000000000000000000000005",
  "gas": "0x5208",
  "value": "0x4c4b40",
  "data": "0x010203"
}"""

TX_JSON = """{
  "from": "0x0000000000000000000000000000000000000005",
  "gas": "0x5208",
  "value": "0x4c4b40",
  "data": "0x010203",
  "condition": {
    "block": 5
  }
}"""


def _call_request():
    return CallRequest(
        to=H160.from_low_u64_be(5),
        gas=21_000,
        value=5_000_000,
        data=Bytes(bytes.fromhex("010203")),
    )


def _tx_request():
    return TransactionRequest(
        from_=H160.from_low_u64_be(5),
        gas=21_000,
        value=5_000_000,
        data=Bytes(bytes.fromhex("010203")),
        condition=TransactionCondition.block(5),
    )


def test_should_serialize_call_request():
    assert json.dumps(_call_request().to_json(), indent=2) == CALL_JSON


def test_should_deserialize_call_request():
    request = CallRequest.from_json(json.loads(CALL_JSON))
    assert request.from_ is None
    assert request.to == H160.from_low_u64_be(5)
    assert request.gas == 21_000
    assert request.gas_price is None
    assert request.value == 5_000_000
    assert request.data == bytes.fromhex("010203")


def test_should_serialize_transaction_request():
    assert json.dumps(_tx_request().to_json(), indent=2) == TX_JSON


def test_should_deserialize_transaction_request():
    request = TransactionRequest.from_json(json.loads(TX_JSON))
    assert request.from_ == H160.from_low_u64_be(5)
    assert request.to is None
    assert request.gas == 21_000
    assert request.gas_price is None
    assert request.value == 5_000_000
    assert request.data == bytes.fromhex("010203")
    assert request.nonce is None
    assert request.condition == TransactionCondition.block(5)


def test_should_build_default_call_request():
    assert CallRequestBuilder().build() == CallRequest()
    assert CallRequest.builder().build() == CallRequest()


def test_should_build_call_request():
    built = (
        CallRequestBuilder()
        .to(H160.from_low_u64_be(5))
        .gas(21_000)
        .value(5_000_000)
        .data(Bytes(bytes.fromhex("010203")))
        .build()
    )
    assert built == _call_request()


def test_should_build_default_transaction_request():
    assert TransactionRequestBuilder().build() == TransactionRequest()
    assert TransactionRequest.builder().build() == TransactionRequest()


def test_should_build_transaction_request():
    builder = (
        TransactionRequestBuilder()
        .from_(H160.from_low_u64_be(5))
        .gas(21_000)
        .value(5_000_000)
        .data(Bytes(bytes.fromhex("010203")))
        .condition(TransactionCondition.block(5))
    )
    assert builder.build() == _tx_request()


def test_builder_calls_do_not_change_earlier_builder():
    base = CallRequestBuilder()
    base.gas(1)
    assert base.build().gas is None


def test_default_transaction_request_serializes_only_from():
    assert TransactionRequest().to_json() == {
        "from": "0x0000000000000000000000000000000000000000"
    }


def test_transaction_request_requires_from():
    with pytest.raises(ValueError, match="missing field `from`"):
        TransactionRequest.from_json({"gas": "0x1"})


def test_timestamp_condition_round_trip():
    condition = TransactionCondition.timestamp(1_600_000_000)
    assert condition.to_json() == {"time": 1_600_000_000}
    assert TransactionCondition.from_json({"time": 1_600_000_000}) == condition


@pytest.mark.parametrize(
    "data",
    [{"height": 5}, {"block": 5, "time": 6}, {}, {"block": -1}, {"block": "0x5"}, 5],
)
def test_invalid_condition_is_rejected(data):
    with pytest.raises(ValueError):
        TransactionCondition.from_json(data)


def test_access_list_and_type_round_trip():
    item = AccessListItem(H160.from_low_u64_be(7), [H256.from_low_u64_be(1)])
    request = (
        CallRequestBuilder()
        .transaction_type(1)
        .access_list([item])
        .gas_price(3)
        .from_(H160.from_low_u64_be(9))
        .build()
    )
    data = request.to_json()
    assert data["type"] == "0x1"
    assert data["gasPrice"] == "0x3"
    assert data["accessList"] == [item.to_json()]
    assert CallRequest.from_json(data) == request


def test_full_transaction_request_round_trip():
    request = (
        TransactionRequestBuilder()
        .from_(H160.from_low_u64_be(1))
        .to(H160.from_low_u64_be(2))
        .nonce(4)
        .transaction_type(2)
        .access_list([])
        .build()
    )
    data = request.to_json()
    assert data["nonce"] == "0x4"
    assert data["accessList"] == []
    assert TransactionRequest.from_json(data) == request