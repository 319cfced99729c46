import pytest

from web3types.primitives import H256, Bytes
from web3types.recovery import ParseSignatureError, Recovery, RecoveryMessage
from web3types.signed import SignedData, SignedTransaction

R_HEX = "b91467e570a6466aa9e9876cbcd013baba02900b8979d43fe208a4a4f339f5fd"
S_HEX = "6007e74cd82e037b800186422fc2da167c747ef045e5d18a5f5d4300f8e1a029"
HASH_HEX = "1da44b586eb0729ff70a73c326926f6ed5a25f5b056e7f47fbc6e58d86871655"
MESSAGE = "Some data"
V = 0x1C


def _signed() -> SignedData:
    return SignedData(
        message=MESSAGE.encode(),
        message_hash=H256.from_json("0x" + HASH_HEX),
        v=V,
        r=H256.from_json("0x" + R_HEX),
        s=H256.from_json("0x" + S_HEX),
        signature=Bytes.from_json("0x" + R_HEX + S_HEX + "1c"),
    )


EXPECTED = (bytes.fromhex(R_HEX + S_HEX), 1)


def test_recovery_signature_from_signed_data():
    assert Recovery.from_signed_data(_signed()).as_signature() == EXPECTED


def test_recovery_signature_from_parts():
    signed = _signed()
    assert Recovery(MESSAGE, V, signed.r, signed.s).as_signature() == EXPECTED


def test_recovery_signature_from_raw_signature():
    recovery = Recovery.from_raw_signature(MESSAGE, _signed().signature)
    assert recovery.as_signature() == EXPECTED
    assert recovery.v == V
    assert recovery.message == RecoveryMessage(data=b"Some data")


def test_raw_signature_from_plain_bytes():
    raw = bytes.fromhex(R_HEX + S_HEX + "1b")
    recovery = Recovery.from_raw_signature(b"abc", raw)
    assert recovery.r == H256.from_json("0x" + R_HEX)
    assert recovery.s == H256.from_json("0x" + S_HEX)
    assert recovery.recovery_id() == 0


@pytest.mark.parametrize("length", [0, 64, 66])
def test_raw_signature_wrong_length(length):
    with pytest.raises(ParseSignatureError) as info:
        Recovery.from_raw_signature(MESSAGE, bytes(length))
    assert str(info.value) == "error parsing raw signature: wrong number of bytes, expected 65"


def test_from_signed_transaction_uses_message_hash():
    signed = _signed()
    tx = SignedTransaction(
        message_hash=signed.message_hash,
        v=37,
        r=signed.r,
        s=signed.s,
        raw_transaction=Bytes.from_json("0x01"),
        transaction_hash=signed.message_hash,
    )
    recovery = Recovery.from_signed_transaction(tx)
    assert recovery.message == RecoveryMessage(hash=signed.message_hash)
    assert recovery.as_signature() == (EXPECTED[0], 0)


@pytest.mark.parametrize(
    "v, expected",
    [(27, 0), (28, 1), (35, 0), (36, 1), (37, 0), (38, 1), (0, None), (1, None), (29, None), (34, None)],
)
def test_recovery_id(v, expected):
    signed = _signed()
    assert Recovery(MESSAGE, v, signed.r, signed.s).recovery_id() == expected


def test_as_signature_none_for_invalid_v():
    signed = _signed()
    assert Recovery(MESSAGE, 5, signed.r, signed.s).as_signature() is None


def test_message_from_values():
    digest = H256.from_json("0x" + HASH_HEX)
    assert RecoveryMessage.from_value(digest).hash == digest
    assert RecoveryMessage.from_value("hi").data == b"hi"
    assert RecoveryMessage.from_value(bytearray(b"\x01\x02")).data == b"\x01\x02"
    assert RecoveryMessage.from_value(Bytes.from_json("0x0102")).data == b"\x01\x02"


def test_message_rejects_unknown_values():
    with pytest.raises(TypeError):
        RecoveryMessage.from_value(42)


def test_message_needs_exactly_one_part():
    with pytest.raises(ValueError):
        RecoveryMessage()