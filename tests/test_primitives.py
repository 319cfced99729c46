import pytest

from web3types.primitives import (
    H64,
    H128,
    H160,
    H256,
    H520,
    H2048,
    Bytes,
    BytesArray,
    FixedHash,
    decode_quantity,
    encode_quantity,
)


def _sample_array(byte27: int, size: int) -> bytes:
    arr = bytearray(size)
    offset = size - 32
    arr[offset + 31] = 0
    arr[offset + 30] = 15
    arr[offset + 29] = 1
    arr[offset + 28] = 0
    arr[offset + 27] = byte27
    return bytes(arr)


def test_should_compare_correctly():
    a = H256(_sample_array(10, 32))
    b = H256(_sample_array(9, 32))
    c = H256.from_int(0)
    d = H256.from_int(10_000)
    assert b < a
    assert d < a
    assert d < b
    assert c < a
    assert c < b
    assert c < d
    assert b.to_int() < a.to_int()


def test_should_display_correctly():
    a = H256(_sample_array(10, 32)).to_int()
    assert a == 42949742336
    assert encode_quantity(a) == "0xa00010f00"
    assert encode_quantity(1023) == "0x3ff"
    assert encode_quantity(0) == "0x0"
    assert encode_quantity(10000) == "0x2710"


def test_should_display_hash_correctly():
    a = H128.from_int(0xA00010F00)
    b = H128.from_int(1023)
    c = H128.from_int(0)
    d = H128.from_int(10000)

    assert repr(a) == "0x00000000000000000000000a00010f00"
    assert repr(b) == "0x000000000000000000000000000003ff"
    assert repr(c) == "0x00000000000000000000000000000000"
    assert repr(d) == "0x00000000000000000000000000002710"

    assert str(a) == "0x0000\u20260f00"
    assert str(b) == "0x0000\u202603ff"
    assert str(c) == "0x0000\u20260000"
    assert f"{d}" == "0x0000\u20262710"

    assert f"{a:x}" == "00000000000000000000000a00010f00"
    assert f"{b:x}" == "000000000000000000000000000003ff"
    assert f"{c:x}" == "00000000000000000000000000000000"
    assert f"{d:#x}" == "0x00000000000000000000000000002710"


def test_should_deserialize_hash_correctly():
    value = H128.from_json("0x00000000000000000000000a00010f00")
    assert value == H128.from_low_u64_be(0xA00010F00)


def test_should_serialize_u256():
    assert encode_quantity(0) == "0x0"
    assert encode_quantity(1) == "0x1"
    assert encode_quantity(16) == "0x10"
    assert encode_quantity(256) == "0x100"


def test_should_succesfully_deserialize_decimals():
    with pytest.raises(ValueError):
        decode_quantity("", 256)
    assert decode_quantity("0", 256) == 0
    assert decode_quantity("10", 256) == 10
    assert decode_quantity("1000000", 256) == 1000000
    assert decode_quantity("1000000000000000000", 256) == 10**18


def test_should_deserialize_u256():
    with pytest.raises(ValueError):
        decode_quantity("0x", 256)
    assert decode_quantity("0x0", 256) == 0
    assert decode_quantity("0x1", 256) == 1
    assert decode_quantity("0x01", 256) == 1
    assert decode_quantity("0x100", 256) == 256


@pytest.mark.parametrize("value", [1, 11, 111])
def test_quantity_round_trip(value):
    assert decode_quantity(encode_quantity(value), 64) == value


def test_decode_quantity_rejects_overflow_and_junk():
    with pytest.raises(ValueError):
        decode_quantity("0x10000000000000000", 64)
    with pytest.raises(ValueError):
        decode_quantity("0xzz", 256)
    with pytest.raises(ValueError):
        decode_quantity(5, 256)
    with pytest.raises(ValueError):
        decode_quantity("0x 1", 256)


def test_encode_quantity_rejects_negative():
    with pytest.raises(ValueError):
        encode_quantity(-1)


def test_random_has_right_size():
    assert len(H160.random()) == 20


def test_zero_and_default():
    assert H160.zero() == H160()
    assert H160().to_int() == 0
    assert len(H2048.zero()) == 256


def test_hash_json_round_trip():
    value = H256.from_low_u64_be(0xDEADBEEF)
    text = value.to_json()
    assert text == "0x" + "0" * 56 + "deadbeef"
    assert H256.from_json(text) == value


def test_hash_from_json_requires_prefix_and_width():
    with pytest.raises(ValueError):
        H160.from_json("0000000000000000000000000000000000000001")
    with pytest.raises(ValueError):
        H160.from_json("0x01")
    with pytest.raises(ValueError):
        H64.from_json(None)


def test_from_hex_accepts_no_prefix():
    assert H64.from_hex("0000000000000001") == H64.from_low_u64_be(1)


def test_wrong_length_rejected():
    with pytest.raises(ValueError):
        H160(b"\x00" * 19)


def test_base_class_has_no_size():
    with pytest.raises(TypeError):
        FixedHash()


def test_from_int_overflow():
    with pytest.raises(ValueError):
        H64.from_int(1 << 64)
    with pytest.raises(ValueError):
        H520.from_low_u64_be(-1)


def test_bytes_json():
    data = Bytes(b"\x01\x02\x03")
    assert data.to_json() == "0x010203"
    assert Bytes.from_json("0x010203") == data
    assert Bytes.from_json("0x") == Bytes()


def test_bytes_json_errors():
    with pytest.raises(ValueError):
        Bytes.from_json("010203")
    with pytest.raises(ValueError):
        Bytes.from_json("0x123")
    with pytest.raises(ValueError):
        Bytes.from_json("0xgg")


def test_bytes_array_json():
    data = BytesArray([1, 2, 255])
    assert data.to_json() == [1, 2, 255]
    assert BytesArray.from_json([1, 2, 255]) == data
    with pytest.raises(ValueError):
        BytesArray.from_json([256])
    with pytest.raises(ValueError):
        BytesArray.from_json("0x01")