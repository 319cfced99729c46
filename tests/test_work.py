import pytest

from web3types.primitives import H256
from web3types.work import Work


def _hashes():
    return H256.from_low_u64_be(1), H256.from_low_u64_be(2), H256.from_low_u64_be(3)


def test_work_without_number_round_trip():
    work = Work(*_hashes())
    data = work.to_json()
    assert len(data) == 3
    assert Work.from_json(data) == work


def test_work_with_integer_number_parses():
    pow_hash, seed_hash, target = _hashes()
    work = Work.from_json([pow_hash.to_json(), seed_hash.to_json(), target.to_json(), 42])
    assert work == Work(pow_hash, seed_hash, target, 42)


def test_work_number_is_serialized_as_hex_quantity():
    work = Work(*_hashes(), number=42)
    data = work.to_json()
    assert data[:3] == [h.to_json() for h in _hashes()]
    assert data[3] == "0x2a"


def test_work_wrong_length_is_rejected():
    pow_hash, seed_hash, _ = _hashes()
    with pytest.raises(ValueError, match="Cannot deserialize Work"):
        Work.from_json([pow_hash.to_json(), seed_hash.to_json()])


def test_work_hex_string_number_is_rejected():
    data = Work(*_hashes(), number=42).to_json()
    with pytest.raises(ValueError, match="Cannot deserialize Work"):
        Work.from_json(data)


def test_work_bad_hash_is_rejected():
    with pytest.raises(ValueError, match="Cannot deserialize Work"):
        Work.from_json(["0x01", "0x02", "0x03"])