import hashlib

import pytest

from ucankit.cid import CID, CIDError, read_cid

LINK = "bafzbeigai3eoy2ccc7ybwjfz5r3rdxqrinwi4rwytly24tdbh6yk7zslrm"
EMPTY_BYTES = bytes([1, 55, 0, 0])


def test_string_round_trip():
    assert str(CID.from_string(LINK)) == LINK


def test_bytes_round_trip():
    c = CID.from_string(LINK)
    assert CID.from_bytes(c.to_bytes()) == c


def test_link_uses_sha2_256():
    c = CID.from_string(LINK)
    assert c.hash_code == 0x12
    assert c.version == 1


def test_empty_cid_fields():
    c = CID.from_bytes(EMPTY_BYTES)
    assert c.version == 1
    assert c.codec == 55
    assert c.digest == b""
    assert c.to_bytes() == EMPTY_BYTES


def test_empty_cid_sum_of_nothing_is_itself():
    c = CID.from_bytes(EMPTY_BYTES)
    assert c.sum(b"") == c


def test_identity_sum_length_mismatch():
    c = CID.from_bytes(EMPTY_BYTES)
    with pytest.raises(CIDError):
        c.sum(b"x")


def test_sha256_sum():
    template = CID.from_string(LINK)
    c = template.sum(b"hello")
    assert c.digest == hashlib.sha256(b"hello").digest()
    assert c.codec == template.codec
    assert c.sum(b"hello") == c
    assert c.sum(b"other").digest != c.digest


def test_read_cid_reports_consumed_length():
    c = CID.from_string(LINK)
    raw = c.to_bytes()
    assert read_cid(raw + b"tail") == (c, len(raw))


def test_from_bytes_rejects_trailing_bytes():
    with pytest.raises(CIDError):
        CID.from_bytes(EMPTY_BYTES + b"\x00")


def test_rejects_unknown_version():
    with pytest.raises(CIDError):
        CID.from_bytes(bytes([2, 55, 0, 0]))


def test_rejects_truncated_multihash():
    with pytest.raises(CIDError):
        CID.from_bytes(bytes([1, 55, 0x12, 32, 1, 2, 3]))


def test_rejects_unknown_multibase():
    with pytest.raises(CIDError):
        CID.from_string("x" + LINK[1:])


def test_rejects_invalid_base32():
    with pytest.raises(CIDError):
        CID.from_string("b!!!!")


def test_v0_round_trip():
    c = CID(0, 0x70, b"\x12\x20" + bytes(32))
    text = str(c)
    assert text.startswith("Qm")
    assert CID.from_string(text) == c
    assert c.to_bytes() == c.multihash


def test_v0_requires_dag_pb():
    with pytest.raises(CIDError):
        CID(0, 0x55, b"\x12\x20" + bytes(32))


def test_usable_as_dict_key():
    first = CID.from_string(LINK)
    second = CID.from_bytes(first.to_bytes())
    assert {first: "value"}[second] == "value"