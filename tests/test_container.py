import base64
import hashlib
import io

import cbor2

from ucankit.car import EMPTY_CID, CarBlock, read_car
from ucankit.cid import CID, RAW
from ucankit.container import CONTAINER_VERSION, Writer


def _sealed(payload: bytes):
    multihash = bytes([0x12, 32]) + hashlib.sha256(payload).digest()
    return CID(1, RAW, multihash), payload


def _filled_writer(count: int = 5) -> Writer:
    writer = Writer()
    for i in range(count):
        cid, data = _sealed(f"sealed token {i}".encode())
        writer.add_sealed(cid, data)
    return writer


def test_add_sealed_stores_data():
    writer = Writer()
    cid, data = _sealed(b"payload")
    writer.add_sealed(cid, data)
    assert writer[cid] == b"payload"
    assert len(writer) == 1


def test_empty_cbor_wire_bytes():
    assert Writer().to_cbor() == b"\xa1\x66ctn-v1\x80"


def test_cbor_round_trip():
    writer = _filled_writer()
    decoded = cbor2.loads(writer.to_cbor())
    assert list(decoded) == [CONTAINER_VERSION]
    assert sorted(decoded[CONTAINER_VERSION]) == sorted(writer.values())


def test_cbor_writer_matches_cbor():
    writer = _filled_writer()
    buf = io.BytesIO()
    writer.to_cbor_writer(buf)
    assert buf.getvalue() == writer.to_cbor()


def test_cbor_base64():
    writer = _filled_writer()
    encoded = writer.to_cbor_base64()
    assert base64.b64decode(encoded) == writer.to_cbor()
    buf = io.BytesIO()
    writer.to_cbor_base64_writer(buf)
    assert buf.getvalue().decode("ascii") == encoded


def test_car_round_trip():
    writer = _filled_writer(10)
    roots, it = read_car(io.BytesIO(writer.to_car()))
    blocks = list(it)
    assert roots == [EMPTY_CID]
    assert {b.cid: b.data for b in blocks} == dict(writer)
    assert all(isinstance(b, CarBlock) for b in blocks) and len(blocks) == 10


def test_car_writer_matches_car():
    writer = _filled_writer()
    buf = io.BytesIO()
    writer.to_car_writer(buf)
    assert buf.getvalue() == writer.to_car()


def test_car_base64():
    writer = _filled_writer()
    encoded = writer.to_car_base64()
    assert base64.b64decode(encoded) == writer.to_car()
    buf = io.BytesIO()
    writer.to_car_base64_writer(buf)
    assert buf.getvalue().decode("ascii") == encoded
    _, it = read_car(io.BytesIO(base64.b64decode(encoded)))
    assert {b.cid: b.data for b in it} == dict(writer)


def test_empty_car_has_only_header():
    roots, it = read_car(io.BytesIO(Writer().to_car()))
    assert roots == [EMPTY_CID]
    assert list(it) == []


def test_adding_same_cid_replaces():
    writer = Writer()
    cid, data = _sealed(b"payload")
    writer.add_sealed(cid, data)
    writer.add_sealed(cid, data)
    decoded = cbor2.loads(writer.to_cbor())
    assert decoded[CONTAINER_VERSION] == [b"payload"]