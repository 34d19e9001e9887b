"""Reading and writing CARv1 files: a header with roots, then (CID, data) blocks."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Iterator, List, Optional, Tuple

import cbor2

from ucankit.cid import CID, CIDError, read_cid
from ucankit.did import _uvarint_encode

MAX_SECTION_SIZE = 32 << 20
"""Largest header or block section accepted when reading (32 MiB)."""

EMPTY_CID = CID.from_bytes(bytes((0x01, 55, 0x00, 0x00)))
"""A zero-length identity CID, used as the root when none is given."""

_LINK_TAG = 42
_ROOTS_KEY = "roots"
_VERSION_KEY = "version"
_MAX_VARINT_BYTES = 10


class CarError(ValueError):
    """Raised for malformed or corrupted CAR data."""


@dataclass(frozen=True)
class CarBlock:
    """A block of a CAR file: its CID and its content."""

    cid: CID
    data: bytes


def encode_header(roots: Iterable[CID]) -> bytes:
    """Encode a version 1 CAR header holding ``roots`` as DAG-CBOR."""
    header = {
        _ROOTS_KEY: [cbor2.CBORTag(_LINK_TAG, b"\x00" + root.to_bytes()) for root in roots],
        _VERSION_KEY: 1,
    }
    return cbor2.dumps(header, canonical=True)


def decode_header(data: bytes) -> Tuple[List[CID], int]:
    """Decode a DAG-CBOR CAR header; return its roots and version."""
    stream = io.BytesIO(data)
    try:
        node = cbor2.CBORDecoder(stream).decode()
    except (cbor2.CBORDecodeError, ValueError, EOFError) as exc:
        raise CarError(f"malformed car header: {exc}") from exc
    if stream.tell() != len(data):
        raise CarError("malformed car header: trailing bytes")
    if not isinstance(node, dict) or len(node) != 2:
        raise CarError("malformed car header")

    roots_node = node.get(_ROOTS_KEY)
    if not isinstance(roots_node, list):
        raise CarError("malformed car header")
    roots = [_decode_link(item) for item in roots_node]

    version = node.get(_VERSION_KEY)
    if not isinstance(version, int) or isinstance(version, bool):
        raise CarError("malformed car header")
    return roots, version


def _decode_link(item: object) -> CID:
    if (
        not isinstance(item, cbor2.CBORTag)
        or item.tag != _LINK_TAG
        or not isinstance(item.value, bytes)
        or not item.value.startswith(b"\x00")
    ):
        raise CarError("malformed car header")
    try:
        return CID.from_bytes(item.value[1:])
    except CIDError as exc:
        raise CarError(f"malformed car header: {exc}") from exc


def write_car(stream: BinaryIO, roots: Iterable[CID], blocks: Iterable[CarBlock]) -> None:
    """Write a CARv1 file; with no roots, EMPTY_CID is used so the file stays legal."""
    root_list = list(roots) or [EMPTY_CID]
    _write_section(stream, encode_header(root_list))
    for block in blocks:
        _write_section(stream, block.cid.to_bytes(), block.data)


def read_car(stream: BinaryIO) -> Tuple[List[CID], Iterator[CarBlock]]:
    """Read a CARv1 header; return the roots and a lazy iterator over the blocks."""
    header = _read_section(stream)
    if header is None:
        raise CarError("unexpected end of data: missing car header")
    roots, version = decode_header(header)
    if version != 1:
        raise CarError(f"invalid car version: {version}")
    return roots, _iter_blocks(stream)


def _iter_blocks(stream: BinaryIO) -> Iterator[CarBlock]:
    while True:
        raw = _read_section(stream)
        if raw is None:
            return
        yield _decode_block(raw)


def _decode_block(raw: bytes) -> CarBlock:
    try:
        cid, consumed = read_cid(raw)
        data = raw[consumed:]
        hashed = cid.sum(data)
    except CIDError as exc:
        raise CarError(str(exc)) from exc
    if hashed != cid:
        raise CarError(f"mismatch in content integrity, name: {cid}, data: {hashed}")
    return CarBlock(cid, data)


def _write_section(stream: BinaryIO, *parts: bytes) -> None:
    stream.write(_uvarint_encode(sum(len(part) for part in parts)))
    for part in parts:
        stream.write(part)


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    chunks = []
    remaining = size
    while remaining:
        chunk = stream.read(remaining)
        if not chunk:
            raise CarError("unexpected EOF")
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _read_uvarint(stream: BinaryIO, first: int) -> int:
    value = 0
    shift = 0
    byte = first
    for index in range(_MAX_VARINT_BYTES):
        if index:
            nxt = stream.read(1)
            if not nxt:
                raise CarError("unexpected EOF")
            byte = nxt[0]
        if byte < 0x80:
            if index == _MAX_VARINT_BYTES - 1 and byte > 1:
                raise CarError("varint overflows a 64-bit integer")
            return value | (byte << shift)
        value |= (byte & 0x7F) << shift
        shift += 7
    raise CarError("varint overflows a 64-bit integer")


def _read_section(stream: BinaryIO) -> Optional[bytes]:
    first = stream.read(1)
    if not first:
        return None
    length = _read_uvarint(stream, first[0])
    if length == 0:
        raise CarError("invalid zero size section")
    if length > MAX_SECTION_SIZE:
        raise CarError("malformed car; header is bigger than MaxAllowedSectionSize")
    return _read_exact(stream, length)