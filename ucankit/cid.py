"""Content identifiers: self-describing hashes of content."""

from __future__ import annotations

import base64
import binascii
import hashlib
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from ucankit.did import (
    DIDError,
    _b58decode,
    _b58encode,
    _uvarint_decode,
    _uvarint_encode,
)

IDENTITY = 0x00
SHA2_256 = 0x12
DAG_PB = 0x70
RAW = 0x55

_V0_LENGTH = 34
_V0_STRING_LENGTH = 46


class CIDError(ValueError):
    """Raised for malformed or unsupported content identifiers."""


_HASHERS: Dict[int, Callable[[bytes], bytes]] = {
    0x11: lambda data: hashlib.sha1(data).digest(),
    0x12: lambda data: hashlib.sha256(data).digest(),
    0x13: lambda data: hashlib.sha512(data).digest(),
    0x14: lambda data: hashlib.sha3_512(data).digest(),
    0x15: lambda data: hashlib.sha3_384(data).digest(),
    0x16: lambda data: hashlib.sha3_256(data).digest(),
    0x17: lambda data: hashlib.sha3_224(data).digest(),
    0x20: lambda data: hashlib.sha384(data).digest(),
    0xB220: lambda data: hashlib.blake2b(data, digest_size=32).digest(),
}


def _read_uvarint(data: bytes, offset: int) -> Tuple[int, int]:
    try:
        value, size = _uvarint_decode(data[offset:])
    except DIDError as exc:
        raise CIDError(str(exc)) from exc
    return value, offset + size


def _split_multihash(data: bytes, offset: int) -> Tuple[int, bytes, int]:
    code, pos = _read_uvarint(data, offset)
    length, pos = _read_uvarint(data, pos)
    end = pos + length
    if end > len(data):
        raise CIDError("multihash digest is truncated")
    return code, data[pos:end], end


def read_cid(data: bytes) -> Tuple["CID", int]:
    """Read a CID from the start of ``data``; return it and the bytes consumed."""
    data = bytes(data)
    if len(data) >= 2 and data[0] == SHA2_256 and data[1] == 32:
        if len(data) < _V0_LENGTH:
            raise CIDError("not enough bytes for cid v0")
        return CID(0, DAG_PB, data[:_V0_LENGTH]), _V0_LENGTH
    version, pos = _read_uvarint(data, 0)
    if version != 1:
        raise CIDError(f"expected 1 as the cid version number, got: {version}")
    codec, pos = _read_uvarint(data, pos)
    _, _, end = _split_multihash(data, pos)
    return CID(1, codec, data[pos:end]), end


@dataclass(frozen=True)
class CID:
    """A content identifier: version, content codec and multihash."""

    version: int
    codec: int
    multihash: bytes

    def __post_init__(self) -> None:
        if self.version not in (0, 1):
            raise CIDError(f"unsupported cid version: {self.version}")
        code, digest, end = _split_multihash(self.multihash, 0)
        if end != len(self.multihash):
            raise CIDError("trailing bytes after multihash")
        if self.version == 0 and (
            self.codec != DAG_PB or code != SHA2_256 or len(digest) != 32
        ):
            raise CIDError("cid v0 must be a dag-pb sha2-256 hash")

    @property
    def hash_code(self) -> int:
        """The multihash function code."""
        return _split_multihash(self.multihash, 0)[0]

    @property
    def digest(self) -> bytes:
        """The raw hash digest."""
        return _split_multihash(self.multihash, 0)[1]

    @classmethod
    def from_bytes(cls, data: bytes) -> CID:
        """Decode a binary CID, which must span all of ``data``."""
        cid, consumed = read_cid(data)
        if consumed != len(data):
            raise CIDError("trailing bytes after cid")
        return cid

    @classmethod
    def from_string(cls, s: str) -> CID:
        """Decode a CID from its string form (v0 base58 or multibase v1)."""
        if len(s) == _V0_STRING_LENGTH and s.startswith("Qm"):
            return cls.from_bytes(_decode_base58(s))
        if len(s) < 2:
            raise CIDError("cid too short")
        prefix, body = s[0], s[1:]
        if prefix in ("b", "B"):
            decoded = _decode_base32(body)
        elif prefix == "z":
            decoded = _decode_base58(body)
        elif prefix in ("f", "F"):
            try:
                decoded = bytes.fromhex(body)
            except ValueError as exc:
                raise CIDError(str(exc)) from exc
        else:
            raise CIDError(f"unsupported multibase prefix {prefix!r}")
        return cls.from_bytes(decoded)

    def to_bytes(self) -> bytes:
        """The binary form of the CID."""
        if self.version == 0:
            return self.multihash
        return _uvarint_encode(1) + _uvarint_encode(self.codec) + self.multihash

    def sum(self, data: bytes) -> CID:
        """Hash ``data`` the way this CID was made and return the resulting CID."""
        code, digest = self.hash_code, self.digest
        if code == IDENTITY:
            if len(digest) != len(data):
                raise CIDError(
                    f"the length of the identity hash ({len(digest)}) must be equal "
                    f"to the length of the data ({len(data)})"
                )
            new_digest = bytes(data)
        else:
            hasher = _HASHERS.get(code)
            if hasher is None:
                raise CIDError(f"unsupported multihash code: 0x{code:x}")
            full = hasher(bytes(data))
            if len(digest) > len(full):
                raise CIDError("requested digest length exceeds the hash size")
            new_digest = full[: len(digest)]
        multihash = _uvarint_encode(code) + _uvarint_encode(len(new_digest)) + new_digest
        return CID(self.version, self.codec, multihash)

    def __str__(self) -> str:
        if self.version == 0:
            return _b58encode(self.multihash)
        encoded = base64.b32encode(self.to_bytes()).decode("ascii")
        return "b" + encoded.lower().rstrip("=")

    def __repr__(self) -> str:
        return f"CID({str(self)!r})"


def _decode_base32(body: str) -> bytes:
    padded = body.upper() + "=" * (-len(body) % 8)
    try:
        return base64.b32decode(padded)
    except (binascii.Error, ValueError) as exc:
        raise CIDError(f"invalid base32: {exc}") from exc


def _decode_base58(body: str) -> bytes:
    try:
        return _b58decode(body)
    except DIDError as exc:
        raise CIDError(str(exc)) from exc