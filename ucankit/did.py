"""Decentralized identifiers of the did:key type, holding a public key."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Dict, Tuple, Union

from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

PublicKey = Union[ed25519.Ed25519PublicKey, rsa.RSAPublicKey, ec.EllipticCurvePublicKey]
PrivateKey = Union[
    ed25519.Ed25519PrivateKey, rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey
]

_KEY_PREFIX = "did:key:"
_B58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_B58_INDEX = {ch: i for i, ch in enumerate(_B58_ALPHABET)}
_MAX_VARINT_LEN = 9
_RSA_MIN_BITS = 2048
_RSA_MAX_BITS = 8192
_RSA_GENERATED_BITS = 3072


class DIDError(ValueError):
    """Raised for malformed DIDs and unsupported keys."""


class Code(enum.IntEnum):
    """Multicodec codes of the public key types a did:key may hold."""

    X25519 = 0xEC
    ED25519 = 0xED
    P256 = 0x1200
    P384 = 0x1201
    P521 = 0x1202
    SECP256K1 = 0xE7
    RSA = 0x1205


_PARSEABLE = frozenset({Code.ED25519, Code.P256, Code.SECP256K1, Code.RSA})


def _b58encode(data: bytes) -> str:
    number = int.from_bytes(data, "big")
    digits = []
    while number:
        number, rem = divmod(number, 58)
        digits.append(_B58_ALPHABET[rem])
    pad = len(data) - len(data.lstrip(b"\0"))
    return "1" * pad + "".join(reversed(digits))


def _b58decode(text: str) -> bytes:
    if not text:
        raise DIDError("zero length base58 string")
    number = 0
    for ch in text:
        digit = _B58_INDEX.get(ch)
        if digit is None:
            raise DIDError(f"invalid base58 character {ch!r}")
        number = number * 58 + digit
    pad = len(text) - len(text.lstrip("1"))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""
    return b"\0" * pad + body


def _uvarint_encode(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _uvarint_decode(data: bytes) -> Tuple[int, int]:
    value = 0
    for i, byte in enumerate(data):
        if i >= _MAX_VARINT_LEN:
            raise DIDError("varint larger than 63 bits")
        value |= (byte & 0x7F) << (7 * i)
        if byte < 0x80:
            if byte == 0 and i > 0:
                raise DIDError("varint not minimally encoded")
            return value, i + 1
    raise DIDError("varint truncated")


@dataclass(frozen=True)
class DID:
    """A did:key identifier: a multicodec code and the prefixed key bytes."""

    code: int = 0
    data: bytes = b""

    def defined(self) -> bool:
        """Tell whether the DID is defined, not equal to UNDEF."""
        return self.code != 0 or len(self.data) > 0

    def pub_key(self) -> PublicKey:
        """Return the public key held by the DID."""
        loader = _LOADERS.get(self.code)
        if loader is None:
            raise DIDError(f"unsupported multicodec: {int(self.code)}")
        prefix_size = len(_uvarint_encode(self.code))
        return loader(self.data[prefix_size:])

    def __str__(self) -> str:
        if not self.defined():
            return "(undefined)"
        return _KEY_PREFIX + "z" + _b58encode(self.data)

    def __repr__(self) -> str:
        return f"DID({str(self)!r})"


UNDEF = DID()


def parse(s: str) -> DID:
    """Parse a did:key string."""
    if not s.startswith(_KEY_PREFIX):
        raise DIDError("must start with 'did:key'")
    encoded = s[len(_KEY_PREFIX):]
    if not encoded:
        raise DIDError("cannot decode multibase for empty string")
    if encoded[0] != "z":
        raise DIDError("not Base58BTC encoded")
    data = _b58decode(encoded[1:])
    code, _ = _uvarint_decode(data)
    if code not in _PARSEABLE:
        raise DIDError(f"unsupported did:key multicodec: 0x{code:x}")
    return DID(Code(code), data)


def _der_element(data: bytes, tag: int) -> Tuple[bytes, bytes]:
    if len(data) < 2 or data[0] != tag:
        raise DIDError("malformed PKCS#1 public key")
    length = data[1]
    offset = 2
    if length & 0x80:
        count = length & 0x7F
        if not 1 <= count <= 4 or len(data) < 2 + count:
            raise DIDError("malformed PKCS#1 public key")
        length = int.from_bytes(data[2:2 + count], "big")
        offset += count
    end = offset + length
    if end > len(data):
        raise DIDError("malformed PKCS#1 public key")
    return data[offset:end], data[end:]


def _load_rsa(data: bytes) -> rsa.RSAPublicKey:
    body, rest = _der_element(data, 0x30)
    if rest:
        raise DIDError("trailing data after PKCS#1 public key")
    modulus_bytes, body = _der_element(body, 0x02)
    exponent_bytes, body = _der_element(body, 0x02)
    if body or not modulus_bytes or not exponent_bytes:
        raise DIDError("malformed PKCS#1 public key")
    modulus = int.from_bytes(modulus_bytes, "big", signed=True)
    exponent = int.from_bytes(exponent_bytes, "big", signed=True)
    if modulus <= 0 or exponent <= 0:
        raise DIDError("RSA modulus and exponent must be positive")
    if modulus.bit_length() < _RSA_MIN_BITS:
        raise DIDError("rsa key too small")
    if modulus.bit_length() > _RSA_MAX_BITS:
        raise DIDError("rsa key too big")
    try:
        return rsa.RSAPublicNumbers(exponent, modulus).public_key()
    except ValueError as exc:
        raise DIDError(str(exc)) from exc


def _load_ed25519(data: bytes) -> ed25519.Ed25519PublicKey:
    try:
        return ed25519.Ed25519PublicKey.from_public_bytes(data)
    except ValueError as exc:
        raise DIDError(str(exc)) from exc


def _load_secp256k1(data: bytes) -> ec.EllipticCurvePublicKey:
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), data)
    except ValueError as exc:
        raise DIDError(str(exc)) from exc


def _compressed_ec_loader(
    curve: ec.EllipticCurve,
) -> Callable[[bytes], ec.EllipticCurvePublicKey]:
    size = 1 + (curve.key_size + 7) // 8

    def load(data: bytes) -> ec.EllipticCurvePublicKey:
        if len(data) != size or data[0] not in (2, 3):
            raise DIDError(f"invalid compressed {curve.name} point")
        try:
            return ec.EllipticCurvePublicKey.from_encoded_point(curve, data)
        except ValueError as exc:
            raise DIDError(str(exc)) from exc

    return load


_LOADERS: Dict[int, Callable[[bytes], PublicKey]] = {
    Code.X25519: _load_ed25519,
    Code.ED25519: _load_ed25519,
    Code.P256: _compressed_ec_loader(ec.SECP256R1()),
    Code.P384: _compressed_ec_loader(ec.SECP384R1()),
    Code.P521: _compressed_ec_loader(ec.SECP521R1()),
    Code.SECP256K1: _load_secp256k1,
    Code.RSA: _load_rsa,
}

_CURVE_CODES = {
    "secp256r1": Code.P256,
    "secp384r1": Code.P384,
    "secp521r1": Code.P521,
    "secp256k1": Code.SECP256K1,
}

_ECDSA_CURVES = {
    Code.P256: ec.SECP256R1,
    Code.P384: ec.SECP384R1,
    Code.P521: ec.SECP521R1,
}


def from_pub_key(pub_key: PublicKey) -> DID:
    """Build a did:key from a public key."""
    if isinstance(pub_key, ed25519.Ed25519PublicKey):
        code = Code.ED25519
        raw = pub_key.public_bytes(Encoding.Raw, PublicFormat.Raw)
    elif isinstance(pub_key, rsa.RSAPublicKey):
        code = Code.RSA
        raw = pub_key.public_bytes(Encoding.DER, PublicFormat.PKCS1)
    elif isinstance(pub_key, ec.EllipticCurvePublicKey):
        found = _CURVE_CODES.get(pub_key.curve.name)
        if found is None:
            raise DIDError(f"unsupported ECDSA curve: {pub_key.curve.name}")
        code = found
        raw = pub_key.public_bytes(Encoding.X962, PublicFormat.CompressedPoint)
    else:
        raise DIDError("unsupported key type")
    return DID(code, _uvarint_encode(code) + raw)


def from_priv_key(priv_key: PrivateKey) -> DID:
    """Build the did:key of the public half of a private key."""
    return from_pub_key(priv_key.public_key())


def to_pub_key(s: str) -> PublicKey:
    """Parse a did:key string and return the public key it holds."""
    return parse(s).pub_key()


def generate_ed25519() -> Tuple[ed25519.Ed25519PrivateKey, DID]:
    """Generate an Ed25519 private key and its DID (the recommended algorithm)."""
    priv = ed25519.Ed25519PrivateKey.generate()
    return priv, from_priv_key(priv)


def generate_rsa() -> Tuple[rsa.RSAPrivateKey, DID]:
    """Generate a 3072-bit RSA private key and its DID."""
    priv = rsa.generate_private_key(public_exponent=65537, key_size=_RSA_GENERATED_BITS)
    return priv, from_priv_key(priv)


def generate_secp256k1() -> Tuple[ec.EllipticCurvePrivateKey, DID]:
    """Generate a secp256k1 private key and its DID."""
    priv = ec.generate_private_key(ec.SECP256K1())
    return priv, from_priv_key(priv)


def generate_ecdsa_with_curve(code: int) -> Tuple[ec.EllipticCurvePrivateKey, DID]:
    """Generate an ECDSA private key on the NIST curve named by ``code``."""
    curve_type = _ECDSA_CURVES.get(code)
    if curve_type is None:
        raise DIDError("unsupported ECDSA curve")
    priv = ec.generate_private_key(curve_type())
    return priv, from_priv_key(priv)


def generate_ecdsa() -> Tuple[ec.EllipticCurvePrivateKey, DID]:
    """Generate an ECDSA private key on P-256 and its DID."""
    return generate_ecdsa_with_curve(Code.P256)