import base64

import pytest
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa, x25519
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from ucankit import did
from ucankit.did import DID, Code, DIDError

EXAMPLE_DID = "did:key:z6MkhaXgBZDvotDkL5257faiztiGiC2QtKLGpbnnEGta2doK"
EXAMPLE_PUB_KEY = "Lm/M42cB3HkUiODQsXRcweM6TByfzEHGO9ND274JcOY="
PARSE_DID = "did:key:z6Mkod5Jr3yd5SC7UDueqK4dAAw5xYJYjksy722tA9Boxc4z"


def _spki(key):
    return key.public_bytes(Encoding.DER, PublicFormat.SubjectPublicKeyInfo)


def _example_pub_key():
    return ed25519.Ed25519PublicKey.from_public_bytes(base64.b64decode(EXAMPLE_PUB_KEY))


def test_parse_did_key():
    assert str(did.parse(PARSE_DID)) == PARSE_DID


def test_parse_rejects_unknown_multicodec():
    with pytest.raises(DIDError):
        did.parse("did:key:z7Mkod5Jr3yd5SC7UDueqK4dAAw5xYJYjksy722tA9Boxc4z")


def test_equivalence():
    undef0 = DID()
    undef1 = did.UNDEF
    did0 = did.parse(PARSE_DID)
    did1 = did.parse(PARSE_DID)
    assert undef0 == undef1
    assert undef0 != did0
    assert did0 == did1
    assert undef1 != did1
    assert hash(did0) == hash(did1)


def test_undefined():
    assert str(did.UNDEF) == "(undefined)"
    assert did.UNDEF.defined() is False
    assert did.parse(PARSE_DID).defined() is True


@pytest.mark.parametrize(
    "factory, code",
    [
        (lambda: ec.generate_private_key(ec.SECP256R1()).public_key(), Code.P256),
        (lambda: ec.generate_private_key(ec.SECP384R1()).public_key(), Code.P384),
        (lambda: ec.generate_private_key(ec.SECP521R1()).public_key(), Code.P521),
        (lambda: ed25519.Ed25519PrivateKey.generate().public_key(), Code.ED25519),
        (
            lambda: rsa.generate_private_key(public_exponent=65537, key_size=2048).public_key(),
            Code.RSA,
        ),
        (lambda: ec.generate_private_key(ec.SECP256K1()).public_key(), Code.SECP256K1),
    ],
)
def test_from_pub_key_round_trip(factory, code):
    pub = factory()
    d = did.from_pub_key(pub)
    assert d.code == code
    assert _spki(d.pub_key()) == _spki(pub)


def test_secp256k1_curve_is_coerced():
    pub = ec.generate_private_key(ec.SECP256K1()).public_key()
    d = did.from_pub_key(pub)
    assert d.code == Code.SECP256K1
    assert d.pub_key().curve.name == "secp256k1"


@pytest.mark.parametrize(
    "factory",
    [
        lambda: ed25519.Ed25519PrivateKey.generate().public_key(),
        lambda: ec.generate_private_key(ec.SECP256R1()).public_key(),
        lambda: ec.generate_private_key(ec.SECP256K1()).public_key(),
    ],
)
def test_string_round_trip(factory):
    d = did.from_pub_key(factory())
    assert did.parse(str(d)) == d


def test_p384_did_is_not_parseable():
    d = did.from_pub_key(ec.generate_private_key(ec.SECP384R1()).public_key())
    with pytest.raises(DIDError, match="unsupported did:key multicodec"):
        did.parse(str(d))


def test_p256_varint_prefix():
    d = did.from_pub_key(ec.generate_private_key(ec.SECP256R1()).public_key())
    assert d.data[:2] == b"\x80\x24"
    assert len(d.data) == 2 + 33


def test_example_key_from_pub_key():
    assert did.from_pub_key(_example_pub_key()) == did.parse(EXAMPLE_DID)


def test_example_key_prefix():
    assert did.parse(EXAMPLE_DID).data[:2] == b"\xed\x01"


def test_to_pub_key():
    pub = did.to_pub_key(EXAMPLE_DID)
    assert pub.public_bytes(Encoding.Raw, PublicFormat.Raw) == base64.b64decode(EXAMPLE_PUB_KEY)


def test_from_priv_key():
    priv = ed25519.Ed25519PrivateKey.generate()
    assert did.from_priv_key(priv) == did.from_pub_key(priv.public_key())


def test_parse_errors():
    with pytest.raises(DIDError, match="must start with 'did:key'"):
        did.parse("did:web:z6Mkod5Jr3yd5SC7UDueqK4dAAw5xYJYjksy722tA9Boxc4z")
    with pytest.raises(DIDError, match="not Base58BTC"):
        did.parse("did:key:f00ed")
    with pytest.raises(DIDError):
        did.parse("did:key:z0OIl")
    with pytest.raises(DIDError):
        did.parse("did:key:")


def test_parse_rejects_x25519():
    text = str(DID(Code.X25519, b"\xec\x01" + bytes(32)))
    with pytest.raises(DIDError, match="0xec"):
        did.parse(text)


def test_unsupported_key_types():
    with pytest.raises(DIDError, match="unsupported key type"):
        did.from_pub_key(x25519.X25519PrivateKey.generate().public_key())
    with pytest.raises(DIDError, match="unsupported ECDSA curve"):
        did.from_pub_key(ec.generate_private_key(ec.SECP224R1()).public_key())


def test_pub_key_errors():
    with pytest.raises(DIDError, match="unsupported multicodec"):
        DID(0x55, b"\x55").pub_key()
    with pytest.raises(DIDError):
        DID(Code.ED25519, b"\xed\x01" + bytes(5)).pub_key()
    with pytest.raises(DIDError):
        DID(Code.P256, b"\x80\x24" + b"\x04" + bytes(64)).pub_key()
    with pytest.raises(DIDError):
        DID(Code.RSA, b"\x85\x24" + b"\x30\x00\x00").pub_key()


def test_small_rsa_key_rejected_on_unmarshal():
    pub = rsa.generate_private_key(public_exponent=65537, key_size=1024).public_key()
    d = did.from_pub_key(pub)
    with pytest.raises(DIDError, match="too small"):
        d.pub_key()


def test_generate_ed25519():
    priv, d = did.generate_ed25519()
    assert d.code == Code.ED25519
    assert d == did.from_priv_key(priv)


def test_generate_secp256k1():
    priv, d = did.generate_secp256k1()
    assert d.code == Code.SECP256K1
    assert _spki(d.pub_key()) == _spki(priv.public_key())


def test_generate_ecdsa():
    priv, d = did.generate_ecdsa()
    assert d.code == Code.P256
    assert d == did.from_priv_key(priv)


@pytest.mark.parametrize("code", [Code.P256, Code.P384, Code.P521])
def test_generate_ecdsa_with_curve(code):
    priv, d = did.generate_ecdsa_with_curve(code)
    assert d.code == code
    assert _spki(d.pub_key()) == _spki(priv.public_key())


def test_generate_ecdsa_with_unsupported_curve():
    with pytest.raises(DIDError, match="unsupported ECDSA curve"):
        did.generate_ecdsa_with_curve(Code.ED25519)


def test_generate_rsa():
    priv, d = did.generate_rsa()
    assert d.code == Code.RSA
    assert priv.key_size == 3072
    assert did.parse(str(d)) == d