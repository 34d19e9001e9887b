"""Fixed personas with Ed25519 keys, for use in tests."""

from __future__ import annotations

import base64
import enum
import functools

from cryptography.hazmat.primitives.asymmetric import ed25519
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from ucankit import did as _did

# Serialized key messages: field 1 is the key type (1 = Ed25519), field 2 the key data.
_ED25519_PRIVATE_PREFIX = b"\x08\x01\x12\x40"
_ED25519_PUBLIC_PREFIX = b"\x08\x01\x12\x20"


class Persona(enum.IntEnum):
    """A generic participant for cryptographic testing."""

    ALICE = 0
    BOB = 1
    CAROL = 2
    DAN = 3
    ERIN = 4
    FRANK = 5

    def did(self) -> _did.DID:
        """The DID of the persona's Ed25519 public key."""
        return _did.from_priv_key(self.priv_key())

    def display_name(self) -> str:
        """The persona's user name."""
        return self.name.capitalize()

    def priv_key(self) -> ed25519.Ed25519PrivateKey:
        """The persona's Ed25519 private key."""
        return _load_priv_key(self)

    def priv_key_config(self) -> str:
        """The persona's serialized, base64 encoded private key."""
        return _PRIV_KEY_CONFIGS[self]

    def pub_key(self) -> ed25519.Ed25519PublicKey:
        """The persona's Ed25519 public key."""
        return self.priv_key().public_key()

    def pub_key_config(self) -> str:
        """The persona's serialized, base64 encoded public key."""
        raw = self.pub_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
        return base64.b64encode(_ED25519_PUBLIC_PREFIX + raw).decode("ascii")


_PRIV_KEY_CONFIGS = {
    Persona.ALICE: "CAESQHdNJLBBiuc1AdwPHBkubB2KS1p0cv2JEF7m8tfwtrcm5ajaYPm+XmVCmtcHOF2lGDlmaiDA7emfwD3IrcyES0M=",
    Persona.BOB: "CAESQHBz+AIop1g+9iBDj+ufUc/zm9/ry7c6kDFO8Wl/D0+H63V9hC6s9l4npf3pYEFCjBtlR0AMNWMoFQKSlYNKo20=",
    Persona.CAROL: "CAESQPrCgkcHnYFXDT9AlAydhPECBEivEuuVx9dJxLjVvDTmJIVNivfzg6H4mAiPfYS+5ryVVUZTHZBzvMuvvvG/Ks0=",
    Persona.DAN: "CAESQCgNhzofKhC+7hW6x+fNd7iMPtQHeEmKRhhlduf/I7/TeOEFYAEflbJ0sAhMeDJ/HQXaAvsWgHEbJ3ZLhP8q2B0=",
    Persona.ERIN: "CAESQKhCJo5UBpQcthko8DKMFsbdZ+qqQ5oc01CtLCqrE90dF2GfRlrMmot3WPHiHGCmEYi5ZMEHuiSI095e/6O4Bpw=",
    Persona.FRANK: "CAESQDlXPKsy3jHh7OWTWQqyZF95Ueac5DKo7xD0NOBE5F2BNr1ZVxRmJ2dBELbOt8KP9sOACcO9qlCB7uMA1UQc7sk=",
}


@functools.lru_cache(maxsize=None)
def _load_priv_key(persona: Persona) -> ed25519.Ed25519PrivateKey:
    blob = base64.b64decode(_PRIV_KEY_CONFIGS[persona])
    if not blob.startswith(_ED25519_PRIVATE_PREFIX) or len(blob) != 4 + 64:
        raise ValueError(f"malformed Ed25519 private key for {persona.display_name()}")
    return ed25519.Ed25519PrivateKey.from_private_bytes(blob[4:36])


def personas() -> list[Persona]:
    """All personas, in alphabetical order."""
    return list(Persona)


def did_to_name(d: _did.DID) -> str:
    """The name of the persona owning ``d``, or an empty string."""
    return {p.did(): p.display_name() for p in Persona}.get(d, "")