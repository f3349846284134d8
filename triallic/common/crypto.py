"""Common cryptographic utilities.
"""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

PUBLIC_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64


class CryptoUtils:
    """Utility class for Ed25519 operations."""

    @staticmethod
    def public_key_bytes(public_key: Ed25519PublicKey) -> bytes:
        """Return the 32-byte raw encoding of a public key."""
        return public_key.public_bytes(
            serialization.Encoding.Raw, serialization.PublicFormat.Raw
        )

    @staticmethod
    def load_public_key(key: bytes | str | Ed25519PublicKey) -> Ed25519PublicKey:
        """Load a trust anchor given as raw bytes, hex text or a key object."""
        if isinstance(key, Ed25519PublicKey):
            return key
        if isinstance(key, str):
            try:
                key = bytes.fromhex(key.strip())
            except ValueError as err:
                msg = "Public key must be hex encoded"
                raise ValueError(msg) from err
        if len(key) != PUBLIC_KEY_LENGTH:
            msg = f"Public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(key)}"
            raise ValueError(msg)
        return Ed25519PublicKey.from_public_bytes(key)

    @staticmethod
    def signature_from_hex(signature_hex: str) -> bytes:
        """Decode a hex signature, stripping surrounding whitespace."""
        return bytes.fromhex(signature_hex.strip())

    @staticmethod
    def sign(private_key: Ed25519PrivateKey, data: bytes) -> bytes:
        return private_key.sign(data)

    @staticmethod
    def verify(public_key: Ed25519PublicKey, data: bytes, signature: bytes) -> bool:
        """Check a detached signature; never raises on a bad signature."""
        if len(signature) != SIGNATURE_LENGTH:
            return False
        try:
            public_key.verify(signature, data)
        except InvalidSignature:
            return False
        return True
