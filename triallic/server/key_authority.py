"""
Holder of the authority's Ed25519 signing key.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from triallic.common.crypto import CryptoUtils

if TYPE_CHECKING:
    from pathlib import Path

    from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

logger = logging.getLogger(__name__)

PRIVATE_KEY_FILE = "server_private.key"
PUBLIC_KEY_FILE = "server_public.key"


class KeyAuthority:
    """Signs on behalf of the authority; the private key never leaves this object."""

    def __init__(self, private_key: Ed25519PrivateKey):
        self._private_key = private_key
        self._public_key: Ed25519PublicKey = private_key.public_key()

    def __repr__(self) -> str:
        return f"KeyAuthority(public_key={self.public_key_hex()})"

    @classmethod
    def generate(cls) -> KeyAuthority:
        """Create an authority with a fresh random keypair."""
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def load(cls, keys_dir: Path) -> KeyAuthority:
        """Load the keypair written by KeyGenerator from keys_dir."""
        private_path = keys_dir / PRIVATE_KEY_FILE
        try:
            with private_path.open("rb") as f:
                private_key = serialization.load_pem_private_key(f.read(), None)
        except FileNotFoundError as err:
            msg = (
                f"Server keys not found at {private_path}. "
                "Run 'triallic keygen' to generate them."
            )
            raise ValueError(msg) from err
        if not isinstance(private_key, Ed25519PrivateKey):
            msg = f"{private_path} does not hold an Ed25519 private key"
            raise ValueError(msg)

        authority = cls(private_key)
        public_path = keys_dir / PUBLIC_KEY_FILE
        if public_path.exists():
            with public_path.open("rb") as f:
                stored_pub = cast(
                    "Ed25519PublicKey", serialization.load_pem_public_key(f.read())
                )
            if CryptoUtils.public_key_bytes(stored_pub) != authority.public_key():
                msg = f"{public_path} does not match {private_path}"
                raise ValueError(msg)
        return authority

    @classmethod
    def load_or_generate(cls, keys_dir: Path) -> KeyAuthority:
        """Load keys from keys_dir, or fall back to an ephemeral keypair."""
        if (keys_dir / PRIVATE_KEY_FILE).exists():
            authority = cls.load(keys_dir)
            logger.info("Loaded authority keys from %s", keys_dir)
        else:
            authority = cls.generate()
            logger.warning(
                "No keys in %s, using an ephemeral keypair. "
                "Licenses issued now will not verify after a restart.",
                keys_dir,
            )
        logger.info(
            "Public key (embed this in the trial binary): %s",
            authority.public_key_hex(),
        )
        return authority

    def public_key(self) -> bytes:
        """Return the 32-byte raw verification key."""
        return CryptoUtils.public_key_bytes(self._public_key)

    def public_key_hex(self) -> str:
        return self.public_key().hex()

    def verifying_key(self) -> Ed25519PublicKey:
        return self._public_key

    def sign(self, data: bytes) -> bytes:
        return CryptoUtils.sign(self._private_key, data)

    def private_pem(self) -> bytes:
        """PKCS8 PEM of the private key, for KeyGenerator to persist."""
        return self._private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def public_pem(self) -> bytes:
        return self._public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
