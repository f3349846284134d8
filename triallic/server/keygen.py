"""
Key generator that persists the authority's Ed25519 keys.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from triallic.common.config import Config

from .key_authority import PRIVATE_KEY_FILE, PUBLIC_KEY_FILE, KeyAuthority

logger = logging.getLogger(__name__)


class KeyGenerator:
    """Key generator for creating server Ed25519 keys."""

    def __init__(self, keys_dir: Path | None = None):
        config = Config()
        self.keys_dir = keys_dir or config.SERVER_KEYS_DIR

    def generate_keys(self) -> KeyAuthority:
        """Generate and save server public/private keys."""
        logger.info("Generating Ed25519 server keys...")
        authority = KeyAuthority.generate()

        private_path = self.keys_dir / PRIVATE_KEY_FILE
        public_path = self.keys_dir / PUBLIC_KEY_FILE
        self.keys_dir.mkdir(parents=True, exist_ok=True)

        fd = os.open(private_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as f:
            if os.name == "posix":
                # O_CREAT mode does not apply to a file that already exists
                os.fchmod(f.fileno(), 0o600)
            f.write(authority.private_pem())

        with public_path.open("wb") as f:
            f.write(authority.public_pem())

        logger.info("Keys generated and saved:")
        logger.info("  Private: %s", private_path)
        logger.info("  Public: %s", public_path)
        logger.info("  Public key hex: %s", authority.public_key_hex())
        logger.info("Keep the private key secure!")
        return authority
