import os

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from triallic.server.key_authority import KeyAuthority
from triallic.server.keygen import KeyGenerator


def test_key_generator_generate_keys(tmp_path):
    """Test key generation with temporary directory."""
    keygen = KeyGenerator()
    keygen.keys_dir = tmp_path

    authority = keygen.generate_keys()

    private_path = tmp_path / "server_private.key"
    public_path = tmp_path / "server_public.key"

    assert private_path.exists()
    assert public_path.exists()

    with open(private_path, "rb") as f:
        private_key = serialization.load_pem_private_key(f.read(), password=None)
        assert isinstance(private_key, Ed25519PrivateKey)

    with open(public_path, "rb") as f:
        public_key = serialization.load_pem_public_key(f.read())
        assert isinstance(public_key, Ed25519PublicKey)

    assert KeyAuthority.load(tmp_path).public_key() == authority.public_key()


@pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
def test_private_key_is_owner_only(tmp_path):
    KeyGenerator(tmp_path).generate_keys()

    assert (tmp_path / "server_private.key").stat().st_mode & 0o777 == 0o600


@pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
def test_private_key_is_never_readable_by_others(tmp_path, monkeypatch):
    private_path = tmp_path / "server_private.key"
    private_path.write_bytes(b"old key")
    private_path.chmod(0o644)
    modes_at_write = []
    original_private_pem = KeyAuthority.private_pem

    def private_pem(self):
        modes_at_write.append(private_path.stat().st_mode & 0o777)
        return original_private_pem(self)

    monkeypatch.setattr(KeyAuthority, "private_pem", private_pem)
    old_umask = os.umask(0o022)
    try:
        KeyGenerator(tmp_path).generate_keys()
    finally:
        os.umask(old_umask)

    assert modes_at_write == [0o600]
    assert private_path.stat().st_mode & 0o777 == 0o600


def test_key_generator_directory_creation(tmp_path):
    """Test that directory is created if it doesn't exist."""
    keys_dir = tmp_path / "nested" / "keys"
    KeyGenerator(keys_dir).generate_keys()

    assert (keys_dir / "server_private.key").exists()
    assert (keys_dir / "server_public.key").exists()


def test_public_key_is_32_bytes_and_deterministic():
    authority = KeyAuthority.generate()

    assert len(authority.public_key()) == 32  # noqa: PLR2004
    assert authority.public_key() == authority.public_key()
    assert len(authority.public_key_hex()) == 64  # noqa: PLR2004


def test_fresh_authorities_differ():
    assert KeyAuthority.generate().public_key() != KeyAuthority.generate().public_key()


def test_repr_does_not_expose_private_key():
    authority = KeyAuthority.generate()
    private_raw = authority._private_key.private_bytes(  # noqa: SLF001
        serialization.Encoding.Raw,
        serialization.PrivateFormat.Raw,
        serialization.NoEncryption(),
    )

    assert private_raw.hex() not in repr(authority)
    assert authority.public_key_hex() in repr(authority)


def test_load_missing_keys(tmp_path):
    with pytest.raises(ValueError, match="triallic keygen"):
        KeyAuthority.load(tmp_path)


def test_load_rejects_mismatched_public_key(tmp_path):
    KeyGenerator(tmp_path).generate_keys()
    (tmp_path / "server_public.key").write_bytes(KeyAuthority.generate().public_pem())

    with pytest.raises(ValueError, match="does not match"):
        KeyAuthority.load(tmp_path)


def test_load_or_generate(tmp_path, temp_keys_dir):
    loaded = KeyAuthority.load_or_generate(temp_keys_dir)
    assert loaded.public_key() == KeyAuthority.load(temp_keys_dir).public_key()

    ephemeral = KeyAuthority.load_or_generate(tmp_path / "empty")
    assert ephemeral.public_key() != loaded.public_key()
    assert not (tmp_path / "empty").exists()
