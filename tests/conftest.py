from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterator

import pytest

from triallic.client.verifier import Verifier
from triallic.server.issuer import Issuer
from triallic.server.key_authority import KeyAuthority
from triallic.server.keygen import KeyGenerator
from triallic.server.revocation_ledger import RevocationLedger

T0 = 1_700_000_000


class FakeClock:
    """Controllable time source."""

    def __init__(self, now: int = T0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep TRIALLIC_* settings from the outer environment out of the tests."""
    for name in (
        "TRIALLIC_ADMIN_PASSWORD",
        "TRIALLIC_KEYS_DIR",
        "TRIALLIC_SERVER_HOST",
        "TRIALLIC_SERVER_PORT",
        "TRIALLIC_SERVER_URL",
        "TRIALLIC_REVOKED_USERS_FILE",
        "TRIALLIC_OFFLINE_POLICY",
        "TRIALLIC_OFFLINE_GRACE_PERIOD",
        "TRIALLIC_REVOCATION_TIMEOUT",
        "TRIALLIC_LICENSE_DIR",
        "TRIALLIC_PUBLIC_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def authority() -> KeyAuthority:
    return KeyAuthority.generate()


@pytest.fixture
def issuer(authority: KeyAuthority, clock: FakeClock) -> Issuer:
    return Issuer(authority, clock)


@pytest.fixture
def ledger(clock: FakeClock) -> RevocationLedger:
    return RevocationLedger(clock=clock)


@pytest.fixture
def make_verifier(
    authority: KeyAuthority, clock: FakeClock
) -> Iterator[Callable[..., Verifier]]:
    """Build verifiers trusting the test authority and using the fake clock."""
    created: list[Verifier] = []

    def factory(**kwargs: Any) -> Verifier:
        kwargs.setdefault("clock", clock)
        verifier = Verifier(authority.public_key(), **kwargs)
        created.append(verifier)
        return verifier

    yield factory
    for verifier in created:
        verifier.close()


@pytest.fixture
def temp_keys_dir(tmp_path: Path) -> Path:
    """Create temporary keys directory with test keys."""
    keys_dir = tmp_path / "keys"
    KeyGenerator(keys_dir).generate_keys()
    return keys_dir
