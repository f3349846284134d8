import json
import threading
from pathlib import Path

import pytest

from triallic.server.persistence import DataPersistence
from triallic.server.revocation_ledger import RevocationLedger


def test_unknown_user_is_not_revoked(ledger) -> None:
    assert not ledger.is_revoked("alice")
    assert ledger.revoked_users() == {}


def test_revoke_marks_user(ledger, clock) -> None:
    ledger.revoke("alice")

    assert ledger.is_revoked("alice")
    assert not ledger.is_revoked("bob")
    assert ledger.revoked_at("alice") == clock()


def test_revoke_is_idempotent(ledger, clock) -> None:
    ledger.revoke("alice")
    once = ledger.revoked_users()

    clock.advance(60)
    ledger.revoke("alice")

    assert ledger.revoked_users() == once


def test_concurrent_revokes_and_reads_lose_nothing() -> None:
    ledger = RevocationLedger()
    users_per_thread = 200
    errors: list[str] = []

    def worker(n: int) -> None:
        for i in range(users_per_thread):
            user_id = f"user-{n}-{i}"
            ledger.revoke(user_id)
            if not ledger.is_revoked(user_id):
                errors.append(user_id)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(ledger.revoked_users()) == 8 * users_per_thread


def test_revocations_persist_to_file(tmp_path: Path, clock) -> None:
    path = tmp_path / "data" / "revoked.json"
    ledger = RevocationLedger(path, clock)

    ledger.revoke("alice")

    assert json.loads(path.read_text()) == {"alice": clock()}
    reloaded = RevocationLedger(path)
    assert reloaded.is_revoked("alice")
    assert not reloaded.is_revoked("bob")


def test_missing_file_starts_empty(tmp_path: Path) -> None:
    ledger = RevocationLedger(tmp_path / "absent.json")

    assert ledger.revoked_users() == {}
    assert not (tmp_path / "absent.json").exists()


def test_failed_save_leaves_ledger_unchanged(
    tmp_path: Path, clock, monkeypatch
) -> None:
    path = tmp_path / "revoked.json"
    ledger = RevocationLedger(path, clock)
    ledger.revoke("alice")

    def disk_full(file_path: Path, revoked_users: dict[str, int]) -> None:
        raise OSError("No space left on device")

    monkeypatch.setattr(DataPersistence, "save_revoked_users", disk_full)

    with pytest.raises(OSError):
        ledger.revoke("bob")

    assert not ledger.is_revoked("bob")
    assert ledger.revoked_users() == {"alice": clock()}
    assert json.loads(path.read_text()) == {"alice": clock()}
