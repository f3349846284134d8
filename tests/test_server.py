from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from triallic.common.codec import TokenCodec
from triallic.common.crypto import CryptoUtils
from triallic.server.core import LicenseServer
from triallic.server.key_authority import KeyAuthority


@pytest.fixture
def server(authority, clock) -> LicenseServer:
    """Create LicenseServer instance with an in-memory ledger."""
    return LicenseServer(authority=authority, clock=clock)


@pytest.fixture
def client(server: LicenseServer) -> TestClient:
    return TestClient(server.app)


def test_server_routes(server: LicenseServer) -> None:
    routes = [route.path for route in server.app.routes]  # type: ignore[attr-defined]
    for path in (
        "/health",
        "/api/trial/issue",
        "/api/trial/check",
        "/api/trial/revoke",
        "/api/public-key",
    ):
        assert path in routes


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200  # noqa: PLR2004
    assert response.json()["status"] == "ok"


def test_issue_endpoint(client: TestClient, authority: KeyAuthority, clock) -> None:
    response = client.post("/api/trial/issue", json={"user_id": "alice"})

    assert response.status_code == 200  # noqa: PLR2004
    data = response.json()
    token = TokenCodec.decode(data["token"].encode())
    assert token.user_id == "alice"
    assert token.issued_at == clock()
    assert token.expires_at == clock() + 14 * 86400
    assert data["message"] == "Trial issued for alice (14 days)"
    assert CryptoUtils.verify(
        authority.verifying_key(),
        data["token"].encode(),
        bytes.fromhex(data["signature"]),
    )


def test_issue_endpoint_rejects_empty_user(client: TestClient) -> None:
    response = client.post("/api/trial/issue", json={"user_id": ""})
    assert response.status_code == 400  # noqa: PLR2004


def test_issue_endpoint_requires_user_id(client: TestClient) -> None:
    response = client.post("/api/trial/issue", json={})
    assert response.status_code == 422  # noqa: PLR2004


def test_issue_endpoint_rejects_user_id_that_is_not_valid_unicode(
    client: TestClient,
) -> None:
    response = client.post(
        "/api/trial/issue",
        content=b'{"user_id": "\\ud800"}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400  # noqa: PLR2004


def test_check_unknown_user(client: TestClient) -> None:
    response = client.get("/api/trial/check", params={"user_id": "bob"})

    assert response.status_code == 200  # noqa: PLR2004
    assert response.json() == {"revoked": False, "message": "User bob is active"}


def test_revoke_then_check(client: TestClient) -> None:
    response = client.post("/api/trial/revoke", json={"user_id": "bob"})
    assert response.status_code == 200  # noqa: PLR2004
    assert response.json() == {"ok": True, "message": "Trial revoked for bob"}

    # revoking again is not an error
    response = client.post("/api/trial/revoke", json={"user_id": "bob"})
    assert response.status_code == 200  # noqa: PLR2004

    response = client.get("/api/trial/check", params={"user_id": "bob"})
    assert response.json()["revoked"] is True
    assert (
        client.get("/api/trial/check", params={"user_id": "carol"}).json()["revoked"]
        is False
    )


def test_check_requires_user_id(client: TestClient) -> None:
    assert client.get("/api/trial/check").status_code == 422  # noqa: PLR2004


def test_revoke_with_admin_password(authority, clock) -> None:
    server = LicenseServer(authority=authority, clock=clock, admin_password="s3cret")
    client = TestClient(server.app)

    response = client.post("/api/trial/revoke", json={"user_id": "bob"})
    assert response.status_code == 403  # noqa: PLR2004
    response = client.post(
        "/api/trial/revoke", json={"user_id": "bob", "password": "wrong"}
    )
    assert response.status_code == 403  # noqa: PLR2004
    assert not server.ledger.is_revoked("bob")

    response = client.post(
        "/api/trial/revoke", json={"user_id": "bob", "password": "s3cret"}
    )
    assert response.status_code == 200  # noqa: PLR2004
    assert server.ledger.is_revoked("bob")


def test_public_key_endpoint(client: TestClient, authority: KeyAuthority) -> None:
    response = client.get("/api/public-key")

    assert response.status_code == 200  # noqa: PLR2004
    data = response.json()
    assert data["public_key"] == authority.public_key_hex()
    assert data["format"] == "ed25519"
    assert "private" not in response.text.lower()


def test_server_loads_keys_from_dir(temp_keys_dir: Path) -> None:
    server = LicenseServer(server_keys_dir=temp_keys_dir)
    assert server.authority.public_key() == KeyAuthority.load(temp_keys_dir).public_key()


def test_server_without_keys_uses_ephemeral_key(tmp_path: Path) -> None:
    server = LicenseServer(server_keys_dir=tmp_path / "none")
    assert len(server.authority.public_key()) == 32  # noqa: PLR2004


def test_server_persists_revocations(authority, tmp_path: Path) -> None:
    path = tmp_path / "revoked.json"
    server = LicenseServer(authority=authority, revoked_users_file_path=path)
    TestClient(server.app).post("/api/trial/revoke", json={"user_id": "bob"})

    restarted = LicenseServer(authority=authority, revoked_users_file_path=path)
    response = TestClient(restarted.app).get(
        "/api/trial/check", params={"user_id": "bob"}
    )
    assert response.json()["revoked"] is True
