"""
Command-line interface for triallic.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click
import requests

from triallic.client.client import LicenseClient
from triallic.client.license_fetcher import LicenseFetcher
from triallic.client.license_store import LicenseStore
from triallic.common.config import SECONDS_PER_DAY, Config
from triallic.common.exceptions import ValidationError
from triallic.common.models import OfflinePolicy, RevokeRequest
from triallic.server import start_server
from triallic.server.issuer import Issuer
from triallic.server.key_authority import KeyAuthority
from triallic.server.keygen import KeyGenerator


@click.group()
def cli() -> None:
    """Trial license authority and verifier"""


@cli.command()
@click.option(
    "--keys-dir",
    default=None,
    help="Directory to save keys (default: ./triallic/server)",
)
def keygen(keys_dir: str | None) -> None:
    """Generate server Ed25519 keys"""
    if keys_dir:
        os.environ["TRIALLIC_KEYS_DIR"] = keys_dir

    authority = KeyGenerator().generate_keys()
    click.echo("Keys generated and saved")
    click.echo(f"Public key: {authority.public_key_hex()}")


def _load_authority(keys_dir: str | None) -> KeyAuthority:
    if keys_dir:
        os.environ["TRIALLIC_KEYS_DIR"] = keys_dir
    try:
        return KeyAuthority.load(Config().SERVER_KEYS_DIR)
    except ValueError as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@click.option("--keys-dir", default=None, help="Directory to load keys from")
def pubkey(keys_dir: str | None) -> None:
    """Print the public key to embed in the trial binary"""
    click.echo(_load_authority(keys_dir).public_key_hex())


@cli.command()
@click.argument("user_id")
@click.option("--keys-dir", default=None, help="Directory to load keys from")
@click.option("--ttl-days", default=14, type=int, show_default=True)
@click.option(
    "--out-dir",
    default=".",
    type=click.Path(file_okay=False),
    help="Where to write trial.token and trial.signature",
)
def issue(user_id: str, keys_dir: str | None, ttl_days: int, out_dir: str) -> None:
    """Sign a trial license locally, without a running server"""
    authority = _load_authority(keys_dir)
    try:
        signed = Issuer(authority).issue(user_id, ttl_days * SECONDS_PER_DAY)
    except ValidationError as e:
        raise click.ClickException(str(e)) from e

    store = LicenseStore(Path(out_dir))
    store.save_license(signed)
    click.echo(f"Trial issued for {user_id} ({ttl_days} days)")
    click.echo(f"  {store.token_path}")
    click.echo(f"  {store.signature_path}")


@cli.command()
@click.option(
    "--keys-dir",
    default=None,
    help="Directory to load keys from (default: ./triallic/server)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind server to (default: from TRIALLIC_SERVER_HOST env or 127.0.0.1)",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Port to bind server to (default: from TRIALLIC_SERVER_PORT env or 8081)",
)
@click.option(
    "--revoked-users-file",
    default=None,
    help="JSON file to persist revocations in (default: keep them in memory)",
)
def serve(
    keys_dir: str | None,
    host: str | None,
    port: int | None,
    revoked_users_file: str | None,
) -> None:
    """Start the license server"""
    # Set environment variables before building the config
    if keys_dir:
        os.environ["TRIALLIC_KEYS_DIR"] = keys_dir
    if host:
        os.environ["TRIALLIC_SERVER_HOST"] = host
    if port:
        os.environ["TRIALLIC_SERVER_PORT"] = str(port)
    if revoked_users_file:
        os.environ["TRIALLIC_REVOKED_USERS_FILE"] = revoked_users_file

    start_server(Config())


@cli.command("get-license")
@click.argument("user_id", default="demo-user")
@click.option("--server-url", default=None, help="License server URL")
@click.option(
    "--out-dir",
    default=".",
    type=click.Path(file_okay=False),
    help="Where to write trial.token and trial.signature",
)
def get_license(user_id: str, server_url: str | None, out_dir: str) -> None:
    """Request a trial license from the server"""
    fetcher = LicenseFetcher(LicenseStore(Path(out_dir)), server_url)
    try:
        resp = fetcher.fetch(user_id)
    except requests.RequestException as e:
        msg = f"Could not obtain a license: {e}"
        raise click.ClickException(msg) from e
    click.echo(resp.message)
    click.echo(f"  {fetcher.store.token_path}")
    click.echo(f"  {fetcher.store.signature_path}")


@cli.command()
@click.argument("user_id")
@click.option("--server-url", default=None, help="License server URL")
@click.option(
    "--password",
    envvar="TRIALLIC_ADMIN_PASSWORD",
    default=None,
    help="Admin password (default: from TRIALLIC_ADMIN_PASSWORD env)",
)
def revoke(user_id: str, server_url: str | None, password: str | None) -> None:
    """Revoke a user's trial on the server"""
    url = (server_url or Config().SERVER_URL).rstrip("/")
    req = RevokeRequest(user_id=user_id, password=password)
    try:
        r = requests.post(f"{url}/api/trial/revoke", json=req.model_dump(), timeout=10)
        r.raise_for_status()
    except requests.RequestException as e:
        msg = f"Revoke failed: {e}"
        raise click.ClickException(msg) from e
    click.echo(r.json().get("message", f"Trial revoked for {user_id}"))


@cli.command()
@click.option(
    "--public-key",
    envvar="TRIALLIC_PUBLIC_KEY",
    required=True,
    help="Trusted public key (hex); default from TRIALLIC_PUBLIC_KEY env",
)
@click.option(
    "--license-dir",
    default=".",
    type=click.Path(file_okay=False),
    help="Directory holding trial.token and trial.signature",
)
@click.option("--server-url", default=None, help="License server URL")
@click.option("--timeout", default=None, type=float, help="Revocation check timeout")
@click.option(
    "--offline-policy",
    type=click.Choice([p.value for p in OfflinePolicy]),
    default=None,
    help="Behaviour when the server is unreachable and nothing is cached",
)
@click.option(
    "--require-confirmed",
    is_flag=True,
    help="Fail unless the server confirmed the license online",
)
def verify(
    public_key: str,
    license_dir: str,
    server_url: str | None,
    timeout: float | None,
    offline_policy: str | None,
    require_confirmed: bool,  # noqa: FBT001
) -> None:
    """Verify the stored trial license"""
    try:
        client = LicenseClient(
            public_key,
            server_url=server_url,
            license_dir=license_dir,
            revocation_timeout=timeout,
            offline_policy=offline_policy,
        )
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    try:
        result = client.verify()
    except FileNotFoundError as e:
        raise click.ClickException(str(e)) from e
    finally:
        client.close()

    if not result.valid:
        assert result.reason is not None
        click.echo(f"LICENSE INVALID ({result.reason.value}): {result.message}", err=True)
        sys.exit(1)

    click.echo("LICENSE VALID")
    click.echo(f"  User: {result.user_id}")
    click.echo(f"  Days remaining: {result.days_remaining}")
    if result.confirmed:
        click.echo("  Verified online")
    else:
        assert result.source is not None
        click.echo(f"  UNCONFIRMED: license server unreachable ({result.source.value})")
        if require_confirmed:
            sys.exit(1)


if __name__ == "__main__":
    cli()
