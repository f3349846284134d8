"""
OOP-based license server using FastAPI.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI

from triallic.common.clock import Clock, current_timestamp
from triallic.common.config import Config
from triallic.common.logging_utils import setup_logger

from .issuer import Issuer
from .key_authority import KeyAuthority
from .revocation_ledger import RevocationLedger
from .routes import LicenseRoutes
from .services import LicenseService

if TYPE_CHECKING:
    from pathlib import Path


class LicenseServer:
    """Main license server class wiring the authority, issuer and ledger."""

    def __init__(
        self,
        config: Config | None = None,
        authority: KeyAuthority | None = None,
        ledger: RevocationLedger | None = None,
        log_level: int | None = None,
        trial_ttl: int | None = None,
        admin_password: str | None = None,
        server_host: str | None = None,
        server_port: int | None = None,
        server_keys_dir: Path | None = None,
        revoked_users_file_path: Path | None = None,
        clock: Clock = current_timestamp,
    ):
        self.config = config or Config()
        self.logger = logging.getLogger(__name__)
        setup_logger(
            self.logger, log_level if log_level is not None else self.config.LOG_LEVEL
        )

        self.trial_ttl = trial_ttl or self.config.TRIAL_TTL
        self.admin_password = admin_password or self.config.ADMIN_PASSWORD
        self.server_host = server_host or self.config.SERVER_HOST
        self.server_port = server_port or self.config.SERVER_PORT
        self.server_keys_dir = server_keys_dir or self.config.SERVER_KEYS_DIR
        self.revoked_users_file_path = (
            revoked_users_file_path or self.config.REVOKED_USERS_FILE_PATH
        )

        self.authority = authority or KeyAuthority.load_or_generate(
            self.server_keys_dir
        )
        self.ledger = ledger or RevocationLedger(self.revoked_users_file_path, clock)
        self.issuer = Issuer(self.authority, clock, self.trial_ttl)
        self.service = LicenseService(
            authority=self.authority,
            issuer=self.issuer,
            ledger=self.ledger,
            admin_password=self.admin_password,
            logger=self.logger,
        )

        self.app = FastAPI(title="triallic license server")
        LicenseRoutes(self.service).setup_routes(self.app)

        if self.admin_password is None:
            self.logger.warning(
                "TRIALLIC_ADMIN_PASSWORD is not set, /api/trial/revoke is open"
            )
        self.logger.info(
            "License server configured for http://%s:%s",
            self.server_host,
            self.server_port,
        )
