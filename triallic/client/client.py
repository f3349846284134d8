"""
License client used by consuming applications.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from triallic.common.clock import Clock, current_timestamp
from triallic.common.config import Config
from triallic.common.logging_utils import setup_logger

from .license_store import LicenseStore
from .offline_cache import OfflineCache
from .revocation_client import HttpRevocationQuery
from .verifier import Verifier

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

    from triallic.common.interfaces import IRevocationQuery
    from triallic.common.models import OfflinePolicy, VerificationResult


class LicenseClient:
    """Verifies the locally stored trial license.

    The trust anchor is passed in by the application (embedded at build time
    or loaded from a pinned location); it is never read from the license
    directory.
    """

    def __init__(
        self,
        public_key: bytes | str | Ed25519PublicKey,
        server_url: str | None = None,
        license_dir: Path | str | None = None,
        cache_file_path: Path | None = None,
        revocation_query: IRevocationQuery | None = None,
        revocation_timeout: float | None = None,
        max_staleness: int | None = None,
        offline_policy: OfflinePolicy | str | None = None,
        log_level: int | None = None,
        clock: Clock = current_timestamp,
    ):
        self.config = Config()
        self.logger = logging.getLogger(__name__)
        setup_logger(
            self.logger, log_level if log_level is not None else self.config.LOG_LEVEL
        )

        self.server_url = server_url or self.config.SERVER_URL
        self.store = LicenseStore(
            Path(license_dir) if license_dir is not None else None, self.config
        )
        self.cache_file_path = cache_file_path or (
            self.store.license_dir / self.config.OFFLINE_CACHE_FILE_NAME
        )
        timeout = (
            revocation_timeout
            if revocation_timeout is not None
            else self.config.REVOCATION_TIMEOUT
        )
        self.revocation_query = revocation_query or HttpRevocationQuery(
            self.server_url, timeout
        )
        self.offline_cache = OfflineCache(self.cache_file_path)
        self.verifier = Verifier(
            public_key,
            revocation_query=self.revocation_query,
            offline_cache=self.offline_cache,
            clock=clock,
            max_staleness=max_staleness,
            offline_policy=offline_policy,
            query_timeout=timeout,
        )

    def verify(self) -> VerificationResult:
        """Verify the stored token and signature."""
        token_bytes, signature_hex = self.store.load()
        return self.verifier.verify_blobs(token_bytes, signature_hex)

    def is_license_active(self) -> bool:
        """True when the stored license verifies, confirmed or not."""
        try:
            return self.verify().valid
        except FileNotFoundError:
            self.logger.warning("No license files in %s", self.store.license_dir)
            return False

    def close(self) -> None:
        self.verifier.close()
