"""
License verification.

Checks run in a fixed order and stop at the first failure:

1. signature over the exact token bytes (nothing in the token is trusted before)
2. token structure, when verifying raw stored bytes
3. expiry, so dead tokens never cost a network call
4. revocation, online first, then the offline cache, then the offline policy
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import TYPE_CHECKING

from triallic.common.clock import Clock, current_timestamp
from triallic.common.codec import TokenCodec
from triallic.common.config import SECONDS_PER_DAY, Config
from triallic.common.crypto import CryptoUtils
from triallic.common.exceptions import (
    Expired,
    InvalidReason,
    SignatureMismatch,
    Unreachable,
    ValidationError,
)
from triallic.common.models import (
    LicenseToken,
    OfflinePolicy,
    RevocationSource,
    SignedLicense,
    VerificationResult,
)

from .offline_cache import OfflineCache

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

    from triallic.common.interfaces import IOfflineCache, IRevocationQuery


class Verifier:
    """Verifies signed licenses against a pinned trust anchor."""

    def __init__(
        self,
        trusted_public_key: bytes | str | Ed25519PublicKey,
        revocation_query: IRevocationQuery | None = None,
        offline_cache: IOfflineCache | None = None,
        clock: Clock = current_timestamp,
        max_staleness: int | None = None,
        offline_policy: OfflinePolicy | str | None = None,
        query_timeout: float | None = None,
    ):
        config = Config()
        self.trusted_public_key = CryptoUtils.load_public_key(trusted_public_key)
        self.revocation_query = revocation_query
        self.offline_cache = offline_cache if offline_cache is not None else OfflineCache()
        self.clock = clock
        self.max_staleness = (
            max_staleness if max_staleness is not None else config.OFFLINE_GRACE_PERIOD
        )
        self.offline_policy = OfflinePolicy(offline_policy or config.OFFLINE_POLICY)
        self.query_timeout = query_timeout
        self.logger = logging.getLogger(__name__)
        self._executor: ThreadPoolExecutor | None = None

    def verify(self, signed_license: SignedLicense) -> VerificationResult:
        """Verify a license whose token is already a value."""
        token_bytes = TokenCodec.encode(signed_license.token)
        return self._verify(token_bytes, signed_license.signature, signed_license.token)

    def verify_blobs(self, token_bytes: bytes, signature: bytes | str) -> VerificationResult:
        """Verify stored blobs; the signature may be raw bytes or hex text."""
        if isinstance(signature, str):
            try:
                signature = CryptoUtils.signature_from_hex(signature)
            except ValueError:
                return self._reject(SignatureMismatch("Signature is not valid hex"))
        return self._verify(token_bytes, signature, None)

    def close(self) -> None:
        """Release the worker thread used for timed revocation queries."""
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None

    def _verify(
        self, token_bytes: bytes, signature: bytes, token: LicenseToken | None
    ) -> VerificationResult:
        try:
            if not CryptoUtils.verify(self.trusted_public_key, token_bytes, signature):
                msg = (
                    "Signature verification failed, token was not issued by "
                    "the trusted license server or was modified"
                )
                raise SignatureMismatch(msg)
            if token is None:
                token = TokenCodec.decode(token_bytes)

            now = self.clock()
            if now >= token.expires_at:
                days_ago = (now - token.expires_at) // SECONDS_PER_DAY
                msg = f"Trial for {token.user_id} expired {days_ago} days ago"
                raise Expired(msg)

            revoked, source = self._revocation_status(token.user_id, now)
        except ValidationError as e:
            return self._reject(e, token)

        if revoked:
            msg = f"Trial for {token.user_id} has been revoked"
            self.logger.info(msg)
            return VerificationResult.reject(
                InvalidReason.REVOKED, msg, user_id=token.user_id, source=source
            )

        days_remaining = (token.expires_at - now) // SECONDS_PER_DAY
        result = VerificationResult.accept(token.user_id, days_remaining, source)
        self.logger.info(
            "License valid for %s, %s days remaining (%s)",
            token.user_id,
            days_remaining,
            source.value,
        )
        return result

    def _reject(
        self, error: ValidationError, token: LicenseToken | None = None
    ) -> VerificationResult:
        assert error.reason is not None
        self.logger.info("License rejected (%s): %s", error.reason.value, error)
        source = RevocationSource.NONE if isinstance(error, Unreachable) else None
        return VerificationResult.reject(
            error.reason,
            str(error),
            user_id=token.user_id if token is not None else None,
            source=source,
        )

    def _revocation_status(self, user_id: str, now: int) -> tuple[bool, RevocationSource]:
        """Return (revoked, where the answer came from)."""
        try:
            revoked = bool(self._query(user_id))
        except Unreachable as e:
            self.logger.warning("Revocation check unavailable for %s: %s", user_id, e)
        else:
            self.offline_cache.record(user_id, revoked, now)
            return revoked, RevocationSource.ONLINE

        entry = self.offline_cache.get(user_id)
        if entry is not None and 0 <= now - entry.checked_at <= self.max_staleness:
            self.logger.warning(
                "Using cached revocation status for %s from %s seconds ago",
                user_id,
                now - entry.checked_at,
            )
            return entry.last_known_revoked, RevocationSource.CACHE

        if self.offline_policy is OfflinePolicy.FAIL_CLOSED:
            msg = (
                "License check required: the license server is unreachable and "
                "no recent online check is cached"
            )
            raise Unreachable(msg)
        self.logger.warning(
            "No usable cached status for %s, proceeding unconfirmed", user_id
        )
        return False, RevocationSource.NONE

    def _query(self, user_id: str) -> bool:
        """Ask the authority; any failure to get an answer is ``Unreachable``."""
        if self.revocation_query is None:
            msg = "No revocation query configured"
            raise Unreachable(msg)
        try:
            if self.query_timeout is None:
                return self.revocation_query(user_id)

            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=2, thread_name_prefix="revocation-query"
                )
            future = self._executor.submit(self.revocation_query, user_id)
            try:
                return future.result(timeout=self.query_timeout)
            except FuturesTimeoutError as e:
                future.cancel()
                msg = f"Revocation query timed out after {self.query_timeout}s"
                raise Unreachable(msg) from e
        except ValidationError:
            raise
        except Exception as e:
            msg = f"Revocation query failed: {e}"
            raise Unreachable(msg) from e
