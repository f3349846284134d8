"""Business logic services for the license server.
"""

from __future__ import annotations

import hmac
import time
from typing import TYPE_CHECKING, Any

from triallic.common.codec import TokenCodec
from triallic.common.config import SECONDS_PER_DAY
from triallic.common.exceptions import InvalidRequest, ValidationError
from triallic.common.models import (
    CheckResponse,
    IssueResponse,
    PublicKeyResponse,
    RevokeResponse,
)

if TYPE_CHECKING:
    import logging

    from triallic.common.interfaces import IRevocationLedger
    from triallic.common.models import IssueRequest, RevokeRequest

    from .issuer import Issuer
    from .key_authority import KeyAuthority


class LicenseService:
    """The four logical license operations, independent of transport."""

    def __init__(
        self,
        authority: KeyAuthority,
        issuer: Issuer,
        ledger: IRevocationLedger,
        admin_password: str | None,
        logger: logging.Logger,
    ):
        self.authority = authority
        self.issuer = issuer
        self.ledger = ledger
        self.admin_password = admin_password
        self.logger = logger

    def health(self) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "timestamp": int(time.time())}

    def issue(self, req: IssueRequest) -> IssueResponse:
        """Issue a trial with the default ttl."""
        signed = self.issuer.issue(req.user_id)
        days = self.issuer.default_ttl // SECONDS_PER_DAY
        return IssueResponse(
            token=TokenCodec.encode(signed.token).decode("utf-8"),
            signature=signed.signature_hex,
            message=f"Trial issued for {req.user_id} ({days} days)",
        )

    def check(self, user_id: str) -> CheckResponse:
        """Report whether user_id has been revoked."""
        if not user_id:
            msg = "user_id must not be empty"
            raise InvalidRequest(msg)
        revoked = self.ledger.is_revoked(user_id)
        if revoked:
            message = f"User {user_id} has been revoked"
        else:
            message = f"User {user_id} is active"
        return CheckResponse(revoked=revoked, message=message)

    def revoke(self, req: RevokeRequest) -> RevokeResponse:
        """Revoke req.user_id, guarded by the admin password when one is set."""
        if self.admin_password is not None and not hmac.compare_digest(
            (req.password or "").encode(), self.admin_password.encode()
        ):
            self.logger.warning("Rejected revoke for %s: bad admin password", req.user_id)
            msg = "Invalid admin password"
            raise ValidationError(msg)
        if not req.user_id:
            msg = "user_id must not be empty"
            raise InvalidRequest(msg)

        self.ledger.revoke(req.user_id)
        return RevokeResponse(ok=True, message=f"Trial revoked for {req.user_id}")

    def public_key(self) -> PublicKeyResponse:
        return PublicKeyResponse(public_key=self.authority.public_key_hex())
