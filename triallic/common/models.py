"""
Pydantic models for licenses, request/response validation and results.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from triallic.common.exceptions import ERRORS_BY_REASON, InvalidReason, Unreachable


class LicenseToken(BaseModel):
    """Unsigned record of entitlement: identity plus validity window."""

    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    user_id: str = Field(min_length=1)
    issued_at: int
    expires_at: int

    @model_validator(mode="after")
    def _check_validity_window(self) -> LicenseToken:
        if self.expires_at <= self.issued_at:
            msg = "expires_at must be later than issued_at"
            raise ValueError(msg)
        return self


class SignedLicense(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: LicenseToken
    signature: bytes

    @property
    def signature_hex(self) -> str:
        return self.signature.hex()


class IssueRequest(BaseModel):
    user_id: str


class IssueResponse(BaseModel):
    token: str
    signature: str
    message: str


class CheckResponse(BaseModel):
    revoked: bool
    message: str


class RevokeRequest(BaseModel):
    user_id: str
    password: str | None = None


class RevokeResponse(BaseModel):
    ok: bool
    message: str


class PublicKeyResponse(BaseModel):
    public_key: str
    format: str = "ed25519"
    note: str = "Embed this in your trial binary"


class OfflineCacheEntry(BaseModel):
    user_id: str
    last_known_revoked: bool
    checked_at: int


class RevocationSource(str, Enum):
    """Where the revocation status behind a result came from."""

    ONLINE = "online"  # Authority answered
    CACHE = "cache"  # Last known status from the offline cache
    NONE = "none"  # Nothing known, proceeded unconfirmed


class OfflinePolicy(str, Enum):
    """What to do when the authority is unreachable and nothing usable is cached."""

    FAIL_OPEN = "fail_open"
    FAIL_CLOSED = "fail_closed"


class VerificationResult(BaseModel):
    """Outcome of a license verification."""

    valid: bool
    reason: InvalidReason | None = None
    days_remaining: int | None = None
    source: RevocationSource | None = None
    user_id: str | None = None
    message: str = ""

    @classmethod
    def accept(
        cls, user_id: str, days_remaining: int, source: RevocationSource
    ) -> VerificationResult:
        if source is RevocationSource.ONLINE:
            message = f"License valid for {user_id}"
        else:
            message = f"License valid for {user_id} (unconfirmed, authority offline)"
        return cls(
            valid=True,
            days_remaining=days_remaining,
            source=source,
            user_id=user_id,
            message=message,
        )

    @classmethod
    def reject(
        cls,
        reason: InvalidReason,
        message: str,
        user_id: str | None = None,
        source: RevocationSource | None = None,
    ) -> VerificationResult:
        return cls(
            valid=False, reason=reason, user_id=user_id, source=source, message=message
        )

    @property
    def confirmed(self) -> bool:
        """True only when the authority itself was consulted."""
        return self.source is RevocationSource.ONLINE

    @property
    def unconfirmed(self) -> bool:
        return self.source is not None and not self.confirmed

    def raise_for_status(self, *, require_confirmed: bool = False) -> None:
        """Raise the matching ValidationError subclass unless the result is valid.

        With ``require_confirmed`` an offline (cached or unconfirmed) success is
        reported as ``Unreachable``.
        """
        if not self.valid:
            assert self.reason is not None
            raise ERRORS_BY_REASON[self.reason](self.message)
        if require_confirmed and not self.confirmed:
            raise Unreachable(self.message)
