"""
Custom exceptions for the license system.
"""

from __future__ import annotations

from enum import Enum


class InvalidReason(str, Enum):
    """Why a license was rejected."""

    INVALID_REQUEST = "invalid_request"
    MALFORMED_TOKEN = "malformed_token"
    SIGNATURE_MISMATCH = "signature_mismatch"
    EXPIRED = "expired"
    REVOKED = "revoked"
    UNREACHABLE = "unreachable"


class ValidationError(Exception):
    """Exception for validation failures."""

    reason: InvalidReason | None = None

    def __init__(self, message: str, status_code: int = 403) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidRequest(ValidationError):
    """Bad issuance parameters."""

    reason = InvalidReason.INVALID_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class MalformedToken(ValidationError):
    """Token bytes the codec could not have produced."""

    reason = InvalidReason.MALFORMED_TOKEN

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class SignatureMismatch(ValidationError):
    """Signature does not verify under the trusted public key."""

    reason = InvalidReason.SIGNATURE_MISMATCH


class Expired(ValidationError):
    """The license validity window has ended."""

    reason = InvalidReason.EXPIRED


class Revoked(ValidationError):
    """The authority revoked the license holder."""

    reason = InvalidReason.REVOKED


class Unreachable(ValidationError):
    """The revocation authority could not be consulted."""

    reason = InvalidReason.UNREACHABLE

    def __init__(self, message: str) -> None:
        super().__init__(message, 503)


ERRORS_BY_REASON: dict[InvalidReason, type[ValidationError]] = {
    InvalidReason.INVALID_REQUEST: InvalidRequest,
    InvalidReason.MALFORMED_TOKEN: MalformedToken,
    InvalidReason.SIGNATURE_MISMATCH: SignatureMismatch,
    InvalidReason.EXPIRED: Expired,
    InvalidReason.REVOKED: Revoked,
    InvalidReason.UNREACHABLE: Unreachable,
}
