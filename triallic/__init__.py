# Trial licenses: Ed25519-signed, offline verifiable, revocable

from triallic.client.client import LicenseClient
from triallic.client.verifier import Verifier
from triallic.common.codec import TokenCodec
from triallic.common.decorators import license_protected, requires_valid_license
from triallic.common.models import (
    LicenseToken,
    OfflinePolicy,
    RevocationSource,
    SignedLicense,
    VerificationResult,
)
from triallic.server.issuer import Issuer
from triallic.server.key_authority import KeyAuthority
from triallic.server.revocation_ledger import RevocationLedger

__all__ = [
    "Issuer",
    "KeyAuthority",
    "LicenseClient",
    "LicenseToken",
    "OfflinePolicy",
    "RevocationLedger",
    "RevocationSource",
    "SignedLicense",
    "TokenCodec",
    "Verifier",
    "VerificationResult",
    "license_protected",
    "requires_valid_license",
]
