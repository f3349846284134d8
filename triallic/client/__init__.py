# Verifying side
from triallic.client.client import LicenseClient as LicenseClient
from triallic.client.license_fetcher import LicenseFetcher as LicenseFetcher
from triallic.client.license_store import LicenseStore as LicenseStore
from triallic.client.offline_cache import OfflineCache as OfflineCache
from triallic.client.revocation_client import (
    HttpRevocationQuery as HttpRevocationQuery,
)
from triallic.client.verifier import Verifier as Verifier

__all__ = [
    "HttpRevocationQuery",
    "LicenseClient",
    "LicenseFetcher",
    "LicenseStore",
    "OfflineCache",
    "Verifier",
]
