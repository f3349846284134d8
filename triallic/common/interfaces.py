"""
Interfaces and protocols for dependency injection.
"""

from __future__ import annotations

from typing import Protocol

from triallic.common.models import OfflineCacheEntry


class IRevocationLedger(Protocol):
    """Protocol for the authority-side revocation registry."""

    def revoke(self, user_id: str) -> None: ...

    def is_revoked(self, user_id: str) -> bool: ...


class IRevocationQuery(Protocol):
    """Protocol for asking the authority whether a user is revoked.

    Implementations raise ``Unreachable`` when the authority cannot answer.
    """

    def __call__(self, user_id: str) -> bool: ...


class IOfflineCache(Protocol):
    """Protocol for the verifier's last-known revocation status store."""

    def record(self, user_id: str, revoked: bool, checked_at: int) -> None: ...

    def get(self, user_id: str) -> OfflineCacheEntry | None: ...
