"""
Revocation ledger for the license server.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from triallic.common.clock import Clock, current_timestamp

from .persistence import DataPersistence

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class RevocationLedger:
    """Registry of revoked user ids.

    Users are not revoked until ``revoke`` is called for them; there is no way
    back. One lock guards every read and write of the mapping.
    """

    def __init__(
        self,
        revoked_users_file_path: Path | None = None,
        clock: Clock = current_timestamp,
    ):
        self.revoked_users_file_path = revoked_users_file_path
        self.clock = clock
        self._lock = threading.Lock()
        self._revoked: dict[str, int] = (
            DataPersistence.load_revoked_users(revoked_users_file_path)
            if revoked_users_file_path
            else {}
        )

    def revoke(self, user_id: str) -> None:
        """Mark user_id revoked. Revoking again keeps the first timestamp.

        With a file configured the new state is written before it takes
        effect in memory, so a failed save leaves the ledger unchanged.
        """
        with self._lock:
            if user_id in self._revoked:
                return
            updated = {**self._revoked, user_id: self.clock()}
            if self.revoked_users_file_path:
                DataPersistence.save_revoked_users(
                    self.revoked_users_file_path, updated
                )
            self._revoked = updated
        logger.info("Revoked trial for user %s", user_id)

    def is_revoked(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._revoked

    def revoked_at(self, user_id: str) -> int | None:
        with self._lock:
            return self._revoked.get(user_id)

    def revoked_users(self) -> dict[str, int]:
        """Snapshot of user_id -> revoked_at."""
        with self._lock:
            return dict(self._revoked)
