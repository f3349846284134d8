"""
Offline cache of last known revocation status.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from triallic.common.models import OfflineCacheEntry

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class OfflineCache:
    """Last revocation status seen per user, optionally backed by a JSON file."""

    def __init__(self, cache_file_path: Path | None = None):
        self.cache_file_path = cache_file_path
        self._lock = threading.Lock()
        self._entries: dict[str, OfflineCacheEntry] = self._load()

    def _load(self) -> dict[str, OfflineCacheEntry]:
        if self.cache_file_path is None or not self.cache_file_path.is_file():
            return {}
        try:
            raw = json.loads(self.cache_file_path.read_text(encoding="utf-8"))
            return {
                user_id: OfflineCacheEntry.model_validate(entry)
                for user_id, entry in raw.items()
            }
        except (OSError, ValueError, AttributeError, PydanticValidationError):
            logger.warning(
                "Ignoring unreadable offline cache %s", self.cache_file_path
            )
            return {}

    def _save(self) -> None:
        if self.cache_file_path is None:
            return
        data = {user_id: e.model_dump() for user_id, e in self._entries.items()}
        try:
            self.cache_file_path.parent.mkdir(parents=True, exist_ok=True)
            self.cache_file_path.write_text(json.dumps(data), encoding="utf-8")
            if os.name == "posix":
                self.cache_file_path.chmod(0o600)
        except OSError as exc:
            logger.warning("Could not write offline cache: %s", exc)

    def record(self, user_id: str, revoked: bool, checked_at: int) -> None:  # noqa: FBT001
        """Store the outcome of a successful online check."""
        with self._lock:
            self._entries[user_id] = OfflineCacheEntry(
                user_id=user_id, last_known_revoked=revoked, checked_at=checked_at
            )
            self._save()

    def get(self, user_id: str) -> OfflineCacheEntry | None:
        with self._lock:
            return self._entries.get(user_id)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._save()
