"""
Data persistence utilities.
"""

from __future__ import annotations

import json
from pathlib import Path  # noqa: TC003
from typing import cast


class DataPersistence:
    """Handles loading and saving persistent data."""

    @staticmethod
    def load_revoked_users(file_path: Path) -> dict[str, int]:
        """Load revoked users (user_id -> revoked_at) from file."""
        try:
            with file_path.open() as f:
                return cast("dict[str, int]", json.load(f))
        except FileNotFoundError:
            return {}

    @staticmethod
    def save_revoked_users(file_path: Path, revoked_users: dict[str, int]) -> None:
        """Save revoked users to file, replacing it atomically."""
        file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = file_path.with_suffix(file_path.suffix + ".tmp")
        with tmp_path.open("w") as f:
            json.dump(revoked_users, f, sort_keys=True)
        tmp_path.replace(file_path)
