"""
Configuration settings for the trial license system.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

SECONDS_PER_DAY = 24 * 60 * 60


class Config:
    """Central configuration class for all system settings."""

    def __init__(self) -> None:
        # Trial settings
        self.TRIAL_TTL: int = 14 * SECONDS_PER_DAY  # Default trial length

        # Revocation check settings
        self.REVOCATION_TIMEOUT: float = float(
            os.getenv("TRIALLIC_REVOCATION_TIMEOUT", "5")
        )
        self.OFFLINE_GRACE_PERIOD: int = int(
            os.getenv("TRIALLIC_OFFLINE_GRACE_PERIOD", str(24 * 60 * 60))
        )  # Max age of a cached revocation status
        self.OFFLINE_POLICY: str = os.getenv("TRIALLIC_OFFLINE_POLICY", "fail_open")

        # Server settings
        self.ADMIN_PASSWORD: str | None = os.getenv("TRIALLIC_ADMIN_PASSWORD")
        self.SERVER_HOST: str = os.getenv("TRIALLIC_SERVER_HOST", "127.0.0.1")
        self.SERVER_PORT: int = int(os.getenv("TRIALLIC_SERVER_PORT", "8081"))
        self.SERVER_URL: str = os.getenv(
            "TRIALLIC_SERVER_URL", f"http://{self.SERVER_HOST}:{self.SERVER_PORT}"
        )

        # File paths
        self.BASE_DIR: Path = Path(__file__).parent.parent
        self.SERVER_KEYS_DIR: Path = Path(
            os.getenv("TRIALLIC_KEYS_DIR", str(self.BASE_DIR / "server"))
        )
        revoked_users_file = os.getenv("TRIALLIC_REVOKED_USERS_FILE")
        self.REVOKED_USERS_FILE_PATH: Path | None = (
            Path(revoked_users_file) if revoked_users_file else None
        )

        # Verifying side artifacts
        self.LICENSE_DIR: Path = Path(os.getenv("TRIALLIC_LICENSE_DIR", "."))
        self.TOKEN_FILE_NAME: str = "trial.token"
        self.SIGNATURE_FILE_NAME: str = "trial.signature"
        self.OFFLINE_CACHE_FILE_NAME: str = ".last_license_check.json"

        # Logging
        self.LOG_LEVEL: int = logging.INFO
