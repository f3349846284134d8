"""
Obtains trial licenses from the license server.
"""

from __future__ import annotations

import logging

import requests

from triallic.common.config import Config
from triallic.common.models import IssueRequest, IssueResponse

from .license_store import LicenseStore

logger = logging.getLogger(__name__)


class LicenseFetcher:
    """Requests a trial from the server and stores the returned blobs."""

    def __init__(
        self,
        store: LicenseStore,
        server_url: str | None = None,
        timeout: float = 10,
    ):
        self.store = store
        self.server_url = (server_url or Config().SERVER_URL).rstrip("/")
        self.timeout = timeout

    def fetch(self, user_id: str) -> IssueResponse:
        """Request a license for user_id and write it to the store."""
        logger.info("Requesting license for %s", user_id)
        r = requests.post(
            f"{self.server_url}/api/trial/issue",
            json=IssueRequest(user_id=user_id).model_dump(),
            timeout=self.timeout,
        )
        r.raise_for_status()
        resp = IssueResponse.model_validate(r.json())

        self.store.save(resp.token.encode("utf-8"), resp.signature)
        logger.info(
            "License files written: %s, %s",
            self.store.token_path,
            self.store.signature_path,
        )
        return resp
