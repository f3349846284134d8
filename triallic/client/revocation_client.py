"""
HTTP revocation query against the license server.
"""

from __future__ import annotations

import logging

import requests

from triallic.common.config import Config
from triallic.common.exceptions import Unreachable
from triallic.common.models import CheckResponse

logger = logging.getLogger(__name__)


class HttpRevocationQuery:
    """Asks the license server whether a user is revoked.

    Every failure to obtain a well-formed answer, including timeouts and
    error statuses, is reported as ``Unreachable``.
    """

    def __init__(
        self,
        server_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        config = Config()
        self.server_url = (server_url or config.SERVER_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.REVOCATION_TIMEOUT
        self.session = session or requests.Session()

    def __call__(self, user_id: str) -> bool:
        url = f"{self.server_url}/api/trial/check"
        try:
            r = self.session.get(url, params={"user_id": user_id}, timeout=self.timeout)
            r.raise_for_status()
            resp = CheckResponse.model_validate(r.json())
        except requests.RequestException as e:
            logger.warning("Could not reach license server: %s", e)
            msg = f"License server unreachable: {e}"
            raise Unreachable(msg) from e
        except ValueError as e:
            logger.warning("Could not parse server response: %s", e)
            msg = f"Unexpected response from license server: {e}"
            raise Unreachable(msg) from e
        return resp.revoked
