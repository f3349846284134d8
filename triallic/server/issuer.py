"""
Trial license issuer.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from triallic.common.clock import Clock, current_timestamp
from triallic.common.codec import TokenCodec
from triallic.common.config import Config
from triallic.common.exceptions import InvalidRequest
from triallic.common.models import LicenseToken, SignedLicense

if TYPE_CHECKING:
    from .key_authority import KeyAuthority


class Issuer:
    """Creates signed trial licenses."""

    def __init__(
        self,
        authority: KeyAuthority,
        clock: Clock = current_timestamp,
        default_ttl: int | None = None,
    ):
        self.authority = authority
        self.clock = clock
        self.default_ttl = default_ttl if default_ttl is not None else Config().TRIAL_TTL
        self.logger = logging.getLogger(__name__)

    def issue(self, user_id: str, ttl: int | None = None) -> SignedLicense:
        """Issue a license for user_id valid for ttl seconds from now."""
        if ttl is None:
            ttl = self.default_ttl
        if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl <= 0:
            msg = f"ttl must be a positive number of seconds, got {ttl!r}"
            raise InvalidRequest(msg)
        if not isinstance(user_id, str) or not user_id:
            msg = "user_id must not be empty"
            raise InvalidRequest(msg)

        now = self.clock()
        try:
            token = LicenseToken(user_id=user_id, issued_at=now, expires_at=now + ttl)
            token_bytes = TokenCodec.encode(token)
        except (PydanticValidationError, UnicodeEncodeError) as err:
            msg = f"Invalid license parameters: {err}"
            raise InvalidRequest(msg) from err
        signature = self.authority.sign(token_bytes)

        self.logger.info(
            "Issued trial for user %s, expires in %s seconds", user_id, ttl
        )
        return SignedLicense(token=token, signature=signature)
