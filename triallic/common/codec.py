"""
Canonical byte encoding of license tokens.

The encoding is frozen: signatures are computed over exactly these bytes, so
any change here invalidates every license already issued. Tokens are compact
UTF-8 JSON with the fields in a fixed order::

    {"user_id":"alice","issued_at":1700000000,"expires_at":1701209600}
"""

from __future__ import annotations

import json

from pydantic import ValidationError as PydanticValidationError

from triallic.common.exceptions import MalformedToken
from triallic.common.models import LicenseToken

FIELD_ORDER = ("user_id", "issued_at", "expires_at")


class TokenCodec:
    """Encodes tokens to their canonical bytes and back."""

    @staticmethod
    def encode(token: LicenseToken) -> bytes:
        obj = {field: getattr(token, field) for field in FIELD_ORDER}
        return json.dumps(obj, separators=(",", ":"), ensure_ascii=False).encode(
            "utf-8"
        )

    @staticmethod
    def decode(data: bytes) -> LicenseToken:
        """Parse canonical token bytes, rejecting anything encode() cannot produce."""
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as err:
            msg = "Token is not valid UTF-8"
            raise MalformedToken(msg) from err

        try:
            obj = json.loads(text)
        except json.JSONDecodeError as err:
            msg = f"Token is not valid JSON: {err}"
            raise MalformedToken(msg) from err

        if not isinstance(obj, dict):
            msg = "Token must be a JSON object"
            raise MalformedToken(msg)

        try:
            token = LicenseToken.model_validate(obj)
        except PydanticValidationError as err:
            msg = f"Invalid token fields: {err}"
            raise MalformedToken(msg) from err

        if TokenCodec.encode(token) != data:
            msg = "Token is not in canonical form"
            raise MalformedToken(msg)
        return token
