"""
Routes for the license server.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException

from triallic.common.exceptions import ValidationError
from triallic.common.models import (
    CheckResponse,
    IssueRequest,
    IssueResponse,
    PublicKeyResponse,
    RevokeRequest,
    RevokeResponse,
)

from .services import LicenseService


class LicenseRoutes:
    """Handles FastAPI routes for the license server."""

    def __init__(self, service: LicenseService):
        self.service = service

    def setup_routes(self, app: FastAPI) -> None:
        """Setup API routes on the FastAPI app."""

        app.get("/health")(self.health)
        app.post("/api/trial/issue", response_model=IssueResponse)(self.issue)
        app.get("/api/trial/check", response_model=CheckResponse)(self.check)
        app.post("/api/trial/revoke", response_model=RevokeResponse)(self.revoke)
        app.get("/api/public-key", response_model=PublicKeyResponse)(self.public_key)

    async def health(self) -> dict[str, Any]:
        """Handle /health endpoint."""
        return self.service.health()

    async def issue(self, req: IssueRequest) -> IssueResponse:
        """Handle /api/trial/issue endpoint."""
        try:
            return self.service.issue(req)
        except ValidationError as e:
            raise HTTPException(e.status_code, str(e)) from e

    async def check(self, user_id: str) -> CheckResponse:
        """Handle /api/trial/check endpoint."""
        try:
            return self.service.check(user_id)
        except ValidationError as e:
            raise HTTPException(e.status_code, str(e)) from e

    async def revoke(self, req: RevokeRequest) -> RevokeResponse:
        """Handle /api/trial/revoke endpoint."""
        try:
            return self.service.revoke(req)
        except ValidationError as e:
            raise HTTPException(e.status_code, str(e)) from e

    async def public_key(self) -> PublicKeyResponse:
        """Handle /api/public-key endpoint."""
        return self.service.public_key()
