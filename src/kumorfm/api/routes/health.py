"""Health check endpoint."""

from __future__ import annotations

import time

from fastapi import APIRouter

from kumorfm import __version__
from kumorfm.api.models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return service status and version."""
    return HealthResponse(status="ok", version=__version__, timestamp=time.time())
