"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Annotated
from zoneinfo import ZoneInfo

import httpx
from fastapi import Depends, HTTPException, Request

from src.config import Settings, get_settings
from src.cycle.config_loader import CycleConfig, get_cycle_config
from src.services.records_api import RecordsClient


@dataclass(frozen=True)
class AuthContext:
    """Bearer token taken from the request, forwarded to the records service.

    The token is not verified here; the records service is the authority.
    """

    access_token: str


async def get_current_user(request: Request) -> AuthContext:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return AuthContext(access_token=token.strip())


def get_http_client(request: Request) -> httpx.AsyncClient:
    """The shared records-service client created in the app lifespan."""
    client: httpx.AsyncClient | None = getattr(request.app.state, "http_client", None)
    if client is None:
        raise RuntimeError("HTTP client not initialized; is the lifespan running?")
    return client


def get_records_client(
    auth: Annotated[AuthContext, Depends(get_current_user)],
    http_client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> RecordsClient:
    return RecordsClient(http_client, auth.access_token, tz=ZoneInfo(settings.timezone))


def get_today(settings: Annotated[Settings, Depends(get_settings)]) -> date:
    """Current calendar date in the configured timezone."""
    return datetime.now(ZoneInfo(settings.timezone)).date()


# Annotated shortcuts for route signatures
Records = Annotated[RecordsClient, Depends(get_records_client)]
Today = Annotated[date, Depends(get_today)]
EngineConfig = Annotated[CycleConfig, Depends(get_cycle_config)]
