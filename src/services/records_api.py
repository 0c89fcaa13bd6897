"""Client for the remote records service.

The records service owns periods and user settings.  Lunara never stores
them; every request forwards the caller's bearer token and converts the
JSON into engine dataclasses.

Endpoints used:
    GET    /api/periods          — All periods for the user
    POST   /api/periods          — Create a period
    PATCH  /api/periods/{id}     — Update a period
    DELETE /api/periods/{id}     — Delete a period
    GET    /api/settings         — Average cycle / period length
"""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Any

import httpx
from pydantic import ValidationError

from src.cycle.models import PeriodRecord, UserCycleSettings
from src.cycle.period_log import PeriodDraft
from src.models.cycle import PeriodPayload, PeriodWrite, SettingsPayload

logger = logging.getLogger("lunara.records")


class RecordsAPIError(Exception):
    """The records service returned an error or an unusable payload."""

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"{detail} (status={status_code})" if status_code else detail)


class RecordsAuthError(RecordsAPIError):
    """The records service rejected the bearer token (401/403)."""


class RecordsUnavailableError(RecordsAPIError):
    """The records service could not be reached or timed out."""


# Settings not yet provisioned for the user; the service creates defaults later
_SETTINGS_MISSING_STATUSES = frozenset({404, 500})


class RecordsClient:
    """Async client for one user's records.

    Usage::

        async with httpx.AsyncClient(base_url=settings.records_api_url) as http:
            client = RecordsClient(http, access_token=token, tz=ZoneInfo("UTC"))
            periods = await client.get_periods()
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        access_token: str,
        tz: tzinfo | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            http_client:  Shared httpx client; its base_url points at the service.
            access_token: Caller's bearer token, forwarded verbatim.
            tz:           Zone used to turn timestamps into calendar dates.
        """
        self._http = http_client
        self._token = access_token
        self._tz = tz

    # ------------------------------------------------------------------
    # Periods
    # ------------------------------------------------------------------

    async def get_periods(self) -> list[PeriodRecord]:
        data = await self._request("GET", "/api/periods")
        if not isinstance(data, list):
            raise RecordsAPIError("Expected a list of periods")
        return [self._parse_period(item) for item in data]

    async def create_period(self, draft: PeriodDraft) -> PeriodRecord:
        data = await self._request("POST", "/api/periods", json=self._write_body(draft))
        record = self._parse_period(data)
        logger.info("Created period %s starting %s", record.id, record.start_date)
        return record

    async def update_period(self, period_id: str, draft: PeriodDraft) -> PeriodRecord:
        data = await self._request(
            "PATCH", f"/api/periods/{period_id}", json=self._write_body(draft)
        )
        record = self._parse_period(data)
        logger.info("Updated period %s to start %s", record.id, record.start_date)
        return record

    async def delete_period(self, period_id: str) -> None:
        await self._request("DELETE", f"/api/periods/{period_id}")
        logger.info("Deleted period %s", period_id)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    async def get_settings(self) -> UserCycleSettings | None:
        """Fetch the user's cycle settings.

        Returns:
            UserCycleSettings, or None when the service has none for the
            user yet (404 or 500), in which case the engine defaults apply.
        """
        try:
            data = await self._request(
                "GET", "/api/settings", handled=_SETTINGS_MISSING_STATUSES
            )
        except RecordsAPIError as exc:
            if exc.status_code in _SETTINGS_MISSING_STATUSES:
                logger.warning("Settings unavailable (status=%s); using defaults", exc.status_code)
                return None
            raise
        if data is None:
            return None
        try:
            return SettingsPayload.model_validate(data).to_settings()
        except ValidationError as exc:
            raise RecordsAPIError(f"Invalid settings payload: {exc}") from exc

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _build_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/json",
        }

    def _parse_period(self, item: Any) -> PeriodRecord:
        try:
            return PeriodPayload.model_validate(item).to_record(self._tz)
        except ValidationError as exc:
            raise RecordsAPIError(f"Invalid period payload: {exc}") from exc

    @staticmethod
    def _write_body(draft: PeriodDraft) -> dict[str, Any]:
        body = PeriodWrite(
            start_date=draft.start_date.isoformat(),
            end_date=draft.end_date.isoformat() if draft.end_date else None,
            flow_level=draft.flow_level,
        )
        return body.model_dump(mode="json", by_alias=True)

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        handled: frozenset[int] = frozenset(),
    ) -> Any:
        """Send an authenticated request and decode the JSON body.

        Error statuses in ``handled`` are ones the caller recovers from; they
        still raise but are only logged at debug level.

        Raises:
            RecordsAuthError:        On 401/403.
            RecordsUnavailableError: On timeouts and connection failures.
            RecordsAPIError:         On any other non-2xx response.
        """
        try:
            response = await self._http.request(
                method, path, json=json, headers=self._build_headers()
            )
        except httpx.TimeoutException as exc:
            logger.error("Records service timed out: %s %s", method, path)
            raise RecordsUnavailableError("Records service timed out") from exc
        except httpx.TransportError as exc:
            logger.error("Records service unreachable: %s %s (%s)", method, path, exc)
            raise RecordsUnavailableError("Records service unreachable") from exc

        if response.status_code in (401, 403):
            logger.warning("Records service rejected token: %s %s", method, path)
            raise RecordsAuthError("Not authorized by records service", response.status_code)
        if response.is_error:
            log = logger.debug if response.status_code in handled else logger.error
            log("Records service error %d: %s %s", response.status_code, method, path)
            raise RecordsAPIError(
                f"Records service returned {response.status_code}", response.status_code
            )

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RecordsAPIError("Records service returned invalid JSON") from exc
