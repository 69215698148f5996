"""HTTP client for the Tabloom REST API."""

import asyncio
import logging
import os
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

# Retry configuration for transient failures (connection errors, timeouts, 5xx).
MAX_RETRIES = 3
RETRY_BASE_DELAY = 1.0  # seconds; exponential: 1s, 2s, 4s


class TabloomClient:
    """Async client wrapping the Tabloom REST API.

    Constructor arguments win over environment variables:
        TABLOOM_API_URL     Backend base URL (default: http://localhost:8000)
        TABLOOM_API_TOKEN   Bearer token for authenticated endpoints
        TABLOOM_API_TIMEOUT Request timeout in seconds (default: 30)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_base_delay: float = RETRY_BASE_DELAY,
    ) -> None:
        self.base_url = base_url or os.environ.get("TABLOOM_API_URL", "http://localhost:8000")
        self.token = token if token is not None else os.environ.get("TABLOOM_API_TOKEN", "")
        self.timeout = timeout if timeout is not None else float(os.environ.get("TABLOOM_API_TIMEOUT", "30"))
        self.retry_base_delay = retry_base_delay
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            headers: dict[str, str] = {}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def _request_with_retry(
        self,
        method: str,
        path: str,
        retry: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        """Execute an HTTP request, retrying connection errors, timeouts and 5xx.

        Backoff is exponential from ``retry_base_delay``. A 4xx response is
        raised immediately. Pass ``retry=False`` for requests that are not
        safe to repeat; they get a single attempt.
        """
        client = await self._get_client()
        last_exc: Exception | None = None
        attempts = MAX_RETRIES if retry else 1

        for attempt in range(attempts):
            try:
                resp = await client.request(method, path, **kwargs)
            except (httpx.ConnectError, httpx.TimeoutException) as exc:
                last_exc = exc
            else:
                if resp.status_code < 500:
                    resp.raise_for_status()
                    return resp
                last_exc = httpx.HTTPStatusError(
                    f"Server error {resp.status_code}",
                    request=resp.request,
                    response=resp,
                )

            if attempt < attempts - 1:
                delay = self.retry_base_delay * (2 ** attempt)
                logger.warning(
                    "Request %s %s failed (attempt %d/%d), retrying in %.1fs: %s",
                    method, path, attempt + 1, attempts, delay, last_exc,
                )
                await asyncio.sleep(delay)

        raise last_exc  # type: ignore[misc]

    async def fetch_export(self, fresh: bool = False) -> dict[str, Any]:
        """Snapshot of every folder, bookmark and tag. Maps to GET /api/export/json (public)."""
        params = {"fresh": "true"} if fresh else None
        resp = await self._request_with_retry("GET", "/api/export/json", params=params)
        return resp.json()

    async def trigger_export(self) -> dict[str, Any]:
        """Regenerate the cached snapshot. Maps to POST /api/export/trigger.

        Not retried: each call runs a full export and records a job.
        """
        resp = await self._request_with_retry("POST", "/api/export/trigger", retry=False)
        return resp.json()

    async def list_export_jobs(self, limit: int = 10) -> list[dict[str, Any]]:
        """Recent export jobs, newest first. Maps to GET /api/export/jobs."""
        resp = await self._request_with_retry("GET", "/api/export/jobs", params={"limit": limit})
        return resp.json()["jobs"]

    async def list_bookmarks(
        self,
        search: Optional[str] = None,
        folder_id: Optional[str] = None,
        tag_id: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> dict[str, Any]:
        """Server-side filtered listing. Maps to GET /api/bookmarks."""
        params: dict[str, str | int] = {"page": page, "limit": limit}
        if search:
            params["search"] = search
        if folder_id:
            params["folderId"] = folder_id
        if tag_id:
            params["tagId"] = tag_id
        resp = await self._request_with_retry("GET", "/api/bookmarks", params=params)
        return resp.json()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
