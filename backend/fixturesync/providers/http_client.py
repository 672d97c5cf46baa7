"""
backend/fixturesync/providers/http_client.py

Purpose:
    Shared async HTTP client for fixture providers. Retries transient upstream
    failures with exponential backoff and hands throttling (429) straight back
    to the provider, which reports it as a rate-limit outcome.

Dependencies:
    - httpx
"""

import asyncio
import logging
from typing import Optional
from urllib.parse import urlparse

import httpx

logger = logging.getLogger("fixturesync.http_client")

# Transient upstream failures worth another attempt. 429 is deliberately
# absent: retrying a throttled provider only extends the throttle.
_RETRYABLE_STATUSES = {500, 502, 503, 504}

_NETWORK_ERRORS = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)


def parse_retry_after(response: httpx.Response) -> Optional[float]:
    """Extract wait time from Retry-After or X-RateLimit-Retry-After headers."""
    for header in ("retry-after", "x-ratelimit-retry-after"):
        value = response.headers.get(header)
        if value is None:
            continue
        try:
            return float(value)
        except (ValueError, TypeError):
            continue
    return None


def _safe_url(url: str, secrets: tuple[str, ...] = ()) -> str:
    """Strip query params and path-embedded keys for safe logging."""
    parsed = urlparse(str(url))
    path = parsed.path
    for secret in secrets:
        if secret:
            path = path.replace(secret, "***")
    return f"{parsed.scheme}://{parsed.netloc}{path}"


class ResilientClient:
    """httpx.AsyncClient wrapper with per-attempt timeout and exponential backoff."""

    def __init__(
        self,
        name: str,
        timeout: float = 15.0,
        max_retries: int = 2,
        base_delay: float = 0.5,
        secrets: tuple[str, ...] = (),
    ):
        self._client = httpx.AsyncClient(timeout=timeout)
        self._timeout = timeout
        self._name = name
        self._max_retries = max_retries
        self._base_delay = base_delay
        self._secrets = secrets

    async def _attempt(self, method: str, url: str, **kwargs) -> httpx.Response:
        """One request bounded as a whole, so a slow-trickle body cannot outlive the timeout."""
        try:
            return await asyncio.wait_for(self._client.request(method, url, **kwargs), self._timeout)
        except asyncio.TimeoutError:
            raise httpx.TimeoutException(
                f"{method} {_safe_url(url, self._secrets)} exceeded {self._timeout}s"
            ) from None

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Execute an HTTP request with retry/backoff on transient failures.

        Returns the last response once retries are exhausted (callers inspect
        the status); raises the last network error if no response ever came.
        """
        last_exc: Optional[Exception] = None
        last_resp: Optional[httpx.Response] = None
        attempts = self._max_retries + 1

        for attempt in range(attempts):
            try:
                resp = await self._attempt(method, url, **kwargs)

                if resp.status_code == 429:
                    logger.warning(
                        "[%s] Rate limited (429) on %s %s, not retrying",
                        self._name, method, _safe_url(url, self._secrets),
                    )
                    return resp

                if resp.status_code not in _RETRYABLE_STATUSES:
                    return resp

                last_resp = resp
                logger.warning(
                    "[%s] Server error %d on %s %s (attempt %d/%d)",
                    self._name, resp.status_code, method, _safe_url(url, self._secrets),
                    attempt + 1, attempts,
                )

            except _NETWORK_ERRORS as exc:
                last_exc = exc
                logger.warning(
                    "[%s] Network error on %s %s (attempt %d/%d): %s",
                    self._name, method, _safe_url(url, self._secrets),
                    attempt + 1, attempts, exc,
                )

            if attempt < self._max_retries:
                await asyncio.sleep(self._base_delay * (2 ** attempt))

        if last_resp is not None:
            logger.error(
                "[%s] All %d attempts failed for %s %s (last status: %d)",
                self._name, attempts, method, _safe_url(url, self._secrets),
                last_resp.status_code,
            )
            return last_resp

        logger.error(
            "[%s] All %d attempts failed for %s %s: %s",
            self._name, attempts, method, _safe_url(url, self._secrets), last_exc,
        )
        raise last_exc  # type: ignore[misc]

    async def get(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()
