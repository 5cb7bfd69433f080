"""HTTP access to the Trefle species API with rate limiting and retries."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Union

import httpx

from ..observability.logging_utils import log_event
from .config import AppConfig, DEFAULT_TREFLE_API_URL, get_config
from .errors import (
    PlantApiError,
    PlantAuthError,
    PlantNotFoundError,
    PlantRateLimitError,
    PlantTransientError,
)
from .rate_limiter import SlidingWindowRateLimiter


logger = logging.getLogger(__name__)

TREFLE_TIMEOUT = 10.0
MAX_RETRIES = 2
RETRY_DELAY_SECONDS = 1.0


def build_trefle_headers() -> Dict[str, str]:
    return {"Accept": "application/json"}


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except (json.JSONDecodeError, ValueError):
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.reason_phrase or f"HTTP {response.status_code}"


class TrefleApi:
    """Thin synchronous client for ``/species`` endpoints.

    Every attempt first takes a slot from the shared rate limiter; when the
    window is full the call fails at once with a local
    :class:`PlantRateLimitError`. Server errors (5xx) and network failures
    are retried ``max_retries`` times, waiting ``attempt * retry_delay``
    seconds before each retry. 401, 404 and 429 are raised immediately.
    """

    def __init__(
        self,
        token: Optional[str],
        *,
        rate_limiter: SlidingWindowRateLimiter,
        base_url: str = DEFAULT_TREFLE_API_URL,
        timeout: float = TREFLE_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        if not token or not token.strip():
            raise PlantApiError("Trefle API token is required")
        self._token = token.strip()
        self._rate_limiter = rate_limiter
        self._base_url = base_url.rstrip("/")
        self._max_retries = max(0, int(max_retries))
        self._retry_delay = max(0.0, float(retry_delay))
        self._sleep = sleep or time.sleep
        self._client = httpx.Client(
            timeout=timeout,
            trust_env=False,
            headers=build_trefle_headers(),
            transport=transport,
        )

    @property
    def rate_limiter(self) -> SlidingWindowRateLimiter:
        return self._rate_limiter

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "TrefleApi":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def request(self, endpoint: str, params: Optional[Dict[str, str]] = None) -> Any:
        url = f"{self._base_url}{endpoint}"
        query = {"token": self._token, **(params or {})}
        last_error: Optional[Exception] = None

        for attempt in range(self._max_retries + 1):
            if attempt > 0:
                delay = attempt * self._retry_delay
                log_event(
                    "trefle_request_retry",
                    endpoint=endpoint,
                    attempt=attempt,
                    delay_seconds=delay,
                    error=str(last_error),
                )
                self._sleep(delay)

            if not self._rate_limiter.try_acquire():
                raise PlantRateLimitError(
                    "Rate limit exceeded. Please wait before making more requests.",
                    scope="local",
                )

            try:
                response = self._client.get(url, params=query)
            except (httpx.TimeoutException, httpx.TransportError) as exc:
                last_error = exc
                continue

            status = response.status_code
            if 200 <= status < 300:
                try:
                    payload = response.json()
                except (json.JSONDecodeError, ValueError) as exc:
                    raise PlantApiError(
                        f"Invalid JSON from {endpoint}", status_code=status
                    ) from exc
                logger.debug("Trefle request succeeded: %s", endpoint)
                return payload
            if status == 404:
                raise PlantNotFoundError(
                    f"Resource not found: {endpoint}", status_code=status
                )
            if status == 401:
                raise PlantAuthError(
                    "Invalid or expired API token", status_code=status
                )
            if status == 429:
                raise PlantRateLimitError(
                    "API rate limit exceeded", scope="upstream", status_code=status
                )
            if status >= 500:
                last_error = PlantApiError(
                    f"Server error: {status} {_error_message(response)}",
                    status_code=status,
                )
                continue
            raise PlantApiError(
                f"API error: {status} {_error_message(response)}", status_code=status
            )

        log_event(
            "trefle_request_failed",
            endpoint=endpoint,
            attempts=self._max_retries + 1,
            error=str(last_error),
        )
        status_code = getattr(last_error, "status_code", None)
        raise PlantTransientError(
            f"Request to {endpoint} failed after {self._max_retries + 1} attempts: {last_error}",
            status_code=status_code,
        ) from last_error

    def search_species(self, query: str) -> List[Dict[str, Any]]:
        payload = self.request("/species/search", {"q": query})
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, list):
            return []
        return [item for item in data if isinstance(item, dict)]

    def get_species(self, id_or_slug: Union[int, str]) -> Dict[str, Any]:
        payload = self.request(f"/species/{id_or_slug}")
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise PlantApiError(f"Unexpected species payload for {id_or_slug}")
        return data


def build_trefle_api(
    rate_limiter: SlidingWindowRateLimiter,
    cfg: Optional[AppConfig] = None,
    *,
    transport: Optional[httpx.BaseTransport] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> TrefleApi:
    cfg = cfg or get_config()
    return TrefleApi(
        cfg.trefle_token,
        rate_limiter=rate_limiter,
        base_url=cfg.trefle_api_url,
        timeout=cfg.trefle_timeout_seconds,
        max_retries=cfg.trefle_max_retries,
        retry_delay=cfg.trefle_retry_delay_seconds,
        transport=transport,
        sleep=sleep,
    )
