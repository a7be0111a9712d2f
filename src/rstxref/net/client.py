"""HTTP client used for inventory/include fetches and reachability probes."""

from __future__ import annotations

from dataclasses import dataclass
import json
import time
from typing import Any, Callable, TypeVar

import httpx


_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

DEFAULT_USER_AGENT = "rstxref link checker"

T = TypeVar("T")


@dataclass(slots=True)
class FetchError(RuntimeError):
    """Domain error raised when a URL cannot be fetched."""

    url: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (url={self.url})"


def describe_status(response: httpx.Response) -> str:
    reason = response.reason_phrase or ""
    return f"{response.status_code} {reason}".strip()


class HttpClient:
    """Synchronous httpx wrapper with retry semantics for transient failures."""

    def __init__(
        self,
        *,
        timeout_seconds: float = 10.0,
        max_retries: int = 2,
        retry_base_seconds: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
        client: httpx.Client | None = None,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries cannot be negative")
        if retry_base_seconds < 0:
            raise ValueError("retry_base_seconds cannot be negative")

        self._client = client or httpx.Client(
            timeout=timeout_seconds,
            follow_redirects=True,
            headers={"User-Agent": DEFAULT_USER_AGENT},
        )
        self._max_retries = max_retries
        self._retry_base_seconds = retry_base_seconds
        self._sleep = sleep

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def fetch_bytes(self, url: str) -> bytes:
        response = self._with_retries(url, lambda: self._client.get(url))
        if response.status_code >= 400:
            raise FetchError(url=url, message=f"Unexpected response {describe_status(response)}")
        return response.content

    def fetch_json(self, url: str) -> Any:
        payload = self.fetch_bytes(url)
        try:
            return json.loads(payload)
        except ValueError as exc:
            raise FetchError(url=url, message=f"Response is not valid JSON: {exc}") from exc

    def check_reachable(self, url: str) -> tuple[str, bool]:
        """Probe *url* without downloading its body; never raises for network failures."""

        try:
            response = self._with_retries(url, lambda: self._probe(url))
        except FetchError as exc:
            return str(exc), False
        return describe_status(response), response.status_code < 400

    def _probe(self, url: str) -> httpx.Response:
        with self._client.stream("GET", url) as response:
            return response

    def _with_retries(self, url: str, request: Callable[[], httpx.Response]) -> httpx.Response:
        attempts = self._max_retries + 1
        last_error: Exception | None = None

        for attempt in range(attempts):
            should_retry = attempt < self._max_retries
            try:
                response = request()
            except httpx.InvalidURL as exc:
                raise FetchError(url=url, message=f"Invalid URL: {exc}") from exc
            except httpx.HTTPError as exc:
                last_error = exc
                if not should_retry:
                    break
            else:
                if response.status_code not in _RETRYABLE_STATUS_CODES or not should_retry:
                    return response
            self._sleep(self._retry_base_seconds * (2**attempt))

        detail = "unknown error"
        if last_error is not None:
            detail = str(last_error) or type(last_error).__name__
        raise FetchError(
            url=url,
            message=f"Request failed after {attempts} attempt(s): {detail}",
        ) from last_error
