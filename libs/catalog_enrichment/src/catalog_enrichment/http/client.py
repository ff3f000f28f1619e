"""Retrying HTTP transport for catalog requests.

This module provides a small client responsible for:
- Applying per-attempt authentication headers.
- Bounding every attempt with a timeout.
- Treating non-2xx statuses and ``errors`` envelopes as failures.
- Retrying sequentially with a constant delay.
- Returning parsed JSON bodies (no business mapping).
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any

import aiohttp
from yarl import URL

from ..auth.base import Authenticator
from ..config import RetryPolicy
from ..events import EventKind, FetchEvent, FetchObserver, LoggingObserver
from ..exceptions import (
    ApplicationErrorEnvelope,
    ExhaustedRetriesError,
    HttpStatusError,
    MalformedResponseError,
    NetworkError,
    TransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


@dataclass(frozen=True)
class RequestSpec:
    """Description of one logical request.

    Attributes:
        method: HTTP method.
        url: Fully encoded absolute URL; sent as-is so the signed query matches.
        source: Data source label used in events and logs.
        auth: Authenticator invoked before every attempt.
        headers: Extra headers merged over the defaults.
        json_body: Optional JSON payload for non-GET requests.
    """

    method: str
    url: str
    source: str = "catalog"
    auth: Authenticator | None = None
    headers: dict[str, str] = field(default_factory=dict)
    json_body: Any = None


class RetryingHttpClient:
    """HTTP client executing requests under a retry policy.

    Args:
        session: An aiohttp-style session supporting ``session.request(...)``
            as an async context manager.
        policy: Default retry policy when `execute` is called without one.
        observer: Receives attempt events. Defaults to `LoggingObserver`.
    """

    def __init__(
        self,
        session: Any,
        *,
        policy: RetryPolicy | None = None,
        observer: FetchObserver | None = None,
    ) -> None:
        self._session = session
        self._policy = policy or RetryPolicy()
        self._observer = observer or LoggingObserver()

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def execute(self, spec: RequestSpec, policy: RetryPolicy | None = None) -> Any:
        """
        Execute `spec`, retrying failed attempts.

        Attempts run strictly one after another. A failed attempt (network
        error, timeout, non-2xx status, application error envelope or
        undecodable body) is followed by a constant `retry_delay` pause while
        attempts remain.

        Returns:
            The decoded JSON body of the first successful attempt.

        Raises:
            ExhaustedRetriesError: When all ``max_retries + 1`` attempts failed.
            SigningError: When the authenticator cannot produce headers; never retried.
        """
        policy = policy or self._policy
        max_attempts = policy.total_attempts
        last_error: TransportError | None = None

        for attempt in range(1, max_attempts + 1):
            self._observer.on_event(
                FetchEvent(
                    EventKind.ATTEMPT_STARTED,
                    spec.source,
                    spec.url,
                    attempt=attempt,
                    max_attempts=max_attempts,
                )
            )
            try:
                return await self._attempt(spec, policy)
            except TransportError as e:
                last_error = e
                self._observer.on_event(
                    FetchEvent(
                        EventKind.ATTEMPT_FAILED,
                        spec.source,
                        spec.url,
                        attempt=attempt,
                        max_attempts=max_attempts,
                        error=str(e),
                    )
                )
                if attempt < max_attempts:
                    await asyncio.sleep(policy.retry_delay)

        assert last_error is not None
        raise ExhaustedRetriesError(spec.url, max_attempts, last_error) from last_error

    async def _attempt(self, spec: RequestSpec, policy: RetryPolicy) -> Any:
        headers = dict(DEFAULT_HEADERS)
        headers.update(spec.headers)
        if spec.auth is not None:
            headers.update(spec.auth.headers(spec.method, spec.url))

        kwargs: dict[str, Any] = {
            "headers": headers,
            "timeout": aiohttp.ClientTimeout(total=policy.timeout),
        }
        if spec.json_body is not None:
            kwargs["json"] = spec.json_body

        try:
            async with self._session.request(
                spec.method, URL(spec.url, encoded=True), **kwargs
            ) as response:
                status = response.status
                if not 200 <= status < 300:
                    body_text = await response.text(errors="replace")
                    raise HttpStatusError(status, spec.url, body_text)
                try:
                    body = await response.json(content_type=None)
                except (json.JSONDecodeError, ValueError) as e:
                    raise MalformedResponseError(
                        f"Invalid JSON body from {spec.url}: {e}"
                    ) from e
        except asyncio.TimeoutError as e:
            raise NetworkError(
                f"Request to {spec.url} timed out after {policy.timeout}s"
            ) from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Request to {spec.url} failed: {e}") from e

        if isinstance(body, dict):
            errors = body.get("errors")
            if isinstance(errors, list) and errors:
                raise ApplicationErrorEnvelope(spec.url, errors)

        logger.debug(f"{spec.method} {spec.url} -> {status}")
        return body
