"""
HTTP gateway: the single path every API call takes.

Attaches the bearer token, normalizes failures into GatewayError subclasses,
reports each failure to the notification sink once, and tears the session down
on any 401.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Callable

import requests

from estate_client.infrastructure.credentials import CredentialStore, CredentialWriter
from estate_client.utils.config import api_base_url, request_timeout
from estate_client.utils.logger import get_logger

logger = get_logger()

FALLBACK_MESSAGE = "Something went wrong"


class GatewayError(RuntimeError):
    """Normalized API failure: `message` is user-facing, `status_code` may be None."""

    def __init__(self, message: str, status_code: int | None = None, original: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.original = original


class NetworkError(GatewayError):
    """No response: connection refused, DNS, timeout."""


class AuthorizationError(GatewayError):
    """401. The session has already been cleared when this is raised."""


class ServerError(GatewayError):
    """Any other non-2xx response."""


@dataclass(frozen=True)
class GatewayResponse:
    status_code: int
    payload: Any


def _log_notification(message: str) -> None:
    logger.warning("API error: %s", message)


def _server_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return FALLBACK_MESSAGE
    if isinstance(body, dict):
        msg = body.get("message")
        if isinstance(msg, str) and msg.strip():
            return msg.strip()
    return FALLBACK_MESSAGE


def _decode(response: requests.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as e:
        logger.warning("Non-JSON response body from %s: %s", getattr(response, "url", "?"), e)
        return None


class HttpGateway:
    """
    Wrapper over `requests` bound to one API base URL and one credential store.

    All request methods are coroutines; the blocking transport call runs in a
    worker thread so the event loop only suspends there.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        writer: CredentialWriter,
        base_url: str | None = None,
        timeout: int | None = None,
        notify_error: Callable[[str], None] | None = None,
    ) -> None:
        self._credentials = credentials
        self._writer = writer
        self._base_url = (base_url or api_base_url()).rstrip("/")
        self._timeout = timeout if timeout is not None else request_timeout()
        self._notify_error = notify_error or _log_notification
        self._expiry_listeners: list[Callable[[], None]] = []

    @property
    def base_url(self) -> str:
        return self._base_url

    def on_session_expired(self, listener: Callable[[], None]) -> None:
        """Register a callback fired after a 401 has cleared the session."""
        self._expiry_listeners.append(listener)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self._credentials.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def _transport(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        params: dict[str, Any] | None,
        body: Any,
    ) -> requests.Response:
        return requests.request(
            method,
            url,
            headers=headers,
            params=params,
            data=json.dumps(body) if body is not None else None,
            timeout=self._timeout,
        )

    def _fail(self, error: GatewayError) -> GatewayError:
        self._notify_error(error.message)
        return error

    def _expire_session(self) -> None:
        """Clear credentials and notify listeners. Failures here are logged; the 401 still surfaces."""
        try:
            self._writer.clear()
        except Exception as e:
            logger.exception("Failed to clear stored session after 401: %s", e)
        for listener in list(self._expiry_listeners):
            try:
                listener()
            except Exception as e:
                logger.exception("Session-expired listener %r failed: %s", listener, e)

    async def send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
    ) -> GatewayResponse:
        """
        Perform one API call.

        Args:
            method: HTTP verb.
            path: Path relative to the base URL, e.g. "/bookings".
            params: Optional query parameters.
            json_body: Optional JSON-serializable request body.

        Returns:
            GatewayResponse with the decoded JSON payload (None for empty or
            non-JSON bodies).

        Raises:
            NetworkError: No response was received.
            AuthorizationError: 401; the session is cleared before raising.
            ServerError: Any other non-2xx status.
        """
        method = method.upper()
        url = self._url(path)
        headers = self._headers()
        logger.debug("%s %s (authenticated=%s)", method, url, "Authorization" in headers)
        try:
            response = await asyncio.to_thread(self._transport, method, url, headers, params, json_body)
        except requests.exceptions.RequestException as e:
            logger.exception("%s %s failed: %s (%s)", method, url, e, type(e).__name__)
            raise self._fail(NetworkError(FALLBACK_MESSAGE, original=e)) from e

        status = response.status_code
        logger.info("%s %s -> %s", method, url, status)
        if 200 <= status < 300:
            return GatewayResponse(status_code=status, payload=_decode(response))

        message = _server_message(response)
        if status == 401:
            logger.warning("401 from %s %s; ending session", method, url)
            self._expire_session()
            raise self._fail(AuthorizationError(message, status_code=status))
        raise self._fail(ServerError(message, status_code=status))

    async def get(self, path: str, params: dict[str, Any] | None = None) -> GatewayResponse:
        return await self.send("GET", path, params=params)

    async def post(self, path: str, json_body: Any = None) -> GatewayResponse:
        return await self.send("POST", path, json_body=json_body)
