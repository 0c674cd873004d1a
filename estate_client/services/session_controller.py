"""
Session controller: login, logout, restore, and forced logout on 401.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping

from estate_client.domains.models import Identity, Session
from estate_client.infrastructure.credentials import CredentialStore, CredentialWriter
from estate_client.infrastructure.gateway import GatewayError, HttpGateway
from estate_client.services.collection_cache import CollectionCache
from estate_client.utils.logger import get_logger

logger = get_logger()

LOGIN_PATH = "/auth/login"
LOGIN_ROUTE = "/login"


class AuthError(RuntimeError):
    """Login failed. `original` holds the GatewayError when there was one."""

    def __init__(self, message: str, status_code: int | None = None, original: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.original = original


def _session_fields(payload: Any) -> tuple[str | None, Any]:
    """Find token and user at the top level or under `data`."""
    for candidate in (payload, payload.get("data") if isinstance(payload, Mapping) else None):
        if isinstance(candidate, Mapping) and candidate.get("token"):
            token = candidate.get("token")
            return (token if isinstance(token, str) else None), candidate.get("user")
    return None, None


class SessionController:
    """
    Owns session transitions and keeps the collection caches consistent with them.

    Caches registered here are invalidated on login, logout, and forced logout,
    so data fetched under one identity is never served to the next.
    """

    def __init__(
        self,
        gateway: HttpGateway,
        credentials: CredentialStore,
        writer: CredentialWriter,
        caches: Iterable[CollectionCache[Any]] = (),
        navigate: Callable[[str], None] | None = None,
    ) -> None:
        self._gateway = gateway
        self._credentials = credentials
        self._writer = writer
        self._caches: list[CollectionCache[Any]] = list(caches)
        self._navigate = navigate
        gateway.on_session_expired(self._handle_session_expired)

    @property
    def session(self) -> Session:
        return self._credentials.session

    def register_cache(self, cache: CollectionCache[Any]) -> None:
        self._caches.append(cache)

    def _invalidate_caches(self) -> None:
        for cache in self._caches:
            cache.invalidate()

    async def login(self, email: str, password: str) -> Session:
        """
        Authenticate against the API and activate the returned session.

        Raises:
            AuthError: The request failed or the response carried no usable
                token and user.
        """
        try:
            response = await self._gateway.post(LOGIN_PATH, {"email": email, "password": password})
        except GatewayError as e:
            logger.warning("Login failed for %s: %s", email, e.message)
            raise AuthError(e.message, status_code=e.status_code, original=e) from e

        token, user = _session_fields(response.payload)
        identity = Identity.from_payload(user)
        if not token or identity is None:
            logger.error("Login response for %s did not contain a token and user", email)
            raise AuthError("Login response did not include a session", status_code=response.status_code)

        session = self._writer.establish(token, identity)
        self._invalidate_caches()
        return session

    def logout(self) -> None:
        self._writer.clear()
        self._invalidate_caches()
        logger.info("Logged out")

    def restore(self) -> Session:
        """Adopt a stored session, if any. No server round-trip."""
        return self._writer.restore()

    def _handle_session_expired(self) -> None:
        self._invalidate_caches()
        if self._navigate is not None:
            self._navigate(LOGIN_ROUTE)
