"""
Credential store: the current session, mirrored to durable storage.

`CredentialStore` is the read side and can be handed to anything. Mutation goes
through `CredentialWriter`, which only the gateway (on 401) and the session
controller receive. Use `open_credentials()` to get the pair.
"""

from __future__ import annotations

from typing import Any

from estate_client.domains.models import ANONYMOUS, Identity, Session
from estate_client.infrastructure.storage import SESSION_KEYS, TOKEN_KEY, USER_KEY, MemoryStorage
from estate_client.utils.logger import get_logger, mask_token

logger = get_logger()


class CredentialStore:
    """Read-only view of the current session."""

    def __init__(self, storage: Any) -> None:
        self._storage = storage
        self._session: Session = ANONYMOUS

    @property
    def session(self) -> Session:
        return self._session

    @property
    def token(self) -> str | None:
        return self._session.token

    @property
    def identity(self) -> Identity | None:
        return self._session.identity

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated


class CredentialWriter:
    """Sole mutator of a CredentialStore and its durable copy."""

    def __init__(self, store: CredentialStore) -> None:
        self._store = store

    def establish(self, token: str, identity: Identity) -> Session:
        """Persist and activate a session. Storage is written first."""
        if not token:
            raise ValueError("Cannot establish a session without a token")
        self._store._storage.update({TOKEN_KEY: token, USER_KEY: identity.to_payload()})
        self._store._session = Session(token=token, identity=identity)
        logger.info("Session established for %s (%s) token=%s", identity.id, identity.role.value, mask_token(token))
        return self._store._session

    def clear(self) -> bool:
        """Drop the session everywhere. Returns True if one was active."""
        had_session = self._store._session.is_authenticated
        self._store._session = ANONYMOUS
        self._store._storage.remove(SESSION_KEYS)
        if had_session:
            logger.info("Session cleared")
        return had_session

    def restore(self) -> Session:
        """
        Load the session from durable storage without contacting the server.

        A complete token+user pair is trusted as-is; the first authenticated
        call will surface a 401 if it has expired. A partial pair is wiped.
        """
        storage = self._store._storage
        raw_token = storage.get(TOKEN_KEY)
        raw_user = storage.get(USER_KEY)
        token = raw_token.strip() if isinstance(raw_token, str) else ""
        identity = Identity.from_payload(raw_user)
        if token and identity is not None:
            self._store._session = Session(token=token, identity=identity)
            logger.info("Restored session for %s token=%s", identity.id, mask_token(token))
            return self._store._session
        if raw_token is not None or raw_user is not None:
            logger.warning("Discarding incomplete stored session")
            storage.remove(SESSION_KEYS)
        self._store._session = ANONYMOUS
        return ANONYMOUS


def open_credentials(storage: Any | None = None) -> tuple[CredentialStore, CredentialWriter]:
    store = CredentialStore(storage if storage is not None else MemoryStorage())
    return store, CredentialWriter(store)
