"""
EstateClient: wires storage, credentials, gateway, caches and session controller.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

from estate_client.domains.aggregates import AgentAggregate, agent_bookings, derive_agent_aggregate
from estate_client.domains.listings import featured_properties
from estate_client.domains.models import Booking, Property, Session
from estate_client.infrastructure.credentials import open_credentials
from estate_client.infrastructure.gateway import HttpGateway
from estate_client.infrastructure.storage import FileStorage
from estate_client.services.resources import bookings_cache, properties_cache
from estate_client.services.session_controller import SessionController
from estate_client.utils.logger import get_logger

logger = get_logger()


class EstateClient:
    """
    One signed-in client process.

    Presentation code reads `properties.current()` / `bookings.current()` and
    calls `fetch()`, `session.login()` and `session.logout()`. The optional
    `notify_error` and `navigate` hooks are how this core talks back to it.
    """

    def __init__(
        self,
        base_url: str | None = None,
        storage: Any | None = None,
        session_path: Path | None = None,
        timeout: int | None = None,
        bookings_limit: int | None = None,
        notify_error: Callable[[str], None] | None = None,
        navigate: Callable[[str], None] | None = None,
        restore: bool = True,
    ) -> None:
        if storage is None:
            storage = FileStorage(session_path)
        self.credentials, writer = open_credentials(storage)
        self.gateway = HttpGateway(
            self.credentials,
            writer,
            base_url=base_url,
            timeout=timeout,
            notify_error=notify_error,
        )
        self.properties = properties_cache(self.gateway)
        self.bookings = bookings_cache(self.gateway, limit=bookings_limit)
        self.session = SessionController(
            self.gateway,
            self.credentials,
            writer,
            caches=[self.properties, self.bookings],
            navigate=navigate,
        )
        if restore:
            self.session.restore()

    @property
    def current_session(self) -> Session:
        return self.credentials.session

    def _viewer_id(self) -> str | None:
        identity = self.credentials.identity
        return identity.id if identity is not None else None

    def agent_bookings(self) -> list[Booking]:
        """Cached bookings handled by the signed-in agent."""
        return agent_bookings(self.bookings.current().items, self._viewer_id())

    def agent_dashboard(self) -> AgentAggregate:
        """Statistics for the signed-in agent, recomputed from the current snapshot."""
        return derive_agent_aggregate(self.bookings.current().items, self._viewer_id())

    def featured_properties(self) -> list[Property]:
        """Leading properties of the cached listing, for the home page slider."""
        return featured_properties(self.properties.current().items)
