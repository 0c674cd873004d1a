"""
Collection caches for the API's resource types.
"""

from __future__ import annotations

from typing import Any

from estate_client.domains.models import Booking, Property
from estate_client.infrastructure.gateway import HttpGateway
from estate_client.services.collection_cache import CollectionCache
from estate_client.utils.config import bookings_fetch_limit

BOOKINGS_PATH = "/bookings"
PROPERTIES_PATH = "/properties"


def bookings_cache(gateway: HttpGateway, limit: int | None = None) -> CollectionCache[Booking]:
    """GET /bookings?limit=n. The response wraps the list as `{"data": [...]}`."""
    n = limit if limit is not None else bookings_fetch_limit()

    async def load() -> Any:
        response = await gateway.get(BOOKINGS_PATH, params={"limit": n})
        return response.payload

    return CollectionCache("bookings", load, Booking.from_payload)


def properties_cache(gateway: HttpGateway) -> CollectionCache[Property]:
    """GET /properties."""

    async def load() -> Any:
        response = await gateway.get(PROPERTIES_PATH)
        return response.payload

    return CollectionCache("properties", load, Property.from_payload)
