"""Display-ready derivations over cached properties and bookings."""

from __future__ import annotations

from typing import Sequence

from estate_client.domains.models import Booking, Property

FEATURED_COUNT = 6


def featured_properties(properties: Sequence[Property], count: int = FEATURED_COUNT) -> list[Property]:
    """First `count` properties in server order."""
    return list(properties[: max(count, 0)])


def location_label(prop: Property, default: str = "Location") -> str:
    return prop.address or prop.city_name or default


def category_labels(prop: Property) -> list[str]:
    """Explicit categories, else the single legacy `category`, else Residential."""
    if prop.categories:
        return list(prop.categories)
    return [prop.category or "Residential"]


def availability_label(prop: Property) -> str:
    return "Ready to Sell" if prop.status == "ready_to_sell" else "Available"


def booking_display_number(booking: Booking) -> str:
    """Server booking number, else `#` plus the last six id characters."""
    if booking.booking_number:
        return booking.booking_number
    return f"#{(booking.id or '')[-6:]}"


def booking_display_date(booking: Booking) -> str | None:
    return booking.booking_date or booking.created_at
