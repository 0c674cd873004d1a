"""
Domain records parsed from API payloads: identity, session, bookings, properties.

Parsing is lenient. Missing or wrongly typed fields fall back to defaults so a
single malformed record never takes a whole collection down with it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from estate_client.domains.refs import Ref, parse_ref
from estate_client.utils.logger import get_logger

logger = get_logger()


class Role(str, Enum):
    BUYER = "Buyer"
    AGENT = "Agent"
    ADMIN = "Admin"

    @classmethod
    def parse(cls, value: Any) -> "Role":
        """Case-insensitive match; unknown roles degrade to Buyer."""
        raw = str(value or "").strip().lower()
        for role in cls:
            if role.value.lower() == raw:
                return role
        if raw:
            logger.warning("Unknown role %r, treating as %s", value, cls.BUYER.value)
        return cls.BUYER


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


APPROVED_STATUSES = frozenset({BookingStatus.CONFIRMED.value, BookingStatus.COMPLETED.value})


def _text(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    s = str(value).strip()
    return s or None


def as_amount(value: Any) -> float | int:
    """Coerce a money field to a number. Absent, non-numeric and NaN become 0."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return 0
        if not math.isfinite(parsed):
            return 0
        return int(parsed) if parsed.is_integer() else parsed
    return 0


@dataclass(frozen=True)
class Identity:
    id: str
    role: Role
    name: str = ""
    email: str = ""
    phone: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "Identity | None":
        """Parse a user record. Returns None when no id is present."""
        if not isinstance(payload, Mapping):
            return None
        user_id = _text(payload.get("_id")) or _text(payload.get("id"))
        if not user_id:
            return None
        return cls(
            id=user_id,
            role=Role.parse(payload.get("role")),
            name=_text(payload.get("name")) or "",
            email=_text(payload.get("email")) or "",
            phone=_text(payload.get("phone")),
        )

    def to_payload(self) -> dict[str, Any]:
        """Serialize using the server's field names so storage round-trips."""
        out: dict[str, Any] = {
            "_id": self.id,
            "role": self.role.value,
            "name": self.name,
            "email": self.email,
        }
        if self.phone:
            out["phone"] = self.phone
        return out

    @property
    def is_agent(self) -> bool:
        return self.role is Role.AGENT


@dataclass(frozen=True)
class Session:
    """Token and identity. Both present, or both absent."""

    token: str | None = None
    identity: Identity | None = None

    def __post_init__(self) -> None:
        if (self.token is None) != (self.identity is None):
            raise ValueError("Session requires token and identity together")

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None


ANONYMOUS = Session()


@dataclass(frozen=True)
class Commission:
    agent: Ref | None
    amount: float | int = 0

    @classmethod
    def from_payload(cls, payload: Any) -> "Commission | None":
        if not isinstance(payload, Mapping):
            return None
        return cls(agent=parse_ref(payload.get("agent")), amount=as_amount(payload.get("amount")))


@dataclass(frozen=True)
class Booking:
    id: str | None
    status: str = ""
    agent: Ref | None = None
    buyer: Ref | None = None
    plot: Ref | None = None
    total_amount: float | int = 0
    commissions: tuple[Commission, ...] | None = None
    booking_date: str | None = None
    booking_number: str | None = None
    created_at: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "Booking | None":
        """Parse a booking record. Non-mapping payloads return None."""
        if not isinstance(payload, Mapping):
            return None
        raw_commissions = payload.get("commissions")
        commissions: tuple[Commission, ...] | None = None
        if isinstance(raw_commissions, (list, tuple)):
            parsed = (Commission.from_payload(c) for c in raw_commissions)
            commissions = tuple(c for c in parsed if c is not None)
        return cls(
            id=_text(payload.get("_id")) or _text(payload.get("id")),
            status=_text(payload.get("status")) or "",
            agent=parse_ref(payload.get("agent")),
            buyer=parse_ref(payload.get("buyer")),
            plot=parse_ref(payload.get("plot")),
            total_amount=as_amount(payload.get("totalAmount")),
            commissions=commissions,
            booking_date=_text(payload.get("bookingDate")),
            booking_number=_text(payload.get("bookingNumber")),
            created_at=_text(payload.get("createdAt")),
        )

    @property
    def is_pending(self) -> bool:
        return self.status == BookingStatus.PENDING.value

    @property
    def is_approved(self) -> bool:
        return self.status in APPROVED_STATUSES


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Media:
    main_picture: str | None = None
    more_images: tuple[str, ...] = ()


def _coordinates(value: Any) -> Coordinates | None:
    if not isinstance(value, Mapping):
        return None
    lat, lon = value.get("latitude"), value.get("longitude")
    try:
        lat, lon = float(lat), float(lon)
    except (TypeError, ValueError):
        return None
    # Zero means the coordinate was never set.
    if not lat or not lon:
        return None
    return Coordinates(latitude=lat, longitude=lon)


def _media(value: Any) -> Media | None:
    if not isinstance(value, Mapping):
        return None
    more = value.get("moreImages")
    images = tuple(s for s in (_text(i) for i in more) if s) if isinstance(more, (list, tuple)) else ()
    return Media(main_picture=_text(value.get("mainPicture")), more_images=images)


@dataclass(frozen=True)
class Property:
    id: str | None
    name: str = ""
    status: str | None = None
    address: str | None = None
    city_name: str | None = None
    base_price_per_gaj: float | int | None = None
    media: Media | None = None
    coordinates: Coordinates | None = None
    categories: tuple[str, ...] = field(default_factory=tuple)
    category: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "Property | None":
        if not isinstance(payload, Mapping):
            return None
        city = payload.get("city")
        city_name = _text(city.get("name")) if isinstance(city, Mapping) else _text(city)
        raw_categories = payload.get("categories")
        categories: tuple[str, ...] = ()
        if isinstance(raw_categories, (list, tuple)):
            categories = tuple(s for s in (_text(c) for c in raw_categories) if s)
        price = payload.get("basePricePerGaj")
        return cls(
            id=_text(payload.get("_id")) or _text(payload.get("id")),
            name=_text(payload.get("name")) or "",
            status=_text(payload.get("status")),
            address=_text(payload.get("address")),
            city_name=city_name,
            base_price_per_gaj=as_amount(price) if price is not None else None,
            media=_media(payload.get("media")),
            coordinates=_coordinates(payload.get("coordinates")),
            categories=categories,
            category=_text(payload.get("category")),
        )
