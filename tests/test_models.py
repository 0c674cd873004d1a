"""
Tests for reference parsing and lenient record parsing.
"""

from __future__ import annotations

import pytest

from estate_client.domains.models import (
    Booking,
    Identity,
    Property,
    Role,
    Session,
    as_amount,
)
from estate_client.domains.refs import IdRef, Populated, parse_ref, ref_id, ref_matches


def test_parse_ref_variants() -> None:
    assert parse_ref("U1") == IdRef(id="U1")
    populated = parse_ref({"_id": "U1", "name": "Asha"})
    assert isinstance(populated, Populated)
    assert populated.id == "U1"
    assert populated.get("name") == "Asha"
    assert parse_ref({"id": 7}).id == "7"
    assert parse_ref(None) is None
    assert parse_ref({"name": "no id"}) is None
    assert parse_ref("   ") is None
    assert parse_ref(True) is None


def test_ref_matches_either_representation() -> None:
    assert ref_matches(parse_ref("U1"), "U1")
    assert ref_matches(parse_ref({"_id": "U1"}), "U1")
    assert not ref_matches(parse_ref("U2"), "U1")
    assert not ref_matches(None, "U1")
    assert not ref_matches(parse_ref("U1"), None)
    assert ref_id(None) is None
    assert ref_id(parse_ref({"_id": "P9"})) == "P9"


def test_populated_and_id_ref_compare_by_id_only() -> None:
    assert Populated(id="U1", data={"name": "a"}) == Populated(id="U1", data={"name": "b"})


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, 0),
        (True, 0),
        (1500, 1500),
        (12.5, 12.5),
        ("2500", 2500),
        ("12.5", 12.5),
        ("abc", 0),
        (float("nan"), 0),
        (float("inf"), 0),
        ({"amount": 3}, 0),
    ],
)
def test_as_amount(value, expected) -> None:
    assert as_amount(value) == expected


def test_role_parse() -> None:
    assert Role.parse("Agent") is Role.AGENT
    assert Role.parse("admin") is Role.ADMIN
    assert Role.parse("superuser") is Role.BUYER
    assert Role.parse(None) is Role.BUYER


def test_identity_round_trip() -> None:
    ident = Identity.from_payload({"_id": "U1", "role": "Agent", "name": "Asha", "email": "a@x.in", "phone": "99"})
    assert ident is not None and ident.is_agent
    assert Identity.from_payload(ident.to_payload()) == ident
    assert Identity.from_payload({"name": "no id"}) is None
    assert Identity.from_payload("U1") is None


def test_session_requires_token_and_identity_together() -> None:
    ident = Identity(id="U1", role=Role.BUYER)
    assert Session(token="t", identity=ident).is_authenticated
    assert not Session().is_authenticated
    with pytest.raises(ValueError):
        Session(token="t")
    with pytest.raises(ValueError):
        Session(identity=ident)


def test_booking_from_payload() -> None:
    b = Booking.from_payload(
        {
            "_id": "B1",
            "status": "confirmed",
            "agent": {"_id": "U1"},
            "buyer": {"_id": "U5", "name": "Ravi", "email": "r@x.in"},
            "plot": {"_id": "P1", "plotNumber": "A-12", "area": 150},
            "totalAmount": 500000,
            "commissions": [{"agent": "U1", "amount": 15000}, "junk"],
            "bookingDate": "2024-05-01",
            "bookingNumber": "BK-0001",
        }
    )
    assert b is not None
    assert b.status == "confirmed" and b.is_approved and not b.is_pending
    assert b.buyer.get("name") == "Ravi"
    assert b.plot.get("plotNumber") == "A-12"
    assert b.total_amount == 500000
    assert len(b.commissions) == 1
    assert b.commissions[0].amount == 15000


def test_booking_status_is_case_sensitive() -> None:
    b = Booking.from_payload({"_id": "B1", "status": "Pending", "agent": "U1"})
    assert b.status == "Pending"
    assert not b.is_pending and not b.is_approved
    assert not Booking.from_payload({"_id": "B2", "status": "CONFIRMED"}).is_approved


def test_booking_without_commissions_field() -> None:
    b = Booking.from_payload({"_id": "B1", "status": "pending", "agent": "U1"})
    assert b.commissions is None
    assert Booking.from_payload(["not", "a", "booking"]) is None


def test_property_optional_nested_fields() -> None:
    p = Property.from_payload(
        {
            "_id": "P1",
            "name": "Green Valley",
            "city": {"name": "Udaipur"},
            "media": {"mainPicture": "/uploads/a.jpg", "moreImages": ["/uploads/b.jpg", None]},
            "coordinates": {"latitude": "24.58", "longitude": 73.71},
            "categories": ["Residential", "", "Commercial"],
            "basePricePerGaj": "4500",
        }
    )
    assert p.city_name == "Udaipur"
    assert p.media.main_picture == "/uploads/a.jpg"
    assert p.media.more_images == ("/uploads/b.jpg",)
    assert p.coordinates.latitude == pytest.approx(24.58)
    assert p.categories == ("Residential", "Commercial")
    assert p.base_price_per_gaj == 4500

    bare = Property.from_payload({"_id": "P2", "name": "Plain", "coordinates": {"latitude": 0, "longitude": 0}})
    assert bare.media is None
    assert bare.coordinates is None
    assert bare.categories == ()
    assert bare.base_price_per_gaj is None
