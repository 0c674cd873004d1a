"""
Tests for agent aggregates: matching, commission lookup, status counters, malformed records.
"""

from __future__ import annotations

import copy
import math

import pytest

from estate_client.domains.aggregates import (
    AgentAggregate,
    agent_bookings,
    commission_for,
    derive_agent_aggregate,
)
from estate_client.domains.models import Booking


def test_pending_booking_without_commissions() -> None:
    bookings = [{"_id": "B1", "status": "pending", "agent": "U1", "totalAmount": 500000}]
    out = derive_agent_aggregate(bookings, "U1")
    assert out == AgentAggregate(total_bookings=1, pending_bookings=1, approved_bookings=0, total_commission=0)


def test_cancelled_booking_commission_still_counts() -> None:
    """Cancelled bookings add to total_commission but not to approved_bookings."""
    bookings = [
        {"_id": "B1", "status": "confirmed", "agent": "U1", "commissions": [{"agent": "U1", "amount": 15000}]},
        {"_id": "B2", "status": "cancelled", "agent": "U1", "commissions": [{"agent": "U1", "amount": 5000}]},
    ]
    out = derive_agent_aggregate(bookings, "U1")
    assert out.total_bookings == 2
    assert out.pending_bookings == 0
    assert out.approved_bookings == 1
    assert out.total_commission == 20000


def test_populated_and_bare_agent_refs_both_match() -> None:
    bookings = [
        {"_id": "B1", "status": "completed", "agent": {"_id": "U1", "name": "Asha"}},
        {"_id": "B2", "status": "confirmed", "agent": "U1"},
        {"_id": "B3", "status": "pending", "agent": {"_id": "U2"}},
        {"_id": "B4", "status": "pending", "agent": "U2"},
    ]
    mine = agent_bookings(bookings, "U1")
    assert [b.id for b in mine] == ["B1", "B2"]
    out = derive_agent_aggregate(bookings, "U1")
    assert out.total_bookings == 2
    assert out.approved_bookings == 2


def test_only_viewers_commission_entry_is_summed() -> None:
    bookings = [
        {
            "_id": "B1",
            "status": "confirmed",
            "agent": "U1",
            "commissions": [
                {"agent": {"_id": "U9"}, "amount": 99999},
                {"agent": {"_id": "U1", "name": "Asha"}, "amount": 12000},
            ],
        },
    ]
    assert derive_agent_aggregate(bookings, "U1").total_commission == 12000


def test_first_matching_commission_entry_wins() -> None:
    booking = Booking.from_payload(
        {"_id": "B1", "agent": "U1", "commissions": [{"agent": "U1", "amount": 100}, {"agent": "U1", "amount": 900}]}
    )
    assert commission_for(booking, "U1") == 100


def test_commission_on_other_agents_booking_is_ignored() -> None:
    bookings = [{"_id": "B1", "status": "confirmed", "agent": "U2", "commissions": [{"agent": "U1", "amount": 700}]}]
    out = derive_agent_aggregate(bookings, "U1")
    assert out.total_bookings == 0
    assert out.total_commission == 0


def test_malformed_records_contribute_zero() -> None:
    bookings = [
        None,
        "garbage",
        42,
        {"_id": "B1", "status": "pending", "agent": "U1", "commissions": "not-a-list"},
        {"_id": "B2", "status": "confirmed", "agent": "U1", "commissions": [{"agent": "U1"}]},
        {"_id": "B3", "status": "confirmed", "agent": "U1", "commissions": [None, {"amount": 10}]},
        {"_id": "B4", "status": "completed", "agent": "U1", "commissions": [{"agent": "U1", "amount": float("nan")}]},
        {"_id": "B5", "status": "completed", "agent": "U1", "commissions": [{"agent": "U1", "amount": "2500"}]},
        {"_id": "B6", "status": "pending"},
    ]
    out = derive_agent_aggregate(bookings, "U1")
    assert out.total_bookings == 5
    assert out.pending_bookings == 1
    assert out.approved_bookings == 4
    assert out.total_commission == 2500
    assert not math.isnan(out.total_commission)


def test_unknown_status_counts_toward_total_only() -> None:
    bookings = [
        {"_id": "B1", "status": "on_hold", "agent": "U1"},
        {"_id": "B2", "status": "cancelled", "agent": "U1"},
        {"_id": "B3", "status": "pending", "agent": "U1"},
    ]
    out = derive_agent_aggregate(bookings, "U1")
    assert out.total_bookings == 3
    assert out.pending_bookings + out.approved_bookings <= out.total_bookings
    assert out.pending_bookings == 1 and out.approved_bookings == 0


def test_missing_viewer_matches_nothing() -> None:
    """A booking with no agent must not match a viewer with no id."""
    bookings = [{"_id": "B1", "status": "pending"}, {"_id": "B2", "status": "pending", "agent": "U1"}]
    assert derive_agent_aggregate(bookings, None) == AgentAggregate()


@pytest.mark.parametrize("records", [None, [], ()])
def test_empty_input(records) -> None:
    assert derive_agent_aggregate(records, "U1") == AgentAggregate()


def test_input_not_mutated_and_result_deterministic() -> None:
    bookings = [
        {"_id": "B1", "status": "confirmed", "agent": {"_id": "U1"}, "commissions": [{"agent": "U1", "amount": 300}]},
        {"_id": "B2", "status": "pending", "agent": "U1", "commissions": [{"agent": {"_id": "U1"}, "amount": 200}]},
    ]
    before = copy.deepcopy(bookings)
    first = derive_agent_aggregate(bookings, "U1")
    second = derive_agent_aggregate(list(reversed(bookings)), "U1")
    assert bookings == before
    assert first == second
    assert first.total_commission == 500


def test_accepts_parsed_bookings() -> None:
    parsed = [Booking.from_payload({"_id": "B1", "status": "confirmed", "agent": "U1"})]
    out = derive_agent_aggregate(parsed, "U1")
    assert out.as_dict() == {
        "total_bookings": 1,
        "pending_bookings": 0,
        "approved_bookings": 1,
        "total_commission": 0,
    }
