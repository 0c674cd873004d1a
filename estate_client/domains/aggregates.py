"""
Role-scoped statistics derived from a booking collection.

Everything here is a pure function of (bookings, viewer id): nothing is cached,
nothing in the input is mutated, and malformed records contribute zero instead
of aborting the computation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from estate_client.domains.models import Booking
from estate_client.domains.refs import ref_matches
from estate_client.utils.logger import get_logger

logger = get_logger()


@dataclass(frozen=True)
class AgentAggregate:
    total_bookings: int = 0
    pending_bookings: int = 0
    approved_bookings: int = 0
    total_commission: float | int = 0

    def as_dict(self) -> dict[str, Any]:
        return {
            "total_bookings": self.total_bookings,
            "pending_bookings": self.pending_bookings,
            "approved_bookings": self.approved_bookings,
            "total_commission": self.total_commission,
        }


def _coerce(records: Iterable[Booking | Mapping[str, Any]] | None) -> list[Booking]:
    out: list[Booking] = []
    skipped = 0
    for rec in records or ():
        if isinstance(rec, Booking):
            out.append(rec)
            continue
        parsed = Booking.from_payload(rec)
        if parsed is None:
            skipped += 1
            continue
        out.append(parsed)
    if skipped:
        logger.debug("Skipped %d non-booking records during aggregation", skipped)
    return out


def agent_bookings(
    bookings: Iterable[Booking | Mapping[str, Any]] | None,
    viewer_id: Any,
) -> list[Booking]:
    """Bookings whose agent is `viewer_id`, in input order."""
    return [b for b in _coerce(bookings) if ref_matches(b.agent, viewer_id)]


def commission_for(booking: Booking, viewer_id: Any) -> float | int:
    """
    Amount of the first commission entry that belongs to `viewer_id`.

    A booking may list commissions for several agents; only the viewer's entry
    counts. No commissions, no matching entry, or no amount all give 0.
    """
    for entry in booking.commissions or ():
        if ref_matches(entry.agent, viewer_id):
            return entry.amount
    return 0


def derive_agent_aggregate(
    bookings: Iterable[Booking | Mapping[str, Any]] | None,
    viewer_id: Any,
) -> AgentAggregate:
    """
    Compute dashboard statistics for the agent `viewer_id`.

    Args:
        bookings: Parsed bookings or raw booking payloads, in any order.
        viewer_id: Identity id of the agent viewing the dashboard.

    Returns:
        AgentAggregate. Cancelled bookings count toward total_bookings and
        total_commission but toward neither pending nor approved.

    Example:
        >>> derive_agent_aggregate([{"status": "pending", "agent": "U1"}], "U1")
        AgentAggregate(total_bookings=1, pending_bookings=1, approved_bookings=0, total_commission=0)
    """
    mine = agent_bookings(bookings, viewer_id)
    total_commission: float | int = 0
    for b in mine:
        total_commission += commission_for(b, viewer_id)
    return AgentAggregate(
        total_bookings=len(mine),
        pending_bookings=sum(1 for b in mine if b.is_pending),
        approved_bookings=sum(1 for b in mine if b.is_approved),
        total_commission=total_commission,
    )
