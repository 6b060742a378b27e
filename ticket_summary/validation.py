"""Validation rules deciding whether a ticket can be aggregated."""

from __future__ import annotations

from datetime import datetime, timezone

import pandas as pd

from .constants import MAX_RATING, MIN_RATING, PRIORITY_BY_LABEL, ErrorKind
from .models import VALID, Ticket, TicketError, ValidationResult
from .preprocessing import parse_int_text, parse_timestamp


def _reference_instant(now: datetime | None) -> pd.Timestamp:
    if now is None:
        return pd.Timestamp(datetime.now(timezone.utc))
    stamp = pd.Timestamp(now)
    if stamp.tzinfo is None:
        return stamp.tz_localize("UTC")
    return stamp.tz_convert("UTC")


def _priority_ok(ticket: Ticket) -> bool:
    return ticket.ticket_priority.lower() in PRIORITY_BY_LABEL


def _dates_ok(ticket: Ticket, now: pd.Timestamp) -> bool:
    created = parse_timestamp(ticket.ticket_created_at)
    resolved = parse_timestamp(ticket.ticket_resolved_at)
    if created is None or resolved is None:
        return False
    # Resolution instants later than ``now`` are accepted.
    return not (created > now or created > resolved)


def _rating_ok(ticket: Ticket) -> bool:
    rating = parse_int_text(ticket.customer_satisfaction_rating)
    return rating is not None and MIN_RATING <= rating <= MAX_RATING


def _time_ok(ticket: Ticket) -> bool:
    duration = parse_int_text(ticket.time_to_resolve)
    return duration is not None and duration > 0


def validate_ticket(ticket: Ticket, now: datetime | None = None) -> ValidationResult:
    """Run the checks in order and report the first failing one.

    The checks are priority label, creation/resolution dates, satisfaction
    rating and resolution time. Nothing is recorded here; callers decide what
    to do with a rejected ticket.
    """
    if not _priority_ok(ticket):
        return ValidationResult(ErrorKind.PRIORITY)
    if not _dates_ok(ticket, _reference_instant(now)):
        return ValidationResult(ErrorKind.DATE)
    if not _rating_ok(ticket):
        return ValidationResult(ErrorKind.RATING)
    if not _time_ok(ticket):
        return ValidationResult(ErrorKind.TIME)
    return VALID


def build_ticket_error(ticket: Ticket, result: ValidationResult) -> TicketError:
    if result.kind is None:
        raise ValueError(f"Ticket {ticket.ticket_id!r} passed validation and has no error")
    return TicketError(
        ticket_id=parse_int_text(ticket.ticket_id),
        kind=result.kind,
        message=result.message,
    )
