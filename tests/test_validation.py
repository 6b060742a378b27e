from __future__ import annotations

from datetime import datetime, timezone

import pytest

from ticket_summary.constants import ErrorKind
from ticket_summary.validation import build_ticket_error, validate_ticket


@pytest.mark.parametrize("priority", ["urgent", "", "lowest", "critical", " low", "P1"])
def test_unknown_priority_is_rejected_regardless_of_other_fields(make_ticket, reference_time, priority) -> None:
    ticket = make_ticket(
        ticket_priority=priority,
        ticket_created_at="not a date",
        customer_satisfaction_rating="99",
        time_to_resolve="-1",
    )
    result = validate_ticket(ticket, now=reference_time)

    assert result.kind is ErrorKind.PRIORITY
    assert not result.ok


@pytest.mark.parametrize("priority", ["low", "LOW", "Medium", "mEdIuM", "HIGH", "high"])
def test_priority_match_is_case_insensitive(make_ticket, reference_time, priority) -> None:
    assert validate_ticket(make_ticket(ticket_priority=priority), now=reference_time).ok


def test_creation_after_resolution_is_a_date_error(make_ticket, reference_time) -> None:
    ticket = make_ticket(
        ticket_created_at="2024-01-02T00:00:00Z",
        ticket_resolved_at="2024-01-01T00:00:00Z",
    )
    assert validate_ticket(ticket, now=reference_time).kind is ErrorKind.DATE


def test_creation_in_the_future_is_a_date_error(make_ticket, reference_time) -> None:
    ticket = make_ticket(
        ticket_created_at="2026-01-16T00:00:00Z",
        ticket_resolved_at="2026-01-17T00:00:00Z",
    )
    assert validate_ticket(ticket, now=reference_time).kind is ErrorKind.DATE


def test_future_resolution_is_accepted(make_ticket, reference_time) -> None:
    ticket = make_ticket(
        ticket_created_at="2026-01-14T00:00:00Z",
        ticket_resolved_at="2026-03-01T00:00:00Z",
    )
    assert validate_ticket(ticket, now=reference_time).ok


def test_same_creation_and_resolution_instant_is_accepted(make_ticket, reference_time) -> None:
    ticket = make_ticket(
        ticket_created_at="2024-01-01T00:00:00Z",
        ticket_resolved_at="2024-01-01T00:00:00Z",
    )
    assert validate_ticket(ticket, now=reference_time).ok


def test_timezone_offsets_are_compared_as_instants(make_ticket, reference_time) -> None:
    # 02:00+02:00 is midnight UTC, one hour before the resolution.
    ticket = make_ticket(
        ticket_created_at="2024-01-01T02:00:00+02:00",
        ticket_resolved_at="2024-01-01T01:00:00Z",
    )
    assert validate_ticket(ticket, now=reference_time).ok


@pytest.mark.parametrize("created", ["", "not a date", "2024-13-45"])
def test_unparseable_timestamp_is_a_date_error(make_ticket, reference_time, created) -> None:
    assert validate_ticket(make_ticket(ticket_created_at=created), now=reference_time).kind is ErrorKind.DATE


def test_now_defaults_to_current_time(make_ticket) -> None:
    future = make_ticket(ticket_created_at="2999-01-01T00:00:00Z", ticket_resolved_at="2999-01-02T00:00:00Z")
    assert validate_ticket(future).kind is ErrorKind.DATE
    assert validate_ticket(make_ticket()).ok


def test_aware_reference_time_is_supported(make_ticket) -> None:
    now = datetime(2024, 1, 1, 0, 30, tzinfo=timezone.utc)
    assert validate_ticket(make_ticket(), now=now).ok
    assert validate_ticket(make_ticket(ticket_created_at="2024-01-01T00:45:00Z"), now=now).kind is ErrorKind.DATE


@pytest.mark.parametrize("rating", ["0", "6", "-1", "abc", "", "  "])
def test_rating_outside_range_or_non_numeric_is_rejected(make_ticket, reference_time, rating) -> None:
    ticket = make_ticket(customer_satisfaction_rating=rating)
    assert validate_ticket(ticket, now=reference_time).kind is ErrorKind.RATING


@pytest.mark.parametrize("rating", ["1", "3", "5", " 5 "])
def test_rating_bounds_are_inclusive(make_ticket, reference_time, rating) -> None:
    assert validate_ticket(make_ticket(customer_satisfaction_rating=rating), now=reference_time).ok


@pytest.mark.parametrize("duration", ["0", "-5", "abc", ""])
def test_non_positive_or_non_numeric_duration_is_rejected(make_ticket, reference_time, duration) -> None:
    ticket = make_ticket(time_to_resolve=duration)
    assert validate_ticket(ticket, now=reference_time).kind is ErrorKind.TIME


def test_decimal_duration_uses_its_integer_part(make_ticket, reference_time) -> None:
    assert validate_ticket(make_ticket(time_to_resolve="120.75"), now=reference_time).ok
    assert validate_ticket(make_ticket(time_to_resolve="0.9"), now=reference_time).kind is ErrorKind.TIME


def test_first_failing_check_wins(make_ticket, reference_time) -> None:
    both_numbers_bad = make_ticket(customer_satisfaction_rating="9", time_to_resolve="0")
    assert validate_ticket(both_numbers_bad, now=reference_time).kind is ErrorKind.RATING

    date_and_rating_bad = make_ticket(
        ticket_created_at="2024-02-01T00:00:00Z",
        customer_satisfaction_rating="9",
    )
    assert validate_ticket(date_and_rating_bad, now=reference_time).kind is ErrorKind.DATE


def test_validation_is_pure(make_ticket, reference_time) -> None:
    ticket = make_ticket(ticket_priority="urgent")
    first = validate_ticket(ticket, now=reference_time)
    second = validate_ticket(ticket, now=reference_time)

    assert first == second
    assert first.message == "Err 1 - Priority Level Error"


def test_build_ticket_error(make_ticket, reference_time) -> None:
    ticket = make_ticket(ticket_id="42", customer_satisfaction_rating="6")
    error = build_ticket_error(ticket, validate_ticket(ticket, now=reference_time))

    assert error.as_tuple() == (42, ErrorKind.RATING, "Err 3 - Customer Rating Error")

    odd_id = make_ticket(ticket_id="TKT-9", time_to_resolve="0")
    assert build_ticket_error(odd_id, validate_ticket(odd_id, now=reference_time)).ticket_id is None


def test_build_ticket_error_rejects_valid_ticket(make_ticket, reference_time) -> None:
    ticket = make_ticket()
    with pytest.raises(ValueError):
        build_ticket_error(ticket, validate_ticket(ticket, now=reference_time))


@pytest.mark.parametrize("rating", ["٣", "３", " ", ""])
def test_non_ascii_or_blank_rating_is_rejected(make_ticket, reference_time, rating) -> None:
    result = validate_ticket(make_ticket(customer_satisfaction_rating=rating), now=reference_time)
    assert result.kind is ErrorKind.RATING
