from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from app.services.ramadan import (
    DayAggregate,
    aggregate_requests,
    day_count_warning,
    day_status,
    default_booking_window,
    draft_day_count,
    enumerate_days,
    estimated_range,
)


def test_enumerate_days_spans_month_boundary():
    days = enumerate_days(date(2026, 2, 28), date(2026, 3, 1))
    assert days == [(1, date(2026, 2, 28)), (2, date(2026, 3, 1))]


def test_enumerate_days_single_day_and_contiguous_numbering():
    assert enumerate_days(date(2026, 3, 5), date(2026, 3, 5)) == [(1, date(2026, 3, 5))]

    days = enumerate_days(date(2026, 2, 28), date(2026, 3, 29))
    assert len(days) == 30
    assert [number for number, _ in days] == list(range(1, 31))
    assert days[-1] == (30, date(2026, 3, 29))


def test_enumerate_days_rejects_inverted_range():
    with pytest.raises(ValueError, match="Start date must be before or equal to end date."):
        enumerate_days(date(2026, 3, 2), date(2026, 3, 1))


def test_draft_day_count_and_warning():
    assert draft_day_count(date(2026, 2, 28), date(2026, 3, 28)) == 29
    assert draft_day_count(None, date(2026, 3, 28)) is None
    assert draft_day_count(date(2026, 3, 28), date(2026, 2, 28)) is None

    assert day_count_warning(29) is None
    assert day_count_warning(30) is None
    assert day_count_warning(None) is None
    assert "has 31" in day_count_warning(31)
    assert "has 2" in day_count_warning(2)


def test_estimated_range_for_2026():
    estimate = estimated_range()
    assert estimate.start_date == date(2026, 2, 28)
    assert estimate.end_date == date(2026, 3, 29)
    assert estimate.day_count == 30
    assert estimate.warning is None


def test_aggregate_requests_counts_totals_and_approvals():
    aggregates = aggregate_requests(
        [
            (10, "requested"),
            (10, "approved"),
            (10, "rejected"),
            (11, "requested"),
        ]
    )
    assert aggregates[10].total_requests == 3
    assert aggregates[10].approved_requests == 1
    assert aggregates[11].total_requests == 1
    assert aggregates[11].approved_requests == 0
    assert 12 not in aggregates


def test_day_status_priority():
    pending = DayAggregate(day_id=1, total_requests=2, approved_requests=0)
    approved = DayAggregate(day_id=1, total_requests=2, approved_requests=1)

    assert day_status(False, approved) == "Closed"
    assert day_status(False, None) == "Closed"
    assert day_status(True, None) == "Available"
    assert day_status(True, DayAggregate(day_id=1)) == "Available"
    assert day_status(True, approved) == "Approved"
    assert day_status(True, pending) == "Taken (pending)"


def test_default_booking_window_ends_day_before_start():
    now = datetime(2026, 1, 10, 9, 30, tzinfo=timezone.utc)
    window = default_booking_window(date(2026, 2, 28), now=now)
    assert window.booking_start == now
    assert window.booking_end == datetime(2026, 2, 27, 0, 0, tzinfo=timezone.utc)
