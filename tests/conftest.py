from __future__ import annotations

from datetime import datetime
from typing import Callable

import pandas as pd
import pytest

from ticket_summary.models import Ticket


@pytest.fixture
def reference_time() -> datetime:
    return datetime(2026, 1, 15, 12, 0, 0)


@pytest.fixture
def make_ticket() -> Callable[..., Ticket]:
    def _make(**overrides: str) -> Ticket:
        values = {
            "ticket_id": "1",
            "ticket_created_at": "2024-01-01T00:00:00Z",
            "ticket_resolved_at": "2024-01-01T01:00:00Z",
            "time_to_resolve": "120",
            "assigned_team": "Alpha",
            "ticket_category": "Billing",
            "ticket_priority": "Low",
            "resolution_notes": "Refund issued",
            "customer_satisfaction_rating": "4",
        }
        values.update(overrides)
        return Ticket(**values)

    return _make


@pytest.fixture
def raw_ticket_records() -> list[dict[str, str]]:
    base = {
        "ticket_created_at": "2024-01-01T00:00:00Z",
        "ticket_resolved_at": "2024-01-01T01:00:00Z",
        "resolution_notes": "",
    }
    rows = [
        ("1", "Alpha", "Billing", "Low", "120", "4"),
        ("2", "Alpha", "Billing", "HIGH", "200", "5"),
        ("3", "Alpha", "Network", "medium", "3600", "3"),
        ("4", "Beta", "Billing", "low", "600", "2"),
        ("5", "Beta", "Billing", "urgent", "100", "3"),
        ("6", "Gamma", "Access", "high", "100", "3"),
        ("7", "Beta", "Access", "high", "100", "6"),
        ("8", "Beta", "Access", "high", "0", "3"),
    ]
    records = []
    for ticket_id, team, category, priority, duration, rating in rows:
        record = dict(base)
        record.update(
            {
                "ticket_id": ticket_id,
                "assigned_team": team,
                "ticket_category": category,
                "ticket_priority": priority,
                "time_to_resolve": duration,
                "customer_satisfaction_rating": rating,
            }
        )
        records.append(record)
    # Ticket 6 is created after the reference time used by the tests.
    records[5]["ticket_created_at"] = "2026-02-01T00:00:00Z"
    records[5]["ticket_resolved_at"] = "2026-02-02T00:00:00Z"
    return records


@pytest.fixture
def raw_ticket_df() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Ticket ID": ["101", "102", "103", "104"],
            "Created At": [
                "2025-12-01 08:00:00",
                "2025-12-02 10:00:00",
                "2025-12-03 09:00:00",
                "2025-12-04 08:00:00",
            ],
            "Resolved At": [
                "2025-12-01 11:00:00",
                "2025-12-02 21:00:00",
                "2025-12-02 09:00:00",
                "2025-12-04 09:30:00",
            ],
            "Resolution Time": [10800, 39600, 3600, 5400],
            "Assignment Group": ["Network Team", "Network Team", "Desktop Team", "Desktop Team"],
            "Category": ["VPN", "VPN", "Hardware", "Hardware"],
            "Priority": ["High", "low", "Medium", "medium"],
            "CSAT": [5, 4, 3, 2],
        }
    )
