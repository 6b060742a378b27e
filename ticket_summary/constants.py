"""Constants and enumerations for team ticket summaries."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Dict, List


class Priority(IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2
    # Roll-up slot, only ever computed for reporting.
    ALL = 3

    @property
    def label(self) -> str:
        return self.name.lower()


class Metric(IntEnum):
    COUNT = 0
    TIME = 1
    SCORE = 2

    @property
    def label(self) -> str:
        return self.name.lower()


class ErrorKind(Enum):
    PRIORITY = 1
    DATE = 2
    RATING = 3
    TIME = 4

    @property
    def code(self) -> int:
        return self.value


TICKET_PRIORITIES = (Priority.LOW, Priority.MEDIUM, Priority.HIGH)
REPORT_PRIORITIES = TICKET_PRIORITIES + (Priority.ALL,)
METRICS = (Metric.COUNT, Metric.TIME, Metric.SCORE)

PRIORITY_BY_LABEL: Dict[str, Priority] = {priority.label: priority for priority in TICKET_PRIORITIES}

ERROR_DESCRIPTIONS: Dict[ErrorKind, str] = {
    ErrorKind.PRIORITY: "Priority Level Error",
    ErrorKind.DATE: "Date Error",
    ErrorKind.RATING: "Customer Rating Error",
    ErrorKind.TIME: "Resolution Time Error",
}

MIN_RATING = 1
MAX_RATING = 5

SECONDS_PER_HOUR = 3600

TICKET_FIELDS: List[str] = [
    "ticket_id",
    "ticket_created_at",
    "ticket_resolved_at",
    "time_to_resolve",
    "assigned_team",
    "ticket_category",
    "ticket_priority",
    "resolution_notes",
    "customer_satisfaction_rating",
]

COLUMN_ALIASES: Dict[str, List[str]] = {
    "ticket_id": ["ticket_id", "id", "incident_id", "ticket_number", "incident_number", "number"],
    "ticket_created_at": ["ticket_created_at", "created_at", "opened_at", "created", "opened", "open_time"],
    "ticket_resolved_at": ["ticket_resolved_at", "resolved_at", "closed_at", "resolved", "closed"],
    "time_to_resolve": ["time_to_resolve", "resolution_time", "resolution_duration", "ttr", "mttr"],
    "assigned_team": ["assigned_team", "team", "assignment_group", "resolver_group", "support_group"],
    "ticket_category": ["ticket_category", "category", "incident_category", "issue_type"],
    "ticket_priority": ["ticket_priority", "priority", "severity", "urgency"],
    "resolution_notes": ["resolution_notes", "notes", "closure_notes", "resolution"],
    "customer_satisfaction_rating": [
        "customer_satisfaction_rating",
        "satisfaction_rating",
        "csat",
        "rating",
        "customer_rating",
    ],
}

REPORT_TABLE_HEADERS = [
    "Team",
    "Category",
    "Total Tickets",
    "Total Time",
    "Average Time per Ticket",
    "Average Cust. Rating",
]

TEAM_ROW_COLORS = ("#FFF", "#F0FFFF")
