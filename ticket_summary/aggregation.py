"""Per-team accumulation of ticket metrics by category and priority."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterator, Mapping

import numpy as np
import pandas as pd

from .constants import (
    MAX_RATING,
    METRICS,
    MIN_RATING,
    PRIORITY_BY_LABEL,
    REPORT_PRIORITIES,
    TICKET_PRIORITIES,
    Metric,
    Priority,
)
from .models import Ticket
from .preprocessing import parse_int_text


class ContractViolation(AssertionError):
    """A ticket reached the aggregator without satisfying validation."""


class CategoryMetrics:
    """Read-only priority x metric table for one category, including the ALL row."""

    __slots__ = ("_rows",)

    def __init__(self, rows: np.ndarray) -> None:
        if rows.shape != (len(REPORT_PRIORITIES), len(METRICS)):
            raise ValueError(f"Unexpected metrics shape {rows.shape}")
        frozen = rows.copy()
        frozen.setflags(write=False)
        self._rows = frozen

    def value(self, priority: Priority, metric: Metric) -> int:
        return int(self._rows[priority, metric])

    def row(self, priority: Priority) -> dict[Metric, int]:
        return {metric: self.value(priority, metric) for metric in METRICS}

    def column(self, metric: Metric) -> dict[Priority, int]:
        return {priority: self.value(priority, metric) for priority in REPORT_PRIORITIES}

    def as_dict(self) -> dict[str, dict[str, int]]:
        return {
            priority.label: {metric.label: self.value(priority, metric) for metric in METRICS}
            for priority in REPORT_PRIORITIES
        }

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            self._rows.copy(),
            index=[priority.label for priority in REPORT_PRIORITIES],
            columns=[metric.label for metric in METRICS],
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CategoryMetrics):
            return NotImplemented
        return bool(np.array_equal(self._rows, other._rows))

    def __repr__(self) -> str:
        return f"CategoryMetrics({self.as_dict()!r})"


class MetricsMatrix:
    """Mutable LOW/MEDIUM/HIGH x COUNT/TIME/SCORE counters for one (team, category)."""

    __slots__ = ("_cells",)

    def __init__(self) -> None:
        # Python int cells; sums never wrap.
        self._cells = np.zeros((len(TICKET_PRIORITIES), len(METRICS)), dtype=object)

    def add(self, priority: Priority, duration: int, score: int) -> None:
        if priority not in TICKET_PRIORITIES:
            raise ContractViolation(f"Cannot record a ticket under priority {priority.name}")
        self._cells[priority, Metric.COUNT] += 1
        self._cells[priority, Metric.TIME] += duration
        self._cells[priority, Metric.SCORE] += score

    def value(self, priority: Priority, metric: Metric) -> int:
        if priority not in TICKET_PRIORITIES:
            raise KeyError(f"{priority.name} is derived; use snapshot() to read it")
        return int(self._cells[priority, metric])

    def total(self, metric: Metric) -> int:
        return int(self._cells[:, metric].sum())

    def snapshot(self) -> CategoryMetrics:
        # ALL is rebuilt from the stored rows on every call and never written back.
        roll_up = self._cells.sum(axis=0, keepdims=True)
        return CategoryMetrics(np.vstack([self._cells, roll_up]))


@dataclass(frozen=True)
class TeamSummary:
    team_name: str
    categories: Mapping[str, CategoryMetrics]
    total_tickets: int
    total_time: int
    total_score: int

    def sorted_categories(self) -> list[tuple[str, CategoryMetrics]]:
        return sorted(self.categories.items(), key=lambda item: item[0])

    def to_dict(self) -> dict[str, Any]:
        return {
            "team_name": self.team_name,
            "total_tickets": self.total_tickets,
            "total_time": self.total_time,
            "total_score": self.total_score,
            "categories": {name: metrics.as_dict() for name, metrics in self.sorted_categories()},
        }


def _ticket_priority(ticket: Ticket) -> Priority:
    priority = PRIORITY_BY_LABEL.get(ticket.ticket_priority.lower())
    if priority is None:
        raise ContractViolation(
            f"Ticket {ticket.ticket_id!r} has unrecognised priority {ticket.ticket_priority!r}"
        )
    return priority


def _ticket_numbers(ticket: Ticket) -> tuple[int, int]:
    duration = parse_int_text(ticket.time_to_resolve)
    rating = parse_int_text(ticket.customer_satisfaction_rating)
    if duration is None or duration <= 0:
        raise ContractViolation(f"Ticket {ticket.ticket_id!r} has invalid duration {ticket.time_to_resolve!r}")
    if rating is None or not MIN_RATING <= rating <= MAX_RATING:
        raise ContractViolation(
            f"Ticket {ticket.ticket_id!r} has invalid rating {ticket.customer_satisfaction_rating!r}"
        )
    return duration, rating


class TeamAggregate:
    """Running totals for one team plus a matrix per category it handled."""

    def __init__(self, team_name: str) -> None:
        self._team_name = team_name
        self._categories: dict[str, MetricsMatrix] = {}
        self.total_tickets = 0
        self.total_time = 0
        self.total_score = 0

    @property
    def team_name(self) -> str:
        return self._team_name

    @property
    def category_names(self) -> list[str]:
        return list(self._categories)

    def matrix(self, category: str) -> MetricsMatrix:
        return self._categories[category]

    def record(self, ticket: Ticket) -> None:
        if ticket.assigned_team != self._team_name:
            raise ContractViolation(
                f"Ticket {ticket.ticket_id!r} belongs to {ticket.assigned_team!r}, not {self._team_name!r}"
            )
        priority = _ticket_priority(ticket)
        duration, rating = _ticket_numbers(ticket)

        matrix = self._categories.get(ticket.ticket_category)
        if matrix is None:
            matrix = MetricsMatrix()
            self._categories[ticket.ticket_category] = matrix

        matrix.add(priority, duration, rating)
        self.total_tickets += 1
        self.total_time += duration
        self.total_score += rating

    def summarize(self) -> TeamSummary:
        snapshots = {name: matrix.snapshot() for name, matrix in self._categories.items()}
        return TeamSummary(
            team_name=self._team_name,
            categories=MappingProxyType(snapshots),
            total_tickets=self.total_tickets,
            total_time=self.total_time,
            total_score=self.total_score,
        )


class AggregateStore:
    """Team name -> TeamAggregate for a single batch."""

    def __init__(self) -> None:
        self._teams: dict[str, TeamAggregate] = {}

    def get_or_create(self, team_name: str) -> TeamAggregate:
        aggregate = self._teams.get(team_name)
        if aggregate is None:
            aggregate = TeamAggregate(team_name)
            self._teams[team_name] = aggregate
        return aggregate

    def __getitem__(self, team_name: str) -> TeamAggregate:
        return self._teams[team_name]

    def __contains__(self, team_name: object) -> bool:
        return team_name in self._teams

    def __iter__(self) -> Iterator[str]:
        return iter(self._teams)

    def __len__(self) -> int:
        return len(self._teams)

    def summaries(self) -> dict[str, TeamSummary]:
        return {name: aggregate.summarize() for name, aggregate in self._teams.items()}


def record_ticket(store: AggregateStore, ticket: Ticket) -> TeamAggregate:
    # Check the ticket before creating the team so a bad ticket leaves the store untouched.
    _ticket_priority(ticket)
    _ticket_numbers(ticket)
    aggregate = store.get_or_create(ticket.assigned_team)
    aggregate.record(ticket)
    return aggregate


def summarize(aggregate: TeamAggregate) -> TeamSummary:
    return aggregate.summarize()
