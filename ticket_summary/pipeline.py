"""Batch orchestration: validate, aggregate, summarize."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Mapping, Union

import pandas as pd
from plotly.graph_objs import Figure

from .aggregation import AggregateStore, TeamSummary, record_ticket
from .config import Settings
from .messaging import ReportMessage, build_report_message
from .models import Ticket, TicketError
from .preprocessing import load_ticket_frame, ticket_from_record, tickets_from_frame
from .report import build_error_frame, build_summary_frame, render_html_report, render_text_report
from .validation import build_ticket_error, validate_ticket
from .visualization import build_team_figure

logger = logging.getLogger(__name__)

TicketSource = Union[pd.DataFrame, Iterable[Union[Ticket, Mapping[str, Any]]]]


@dataclass
class BatchResult:
    summaries: dict[str, TeamSummary] = field(default_factory=dict)
    errors: list[TicketError] = field(default_factory=list)

    @property
    def accepted_count(self) -> int:
        return sum(summary.total_tickets for summary in self.summaries.values())

    @property
    def rejected_count(self) -> int:
        return len(self.errors)


def _iter_tickets(raw: TicketSource) -> Iterable[Ticket]:
    if isinstance(raw, pd.DataFrame):
        yield from tickets_from_frame(raw)
        return
    for item in raw:
        yield item if isinstance(item, Ticket) else ticket_from_record(item)


def run_ticket_pipeline(raw: TicketSource, now: datetime | None = None) -> BatchResult:
    store = AggregateStore()
    errors: list[TicketError] = []

    for ticket in _iter_tickets(raw):
        result = validate_ticket(ticket, now=now)
        if not result.ok:
            error = build_ticket_error(ticket, result)
            logger.debug("Rejected ticket %s: %s", ticket.ticket_id, error.message)
            errors.append(error)
            continue
        record_ticket(store, ticket)

    batch = BatchResult(summaries=store.summaries(), errors=errors)
    logger.info(
        "Processed batch: %d teams, %d tickets accepted, %d rejected",
        len(batch.summaries),
        batch.accepted_count,
        batch.rejected_count,
    )
    return batch


@dataclass
class TicketSummarySession:
    result: BatchResult

    @classmethod
    def from_records(
        cls,
        records: Iterable[Ticket | Mapping[str, Any]],
        now: datetime | None = None,
    ) -> "TicketSummarySession":
        return cls(run_ticket_pipeline(records, now=now))

    @classmethod
    def from_dataframe(cls, raw_df: pd.DataFrame, now: datetime | None = None) -> "TicketSummarySession":
        return cls(run_ticket_pipeline(raw_df, now=now))

    @classmethod
    def from_file(cls, path: str | Path, now: datetime | None = None) -> "TicketSummarySession":
        return cls.from_dataframe(load_ticket_frame(path), now=now)

    def html(self) -> str:
        return render_html_report(self.result)

    def text(self) -> str:
        return render_text_report(self.result)

    def summary_frame(self) -> pd.DataFrame:
        return build_summary_frame(self.result)

    def error_frame(self) -> pd.DataFrame:
        return build_error_frame(self.result.errors)

    def figure(self) -> Figure | None:
        return build_team_figure(self.result)

    def message(self, settings: Settings | None = None) -> ReportMessage:
        return build_report_message(self.result, settings=settings)
