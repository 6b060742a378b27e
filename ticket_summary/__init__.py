"""Team ticket summary package."""

from .aggregation import AggregateStore, TeamAggregate, TeamSummary, record_ticket, summarize
from .pipeline import BatchResult, TicketSummarySession, run_ticket_pipeline
from .validation import validate_ticket

__all__ = [
    "AggregateStore",
    "BatchResult",
    "TeamAggregate",
    "TeamSummary",
    "TicketSummarySession",
    "record_ticket",
    "run_ticket_pipeline",
    "summarize",
    "validate_ticket",
]
