"""Ticket records and validation outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .constants import ERROR_DESCRIPTIONS, ErrorKind


@dataclass(frozen=True)
class Ticket:
    ticket_id: str
    ticket_created_at: str
    ticket_resolved_at: str
    time_to_resolve: str
    assigned_team: str
    ticket_category: str
    ticket_priority: str
    resolution_notes: str = ""
    customer_satisfaction_rating: str = ""


@dataclass(frozen=True)
class ValidationResult:
    """Verdict for a single ticket: ``kind`` is ``None`` when the ticket is usable."""

    kind: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.kind is None

    @property
    def message(self) -> str:
        if self.kind is None:
            return "Ticket Okay"
        return f"Err {self.kind.code} - {ERROR_DESCRIPTIONS[self.kind]}"


VALID = ValidationResult()


@dataclass(frozen=True)
class TicketError:
    ticket_id: int | None
    kind: ErrorKind
    message: str

    def as_tuple(self) -> tuple[int | None, ErrorKind, str]:
        return (self.ticket_id, self.kind, self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ticket_id": self.ticket_id,
            "error_code": self.kind.code,
            "error_kind": self.kind.name,
            "message": self.message,
        }
