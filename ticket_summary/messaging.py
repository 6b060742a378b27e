"""Outbound message envelope carrying the rendered report."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .config import Settings
from .report import render_html_report, render_text_report

if TYPE_CHECKING:
    from .pipeline import BatchResult


@dataclass
class ReportMessage:
    to: str
    sender: str
    subject: str
    html: str
    text: str
    attachments: list[Any] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "to": self.to,
            "from": self.sender,
            "subject": self.subject,
            "body": {"html": self.html, "text": self.text},
            "attachments": list(self.attachments),
        }


def build_report_message(result: "BatchResult", settings: Settings | None = None) -> ReportMessage:
    if settings is None:
        settings = Settings.from_env()
    return ReportMessage(
        to=settings.mail_to,
        sender=settings.mail_from,
        subject=settings.mail_subject,
        html=render_html_report(result),
        text=render_text_report(result),
    )
