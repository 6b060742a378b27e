"""Environment-driven settings and logging setup."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    mail_to: str = "null@example.org"
    mail_from: str = "null@example.org"
    mail_subject: str = "Ticket Summary By-Team"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            mail_to=os.getenv("TICKET_SUMMARY_MAIL_TO", defaults.mail_to),
            mail_from=os.getenv("TICKET_SUMMARY_MAIL_FROM", defaults.mail_from),
            mail_subject=os.getenv("TICKET_SUMMARY_MAIL_SUBJECT", defaults.mail_subject),
            log_level=os.getenv("TICKET_SUMMARY_LOG_LEVEL", defaults.log_level).upper(),
        )


def setup_logging(level: str | None = None) -> None:
    if level is None:
        level = Settings.from_env().log_level
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
