"""HTML, text and tabular renditions of a processed ticket batch."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Sequence

import numpy as np
import pandas as pd
from jinja2 import Template

from .aggregation import CategoryMetrics, TeamSummary
from .constants import (
    REPORT_PRIORITIES,
    REPORT_TABLE_HEADERS,
    SECONDS_PER_HOUR,
    TEAM_ROW_COLORS,
    TICKET_PRIORITIES,
    Metric,
    Priority,
)
from .models import TicketError

if TYPE_CHECKING:
    from .pipeline import BatchResult

SUMMARY_FRAME_COLUMNS = [
    "team",
    "category",
    "priority",
    "count",
    "time_seconds",
    "score",
    "avg_time_hours",
    "avg_rating",
]

ERROR_FRAME_COLUMNS = ["ticket_id", "error_code", "error_kind", "message"]

HTML_TEMPLATE = Template(
    """
<table>
  <style>
    table, td, th { border: 1px solid black; }
    table { border-collapse: collapse; }
    td, th { text-align: left; padding: 0.2rem 0.5rem; }
    [class*="hint--"] { display: table-cell !important; }
  </style>
  <link rel="stylesheet" href="https://cdnjs.cloudflare.com/ajax/libs/hint.css/3.0.0/hint.min.css" />
  <caption>Ticket Summary By-Team</caption>
  <thead>
    <tr>{% for header in headers %}<th scope="col">{{ header }}</th>{% endfor %}</tr>
  </thead>
  <tbody>
{% for team in teams %}
{% if not loop.first %}
    <tr><td style="border: none"></td></tr>
{% endif %}
{% for row in team.rows %}
    <tr style="background-color: {{ team.color }};">
      <td>{{ row.team }}</td>
      <td>{{ row.category }}</td>
{% for cell in row.cells %}
      <td class="hint--right hint--no-animate" data-hint="{{ cell.hint }}">{{ cell.text }}</td>
{% endfor %}
    </tr>
{% endfor %}
    <tr style="font-weight: bold; background-color: {{ team.color }};">
      <td></td>
      <td style="text-align: right">Totals:</td>
{% for text in team.totals %}
      <td>{{ text }}</td>
{% endfor %}
    </tr>
{% endfor %}
  </tbody>
  <tfoot>
    <tr><td colspan="{{ headers|length }}" style="text-align: right; border: none">{{ error_count }} tickets excluded due to data errors</td></tr>
  </tfoot>
</table>
{% if errors %}
<table>
  <caption>Excluded Tickets</caption>
  <thead>
    <tr><th scope="col">Ticket</th><th scope="col">Error</th><th scope="col">Message</th></tr>
  </thead>
  <tbody>
{% for error in errors %}
    <tr><td>{{ error.ticket_id if error.ticket_id is not none else "-" }}</td><td>{{ error.kind.name }}</td><td>{{ error.message }}</td></tr>
{% endfor %}
  </tbody>
</table>
{% endif %}
""",
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
)


def _ratio(num: float, den: float) -> float | None:
    if den == 0:
        return None
    return float(num) / float(den)


def _fmt(value: float | None, suffix: str = "") -> str:
    if value is None:
        return "n/a"
    return f"{value:.1f}{suffix}"


def _hours(seconds: float | None) -> float | None:
    if seconds is None:
        return None
    return seconds / SECONDS_PER_HOUR


def _share(part: int, whole: int) -> str:
    ratio = _ratio(part, whole)
    return "" if ratio is None else f" (~{ratio * 100:.1f}%)"


def _priority_hint(render: Callable[[Priority], object]) -> str:
    parts = [f"{priority.name[0]}-{render(priority)}" for priority in TICKET_PRIORITIES]
    return " ".join(parts)


def _category_cells(metrics: CategoryMetrics, team: TeamSummary) -> list[dict[str, str]]:
    count = metrics.value(Priority.ALL, Metric.COUNT)
    time = metrics.value(Priority.ALL, Metric.TIME)
    score = metrics.value(Priority.ALL, Metric.SCORE)

    def _avg_hours(priority: Priority) -> str:
        avg = _ratio(metrics.value(priority, Metric.TIME), metrics.value(priority, Metric.COUNT))
        return _fmt(_hours(avg), "hrs")

    def _avg_score(priority: Priority) -> str:
        return _fmt(_ratio(metrics.value(priority, Metric.SCORE), metrics.value(priority, Metric.COUNT)))

    return [
        {
            "text": f"{count}{_share(count, team.total_tickets)}",
            "hint": _priority_hint(lambda p: metrics.value(p, Metric.COUNT)),
        },
        {
            "text": f"{_fmt(_hours(time))} hrs{_share(time, team.total_time)}",
            "hint": _priority_hint(lambda p: _fmt(_hours(metrics.value(p, Metric.TIME)), "hrs")),
        },
        {
            "text": f"{_fmt(_hours(_ratio(time, count)))} hrs average",
            "hint": _priority_hint(_avg_hours),
        },
        {
            "text": f"{_fmt(_ratio(score, count))} average",
            "hint": _priority_hint(_avg_score),
        },
    ]


def _team_context(team: TeamSummary, color: str) -> dict[str, Any]:
    rows = []
    for index, (category, metrics) in enumerate(team.sorted_categories()):
        rows.append(
            {
                "team": team.team_name if index == 0 else "",
                "category": category,
                "cells": _category_cells(metrics, team),
            }
        )
    totals = [
        str(team.total_tickets),
        f"{_fmt(_hours(team.total_time))} hrs",
        f"{_fmt(_hours(_ratio(team.total_time, team.total_tickets)))} hrs average",
        f"{_fmt(_ratio(team.total_score, team.total_tickets))} average rating",
    ]
    return {"name": team.team_name, "color": color, "rows": rows, "totals": totals}


def _sorted_teams(result: "BatchResult") -> list[TeamSummary]:
    return [result.summaries[name] for name in sorted(result.summaries)]


def build_report_context(result: "BatchResult") -> dict[str, Any]:
    teams = [
        _team_context(team, TEAM_ROW_COLORS[index % len(TEAM_ROW_COLORS)])
        for index, team in enumerate(_sorted_teams(result))
    ]
    return {
        "headers": REPORT_TABLE_HEADERS,
        "teams": teams,
        "errors": list(result.errors),
        "error_count": len(result.errors),
    }


def render_html_report(result: "BatchResult") -> str:
    return HTML_TEMPLATE.render(**build_report_context(result)).strip()


def render_text_report(result: "BatchResult") -> str:
    lines: list[str] = ["Ticket Summary By-Team", ""]
    for team in _sorted_teams(result):
        lines.append(
            f"{team.team_name}: {team.total_tickets} tickets, "
            f"{_fmt(_hours(team.total_time))} hrs total, "
            f"{_fmt(_ratio(team.total_score, team.total_tickets))} average rating"
        )
        for category, metrics in team.sorted_categories():
            count = metrics.value(Priority.ALL, Metric.COUNT)
            time = metrics.value(Priority.ALL, Metric.TIME)
            score = metrics.value(Priority.ALL, Metric.SCORE)
            lines.append(
                f"  {category}: {count} tickets, "
                f"{_fmt(_hours(_ratio(time, count)))} hrs average, "
                f"{_fmt(_ratio(score, count))} average rating"
            )
        lines.append("")
    lines.append(f"{len(result.errors)} tickets excluded due to data errors")
    return "\n".join(lines)


def build_summary_frame(result: "BatchResult") -> pd.DataFrame:
    records: list[dict[str, Any]] = []
    for team in _sorted_teams(result):
        for category, metrics in team.sorted_categories():
            for priority in REPORT_PRIORITIES:
                records.append(
                    {
                        "team": team.team_name,
                        "category": category,
                        "priority": priority.label,
                        "count": metrics.value(priority, Metric.COUNT),
                        "time_seconds": metrics.value(priority, Metric.TIME),
                        "score": metrics.value(priority, Metric.SCORE),
                    }
                )

    frame = pd.DataFrame.from_records(records, columns=SUMMARY_FRAME_COLUMNS[:6])
    counts = frame["count"].astype(float)
    frame["avg_time_hours"] = np.where(
        counts > 0, frame["time_seconds"] / counts.where(counts > 0, 1) / SECONDS_PER_HOUR, np.nan
    )
    frame["avg_rating"] = np.where(counts > 0, frame["score"] / counts.where(counts > 0, 1), np.nan)
    return frame[SUMMARY_FRAME_COLUMNS]


def build_error_frame(errors: Sequence[TicketError]) -> pd.DataFrame:
    return pd.DataFrame.from_records([error.to_dict() for error in errors], columns=ERROR_FRAME_COLUMNS)
