"""Plotly charts for team ticket summaries."""

from __future__ import annotations

from typing import TYPE_CHECKING

import plotly.express as px
from plotly.graph_objs import Figure

from .constants import TICKET_PRIORITIES
from .report import build_summary_frame

if TYPE_CHECKING:
    from .pipeline import BatchResult


def build_team_figure(result: "BatchResult", title: str = "Tickets by Team and Priority") -> Figure | None:
    frame = build_summary_frame(result)
    if frame.empty:
        return None

    labels = [priority.label for priority in TICKET_PRIORITIES]
    by_priority = (
        frame[frame["priority"].isin(labels)]
        .groupby(["team", "priority"], as_index=False)["count"]
        .sum()
    )
    return px.bar(
        by_priority,
        x="team",
        y="count",
        color="priority",
        barmode="stack",
        category_orders={"priority": labels},
        title=title,
    )
