from __future__ import annotations

from io import BytesIO

import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from ticket_summary.pipeline import run_ticket_pipeline
from ticket_summary.preprocessing import read_ticket_frame
from ticket_summary.report import build_error_frame, build_summary_frame, render_html_report
from ticket_summary.visualization import build_team_figure


st.set_page_config(page_title="Team Ticket Summary", page_icon="📊", layout="wide")


@st.cache_data(show_spinner=False)
def _load_uploaded_file(file_name: str, payload: bytes) -> pd.DataFrame:
    return read_ticket_frame(BytesIO(payload), file_name)


st.title("Team Ticket Summary")
st.caption("Upload a ticket batch (JSON/CSV/Excel) to validate it and summarize tickets by team, category and priority.")

uploaded = st.file_uploader("Upload ticket batch", type=["json", "csv", "xlsx"])
if uploaded is None:
    st.info("Upload a ticket export to start.")
    st.stop()

raw = _load_uploaded_file(uploaded.name, uploaded.getvalue())
result = run_ticket_pipeline(raw)
summary_frame = build_summary_frame(result)

col1, col2, col3 = st.columns(3)
col1.metric("Teams", f"{len(result.summaries)}")
col2.metric("Tickets Accepted", f"{result.accepted_count}")
col3.metric("Tickets Rejected", f"{result.rejected_count}")

report_tab, data_tab, errors_tab = st.tabs(["Report", "Summary Data", "Rejected Tickets"])

with report_tab:
    fig = build_team_figure(result)
    if fig is not None:
        st.plotly_chart(fig, use_container_width=True)
    components.html(render_html_report(result), height=600, scrolling=True)

with data_tab:
    st.dataframe(summary_frame, use_container_width=True)
    st.download_button(
        "Download Summary CSV",
        data=summary_frame.to_csv(index=False).encode("utf-8"),
        file_name="team_ticket_summary.csv",
        mime="text/csv",
    )

with errors_tab:
    if result.errors:
        st.dataframe(build_error_frame(result.errors), use_container_width=True)
    else:
        st.write("No tickets were rejected.")
