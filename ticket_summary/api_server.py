"""FastAPI server for team ticket summaries."""

from __future__ import annotations

import json
import math
from datetime import datetime
from io import BytesIO
from typing import Any, Optional

import pandas as pd
import plotly.io as pio
from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, StreamingResponse
from pydantic import BaseModel, Field

from .config import Settings
from .messaging import build_report_message
from .pipeline import BatchResult, run_ticket_pipeline
from .preprocessing import normalize_and_alias_columns, read_ticket_frame
from .report import build_summary_frame, render_html_report
from .visualization import build_team_figure


class BatchPayload(BaseModel):
    tickets: list[dict[str, Any]] = Field(default_factory=list)
    now: Optional[datetime] = None


def _read_upload_file(file: UploadFile) -> pd.DataFrame:
    payload = file.file.read()
    if not payload:
        return pd.DataFrame()
    try:
        return read_ticket_frame(BytesIO(payload), file.filename or "")
    except Exception as exc:
        raise ValueError(f"Failed to parse '{file.filename}': {exc}") from exc


def _format_file_errors(file_errors: list[dict[str, str]], limit: int = 3) -> str:
    if not file_errors:
        return ""
    items = file_errors[:limit]
    text = "; ".join([f"{item['file_name']}: {item['error']}" for item in items])
    remaining = len(file_errors) - len(items)
    if remaining > 0:
        text += f"; +{remaining} more"
    return text


def _figure_to_json(figure: Any) -> dict[str, Any] | None:
    if figure is None:
        return None
    return json.loads(pio.to_json(figure, validate=False))


def _json_safe(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_json_safe(v) for v in value]
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return None
    return value


def _batch_payload(result: BatchResult) -> dict[str, Any]:
    return {
        "teams": [result.summaries[name].to_dict() for name in sorted(result.summaries)],
        "errors": [error.to_dict() for error in result.errors],
        "accepted": result.accepted_count,
        "rejected": result.rejected_count,
        "html": render_html_report(result),
        "figure": _figure_to_json(build_team_figure(result)),
    }


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="Team Ticket Summary API", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/summaries")
    def summarize_batch(payload: BatchPayload) -> JSONResponse:
        result = run_ticket_pipeline(payload.tickets, now=payload.now)
        return JSONResponse(content=_json_safe(_batch_payload(result)))

    @app.post("/api/summaries/upload")
    async def summarize_upload(files: list[UploadFile] = File(...)) -> JSONResponse:
        frames: list[pd.DataFrame] = []
        file_errors: list[dict[str, str]] = []

        for file in files:
            try:
                frame = _read_upload_file(file)
            except ValueError as exc:
                file_errors.append({"file_name": file.filename or "unknown", "error": str(exc)})
                continue
            if frame.empty:
                file_errors.append(
                    {
                        "file_name": file.filename or "unknown",
                        "error": "File parsed but contains no data rows",
                    }
                )
                continue
            frames.append(normalize_and_alias_columns(frame))

        if not frames:
            suffix = _format_file_errors(file_errors)
            detail = "No valid rows found in uploaded files."
            if suffix:
                detail = f"{detail} {suffix}"
            raise HTTPException(status_code=400, detail=detail)

        result = run_ticket_pipeline(pd.concat(frames, ignore_index=True))
        payload = _batch_payload(result)
        payload["file_errors"] = file_errors
        return JSONResponse(content=_json_safe(payload))

    @app.post("/api/summaries/report", response_class=HTMLResponse)
    def summary_report(payload: BatchPayload) -> HTMLResponse:
        result = run_ticket_pipeline(payload.tickets, now=payload.now)
        return HTMLResponse(content=render_html_report(result))

    @app.post("/api/summaries/message")
    def summary_message(payload: BatchPayload) -> JSONResponse:
        result = run_ticket_pipeline(payload.tickets, now=payload.now)
        return JSONResponse(content=build_report_message(result, settings=settings).to_dict())

    @app.post("/api/summaries/export.csv")
    def export_summary_csv(payload: BatchPayload) -> StreamingResponse:
        result = run_ticket_pipeline(payload.tickets, now=payload.now)
        body = build_summary_frame(result).to_csv(index=False).encode("utf-8")
        return StreamingResponse(
            iter([body]),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=team_ticket_summary.csv"},
        )

    return app
