"""FastAPI application entrypoint."""
from __future__ import annotations

import io
import logging
import os
import time
from pathlib import Path
from uuid import uuid4

from fastapi import FastAPI, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, StreamingResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel
from starlette.middleware.sessions import SessionMiddleware

from .headings import analyze_html
from .logging_setup import configure_logging, log_settings
from .report import display_text, export_filename, format_report, summary_severity
from .schemas import AnalysisOut
from .scrape import (
    PROXY_TEMPLATE,
    FetchError,
    InvalidURLError,
    fetch_html,
    normalise_url,
    request_timeout,
)
from .state import MAX_SESSIONS, AnalysisInProgressError, AnalysisSession, SessionStore

LOG_FILE_PATH = configure_logging(os.getenv("LOG_LEVEL"))
logger = logging.getLogger(__name__)
logger.info("Logging configured. File output: %s", LOG_FILE_PATH)
log_settings(
    logger,
    proxy=PROXY_TEMPLATE or None,
    fetch_timeout=request_timeout(),
    max_sessions=MAX_SESSIONS,
)

app = FastAPI(title="Heading Structure Analyzer")
app.add_middleware(SessionMiddleware, secret_key=os.getenv("APP_SECRET_KEY", "change-me"))

TEMPLATES = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))
TEMPLATES.env.filters["severity"] = summary_severity
TEMPLATES.env.filters["heading_text"] = display_text

SESSIONS = SessionStore()
SESSION_KEY = "analysis_session_id"

FAILURE_MESSAGE = (
    "Failed to fetch or parse the URL. Error: {detail}. This might be due to network issues, "
    "the website blocking requests, or the CORS proxy limitations."
)


class AnalyzeRequest(BaseModel):
    url: str


def _session_id(request: Request) -> str:
    session_id = request.session.get(SESSION_KEY)
    if not session_id:
        session_id = str(uuid4())
        request.session[SESSION_KEY] = session_id
    return session_id


def run_analysis(state: AnalysisSession, url: str) -> None:
    """Fetch ``url`` and store the outcome on ``state``.

    An empty URL is reported without touching the previous result. Any other
    failure discards the result of the run and records a message instead.
    Nothing is changed while another run for the same session is outstanding.
    """

    if state.is_loading:
        raise AnalysisInProgressError("An analysis is already running for this session.")
    try:
        target = normalise_url(url)
    except InvalidURLError as exc:
        state.error = str(exc)
        return

    state.begin(url)
    started = time.perf_counter()
    logger.info("Starting heading analysis for %s", target)
    try:
        html = fetch_html(target)
        result = analyze_html(html)
    except FetchError as exc:
        state.fail(FAILURE_MESSAGE.format(detail=exc))
        return
    except Exception as exc:
        logger.exception("Parsing %s failed: %s", target, exc)
        state.fail(FAILURE_MESSAGE.format(detail=exc))
        return

    state.complete(result, format_report(url, result))
    logger.info(
        "Analysed %s: %d headings in %.2fs",
        target,
        len(result.headings),
        time.perf_counter() - started,
    )


@app.get("/", response_class=HTMLResponse)
def index(request: Request) -> HTMLResponse:
    state = SESSIONS.get(request.session.get(SESSION_KEY)) or AnalysisSession()
    return TEMPLATES.TemplateResponse(request, "index.html", {"state": state})


@app.post("/analyze")
def analyze(request: Request, url: str = Form("")) -> RedirectResponse:
    state = SESSIONS.get_or_create(_session_id(request))
    try:
        run_analysis(state, url)
    except AnalysisInProgressError:
        logger.info("Ignoring analysis request for %s while a run is outstanding", url)
    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)


def _current_report(request: Request) -> tuple[AnalysisSession, str]:
    state = SESSIONS.get(request.session.get(SESSION_KEY))
    if state is None or not state.has_results or state.report is None:
        raise HTTPException(status_code=404, detail="No analysis results available")
    return state, state.report


@app.get("/report", response_class=PlainTextResponse)
def report(request: Request) -> PlainTextResponse:
    _, body = _current_report(request)
    return PlainTextResponse(body)


@app.get("/export")
def export_report(request: Request) -> StreamingResponse:
    state, body = _current_report(request)
    filename = export_filename(state.url)
    return StreamingResponse(
        io.StringIO(body),
        media_type="text/plain",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@app.post("/api/analyze", response_model=AnalysisOut)
def analyze_api(payload: AnalyzeRequest) -> AnalysisOut:
    try:
        target = normalise_url(payload.url)
    except InvalidURLError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        html = fetch_html(target)
    except FetchError as exc:
        raise HTTPException(status_code=502, detail=FAILURE_MESSAGE.format(detail=exc)) from exc

    result = analyze_html(html)
    return AnalysisOut.from_result(payload.url, result, format_report(payload.url, result))
