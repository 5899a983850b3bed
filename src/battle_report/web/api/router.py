from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response

from battle_report.grammar.errors import ReportParseError
from battle_report.grammar.report import parse_report
from battle_report.options import ParserOptions
from battle_report.web.api import mappers, schemas
from battle_report.web.session import get_or_create_session, get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _options(request: Request, payload: schemas.ParseRequest) -> ParserOptions:
    options: ParserOptions = request.app.state.parser_options
    if payload.allow_empty_tables is None:
        return options
    return ParserOptions(allow_empty_tables=payload.allow_empty_tables)


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.post("/reports/parse", response_model=schemas.ApiResponse)
async def parse(payload: schemas.ParseRequest, request: Request, response: Response):
    session_id, session = get_or_create_session(request.cookies.get("session_id"))
    response.set_cookie("session_id", session_id, httponly=True)
    try:
        report = parse_report(payload.text, _options(request, payload))
    except ReportParseError as exc:
        logger.warning("Rejected battle report: %s", exc.expected)
        return schemas.ApiResponse(
            ok=False,
            message=str(exc),
            message_kind="error",
            error=mappers.build_error_detail(exc),
        )
    async with session.lock:
        session.record(report)
    return schemas.ApiResponse(
        ok=True,
        message=f"Parsed {report.mission_name}",
        message_kind="info",
        report=mappers.build_report_response(report),
    )


@router.get("/reports", response_model=schemas.ReportHistoryResponse)
async def list_reports(request: Request):
    session = get_session(request.cookies.get("session_id"))
    if session is None:
        return schemas.ReportHistoryResponse(count=0, reports=[])
    async with session.lock:
        reports = [mappers.build_report_response(report) for report in session.reports]
    return schemas.ReportHistoryResponse(count=len(reports), reports=reports)


@router.delete("/reports", response_model=schemas.ApiResponse)
async def clear_reports(request: Request):
    session = get_session(request.cookies.get("session_id"))
    if session is not None:
        async with session.lock:
            session.reset()
    return schemas.ApiResponse(ok=True, message="History cleared", message_kind="info")
