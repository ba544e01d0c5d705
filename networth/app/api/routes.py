"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any, Dict, List

from flask import Blueprint, jsonify, request
from pydantic import BaseModel, ValidationError

from networth.core.history import (
    build_history,
    build_history_by_account,
    compute_history_months,
)
from networth.core.projection import project, project_by_account
from networth.core.series import (
    apply_inflation,
    build_account_timeline,
    build_timeline,
    thin_series,
)
from networth.schemas.series import HistoryRequest, ProjectionRequest, TimelineRequest

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return jsonify({"detail": exc.errors(include_context=False, include_url=False)}), HTTPStatus.BAD_REQUEST


def _dump(points: List[BaseModel]) -> List[Dict[str, Any]]:
    return [point.model_dump() for point in points]


def _projection_response(by_account: bool) -> Any:
    payload = ProjectionRequest.model_validate(request.get_json(force=True, silent=False))
    months = payload.horizon()
    build = project_by_account if by_account else project
    rows = build(payload.accounts, months, sign_convention=payload.signConvention)

    rate = payload.effective_inflation()
    if rate:
        # forecast rows are all month >= 0, so the history mode does not matter here
        rows = apply_inflation(rows, rate)
    if payload.thin:
        rows = thin_series(rows, months)
    return jsonify(_dump(rows))


@api_bp.post("/projection")
def projection() -> Any:
    """Aggregate assets / debts / net worth forecast."""
    return _projection_response(by_account=False)


@api_bp.post("/projection/accounts")
def projection_by_account() -> Any:
    """Per-account forecast."""
    return _projection_response(by_account=True)


def _history_response(by_account: bool) -> Any:
    payload = HistoryRequest.model_validate(request.get_json(force=True, silent=False))
    history_months = payload.historyMonths
    if history_months is None:
        history_months = compute_history_months(payload.events, now=payload.now)
    logger.debug("history request: %d accounts, %d months", len(payload.accounts), history_months)

    build = build_history_by_account if by_account else build_history
    rows = build(
        payload.accounts,
        payload.events,
        history_months,
        now=payload.now,
        sign_convention=payload.signConvention,
    )
    return jsonify(_dump(rows))


@api_bp.post("/history")
def history() -> Any:
    """Aggregate balances reconstructed from the event log."""
    return _history_response(by_account=False)


@api_bp.post("/history/accounts")
def history_by_account() -> Any:
    """Per-account balances reconstructed from the event log."""
    return _history_response(by_account=True)


@api_bp.post("/timeline")
def timeline() -> Any:
    """History from the first account opening joined to the forecast."""
    payload = TimelineRequest.model_validate(request.get_json(force=True, silent=False))
    build = build_account_timeline if payload.byAccount else build_timeline
    rows = build(
        payload.accounts,
        payload.events,
        payload.horizon(),
        now=payload.now,
        inflation_rate=payload.effective_inflation(),
        thin=payload.thin,
        sign_convention=payload.signConvention,
    )
    return jsonify(_dump(rows))
