"""
Post-processing for projection / history series and the combined timeline.

    history (months -H..-1) + forecast (months 0..F)  ->  one timeline
    optional inflation deflation, optional thinning for long horizons
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, TypeVar

from networth.core.history import (
    Now,
    build_history,
    build_history_by_account,
    compute_history_months,
)
from networth.core.projection import project, project_by_account
from networth.models import (
    AccountLike,
    AccountPoint,
    EventLike,
    ProjectionPoint,
    SignConvention,
    load_accounts,
    load_events,
)

logger = logging.getLogger(__name__)

P = TypeVar("P", ProjectionPoint, AccountPoint)


def deflator(inflation_rate: float, month: int) -> float:
    """Compounded monthly price level `month` months from now."""
    return (1 + inflation_rate / 100 / 12) ** month


def apply_inflation(
    points: Sequence[P],
    inflation_rate: float,
    *,
    deflate_history: bool = True,
) -> List[P]:
    """
    Express a series in today's money.

    Every currency field is divided by the price level at the point's own
    month offset; `month` itself is untouched. With deflate_history=False,
    points before month 0 stay nominal (the per-account charts show
    recorded history as-is); the aggregate chart deflates them too.
    """
    if not inflation_rate:
        return list(points)

    out: List[P] = []
    for point in points:
        if point.month < 0 and not deflate_history:
            out.append(point)
            continue
        factor = deflator(inflation_rate, point.month)
        values = point.model_dump()
        deflated = {key: (value if key == "month" else value / factor) for key, value in values.items()}
        out.append(type(point).model_validate(deflated))
    return out


def thinning_step(months: int) -> int:
    """Keep monthly points up to 5 years, quarterly up to 10, half-yearly beyond."""
    if months <= 60:
        return 1
    if months <= 120:
        return 3
    return 6


def thin_series(points: Sequence[P], months: int) -> List[P]:
    """Drop points for long horizons, keeping months that are a multiple of the step (month 0 always)."""
    step = thinning_step(months)
    return [point for point in points if point.month % step == 0]


def merge_timeline(history: Iterable[P], forecast: Iterable[P]) -> List[P]:
    """
    Join a history series and a forecast series into one timeline.

    Both contain month 0; the forecast's row wins, since it is the recorded
    present balance rather than a reconstruction.
    """
    past = [point for point in history if point.month < 0]
    future = [point for point in forecast if point.month >= 0]
    return sorted(past, key=lambda p: p.month) + sorted(future, key=lambda p: p.month)


def build_timeline(
    accounts: Sequence[AccountLike],
    events: Iterable[EventLike],
    forecast_months: int,
    *,
    now: Now = None,
    inflation_rate: Optional[float] = None,
    thin: bool = False,
    sign_convention: SignConvention = SignConvention.MAGNITUDE,
) -> List[ProjectionPoint]:
    """
    Aggregate history from the first account opening through the forecast.

    Inflation, when given, deflates history and forecast alike.
    """
    accounts = load_accounts(accounts)
    events = load_events(events)
    history_months = compute_history_months(events, now=now)
    logger.debug("timeline: %d history months, %d forecast months", history_months, forecast_months)

    timeline = merge_timeline(
        build_history(accounts, events, history_months, now=now, sign_convention=sign_convention),
        project(accounts, forecast_months, sign_convention=sign_convention),
    )
    if inflation_rate:
        timeline = apply_inflation(timeline, inflation_rate, deflate_history=True)
    if thin:
        timeline = thin_series(timeline, history_months + max(0, forecast_months))
    return timeline


def build_account_timeline(
    accounts: Sequence[AccountLike],
    events: Iterable[EventLike],
    forecast_months: int,
    *,
    now: Now = None,
    inflation_rate: Optional[float] = None,
    thin: bool = False,
    sign_convention: SignConvention = SignConvention.MAGNITUDE,
) -> List[AccountPoint]:
    """Per-account timeline; history points are never inflation-adjusted."""
    accounts = load_accounts(accounts)
    events = load_events(events)
    history_months = compute_history_months(events, now=now)

    timeline = merge_timeline(
        build_history_by_account(accounts, events, history_months, now=now, sign_convention=sign_convention),
        project_by_account(accounts, forecast_months, sign_convention=sign_convention),
    )
    if inflation_rate:
        timeline = apply_inflation(timeline, inflation_rate, deflate_history=False)
    if thin:
        timeline = thin_series(timeline, history_months + max(0, forecast_months))
    return timeline


__all__ = [
    "apply_inflation",
    "build_account_timeline",
    "build_timeline",
    "deflator",
    "merge_timeline",
    "thin_series",
    "thinning_step",
]
