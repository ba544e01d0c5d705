"""
Historical balance reconstruction from an account's event log.

Each account's balance at a past month is derived from its nearest known
balance (an "anchor": the opening event or a balance update at or before
that month), projected forward with the same accrual rules the forecast
uses. All calendar maths is done at month granularity relative to `now`.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Union

from networth.core.accrual import step_account
from networth.core.calendar import YearMonth, offset_to_year_month, resolve_now
from networth.core.projection import aggregate_point, signed
from networth.models import (
    Account,
    AccountEvent,
    AccountLike,
    AccountPoint,
    EventLike,
    EventType,
    ProjectionPoint,
    SignConvention,
    load_account,
    load_accounts,
    load_events,
)

logger = logging.getLogger(__name__)

Now = Optional[Union[date, datetime]]


def group_events(events: Iterable[AccountEvent]) -> Dict[str, List[AccountEvent]]:
    """Group events by accountId; each group is sorted oldest first."""
    grouped: Dict[str, List[AccountEvent]] = defaultdict(list)
    for event in events:
        grouped[event.accountId].append(event)
    return {key: sorted(group, key=lambda e: e.date) for key, group in grouped.items()}


def _first_of_type(events: Sequence[AccountEvent], kind: EventType) -> Optional[AccountEvent]:
    for event in sorted(events, key=lambda e: e.date):
        if event.type == kind:
            return event
    return None


def latest_anchor(events: Sequence[AccountEvent], target: YearMonth) -> Optional[AccountEvent]:
    """
    Most recent opening or balance-update event in or before `target`.

    Several candidates in the same month are ordered by their full
    timestamp, so an update later in the month wins over the opening.
    """
    candidates = [e for e in events if e.is_anchor and YearMonth.of(e.date) <= target]
    if not candidates:
        return None
    return max(candidates, key=lambda e: e.date)


def _reconstruct_at(account: Account, events: Sequence[AccountEvent], target: YearMonth) -> float:
    opened = _first_of_type(events, EventType.ACCOUNT_OPENED)
    closed = _first_of_type(events, EventType.ACCOUNT_CLOSED)

    if opened is not None and target < YearMonth.of(opened.date):
        return 0.0
    if closed is not None and YearMonth.of(closed.date) <= target:
        return 0.0

    anchor = latest_anchor(events, target)
    if anchor is None:
        logger.debug(
            "no anchor for account %s at %04d-%02d; using current balance",
            account.id,
            target.year,
            target.month,
        )
        return account.balance

    balance = anchor.balance or 0.0
    steps = YearMonth.of(anchor.date).months_until(target)
    for step in range(steps):
        balance = max(0.0, step_account(account, balance, step))
    return balance


def reconstruct_balance(
    account: AccountLike,
    events: Iterable[EventLike],
    month_offset: int,
    *,
    now: Now = None,
) -> float:
    """
    Balance of `account` at `month_offset` months from now (0 or negative).

    `events` must belong to this account; their order does not matter.

    - before the opening month: 0
    - in or after the closing month: 0
    - otherwise the latest anchor's balance, stepped forward month by month
      to the target; with no anchor at all the current balance is used
    """
    return _reconstruct_at(
        load_account(account),
        load_events(events),
        offset_to_year_month(month_offset, now),
    )


def _month_targets(history_months: int, now: Now) -> List[tuple]:
    reference = resolve_now(now)
    return [(m, offset_to_year_month(m, reference)) for m in range(-history_months, 1)]


def build_history(
    accounts: Sequence[AccountLike],
    events: Iterable[EventLike],
    history_months: int,
    *,
    now: Now = None,
    sign_convention: SignConvention = SignConvention.MAGNITUDE,
) -> List[ProjectionPoint]:
    """
    Aggregate history for months -history_months..0 inclusive.

    Rows have the same shape as `project()` so the two series join at
    month 0. Returns [] when history_months <= 0.
    """
    if history_months <= 0:
        return []

    accounts = load_accounts(accounts)
    by_account = group_events(load_events(events))
    assets = [a for a in accounts if not a.is_debt]
    debts = [a for a in accounts if a.is_debt]

    rows: List[ProjectionPoint] = []
    for m, target in _month_targets(history_months, now):
        total_assets = sum(_reconstruct_at(a, by_account.get(a.id, []), target) for a in assets)
        total_debts = sum(_reconstruct_at(a, by_account.get(a.id, []), target) for a in debts)
        rows.append(aggregate_point(m, total_assets, total_debts, sign_convention))
    return rows


def build_history_by_account(
    accounts: Sequence[AccountLike],
    events: Iterable[EventLike],
    history_months: int,
    *,
    now: Now = None,
    sign_convention: SignConvention = SignConvention.MAGNITUDE,
) -> List[AccountPoint]:
    """Per-account history, one field per account id (raw positive by default)."""
    if history_months <= 0:
        return []

    accounts = load_accounts(accounts)
    by_account = group_events(load_events(events))

    rows: List[AccountPoint] = []
    for m, target in _month_targets(history_months, now):
        values = {
            a.id: signed(_reconstruct_at(a, by_account.get(a.id, []), target), a.is_debt, sign_convention)
            for a in accounts
        }
        rows.append(AccountPoint.model_validate({**values, "month": m}))
    return rows


def compute_history_months(events: Iterable[EventLike], *, now: Now = None) -> int:
    """
    Whole calendar months from the earliest account opening to now.

    Day-of-month is ignored, so the result can differ by one from the
    elapsed wall-clock time (opened on the 31st, asked on the 1st). Returns
    0 when nothing has been opened.
    """
    opened = [e for e in load_events(events) if e.type == EventType.ACCOUNT_OPENED]
    if not opened:
        return 0
    earliest = min(opened, key=lambda e: e.date)
    current = offset_to_year_month(0, now)
    return max(0, YearMonth.of(earliest.date).months_until(current))


__all__ = [
    "build_history",
    "build_history_by_account",
    "compute_history_months",
    "group_events",
    "latest_anchor",
    "reconstruct_balance",
]
