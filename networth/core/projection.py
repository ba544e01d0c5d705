from __future__ import annotations

import logging
from typing import List, Sequence

from networth.core.accrual import step_account
from networth.models import (
    AccountLike,
    AccountPoint,
    ProjectionPoint,
    SignConvention,
    load_accounts,
)

logger = logging.getLogger(__name__)


def signed(value: float, is_debt: bool, sign_convention: SignConvention) -> float:
    """Apply the output sign convention to one balance."""
    # zero stays 0.0 rather than -0.0
    if is_debt and sign_convention == SignConvention.SIGNED and value:
        return -value
    return value


def aggregate_point(
    month: int,
    total_assets: float,
    total_debts: float,
    sign_convention: SignConvention = SignConvention.MAGNITUDE,
) -> ProjectionPoint:
    """
    Build one aggregate row from positive asset and debt totals.

    netWorth is assets minus debt magnitude under either convention; only
    the reported `debts` value changes sign.
    """
    return ProjectionPoint(
        month=month,
        assets=total_assets,
        debts=signed(total_debts, True, sign_convention),
        netWorth=total_assets - total_debts,
    )


def project(
    accounts: Sequence[AccountLike],
    months: int,
    *,
    sign_convention: SignConvention = SignConvention.MAGNITUDE,
) -> List[ProjectionPoint]:
    """
    Project aggregate assets / debts / net worth `months` months forward.

    Row 0 holds today's balances; row k holds balances after k monthly
    accrual steps. Accounts may be models or plain records; neither is
    modified.
    """
    months = max(0, months)
    accounts = load_accounts(accounts)
    assets = [a for a in accounts if not a.is_debt]
    debts = [a for a in accounts if a.is_debt]

    asset_balances = [a.balance for a in assets]
    debt_balances = [a.balance for a in debts]

    logger.debug(
        "projecting %d asset and %d debt accounts over %d months",
        len(assets),
        len(debts),
        months,
    )

    rows: List[ProjectionPoint] = []
    for m in range(months + 1):
        rows.append(aggregate_point(m, sum(asset_balances), sum(debt_balances), sign_convention))

        if m < months:
            asset_balances = [
                max(0.0, step_account(account, bal, m)) for account, bal in zip(assets, asset_balances)
            ]
            debt_balances = [
                max(0.0, step_account(account, bal, m)) for account, bal in zip(debts, debt_balances)
            ]

    return rows


def project_by_account(
    accounts: Sequence[AccountLike],
    months: int,
    *,
    sign_convention: SignConvention = SignConvention.MAGNITUDE,
) -> List[AccountPoint]:
    """
    Project each account separately: one field per account id.

    Balances are raw positive values unless `sign_convention` is SIGNED.
    """
    months = max(0, months)
    accounts = load_accounts(accounts)
    balances = [a.balance for a in accounts]

    rows: List[AccountPoint] = []
    for m in range(months + 1):
        values = {
            account.id: signed(bal, account.is_debt, sign_convention)
            for account, bal in zip(accounts, balances)
        }
        rows.append(AccountPoint.model_validate({**values, "month": m}))

        if m < months:
            balances = [
                max(0.0, step_account(account, bal, m)) for account, bal in zip(accounts, balances)
            ]

    return rows


__all__ = [
    "aggregate_point",
    "project",
    "project_by_account",
    "signed",
]
