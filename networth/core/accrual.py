"""Monthly accrual rules, one per account type."""

from __future__ import annotations

from networth.models import (
    Account,
    CashAccount,
    CreditCardAccount,
    InvestmentAccount,
    LoanAccount,
    PropertyAccount,
    VehicleAccount,
)


def monthly_rate(annual_percent: float) -> float:
    """Convert an annual percentage (e.g. 6.5) to a monthly decimal rate."""
    return annual_percent / 100 / 12


def step_account(account: Account, balance: float, month: int) -> float:
    """
    Advance one account balance by a single month.

    `month` is the number of steps already taken since the projection
    started; only loans use it (to stop at the end of their term).

    Rules:
      - investment: grow at expectedGrowthRate, then add the contribution
      - cash: grow at interestRate, then add the contribution
      - property / vehicle: grow (or depreciate) at expectedGrowthRate
      - loan: payment covers interest first, the rest reduces principal;
              zero once the term has run out (from month remainingTerm + 1)
              or once the principal is paid off
      - credit_card: interest accrues, then the payment is subtracted
      - anything else: unchanged
    """
    if isinstance(account, InvestmentAccount):
        r = monthly_rate(account.expectedGrowthRate)
        return balance * (1 + r) + account.monthlyContribution

    if isinstance(account, CashAccount):
        r = monthly_rate(account.interestRate)
        return balance * (1 + r) + account.monthlyContribution

    if isinstance(account, (PropertyAccount, VehicleAccount)):
        r = monthly_rate(account.expectedGrowthRate)
        return balance * (1 + r)

    if isinstance(account, LoanAccount):
        if account.remainingTerm is not None and month >= account.remainingTerm:
            return 0.0
        r = monthly_rate(account.interestRate)
        interest = balance * r
        principal = account.monthlyPayment - interest
        return max(0.0, balance - principal)

    if isinstance(account, CreditCardAccount):
        r = monthly_rate(account.interestRate)
        interest = balance * r
        return max(0.0, balance + interest - account.monthlyPayment)

    return balance
