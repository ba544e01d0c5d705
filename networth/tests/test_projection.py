from __future__ import annotations

from math import isclose

from networth.core.projection import project, project_by_account
from networth.models import (
    CashAccount,
    CreditCardAccount,
    InvestmentAccount,
    LoanAccount,
    SignConvention,
)


def sample_accounts() -> list:
    return [
        InvestmentAccount(id="inv", balance=20000.0, expectedGrowthRate=7.0, monthlyContribution=500.0),
        CashAccount(id="cash", balance=5000.0, interestRate=2.0),
        LoanAccount(id="loan", balance=15000.0, interestRate=6.0, monthlyPayment=400.0, remainingTerm=48),
        CreditCardAccount(id="cc", balance=1200.0, interestRate=20.0, monthlyPayment=150.0),
    ]


def test_month_zero_is_current_balances():
    rows = project(sample_accounts(), 24)
    first = rows[0]
    assert first.month == 0
    assert first.assets == 25000.0
    assert first.debts == 16200.0
    assert first.netWorth == 25000.0 - 16200.0


def test_series_has_months_plus_one_rows_in_order():
    rows = project(sample_accounts(), 36)
    assert len(rows) == 37
    assert [row.month for row in rows] == list(range(37))


def test_zero_months_yields_single_point():
    rows = project(sample_accounts(), 0)
    assert len(rows) == 1


def test_empty_accounts_yield_zero_points():
    rows = project([], 5)
    assert len(rows) == 6
    for row in rows:
        assert row.assets == 0.0
        assert row.debts == 0.0
        assert row.netWorth == 0.0


def test_zero_growth_investment_accumulates_linearly():
    acc = InvestmentAccount(id="inv", balance=1000.0, expectedGrowthRate=0.0, monthlyContribution=250.0)
    rows = project([acc], 24)
    assert rows[24].assets == 1000.0 + 24 * 250.0


def test_loan_reaches_zero_at_end_of_term():
    loan = LoanAccount(id="loan", balance=50000.0, interestRate=4.0, monthlyPayment=100.0, remainingTerm=12)
    rows = project([loan], 24)
    # month 12 still carries a balance; the term runs out after it
    assert rows[12].debts > 0
    for row in rows[13:]:
        assert row.debts == 0.0


def test_short_loan_runs_its_full_term_before_zero():
    loan = LoanAccount(id="loan", balance=1000.0, monthlyPayment=100.0, remainingTerm=3)
    assert [row.debts for row in project([loan], 4)] == [1000.0, 900.0, 800.0, 700.0, 0.0]


def test_projection_accepts_plain_records():
    records = [
        {"_id": "cash", "category": "asset", "type": "cash", "balance": 1000, "monthlyContribution": 50},
        {"_id": "loan", "category": "debt", "type": "loan", "balance": 1000, "monthlyPayment": 100, "remainingTerm": 3},
    ]
    rows = project(records, 4)
    assert [row.assets for row in rows] == [1000.0, 1050.0, 1100.0, 1150.0, 1200.0]
    assert [row.debts for row in rows] == [1000.0, 900.0, 800.0, 700.0, 0.0]

    per_account = project_by_account(records, 2)
    assert per_account[2].balances == {"cash": 1100.0, "loan": 800.0}
    # records are read, not modified
    assert records[0]["balance"] == 1000


def test_net_worth_is_assets_minus_debts_every_month():
    for row in project(sample_accounts(), 60):
        assert isclose(row.netWorth, row.assets - row.debts)


def test_signed_convention_negates_debts_only():
    magnitude = project(sample_accounts(), 12)
    signed = project(sample_accounts(), 12, sign_convention=SignConvention.SIGNED)
    for plain, flipped in zip(magnitude, signed):
        assert flipped.assets == plain.assets
        assert flipped.debts == -plain.debts
        assert flipped.netWorth == plain.netWorth


def test_project_by_account_keeps_raw_positive_balances():
    rows = project_by_account(sample_accounts(), 6)
    assert len(rows) == 7
    first = rows[0].balances
    assert first == {"inv": 20000.0, "cash": 5000.0, "loan": 15000.0, "cc": 1200.0}
    for row in rows:
        assert all(value >= 0 for value in row.balances.values())


def test_project_by_account_signed_flips_debts():
    rows = project_by_account(sample_accounts(), 1, sign_convention=SignConvention.SIGNED)
    assert rows[0].balances["loan"] == -15000.0
    assert rows[0].balances["inv"] == 20000.0


def test_project_by_account_matches_aggregate_totals():
    accounts = sample_accounts()
    aggregate = project(accounts, 18)
    per_account = project_by_account(accounts, 18)
    for total, split in zip(aggregate, per_account):
        assert isclose(total.assets, split.balances["inv"] + split.balances["cash"])
        assert isclose(total.debts, split.balances["loan"] + split.balances["cc"])


def test_projection_does_not_touch_accounts():
    accounts = sample_accounts()
    project(accounts, 120)
    assert [a.balance for a in accounts] == [20000.0, 5000.0, 15000.0, 1200.0]


def test_point_serializes_with_account_fields():
    rows = project_by_account([CashAccount(id="cash", balance=10.0)], 0)
    assert rows[0].model_dump() == {"month": 0, "cash": 10.0}
