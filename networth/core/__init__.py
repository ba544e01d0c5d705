"""Pure projection / history engine. No I/O; inputs are never modified."""

from networth.core.accrual import step_account
from networth.core.history import (
    build_history,
    build_history_by_account,
    compute_history_months,
    reconstruct_balance,
)
from networth.core.projection import project, project_by_account
from networth.core.series import (
    apply_inflation,
    build_account_timeline,
    build_timeline,
    merge_timeline,
    thin_series,
)

__all__ = [
    "apply_inflation",
    "build_account_timeline",
    "build_history",
    "build_history_by_account",
    "build_timeline",
    "compute_history_months",
    "merge_timeline",
    "project",
    "project_by_account",
    "reconstruct_balance",
    "step_account",
    "thin_series",
]
