from __future__ import annotations

from datetime import datetime
from typing import Callable

import pytest
from flask.testing import FlaskClient

from networth.app import create_app
from networth.core.calendar import YearMonth

# fixed reference "now" so calendar offsets are stable
NOW = datetime(2025, 6, 15, 12, 0)


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def months_ago(now: datetime) -> Callable[..., datetime]:
    """Return a datetime `n` calendar months before `now`, on the given day."""

    def _months_ago(n: int, day: int = 10) -> datetime:
        ym = YearMonth.of(now).shift(-n)
        return datetime(ym.year, ym.month, day)

    return _months_ago


@pytest.fixture()
def client() -> FlaskClient:
    with create_app().test_client() as test_client:
        yield test_client
