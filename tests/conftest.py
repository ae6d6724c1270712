"""Shared fixtures: a small household with two tags."""

from datetime import date

import pytest

from splitflow.config import AppSettings
from splitflow.models import Accounts, Purchase, Tags, Transactions


@pytest.fixture
def accounts() -> Accounts:
    return Accounts.model_validate({"alice": {}, "bob": {"color": "ff8800"}, "carol": {}})


@pytest.fixture
def tags() -> Tags:
    return Tags.model_validate({
        "food": {"dur": 5},
        "rent": {"dur": 30},
        "groceries": {"dur": 10, "parent": "food"},
    })


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(
        log_json=True,
        future_date_tolerance_days=7,
        max_purchase_cents=1_000_000,
        amount_width=10,
        delta_width=10,
        flow_width=8,
    )


def _make_purchase(
    day: date,
    amount: int,
    tag: str = "food",
    buyer: str = "alice",
    consumers: dict = None,
    desc: str = "dinner",
) -> Purchase:
    return Purchase(
        date=day,
        amount=amount,
        desc=desc,
        tag=tag,
        buyer=buyer,
        consumers=consumers if consumers is not None else {"alice": 1, "bob": 1},
    )


@pytest.fixture
def ledger() -> Transactions:
    transactions = Transactions()
    transactions.add(_make_purchase(date(2024, 2, 1), 1000))
    transactions.add(_make_purchase(date(2024, 2, 3), 3000, tag="rent", buyer="bob"))
    return transactions


@pytest.fixture
def make_purchase():
    return _make_purchase
