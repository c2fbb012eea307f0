"""Tests for services/transaction_service.py."""

from datetime import date

import pytest

from models.period import BillingPeriod
from services.transaction_service import TransactionService


@pytest.fixture
def service(tx_dao):
    return TransactionService(tx_dao)


def test_create_stamps_midday(service):
    tx = service.create("income", 85.5, "2024-03-01", "  iFood ")
    assert tx.date == "2024-03-01T12:00:00"
    assert tx.description == "iFood"
    assert tx.day == date(2024, 3, 1)


def test_create_accepts_date_objects_and_timestamps(service):
    assert service.create("expense", 10, date(2024, 3, 2)).date == "2024-03-02T12:00:00"
    assert service.create("expense", 10, "2024-03-03T23:59:00").date == "2024-03-03T12:00:00"


@pytest.mark.parametrize("type_, amount, day", [
    ("transfer", 10, "2024-03-01"),
    ("income", 0, "2024-03-01"),
    ("income", -5, "2024-03-01"),
    ("income", 10, "03/01/2024"),
    ("income", 10, ""),
])
def test_create_validates(service, type_, amount, day):
    with pytest.raises(ValueError):
        service.create(type_, amount, day)


def test_update_and_delete(service):
    tx = service.create("income", 50, "2024-03-01", "Uber")
    updated = service.update(tx.id, "expense", 20, "2024-03-04", "Combustível")
    assert updated.id == tx.id
    assert service.get_by_id(tx.id).date == "2024-03-04T12:00:00"

    service.delete(tx.id)
    assert service.get_all() == []


def test_update_unknown(service):
    with pytest.raises(ValueError):
        service.update("missing", "income", 10, "2024-03-01")


def test_get_for_period(service):
    service.create("income", 1, "2024-02-04")
    inside = service.create("income", 2, "2024-02-05")
    last = service.create("income", 3, "2024-03-04")
    service.create("income", 4, "2024-03-05")

    rows = service.get_for_period(BillingPeriod(date(2024, 2, 5), date(2024, 3, 4)))
    assert [t.id for t in rows] == [last.id, inside.id]
