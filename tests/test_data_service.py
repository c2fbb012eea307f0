"""Tests for services/data_service.py - JSON backup export and import."""

import json

import pytest

from database.credit_card_dao import CreditCardDAO
from database.db_manager import DatabaseManager
from database.fixed_expense_dao import FixedExpenseDAO
from database.goal_settings_dao import GoalSettingsDAO
from database.transaction_dao import TransactionDAO
from models.credit_card import CreditCard
from models.fixed_expense import FixedExpense
from models.goal_settings import GoalSettings
from models.transaction import Transaction
from services.data_service import DataService


def make_service(db) -> DataService:
    return DataService(
        db, TransactionDAO(db), FixedExpenseDAO(db), CreditCardDAO(db), GoalSettingsDAO(db),
    )


@pytest.fixture
def service(db, tx_dao, fixed_dao, card_dao, settings_dao):
    tx_dao.create(Transaction("t1", 120.0, "income", "iFood", "2024-03-01T12:00:00"))
    fixed_dao.create(FixedExpense("fx1", "Aluguel", 800.0, "Aluguel", "2024-01-10", card_id="c1"))
    card_dao.create(CreditCard("c1", "Nubank"))
    settings_dao.save(GoalSettings(start_day_of_month=5, daily_saving_target=10.0))
    return DataService(db, tx_dao, fixed_dao, card_dao, settings_dao)


# =============================================================================
# Export
# =============================================================================


def test_export_contains_every_dataset(service):
    data = service.export_json()
    assert data["export_version"] == 1
    assert [t["id"] for t in data["transactions"]] == ["t1"]
    assert data["fixedExpenses"][0]["cardId"] == "c1"
    assert data["creditCards"][0]["name"] == "Nubank"
    assert data["goalSettings"]["startDayOfMonth"] == 5
    # Plain JSON all the way down
    json.dumps(data)


def test_export_into_fresh_database(service, tmp_path):
    data = json.loads(json.dumps(service.export_json()))

    other_db = DatabaseManager.open(str(tmp_path / "other"))
    try:
        other = make_service(other_db)
        stats = other.import_json(data, "replace")
        assert stats == {"transactions": 1, "fixed_expenses": 1, "credit_cards": 1, "goal_settings": 1}

        copy = make_service(other_db).export_json()
        for key in ("transactions", "fixedExpenses", "creditCards", "goalSettings"):
            assert copy[key] == data[key]
    finally:
        other_db.close()


# =============================================================================
# Import
# =============================================================================


def test_merge_adds_unseen_ids_only(service, tx_dao, settings_dao):
    data = {
        "transactions": [
            {"id": "t1", "amount": 999, "type": "income", "description": "changed", "date": "2024-03-01T12:00:00"},
            {"id": "t2", "amount": 50, "type": "expense", "description": "Gasolina", "date": "2024-03-02T12:00:00"},
        ],
        "creditCards": [{"id": "c2", "name": "Inter"}],
        "goalSettings": {"startDayOfMonth": 20},
    }
    stats = service.import_json(data, "merge")

    assert stats == {"transactions": 1, "fixed_expenses": 0, "credit_cards": 1, "goal_settings": 0}
    assert tx_dao.get_by_id("t1").amount == 120.0
    assert tx_dao.get_by_id("t2").description == "Gasolina"
    assert settings_dao.get().start_day_of_month == 5


def test_merge_dedupes_within_the_file(service, tx_dao):
    row = {"id": "t9", "amount": 10, "type": "income", "description": "", "date": "2024-03-05T12:00:00"}
    stats = service.import_json({"transactions": [row, dict(row, amount=20)]}, "merge")
    assert stats["transactions"] == 1
    assert tx_dao.get_by_id("t9").amount == 10.0


def test_replace_discards_local_data(service, tx_dao, card_dao, fixed_dao, settings_dao):
    data = {
        "transactions": [
            {"id": "t5", "amount": 70, "type": "income", "description": "Uber", "date": "2024-04-01T12:00:00"},
        ],
        "goalSettings": {"startDayOfMonth": 20, "daysOff": ["2024-04-07"]},
    }
    service.import_json(data, "replace")

    assert [t.id for t in tx_dao.get_all()] == ["t5"]
    assert card_dao.get_all() == []
    assert fixed_dao.get_all() == []
    assert settings_dao.get().start_day_of_month == 20
    assert settings_dao.get().days_off == {"2024-04-07"}


def test_replace_without_settings_resets_them(service, settings_dao):
    service.import_json({"transactions": []}, "replace")
    assert settings_dao.get() == GoalSettings()


def test_malformed_rows_are_skipped(service, tx_dao, caplog):
    data = {"transactions": [
        {"amount": 5},
        "garbage",
        {"id": "t3", "amount": "abc"},
        {"id": "t4", "amount": 15, "type": "income", "date": "2024-03-03T12:00:00"},
    ]}
    stats = service.import_json(data, "merge")
    assert stats["transactions"] == 1
    assert tx_dao.get_by_id("t4").amount == 15.0
    assert "skipped_row" in caplog.text


@pytest.mark.parametrize("data, mode", [({}, "append"), ([], "merge"), ("text", "replace")])
def test_invalid_input_rejected(service, tx_dao, data, mode):
    with pytest.raises(ValueError):
        service.import_json(data, mode)
    assert len(tx_dao.get_all()) == 1


def test_clear_all(service, db, tx_dao, settings_dao):
    service.clear_all()
    assert tx_dao.get_all() == []
    assert settings_dao.get() == GoalSettings()
    assert make_service(db).export_json()["creditCards"] == []


def test_replace_with_bad_settings_keeps_local_data(service, tx_dao, card_dao, settings_dao):
    data = {"transactions": [], "goalSettings": {"startDayOfMonth": "abc"}}
    with pytest.raises(ValueError):
        service.import_json(data, "replace")

    assert [t.id for t in tx_dao.get_all()] == ["t1"]
    assert [c.id for c in card_dao.get_all()] == ["c1"]
    assert settings_dao.get().start_day_of_month == 5


def test_replace_rejects_non_object_settings(service, tx_dao):
    with pytest.raises(ValueError):
        service.import_json({"goalSettings": ["not", "settings"]}, "replace")
    assert len(tx_dao.get_all()) == 1


# =============================================================================
# Card references
# =============================================================================


def _fixed_row(fx_id, card_id):
    return {
        "id": fx_id, "title": "Celular", "amount": 100, "startDate": "2024-01-10",
        "recurrence": "monthly", "type": "expense", "cardId": card_id,
    }


def test_merge_detaches_unknown_cards(service, fixed_dao):
    data = {"fixedExpenses": [_fixed_row("fx2", "c1"), _fixed_row("fx3", "ghost")]}
    service.import_json(data, "merge")

    assert fixed_dao.get_by_id("fx2").card_id == "c1"
    assert fixed_dao.get_by_id("fx3").card_id is None
    assert fixed_dao.get_by_id("fx1").card_id == "c1"


def test_replace_keeps_cards_from_the_backup(service, fixed_dao):
    data = {
        "fixedExpenses": [_fixed_row("fx2", "c9"), _fixed_row("fx3", "c1")],
        "creditCards": [{"id": "c9", "name": "Inter"}],
    }
    service.import_json(data, "replace")

    assert fixed_dao.get_by_id("fx2").card_id == "c9"
    # c1 only existed locally and was wiped
    assert fixed_dao.get_by_id("fx3").card_id is None
