"""Tests for the dataset-backed DAOs."""

from datetime import date

import pytest

from database.credit_card_dao import CreditCardDAO
from database.fixed_expense_dao import FixedExpenseDAO
from database.goal_settings_dao import GoalSettingsDAO
from database.transaction_dao import TransactionDAO
from models.credit_card import CreditCard
from models.fixed_expense import FixedExpense
from models.goal_settings import GoalSettings
from models.transaction import Transaction


def _write_raw(db, name, payload):
    conn = db.get_connection()
    conn.execute("INSERT OR REPLACE INTO datasets(name, payload) VALUES (?, ?)", (name, payload))
    conn.commit()


# =============================================================================
# Collections
# =============================================================================


class TestTransactionDAO:
    def test_records_survive_a_new_instance(self, db, tx_dao):
        tx_dao.create(Transaction("t1", 120.0, "income", "iFood", "2024-03-01T12:00:00"))
        tx_dao.create(Transaction("t2", 30.0, "expense", "Combustível", "2024-03-02T12:00:00"))

        fresh = TransactionDAO(db)
        assert [t.id for t in fresh.get_all()] == ["t1", "t2"]
        assert fresh.get_by_id("t2").description == "Combustível"

    def test_update_and_delete(self, db, tx_dao):
        tx_dao.create(Transaction("t1", 120.0, "income", "iFood", "2024-03-01T12:00:00"))
        tx_dao.update(Transaction("t1", 150.0, "income", "Uber", "2024-03-01T12:00:00"))
        assert TransactionDAO(db).get_by_id("t1").amount == 150.0

        tx_dao.delete("t1")
        assert TransactionDAO(db).get_all() == []

    def test_update_unknown_id_raises(self, tx_dao):
        with pytest.raises(ValueError):
            tx_dao.update(Transaction("nope", 1.0, "income", "", "2024-03-01T12:00:00"))

    def test_get_between_newest_first(self, tx_dao):
        for day in ("2024-02-29", "2024-03-01", "2024-03-15", "2024-04-01"):
            tx_dao.create(Transaction(day, 10.0, "income", "", f"{day}T12:00:00"))
        rows = tx_dao.get_between(date(2024, 3, 1), date(2024, 3, 31))
        assert [t.id for t in rows] == ["2024-03-15", "2024-03-01"]

    def test_get_all_returns_a_copy(self, tx_dao):
        tx_dao.get_all().append("junk")
        assert tx_dao.get_all() == []


def test_corrupt_payload_reads_as_empty(db):
    _write_raw(db, "transactions", "{not json")
    _write_raw(db, "creditCards", '{"an": "object"}')
    assert TransactionDAO(db).get_all() == []
    assert CreditCardDAO(db).get_all() == []


def test_fixed_expense_round_trip(db, fixed_dao):
    expense = FixedExpense(
        id="fx", title="Celular", amount=150.0, category="Financiamento",
        start_date="2024-01-10", recurrence="installments", installments=10,
        card_id="card-1", excluded_dates=frozenset({"2024-03-10"}),
        paid_dates=frozenset({"2024-01-10", "2024-02-10"}),
    )
    fixed_dao.create(expense)
    assert FixedExpenseDAO(db).get_by_id("fx") == expense

    raw = db.load_dataset("fixedExpenses", [])
    assert raw[0]["startDate"] == "2024-01-10"
    assert raw[0]["paidDates"] == ["2024-01-10", "2024-02-10"]
    assert raw[0]["cardId"] == "card-1"


def test_clear_card_detaches_only_that_card(db, fixed_dao):
    for i, card in enumerate(["a", "a", "b", None]):
        fixed_dao.create(FixedExpense(f"fx{i}", "x", 10.0, "x", "2024-01-01", card_id=card))
    assert fixed_dao.clear_card("a") == 2
    assert fixed_dao.clear_card("missing") == 0
    assert [e.card_id for e in FixedExpenseDAO(db).get_all()] == [None, None, "b", None]
    assert [e.id for e in fixed_dao.get_by_card("b")] == ["fx2"]


def test_card_lookup_by_name_ignores_case(card_dao):
    card_dao.create(CreditCard("c1", "Nubank", "#8B5CF6", 2000.0))
    assert card_dao.get_by_name("  nubank ").id == "c1"
    assert card_dao.get_by_name("Inter") is None


# =============================================================================
# Goal settings
# =============================================================================


def test_goal_settings_default_when_missing(settings_dao):
    assert settings_dao.get() == GoalSettings()


def test_goal_settings_camel_case_round_trip(db, settings_dao):
    settings = GoalSettings(
        start_day_of_month=5,
        end_day_of_month=4,
        days_off=frozenset({"2024-03-10"}),
        daily_saving_target=12.5,
        savings_dates=frozenset({"2024-03-01"}),
        savings_adjustments={"2024-03-02": 40.0},
        savings_withdrawals={"2024-03-03": 10.0},
    )
    settings_dao.save(settings)

    raw = db.load_dataset("goalSettings", {})
    assert raw["startDayOfMonth"] == 5
    assert raw["endDayOfMonth"] == 4
    assert raw["daysOff"] == ["2024-03-10"]
    assert raw["savingsAdjustments"] == {"2024-03-02": 40.0}
    assert GoalSettingsDAO(db).get() == settings


def test_goal_settings_drop_zero_amounts(db):
    _write_raw(
        db, "goalSettings",
        '{"startDayOfMonth": 10, "savingsWithdrawals": {"2024-01-01": 0, "2024-01-02": 5}}',
    )
    settings = GoalSettingsDAO(db).get()
    assert settings.start_day_of_month == 10
    assert settings.end_day_of_month is None
    assert settings.savings_withdrawals == {"2024-01-02": 5.0}


def test_goal_settings_non_object_payload(db):
    _write_raw(db, "goalSettings", "[1, 2, 3]")
    assert GoalSettingsDAO(db).get() == GoalSettings()


# =============================================================================
# Damaged rows
# =============================================================================


def test_rows_that_do_not_parse_are_skipped(db, caplog):
    db.save_dataset("transactions", [
        {"amount": 5},
        "junk",
        {"id": "t1", "amount": "lots"},
        {"id": "t2", "amount": 10, "type": "income", "description": "iFood", "date": "2024-03-01T12:00:00"},
    ])
    assert [t.id for t in TransactionDAO(db).get_all()] == ["t2"]
    assert "skipped_row" in caplog.text


def test_skipped_rows_do_not_block_writes(db):
    db.save_dataset("creditCards", [{"name": "no id"}, {"id": "c1", "name": "Nubank"}])
    dao = CreditCardDAO(db)
    dao.create(CreditCard("c2", "Inter"))
    assert [c.id for c in CreditCardDAO(db).get_all()] == ["c1", "c2"]


@pytest.mark.parametrize("payload", [
    {"startDayOfMonth": "abc"},
    {"daysOff": 5},
    {"savingsAdjustments": ["2024-01-01"]},
])
def test_bad_goal_settings_fall_back_to_defaults(db, payload):
    db.save_dataset("goalSettings", payload)
    assert GoalSettingsDAO(db).get() == GoalSettings()


def test_clear_unknown_cards(db, fixed_dao):
    for i, card in enumerate(["a", "ghost", None]):
        fixed_dao.create(FixedExpense(f"fx{i}", "x", 10.0, "x", "2024-01-01", card_id=card))
    assert fixed_dao.clear_unknown_cards(["a", "b"]) == 1
    assert [e.card_id for e in FixedExpenseDAO(db).get_all()] == ["a", None, None]
