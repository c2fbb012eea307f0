"""Tests for services/recurring_service.py - expanding fixed expenses into occurrences."""

import logging
from datetime import date

import pytest

from models.fixed_expense import FixedExpense
from services.recurring_service import (
    RecurringService,
    occurrences_in_range,
    sort_occurrences,
    toggle_excluded,
    toggle_paid,
)
from models.period import BillingPeriod


def make_expense(**overrides) -> FixedExpense:
    """Create a monthly expense with sensible defaults."""
    fields = dict(
        id="fx-1",
        title="Aluguel",
        amount=800.0,
        category="Aluguel",
        start_date="2024-01-10",
        recurrence="monthly",
    )
    fields.update(overrides)
    return FixedExpense(**fields)


# =============================================================================
# Expansion rules
# =============================================================================


def test_twelve_installments_one_per_cycle():
    expense = make_expense(recurrence="installments", installments=12)
    occurrences = occurrences_in_range([expense], date(2024, 1, 1), date(2025, 12, 31))

    assert len(occurrences) == 12
    assert [o.current_installment for o in occurrences] == list(range(1, 13))
    assert [o.occurrence_date for o in occurrences] == [date(2024, m, 10) for m in range(1, 13)]
    assert occurrences[2].installment_label == "3/12"


def test_installments_in_window_keep_their_number():
    expense = make_expense(recurrence="installments", installments=12)
    occurrences = occurrences_in_range([expense], date(2024, 6, 1), date(2024, 6, 30))
    assert len(occurrences) == 1
    assert occurrences[0].current_installment == 6
    assert occurrences[0].occurrence_date == date(2024, 6, 10)


def test_installments_stop_at_count():
    expense = make_expense(recurrence="installments", installments=3)
    assert occurrences_in_range([expense], date(2024, 4, 1), date(2024, 12, 31)) == []


def test_installments_without_count_degenerate_to_single(caplog):
    expense = make_expense(recurrence="installments", installments=None)
    with caplog.at_level(logging.WARNING):
        occurrences = occurrences_in_range([expense], date(2024, 1, 1), date(2024, 12, 31))

    assert len(occurrences) == 1
    assert occurrences[0].occurrence_date == date(2024, 1, 10)
    assert occurrences[0].current_installment is None
    assert any(r.levelno == logging.WARNING for r in caplog.records)


def test_monthly_runs_indefinitely():
    expense = make_expense()
    occurrences = occurrences_in_range([expense], date(2030, 5, 1), date(2030, 5, 31))
    assert [o.occurrence_date for o in occurrences] == [date(2030, 5, 10)]
    assert occurrences[0].current_installment is None


def test_monthly_day_31_clamps_in_short_months():
    expense = make_expense(start_date="2024-01-31")
    occurrences = occurrences_in_range([expense], date(2024, 1, 1), date(2024, 4, 30))
    assert [o.occurrence_date for o in occurrences] == [
        date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31), date(2024, 4, 30),
    ]


def test_monthly_follows_offset_cycles():
    expense = make_expense(start_date="2024-01-05")
    # Cycles start on the 15th; Jan 5 belongs to the Dec 15 - Jan 14 cycle
    occurrences = occurrences_in_range([expense], date(2024, 1, 15), date(2024, 3, 14), start_day=15)
    assert [o.occurrence_date for o in occurrences] == [date(2024, 2, 5), date(2024, 3, 5)]


def test_single_only_on_start_date():
    expense = make_expense(recurrence="single", start_date="2024-05-05")
    assert len(occurrences_in_range([expense], date(2024, 5, 1), date(2024, 5, 31))) == 1
    assert occurrences_in_range([expense], date(2024, 6, 1), date(2024, 6, 30)) == []


def test_start_after_range_contributes_nothing():
    expense = make_expense(start_date="2025-01-10")
    assert occurrences_in_range([expense], date(2024, 1, 1), date(2024, 12, 31)) == []


def test_excluded_dates_are_skipped():
    expense = make_expense(excluded_dates=frozenset({"2024-03-10"}))
    occurrences = occurrences_in_range([expense], date(2024, 1, 1), date(2024, 4, 30))
    assert [o.occurrence_date for o in occurrences] == [
        date(2024, 1, 10), date(2024, 2, 10), date(2024, 4, 10),
    ]


def test_excluded_single_disappears():
    expense = make_expense(recurrence="single", excluded_dates=frozenset({"2024-01-10"}))
    assert occurrences_in_range([expense], date(2024, 1, 1), date(2024, 1, 31)) == []


def test_paid_status_is_per_occurrence():
    expense = make_expense(
        recurrence="installments", installments=6, paid_dates=frozenset({"2024-03-10"}),
    )
    occurrences = occurrences_in_range([expense], date(2024, 1, 1), date(2024, 6, 30))
    paid = {o.current_installment: o.is_paid for o in occurrences}
    assert paid[3] is True
    assert paid[4] is False


def test_empty_or_inverted_range_yields_nothing():
    assert occurrences_in_range([make_expense()], date(2024, 5, 1), date(2024, 4, 1)) == []
    assert occurrences_in_range([], date(2024, 1, 1), date(2024, 12, 31)) == []


# =============================================================================
# Ordering and toggles
# =============================================================================


def test_sort_occurrences_newest_first_with_stable_ties():
    a = make_expense(id="a", start_date="2024-01-10")
    b = make_expense(id="b", start_date="2024-01-10")
    c = make_expense(id="c", start_date="2024-01-20")
    occurrences = occurrences_in_range([a, b, c], date(2024, 1, 1), date(2024, 1, 31))
    assert [o.id for o in sort_occurrences(occurrences)] == ["c", "a", "b"]


def test_toggle_paid_round_trip():
    expense = make_expense(paid_dates=frozenset({"2024-01-10"}))
    paid = toggle_paid(expense, date(2024, 2, 10))
    assert paid.paid_dates == {"2024-01-10", "2024-02-10"}
    assert paid.id == expense.id
    assert toggle_paid(paid, "2024-02-10").paid_dates == expense.paid_dates
    # The input is never mutated
    assert expense.paid_dates == {"2024-01-10"}


def test_toggle_excluded_round_trip():
    expense = make_expense()
    skipped = toggle_excluded(expense, "2024-02-10T12:00:00")
    assert skipped.excluded_dates == {"2024-02-10"}
    assert toggle_excluded(skipped, date(2024, 2, 10)).excluded_dates == frozenset()


# =============================================================================
# RecurringService
# =============================================================================


@pytest.fixture
def service(fixed_dao, settings_dao):
    return RecurringService(fixed_dao, settings_dao)


def test_create_and_list_for_period(service):
    created = service.create("Internet", 120.0, "2024-01-05", category="Internet")
    service.create("Celular", 1200.0, "2024-02-01", recurrence="installments", installments=10)

    march = BillingPeriod(date(2024, 3, 1), date(2024, 3, 31))
    occurrences = service.get_for_period(march)
    assert [o.title for o in occurrences] == ["Internet", "Celular"]
    assert service.get_by_id(created.id).category == "Internet"


def test_create_validates_input(service):
    with pytest.raises(ValueError):
        service.create("", 10.0, "2024-01-01")
    with pytest.raises(ValueError):
        service.create("Luz", 0, "2024-01-01")
    with pytest.raises(ValueError):
        service.create("Luz", 10.0, "not a date")
    with pytest.raises(ValueError):
        service.create("Luz", 10.0, "2024-01-01", recurrence="installments")
    with pytest.raises(ValueError):
        service.create("Luz", 10.0, "2024-01-01", recurrence="weekly")


def test_income_never_keeps_a_card(service):
    income = service.create("Aluguel recebido", 500.0, "2024-01-05", type_="income", card_id="card-1")
    assert income.card_id is None


def test_update_keeps_paid_and_excluded(service):
    expense = service.create("Luz", 150.0, "2024-01-15")
    service.toggle_paid(expense.id, "2024-01-15")
    service.skip_occurrence(expense.id, "2024-02-15")

    updated = service.update(expense.id, "Energia", 180.0, "2024-01-15")
    assert updated.title == "Energia"
    assert updated.paid_dates == {"2024-01-15"}
    assert updated.excluded_dates == {"2024-02-15"}


def test_skip_and_restore_are_idempotent(service):
    expense = service.create("Luz", 150.0, "2024-01-15")
    service.skip_occurrence(expense.id, "2024-02-15")
    service.skip_occurrence(expense.id, "2024-02-15")
    assert service.get_by_id(expense.id).excluded_dates == {"2024-02-15"}
    service.restore_occurrence(expense.id, "2024-02-15")
    service.restore_occurrence(expense.id, "2024-02-15")
    assert service.get_by_id(expense.id).excluded_dates == frozenset()


def test_totals_for_period(service):
    rent = service.create("Aluguel", 800.0, "2024-01-10")
    service.create("Ajuda", 300.0, "2024-01-20", type_="income")
    service.toggle_paid(rent.id, "2024-01-10")

    totals = service.get_totals(BillingPeriod(date(2024, 1, 1), date(2024, 1, 31)))
    assert totals == {"income": 300.0, "expense": 800.0, "paid": 800.0, "net": -500.0}


def test_unknown_id_raises(service):
    with pytest.raises(ValueError):
        service.toggle_paid("missing", "2024-01-01")
