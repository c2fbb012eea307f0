"""Pytest configuration: project root on sys.path plus sqlite-backed fixtures."""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from database.credit_card_dao import CreditCardDAO  # noqa: E402
from database.db_manager import DatabaseManager  # noqa: E402
from database.fixed_expense_dao import FixedExpenseDAO  # noqa: E402
from database.goal_settings_dao import GoalSettingsDAO  # noqa: E402
from database.transaction_dao import TransactionDAO  # noqa: E402


@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager.open(str(tmp_path))
    yield manager
    manager.close()


@pytest.fixture
def tx_dao(db):
    return TransactionDAO(db)


@pytest.fixture
def fixed_dao(db):
    return FixedExpenseDAO(db)


@pytest.fixture
def card_dao(db):
    return CreditCardDAO(db)


@pytest.fixture
def settings_dao(db):
    return GoalSettingsDAO(db)
