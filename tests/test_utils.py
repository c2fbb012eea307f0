"""Tests for utils/currency.py and utils/app_config.py."""

import json
import logging

import pytest

from utils import app_config
from utils.currency import format_currency, format_signed, parse_amount


# =============================================================================
# Currency
# =============================================================================


def test_format_currency():
    assert format_currency(1234.5) == "R$ 1,234.50"
    assert format_currency(-20) == "-R$ 20.00"
    assert format_currency(3, "$") == "$ 3.00"


def test_format_signed():
    assert format_signed(10) == "+R$ 10.00"
    assert format_signed(-10) == "-R$ 10.00"


@pytest.mark.parametrize("text, expected", [
    ("1.234,56", 1234.56),
    ("1234.56", 1234.56),
    ("R$ 50", 50.0),
    ("12,5", 12.5),
    ("", None),
    ("abc", None),
    (None, None),
])
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


# =============================================================================
# Bootstrap config
# =============================================================================


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(app_config, "CONFIG_DIR", tmp_path / "cfg")
    monkeypatch.setattr(app_config, "CONFIG_FILE", tmp_path / "cfg" / "config.json")
    return tmp_path / "cfg"


def test_missing_config_is_empty(config_dir):
    assert app_config.load_config() == {}
    assert app_config.get_db_folder() is None
    assert app_config.get_log_level() == logging.INFO


def test_corrupt_config_is_empty(config_dir):
    config_dir.mkdir()
    (config_dir / "config.json").write_text("{oops", encoding="utf-8")
    assert app_config.load_config() == {}


def test_db_folder_round_trip(config_dir):
    app_config.set_db_folder("/data/corre")
    assert app_config.get_db_folder() == "/data/corre"
    assert json.loads((config_dir / "config.json").read_text(encoding="utf-8")) == {"db_folder": "/data/corre"}
    assert not (config_dir / "config.tmp").exists()

    app_config.set_db_folder(None)
    assert app_config.get_db_folder() is None


@pytest.mark.parametrize("value, level", [("debug", logging.DEBUG), ("WARNING", logging.WARNING), ("loud", logging.INFO)])
def test_log_level(config_dir, value, level):
    app_config.save_config({"log_level": value})
    assert app_config.get_log_level() == level
