import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import logging
import pytest
from zoneinfo import ZoneInfo
from pos_core.config import PosConfig, env_get, load_config
from pos_core.logging import setup_logging

POS_VARS = (
    "POS_TIMEZONE",
    "POS_CASH_METHOD",
    "POS_PAYMENT_METHODS",
    "POS_LOW_STOCK_THRESHOLD",
    "POS_CURRENCY_SYMBOL",
    "POS_LOG_LEVEL",
    "POS_LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in POS_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = load_config()
    assert config == PosConfig()
    assert config.zone() == ZoneInfo("UTC")


def test_env_get_default():
    assert env_get("POS_TIMEZONE", "fallback") == "fallback"


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("POS_TIMEZONE", "Asia/Jakarta")
    monkeypatch.setenv("POS_PAYMENT_METHODS", "Cash, Card")
    monkeypatch.setenv("POS_CASH_METHOD", "Cash")
    monkeypatch.setenv("POS_LOW_STOCK_THRESHOLD", "3")
    monkeypatch.setenv("POS_LOG_LEVEL", "debug")

    config = load_config()

    assert config.zone() == ZoneInfo("Asia/Jakarta")
    assert config.payment_methods == ("Cash", "Card")
    assert config.cash_method == "Cash"
    assert config.low_stock_threshold == 3
    assert config.log_level == "DEBUG"
    assert config.log_file is None


@pytest.mark.parametrize(
    "name,value",
    [
        ("POS_LOW_STOCK_THRESHOLD", "many"),
        ("POS_LOW_STOCK_THRESHOLD", "-1"),
        ("POS_LOG_LEVEL", "LOUD"),
        ("POS_CASH_METHOD", "Gold"),
        ("POS_TIMEZONE", "Mars/Olympus"),
    ],
)
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        load_config()


def test_zero_threshold_allowed(monkeypatch):
    monkeypatch.setenv("POS_LOW_STOCK_THRESHOLD", "0")
    assert load_config().low_stock_threshold == 0


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "pos.log"
    logger = setup_logging("INFO", str(log_file))

    root = logging.getLogger()
    handlers = list(root.handlers)
    try:
        logging.getLogger("pos_core.async_ops").info("checkout done")
        for handler in handlers:
            handler.flush()
    finally:
        for handler in handlers:
            root.removeHandler(handler)
            handler.close()

    assert logger.name == "pos_core"
    assert "INFO - pos_core.async_ops - checkout done" in log_file.read_text(encoding="utf-8")
