import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()  # переменные окружения из .env


def env_get(key: str, default: str | None = None) -> str | None:
    """Переменная окружения или значение по умолчанию"""
    return os.getenv(key, default)


@dataclass(frozen=True)
class PosConfig:
    timezone: str = "UTC"
    cash_method: str = "Tunai"
    payment_methods: Tuple[str, ...] = ("Tunai", "Transfer", "QRIS")
    low_stock_threshold: int = 10
    currency_symbol: str = "Rp"
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def zone(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except ZoneInfoNotFoundError as exc:
            raise ValueError(f"Unknown timezone: {self.timezone}") from exc


def load_config() -> PosConfig:
    """
    Собирает PosConfig из окружения (POS_*).
    Некорректные значения → ValueError.
    """
    methods = tuple(
        m.strip()
        for m in env_get("POS_PAYMENT_METHODS", "Tunai,Transfer,QRIS").split(",")
        if m.strip()
    )
    cash_method = env_get("POS_CASH_METHOD", "Tunai")
    if cash_method not in methods:
        raise ValueError(f"POS_CASH_METHOD '{cash_method}' is not a payment method")

    raw_threshold = env_get("POS_LOW_STOCK_THRESHOLD", "10")
    try:
        threshold = int(raw_threshold)
    except ValueError as exc:
        raise ValueError(
            f"POS_LOW_STOCK_THRESHOLD must be an integer, got '{raw_threshold}'"
        ) from exc
    if threshold < 0:
        raise ValueError(
            f"POS_LOW_STOCK_THRESHOLD must not be negative, got '{raw_threshold}'"
        )

    log_level = env_get("POS_LOG_LEVEL", "INFO").upper()
    # для неизвестного имени getLevelName возвращает строку "Level X"
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"POS_LOG_LEVEL must be a logging level, got '{log_level}'")

    config = PosConfig(
        timezone=env_get("POS_TIMEZONE", "UTC"),
        cash_method=cash_method,
        payment_methods=methods,
        low_stock_threshold=threshold,
        currency_symbol=env_get("POS_CURRENCY_SYMBOL", "Rp"),
        log_level=log_level,
        log_file=env_get("POS_LOG_FILE") or None,
    )
    config.zone()
    return config
