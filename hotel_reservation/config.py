"""
Настройки приложения.

Значения по умолчанию переопределяются переменными окружения
HOTEL_DATA_FILE, HOTEL_CURRENCY и HOTEL_LOG_LEVEL.
"""

import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class HotelSettings(BaseModel):
    """Настройки системы бронирования."""

    data_file: Path = Path("hotel_data.json")
    currency: str = Field("RUB", min_length=3, max_length=3)
    log_level: str = "WARNING"

    @field_validator("currency")
    @classmethod
    def currency_upper(cls, v: str) -> str:
        return v.upper()

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"Неизвестный уровень логирования: {v}")
        return v

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "HotelSettings":
        """Создает настройки из переменных окружения."""
        environ = os.environ if environ is None else environ
        values = {}
        for key, env_name in (
            ("data_file", "HOTEL_DATA_FILE"),
            ("currency", "HOTEL_CURRENCY"),
            ("log_level", "HOTEL_LOG_LEVEL"),
        ):
            if environ.get(env_name):
                values[key] = environ[env_name]
        return cls(**values)
