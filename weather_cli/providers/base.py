"""Общий интерфейс провайдеров погоды.

Каждый провайдер - подкласс `Provider`, который знает свои параметры
конфигурации, поддерживаемый диапазон дат и умеет получать погоду
для названия населённого пункта.
"""

import datetime as dt
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, List, Optional

from weather_cli.dates import days_from_today, format_date
from weather_cli.errors import ConfigError, UnsupportedDateError

# Перевод км/ч в м/с
KM_H_TO_M_S = 1.0 / 3.6


class WeatherKind(Enum):
    CLEAR = "clear"
    CLOUDS = "clouds"
    RAIN = "rain"
    SNOW = "snow"
    THUNDERSTORM = "thunderstorm"
    FOG = "fog"
    UNKNOWN = "unknown"


@dataclass
class WeatherInfo:
    location: str
    kind: WeatherKind
    description: str
    temperature: float  # °C
    wind_speed: float  # м/с
    humidity: float  # %
    day: Optional[dt.date] = None  # None - текущая погода


@dataclass(frozen=True)
class ParamDesc:
    id: str
    name: str
    description: str
    secret: bool = False


APIKEY_PARAM = ParamDesc(
    id="apikey",
    name="User's API key",
    description="used to authenticate user requests",
    secret=True,
)


class Provider(ABC):
    """Базовый класс провайдера погоды."""

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    params: ClassVar[List[ParamDesc]] = [APIKEY_PARAM]
    # Сколько дней вперёд доступен прогноз; 0 - только текущая погода
    max_forecast_days: ClassVar[int] = 0
    # Сколько дней назад доступна история; 0 - прошлые даты не поддерживаются
    max_history_days: ClassVar[int] = 0

    def __init__(self, apikey: str):
        self.apikey = apikey
        self.logger = logging.getLogger(f"{__name__}.{self.name or self.__class__.__name__}")

    @classmethod
    def from_config(cls, section: Dict[str, str]) -> "Provider":
        """Создать провайдера из секции конфигурации, проверив набор параметров."""
        known = {param.id for param in cls.params}
        unknown = sorted(set(section) - known)
        if unknown:
            raise ConfigError(
                f"Unknown parameter(s) for provider '{cls.name}': {', '.join(unknown)}. "
                f"Expected: {', '.join(sorted(known))}"
            )

        values = {}
        for param in cls.params:
            value = (section.get(param.id) or "").strip()
            if not value:
                raise ConfigError(f"Missing parameter '{param.id}' for provider '{cls.name}'")
            values[param.id] = value
        return cls(**values)

    @classmethod
    def date_window(cls) -> str:
        """Человекочитаемое описание поддерживаемых дат."""
        parts = ["текущая погода"]
        if cls.max_forecast_days:
            parts.append(f"прогноз на {cls.max_forecast_days} дн. вперёд")
        else:
            parts.append("без прогноза")
        if cls.max_history_days:
            parts.append(f"история за {cls.max_history_days} дн. назад")
        else:
            parts.append("без истории")
        return ", ".join(parts)

    def check_date(self, value: Optional[dt.date]) -> Optional[int]:
        """Проверить, что дата в поддерживаемом окне; вернуть смещение от сегодняшнего дня."""
        if value is None:
            return None
        offset = days_from_today(value)
        if offset > self.max_forecast_days:
            if self.max_forecast_days == 0:
                raise UnsupportedDateError(
                    f"Sorry, provider '{self.name}' doesn't support forecasts for future dates"
                )
            raise UnsupportedDateError(
                f"Provider '{self.name}' supports forecasts at most {self.max_forecast_days} day(s) ahead, "
                f"{format_date(value)} is {offset} day(s) ahead"
            )
        if -offset > self.max_history_days:
            if self.max_history_days == 0:
                raise UnsupportedDateError(
                    f"Sorry, provider '{self.name}' doesn't support weather for past dates"
                )
            raise UnsupportedDateError(
                f"Provider '{self.name}' keeps history at most {self.max_history_days} day(s) back, "
                f"{format_date(value)} is {-offset} day(s) back"
            )
        return offset

    @abstractmethod
    def get_weather(self, location: str, date: Optional[dt.date] = None) -> WeatherInfo:
        """Получить погоду в населённом пункте на дату (None - текущая погода)."""
