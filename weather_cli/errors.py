"""Исключения приложения.

Все ошибки, о которых нужно сообщить пользователю, наследуются от
`WeatherError`: CLI перехватывает их и печатает сообщение без трейсбека.
"""

from typing import Optional


class WeatherError(Exception):
    pass


class ConfigError(WeatherError):
    """Ошибка чтения, разбора или содержимого файла конфигурации."""


class UnknownProviderError(WeatherError):
    def __init__(self, name: str):
        super().__init__(f"No such provider: {name}")
        self.name = name


class DateParseError(WeatherError, ValueError):
    pass


class UnsupportedDateError(WeatherError):
    pass


class LocationNotFoundError(WeatherError):
    def __init__(self, location: str):
        super().__init__(f"Could not resolve location '{location}'")
        self.location = location


class NetworkError(WeatherError):
    pass


class ApiError(WeatherError):
    """Ошибка, которую вернул API провайдера."""

    def __init__(self, status: int, code: Optional[str] = None, message: Optional[str] = None):
        self.status = status
        self.code = code
        self.message = message
        text = f"API error (HTTP {status})"
        if code:
            text += f" '{code}'"
        if message:
            text += f": {message}"
        super().__init__(text)


class InvalidApiKeyError(ApiError):
    pass


class RateLimitError(ApiError):
    pass


def api_error(status: int, code: Optional[str] = None, message: Optional[str] = None) -> ApiError:
    """Подобрать подходящий подкласс `ApiError` по статусу и тексту ответа."""
    lowered = (message or "").lower()
    if status == 429 or "exceeded" in lowered:
        return RateLimitError(status, code, message)
    if status in (401, 403):
        return InvalidApiKeyError(status, code, message)
    return ApiError(status, code, message)
