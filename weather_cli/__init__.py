"""Консольный клиент сервисов прогноза погоды."""

__version__ = "0.1.0"
