import logging
import os
import time
from typing import Any, Callable, Dict, Optional, Tuple

import requests

from weather_cli.errors import ApiError, NetworkError, api_error

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10
DEFAULT_RETRIES = 3

# Параметры запроса, значения которых нельзя выводить в лог
SECRET_PARAMS = {"apikey", "appid", "key"}

# Разбирает тело ответа с ошибкой в пару (код, сообщение); None, если формат не распознан
ErrorParser = Callable[[Any], Optional[Tuple[Optional[str], Optional[str]]]]


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, value)
        return default


def _safe_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {k: ("***" if k.lower() in SECRET_PARAMS else v) for k, v in (params or {}).items()}


def _redact(text: str, params: Optional[Dict[str, Any]]) -> str:
    """Заменить значения секретных параметров в тексте (например, в сообщении исключения)."""
    for k, v in (params or {}).items():
        if k.lower() in SECRET_PARAMS and v:
            text = text.replace(str(v), "***")
    return text


def request_with_retries(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    max_retries: Optional[int] = None,
    timeout: Optional[float] = None,
) -> requests.Response:
    """HTTP-запрос с ретраями и экспоненциальной паузой при временных ошибках."""
    if max_retries is None:
        max_retries = max(1, _env_int("WEATHER_HTTP_RETRIES", DEFAULT_RETRIES))
    if timeout is None:
        timeout = _env_int("WEATHER_HTTP_TIMEOUT", DEFAULT_TIMEOUT)

    backoff = 1
    for attempt in range(1, max_retries + 1):
        logger.debug("GET %s %s (attempt %d/%d)", url, _safe_params(params), attempt, max_retries)
        try:
            response = requests.get(url, params=params, timeout=timeout)
        except requests.RequestException as e:
            error_text = _redact(str(e), params)
            logger.warning("Network error: %s, attempt %d of %d", error_text, attempt, max_retries)
            if attempt < max_retries:
                time.sleep(backoff)
                backoff *= 2
                continue
            raise NetworkError(f"Request to {url} failed: {error_text}") from e

        # 429 или временные ошибки 5xx: пытаемся повторить
        if response.status_code == 429 or 500 <= response.status_code < 600:
            logger.warning(
                "Temporary error (HTTP %d), attempt %d of %d", response.status_code, attempt, max_retries
            )
            if attempt < max_retries:
                time.sleep(backoff)
                backoff *= 2
                continue
        return response

    # Недостижимо при max_retries >= 1
    raise NetworkError(f"Request to {url} was not attempted")


def restful_get(url: str, params: Optional[Dict[str, Any]], parse_error: ErrorParser) -> Any:
    """Выполнить GET к REST API и вернуть разобранный JSON.

    Неуспешный ответ превращается в `ApiError`; код и сообщение берутся из тела
    ответа с помощью `parse_error`, специфичного для провайдера.
    """
    response = request_with_retries(url, params)
    status = response.status_code

    try:
        data = response.json()
    except ValueError:
        data = None

    if 200 <= status < 300:
        if data is None:
            raise ApiError(status, message="Could not parse response as JSON")
        return data

    parsed = parse_error(data) if data is not None else None
    if parsed is None:
        text = (response.text or "").strip()
        raise api_error(status, message=text[:200] or None)
    code, message = parsed
    raise api_error(status, code, message)
