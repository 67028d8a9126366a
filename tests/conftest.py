import datetime as dt
import json

import pytest

TODAY = dt.date(2024, 5, 10)

ENV_VARS = [
    "WEATHER_CONFIG",
    "WEATHER_LOG_LEVEL",
    "WEATHER_HTTP_TIMEOUT",
    "WEATHER_HTTP_RETRIES",
    "ACCUWEATHER_APIKEY",
    "OPENWEATHER_APIKEY",
    "WEATHERAPI_APIKEY",
    "FAKE_APIKEY",
    "OTHER_APIKEY",
]


class DummyResp:
    def __init__(self, status_code, json_data=None, text=None):
        self.status_code = status_code
        self._json = json_data
        self.text = text if text is not None else json.dumps(json_data)

    def json(self):
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json


class DummyHttp:
    """Подменяет requests.get: отвечает по первому совпавшему фрагменту URL."""

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, dict(params or {})))
        for fragment, responses in self.routes:
            if fragment in url:
                resp = responses.pop(0) if isinstance(responses, list) else responses
                if isinstance(resp, Exception):
                    raise resp
                return resp
        raise AssertionError(f"Unexpected request to {url}")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("weather_cli.cli.load_dotenv", lambda *a, **kw: False)


@pytest.fixture
def http(monkeypatch):
    def install(routes):
        dummy = DummyHttp(routes)
        monkeypatch.setattr("weather_cli.api_client.requests.get", dummy.get)
        monkeypatch.setattr("weather_cli.api_client.time.sleep", lambda seconds: None)
        return dummy

    return install


@pytest.fixture
def fixed_today(monkeypatch):
    monkeypatch.setattr("weather_cli.dates.today", lambda: TODAY)
    return TODAY
