import pytest

from weather_cli.errors import ConfigError, UnknownProviderError
from weather_cli.providers import AccuWeather, OpenWeather, WeatherApi
from weather_cli.registry import ProviderRegistry, default_registry


def test_default_registry_is_alphabetical():
    registry = default_registry()
    assert registry.names() == ["accuweather", "openweather", "weatherapi"]
    assert list(registry) == registry.names()
    assert len(registry) == 3
    assert registry.get("weatherapi") is WeatherApi


def test_duplicate_registration_fails():
    registry = ProviderRegistry()
    registry.register(OpenWeather)
    with pytest.raises(ValueError):
        registry.register(OpenWeather)
    registry.register(OpenWeather, name="owm")
    assert "owm" in registry


def test_unknown_provider():
    with pytest.raises(UnknownProviderError) as exc:
        default_registry().get("yandex")
    assert str(exc.value) == "No such provider: yandex"


def test_create_from_section():
    provider = default_registry().create("accuweather", {"apikey": " key "})
    assert isinstance(provider, AccuWeather)
    assert provider.apikey == "key"


def test_create_validates_parameters():
    registry = default_registry()
    with pytest.raises(ConfigError) as exc:
        registry.create("openweather", {})
    assert "Missing parameter 'apikey'" in str(exc.value)

    with pytest.raises(ConfigError) as exc:
        registry.create("openweather", {"apikey": "k", "units": "imperial"})
    assert "Unknown parameter(s)" in str(exc.value)


def test_date_window_description():
    assert OpenWeather.date_window() == "текущая погода, прогноз на 4 дн. вперёд, без истории"
    assert WeatherApi.date_window() == "текущая погода, прогноз на 2 дн. вперёд, история за 7 дн. назад"
