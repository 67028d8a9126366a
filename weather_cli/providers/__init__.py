from weather_cli.providers.accuweather import AccuWeather
from weather_cli.providers.base import ParamDesc, Provider, WeatherInfo, WeatherKind
from weather_cli.providers.openweather import OpenWeather
from weather_cli.providers.weatherapi import WeatherApi

__all__ = [
    "AccuWeather",
    "OpenWeather",
    "ParamDesc",
    "Provider",
    "WeatherApi",
    "WeatherInfo",
    "WeatherKind",
]
