import datetime as dt
from typing import Any, Dict, Optional, Tuple

from weather_cli.api_client import restful_get
from weather_cli.errors import LocationNotFoundError, UnsupportedDateError, WeatherError
from weather_cli.providers.base import KM_H_TO_M_S, Provider, WeatherInfo, WeatherKind

BASE_URL = "https://dataservice.accuweather.com"
SEARCH_URL = f"{BASE_URL}/locations/v1/cities/search"
CURRENT_URL = f"{BASE_URL}/currentconditions/v1/"
DAILY_URL = f"{BASE_URL}/forecasts/v1/daily/5day/"

# Облачность в процентах, начиная с которой погода считается облачной
CLOUDY_THRESHOLD = 5.0


def parse_error(data: Any) -> Optional[Tuple[Optional[str], Optional[str]]]:
    if isinstance(data, dict) and ("Code" in data or "Message" in data):
        return data.get("Code"), data.get("Message")
    return None


def weather_kind(precipitation_type: Optional[str], cloud_cover: Optional[float]) -> WeatherKind:
    if precipitation_type:
        if precipitation_type in ("Snow", "Ice", "Mixed"):
            return WeatherKind.SNOW
        return WeatherKind.RAIN
    if cloud_cover is not None and cloud_cover > CLOUDY_THRESHOLD:
        return WeatherKind.CLOUDS
    return WeatherKind.CLEAR


def location_label(item: Dict[str, Any]) -> str:
    name = item.get("LocalizedName") or "неизвестный город"
    region = (item.get("AdministrativeArea") or {}).get("LocalizedName") or (item.get("Country") or {}).get(
        "LocalizedName"
    )
    return f"{name} ({region})" if region else name


class AccuWeather(Provider):
    name = "accuweather"
    description = "AccuWeather (https://www.accuweather.com/)"
    # Дневной прогноз на 5 дней: сегодня и ещё четыре
    max_forecast_days = 4

    def get_location(self, location: str) -> Dict[str, Any]:
        """Получить ключ местоположения AccuWeather по названию."""
        locations = restful_get(SEARCH_URL, {"apikey": self.apikey, "q": location}, parse_error)
        if not locations:
            raise LocationNotFoundError(location)
        item = locations[0]
        self.logger.debug("Resolved %s to location key %s", location, item["Key"])
        return item

    def get_weather(self, location: str, date: Optional[dt.date] = None) -> WeatherInfo:
        self.check_date(date)
        item = self.get_location(location)
        label = location_label(item)

        if date is None:
            data = restful_get(
                f"{CURRENT_URL}{item['Key']}", {"apikey": self.apikey, "details": "true"}, parse_error
            )
            if not data:
                raise WeatherError(f"No current condition entries for {label}")
            condition = data[0]
            return WeatherInfo(
                location=label,
                kind=weather_kind(condition.get("PrecipitationType"), condition.get("CloudCover")),
                description=condition.get("WeatherText", ""),
                temperature=float(condition["Temperature"]["Metric"]["Value"]),
                wind_speed=float(condition["Wind"]["Speed"]["Metric"]["Value"]) * KM_H_TO_M_S,
                humidity=float(condition["RelativeHumidity"]),
            )

        data = restful_get(
            f"{DAILY_URL}{item['Key']}",
            {"apikey": self.apikey, "metric": "true", "details": "true"},
            parse_error,
        )
        wanted = date.isoformat()
        forecast = next(
            (entry for entry in data.get("DailyForecasts", []) if entry.get("Date", "")[:10] == wanted), None
        )
        if forecast is None:
            raise UnsupportedDateError(f"No forecast data for {wanted} in provider '{self.name}'")

        temperature = forecast["Temperature"]
        daytime = forecast["Day"]
        return WeatherInfo(
            location=label,
            kind=weather_kind(daytime.get("PrecipitationType"), daytime.get("CloudCover")),
            description=daytime.get("IconPhrase", ""),
            temperature=(float(temperature["Minimum"]["Value"]) + float(temperature["Maximum"]["Value"])) / 2,
            wind_speed=float(daytime["Wind"]["Speed"]["Value"]) * KM_H_TO_M_S,
            humidity=float(daytime["RelativeHumidity"]["Average"]),
            day=date,
        )
