import datetime as dt
from typing import Any, Dict, Optional, Tuple

from weather_cli.api_client import restful_get
from weather_cli.errors import LocationNotFoundError, UnsupportedDateError
from weather_cli.providers.base import Provider, WeatherInfo, WeatherKind

GEO_URL = "https://api.openweathermap.org/geo/1.0/direct"
WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"

KINDS = {
    "Clear": WeatherKind.CLEAR,
    "Clouds": WeatherKind.CLOUDS,
    "Rain": WeatherKind.RAIN,
    "Drizzle": WeatherKind.RAIN,
    "Snow": WeatherKind.SNOW,
    "Thunderstorm": WeatherKind.THUNDERSTORM,
    "Mist": WeatherKind.FOG,
    "Fog": WeatherKind.FOG,
    "Haze": WeatherKind.FOG,
    "Smoke": WeatherKind.FOG,
}


def parse_error(data: Any) -> Optional[Tuple[Optional[str], Optional[str]]]:
    if isinstance(data, dict) and "message" in data:
        cod = data.get("cod")
        return (str(cod) if cod is not None else None), str(data["message"])
    return None


def location_label(item: Dict[str, Any]) -> str:
    name = item.get("name") or "неизвестный город"
    region = item.get("state") or item.get("country")
    return f"{name} ({region})" if region else name


def weather_info(entry: Dict[str, Any], label: str, day: Optional[dt.date] = None) -> WeatherInfo:
    conditions = (entry.get("weather") or [{}])[0]
    return WeatherInfo(
        location=label,
        kind=KINDS.get(conditions.get("main", ""), WeatherKind.UNKNOWN),
        description=conditions.get("description", ""),
        temperature=float(entry["main"]["temp"]),
        wind_speed=float(entry.get("wind", {}).get("speed", 0.0)),
        humidity=float(entry["main"]["humidity"]),
        day=day,
    )


def pick_forecast_entry(forecast: Dict[str, Any], day: dt.date) -> Optional[Dict[str, Any]]:
    """Выбрать из 3-часового прогноза запись, ближайшую к полудню нужного дня (по местному времени)."""
    offset = dt.timedelta(seconds=forecast.get("city", {}).get("timezone", 0))
    noon = dt.datetime.combine(day, dt.time(12, 0))
    best = None
    best_distance = None
    for entry in forecast.get("list", []):
        local = dt.datetime.fromtimestamp(entry["dt"], tz=dt.timezone.utc).replace(tzinfo=None) + offset
        if local.date() != day:
            continue
        distance = abs(local - noon)
        if best_distance is None or distance < best_distance:
            best, best_distance = entry, distance
    return best


class OpenWeather(Provider):
    name = "openweather"
    description = "OpenWeatherMap (https://openweathermap.org/)"
    max_forecast_days = 4

    def get_coordinates(self, location: str) -> Dict[str, Any]:
        """Получить координаты населённого пункта через геокодер."""
        data = restful_get(GEO_URL, {"q": location, "limit": 1, "appid": self.apikey}, parse_error)
        if not data:
            raise LocationNotFoundError(location)
        item = data[0]
        self.logger.debug("Resolved %s to %s, %s", location, item["lat"], item["lon"])
        return item

    def get_weather(self, location: str, date: Optional[dt.date] = None) -> WeatherInfo:
        offset = self.check_date(date)
        item = self.get_coordinates(location)
        params = {
            "lat": f"{item['lat']:.4f}",
            "lon": f"{item['lon']:.4f}",
            "appid": self.apikey,
            "units": "metric",
        }
        label = location_label(item)

        if date is None:
            return weather_info(restful_get(WEATHER_URL, params, parse_error), label)

        forecast = restful_get(FORECAST_URL, params, parse_error)
        entry = pick_forecast_entry(forecast, date)
        if entry is None:
            if offset == 0:
                # Вечером сегодняшних 3-часовых шагов в прогнозе уже нет
                self.logger.debug("No forecast entries left for today, using current weather")
                return weather_info(restful_get(WEATHER_URL, params, parse_error), label, date)
            raise UnsupportedDateError(f"No forecast data for {date.isoformat()} in provider '{self.name}'")
        return weather_info(entry, label, date)
