import datetime as dt
from typing import Any, Dict, Optional, Tuple

from weather_cli.api_client import restful_get
from weather_cli.dates import format_date
from weather_cli.errors import ApiError, LocationNotFoundError, UnsupportedDateError
from weather_cli.providers.base import KM_H_TO_M_S, Provider, WeatherInfo, WeatherKind

BASE_URL = "https://api.weatherapi.com/v1"

# Коды состояний: https://www.weatherapi.com/docs/weather_conditions.json
CLEAR_CODES = {1000}
CLOUD_CODES = {1003, 1006, 1009}
FOG_CODES = {1030, 1135, 1147}
THUNDER_CODES = {1087, 1273, 1276, 1279, 1282}
SNOW_CODES = {
    1066, 1069, 1072, 1114, 1117, 1168, 1171, 1204, 1207, 1210, 1213, 1216,
    1219, 1222, 1225, 1237, 1249, 1252, 1255, 1258, 1261, 1264,
}

# Код ответа API, когда запрос не удалось сопоставить с местоположением
NO_LOCATION_CODE = "1006"


def kind_from_code(code: Optional[int]) -> WeatherKind:
    if code is None:
        return WeatherKind.UNKNOWN
    if code in CLEAR_CODES:
        return WeatherKind.CLEAR
    if code in CLOUD_CODES:
        return WeatherKind.CLOUDS
    if code in FOG_CODES:
        return WeatherKind.FOG
    if code in THUNDER_CODES:
        return WeatherKind.THUNDERSTORM
    if code in SNOW_CODES:
        return WeatherKind.SNOW
    return WeatherKind.RAIN


def parse_error(data: Any) -> Optional[Tuple[Optional[str], Optional[str]]]:
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        code = error.get("code")
        return (str(code) if code is not None else None), error.get("message")
    return None


def location_label(location: Dict[str, Any]) -> str:
    name = location.get("name") or "неизвестный город"
    region = location.get("region") or location.get("country")
    return f"{name} ({region})" if region else name


class WeatherApi(Provider):
    name = "weatherapi"
    description = "WeatherAPI.com (https://www.weatherapi.com/)"
    # Бесплатный план: прогноз на 3 дня (сегодня и ещё два), история за 7 дней
    max_forecast_days = 2
    max_history_days = 7

    def _get(self, endpoint: str, location: str, **params: Any) -> Dict[str, Any]:
        params.update({"key": self.apikey, "q": location})
        try:
            return restful_get(f"{BASE_URL}/{endpoint}", params, parse_error)
        except ApiError as e:
            if e.code == NO_LOCATION_CODE:
                raise LocationNotFoundError(location) from e
            raise

    def get_weather(self, location: str, date: Optional[dt.date] = None) -> WeatherInfo:
        offset = self.check_date(date)

        if date is None:
            data = self._get("current.json", location, aqi="no")
            current = data["current"]
            return WeatherInfo(
                location=location_label(data.get("location", {})),
                kind=kind_from_code(current.get("condition", {}).get("code")),
                description=current.get("condition", {}).get("text", ""),
                temperature=float(current["temp_c"]),
                wind_speed=float(current["wind_kph"]) * KM_H_TO_M_S,
                humidity=float(current["humidity"]),
            )

        if offset < 0:
            data = self._get("history.json", location, dt=format_date(date))
        else:
            data = self._get("forecast.json", location, days=offset + 1, aqi="no", alerts="no")

        wanted = format_date(date)
        days = data.get("forecast", {}).get("forecastday", [])
        forecast_day = next((item for item in days if item.get("date") == wanted), None)
        if forecast_day is None:
            raise UnsupportedDateError(f"No forecast data for {wanted} in provider '{self.name}'")

        summary = forecast_day["day"]
        return WeatherInfo(
            location=location_label(data.get("location", {})),
            kind=kind_from_code(summary.get("condition", {}).get("code")),
            description=summary.get("condition", {}).get("text", ""),
            temperature=float(summary["avgtemp_c"]),
            wind_speed=float(summary["maxwind_kph"]) * KM_H_TO_M_S,
            humidity=float(summary["avghumidity"]),
            day=date,
        )
