"""Normalized forecast models and their JSON shape."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ForecastPeriod:
    start_time: str
    end_time: str
    weather: str = ""
    rain: str = ""  # e.g. "20%"
    min_temp: str = ""  # e.g. "18°C"
    max_temp: str = ""
    comfort: str = ""
    wind_speed: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "weather": self.weather,
            "rain": self.rain,
            "minTemp": self.min_temp,
            "maxTemp": self.max_temp,
            "comfort": self.comfort,
            "windSpeed": self.wind_speed,
        }


@dataclass(frozen=True)
class CityForecast:
    city: str
    update_time: str
    forecasts: list[ForecastPeriod] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "city": self.city,
            "updateTime": self.update_time,
            "forecasts": [p.to_dict() for p in self.forecasts],
        }
