"""Default city registry: short keys mapped to CWA location names."""

from weatherproxy.config.schema import CityConfig

DEFAULT_CITIES: list[CityConfig] = [
    CityConfig(slug="taipei", location_name="台北市"),
    CityConfig(slug="taichung", location_name="台中市"),
    CityConfig(slug="changhua", location_name="彰化縣"),
    CityConfig(slug="kaohsiung", location_name="高雄市"),
    CityConfig(slug="yilan", location_name="宜蘭縣"),
]
