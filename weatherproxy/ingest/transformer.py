"""Forecast transformer: reshapes the CWA dataset into per-period forecasts."""

import logging

from weatherproxy.ingest.cwa_client import CwaClient
from weatherproxy.models.errors import NotFoundError, UnexpectedError
from weatherproxy.models.forecast import CityForecast, ForecastPeriod

logger = logging.getLogger(__name__)

# elementName -> (ForecastPeriod field, unit suffix)
ELEMENT_FIELDS: dict[str, tuple[str, str]] = {
    "Wx": ("weather", ""),
    "PoP": ("rain", "%"),
    "MinT": ("min_temp", "°C"),
    "MaxT": ("max_temp", "°C"),
    "CI": ("comfort", ""),
    "WS": ("wind_speed", ""),
}


class ForecastTransformer:
    def __init__(self, client: CwaClient):
        self.client = client

    def fetch(self, location_name: str) -> CityForecast:
        """Fetch the dataset and normalize the entry for one location.

        Raises ConfigurationError, UpstreamError or UnexpectedError from the
        client, and NotFoundError if the location is not in the payload.
        """
        raw = self.client.get_dataset()
        return transform_location(raw, location_name)


def transform_location(raw: dict, location_name: str) -> CityForecast:
    records = raw.get("records") if isinstance(raw, dict) else None
    entry = _find_location(records, location_name)
    if entry is None:
        raise NotFoundError(f"No weather data available for {location_name}")

    try:
        periods = _build_periods(entry)
    except (KeyError, TypeError, IndexError, AttributeError) as e:
        logger.error("Malformed CWA entry for %s: %r", location_name, e)
        raise UnexpectedError("Unable to fetch weather data, try again later") from e

    return CityForecast(
        city=entry["locationName"],
        update_time=records.get("datasetDescription", ""),
        forecasts=periods,
    )


def _find_location(records, location_name: str) -> dict | None:
    if not isinstance(records, dict):
        return None
    locations = records.get("location")
    if not isinstance(locations, list):
        return None
    for loc in locations:
        if isinstance(loc, dict) and loc.get("locationName") == location_name:
            return loc
    return None


def _build_periods(entry: dict) -> list[ForecastPeriod]:
    elements = entry.get("weatherElement") or []
    if not elements:
        return []

    # Unmapped elements are passed over on purpose, so they never set the period count.
    mapped = [el for el in elements if el.get("elementName") in ELEMENT_FIELDS]
    timed = mapped or elements[:1]
    lengths = [len(el["time"]) for el in timed]
    count = min(lengths)
    if len(set(lengths)) > 1:
        logger.warning(
            "Weather elements for %s have mismatched lengths %s, using %d periods",
            entry.get("locationName"), lengths, count,
        )

    periods: list[ForecastPeriod] = []
    for i in range(count):
        slot = timed[0]["time"][i]
        fields = {"start_time": slot["startTime"], "end_time": slot["endTime"]}
        for el in mapped:
            name, suffix = ELEMENT_FIELDS[el["elementName"]]
            value = el["time"][i]["parameter"].get("parameterName")
            if value is not None:
                fields[name] = f"{value}{suffix}"
        periods.append(ForecastPeriod(**fields))
    return periods
