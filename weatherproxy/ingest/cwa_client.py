"""CWA open-data API client for the forecast datastore."""

import logging

import httpx

from weatherproxy.config.schema import CWA_BASE_URL, FORECAST_DATASET_ID, UpstreamConfig
from weatherproxy.models.errors import ConfigurationError, UnexpectedError, UpstreamError

logger = logging.getLogger(__name__)


class CwaClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = CWA_BASE_URL,
        dataset_id: str = FORECAST_DATASET_ID,
        timeout: float = 30.0,
        api_key_env: str = "CWA_API_KEY",
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.dataset_id = dataset_id
        self.timeout = timeout
        self.api_key_env = api_key_env

    @classmethod
    def from_config(cls, upstream: UpstreamConfig, api_key: str) -> "CwaClient":
        return cls(
            api_key=api_key,
            base_url=upstream.base_url,
            dataset_id=upstream.dataset_id,
            timeout=upstream.timeout_seconds,
            api_key_env=upstream.api_key_env,
        )

    @property
    def dataset_url(self) -> str:
        return f"{self.base_url}/v1/rest/datastore/{self.dataset_id}"

    def get_dataset(self) -> dict:
        """Fetch the full dataset for every location in one request.

        The credential is checked before anything goes over the wire.
        """
        if not self.api_key:
            raise ConfigurationError(
                f"Set {self.api_key_env} in the environment or .env file"
            )

        try:
            resp = httpx.get(
                self.dataset_url,
                params={"Authorization": self.api_key},
                timeout=self.timeout,
            )
        except httpx.RequestError as e:
            logger.error("CWA request failed: %s -> %s", self.dataset_id, e)
            raise UnexpectedError("Unable to fetch weather data, try again later") from e

        if resp.status_code >= 400:
            details = _decode_body(resp)
            logger.error(
                "CWA API %d: %s -> %s", resp.status_code, self.dataset_id, details
            )
            message = "Unable to fetch weather data"
            if isinstance(details, dict) and details.get("message"):
                message = str(details["message"])
            raise UpstreamError(message, resp.status_code, details)

        try:
            return resp.json()
        except ValueError as e:
            logger.error("CWA returned a non-JSON body for %s", self.dataset_id)
            raise UnexpectedError("Unable to fetch weather data, try again later") from e


def _decode_body(resp: httpx.Response):
    try:
        return resp.json()
    except ValueError:
        return resp.text
