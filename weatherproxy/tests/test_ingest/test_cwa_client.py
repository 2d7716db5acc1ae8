"""Tests for CWA API client with mocked httpx."""

import httpx
import pytest
import respx

from weatherproxy.config.schema import UpstreamConfig
from weatherproxy.ingest.cwa_client import CwaClient
from weatherproxy.models.errors import ConfigurationError, UnexpectedError, UpstreamError

DATASET_URL = "https://test-cwa.example.com/api/v1/rest/datastore/F-C0032-001"


@pytest.fixture
def cwa() -> CwaClient:
    return CwaClient(api_key="test-key-123", base_url="https://test-cwa.example.com/api")


class TestGetDataset:
    @respx.mock
    def test_success(self, cwa: CwaClient, cwa_payload: dict):
        respx.get(DATASET_URL).mock(return_value=httpx.Response(200, json=cwa_payload))

        result = cwa.get_dataset()
        assert result["records"]["datasetDescription"] == "三十六小時天氣預報"
        assert len(result["records"]["location"]) == 6

    @respx.mock
    def test_credential_sent_as_query_param(self, cwa: CwaClient, cwa_payload: dict):
        route = respx.get(DATASET_URL).mock(
            return_value=httpx.Response(200, json=cwa_payload)
        )

        cwa.get_dataset()
        assert route.call_count == 1
        request = route.calls[0].request
        assert request.url.params["Authorization"] == "test-key-123"
        assert "locationName" not in request.url.params

    @respx.mock(assert_all_called=False)
    def test_missing_key_skips_network(self):
        route = respx.get(DATASET_URL).mock(return_value=httpx.Response(200, json={}))
        client = CwaClient(api_key="", base_url="https://test-cwa.example.com/api")

        with pytest.raises(ConfigurationError, match="CWA_API_KEY"):
            client.get_dataset()
        assert not route.called

    @respx.mock
    def test_upstream_error_propagates_status(self, cwa: CwaClient):
        body = {"success": "false", "message": "Resource not found or authorization failed"}
        respx.get(DATASET_URL).mock(return_value=httpx.Response(401, json=body))

        with pytest.raises(UpstreamError) as exc_info:
            cwa.get_dataset()
        assert exc_info.value.status_code == 401
        assert exc_info.value.message == body["message"]
        assert exc_info.value.details == body

    @respx.mock
    def test_upstream_error_plain_text(self, cwa: CwaClient):
        respx.get(DATASET_URL).mock(return_value=httpx.Response(503, text="Service Unavailable"))

        with pytest.raises(UpstreamError) as exc_info:
            cwa.get_dataset()
        assert exc_info.value.status_code == 503
        assert exc_info.value.details == "Service Unavailable"
        assert exc_info.value.message == "Unable to fetch weather data"

    @respx.mock
    def test_no_retry(self, cwa: CwaClient):
        route = respx.get(DATASET_URL).mock(return_value=httpx.Response(503))

        with pytest.raises(UpstreamError):
            cwa.get_dataset()
        assert route.call_count == 1

    @respx.mock
    def test_network_failure(self, cwa: CwaClient):
        respx.get(DATASET_URL).mock(side_effect=httpx.ConnectError)

        with pytest.raises(UnexpectedError):
            cwa.get_dataset()

    @respx.mock
    def test_non_json_body(self, cwa: CwaClient):
        respx.get(DATASET_URL).mock(return_value=httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(UnexpectedError):
            cwa.get_dataset()


class TestFromConfig:
    def test_fields(self):
        upstream = UpstreamConfig(
            base_url="https://test-cwa.example.com/api/",
            dataset_id="F-D0047-089",
            timeout_seconds=5.0,
            api_key_env="OTHER_KEY",
        )
        client = CwaClient.from_config(upstream, "k")
        assert client.dataset_url == "https://test-cwa.example.com/api/v1/rest/datastore/F-D0047-089"
        assert client.timeout == 5.0
        assert client.api_key_env == "OTHER_KEY"

    def test_missing_key_names_env_var(self):
        client = CwaClient.from_config(UpstreamConfig(api_key_env="OTHER_KEY"), "")
        with pytest.raises(ConfigurationError, match="OTHER_KEY"):
            client.get_dataset()
