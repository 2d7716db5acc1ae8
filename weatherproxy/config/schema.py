"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field

CWA_BASE_URL = "https://opendata.cwa.gov.tw/api"
FORECAST_DATASET_ID = "F-C0032-001"  # 36-hour general forecast


class CityConfig(BaseModel):
    model_config = {"extra": "forbid"}

    slug: str = Field(min_length=1, pattern=r"^[a-z0-9-]+$")
    location_name: str = Field(min_length=1)
    enabled: bool = True


class UpstreamConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = CWA_BASE_URL
    dataset_id: str = FORECAST_DATASET_ID
    api_key_env: str = "CWA_API_KEY"
    timeout_seconds: float = Field(default=30.0, gt=0.0)


class ServerConfig(BaseModel):
    model_config = {"extra": "forbid"}

    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    cors_origins: list[str] = ["*"]


class ProxyConfig(BaseModel):
    model_config = {"extra": "forbid"}

    upstream: UpstreamConfig = UpstreamConfig()
    server: ServerConfig = ServerConfig()
    cities: list[CityConfig] = []

    def city_registry(self) -> dict[str, CityConfig]:
        """Enabled cities keyed by slug."""
        return {c.slug: c for c in self.cities if c.enabled}
