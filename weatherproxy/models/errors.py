"""Typed failures raised by the client and transformer, rendered as JSON by the app."""

from typing import Any


class WeatherProxyError(Exception):
    """Base for failures that map onto an HTTP status and a JSON error body."""

    status_code = 500
    error = "Server error"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> dict[str, Any]:
        return {"error": self.error, "message": self.message}


class ConfigurationError(WeatherProxyError):
    """The upstream credential is not configured."""

    error = "Server configuration error"


class NotFoundError(WeatherProxyError):
    """The requested location is absent from the upstream payload."""

    status_code = 404
    error = "Not found"


class UpstreamError(WeatherProxyError):
    """The upstream API answered with an error status."""

    error = "CWA API error"

    def __init__(self, message: str, status_code: int, details: Any = None):
        super().__init__(message, status_code)
        self.details = details

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        body["details"] = self.details
        return body


class UnexpectedError(WeatherProxyError):
    """Network failure, malformed payload or anything else we can't act on."""

    error = "Server error"
