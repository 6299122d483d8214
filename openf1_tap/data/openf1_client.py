"""OpenF1 v1 API client."""

from __future__ import annotations

from typing import Any, Mapping

from loguru import logger
import requests

from openf1_tap.data.endpoints import BASE_URL, build_url


class OpenF1ClientError(Exception):
    """Raised when an OpenF1 request fails or returns a non-2xx response."""


class OpenF1Client:
    """Thin wrapper around the OpenF1 API using requests."""

    def __init__(self, base_url: str = BASE_URL, timeout_seconds: float = 10) -> None:
        self._base_url = base_url
        self._timeout_seconds = timeout_seconds

    @property
    def base_url(self) -> str:
        return self._base_url

    def fetch(self, endpoint_name: str, params: Mapping[str, Any]) -> dict[str, Any] | list[Any]:
        """Fetch one endpoint; returns the decoded JSON body (object or array)."""
        url = build_url(endpoint_name, params, base_url=self._base_url)
        return self.get_url(url)

    def get_url(self, url: str) -> dict[str, Any] | list[Any]:
        logger.debug(f"GET {url}")
        try:
            response = requests.get(url, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise OpenF1ClientError(f"OpenF1 request failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            body_text = response.text.strip()
            detail = f"Status {response.status_code}"
            if body_text:
                detail = f"{detail}, Body: {body_text}"
            raise OpenF1ClientError(f"OpenF1 request failed: {detail}")

        try:
            return response.json()
        except ValueError as exc:
            raise OpenF1ClientError("OpenF1 response was not valid JSON") from exc


__all__ = ["OpenF1Client", "OpenF1ClientError"]
