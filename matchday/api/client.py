"""
HTTP client for the team-management backend.

A thin wrapper around ``requests.Session`` that joins paths onto the
configured base URL, sends JSON bodies with the bearer token, and turns
failures into ``ApiError``. Requests are never retried.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from ..errors import ApiError
from ..utils.config import Settings

logger = logging.getLogger(__name__)


class ApiClient:
    """
    JSON client for the backend REST API.

    Args:
        base_url: Backend root, e.g. ``http://localhost:3001``
        token: Bearer token; omitted from requests when None
        timeout: Seconds before a request is abandoned
        session: Session to use (a new one by default)
    """

    def __init__(self, base_url: str, token: Optional[str] = None,
                 timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json",
                                     "Accept": "application/json"})
        self.set_token(token)

    @classmethod
    def from_settings(cls, settings: Settings,
                      session: Optional[requests.Session] = None) -> "ApiClient":
        return cls(settings.backend_url, settings.auth_token, settings.http_timeout, session)

    def set_token(self, token: Optional[str]) -> None:
        self.token = token
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        else:
            self.session.headers.pop("Authorization", None)

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method: str, path: str, json: Any = None,
                params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Send one request and decode the JSON response.

        Returns:
            The decoded body, or None for 204 No Content and empty bodies

        Raises:
            ApiError: On network failure or a non-2xx status
        """
        url = self.url(path)
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, json=json, params=params,
                                            timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise ApiError(f"Request to {url} failed: {e}") from e

        if not response.ok:
            raise ApiError(self._error_message(response), status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"Invalid JSON from {url}", status_code=response.status_code) from e

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        fallback = f"HTTP {response.status_code}: {response.reason}"
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict):
            return body.get("message") or body.get("error") or fallback
        return fallback

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, data: Any = None) -> Any:
        return self.request("POST", path, json=data)

    def put(self, path: str, data: Any = None) -> Any:
        return self.request("PUT", path, json=data)

    def patch(self, path: str, data: Any = None) -> Any:
        return self.request("PATCH", path, json=data)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)
