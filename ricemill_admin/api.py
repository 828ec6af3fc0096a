from __future__ import annotations

"""
Authenticated JSON client for the back-office REST API.

A single `ApiClient` wraps a `requests.Session`:
- paths are resolved against `<base_url><prefix>`; absolute URLs pass through
- JSON bodies are sent with `Content-Type: application/json`
- a bearer token is attached when one has been set
- non-2xx responses raise `ApiError` carrying the status and parsed body
- a 401 additionally calls the registered `on_unauthorized` hook first

Response bodies are parsed leniently: an empty or non-JSON body yields None,
and the caller's schema validation decides whether that is acceptable.
"""

import json
import logging
from typing import Any, Callable, Dict, Optional

import requests

from .config import Settings, normalize_prefix
from .errors import ApiError, RequestFailed

logger = logging.getLogger(__name__)


def _safe_json(text: str) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def _message_from(data: Any, fallback: str) -> str:
    if isinstance(data, dict) and "message" in data:
        return str(data["message"])
    return fallback


class ApiClient:
    """Thin wrapper around `requests.Session` for the admin API."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        prefix: str = "/api",
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.prefix = normalize_prefix(prefix)
        self.timeout = timeout
        self.session = session or requests.Session()
        self._token: Optional[str] = token
        self._on_unauthorized: Optional[Callable[[], None]] = None

    @classmethod
    def from_settings(cls, settings: Settings, session: Optional[requests.Session] = None) -> "ApiClient":
        return cls(
            base_url=settings.api_base_url,
            prefix=settings.api_prefix,
            token=settings.api_token,
            timeout=settings.request_timeout,
            session=session,
        )

    def set_auth_token(self, token: Optional[str]) -> None:
        self._token = token

    def set_on_unauthorized(self, handler: Optional[Callable[[], None]]) -> None:
        self._on_unauthorized = handler

    def url(self, path: str) -> str:
        if path.startswith("http"):
            return path
        p = path if path.startswith("/") else f"/{path}"
        return f"{self.base_url}{self.prefix}{p}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
    ) -> Any:
        """Send a request and return the parsed JSON body.

        Raises:
            RequestFailed: the transport failed before a response arrived
            ApiError: the server responded with a non-2xx status
        """
        url = self.url(path)
        data = json.dumps(body) if body is not None else None
        logger.debug("%s %s params=%s", method, url, params)
        try:
            res = self.session.request(
                method,
                url,
                params=params,
                data=data,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise RequestFailed(f"Could not reach the server: {e}") from e

        parsed = _safe_json(res.text)

        if res.status_code == 401:
            if self._on_unauthorized is not None:
                self._on_unauthorized()
            raise ApiError(_message_from(parsed, "Unauthorized"), 401, parsed)

        if not res.ok:
            message = _message_from(parsed, res.reason or f"HTTP {res.status_code}")
            logger.warning("%s %s -> %s: %s", method, url, res.status_code, message)
            raise ApiError(message, res.status_code, parsed)

        return parsed

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: Any = None) -> Any:
        return self.request("POST", path, body=body)


__all__ = ["ApiClient"]
