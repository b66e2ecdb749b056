"""Generic JSON request helper for the finance REST API."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import urlencode

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:3001"


class ApiError(RuntimeError):
    """Raised for any non-2xx answer from the API."""

    def __init__(self, message: str, status: int | None = None, errors: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.errors = errors or {}


class TransportError(ApiError):
    """The request never produced an HTTP answer (DNS, refused, timeout...)."""


class SessionExpiredError(ApiError):
    pass


def _render_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class ApiClient:
    base_url: str = DEFAULT_API_URL
    token_store: Any = None
    timeout: float = 10
    opener: Any = field(default=None, repr=False)

    def build_url(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> str:
        url = f"{self.base_url.rstrip('/')}{endpoint}"
        if params:
            query = [(k, _render_param(v)) for k, v in params.items() if v is not None and v != ""]
            if query:
                url += ("&" if "?" in url else "?") + urlencode(query)
        return url

    def _token(self) -> str | None:
        if self.token_store is None:
            return None
        return self.token_store.token

    def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
    ) -> Dict[str, Any]:
        url = self.build_url(endpoint, params)
        data = json.dumps(body).encode() if body is not None else None
        req = urllib.request.Request(url, data=data, method=method)
        req.add_header("Content-Type", "application/json")
        token = self._token()
        if token:
            req.add_header("Authorization", f"Bearer {token}")

        logger.debug("API ▶ %s %s", method, url)
        try:
            with (self.opener or urllib.request.urlopen)(req, timeout=self.timeout) as resp:
                status = resp.status
                raw = resp.read().decode(errors="replace")
        except urllib.error.HTTPError as exc:
            self._raise_for_error(exc.code, exc.read().decode(errors="replace"), token)
        except (urllib.error.URLError, OSError) as exc:
            raise TransportError(f"Could not reach {self.base_url}: {exc}") from exc

        logger.debug("API ◀ %s %s", status, raw[:200])
        if status == 204 or not raw:
            return {}
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ApiError(f"Invalid JSON in response: {exc}", status=status) from exc

    def _raise_for_error(self, status: int, raw: str, token: str | None) -> None:
        try:
            payload = json.loads(raw) if raw else {}
        except json.JSONDecodeError:
            payload = {}
        if status == 401 and token:
            self.token_store.clear()
            raise SessionExpiredError("Session expired. Please log in again.", status=status)
        raise ApiError(
            payload.get("message") or "Request failed",
            status=status,
            errors=payload.get("errors"),
        )

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, body: Any = None) -> Dict[str, Any]:
        return self.request("POST", endpoint, body=body)

    def put(self, endpoint: str, body: Any = None) -> Dict[str, Any]:
        return self.request("PUT", endpoint, body=body)

    def delete(self, endpoint: str) -> Dict[str, Any]:
        return self.request("DELETE", endpoint)
