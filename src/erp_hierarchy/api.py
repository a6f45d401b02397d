"""ERP backend API client."""

import json
import logging
from typing import Any

import requests

from erp_hierarchy.config import AFFILIATION_ID, API_BASE_URL, REQUEST_TIMEOUT, resolve_api_token
from erp_hierarchy.logging_config import API_LOGGER_NAME


class ApiError(RuntimeError):
    """A transport failure or a ``success: false`` response from the backend."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ErpApi:
    """Encapsulated ERP backend API.

    Every response is the backend's ``{"success", "message", "data"}``
    envelope; failures of any kind raise ApiError.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        token: str | None = None,
        affiliation_id: str | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self.base_url = (base_url or API_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.sess = requests.Session()
        self.logger = logging.getLogger(API_LOGGER_NAME)

        self.sess.headers["Content-Type"] = "application/json"
        api_token = token if token is not None else resolve_api_token()
        if api_token:
            self.sess.headers["Authorization"] = f"Bearer {api_token}"
        affiliation = affiliation_id if affiliation_id is not None else AFFILIATION_ID
        if affiliation:
            self.sess.headers["affiliation"] = str(affiliation)

        self.logger.debug(
            f"API ready: base_url {self.base_url!r}, "
            f"token {'set' if api_token else 'missing'}, affiliation {affiliation!r}"
        )

    def call(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: Any = None,
    ) -> dict[str, Any]:
        """Invoke an endpoint, return the decoded envelope."""
        query = {k: _query_value(v) for k, v in (params or {}).items() if v is not None}
        self.logger.debug(f"Making request: {method} {path!r} {query!r} {repr(body)[:64]}")

        try:
            r = self.sess.request(
                method,
                f"{self.base_url}{path}",
                params=query or None,
                data=json.dumps(body) if body is not None else None,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            msg = f"{method} {path} failed: {e}"
            raise ApiError(msg) from e

        if not r.ok:
            msg = _error_message(r) or f"{method} {path} failed with HTTP {r.status_code}"
            raise ApiError(msg, status_code=r.status_code)

        if r.status_code == 204 or not r.content:
            return {"success": True, "data": None}

        try:
            rv = r.json()
        except ValueError as e:
            msg = f"{method} {path} returned a non-JSON body"
            raise ApiError(msg, status_code=r.status_code) from e

        if not isinstance(rv, dict) or "success" not in rv:
            # Endpoints without the envelope: treat the body as the payload.
            return {"success": True, "data": rv}
        if not rv["success"]:
            msg = rv.get("message") or f"{method} {path} reported failure"
            raise ApiError(msg, status_code=r.status_code)
        return rv


def _query_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def _error_message(r: requests.Response) -> str | None:
    """Pull the backend's error message out of a failed response, if any."""
    try:
        data = r.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        message = data.get("message")
        return str(message) if message else None
    return None
