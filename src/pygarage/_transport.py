"""HTTP transport for the hosted table and auth APIs."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pygarage._constants import AUTH_PREFIX, CLIENT_INFO, USER_AGENT
from pygarage._redact import redact_for_log
from pygarage.config import GarageConfig
from pygarage.exceptions import GarageApiError, GarageTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        ...


def _error_message(body: Mapping[str, Any], fallback: str) -> str:
    for key in ("message", "msg", "error_description", "error"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return fallback


def decode_response(status: int, text: str, *, endpoint: str) -> Any:
    """Decode a backend response body or raise the matching error.

    * 2xx with an empty body (``Prefer: return=minimal``, 204) -> ``None``
    * 2xx with JSON -> the decoded value
    * non-2xx with a JSON error object -> :class:`GarageApiError`
    * anything else -> :class:`GarageTransportError`
    """
    stripped = text.strip()
    ok = 200 <= status < 300

    if ok and not stripped:
        return None

    try:
        body = json.loads(stripped) if stripped else None
    except json.JSONDecodeError as exc:
        if ok:
            raise GarageTransportError(
                f"Invalid JSON from {endpoint}: {stripped[:200]}",
                status_code=status,
                endpoint=endpoint,
            ) from exc
        body = None

    if ok:
        return body

    if isinstance(body, dict):
        code = body.get("code", body.get("error_code", ""))
        raise GarageApiError(
            _error_message(body, f"HTTP {status}"),
            code=str(code) if code is not None else "",
            endpoint=endpoint,
            status_code=status,
            details=body.get("details"),
            hint=body.get("hint"),
        )

    raise GarageTransportError(
        f"HTTP {status} from {endpoint}: {stripped[:200]}",
        status_code=status,
        endpoint=endpoint,
    )


class HttpTransport:
    """HTTP transport that adds API-key, bearer and schema headers."""

    def __init__(
        self,
        config: GarageConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session
        self._access_token: str | None = None

    def set_access_token(self, token: str | None) -> None:
        """Use *token* as bearer for subsequent requests (``None`` -> anon key)."""
        self._access_token = token

    def _build_headers(self, path: str, method: str, extra: Mapping[str, str] | None) -> dict[str, str]:
        bearer = self._access_token or self._config.anon_key
        headers: dict[str, str] = {
            "accept": "application/json",
            "apikey": self._config.anon_key,
            "authorization": f"Bearer {bearer}",
            "user-agent": USER_AGENT,
            "x-client-info": CLIENT_INFO,
        }
        if not path.startswith(AUTH_PREFIX):
            profile_header = "accept-profile" if method in ("GET", "HEAD") else "content-profile"
            headers[profile_header] = self._config.schema
        if extra:
            headers.update(extra)
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body (or ``None``)."""
        method = method.upper()
        url = f"{self._config.base_url}{path}"
        request_headers = self._build_headers(path, method, headers)
        data: str | None = None
        if json_body is not None:
            data = json.dumps(json_body, separators=(",", ":"))
            request_headers.setdefault("content-type", "application/json")

        _logger.debug("%s %s params=%s", method, url, dict(params or {}))
        if self._config.api_trace_enabled:
            _logger.debug(
                "Request trace %s headers=%s body=%s",
                path,
                redact_for_log(request_headers),
                redact_for_log(json_body),
            )

        try:
            async with self._http.request(
                method,
                url,
                params=dict(params) if params else None,
                data=data,
                headers=request_headers,
            ) as resp:
                status = resp.status
                text = await resp.text()
        except aiohttp.ClientError as exc:
            raise GarageTransportError(
                f"Request to {path} failed: {exc}",
                endpoint=path,
            ) from exc

        result = decode_response(status, text, endpoint=path)
        if self._config.api_trace_enabled:
            _logger.debug("Response trace %s status=%d body=%s", path, status, redact_for_log(result))
        return result
