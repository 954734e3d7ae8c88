"""Auth service endpoints.

Endpoints:
  - POST /auth/v1/token?grant_type=password
  - POST /auth/v1/token?grant_type=refresh_token
  - GET  /auth/v1/user
  - POST /auth/v1/logout
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pygarage._constants import AUTH_PREFIX
from pygarage._redact import redact_for_log
from pygarage._transport import Transport
from pygarage.exceptions import GarageApiError, GarageAuthenticationError
from pygarage.models.token import AuthToken

_logger = logging.getLogger(__name__)

TOKEN_ENDPOINT = f"{AUTH_PREFIX}/token"
USER_ENDPOINT = f"{AUTH_PREFIX}/user"
LOGOUT_ENDPOINT = f"{AUTH_PREFIX}/logout"


def _bearer(access_token: str) -> dict[str, str]:
    return {"authorization": f"Bearer {access_token}"}


def _as_auth_error(exc: GarageApiError) -> GarageAuthenticationError:
    return GarageAuthenticationError(
        exc.message,
        code=exc.code,
        endpoint=exc.endpoint,
        status_code=exc.status_code,
        details=exc.details,
        hint=exc.hint,
    )


def parse_token_response(response: Any, *, endpoint: str = TOKEN_ENDPOINT) -> AuthToken:
    """Parse a token grant.

    Raises
    ------
    GarageAuthenticationError
        If the grant is missing the access token or user id.
    """
    if not isinstance(response, dict):
        raise GarageAuthenticationError(
            "Token response is not an object",
            code="invalid_response",
            endpoint=endpoint,
        )
    try:
        token = AuthToken.model_validate(response)
    except ValidationError as exc:
        _logger.debug("Unparseable token response: %s", redact_for_log(response))
        raise GarageAuthenticationError(
            "Token response is missing required fields",
            code="invalid_response",
            endpoint=endpoint,
        ) from exc
    return token


async def _post_token(transport: Transport, grant_type: str, body: dict[str, str]) -> AuthToken:
    try:
        response = await transport.request(
            "POST",
            TOKEN_ENDPOINT,
            params={"grant_type": grant_type},
            json_body=body,
        )
    except GarageApiError as exc:
        raise _as_auth_error(exc) from exc
    return parse_token_response(response)


async def sign_in_with_password(transport: Transport, email: str, password: str) -> AuthToken:
    return await _post_token(transport, "password", {"email": email, "password": password})


async def refresh_grant(transport: Transport, refresh_token: str) -> AuthToken:
    return await _post_token(transport, "refresh_token", {"refresh_token": refresh_token})


async def fetch_user(transport: Transport, access_token: str) -> dict[str, Any]:
    """Return the user object that *access_token* belongs to."""
    try:
        response = await transport.request("GET", USER_ENDPOINT, headers=_bearer(access_token))
    except GarageApiError as exc:
        raise _as_auth_error(exc) from exc
    if not isinstance(response, dict) or not response.get("id"):
        raise GarageAuthenticationError(
            "User response has no id",
            code="invalid_response",
            endpoint=USER_ENDPOINT,
        )
    return response


async def sign_out(transport: Transport, access_token: str) -> None:
    try:
        await transport.request("POST", LOGOUT_ENDPOINT, headers=_bearer(access_token))
    except GarageApiError as exc:
        raise _as_auth_error(exc) from exc
