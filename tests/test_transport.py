from __future__ import annotations

import aiohttp
import pytest

from pygarage._transport import HttpTransport, decode_response
from pygarage.config import GarageConfig
from pygarage.exceptions import GarageApiError, GarageTransportError


def test_empty_success_body_decodes_to_none() -> None:
    assert decode_response(201, "", endpoint="/rest/v1/users_vehicles") is None
    assert decode_response(204, "  ", endpoint="/rest/v1/vehicles") is None


def test_success_json_is_returned() -> None:
    assert decode_response(200, '[{"vehicle_id": 3}]', endpoint="/rest/v1/users_vehicles") == [{"vehicle_id": 3}]


def test_table_error_body_maps_to_api_error() -> None:
    body = '{"code":"23505","details":"Key (vin)=(X) already exists.","hint":null,"message":"duplicate key"}'

    with pytest.raises(GarageApiError) as exc_info:
        decode_response(409, body, endpoint="/rest/v1/vehicles")

    exc = exc_info.value
    assert exc.message == "duplicate key"
    assert exc.code == "23505"
    assert exc.status_code == 409
    assert exc.details == "Key (vin)=(X) already exists."
    assert exc.endpoint == "/rest/v1/vehicles"


def test_auth_error_body_maps_to_api_error() -> None:
    with pytest.raises(GarageApiError, match="Invalid login credentials"):
        decode_response(
            400,
            '{"error":"invalid_grant","error_description":"Invalid login credentials"}',
            endpoint="/auth/v1/token",
        )


def test_invalid_success_json_is_transport_error() -> None:
    with pytest.raises(GarageTransportError, match="Invalid JSON"):
        decode_response(200, "<html>", endpoint="/rest/v1/vehicles")


def test_non_json_error_is_transport_error() -> None:
    with pytest.raises(GarageTransportError) as exc_info:
        decode_response(502, "Bad Gateway", endpoint="/rest/v1/vehicles")

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_headers_carry_key_bearer_and_profile() -> None:
    config = GarageConfig(url="https://garage.example.com/", anon_key="anon-key", schema="garage")
    async with aiohttp.ClientSession() as http:
        transport = HttpTransport(config, http)

        anon = transport._build_headers("/rest/v1/vehicles", "GET", None)
        assert anon["apikey"] == "anon-key"
        assert anon["authorization"] == "Bearer anon-key"
        assert anon["accept-profile"] == "garage"

        transport.set_access_token("user-token")
        write = transport._build_headers("/rest/v1/vehicles", "POST", {"prefer": "return=minimal"})
        assert write["authorization"] == "Bearer user-token"
        assert write["content-profile"] == "garage"
        assert write["prefer"] == "return=minimal"

        auth = transport._build_headers("/auth/v1/user", "GET", None)
        assert "accept-profile" not in auth

    assert config.base_url == "https://garage.example.com"
