from __future__ import annotations

import itertools
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from pygarage._transport import decode_response
from pygarage.config import GarageConfig


@dataclass
class RecordedCall:
    method: str
    path: str
    params: dict[str, str]
    body: Any
    headers: dict[str, str]


def _parse_in_list(expr: str) -> list[str]:
    assert expr.startswith("in.(") and expr.endswith(")"), expr
    inner = expr[len("in.(") : -1]
    return [item.strip('"') for item in inner.split(",")] if inner else []


@dataclass
class FakeGarageBackend:
    """In-memory stand-in for the hosted table and auth APIs."""

    vehicles: list[dict[str, Any]] = field(default_factory=list)
    links: list[dict[str, Any]] = field(default_factory=list)
    users: dict[str, str] = field(default_factory=lambda: {"driver@example.com": "user-42"})
    calls: list[RecordedCall] = field(default_factory=list)
    failures: dict[tuple[str, str], dict[str, Any]] = field(default_factory=dict)
    return_empty_insert: bool = False
    expires_in: int = 3600
    _ids: Any = field(default_factory=lambda: itertools.count(7))

    def fail(self, method: str, path: str, message: str, code: str = "42501") -> None:
        self.failures[(method, path)] = {"code": code, "message": message, "details": None, "hint": None}

    def calls_to(self, method: str, path: str) -> list[RecordedCall]:
        return [c for c in self.calls if c.method == method and c.path == path]

    def _error(self, method: str, path: str) -> None:
        body = self.failures.get((method, path))
        if body is not None:
            decode_response(400, json.dumps(body), endpoint=path)

    def _token(self, user_id: str, suffix: str = "1") -> dict[str, Any]:
        return {
            "access_token": f"access-{suffix}",
            "token_type": "bearer",
            "expires_in": self.expires_in,
            "refresh_token": f"refresh-{suffix}",
            "user": {"id": user_id, "email": "driver@example.com"},
        }

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        params = dict(params or {})
        self.calls.append(RecordedCall(method, path, params, json_body, dict(headers or {})))
        self._error(method, path)

        if path == "/auth/v1/token":
            if params.get("grant_type") == "password":
                user_id = self.users.get(json_body.get("email", ""))
                if user_id is None or json_body.get("password") != "secret":
                    decode_response(
                        400,
                        json.dumps({"error": "invalid_grant", "error_description": "Invalid login credentials"}),
                        endpoint=path,
                    )
                return self._token(user_id)
            if params.get("grant_type") == "refresh_token":
                return self._token("user-42", suffix="2")

        if path == "/auth/v1/user":
            return {"id": "user-42", "email": "driver@example.com"}

        if path == "/auth/v1/logout":
            return None

        if path == "/rest/v1/users_vehicles":
            if method == "GET":
                user_id = params["user_id"].removeprefix("eq.")
                return [{"vehicle_id": link["vehicle_id"]} for link in self.links if link["user_id"] == user_id]
            if method == "POST":
                self.links.extend(dict(row) for row in json_body)
                return None

        if path == "/rest/v1/vehicles":
            if method == "GET":
                wanted = set(_parse_in_list(params["id"]))
                return [dict(v) for v in self.vehicles if str(v["id"]) in wanted]
            if method == "POST":
                if self.return_empty_insert:
                    return []
                inserted = []
                for row in json_body:
                    record = {"id": next(self._ids), "image_uri": None, **row}
                    self.vehicles.append(record)
                    inserted.append(dict(record))
                return inserted
            if method == "DELETE":
                target = params["id"].removeprefix("eq.")
                self.vehicles = [v for v in self.vehicles if str(v["id"]) != target]
                return None

        raise AssertionError(f"Unexpected request in fake backend: {method} {path}")


@pytest.fixture
def config() -> GarageConfig:
    return GarageConfig(
        url="https://garage.example.com",
        anon_key="anon-key",
        email="driver@example.com",
        password="secret",
    )


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch) -> FakeGarageBackend:
    fake_backend = FakeGarageBackend()

    async def fake_request(_self: Any, method: str, path: str, **kwargs: Any) -> Any:
        return await fake_backend.request(method, path, **kwargs)

    monkeypatch.setattr("pygarage._transport.HttpTransport.request", fake_request)
    return fake_backend
