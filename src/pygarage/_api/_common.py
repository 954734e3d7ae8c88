"""Shared helpers for table API endpoint modules.

This module centralizes the most repeated patterns:
- building table paths and filter expressions
- selecting, inserting and deleting rows
- normalizing list responses

It is internal to pygarage and may change at any time.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pygarage._constants import (
    POSTGREST_RESERVED_CHARS,
    REST_PREFIX,
    RETURN_MINIMAL,
    RETURN_REPRESENTATION,
)
from pygarage._transport import Transport


def table_path(table: str) -> str:
    return f"{REST_PREFIX}/{table}"


def quote_value(value: Any) -> str:
    """Quote a value for use inside a filter list when it needs it."""
    text = str(value)
    if text and not any(ch in POSTGREST_RESERVED_CHARS for ch in text):
        return text
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def eq(value: Any) -> str:
    """``column = value`` filter expression."""
    return f"eq.{value}"


def in_(values: Iterable[Any]) -> str:
    """``column IN (values)`` filter expression."""
    return "in.({})".format(",".join(quote_value(v) for v in values))


def _rows(result: Any) -> list[dict[str, Any]]:
    if result is None:
        return []
    if isinstance(result, dict):
        return [result]
    if not isinstance(result, list):
        return []
    return [row for row in result if isinstance(row, dict)]


async def select_rows(
    transport: Transport,
    table: str,
    *,
    columns: str = "*",
    filters: Mapping[str, str] | None = None,
) -> list[dict[str, Any]]:
    """``GET`` rows matching *filters*; ``null`` or no rows gives ``[]``."""
    params: dict[str, str] = {"select": columns}
    if filters:
        params.update(filters)
    result = await transport.request("GET", table_path(table), params=params)
    return _rows(result)


async def insert_rows(
    transport: Transport,
    table: str,
    rows: Sequence[Mapping[str, Any]],
    *,
    returning: bool = True,
) -> list[dict[str, Any]]:
    """``POST`` *rows*; returns the inserted rows when *returning* is set."""
    params = {"select": "*"} if returning else None
    headers = {"prefer": RETURN_REPRESENTATION if returning else RETURN_MINIMAL}
    result = await transport.request(
        "POST",
        table_path(table),
        params=params,
        json_body=[dict(row) for row in rows],
        headers=headers,
    )
    return _rows(result) if returning else []


async def delete_rows(
    transport: Transport,
    table: str,
    *,
    filters: Mapping[str, str],
) -> None:
    """``DELETE`` rows matching *filters*."""
    if not filters:
        raise ValueError("refusing to delete without a filter")
    await transport.request(
        "DELETE",
        table_path(table),
        params=dict(filters),
        headers={"prefer": RETURN_MINIMAL},
    )
