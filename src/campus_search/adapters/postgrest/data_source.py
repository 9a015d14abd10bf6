"""PostgREST adapter – PostgRESTDataSource.

Translates a boolean full-text expression and field constraints into a
PostgREST table query::

    GET /institutions?search_vector=fts.(cal | california) & tech
                     &state_code=in.(CA,NY)&limit=20&offset=0
    Prefer: count=exact
    Range: 0-19

The total row count comes back in ``Content-Range`` (``0-19/1234``).
"""
from __future__ import annotations

import time
from typing import Any, Sequence

from campus_search.adapters.http.client import HttpxHttpClient
from campus_search.application.search.ports import SourceConstraint, SourcePage
from campus_search.kernel.errors import ExternalServiceError
from campus_search.observability.logging import get_logger

__all__ = ["PostgRESTDataSource", "constraint_param", "parse_content_range"]

logger = get_logger(__name__)


def constraint_param(constraint: SourceConstraint) -> tuple[str, str]:
    """Render one constraint in PostgREST's ``op.value`` filter syntax."""
    match constraint.op:
        case "in":
            values = constraint.value
            if isinstance(values, str):
                values = (values,)
            return constraint.field, f"in.({','.join(str(v) for v in values)})"
        case "gte" | "lte" | "eq":
            return constraint.field, f"{constraint.op}.{constraint.value}"
        case _:
            raise ValueError(f"unsupported constraint operator: {constraint.op!r}")


def parse_content_range(header: str | None) -> int | None:
    """Total from ``0-19/1234`` or ``*/0``; ``None`` when absent or unknown."""
    if not header or "/" not in header:
        return None
    total = header.rsplit("/", 1)[1].strip()
    return int(total) if total.isdigit() else None


class PostgRESTDataSource:
    """DataSource backed by a PostgREST endpoint over httpx."""

    def __init__(
        self,
        base_url: str,
        table: str = "institutions",
        timeout: float = 30.0,
        *,
        client: HttpxHttpClient | None = None,
    ) -> None:
        self._table = table
        self._client = client or HttpxHttpClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            service="postgrest",
            headers={"Accept": "application/json"},
        )

    async def fetch(
        self,
        expression: str,
        constraints: Sequence[SourceConstraint],
        page: int,
        page_size: int,
    ) -> SourcePage:
        offset = (page - 1) * page_size
        params: list[tuple[str, str]] = []
        if expression:
            params.append(("search_vector", f"fts.{expression}"))
        params.extend(constraint_param(c) for c in constraints)
        params.extend([("limit", str(page_size)), ("offset", str(offset))])
        headers = {
            "Prefer": "count=exact",
            "Range-Unit": "items",
            "Range": f"{offset}-{offset + page_size - 1}",
        }

        t0 = time.monotonic()
        response = await self._client.get(
            f"/{self._table}", params=params, headers=headers, allow_status=(416,)
        )
        took_ms = int((time.monotonic() - t0) * 1000)
        if response.status_code == 416:
            # requested page lies past the last row
            total = parse_content_range(response.headers.get("content-range")) or 0
            return SourcePage(records=[], total=total, page=page, page_size=page_size, took_ms=took_ms)

        try:
            records = response.json()
        except ValueError as exc:
            raise ExternalServiceError("postgrest", "response body is not JSON") from exc
        if not isinstance(records, list):
            raise ExternalServiceError("postgrest", f"expected a JSON array, got {type(records).__name__}")

        total = parse_content_range(response.headers.get("content-range"))
        if total is None:
            total = len(records)
        logger.debug(
            "postgrest.fetched",
            table=self._table,
            rows=len(records),
            total=total,
            page=page,
            took_ms=took_ms,
        )
        return SourcePage(records=records, total=total, page=page, page_size=page_size, took_ms=took_ms)

    async def aclose(self) -> None:
        await self._client.aclose()
