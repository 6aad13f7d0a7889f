# backend/h2owise/core/store.py
"""
Data store access for the quiz service.

Handlers only see the narrow `DataStore` protocol (select / insert / delete);
`SupabaseStore` implements it on top of the Supabase PostgREST API.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

import httpx

from h2owise.config import Settings

logger = logging.getLogger("h2owise.store")

QUESTIONS_TABLE = "questions"
USER_SCORES_TABLE = "user_scores"

# Postgres "invalid_text_representation", e.g. id=eq.abc on an integer column
INVALID_TEXT_REPRESENTATION = "22P02"

Row = Dict[str, Any]


# ------------------------------------------------------------
# Errors
# ------------------------------------------------------------
class StoreError(Exception):
    """The store answered, but not with success."""

    status_code = 502
    public_message = "Data store request failed."

    def __init__(self, message: str, pg_code: Optional[str] = None):
        super().__init__(message)
        self.pg_code = pg_code


class StoreUnavailableError(StoreError):
    """The store could not be reached at all."""

    status_code = 503
    public_message = "Data store is unavailable."


def _pg_code(resp: httpx.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    return body.get("code") if isinstance(body, dict) else None


# ------------------------------------------------------------
# Interface
# ------------------------------------------------------------
class DataStore(Protocol):
    async def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[int] = None,
    ) -> List[Row]: ...

    async def insert(self, table: str, rows: Sequence[Row]) -> List[Row]: ...

    async def delete(self, table: str, filters: Mapping[str, Any]) -> None: ...


# ------------------------------------------------------------
# Supabase (PostgREST) implementation
# ------------------------------------------------------------
class SupabaseStore:
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._configured = settings.store_configured
        self._client = httpx.AsyncClient(
            base_url=f"{settings.supabase_url.rstrip('/')}/rest/v1",
            headers={
                "apikey": settings.supabase_key,
                "Authorization": f"Bearer {settings.supabase_key}",
            },
            timeout=settings.http_timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _eq_params(filters: Optional[Mapping[str, Any]]) -> Dict[str, str]:
        return {column: f"eq.{value}" for column, value in (filters or {}).items()}

    async def _request(self, method: str, table: str, **kwargs) -> httpx.Response:
        if not self._configured:
            raise StoreUnavailableError("SUPABASE_URL / SUPABASE_KEY are not configured.")
        try:
            resp = await self._client.request(method, f"/{table}", **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"{method} {table} failed: {e.response.status_code} {e.response.text[:300]}")
            raise StoreError(
                f"{method} {table} returned {e.response.status_code}",
                pg_code=_pg_code(e.response),
            ) from e
        except httpx.TransportError as e:
            logger.error(f"{method} {table} transport error: {e!r}")
            raise StoreUnavailableError(f"{method} {table} could not reach the store") from e
        return resp

    async def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[int] = None,
    ) -> List[Row]:
        params = {"select": "*", **self._eq_params(filters)}
        if order_by:
            params["order"] = f"{order_by}.{'asc' if ascending else 'desc'}"
        if limit is not None:
            params["limit"] = str(limit)

        resp = await self._request("GET", table, params=params)
        rows = resp.json()
        logger.debug(f"Selected {len(rows)} rows from {table}")
        return rows

    async def insert(self, table: str, rows: Sequence[Row]) -> List[Row]:
        resp = await self._request(
            "POST",
            table,
            json=list(rows),
            headers={"Prefer": "return=representation"},
        )
        inserted = resp.json() if resp.content else []
        logger.debug(f"Inserted {len(inserted)} rows into {table}")
        return inserted

    async def delete(self, table: str, filters: Mapping[str, Any]) -> None:
        # PostgREST refuses (or deletes everything) without a filter
        if not filters:
            raise ValueError("delete requires at least one filter")
        try:
            await self._request("DELETE", table, params=self._eq_params(filters))
        except StoreError as e:
            # a filter value the column cannot hold matches no row
            if e.pg_code != INVALID_TEXT_REPRESENTATION:
                raise
            logger.info(f"Nothing to delete from {table} where {dict(filters)}: {e}")
            return
        logger.debug(f"Deleted from {table} where {dict(filters)}")
