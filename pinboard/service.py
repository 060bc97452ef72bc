"""
Read-only access to the board datastore (Supabase / PostgREST REST API).

Publication rules are enforced server-side (row level security); this client
only issues equality filters and orderings. Blocking HTTP calls run in a
worker thread so the event loop keeps serving navigation.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

import requests

from .schema import Board, Card, Category

logger = logging.getLogger(__name__)

BOARD_LIST_COLUMNS = "id,title,slug,updated_at"
BOARD_COLUMNS = "id,title,slug,background_url,updated_at"
CATEGORY_COLUMNS = "id,board_id,title,order_index"
CARD_COLUMNS = "id,board_id,category_id,title,description,image_url,link_url,order_index"


class QueryError(Exception):
    """Raised when a datastore query fails (transport, status or payload)."""

    def __init__(self, table: str, message: str):
        super().__init__(f"{table}: {message}")
        self.table = table


class BoardSource:
    """
    Query contract consumed by the load controller.

    Every method may raise; callers treat a failure as an empty result.
    """

    async def list_boards(self) -> List[Board]:
        """Published boards, most recently updated first."""
        raise NotImplementedError

    async def find_board(self, slug: str) -> Optional[Board]:
        """The board with this slug, or None."""
        raise NotImplementedError

    async def list_categories(self, board_id: Any) -> List[Category]:
        """Categories of one board, ascending order_index."""
        raise NotImplementedError

    async def list_cards(self, board_id: Any) -> List[Card]:
        """Cards of one board, ascending order_index."""
        raise NotImplementedError


class RestBoardService(BoardSource):
    """BoardSource backed by the PostgREST endpoint under {url}/rest/v1."""

    def __init__(self, url: str, api_key: str = "", timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.base_url = url.rstrip("/") + "/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if api_key:
            self.session.headers.update({
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
            })

    def close(self) -> None:
        self.session.close()

    # ── HTTP ──

    def _get(self, table: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        """GET one table; returns the decoded row list or raises QueryError."""
        try:
            r = self.session.get(
                f"{self.base_url}/{table}",
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise QueryError(table, f"request failed: {e}") from e

        if not r.ok:
            raise QueryError(table, f"HTTP {r.status_code}: {r.text[:200]}")
        try:
            rows = r.json()
        except ValueError as e:
            raise QueryError(table, "response is not JSON") from e
        if not isinstance(rows, list):
            raise QueryError(table, f"expected a row list, got {type(rows).__name__}")
        logger.debug(f"GET {table} {params} -> {len(rows)} rows")
        return rows

    async def _fetch(self, table: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._get, table, params)

    # ── BoardSource ──

    async def list_boards(self) -> List[Board]:
        rows = await self._fetch("boards", {
            "select": BOARD_LIST_COLUMNS,
            "order": "updated_at.desc",
        })
        return [Board.from_dict(r) for r in rows]

    async def find_board(self, slug: str) -> Optional[Board]:
        # limit=2 so a duplicated slug is detected instead of silently picking one
        rows = await self._fetch("boards", {
            "select": BOARD_COLUMNS,
            "slug": f"eq.{slug}",
            "limit": "2",
        })
        if len(rows) > 1:
            raise QueryError("boards", f"slug {slug!r} matched {len(rows)} rows")
        return Board.from_dict(rows[0]) if rows else None

    async def list_categories(self, board_id: Any) -> List[Category]:
        rows = await self._fetch("categories", {
            "select": CATEGORY_COLUMNS,
            "board_id": f"eq.{board_id}",
            "order": "order_index.asc",
        })
        return [Category.from_dict(r) for r in rows]

    async def list_cards(self, board_id: Any) -> List[Card]:
        rows = await self._fetch("cards", {
            "select": CARD_COLUMNS,
            "board_id": f"eq.{board_id}",
            "order": "order_index.asc",
        })
        return [Card.from_dict(r) for r in rows]
