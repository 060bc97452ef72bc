"""
Route-driven loading with stale-result suppression.

Every load_for_route() call takes the next generation token. A finished load
is committed to the shared ViewState only while its token is still the latest
one issued; older loads run to completion and are dropped.

Sequences:
  Home:  boards (updated_at desc)
  Board: board by slug -> (categories || cards), both awaited before commit
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from .route import Route
from .schema import Board
from .service import BoardSource
from .view import ViewState

logger = logging.getLogger(__name__)

T = TypeVar("T")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class LoadController:
    """Runs the queries for a route and publishes one consistent ViewState."""

    def __init__(self, source: BoardSource, state: Optional[ViewState] = None):
        self.source = source
        self.state = state if state is not None else ViewState()
        self._generation = 0
        self.subscribers: List[Callable[[ViewState], None]] = []

    @property
    def generation(self) -> int:
        """Token of the most recently issued load."""
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def subscribe(self, callback: Callable[[ViewState], None]) -> None:
        """Register a callback invoked after every commit."""
        self.subscribers.append(callback)

    def _emit(self) -> None:
        for callback in self.subscribers:
            try:
                callback(self.state)
            except Exception as e:
                logger.error(f"Error in commit callback {callback!r}: {e}")

    async def load_for_route(self, route: Route) -> ViewState:
        """
        Load everything the route needs.

        Returns the shared state when this load committed, otherwise the
        discarded snapshot (the shared state is left untouched).
        """
        self._generation += 1
        token = self._generation
        self.state.route = route
        self.state.loading = True
        logger.debug(f"Load #{token} started for {route}")

        if route.is_board:
            result = await self._load_board(route)
        else:
            result = await self._load_home(route)

        if not self.is_current(token):
            logger.debug(
                f"Load #{token} for {route} superseded by #{self._generation}, discarded"
            )
            return result

        self.state.commit(result)
        logger.info(
            f"Load #{token} committed: {route.page.value}"
            + (f" {route.slug!r}" if route.slug else "")
            + (" (not found)" if result.not_found else "")
        )
        self._emit()
        return self.state

    # ── Sequences ──

    async def _load_home(self, route: Route) -> ViewState:
        boards = await self._query("boards", self.source.list_boards(), [])
        # Stable: equal timestamps keep arrival order
        boards = sorted(boards, key=lambda b: b.updated_at or _EPOCH, reverse=True)
        return ViewState(route=route, boards=boards)

    async def _load_board(self, route: Route) -> ViewState:
        # A failed lookup is indistinguishable from a missing board here
        board = await self._query(
            f"board {route.slug!r}", self.source.find_board(route.slug), None
        )
        if board is None:
            return ViewState(route=route, not_found=True)

        categories, cards = await asyncio.gather(
            self._query(f"categories of {board.slug!r}",
                        self.source.list_categories(board.id), []),
            self._query(f"cards of {board.slug!r}",
                        self.source.list_cards(board.id), []),
        )
        return ViewState(
            route=route,
            board=board,
            categories=_owned_by(board, categories),
            cards=_owned_by(board, cards),
        )

    async def _query(self, what: str, pending: Awaitable[T], empty: T) -> T:
        """Await one query; a failure is logged and becomes the empty result."""
        try:
            return await pending
        except Exception as e:
            logger.error(f"Query for {what} failed: {e}")
            return empty


def _owned_by(board: Board, rows: List[Any]) -> List[Any]:
    """Drop rows from other boards and sort by order_index (stable)."""
    kept = []
    for row in rows:
        if row.board_id is not None and row.board_id != board.id:
            logger.warning(
                f"Dropping {type(row).__name__.lower()} {row.id!r}: "
                f"belongs to board {row.board_id!r}, not {board.id!r}"
            )
            continue
        kept.append(row)
    return sorted(kept, key=lambda r: r.order_index)
