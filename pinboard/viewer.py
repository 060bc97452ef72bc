"""
Navigation surface: the location fragment and the viewer session bound to it.

    Location.assign() → change callback → BoardViewer.navigate()
        → resolve() → LoadController.load_for_route() → commit → backdrop

All of it runs on one asyncio loop; location changes schedule a navigation
task instead of awaiting it inline.
"""
import asyncio
import logging
import webbrowser
from contextlib import ExitStack
from typing import Callable, List, Optional, Set

from .backdrop import Backdrop
from .loader import LoadController
from .route import HOME_FRAGMENT, Route, board_fragment, resolve
from .schema import Card, CategoryFilter
from .service import BoardSource
from .view import ViewState

logger = logging.getLogger(__name__)


class Location:
    """The current fragment, with change notification (like `hashchange`)."""

    def __init__(self, fragment: str = HOME_FRAGMENT):
        self._fragment = fragment or HOME_FRAGMENT
        self.subscribers: List[Callable[[str], None]] = []

    @property
    def fragment(self) -> str:
        return self._fragment

    def subscribe(self, callback: Callable[[str], None]) -> None:
        self.subscribers.append(callback)

    def assign(self, fragment: str) -> bool:
        """Set the fragment. Listeners only hear about actual changes."""
        fragment = fragment or HOME_FRAGMENT
        if fragment == self._fragment:
            return False
        self._fragment = fragment
        for callback in self.subscribers:
            try:
                callback(fragment)
            except Exception as e:
                logger.error(f"Error in location callback {callback!r}: {e}")
        return True


class BoardViewer:
    """One viewer session: routing, loading, filters, links and backdrop."""

    def __init__(
        self,
        source: BoardSource,
        location: Optional[Location] = None,
        backdrop: Optional[Backdrop] = None,
        opener: Optional[Callable[[str], object]] = None,
    ):
        self.location = location or Location()
        self.backdrop = backdrop or Backdrop()
        self.controller = LoadController(source)
        self.opener = opener or webbrowser.open_new_tab
        self._scope = ExitStack()
        self._tasks: Set[asyncio.Task] = set()

        self.controller.subscribe(self._on_commit)
        self.location.subscribe(self._on_location_change)

    def __enter__(self) -> "BoardViewer":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @property
    def state(self) -> ViewState:
        return self.controller.state

    @property
    def route(self) -> Route:
        return resolve(self.location.fragment)

    # ── Navigation ──

    def _on_location_change(self, fragment: str) -> None:
        logger.debug(f"Location changed: {fragment}")
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop yet: the next navigate() picks the fragment up
            logger.warning(f"No running event loop, deferring navigation to {fragment}")
            return
        task = loop.create_task(self.navigate(fragment))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def navigate(self, fragment: Optional[str] = None) -> ViewState:
        """Load the view for fragment (default: the current location)."""
        route = resolve(fragment if fragment is not None else self.location.fragment)
        # The previous view is torn down as soon as the route is left
        self._release_backdrop()
        if route.page != self.state.route.page:
            self.state.set_query("")
        return await self.controller.load_for_route(route)

    async def settle(self) -> None:
        """Wait for every scheduled navigation (including ones they schedule)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def open_board(self, slug: str) -> bool:
        return self.location.assign(board_fragment(slug))

    def go_home(self) -> bool:
        return self.location.assign(HOME_FRAGMENT)

    # ── Local interaction ──

    def set_filter(self, category: CategoryFilter) -> None:
        self.state.set_filter(category)

    def set_query(self, text: str) -> None:
        self.state.set_query(text)

    def select_card(self, card: Card) -> Optional[str]:
        """Open the card's link in a new browser tab. Cards without a link are inert."""
        if not card.link_url:
            return None
        logger.info(f"Opening {card.link_url}")
        self.opener(card.link_url)
        return card.link_url

    # ── Backdrop ──

    def _on_commit(self, state: ViewState) -> None:
        self._release_backdrop()
        if state.board is not None and state.board.background_url:
            self._scope.enter_context(self.backdrop.scoped(state.board.background_url))

    def _release_backdrop(self) -> None:
        self._scope.close()
        self._scope = ExitStack()

    def close(self) -> None:
        """Tear the session down; the backdrop is always restored."""
        self._release_backdrop()
