"""
In-memory view state shared by the loader and the UI.

Filtered lists are derived on every read; only the inputs are stored.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from .route import Route
from .schema import ALL, Board, Card, Category, CategoryFilter


@dataclass
class ViewState:
    """Everything the renderer needs for the current route."""

    route: Route = field(default_factory=Route.home)
    boards: List[Board] = field(default_factory=list)      # home view
    board: Optional[Board] = None                          # board view
    categories: List[Category] = field(default_factory=list)
    cards: List[Card] = field(default_factory=list)
    selected: CategoryFilter = ALL
    loading: bool = False
    not_found: bool = False
    query: str = ""

    # ── Local interaction (never triggers a load) ──

    def set_filter(self, category: CategoryFilter) -> None:
        self.selected = category

    def set_query(self, text: str) -> None:
        self.query = text or ""

    # ── Derived views ──

    @property
    def filtered_cards(self) -> List[Card]:
        if self.selected == ALL:
            return list(self.cards)
        return [c for c in self.cards if c.category_id == self.selected]

    @property
    def filtered_boards(self) -> List[Board]:
        """Boards whose "title slug" contains the trimmed, case-folded query."""
        needle = self.query.strip().lower()
        return [b for b in self.boards if needle in f"{b.title} {b.slug}".lower()]

    def category(self, category_id) -> Optional[Category]:
        for c in self.categories:
            if c.id == category_id:
                return c
        return None

    def card(self, card_id) -> Optional[Card]:
        for c in self.cards:
            if c.id == card_id:
                return c
        return None

    # ── Loader side ──

    def commit(self, result: "ViewState") -> None:
        """Publish a finished load. The category filter always resets."""
        self.route = result.route
        self.boards = list(result.boards)
        self.board = result.board
        self.categories = list(result.categories)
        self.cards = list(result.cards)
        self.not_found = result.not_found
        self.selected = ALL
        self.loading = False
