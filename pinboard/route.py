"""
Fragment routing: `#/` is the board list, `#/b/<slug>` is one board.

Anything unrecognized falls back to the board list.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

HOME_FRAGMENT = "#/"
BOARD_SEGMENT = "b"


class RoutePage(Enum):
    """Views reachable through the fragment."""
    HOME = "home"
    BOARD = "board"


@dataclass(frozen=True)
class Route:
    page: RoutePage = RoutePage.HOME
    slug: Optional[str] = None

    @classmethod
    def home(cls) -> "Route":
        return cls(RoutePage.HOME)

    @classmethod
    def board(cls, slug: str) -> "Route":
        return cls(RoutePage.BOARD, slug)

    @property
    def is_board(self) -> bool:
        return self.page == RoutePage.BOARD


def resolve(fragment: Optional[str]) -> Route:
    """Map a location fragment to a Route. Never raises."""
    text = fragment or ""
    if text.startswith("#"):
        text = text[1:]
    parts = [p for p in text.split("/") if p]
    if len(parts) >= 2 and parts[0] == BOARD_SEGMENT:
        return Route.board(parts[1])
    return Route.home()


def board_fragment(slug: str) -> str:
    return f"#/{BOARD_SEGMENT}/{slug}"
