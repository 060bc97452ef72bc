"""
Plain-text presentation of a ViewState. No logic beyond layout.
"""
from typing import List, Optional

from .route import board_fragment
from .schema import ALL, Card
from .view import ViewState

LOADING = "Loading…"
NO_BOARDS = "No published boards found."
NOT_FOUND = "Board not found (or not published)."


def render(state: ViewState, backdrop: Optional[str] = None) -> str:
    lines = ["Boards", "Public view (published only)", ""]
    if backdrop:
        lines.append(f"[background: {backdrop}]")
    if state.route.is_board:
        lines.extend(_board(state))
    else:
        lines.extend(_home(state))
    return "\n".join(lines)


def _home(state: ViewState) -> List[str]:
    lines = []
    if state.query.strip():
        lines.append(f"Search: {state.query.strip()}")
    if state.loading:
        return lines + [LOADING]
    boards = state.filtered_boards
    if not boards:
        return lines + [NO_BOARDS]
    for b in boards:
        lines.append(f"  {b.title}")
        lines.append(f"    {b.slug}  →  {board_fragment(b.slug)}")
    return lines


def _board(state: ViewState) -> List[str]:
    lines = [f"← Back   [{state.route.slug}]", ""]
    if state.loading:
        return lines + [LOADING]
    if state.board is None:
        return lines + [NOT_FOUND]

    lines.append(state.board.title)
    if state.categories:
        tabs = [_tab("all", state.selected == ALL)]
        tabs += [_tab(f"{c.title} ({c.id})", state.selected == c.id) for c in state.categories]
        lines.append("Filter: " + " ".join(tabs))
    lines.append("")
    for card in state.filtered_cards:
        lines.extend(_card(card))
    return lines


def _tab(label: str, active: bool) -> str:
    return f"[{label}]" if active else label


def _card(card: Card) -> List[str]:
    lines = [f"  • {card.title}  (#{card.id})"]
    if card.image_url:
        lines.append(f"    image: {card.image_url}")
    if card.description:
        lines.append(f"    {card.description}")
    lines.append(f"    Open link ↗ {card.link_url}" if card.link_url else "    No link")
    return lines
