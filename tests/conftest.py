"""Shared fixtures for pinboard tests: an in-memory BoardSource with gates."""

import asyncio
import sys
from pathlib import Path

import pytest

# Ensure the package is importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

from pinboard.schema import Board, Card, Category
from pinboard.service import BoardSource, QueryError


class FakeSource(BoardSource):
    """
    BoardSource over plain lists.

    hold(method, arg) returns an asyncio.Event the matching call waits on,
    so tests decide the completion order. fail(method) makes a method raise.
    """

    def __init__(self, boards=(), categories=(), cards=()):
        self.boards = list(boards)
        self.categories = list(categories)
        self.cards = list(cards)
        self.calls = []
        self.gates = {}
        self.failures = set()
        self.started = {}

    def hold(self, method, arg=None):
        gate = asyncio.Event()
        self.gates[(method, arg)] = gate
        return gate

    def fail(self, method):
        self.failures.add(method)

    async def _enter(self, method, arg=None):
        self.calls.append((method, arg))
        self.started.setdefault((method, arg), 0)
        self.started[(method, arg)] += 1
        gate = self.gates.get((method, arg))
        if gate is not None:
            await gate.wait()
        if method in self.failures:
            raise QueryError(method, "service unavailable")

    async def list_boards(self):
        await self._enter("list_boards")
        return list(self.boards)

    async def find_board(self, slug):
        await self._enter("find_board", slug)
        matches = [b for b in self.boards if b.slug == slug]
        return matches[0] if matches else None

    async def list_categories(self, board_id):
        await self._enter("list_categories", board_id)
        return [c for c in self.categories if c.board_id == board_id]

    async def list_cards(self, board_id):
        await self._enter("list_cards", board_id)
        return [c for c in self.cards if c.board_id == board_id]


@pytest.fixture
def demo_source():
    """Board "demo" with two categories and three cards, plus board "plain"."""
    boards = [
        Board(id=1, title="Demo", slug="demo", background_url="img.png"),
        Board(id=2, title="Plain", slug="plain"),
    ]
    categories = [
        Category(id=1, board_id=1, title="A", order_index=0),
        Category(id=2, board_id=1, title="B", order_index=1),
    ]
    cards = [
        Card(id=10, board_id=1, category_id=1, title="Ten", order_index=0,
             link_url="https://example.com/10"),
        Card(id=11, board_id=1, category_id=2, title="Eleven", order_index=1),
        Card(id=12, board_id=1, category_id=None, title="Twelve", order_index=2),
        Card(id=20, board_id=2, title="Other board", order_index=0),
    ]
    return FakeSource(boards, categories, cards)


def run(coro):
    return asyncio.run(coro)
