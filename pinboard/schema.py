"""
Board, category and card rows as the viewer sees them.

Rows arrive as JSON dicts from the datastore (snake_case columns) and are
never mutated once loaded.
"""
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

# Sentinel filter value meaning "every category"
ALL = "all"

CategoryFilter = Union[str, int]

# Postgres trims trailing zeros from fractional seconds
_FRACTION = re.compile(r"\.(\d+)")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware UTC datetime (None if absent/bad)."""
    if not value:
        return None
    if isinstance(value, datetime):
        ts = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        try:
            ts = datetime.fromisoformat(text)
        except ValueError:
            return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def _order(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class Board:
    """A published board, routed by its slug."""

    id: Any
    title: str = ""
    slug: str = ""
    background_url: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Board":
        return cls(
            id=data.get("id"),
            title=data.get("title") or "",
            slug=data.get("slug") or "",
            background_url=data.get("background_url") or None,
            updated_at=parse_timestamp(data.get("updated_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "background_url": self.background_url,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class Category:
    """A named grouping of cards inside one board."""

    id: Any
    board_id: Any = None
    title: str = ""
    order_index: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        return cls(
            id=data.get("id"),
            board_id=data.get("board_id"),
            title=data.get("title") or "",
            order_index=_order(data.get("order_index")),
        )


@dataclass(frozen=True)
class Card:
    """A single link/image card. category_id None means uncategorized."""

    id: Any
    board_id: Any = None
    category_id: Any = None
    title: str = ""
    description: Optional[str] = None
    image_url: Optional[str] = None
    link_url: Optional[str] = None
    order_index: int = 0

    @property
    def has_link(self) -> bool:
        return bool(self.link_url)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Card":
        return cls(
            id=data.get("id"),
            board_id=data.get("board_id"),
            category_id=data.get("category_id"),
            title=data.get("title") or "",
            description=data.get("description") or None,
            image_url=data.get("image_url") or None,
            link_url=data.get("link_url") or None,
            order_index=_order(data.get("order_index")),
        )
