"""
Ambient board background, modelled as a scoped resource.

A board view with a background image acquires the backdrop for as long as it
is active; leaving the view restores whatever was there before.
"""
import logging
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

logger = logging.getLogger(__name__)


class Backdrop:
    """Singleton-style holder of the current ambient background."""

    def __init__(self, initial: Optional[str] = None):
        self.current = initial
        self._saved: List[Optional[str]] = []
        self.subscribers: List[Callable[[Optional[str]], None]] = []

    def subscribe(self, callback: Callable[[Optional[str]], None]) -> None:
        self.subscribers.append(callback)

    def _set(self, ref: Optional[str]) -> None:
        if ref == self.current:
            return
        self.current = ref
        for callback in self.subscribers:
            try:
                callback(ref)
            except Exception as e:
                logger.error(f"Error in backdrop callback: {e}")

    def apply(self, ref: str) -> None:
        """Show ref, remembering the previous background for release()."""
        self._saved.append(self.current)
        self._set(ref)

    def release(self) -> None:
        """Restore the background held before the matching apply()."""
        if not self._saved:
            logger.warning("Backdrop release without a matching apply")
            return
        self._set(self._saved.pop())

    @property
    def held(self) -> int:
        """Number of outstanding apply() calls."""
        return len(self._saved)

    @contextmanager
    def scoped(self, ref: str) -> Iterator["Backdrop"]:
        self.apply(ref)
        try:
            yield self
        finally:
            self.release()
