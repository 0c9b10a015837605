"""
List re-reads after a mutation.

A ListState holds the last-known-good rows of one list (the CPLs of an
organization) and re-lists through a loader. A failed load keeps the previous
rows and records the error for the caller to surface as a notice.

Usage:
    state = ListState(service.list_cpls)
    state.refresh()
    return CplListResponse(cpls=state.items, notice=state.last_error)
"""

from collections.abc import Callable, Sequence
from typing import Generic, TypeVar

from apps.core.exceptions import PersistenceError
from apps.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ListState(Generic[T]):
    """Last-known-good rows of a list view."""

    def __init__(self, loader: Callable[[], Sequence[T]], items: Sequence[T] = ()) -> None:
        self._loader = loader
        self._items: list[T] = list(items)
        self.last_error: str | None = None

    @property
    def items(self) -> list[T]:
        return list(self._items)

    def refresh(self) -> bool:
        """Re-list through the loader. Keeps the previous rows on failure."""
        try:
            items = self._loader()
        except PersistenceError as e:
            logger.warning("list_refresh_failed", error=str(e))
            self.last_error = str(e)
            return False
        self._items = list(items)
        self.last_error = None
        return True
