"""
Tests for list re-reads.
"""

from apps.core.exceptions import PersistenceError
from apps.core.listing import ListState


class TestListState:
    """Tests for ListState."""

    def test_refresh_replaces_items(self) -> None:
        state = ListState(lambda: ["a", "b"])

        assert state.refresh() is True
        assert state.items == ["a", "b"]
        assert state.last_error is None

    def test_failed_refresh_keeps_last_known_good_rows(self) -> None:
        results: list = [["a"], PersistenceError("down")]

        def loader():
            result = results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result

        state = ListState(loader)
        state.refresh()

        assert state.refresh() is False
        assert state.items == ["a"]
        assert state.last_error == "down"

    def test_successful_refresh_clears_error(self) -> None:
        results: list = [PersistenceError("down"), ["a"]]

        def loader():
            result = results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result

        state = ListState(loader, items=["seed"])

        assert state.refresh() is False
        assert state.items == ["seed"]
        assert state.refresh() is True
        assert state.last_error is None

    def test_items_returns_a_copy(self) -> None:
        state = ListState(lambda: ["a"])
        state.refresh()

        state.items.append("b")

        assert state.items == ["a"]
