"""Tests for header click state and the page load/refresh cycle."""

import pytest

from packages.leaderboard.errors import LoadError
from packages.leaderboard.models import LeaderboardDocument, LeaderboardEntry
from packages.renderer.controller import LeaderboardPage, TableController
from packages.renderer.table import COL_NAME, COL_POINTS, render


def board(*names_points: tuple[str, int]) -> LeaderboardDocument:
    return LeaderboardDocument(
        entries=[
            LeaderboardEntry(name=n, profile_url=f"https://example.org/{n}", points=p, rank=i)
            for i, (n, p) in enumerate(names_points, 1)
        ],
        generated_at="2024-05-01T12:00:00Z",
    )


class TestTableController:
    @pytest.fixture
    def controller(self) -> TableController:
        return TableController(render(board(("bob", 30), ("Alice", 20), ("carol", 10))))

    def test_first_click_ascends(self, controller: TableController) -> None:
        view = controller.click(COL_NAME)

        assert [r.name for r in view.rows] == ["Alice", "bob", "carol"]
        assert controller.header_state(COL_NAME) == "asc"

    def test_second_click_descends(self, controller: TableController) -> None:
        controller.click(COL_NAME)
        view = controller.click(COL_NAME)

        assert [r.name for r in view.rows] == ["carol", "bob", "Alice"]
        assert controller.header_state(COL_NAME) == "desc"

    def test_third_click_ascends_again(self, controller: TableController) -> None:
        for _ in range(3):
            controller.click(COL_NAME)

        assert controller.header_state(COL_NAME) == "asc"

    def test_other_column_resets_and_starts_ascending(self, controller: TableController) -> None:
        controller.click(COL_NAME)
        controller.click(COL_NAME)
        view = controller.click(COL_POINTS)

        assert view.headers == ("unsorted", "unsorted", "asc", "unsorted")
        assert [r.points for r in view.rows] == ["10", "20", "30"]

    def test_controllers_are_independent(self, controller: TableController) -> None:
        other = TableController(controller.view)

        controller.click(COL_NAME)

        assert other.header_state(COL_NAME) == "unsorted"


class TestLeaderboardPage:
    @pytest.mark.asyncio
    async def test_load_success(self) -> None:
        async def loader():
            return board(("a", 2), ("b", 1))

        page = LeaderboardPage(loader)
        assert page.status == "idle"

        assert await page.load() is True
        assert page.status == "success"
        assert [r.name for r in page.view.rows] == ["a", "b"]
        assert page.document.generated_at == "2024-05-01T12:00:00Z"

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_previous_table(self) -> None:
        calls = []

        async def loader():
            calls.append(1)
            if len(calls) > 1:
                raise LoadError("board.json", "disk on fire")
            return board(("a", 2))

        page = LeaderboardPage(loader)
        await page.load()
        before = page.view

        assert await page.refresh() is False
        assert page.status == "error"
        assert "disk on fire" in page.message
        assert page.view is before

    @pytest.mark.asyncio
    async def test_refresh_recovers_after_error(self) -> None:
        outcomes = [RuntimeError("offline"), board(("z", 1))]

        async def loader():
            result = outcomes.pop(0)
            if isinstance(result, Exception):
                raise result
            return result

        page = LeaderboardPage(loader)
        assert await page.load() is False
        assert page.view.rows == ()

        assert await page.refresh() is True
        assert page.status == "success"
        assert [r.name for r in page.view.rows] == ["z"]

    @pytest.mark.asyncio
    async def test_reload_resets_sort(self) -> None:
        async def loader():
            return board(("a", 2), ("b", 1))

        page = LeaderboardPage(loader)
        await page.load()
        page.controller.click(COL_NAME)
        page.controller.click(COL_NAME)

        await page.refresh()

        assert [r.name for r in page.view.rows] == ["a", "b"]
        assert set(page.view.headers) == {"unsorted"}
