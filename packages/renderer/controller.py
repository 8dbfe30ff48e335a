from typing import Awaitable, Callable, Literal, Optional

import structlog

from packages.leaderboard.models import LeaderboardDocument
from .table import TableView, render, sort_by_column

log = structlog.get_logger()

Status = Literal["idle", "loading", "success", "error"]

STATUS_MESSAGES = {
    "loading": "Loading...",
    "success": "Loaded",
    "error": "Could not load leaderboard",
}


class TableController:
    """Owns one table's rows and header states; `click` drives re-sorting."""

    def __init__(self, view: Optional[TableView] = None, parse_k_suffix: bool = False):
        self.view = view or TableView()
        self.parse_k_suffix = parse_k_suffix

    def header_state(self, column: int) -> str:
        return self.view.headers[column]

    def click(self, column: int) -> TableView:
        # only an ascending header flips to descending; anything else starts ascending
        ascending = self.view.headers[column] != "asc"
        self.view = sort_by_column(self.view, column, ascending, self.parse_k_suffix)
        return self.view

    def show(self, view: TableView) -> None:
        self.view = view


class LeaderboardPage:
    """
    Loads the document, renders it and tracks a loading/success/error status.

    A failed load leaves the table exactly as it was.
    """

    def __init__(self, loader: Callable[[], Awaitable[LeaderboardDocument]],
                 controller: Optional[TableController] = None):
        self.loader = loader
        self.controller = controller or TableController()
        self.status: Status = "idle"
        self.message = ""
        self.document: Optional[LeaderboardDocument] = None

    def _set_status(self, status: Status, message: Optional[str] = None) -> None:
        self.status = status
        self.message = message if message is not None else STATUS_MESSAGES.get(status, "")

    async def load(self) -> bool:
        self._set_status("loading")
        try:
            doc = await self.loader()
        except Exception as e:
            log.warning("Could not load leaderboard", err=str(e))
            self._set_status("error", f"{STATUS_MESSAGES['error']}: {e}")
            return False
        self.document = doc
        self.controller.show(render(doc))
        self._set_status("success")
        return True

    async def refresh(self) -> bool:
        return await self.load()

    @property
    def view(self) -> TableView:
        return self.controller.view
