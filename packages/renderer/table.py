import re
from dataclasses import dataclass, field, replace
from typing import Literal, Optional, Tuple

from packages.leaderboard.models import LeaderboardDocument, LeaderboardEntry
from packages.leaderboard.ranker import NOT_BEHIND

HeaderState = Literal["unsorted", "asc", "desc"]

COLUMNS = ("No.", "User", "Energy Points", "Points Behind")
COL_RANK, COL_NAME, COL_POINTS, COL_BEHIND = range(4)

EXTERNAL_LINK_REL = "nofollow noreferrer noopener"
EXTERNAL_LINK_CLASS = "external text"

_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


@dataclass(frozen=True)
class TableRow:
    rank: str
    name: str
    points: str
    behind: str
    profile_url: Optional[str] = None

    @property
    def cells(self) -> Tuple[str, str, str, str]:
        return (self.rank, self.name, self.points, self.behind)


@dataclass(frozen=True)
class TableView:
    rows: Tuple[TableRow, ...] = ()
    headers: Tuple[HeaderState, ...] = field(default=("unsorted",) * len(COLUMNS))


def format_thousands(n: int) -> str:
    return f"{n:,}"


def _row(e: LeaderboardEntry) -> TableRow:
    if e.points_behind_raw is not None:
        behind = e.points_behind_raw
    elif e.points_behind is not None:
        behind = format_thousands(e.points_behind)
    else:
        behind = ""
    return TableRow(
        rank=str(e.rank) if e.rank is not None else "",
        name=e.name,
        points=format_thousands(e.points) if e.points is not None else "",
        behind=behind,
        profile_url=e.profile_url or None,
    )


def render(doc: LeaderboardDocument) -> TableView:
    """One row per entry, ordered by the stored rank rather than list order."""
    entries = sorted(doc.entries, key=lambda e: e.rank or 0)
    return TableView(rows=tuple(_row(e) for e in entries))


def leading_number(text: str) -> float:
    """Numeric prefix of `text`; text with no numeric prefix counts as 0."""
    m = _NUMBER_PREFIX.match(text)
    return float(m.group(0)) if m else 0.0


def behind_magnitude(text: str, parse_k_suffix: bool = False) -> float:
    if text == NOT_BEHIND:
        return 0.0
    if text.endswith("M"):
        return leading_number(text[:-1]) * 1_000_000
    if parse_k_suffix and text.endswith("K"):
        return leading_number(text[:-1]) * 1_000
    return leading_number(text)


def sort_value(row: TableRow, column: int, parse_k_suffix: bool = False):
    text = row.cells[column].strip()
    if column == COL_RANK:
        return leading_number(text)
    if column == COL_POINTS:
        return leading_number(text.replace(",", ""))
    if column == COL_BEHIND:
        return behind_magnitude(text, parse_k_suffix)
    return text.lower()


def sort_by_column(view: TableView, column: int, ascending: bool = True,
                   parse_k_suffix: bool = False) -> TableView:
    """Re-order rows by one column and mark that header. Ties keep their order."""
    if not 0 <= column < len(COLUMNS):
        raise IndexError(f"column {column} out of range")
    rows = sorted(view.rows, key=lambda r: sort_value(r, column, parse_k_suffix),
                  reverse=not ascending)
    headers = ["unsorted"] * len(COLUMNS)
    headers[column] = "asc" if ascending else "desc"
    return replace(view, rows=tuple(rows), headers=tuple(headers))
