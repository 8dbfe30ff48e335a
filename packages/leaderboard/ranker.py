from decimal import Decimal, ROUND_HALF_UP
from .models import LeaderboardEntry

NOT_BEHIND = "N/A"

def _one_decimal(value: int, unit: int) -> str:
    q = (Decimal(value) / Decimal(unit)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{q:f}"

def abbreviate_deficit(value: int) -> str:
    """Short form of a point gap: 999 -> "999", 1000 -> "1.0K", 2_500_000 -> "2.5M"."""
    if value >= 1_000_000:
        return _one_decimal(value, 1_000_000) + "M"
    if value >= 1_000:
        return _one_decimal(value, 1_000) + "K"
    return str(value)

def sort_key(e: LeaderboardEntry) -> int:
    # missing readings order as 0 but are never written back as 0
    return e.points or 0

def rank_entries(entries: list[LeaderboardEntry]) -> list[LeaderboardEntry]:
    """Order by points descending, assign dense ranks and deficits.

    sorted() is stable, so equal scores keep their previous relative order.
    """
    ranked = sorted(entries, key=sort_key, reverse=True)
    top = sort_key(ranked[0]) if ranked else 0
    for i, e in enumerate(ranked, 1):
        e.rank = i
        if i == 1:
            e.points_behind = None
            e.points_behind_raw = NOT_BEHIND
        else:
            e.points_behind = top - sort_key(e)
            e.points_behind_raw = abbreviate_deficit(e.points_behind)
    return ranked
