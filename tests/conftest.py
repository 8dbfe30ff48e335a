"""Shared fixtures for leaderboard tests."""

from typing import Optional

import pytest

from packages.leaderboard.models import LeaderboardDocument, LeaderboardEntry


class FakeFetcher:
    """Returns canned points per URL; URLs in `fail` raise, missing URLs give None."""

    def __init__(self, points: dict[str, Optional[int]], fail: tuple[str, ...] = ()) -> None:
        self.points = points
        self.fail = set(fail)
        self.calls: list[str] = []

    async def fetch(self, url: str) -> Optional[int]:
        self.calls.append(url)
        if url in self.fail:
            raise RuntimeError(f"boom: {url}")
        return self.points.get(url)


def make_doc(*rows: tuple[str, Optional[int]]) -> LeaderboardDocument:
    """Build a document from (name, points) pairs; URLs are derived from names."""
    return LeaderboardDocument(
        entries=[
            LeaderboardEntry(name=name, profile_url=f"https://example.org/{name}", points=points)
            for name, points in rows
        ]
    )


@pytest.fixture
def sample_doc() -> LeaderboardDocument:
    return make_doc(("bob", 1_500), ("alice", 2_600_000), ("carol", None), ("dave", 1_500))


@pytest.fixture
def doc_factory():
    return make_doc


@pytest.fixture
def fetcher_factory():
    return FakeFetcher
