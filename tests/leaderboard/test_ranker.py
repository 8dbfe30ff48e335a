"""Tests for ranking, deficits and the deficit abbreviation."""

import pytest

from packages.leaderboard.models import LeaderboardDocument
from packages.leaderboard.ranker import NOT_BEHIND, abbreviate_deficit, rank_entries


class TestAbbreviateDeficit:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            pytest.param(0, "0", id="zero"),
            pytest.param(999, "999", id="below_k"),
            pytest.param(1_000, "1.0K", id="k_boundary"),
            pytest.param(1_050, "1.1K", id="k_round_half_up"),
            pytest.param(999_999, "1000.0K", id="just_below_m"),
            pytest.param(1_000_000, "1.0M", id="m_boundary"),
            pytest.param(2_349_999, "2.3M", id="m_round_down"),
            pytest.param(2_350_000, "2.4M", id="m_round_half_up"),
            pytest.param(2_500_000, "2.5M", id="m_exact"),
        ],
    )
    def test_boundaries(self, value: int, expected: str) -> None:
        assert abbreviate_deficit(value) == expected


class TestRankEntries:
    def test_ranks_are_contiguous_and_one_leader(self, sample_doc: LeaderboardDocument) -> None:
        ranked = rank_entries(sample_doc.entries)

        assert [e.rank for e in ranked] == [1, 2, 3, 4]
        assert [e.points_behind for e in ranked].count(None) == 1
        assert ranked[0].points_behind_raw == NOT_BEHIND

    def test_orders_by_points_descending(self, sample_doc: LeaderboardDocument) -> None:
        ranked = rank_entries(sample_doc.entries)

        keys = [e.points or 0 for e in ranked]
        assert keys == sorted(keys, reverse=True)

    def test_ties_keep_previous_order(self, sample_doc: LeaderboardDocument) -> None:
        """bob precedes dave in the input and both have 1,500."""
        ranked = rank_entries(sample_doc.entries)

        assert [e.name for e in ranked] == ["alice", "bob", "dave", "carol"]

    def test_deficits(self, sample_doc: LeaderboardDocument) -> None:
        ranked = {e.name: e for e in rank_entries(sample_doc.entries)}

        assert ranked["bob"].points_behind == 2_600_000 - 1_500
        assert ranked["bob"].points_behind_raw == "2.6M"
        assert ranked["carol"].points_behind == 2_600_000
        assert ranked["carol"].points is None

    def test_missing_points_do_not_get_written(self, doc_factory) -> None:
        ranked = rank_entries(doc_factory(("a", None), ("b", None)).entries)

        assert [e.points for e in ranked] == [None, None]
        assert ranked[0].points_behind is None
        assert ranked[1].points_behind == 0
        assert ranked[1].points_behind_raw == "0"

    def test_empty(self) -> None:
        assert rank_entries([]) == []

    def test_single_entry(self, doc_factory) -> None:
        (only,) = rank_entries(doc_factory(("solo", 42)).entries)

        assert only.rank == 1
        assert only.points_behind is None
        assert only.points_behind_raw == NOT_BEHIND
