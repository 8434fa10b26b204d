"""Tests for the score ledger."""

import pytest

from party_engine.systems.errors import EmptyRoster, UnknownPlayer
from party_engine.systems.scoring import ScoreLedger


@pytest.fixture
def ledger(registry):
    for name in ("Alice", "Bob", "Carol"):
        registry.add(name)
    return ScoreLedger(registry)


class TestAward:
    """Test applying deltas."""

    def test_award_returns_total(self, ledger):
        """award() returns the new score."""
        assert ledger.award("player_1", 1) == 1
        assert ledger.award("player_1", 2) == 3

    def test_scores_can_go_negative(self, ledger):
        """No clamping at zero."""
        assert ledger.award("player_2", -1) == -1
        assert ledger.award("player_2", -1) == -2

    def test_unknown_player(self, ledger):
        """Awarding a stranger raises."""
        with pytest.raises(UnknownPlayer):
            ledger.award("player_42", 1)


class TestStandings:
    """Test ranking."""

    def test_highest_first(self, ledger):
        """Standings sort by score, descending."""
        ledger.award("player_3", 2)
        ledger.award("player_1", 1)
        assert [p.name for p in ledger.standings()] == ["Carol", "Alice", "Bob"]

    def test_ties_by_join_order(self, ledger):
        """Equal scores keep join order."""
        ledger.award("player_3", 1)
        ledger.award("player_2", 1)
        assert [p.name for p in ledger.standings()] == ["Bob", "Carol", "Alice"]

    def test_winner_with_no_scores(self, ledger):
        """Nobody scored: the first player to join wins."""
        assert ledger.winner().name == "Alice"

    def test_negative_ranks_last(self, ledger):
        """A negative score sits below zero scores."""
        ledger.award("player_1", -1)
        assert ledger.standings()[-1].name == "Alice"

    def test_winner_on_empty_roster(self, registry):
        """No players, no winner."""
        with pytest.raises(EmptyRoster):
            ScoreLedger(registry).winner()
