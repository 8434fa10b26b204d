"""
Score ledger.

Applies deltas to players and ranks them. Scores are not clamped: a
negative total is a real result.
"""

from __future__ import annotations

import logging

from ..state.schema import Player
from .errors import EmptyRoster
from .players import PlayerRegistry

logger = logging.getLogger(__name__)


class ScoreLedger:
    """Reads and writes scores on the players held by a PlayerRegistry."""

    def __init__(self, registry: PlayerRegistry):
        self._registry = registry

    def award(self, player_id: str, delta: int) -> int:
        """
        Add `delta` to a player's score and return the new total.

        Raises:
            UnknownPlayer: id is not on the roster
        """
        player = self._registry.get(player_id)
        player.score += delta
        logger.debug("%s %+d -> %d", player.name, delta, player.score)
        return player.score

    def standings(self) -> list[Player]:
        """
        Players by score, highest first.

        sorted() is stable and the roster is in join order, so equal scores
        keep join order: the earlier player ranks higher.
        """
        return sorted(self._registry.players, key=lambda p: -p.score)

    def winner(self) -> Player:
        """
        Top of the standings.

        With nobody scoring this is simply the first player to join.
        """
        standings = self.standings()
        if not standings:
            raise EmptyRoster("pick a winner")
        return standings[0]
