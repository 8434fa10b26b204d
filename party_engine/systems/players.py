"""
Player registry.

Holds the roster for one session: stable ids, palette colors, and the
add/remove validation rules. Every check runs before anything is
committed, so a rejected call leaves the roster exactly as it was.
"""

from __future__ import annotations

import logging
import random

from ..state.schema import AVATAR_PALETTE, Player
from .errors import (
    AtCapacity,
    BelowMinimum,
    BlankName,
    DuplicateName,
    EmptyRoster,
    UnknownPlayer,
)

logger = logging.getLogger(__name__)


class PlayerRegistry:
    """
    Roster of players in join order.

    Ids are `player_<n>` from a per-registry counter and are never reused,
    even after a removal.
    """

    def __init__(
        self,
        min_players: int = 2,
        max_players: int | None = None,
        rng: random.Random | None = None,
        palette: tuple[str, ...] = AVATAR_PALETTE,
    ):
        self.min_players = min_players
        self.max_players = max_players
        self._rng = rng or random.Random()
        self._palette = palette
        self._players: list[Player] = []
        self._created = 0

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, player_id: object) -> bool:
        return any(p.id == player_id for p in self._players)

    def __iter__(self):
        return iter(list(self._players))

    @property
    def players(self) -> list[Player]:
        """Roster in join order (a new list; the Player objects are live)."""
        return list(self._players)

    def get(self, player_id: str) -> Player:
        for player in self._players:
            if player.id == player_id:
                return player
        raise UnknownPlayer(player_id)

    # ─── Mutation ────────────────────────────────────────────────

    def validate_name(self, name: str) -> str:
        """Return the trimmed name, or raise if it can't be added."""
        cleaned = name.strip()
        if not cleaned:
            raise BlankName()
        if any(p.name == cleaned for p in self._players):
            raise DuplicateName(cleaned)
        if self.max_players is not None and len(self._players) >= self.max_players:
            raise AtCapacity(self.max_players)
        return cleaned

    def add(self, name: str) -> Player:
        """
        Add a player.

        Raises:
            BlankName: name is empty after trimming
            DuplicateName: exact (case-sensitive) match with an existing name
            AtCapacity: the roster is already at max_players
        """
        cleaned = self.validate_name(name)

        self._created += 1
        player = Player(
            id=f"player_{self._created}",
            name=cleaned,
            avatar_color=self._palette[(self._created - 1) % len(self._palette)],
            joined_order=self._created,
        )
        self._players.append(player)
        logger.debug("Added %s (%s)", player.name, player.id)
        return player

    def remove(self, player_id: str) -> Player:
        """
        Remove a player by id.

        Raises:
            UnknownPlayer: id is not on the roster
            BelowMinimum: removal would leave fewer than min_players
        """
        player = self.get(player_id)
        if len(self._players) - 1 < self.min_players:
            raise BelowMinimum(self.min_players)

        self._players.remove(player)
        logger.debug("Removed %s (%s)", player.name, player.id)
        return player

    def reset_scores(self) -> None:
        """Zero every score. Identity and color stay."""
        for player in self._players:
            player.score = 0

    # ─── Selection ───────────────────────────────────────────────

    def random_excluding(self, exclude_id: str | None = None) -> Player:
        """
        Uniform pick over everyone except `exclude_id`.

        If excluding would leave nobody (a one-player roster), the pick is
        made over the full roster instead, so the game can always go on.

        Raises:
            EmptyRoster: there are no players at all
        """
        if not self._players:
            raise EmptyRoster()

        candidates = [p for p in self._players if p.id != exclude_id]
        if not candidates:
            logger.debug("Only %s can play, reselecting", exclude_id)
            candidates = self._players

        return self._rng.choice(candidates)
