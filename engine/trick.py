"""Trick representation and resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .categories import Hand, is_better_hand
from .player import Player


class TrickError(RuntimeError):
    """Raised when trick play breaks ordering constraints."""


@dataclass(eq=False)
class Trick:
    """The stream of plays since the table was last cleared.

    ``passes`` counts consecutive passes since the last play; the trick
    closes once every other player has passed.
    """

    seats: int = 3
    to_beat: Optional[Hand] = None
    last_player: Optional[Player] = None
    passes: int = 0

    def is_empty(self) -> bool:
        return self.to_beat is None

    def record_play(self, player: Player, hand: Hand) -> None:
        if not is_better_hand(hand, self.to_beat):
            raise TrickError(f"{hand.label} does not beat {self.to_beat.label if self.to_beat else 'nothing'}.")
        self.to_beat = hand
        self.last_player = player
        self.passes = 0

    def record_pass(self, player: Player) -> None:
        if self.is_empty():
            raise TrickError("The opening player of a trick must play.")
        if player is self.last_player:
            raise TrickError("The trick holder cannot pass on their own play.")
        self.passes += 1

    def is_closed(self) -> bool:
        return not self.is_empty() and self.passes >= self.seats - 1

    def winner(self) -> Player:
        if self.last_player is None:
            raise TrickError("Cannot determine winner on empty trick.")
        return self.last_player
