"""Player records that persist across rounds."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, List, Optional

from .cards import Card, auto_sort_key


class Team(Enum):
    NONE = auto()
    LANDLORD = auto()
    PEASANT = auto()


@dataclass(eq=False)
class Player:
    """A seat at the table.

    ``bid`` is ``None`` while unset, ``0`` after passing, otherwise the amount
    bid (doubled for the landlord each time a bomb or rocket is played).
    """

    name: str
    score: int = 0
    hand: List[Card] = field(default_factory=list)
    bid: Optional[int] = None
    team: Team = Team.NONE

    def take(self, cards: Iterable[Card]) -> None:
        self.hand.extend(cards)
        self.hand.sort(key=auto_sort_key)

    def remove(self, cards: Iterable[Card]) -> None:
        for card in cards:
            self.hand.remove(card)

    def release_hand(self) -> List[Card]:
        cards = list(self.hand)
        self.hand.clear()
        return cards

    def reset_for_round(self) -> None:
        self.bid = None
        self.team = Team.NONE

    def __repr__(self) -> str:
        return f"Player({self.name!r}, score={self.score})"

    def __str__(self) -> str:
        return self.name
