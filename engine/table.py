"""Shared piles owned by the round controller."""

from __future__ import annotations

from dataclasses import dataclass, field
from random import Random
from typing import Iterable, List, Optional, Sequence

from .cards import Card
from .deck import build_deck
from .player import Player


class TableError(RuntimeError):
    """Raised when the piles are used out of order."""


@dataclass
class DealResult:
    marker: Card
    first_bidder: Player


@dataclass
class Table:
    """Draw pile, discard pile and the holding area for the last played hand."""

    draw_pile: List[Card] = field(default_factory=build_deck)
    discard_pile: List[Card] = field(default_factory=list)
    last_played: List[Card] = field(default_factory=list)

    def clean_up(self, players: Iterable[Player]) -> None:
        self.discard_pile.extend(self.last_played)
        self.last_played.clear()
        for player in players:
            player.reset_for_round()
            self.discard_pile.extend(player.release_hand())

    def deal(self, turn_order: Sequence[Player], rng: Random, *, hand_size: int) -> DealResult:
        """Shuffle everything back together and deal ``hand_size`` cards to each player.

        Before dealing, the top card is turned face up; whoever receives it
        bids first. The cards left over form the kitty for the landlord.
        """
        self.draw_pile.extend(self.discard_pile)
        self.discard_pile.clear()
        if len(self.draw_pile) < hand_size * len(turn_order):
            raise TableError("Not enough cards to deal.")

        rng.shuffle(self.draw_pile)
        marker = self.draw_pile[-1]
        rng.shuffle(self.draw_pile)

        dealt: List[List[Card]] = [[] for _ in turn_order]
        for _ in range(hand_size):
            for seat in dealt:
                seat.append(self.draw_pile.pop())

        first_bidder: Optional[Player] = None
        for player, cards in zip(turn_order, dealt):
            player.take(cards)
            if marker in cards:
                first_bidder = player

        if first_bidder is None:
            first_bidder = turn_order[0]
        return DealResult(marker=marker, first_bidder=first_bidder)

    def give_kitty(self, player: Player) -> List[Card]:
        kitty = list(self.draw_pile)
        self.draw_pile.clear()
        player.take(kitty)
        return kitty

    def hold(self, cards: Sequence[Card]) -> None:
        self.discard_pile.extend(self.last_played)
        self.last_played = list(cards)

    def close_trick(self) -> None:
        self.discard_pile.extend(self.last_played)
        self.last_played.clear()

    def jokers_played(self) -> int:
        """Jokers already out of play (discarded or lying in the holding area)."""
        return sum(1 for card in self.discard_pile + self.last_played if card.is_joker)

    def card_count(self, players: Iterable[Player] = ()) -> int:
        """Cards on the table plus any held by ``players``."""
        held = sum(len(player.hand) for player in players)
        return len(self.draw_pile) + len(self.discard_pile) + len(self.last_played) + held
