"""Play-phase state management for Landlord."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .categories import OVERRIDE_CATEGORIES, Hand, HandCategory, classify_cards, is_better_hand, list_possible_hands
from .cards import Card
from .events import EventKind, EventSink, GameEvent
from .logging_utils import get_logger
from .player import Player
from .table import Table
from .trick import Trick, TrickError

log = get_logger("engine.state")


class InvalidPlay(RuntimeError):
    """Raised when an illegal play or pass is attempted."""


@dataclass(eq=False)
class PlayState:
    """Trick-by-trick play until somebody empties their hand.

    The landlord leads the first trick. Players who cannot possibly beat the
    hand on the table are passed automatically.
    """

    turn_order: Sequence[Player]
    landlord: Player
    table: Table
    sink: EventSink = field(default_factory=EventSink)
    double_on_bomb: bool = True
    current_player: Player = field(init=False)
    trick: Trick = field(init=False)
    history: List[Tuple[Player, Optional[Hand]]] = field(default_factory=list)
    winner: Optional[Player] = None
    doublings: int = 0

    def __post_init__(self) -> None:
        if self.landlord not in self.turn_order:
            raise ValueError("Landlord must be seated.")
        self.current_player = self.landlord
        self.trick = Trick(seats=len(self.turn_order))

    def next_player(self, player: Player) -> Player:
        index = self.turn_order.index(player)
        return self.turn_order[(index + 1) % len(self.turn_order)]

    def is_finished(self) -> bool:
        return self.winner is not None

    @property
    def to_beat(self) -> Optional[Hand]:
        return self.trick.to_beat

    def legal_hands(self, player: Player) -> List[Hand]:
        return [hand for hand in list_possible_hands(player.hand) if is_better_hand(hand, self.trick.to_beat)]

    def could_respond(self, player: Player) -> bool:
        """Cheap necessary condition for having any hand that beats the table."""
        to_beat = self.trick.to_beat
        if to_beat is None:
            return True
        if to_beat.category is HandCategory.ROCKET:
            return False
        count = len(player.hand)
        rocket_possible = count >= 2 and self.table.jokers_played() == 0
        bomb_possible = count >= 4
        follow_possible = count >= to_beat.card_count
        return rocket_possible or bomb_possible or follow_possible

    def can_pass(self, player: Player) -> bool:
        return player is self.current_player and not self.trick.is_empty()

    def play_hand(self, player: Player, hand: Hand) -> None:
        self._ensure_turn(player)
        if any(card not in player.hand for card in hand.cards):
            raise InvalidPlay("Hand uses cards the player does not hold.")
        try:
            self.trick.record_play(player, hand)
        except TrickError as exc:
            raise InvalidPlay(str(exc)) from exc

        player.remove(hand.cards)
        self.table.hold(hand.cards)
        self.history.append((player, hand))
        self._notify(EventKind.HAND_PLAYED, f"{player} plays {hand.label}", player, hand=hand)

        if hand.category in OVERRIDE_CATEGORIES and self.double_on_bomb:
            self.landlord.bid = (self.landlord.bid or 0) * 2
            self.doublings += 1
            self._notify(
                EventKind.BID_DOUBLED,
                f"{hand.category.label} played! {self.landlord}'s bid doubles to {self.landlord.bid}",
                self.landlord,
                bid=self.landlord.bid,
            )

        if not player.hand:
            self.winner = player
            log.debug("%s emptied their hand", player)
            return

        self.current_player = self.next_player(player)
        self._auto_pass()

    def play_cards(self, player: Player, cards: Sequence[Card]) -> Hand:
        """Interpret ``cards`` as a hand and play it."""
        options = [hand for hand in classify_cards(cards) if is_better_hand(hand, self.trick.to_beat)]
        if not options:
            raise InvalidPlay("Selected cards do not form a hand that beats the table.")
        self.play_hand(player, options[0])
        return options[0]

    def pass_turn(self, player: Player) -> None:
        self._ensure_turn(player)
        try:
            self._pass(player, automatic=False)
        except TrickError as exc:
            raise InvalidPlay(str(exc)) from exc
        self._auto_pass()

    def _pass(self, player: Player, *, automatic: bool) -> None:
        self.trick.record_pass(player)
        self.history.append((player, None))
        if automatic:
            self._notify(EventKind.AUTO_PASS, f"{player} cannot beat the table and passes", player)
        else:
            self._notify(EventKind.PASS, f"{player} passes", player)

        if self.trick.is_closed():
            winner = self.trick.winner()
            self.table.close_trick()
            self.trick = Trick(seats=len(self.turn_order))
            self.current_player = winner
            self._notify(EventKind.TRICK_WON, f"{winner} wins the trick", winner)
        else:
            self.current_player = self.next_player(player)

    def _auto_pass(self) -> None:
        while not self.is_finished() and not self.could_respond(self.current_player):
            self._pass(self.current_player, automatic=True)

    def _ensure_turn(self, player: Player) -> None:
        if self.is_finished():
            raise InvalidPlay("Play is already over.")
        if player is not self.current_player:
            raise InvalidPlay("Not this player's turn.")

    def _notify(self, kind: EventKind, message: str, player: Optional[Player] = None, **data) -> None:
        self.sink.notify(GameEvent(kind, message, player.name if player else None, data))

    def remaining_cards(self) -> Tuple[int, ...]:
        return tuple(len(player.hand) for player in self.turn_order)
