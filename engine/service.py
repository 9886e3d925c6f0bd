"""Convenience service layer for UI and agents.

Every decision a player makes goes through :meth:`RoundService.enabled_actions`
and :meth:`RoundService.apply`. During play, cards are picked one at a time;
the enabled actions are recomputed from the partial selection so that only
cards belonging to some still-reachable hand can be selected.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple

from .cards import Card, card_label, serialize_card
from .categories import Hand
from .game import MatchSession, RoundEngine, RoundPhase, RoundRecord
from .player import Player
from .selection import SelectionQuery, filter_candidates


class ActionKind(Enum):
    BID = auto()
    PASS = auto()
    SELECT = auto()
    DESELECT = auto()
    DESELECT_ALL = auto()
    PLAY = auto()
    CONTINUE = auto()
    RESIGN = auto()


@dataclass(frozen=True)
class ActionSpec:
    kind: ActionKind
    payload: Tuple[object, ...] = ()

    @property
    def label(self) -> str:
        if self.kind is ActionKind.BID:
            return f"Bid {self.payload[0]}"
        if self.kind is ActionKind.SELECT:
            return f"Select {card_label(self.card)}"
        if self.kind is ActionKind.DESELECT:
            return f"Deselect {card_label(self.card)}"
        if self.kind is ActionKind.DESELECT_ALL:
            return "Deselect all"
        return self.kind.name.title()

    @property
    def card(self) -> Card:
        card = self.payload[0]
        assert isinstance(card, Card)
        return card


@dataclass
class RoundView:
    phase: str
    current_player: Optional[str]
    landlord: Optional[str]
    bids: Dict[str, Optional[int]]
    hand: list[dict]
    hand_labels: list[str]
    selected: list[dict]
    remaining_cards: Dict[str, int]
    to_beat: Optional[str]
    last_played: list[dict]
    kitty: list[dict]
    auction_history: list[dict]
    actions: list[str]


@dataclass
class SessionView:
    scores: Dict[str, int]
    turn_order: list[str]
    round: Optional[RoundView]
    match_over: bool


class RoundService:
    """Facade around MatchSession for UI consumers and bots."""

    def __init__(self, session: Optional[MatchSession] = None) -> None:
        self.session = session or MatchSession()
        self._selection: Dict[str, List[Card]] = {}
        self._hands_cache: Dict[str, Tuple[Tuple[object, ...], List[Hand]]] = {}

    # Session lifecycle -------------------------------------------------

    def start_round(self) -> RoundEngine:
        self._selection.clear()
        self._hands_cache.clear()
        return self.session.start_round()

    def finish_round(self) -> RoundRecord:
        return self.session.finish_round()

    def has_active_round(self) -> bool:
        return self.session.current_round is not None

    def player(self, name: str) -> Player:
        return self.session.player_named(name)

    # Queries -----------------------------------------------------------

    def selection(self, player: Player) -> List[Card]:
        return list(self._selection.get(player.name, []))

    def legal_hands(self, player: Player) -> List[Hand]:
        """Hands the player could play right now, cached until the table changes."""
        current = self._require_round()
        if current.phase is not RoundPhase.PLAY or current.current_player is not player:
            return []
        assert current.state is not None
        key = (id(current.state), len(current.state.history), len(player.hand))
        cached = self._hands_cache.get(player.name)
        if cached is None or cached[0] != key:
            cached = (key, current.state.legal_hands(player))
            self._hands_cache[player.name] = cached
        return cached[1]

    def query(self, player: Player) -> SelectionQuery:
        return filter_candidates(self.legal_hands(player), self.selection(player))

    def enabled_actions(self, player: Player) -> List[ActionSpec]:
        current = self.session.current_round
        if current is None or current.current_player is not player:
            return []

        if current.phase is RoundPhase.AUCTION:
            actions = [ActionSpec(ActionKind.BID, (amount,)) for amount in current.auction.legal_bids()]
            actions.append(ActionSpec(ActionKind.PASS))
            return actions

        if current.phase is RoundPhase.PLAY:
            assert current.state is not None
            selected = self.selection(player)
            query = self.query(player)
            actions = [ActionSpec(ActionKind.SELECT, (card,)) for card in query.selectable]
            actions.extend(ActionSpec(ActionKind.DESELECT, (card,)) for card in selected)
            if selected:
                actions.append(ActionSpec(ActionKind.DESELECT_ALL))
            if query.is_complete:
                actions.append(ActionSpec(ActionKind.PLAY))
            if current.state.can_pass(player):
                actions.append(ActionSpec(ActionKind.PASS))
            return actions

        if current.phase is RoundPhase.VOTE:
            return [ActionSpec(ActionKind.CONTINUE), ActionSpec(ActionKind.RESIGN)]

        return []

    # Actions -----------------------------------------------------------

    def apply(self, player: Player, action: ActionSpec) -> Optional[Hand]:
        """Carry out ``action`` for ``player``; returns the hand when one is played."""
        if action not in self.enabled_actions(player):
            raise ValueError(f"{action.label} is not available to {player}.")
        current = self._require_round()
        kind = action.kind

        if kind is ActionKind.BID:
            amount = action.payload[0]
            assert isinstance(amount, int)
            current.bid(player, amount)
        elif kind is ActionKind.PASS:
            self._selection.pop(player.name, None)
            if current.phase is RoundPhase.AUCTION:
                current.pass_bid(player)
            else:
                current.pass_turn(player)
        elif kind is ActionKind.SELECT:
            self._selection.setdefault(player.name, []).append(action.card)
        elif kind is ActionKind.DESELECT:
            self._selection[player.name].remove(action.card)
        elif kind is ActionKind.DESELECT_ALL:
            self._selection.pop(player.name, None)
        elif kind is ActionKind.PLAY:
            hand = self.query(player).best_match
            assert hand is not None
            self._selection.pop(player.name, None)
            current.play_hand(player, hand)
            return hand
        elif kind is ActionKind.CONTINUE:
            current.vote(player, keep_playing=True)
        elif kind is ActionKind.RESIGN:
            current.vote(player, keep_playing=False)
        return None

    def play_selection(self, player: Player, hand: Hand) -> None:
        """Select the cards of ``hand`` one by one, then play it."""
        if self.selection(player):
            self.apply(player, ActionSpec(ActionKind.DESELECT_ALL))
        for card in hand.cards:
            self.apply(player, ActionSpec(ActionKind.SELECT, (card,)))
        self.apply(player, ActionSpec(ActionKind.PLAY))

    # Views -------------------------------------------------------------

    def get_session_view(self, perspective: Optional[str] = None) -> SessionView:
        return SessionView(
            scores={player.name: player.score for player in self.session.players},
            turn_order=[player.name for player in self.session.turn_order],
            round=self.get_round_view(perspective) if self.has_active_round() else None,
            match_over=self.session.is_over(),
        )

    def get_round_view(self, perspective: Optional[str] = None) -> RoundView:
        current = self._require_round()
        viewer = self.player(perspective) if perspective else None
        visible = list(viewer.hand) if viewer else []
        selected = self.selection(viewer) if viewer else []
        to_beat = current.state.to_beat if current.state else None
        landlord = current.landlord
        kitty = current.kitty if landlord is not None else []

        return RoundView(
            phase=current.phase.name.lower(),
            current_player=current.current_player.name if current.current_player else None,
            landlord=landlord.name if landlord else None,
            bids={player.name: player.bid for player in self.session.turn_order},
            hand=[serialize_card(card) for card in visible],
            hand_labels=[card_label(card) for card in visible],
            selected=[serialize_card(card) for card in selected],
            remaining_cards={player.name: len(player.hand) for player in self.session.turn_order},
            to_beat=to_beat.label if to_beat else None,
            last_played=[serialize_card(card) for card in self.session.table.last_played],
            kitty=[serialize_card(card) for card in kitty],
            auction_history=[
                {"player": player.name, "action": action, "amount": amount}
                for player, action, amount in current.auction.history
            ],
            actions=[action.label for action in self.enabled_actions(viewer)] if viewer else [],
        )

    # Helpers -----------------------------------------------------------

    def _require_round(self) -> RoundEngine:
        if self.session.current_round is None:
            raise RuntimeError("No active round.")
        return self.session.current_round
