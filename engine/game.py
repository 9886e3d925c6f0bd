"""High-level round and match orchestration for Landlord."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from random import Random
from typing import List, Optional, Sequence

from .auction import Auction, AuctionPhase
from .cards import Card, card_label
from .categories import Hand
from .events import EventKind, EventSink, GameEvent, LoggingSink
from .logging_utils import get_logger
from .player import Player, Team
from .rules_schema import RuleSet
from .scoring import RoundScoreResult, score_round
from .state import PlayState
from .table import Table

log = get_logger("engine.game")


class RoundPhase(Enum):
    AUCTION = auto()
    PLAY = auto()
    VOTE = auto()
    COMPLETE = auto()
    VOID = auto()
    RESIGNED = auto()


TERMINAL_PHASES = frozenset({RoundPhase.COMPLETE, RoundPhase.VOID, RoundPhase.RESIGNED})


@dataclass(eq=False)
class RoundEngine:
    """Manage a single round: deal, auction, play, scoring and the continue vote."""

    players: Sequence[Player]
    turn_order: Sequence[Player]
    table: Table
    rng: Random = field(default_factory=Random)
    rules: RuleSet = field(default_factory=RuleSet)
    sink: EventSink = field(default_factory=EventSink)

    phase: RoundPhase = field(init=False, default=RoundPhase.AUCTION)
    marker: Card = field(init=False)
    first_bidder: Player = field(init=False)
    auction: Auction = field(init=False)
    kitty: List[Card] = field(init=False, default_factory=list)
    landlord: Optional[Player] = field(init=False, default=None)
    winning_bid: Optional[int] = field(init=False, default=None)
    state: Optional[PlayState] = field(init=False, default=None)
    score_result: Optional[RoundScoreResult] = field(init=False, default=None)
    pending_voters: List[Player] = field(init=False, default_factory=list)
    resigned: Optional[Player] = field(init=False, default=None)

    def __post_init__(self) -> None:
        self._notify(EventKind.ROUND_START, "Round start!")
        self.table.clean_up(self.turn_order)
        deal = self.table.deal(self.turn_order, self.rng, hand_size=self.rules.hand_size)
        self.marker = deal.marker
        self.first_bidder = deal.first_bidder
        self._notify(
            EventKind.FIRST_BIDDER,
            f"The player that receives the {card_label(self.marker)} will bid first: {self.first_bidder}",
            self.first_bidder,
        )
        self.auction = Auction(turn_order=self.turn_order, first_bidder=self.first_bidder, max_bid=self.rules.max_bid)

    # Auction -----------------------------------------------------------

    def bid(self, player: Player, amount: int) -> None:
        self._ensure_phase(RoundPhase.AUCTION)
        self.auction.bid(player, amount)
        self._notify(EventKind.BID, f"{player} bids {amount}", player, amount=amount)
        self._after_auction_step()

    def pass_bid(self, player: Player) -> None:
        self._ensure_phase(RoundPhase.AUCTION)
        self.auction.pass_bid(player)
        self._notify(EventKind.PASS_BID, f"{player} drops out", player)
        self._after_auction_step()

    def _after_auction_step(self) -> None:
        if self.auction.phase is AuctionPhase.NO_LANDLORD:
            self.phase = RoundPhase.VOID
            self._notify(EventKind.NO_LANDLORD, "Nobody bid, the cards are dealt again")
            return
        if self.auction.phase is AuctionPhase.AWARDED:
            self._start_play()

    def _start_play(self) -> None:
        landlord, bid = self.auction.result()
        self.landlord = landlord
        self.winning_bid = bid
        landlord.bid = bid
        for player in self.turn_order:
            if player is landlord:
                player.team = Team.LANDLORD
            else:
                player.team = Team.PEASANT
                player.bid = None

        self.kitty = self.table.give_kitty(landlord)
        self._notify(EventKind.LANDLORD, f"{landlord} becomes the landlord!", landlord, bid=bid)
        self.state = PlayState(
            turn_order=self.turn_order,
            landlord=landlord,
            table=self.table,
            sink=self.sink,
            double_on_bomb=self.rules.double_on_bomb,
        )
        self.phase = RoundPhase.PLAY

    # Play --------------------------------------------------------------

    def play_hand(self, player: Player, hand: Hand) -> None:
        self._ensure_phase(RoundPhase.PLAY)
        assert self.state is not None
        self.state.play_hand(player, hand)
        self._after_play_step()

    def play_cards(self, player: Player, cards: Sequence[Card]) -> Hand:
        self._ensure_phase(RoundPhase.PLAY)
        assert self.state is not None
        hand = self.state.play_cards(player, cards)
        self._after_play_step()
        return hand

    def pass_turn(self, player: Player) -> None:
        self._ensure_phase(RoundPhase.PLAY)
        assert self.state is not None
        self.state.pass_turn(player)

    def _after_play_step(self) -> None:
        assert self.state is not None
        if not self.state.is_finished():
            return
        winner = self.state.winner
        assert winner is not None and self.landlord is not None
        landlord_won = winner is self.landlord
        side = "landlord" if landlord_won else "peasants"
        self._notify(EventKind.ROUND_WON, f"{winner} runs out of cards, the {side} win!", winner)

        self.score_result = score_round(
            landlord=self.landlord,
            players=self.players,
            landlord_won=landlord_won,
            multiplier=self.rules.landlord_multiplier,
        )
        self._notify(
            EventKind.SCORES,
            ", ".join(f"{player}: {player.score}" for player in self.players),
            scores=list(self.score_result.new_scores),
        )
        self.pending_voters = [player for player in self.turn_order if player.score < 0]
        self.phase = RoundPhase.VOTE
        self._finish_vote_if_done()

    # Continuation vote ---------------------------------------------------

    def vote(self, player: Player, keep_playing: bool) -> None:
        self._ensure_phase(RoundPhase.VOTE)
        if not self.pending_voters or player is not self.pending_voters[0]:
            raise RuntimeError(f"{player} is not due to vote.")
        self.pending_voters.pop(0)
        if not keep_playing:
            self.resigned = player
            self.table.clean_up(self.turn_order)
            self.phase = RoundPhase.RESIGNED
            self._notify(EventKind.RESIGNED, f"{player} resigns", player)
            return
        self._finish_vote_if_done()

    def _finish_vote_if_done(self) -> None:
        if not self.pending_voters:
            self.phase = RoundPhase.COMPLETE

    # Queries -----------------------------------------------------------

    @property
    def current_player(self) -> Optional[Player]:
        if self.phase is RoundPhase.AUCTION:
            return self.auction.current_bidder
        if self.phase is RoundPhase.PLAY:
            assert self.state is not None
            return self.state.current_player
        if self.phase is RoundPhase.VOTE:
            return self.pending_voters[0]
        return None

    def is_over(self) -> bool:
        return self.phase in TERMINAL_PHASES

    def _ensure_phase(self, expected: RoundPhase) -> None:
        if self.phase != expected:
            raise RuntimeError(f"Action not allowed in phase {self.phase}. Expected {expected}.")

    def _notify(self, kind: EventKind, message: str, player: Optional[Player] = None, **data) -> None:
        self.sink.notify(GameEvent(kind, message, player.name if player else None, data))


@dataclass(frozen=True)
class RoundRecord:
    phase: RoundPhase
    landlord: Optional[str]
    final_bid: Optional[int]
    landlord_won: Optional[bool]
    scores: tuple[int, ...]


@dataclass(eq=False)
class MatchSession:
    """Track players, turn order and scores across rounds."""

    player_names: Sequence[str] = ("North", "East", "West")
    seed: Optional[int] = None
    rules: RuleSet = field(default_factory=RuleSet)
    sink: EventSink = field(default_factory=LoggingSink)
    players: List[Player] = field(init=False)
    turn_order: List[Player] = field(init=False)
    table: Table = field(init=False, default_factory=Table)
    rng: Random = field(init=False)
    current_round: Optional[RoundEngine] = field(default=None, init=False)
    history: List[RoundRecord] = field(default_factory=list, init=False)
    resigned: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        if len(self.player_names) != self.rules.players:
            raise ValueError(f"Landlord needs exactly {self.rules.players} players.")
        self.rng = Random(self.seed)
        self.players = [Player(name) for name in self.player_names]
        self.turn_order = list(self.players)
        self.rng.shuffle(self.turn_order)
        log.debug("Turn order: %s", ", ".join(player.name for player in self.turn_order))

    def start_round(self) -> RoundEngine:
        if self.is_over():
            raise RuntimeError("The match is over.")
        if self.current_round is not None:
            raise RuntimeError("A round is already in progress.")
        self.current_round = RoundEngine(
            players=self.players,
            turn_order=self.turn_order,
            table=self.table,
            rng=self.rng,
            rules=self.rules,
            sink=self.sink,
        )
        return self.current_round

    def finish_round(self) -> RoundRecord:
        current = self.current_round
        if current is None:
            raise RuntimeError("No active round.")
        if not current.is_over():
            raise RuntimeError("Cannot finish a round before it is over.")

        result = current.score_result
        record = RoundRecord(
            phase=current.phase,
            landlord=current.landlord.name if current.landlord else None,
            final_bid=result.final_bid if result else None,
            landlord_won=result.landlord_won if result else None,
            scores=tuple(player.score for player in self.players),
        )
        self.history.append(record)
        self.current_round = None
        if current.phase is RoundPhase.RESIGNED:
            self.resigned = True
        if self.is_over():
            self.sink.notify(
                GameEvent(EventKind.GAME_OVER, "Game over!", data={"scores": list(self.final_scores())})
            )
        return record

    def completed_rounds(self) -> int:
        return sum(1 for record in self.history if record.phase is RoundPhase.COMPLETE)

    def is_over(self) -> bool:
        if self.resigned:
            return True
        return self.rules.max_rounds is not None and self.completed_rounds() >= self.rules.max_rounds

    def final_scores(self) -> tuple[int, ...]:
        return tuple(player.score for player in self.players)

    def player_named(self, name: str) -> Player:
        for player in self.players:
            if player.name == name:
                return player
        raise KeyError(name)
