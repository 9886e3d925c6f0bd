"""Bidding for the landlord seat."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Sequence, Set, Tuple

from .logging_utils import get_logger
from .player import Player

log = get_logger("engine.auction")

MAX_BID = 3


class AuctionError(ValueError):
    """Base class for auction related errors."""


class BidNotAllowed(AuctionError):
    """Raised when the bid amount is not currently legal."""


class AuctionPhase(Enum):
    BIDDING = auto()
    AWARDED = auto()
    NO_LANDLORD = auto()


@dataclass(eq=False)
class Auction:
    """Circular auction over a fixed turn order.

    Each bidder either raises the highest bid or passes for good. A bid of
    ``max_bid`` wins outright; when every other player has passed the
    remaining bidder takes the seat without being asked again.
    """

    turn_order: Sequence[Player]
    first_bidder: Player
    max_bid: int = MAX_BID
    phase: AuctionPhase = AuctionPhase.BIDDING
    current_bidder: Optional[Player] = field(init=False)
    highest_bid: int = 0
    highest_bidder: Optional[Player] = None
    passed: Set[Player] = field(default_factory=set)
    history: List[Tuple[Player, str, Optional[int]]] = field(default_factory=list)
    landlord: Optional[Player] = None

    def __post_init__(self) -> None:
        if self.first_bidder not in self.turn_order:
            raise AuctionError("First bidder must be seated.")
        self.current_bidder = self.first_bidder
        for player in self.turn_order:
            player.bid = None

    def legal_bids(self) -> List[int]:
        if self.phase is not AuctionPhase.BIDDING:
            return []
        return list(range(self.highest_bid + 1, self.max_bid + 1))

    def bid(self, player: Player, amount: int) -> None:
        self._ensure_active(player)
        if amount not in self.legal_bids():
            raise BidNotAllowed(f"Bid {amount} must be above {self.highest_bid} and at most {self.max_bid}.")

        player.bid = amount
        self.highest_bid = amount
        self.highest_bidder = player
        self.history.append((player, "bid", amount))
        log.debug("%s bids %d", player, amount)

        if amount >= self.max_bid or len(self.passed) == len(self.turn_order) - 1:
            self._award(player)
            return
        self._advance()

    def pass_bid(self, player: Player) -> None:
        self._ensure_active(player)

        player.bid = 0
        self.passed.add(player)
        self.history.append((player, "pass", None))
        log.debug("%s drops out", player)

        remaining = [p for p in self.turn_order if p not in self.passed]
        if not remaining:
            self.phase = AuctionPhase.NO_LANDLORD
            self.current_bidder = None
            return
        if len(remaining) == 1 and self.highest_bidder is not None:
            self._award(remaining[0])
            return
        self._advance()

    def _award(self, player: Player) -> None:
        self.phase = AuctionPhase.AWARDED
        self.landlord = player
        self.current_bidder = None

    def _advance(self) -> None:
        assert self.current_bidder is not None
        index = self.turn_order.index(self.current_bidder)
        for step in range(1, len(self.turn_order) + 1):
            candidate = self.turn_order[(index + step) % len(self.turn_order)]
            if candidate not in self.passed:
                self.current_bidder = candidate
                return
        raise AuctionError("No eligible bidder left.")

    def _ensure_active(self, player: Player) -> None:
        if self.phase is not AuctionPhase.BIDDING:
            raise AuctionError("Auction already complete.")
        if player is not self.current_bidder:
            raise AuctionError("Not this player's turn to act in the auction.")

    def is_complete(self) -> bool:
        return self.phase is not AuctionPhase.BIDDING

    def result(self) -> Tuple[Player, int]:
        if self.phase is not AuctionPhase.AWARDED:
            raise AuctionError("Auction did not produce a landlord.")
        assert self.landlord is not None
        return self.landlord, self.highest_bid
