"""Baseline greedy bot."""

from __future__ import annotations

from typing import Optional, Sequence

from engine.cards import Card, Rank, card_score
from engine.categories import OVERRIDE_CATEGORIES, Hand, HandCategory, group_by_rank
from engine.player import Player, Team
from engine.service import RoundService

from .base import BotStrategy


def hand_strength(cards: Sequence[Card]) -> int:
    """Rough count of control cards: jokers, twos, aces and bombs."""
    strength = 0
    for rank, group in group_by_rank(cards).items():
        if rank is Rank.JOKER:
            strength += 3 * len(group)
        elif rank is Rank.TWO:
            strength += 2 * len(group)
        elif rank is Rank.ACE:
            strength += len(group)
        if len(group) == 4:
            strength += 4
    return strength


def _shedding_key(hand: Hand) -> tuple[int, int]:
    return card_score(hand.leading_card), -hand.card_count


class GreedyBot(BotStrategy):
    """Sheds low hands first and saves bombs for opponents' plays."""

    name = "Greedy"

    def __init__(self, *, resign_below: Optional[int] = None) -> None:
        super().__init__()
        self.resign_below = resign_below

    def offer_bid(self, service: RoundService, player: Player, legal_bids: Sequence[int]) -> Optional[int]:
        strength = hand_strength(player.hand)
        target = min(strength // 4, max(legal_bids, default=0))
        if target <= 0 or target not in legal_bids:
            return None
        return target

    def choose_play(self, service: RoundService, player: Player, legal: Sequence[Hand]) -> Optional[Hand]:
        current = service.session.current_round
        assert current is not None and current.state is not None
        state = current.state

        ordinary = [hand for hand in legal if hand.category not in OVERRIDE_CATEGORIES]
        if state.to_beat is None:
            pool = ordinary or list(legal)
            return min(pool, key=_shedding_key) if pool else None

        holder = state.trick.last_player
        if holder is not None and holder.team is player.team and player.team is Team.PEASANT:
            return None

        if ordinary:
            return min(ordinary, key=_shedding_key)

        overrides = [hand for hand in legal if hand.category in OVERRIDE_CATEGORIES]
        if overrides and (holder is None or len(holder.hand) <= 5 or len(player.hand) <= 6):
            bombs = [hand for hand in overrides if hand.category is HandCategory.BOMB]
            return min(bombs, key=_shedding_key) if bombs else overrides[0]
        return None

    def keep_playing(self, service: RoundService, player: Player) -> bool:
        return self.resign_below is None or player.score >= self.resign_below
