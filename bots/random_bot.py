"""Random baseline bot."""

from __future__ import annotations

import random
from typing import Optional, Sequence

from engine.categories import Hand
from engine.player import Player
from engine.service import RoundService

from .base import BotStrategy


class RandomBot(BotStrategy):
    name = "Random"

    def __init__(self, seed: Optional[int] = None, *, pass_rate: float = 0.3, resign_rate: float = 0.0) -> None:
        super().__init__()
        self._rng = random.Random(seed)
        self.pass_rate = pass_rate
        self.resign_rate = resign_rate

    def offer_bid(self, service: RoundService, player: Player, legal_bids: Sequence[int]) -> Optional[int]:
        if not legal_bids or self._rng.random() < 0.5:
            return None
        return self._rng.choice(list(legal_bids))

    def choose_play(self, service: RoundService, player: Player, legal: Sequence[Hand]) -> Optional[Hand]:
        state = service.session.current_round.state if service.session.current_round else None
        can_pass = state is not None and state.can_pass(player)
        if not legal or (can_pass and self._rng.random() < self.pass_rate):
            return None
        return self._rng.choice(list(legal))

    def keep_playing(self, service: RoundService, player: Player) -> bool:
        return self._rng.random() >= self.resign_rate
