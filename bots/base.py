"""Common bot strategy interfaces."""

from __future__ import annotations

from typing import Dict, Optional, Sequence

from engine.categories import Hand
from engine.game import RoundPhase
from engine.player import Player
from engine.service import ActionKind, ActionSpec, RoundService


class BotStrategy:
    """Base class for bot policies.

    :meth:`choose_action` answers one prompt from the enabled action set.
    Subclasses normally override the higher level hooks instead: a bid, a
    whole hand to play, or the continue vote. The chosen hand is then picked
    card by card through the selection actions.
    """

    name: str = "BaseBot"

    def __init__(self) -> None:
        self._plans: Dict[str, Hand] = {}

    def offer_bid(self, service: RoundService, player: Player, legal_bids: Sequence[int]) -> Optional[int]:
        """Return a bid amount, or None to pass."""
        return None

    def choose_play(self, service: RoundService, player: Player, legal: Sequence[Hand]) -> Optional[Hand]:
        """Return the hand to play, or None to pass when passing is allowed."""
        return legal[0] if legal else None

    def keep_playing(self, service: RoundService, player: Player) -> bool:
        return True

    def choose_action(self, service: RoundService, player: Player, actions: Sequence[ActionSpec]) -> ActionSpec:
        if not actions:
            raise RuntimeError("No actions offered to bot.")
        current = service.session.current_round
        assert current is not None

        if current.phase is RoundPhase.AUCTION:
            legal_bids = [action.payload[0] for action in actions if action.kind is ActionKind.BID]
            amount = self.offer_bid(service, player, legal_bids)
            if amount is None:
                return ActionSpec(ActionKind.PASS)
            return ActionSpec(ActionKind.BID, (amount,))

        if current.phase is RoundPhase.VOTE:
            kind = ActionKind.CONTINUE if self.keep_playing(service, player) else ActionKind.RESIGN
            return ActionSpec(kind)

        return self._next_selection_step(service, player, actions)

    def _next_selection_step(self, service: RoundService, player: Player, actions: Sequence[ActionSpec]) -> ActionSpec:
        can_pass = ActionSpec(ActionKind.PASS) in actions
        plan = self._plans.get(player.name)
        if plan is None:
            legal = service.legal_hands(player)
            plan = self.choose_play(service, player, legal)
            if plan is None:
                if not can_pass:
                    raise RuntimeError(f"{self.name} must open the trick but chose no hand.")
                return ActionSpec(ActionKind.PASS)
            self._plans[player.name] = plan

        selected = service.selection(player)
        if any(card not in plan.card_set for card in selected):
            return ActionSpec(ActionKind.DESELECT_ALL)
        for card in plan.cards:
            if card not in selected:
                return ActionSpec(ActionKind.SELECT, (card,))

        del self._plans[player.name]
        return ActionSpec(ActionKind.PLAY)
