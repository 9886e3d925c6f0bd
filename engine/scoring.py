"""Round scoring helpers for Landlord."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from .player import Player

LANDLORD_MULTIPLIER = 2


class ScoringError(ValueError):
    """Raised when a round cannot be scored."""


@dataclass(frozen=True)
class RoundScoreResult:
    deltas: Tuple[int, ...]
    new_scores: Tuple[int, ...]
    landlord_won: bool
    final_bid: int


def score_round(
    *,
    landlord: Player,
    players: Sequence[Player],
    landlord_won: bool,
    multiplier: int = LANDLORD_MULTIPLIER,
) -> RoundScoreResult:
    """Settle the round and apply the deltas to each player's score.

    The landlord wins or loses ``multiplier`` times the final bid; each
    peasant loses or wins the final bid.
    """
    if landlord not in players:
        raise ScoringError("Landlord must be one of the scored players.")
    if not landlord.bid:
        raise ScoringError("Landlord has no bid to score.")

    final_bid = landlord.bid
    sign = 1 if landlord_won else -1
    deltas = []
    for player in players:
        if player is landlord:
            delta = sign * multiplier * final_bid
        else:
            delta = -sign * final_bid
        player.score += delta
        deltas.append(delta)

    return RoundScoreResult(
        deltas=tuple(deltas),
        new_scores=tuple(player.score for player in players),
        landlord_won=landlord_won,
        final_bid=final_bid,
    )
