"""Candidate filtering for interactive card selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from .cards import Card, auto_sort_key
from .categories import Hand


@dataclass(frozen=True)
class SelectionQuery:
    candidates: Tuple[Hand, ...]
    selectable: Tuple[Card, ...]
    matches: Tuple[Hand, ...]

    @property
    def is_complete(self) -> bool:
        return bool(self.matches)

    @property
    def best_match(self) -> Optional[Hand]:
        return self.matches[0] if self.matches else None


def filter_candidates(hands: Iterable[Hand], selected: Sequence[Card]) -> SelectionQuery:
    """Narrow ``hands`` to those consistent with a partial selection.

    Returns the hands containing every selected card, the unselected cards
    that still belong to at least one of them, and the hands whose cards are
    exactly the selection.
    """
    chosen = frozenset(selected)
    candidates = tuple(hand for hand in hands if chosen <= hand.card_set)

    selectable: set[Card] = set()
    for hand in candidates:
        selectable.update(hand.card_set - chosen)

    matches = tuple(hand for hand in candidates if hand.card_set == chosen)
    return SelectionQuery(
        candidates=candidates,
        selectable=tuple(sorted(selectable, key=auto_sort_key)),
        matches=matches,
    )
