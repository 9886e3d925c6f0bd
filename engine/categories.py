"""Hand categories and the combination classifier for Landlord.

A *hand* is one or more chain elements of the same category. Each element is
a group of same-rank *primal* cards plus optional *kicker* cards of other
ranks. :func:`list_possible_hands` enumerates every hand a multiset of cards
can form, including chains such as straights or consecutive trios.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from functools import cached_property
from itertools import combinations, product
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .cards import CHAIN_SUCCESSOR, Card, Rank, auto_sort_key, card_label, card_score
from .logging_utils import get_logger

log = get_logger("engine.categories")


class KickerType(Enum):
    NONE = auto()
    SOLO = auto()
    PAIR = auto()
    DUAL_SOLO = auto()
    DUAL_PAIR = auto()


class HandCategory(Enum):
    """Closed set of hand categories.

    Each member carries ``(label, primal_count, kicker, min_chain_count)``.
    Categories without a minimum chain length never chain. ``ROCKET`` is never
    enumerated directly; it only appears when the two jokers form a pair.
    """

    SOLO = ("Solo", 1, KickerType.NONE, 5)
    PAIR = ("Pair", 2, KickerType.NONE, 3)
    TRIO = ("Trio", 3, KickerType.NONE, 2)
    TRIO_KICKER = ("Trio + Kicker", 3, KickerType.SOLO, 2)
    FULL_HOUSE = ("Full House", 3, KickerType.PAIR, 2)
    BOMB = ("Four of a Kind", 4, KickerType.NONE, None)
    BOMB_DUAL_SOLO = ("Four of a Kind + Two Kickers", 4, KickerType.DUAL_SOLO, None)
    BOMB_DUAL_PAIR = ("Four of a Kind + Two Pairs", 4, KickerType.DUAL_PAIR, None)
    ROCKET = ("Rocket", 2, KickerType.NONE, None)

    def __init__(self, label: str, primal_count: int, kicker: KickerType, min_chain_count: Optional[int]) -> None:
        self.label = label
        self.primal_count = primal_count
        self.kicker = kicker
        self.min_chain_count = min_chain_count

    @property
    def can_chain(self) -> bool:
        return self.min_chain_count is not None


ENUMERABLE_CATEGORIES: Tuple[HandCategory, ...] = tuple(
    category for category in HandCategory if category is not HandCategory.ROCKET
)

OVERRIDE_CATEGORIES = frozenset({HandCategory.BOMB, HandCategory.ROCKET})


@dataclass(frozen=True)
class ChainElement:
    primal: Tuple[Card, ...]
    kicker: Tuple[Card, ...] = ()

    @property
    def rank(self) -> Rank:
        return self.primal[0].rank

    @cached_property
    def kicker_ranks(self) -> frozenset[Rank]:
        return frozenset(card.rank for card in self.kicker)

    @property
    def cards(self) -> Tuple[Card, ...]:
        return self.primal + self.kicker


@dataclass(frozen=True)
class Hand:
    """A category plus a non-empty, rank-ascending chain of elements."""

    category: HandCategory
    chain: Tuple[ChainElement, ...]

    def __post_init__(self) -> None:
        if not self.chain:
            raise ValueError("A hand needs at least one chain element.")

    @property
    def cards(self) -> Tuple[Card, ...]:
        return tuple(card for element in self.chain for card in element.cards)

    @cached_property
    def card_set(self) -> frozenset[Card]:
        return frozenset(self.cards)

    @property
    def card_count(self) -> int:
        return sum(len(element.primal) + len(element.kicker) for element in self.chain)

    @property
    def length(self) -> int:
        return len(self.chain)

    @property
    def is_chain(self) -> bool:
        return len(self.chain) > 1

    @property
    def leading_card(self) -> Card:
        return self.chain[0].primal[0]

    @property
    def trailing_rank(self) -> Rank:
        return self.chain[-1].rank

    @cached_property
    def primal_ranks(self) -> frozenset[Rank]:
        return frozenset(element.rank for element in self.chain)

    @cached_property
    def kicker_ranks(self) -> frozenset[Rank]:
        ranks: set[Rank] = set()
        for element in self.chain:
            ranks.update(element.kicker_ranks)
        return frozenset(ranks)

    def extend(self, element: ChainElement) -> "Hand":
        return Hand(self.category, self.chain + (element,))

    @property
    def label(self) -> str:
        name = self.category.label
        if self.is_chain:
            name = f"{name} chain x{self.length}"
        parts = []
        for element in self.chain:
            text = " ".join(card_label(card) for card in element.primal)
            if element.kicker:
                text += " + " + " ".join(card_label(card) for card in element.kicker)
            parts.append(f"[{text}]")
        return f"{name}: {', '.join(parts)}"

    def __str__(self) -> str:
        return self.label


def group_by_rank(cards: Iterable[Card]) -> Dict[Rank, List[Card]]:
    """Group cards by rank, ranks and cards in ascending display order."""
    groups: Dict[Rank, List[Card]] = {}
    for card in sorted(cards, key=auto_sort_key):
        groups.setdefault(card.rank, []).append(card)
    return groups


def _kicker_choices(kicker: KickerType, primal_rank: Rank, groups: Dict[Rank, List[Card]]) -> List[Tuple[Card, ...]]:
    others = [(rank, group) for rank, group in groups.items() if rank is not primal_rank]

    if kicker is KickerType.NONE:
        return [()]

    if kicker is KickerType.SOLO:
        return [(card,) for _, group in others for card in group]

    if kicker is KickerType.PAIR:
        return [pair for _, group in others if len(group) >= 2 for pair in combinations(group, 2)]

    if kicker is KickerType.DUAL_SOLO:
        choices: List[Tuple[Card, ...]] = []
        for (_, group_a), (_, group_b) in combinations(others, 2):
            choices.extend(product(group_a, group_b))
        return choices

    if kicker is KickerType.DUAL_PAIR:
        pairs_by_rank = [list(combinations(group, 2)) for _, group in others if len(group) >= 2]
        choices = []
        for pairs_a, pairs_b in combinations(pairs_by_rank, 2):
            choices.extend(pair_a + pair_b for pair_a, pair_b in product(pairs_a, pairs_b))
        return choices

    raise ValueError(f"Unknown kicker type {kicker}")


def _plain_hands(category: HandCategory, groups: Dict[Rank, List[Card]]) -> List[Hand]:
    hands: List[Hand] = []
    for rank, group in groups.items():
        if len(group) < category.primal_count:
            continue
        for primal in combinations(group, category.primal_count):
            if category is HandCategory.PAIR and rank is Rank.JOKER:
                hands.append(Hand(HandCategory.ROCKET, (ChainElement(primal),)))
                continue
            for kicker in _kicker_choices(category.kicker, rank, groups):
                hands.append(Hand(category, (ChainElement(primal, kicker),)))
    return hands


def _conflicts(base: Hand, element: ChainElement) -> bool:
    """True when a rank would serve more than one role in the extended chain."""
    base_primal = base.primal_ranks
    base_kicker = base.kicker_ranks
    new_kicker = element.kicker_ranks
    return (
        element.rank in base_kicker
        or not new_kicker.isdisjoint(base_primal)
        or not new_kicker.isdisjoint(base_kicker)
    )


def _extend_chains(category: HandCategory, singles: Sequence[Hand]) -> List[Hand]:
    """Grow chains from plain hands, returning those long enough to play.

    ``arena`` only ever grows: each new chain is appended and is later used as
    the base for a longer chain, while right-hand extensions always come from
    the plain single-element hands.
    """
    assert category.min_chain_count is not None
    by_rank: Dict[Rank, List[Hand]] = {}
    for hand in singles:
        by_rank.setdefault(hand.trailing_rank, []).append(hand)

    arena: List[Hand] = list(singles)
    chains: List[Hand] = []
    index = 0
    while index < len(arena):
        base = arena[index]
        index += 1
        next_rank = CHAIN_SUCCESSOR.get(base.trailing_rank)
        if next_rank is None:
            continue
        for candidate in by_rank.get(next_rank, ()):
            element = candidate.chain[0]
            if category.kicker is not KickerType.NONE and _conflicts(base, element):
                continue
            extended = base.extend(element)
            arena.append(extended)
            if extended.length >= category.min_chain_count:
                chains.append(extended)
    return chains


def list_possible_hands(cards: Iterable[Card], category: Optional[HandCategory] = None) -> List[Hand]:
    """Return every hand that can be formed from ``cards``.

    When ``category`` is given only that category is enumerated (asking for
    ``ROCKET`` yields the joker pair if present). Plain hands, the rocket
    override and chains meeting the category's minimum length are all
    included. An empty list is a normal outcome.
    """
    groups = group_by_rank(cards)
    if category is HandCategory.ROCKET:
        return [hand for hand in _plain_hands(HandCategory.PAIR, groups) if hand.category is HandCategory.ROCKET]

    categories = ENUMERABLE_CATEGORIES if category is None else (category,)
    hands: List[Hand] = []
    for current in categories:
        plain = _plain_hands(current, groups)
        hands.extend(plain)
        if current.can_chain:
            singles = [hand for hand in plain if hand.category is current]
            hands.extend(_extend_chains(current, singles))
    log.debug("Enumerated %d hands from %d cards", len(hands), sum(len(g) for g in groups.values()))
    return hands


def classify_cards(cards: Sequence[Card]) -> List[Hand]:
    """Return every hand that uses exactly ``cards``."""
    wanted = frozenset(cards)
    if len(wanted) != len(cards):
        return []
    return [hand for hand in list_possible_hands(cards) if hand.card_count == len(wanted)]


def is_better_hand(candidate: Hand, to_beat: Optional[Hand]) -> bool:
    """Return True if ``candidate`` may be played on top of ``to_beat``."""
    if to_beat is None:
        return True
    if to_beat.category is HandCategory.ROCKET:
        return False
    if candidate.category is HandCategory.ROCKET:
        return True
    if candidate.category is HandCategory.BOMB and to_beat.category is not HandCategory.BOMB:
        return True
    if candidate.category is not to_beat.category or candidate.length != to_beat.length:
        return False
    return card_score(candidate.leading_card) > card_score(to_beat.leading_card)
