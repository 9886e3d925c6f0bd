"""Card-related data structures and ranking helpers for Landlord."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from functools import cmp_to_key
from typing import Mapping, Optional


class Suit(Enum):
    SPADES = auto()
    HEARTS = auto()
    CLUBS = auto()
    DIAMONDS = auto()

    def __str__(self) -> str:
        return self.name.lower()


class Color(Enum):
    BLACK = auto()
    RED = auto()

    def __str__(self) -> str:
        return self.name.lower()


class Rank(Enum):
    THREE = auto()
    FOUR = auto()
    FIVE = auto()
    SIX = auto()
    SEVEN = auto()
    EIGHT = auto()
    NINE = auto()
    TEN = auto()
    JACK = auto()
    QUEEN = auto()
    KING = auto()
    ACE = auto()
    TWO = auto()
    JOKER = auto()

    def __str__(self) -> str:
        return self.name.lower()


SUITED_RANKS: list[Rank] = [rank for rank in Rank if rank is not Rank.JOKER]

# Scores used to compare hands of the same category: 3..K keep their face
# value, then Ace, Two, black joker and red joker.
RANK_SCORE: dict[Rank, int] = {
    Rank.THREE: 3,
    Rank.FOUR: 4,
    Rank.FIVE: 5,
    Rank.SIX: 6,
    Rank.SEVEN: 7,
    Rank.EIGHT: 8,
    Rank.NINE: 9,
    Rank.TEN: 10,
    Rank.JACK: 11,
    Rank.QUEEN: 12,
    Rank.KING: 13,
    Rank.ACE: 14,
    Rank.TWO: 15,
}

JOKER_SCORE: dict[Color, int] = {
    Color.BLACK: 16,
    Color.RED: 17,
}

SUIT_ORDER: dict[Suit, int] = {suit: index for index, suit in enumerate(Suit)}

# Ranks that may follow each other inside a chain. Two and the jokers never
# chain, and nothing follows the Ace.
CHAIN_SUCCESSOR: dict[Rank, Rank] = {
    Rank.THREE: Rank.FOUR,
    Rank.FOUR: Rank.FIVE,
    Rank.FIVE: Rank.SIX,
    Rank.SIX: Rank.SEVEN,
    Rank.SEVEN: Rank.EIGHT,
    Rank.EIGHT: Rank.NINE,
    Rank.NINE: Rank.TEN,
    Rank.TEN: Rank.JACK,
    Rank.JACK: Rank.QUEEN,
    Rank.QUEEN: Rank.KING,
    Rank.KING: Rank.ACE,
}

RANK_SYMBOLS: dict[Rank, str] = {
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "10",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
    Rank.TWO: "2",
}

SUIT_SYMBOLS: dict[Suit, str] = {
    Suit.SPADES: "♠",
    Suit.HEARTS: "♥",
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
}


@dataclass(frozen=True)
class Card:
    """Immutable representation of a playing card.

    Jokers carry ``Rank.JOKER`` and a colour instead of a suit, so both jokers
    share a rank while remaining distinct cards.
    """

    rank: Rank
    suit: Optional[Suit] = None
    joker_color: Optional[Color] = None

    def __post_init__(self) -> None:
        if self.rank is Rank.JOKER:
            if self.joker_color is None or self.suit is not None:
                raise ValueError("Jokers need a colour and no suit.")
        elif self.suit is None or self.joker_color is not None:
            raise ValueError("Suited cards need a suit and no joker colour.")

    @property
    def is_joker(self) -> bool:
        return self.rank is Rank.JOKER

    @property
    def color(self) -> Color:
        if self.joker_color is not None:
            return self.joker_color
        return Color.RED if self.suit in (Suit.HEARTS, Suit.DIAMONDS) else Color.BLACK

    def __str__(self) -> str:
        return card_label(self)


def joker(color: Color) -> Card:
    return Card(Rank.JOKER, joker_color=color)


BLACK_JOKER = joker(Color.BLACK)
RED_JOKER = joker(Color.RED)


def card_score(card: Card) -> int:
    """Return the score used to decide which of two cards is stronger."""
    if card.joker_color is not None:
        return JOKER_SCORE[card.joker_color]
    return RANK_SCORE[card.rank]


def compare_cards(a: Card, b: Card) -> int:
    """Return the sign of ``score(a) - score(b)``."""
    diff = card_score(a) - card_score(b)
    return (diff > 0) - (diff < 0)


def auto_sort_compare(a: Card, b: Card) -> int:
    """Like :func:`compare_cards` but breaks ties by suit for display order."""
    value_compare = compare_cards(a, b)
    if value_compare != 0:
        return value_compare
    diff = _suit_index(a) - _suit_index(b)
    return (diff > 0) - (diff < 0)


auto_sort_key = cmp_to_key(auto_sort_compare)


def _suit_index(card: Card) -> int:
    if card.suit is None:
        return len(SUIT_ORDER)
    return SUIT_ORDER[card.suit]


def serialize_card(card: Card) -> dict[str, str]:
    if card.joker_color is not None:
        return {"rank": "joker", "color": card.joker_color.name.lower()}
    assert card.suit is not None
    return {"rank": card.rank.name.lower(), "suit": card.suit.name.lower()}


def deserialize_card(payload: Mapping[str, str]) -> Card:
    rank = Rank[payload["rank"].upper()]
    if rank is Rank.JOKER:
        return joker(Color[payload["color"].upper()])
    return Card(rank, Suit[payload["suit"].upper()])


def card_label(card: Card) -> str:
    if card.joker_color is not None:
        return f"{card.joker_color.name.title()} Joker"
    assert card.suit is not None
    return f"{RANK_SYMBOLS[card.rank]}{SUIT_SYMBOLS[card.suit]}"
