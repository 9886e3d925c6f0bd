"""Deck creation utilities for Landlord."""

from __future__ import annotations

from typing import List

from .cards import BLACK_JOKER, RED_JOKER, SUITED_RANKS, Card, Suit

DECK_SIZE = 54


def build_deck() -> List[Card]:
    """Return the ordered 54-card deck: 52 suited cards plus both jokers."""
    cards = [Card(rank, suit) for suit in Suit for rank in SUITED_RANKS]
    cards.append(BLACK_JOKER)
    cards.append(RED_JOKER)
    return cards
